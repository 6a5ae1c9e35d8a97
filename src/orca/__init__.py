"""
ORCA output-log parsing.

Usage:
    from src.orca.parser import parse_orca_output

    result = parse_orca_output(log_text)
    payload = result.to_dict()

Only the result records are re-exported here; the geometry package depends
on them, and the parser in turn depends on the geometry package.
"""

from src.orca.models import AdsorbateSelection, Atom, FieldVector, Normal, OrcaParseResult, RunInfo

__all__ = [
    "AdsorbateSelection",
    "Atom",
    "FieldVector",
    "Normal",
    "OrcaParseResult",
    "RunInfo",
]
