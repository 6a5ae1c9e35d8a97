"""
Scalar extractors for ORCA logs: final energy, external electric field and
run-level markers.

ORCA logs are append-only, so later values supersede earlier ones. Each
extractor is a single forward pass that keeps the last successful
observation, which is equivalent to scanning backwards for the first match.
"""

import math
import re
from typing import Callable, Optional, Sequence, TypeVar

from src.orca.models import FieldVector, RunInfo
from src.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

ENERGY_MARKER = "FINAL SINGLE POINT ENERGY"
CYCLE_MARKER = "GEOMETRY OPTIMIZATION CYCLE"
STATIONARY_MARKER = "FINAL ENERGY EVALUATION AT THE STATIONARY POINT"
CONVERGED_MARKERS = ("THE OPTIMIZATION HAS CONVERGED", "HURRAY")

NUMBER = r"[-+]?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][-+]?\d+)?"

# (a) "E FIELD", "E-FIELD", "EFIELD", "ELECTRIC FIELD" then three numbers
FIELD_VECTOR_RE = re.compile(
    r"(?:\bE[\s_-]?FIELD|\bELECTRIC\s+FIELD)(?!\s*GRADIENT)[^\d\n]*?"
    rf"({NUMBER})[\s,;]+({NUMBER})[\s,;]+({NUMBER})",
    re.IGNORECASE,
)

# (b) "Ex = ..., Ey = ..., Ez = ..." on one line
FIELD_COMPONENTS_RE = re.compile(
    rf"\bE_?X\b\s*[:=]?\s*({NUMBER}).*?"
    rf"\bE_?Y\b\s*[:=]?\s*({NUMBER}).*?"
    rf"\bE_?Z\b\s*[:=]?\s*({NUMBER})",
    re.IGNORECASE,
)

# (c) a header followed by one component per line
FIELD_HEADER_RE = re.compile(
    r"\b(?:ELECTRIC\s+FIELD|EXTERNAL\s+FIELD|E[\s_-]?FIELD|FIELD\s+STRENGTH)\b(?!\s*GRADIENT)",
    re.IGNORECASE,
)
FIELD_COMPONENT_LINE_RE = re.compile(
    rf"^\s*(?:E_?)?([XYZ])(?:\s*-?\s*COMPONENT)?\s*[:=]?\s*({NUMBER})",
    re.IGNORECASE,
)
FIELD_MAGNITUDE_RE = re.compile(
    rf"(?:MAGNITUDE|STRENGTH|NORM|\|E\|)\s*[:=]?\s*({NUMBER})",
    re.IGNORECASE,
)
FIELD_LOOKAHEAD = 8

VERSION_RE = re.compile(r"Program Version\s+(\S+)")


def _to_finite(token: str) -> Optional[float]:
    try:
        value = float(token)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def last_success(lines: Sequence[str], probe: Callable[[Sequence[str], int], Optional[T]]) -> Optional[T]:
    """Fold over line indices, keeping the last non-None probe result."""
    found = None
    for i in range(len(lines)):
        result = probe(lines, i)
        if result is not None:
            found = result
    return found


def extract_energy(lines: Sequence[str]) -> Optional[float]:
    """
    Final single point energy in Eh.

    Only the last marker line counts; if its trailing token is not a finite
    number the result is None even when earlier lines were valid.
    """
    last_line = None
    for line in lines:
        if ENERGY_MARKER in line:
            last_line = line
    if last_line is None:
        return None
    tokens = last_line.split()
    return _to_finite(tokens[-1]) if tokens else None


def _build_field(ex: float, ey: float, ez: float, mag: Optional[float] = None) -> FieldVector:
    if mag is None:
        mag = math.hypot(ex, ey, ez)
    return FieldVector(ex=ex, ey=ey, ez=ez, mag=mag)


def _trailing_magnitude(text: str) -> Optional[float]:
    match = FIELD_MAGNITUDE_RE.search(text)
    return _to_finite(match.group(1)) if match else None


def _match_components(match: re.Match) -> Optional[tuple]:
    values = [_to_finite(g) for g in match.groups()[:3]]
    if any(v is None for v in values):
        return None
    return tuple(values)


def _field_from_lookahead(lines: Sequence[str], header_index: int) -> Optional[FieldVector]:
    components = {}
    mag = _trailing_magnitude(lines[header_index])
    end = min(len(lines), header_index + 1 + FIELD_LOOKAHEAD)
    for line in lines[header_index + 1:end]:
        comp = FIELD_COMPONENT_LINE_RE.match(line)
        if comp:
            value = _to_finite(comp.group(2))
            if value is not None:
                components.setdefault(comp.group(1).lower(), value)
            continue
        if mag is None:
            mag = _trailing_magnitude(line)
    if len(components) < 3:
        return None
    return _build_field(components["x"], components["y"], components["z"], mag)


def field_at(lines: Sequence[str], i: int) -> Optional[FieldVector]:
    """Try the three field patterns on line ``i`` in priority order."""
    line = lines[i]

    match = FIELD_VECTOR_RE.search(line)
    if match:
        values = _match_components(match)
        if values:
            return _build_field(*values, _trailing_magnitude(line[match.end():]))

    match = FIELD_COMPONENTS_RE.search(line)
    if match:
        values = _match_components(match)
        if values:
            return _build_field(*values, _trailing_magnitude(line[match.end():]))

    if FIELD_HEADER_RE.search(line):
        return _field_from_lookahead(lines, i)

    return None


def extract_field(lines: Sequence[str]) -> Optional[FieldVector]:
    """External electric field; the last declaration in the log wins."""
    efield = last_success(lines, field_at)
    if efield is not None:
        logger.debug(f"External field: {efield}")
    return efield


def extract_run_info(lines: Sequence[str]) -> RunInfo:
    version = None
    cycles = 0
    converged = False
    stationary = False
    for line in lines:
        if version is None and "Program Version" in line:
            match = VERSION_RE.search(line)
            if match:
                version = match.group(1)
        upper = line.upper()
        if CYCLE_MARKER in upper:
            cycles += 1
        if STATIONARY_MARKER in upper:
            stationary = True
        if any(marker in upper for marker in CONVERGED_MARKERS):
            converged = True
    return RunInfo(
        version=version,
        optimization_cycles=cycles,
        converged=converged,
        stationary_point=stationary,
    )
