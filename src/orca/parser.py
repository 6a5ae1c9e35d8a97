"""
ORCA output parser.

``parse_orca_output`` turns the full text of an ORCA log into an
``OrcaParseResult``. Every extraction step degrades on its own: a missing
marker leaves that field empty while the others are still filled in. The
function performs no I/O and does not raise on malformed input.
"""

import re

from src.geometry.adsorption import detect_adsorbate, estimate_normal, locate_site
from src.orca.blocks import extract_geometries, reduce_trajectory
from src.orca.models import OrcaParseResult
from src.orca.scalars import extract_energy, extract_field, extract_run_info
from src.utils.logger import get_logger

logger = get_logger(__name__)

# Only newlines separate lines; form feeds or U+2028 inside a row are kept
LINE_BREAK_RE = re.compile(r"\r?\n")


def parse_orca_output(text) -> OrcaParseResult:
    """
    Parse an ORCA output log.

    Args:
        text: Full log contents. Anything that is not a string is treated as
            an empty log.

    Returns:
        OrcaParseResult with trajectory, energy, field, adsorbate, site,
        normal and run markers.
    """
    if not isinstance(text, str) or not text:
        return OrcaParseResult()

    lines = LINE_BREAK_RE.split(text)

    geometries = reduce_trajectory(extract_geometries(lines))
    energy = extract_energy(lines)
    efield = extract_field(lines)
    run = extract_run_info(lines)

    initial = geometries[0] if geometries else ()
    selection = detect_adsorbate(initial)
    site_index = locate_site(initial, selection)
    normal = estimate_normal(initial, selection, site_index)

    logger.debug(
        f"Parsed {len(geometries)} frames, energy={energy}, "
        f"adsorbate={selection.kind}, site={site_index}"
    )

    return OrcaParseResult(
        geometries=geometries,
        energy=energy,
        efield=efield,
        adsorbate=selection,
        site_index=site_index,
        normal=normal,
        run=run,
    )
