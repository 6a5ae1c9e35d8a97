"""
Coordinate-block extraction and trajectory reduction for ORCA logs.

ORCA reprints the full Cartesian geometry at every optimisation cycle:

    ---------------------------------
    CARTESIAN COORDINATES (ANGSTROEM)
    ---------------------------------
      C      0.000000    1.420000    3.330000
      ...

Each block becomes one geometry. Consecutive identical emissions are
collapsed so the trajectory holds one frame per distinct structure.
"""

import math
from typing import Iterable, List, Optional, Sequence, Tuple

from src.orca.models import Atom, Geometry
from src.utils.logger import get_logger

logger = get_logger(__name__)

COORDINATE_MARKER = "CARTESIAN COORDINATES (ANGSTROEM)"

# Marker line, then the dashed underline, then atom rows.
ROWS_OFFSET = 2


def parse_atom_row(line: str) -> Optional[Atom]:
    """Return an Atom for a valid coordinate row, or None."""
    parts = line.split()
    if len(parts) < 4:
        return None
    try:
        x, y, z = float(parts[1]), float(parts[2]), float(parts[3])
    except ValueError:
        return None
    if not all(math.isfinite(v) for v in (x, y, z)):
        return None
    return Atom(parts[0], x, y, z)


def read_block(lines: Sequence[str], start: int) -> Geometry:
    """
    Read atom rows from ``start`` until the block ends.

    The block ends at a blank line, at a closing dashed separator, or at the
    first row that does not parse as ``element x y z``.
    """
    atoms: List[Atom] = []
    for line in lines[start:]:
        stripped = line.strip()
        if not stripped or stripped.startswith("-"):
            break
        atom = parse_atom_row(stripped)
        if atom is None:
            break
        atoms.append(atom)
    return tuple(atoms)


def extract_geometries(lines: Sequence[str]) -> List[Geometry]:
    """Every coordinate block in file order (possibly empty)."""
    geometries = []
    for i, line in enumerate(lines):
        if COORDINATE_MARKER in line:
            geometries.append(read_block(lines, i + ROWS_OFFSET))
    logger.debug(f"Found {len(geometries)} coordinate blocks")
    return geometries


def geometry_signature(geometry: Geometry) -> Tuple:
    """
    Cheap structural fingerprint: atom count plus first and last atom.

    Atoms in the middle are not part of the signature, so two frames that
    only differ there compare equal.
    """
    if not geometry:
        return (0,)

    def _atom_key(atom: Atom) -> Tuple[str, str, str, str]:
        return (atom.element, f"{atom.x:.6f}", f"{atom.y:.6f}", f"{atom.z:.6f}")

    return (len(geometry), _atom_key(geometry[0]), _atom_key(geometry[-1]))


def reduce_trajectory(geometries: Iterable[Geometry]) -> Tuple[Geometry, ...]:
    """Drop a geometry when it repeats the previously kept one."""
    kept: List[Geometry] = []
    last_signature = None
    for geometry in geometries:
        signature = geometry_signature(geometry)
        if kept and signature == last_signature:
            continue
        kept.append(geometry)
        last_signature = signature
    return tuple(kept)
