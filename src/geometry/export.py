from pathlib import Path
from typing import Optional, Sequence

import ase
from ase.io import write

from src.orca.models import Geometry
from src.utils.logger import get_logger

logger = get_logger(__name__)


def geometry_to_atoms(geometry: Geometry, energy: Optional[float] = None) -> ase.Atoms:
    """Build a non-periodic ase.Atoms from a parsed geometry."""
    atoms = ase.Atoms(
        symbols=[atom.element for atom in geometry],
        positions=[atom.position for atom in geometry],
        pbc=False,
    )
    if energy is not None:
        atoms.info["energy_hartree"] = energy
    return atoms


def write_geometries(
    geometries: Sequence[Geometry],
    filename: str,
    fmt: str = "extxyz",
    final_energy: Optional[float] = None,
) -> str:
    """
    Write geometries as a multi-frame structure file.

    The final energy, when given, is stored in the info dict of the last
    frame only.
    """
    if not geometries:
        raise ValueError("No geometries to write.")

    frames = [geometry_to_atoms(g) for g in geometries[:-1]]
    frames.append(geometry_to_atoms(geometries[-1], energy=final_energy))

    path = Path(filename)
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        write(str(path), frames, format=fmt)
    except Exception as e:
        logger.error(f"Unable to write {len(frames)} frames to {path}: {e}")
        raise
    logger.info(f"Wrote {len(frames)} frames to {path}")
    return str(path)
