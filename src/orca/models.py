"""
Data records produced by the ORCA output parser.

All records are frozen dataclasses built once per parse call. Each exposes
``to_dict()`` returning plain JSON-serializable values in the layout the
upload endpoint returns to clients.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Atom:
    """One row of a coordinate block (Angstrom)."""

    element: str
    x: float
    y: float
    z: float

    @property
    def position(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def to_dict(self) -> Dict[str, Any]:
        return {"element": self.element, "x": self.x, "y": self.y, "z": self.z}


# A geometry is one coordinate block; list position is the atom's identity.
Geometry = Tuple[Atom, ...]

EMPTY_GEOMETRY: Geometry = ()


def geometry_to_list(geometry: Geometry) -> List[Dict[str, Any]]:
    return [atom.to_dict() for atom in geometry]


@dataclass(frozen=True)
class FieldVector:
    """
    External electric field declared in the log.

    Attributes:
        ex, ey, ez: Field components (a.u. as printed by ORCA)
        mag: Stated magnitude, or the Euclidean norm of the components
    """

    ex: float
    ey: float
    ez: float
    mag: float

    def to_dict(self) -> Dict[str, float]:
        return {"ex": self.ex, "ey": self.ey, "ez": self.ez, "mag": self.mag}


ADSORBATE_H2 = "H2"
ADSORBATE_CO2 = "CO2"
ADSORBATE_GENERIC = "generic"


@dataclass(frozen=True)
class AdsorbateSelection:
    """
    Trailing atoms of the initial geometry that form the probe molecule.

    ``indices`` is contiguous and ends at the last atom. An empty selection
    (``kind`` None) means no adsorbate was recognized.
    """

    indices: Tuple[int, ...] = ()
    kind: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.indices

    @property
    def first_index(self) -> Optional[int]:
        return self.indices[0] if self.indices else None


NO_ADSORBATE = AdsorbateSelection()


@dataclass(frozen=True)
class Normal:
    """Unit surface normal at the site atom."""

    x: float
    y: float
    z: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "z": self.z}


@dataclass(frozen=True)
class RunInfo:
    """Run-level markers found in the log."""

    version: Optional[str] = None
    optimization_cycles: int = 0
    converged: bool = False
    stationary_point: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "optimizationCycles": self.optimization_cycles,
            "converged": self.converged,
            "stationaryPoint": self.stationary_point,
        }


@dataclass(frozen=True)
class OrcaParseResult:
    """
    Everything extracted from one ORCA log.

    Attributes:
        geometries: Deduplicated trajectory in file order
        energy: Final single point energy (Eh), or None
        efield: External field, or None
        adsorbate: Trailing adsorbate selection on the initial geometry
        site_index: Host atom nearest the adsorbate center, or None
        normal: Outward unit normal at the site atom, or None
        run: Version and optimisation markers
    """

    geometries: Tuple[Geometry, ...] = ()
    energy: Optional[float] = None
    efield: Optional[FieldVector] = None
    adsorbate: AdsorbateSelection = NO_ADSORBATE
    site_index: Optional[int] = None
    normal: Optional[Normal] = None
    run: RunInfo = field(default_factory=RunInfo)

    @property
    def initial_atoms(self) -> Geometry:
        return self.geometries[0] if self.geometries else EMPTY_GEOMETRY

    @property
    def final_atoms(self) -> Geometry:
        return self.geometries[-1] if self.geometries else EMPTY_GEOMETRY

    def to_dict(self) -> Dict[str, Any]:
        return {
            "geometries": [geometry_to_list(g) for g in self.geometries],
            "initialAtoms": geometry_to_list(self.initial_atoms),
            "atoms": geometry_to_list(self.final_atoms),
            "energy": self.energy,
            "efield": self.efield.to_dict() if self.efield else None,
            "siteIndex": self.site_index,
            "adsorbateIdx": list(self.adsorbate.indices),
            "adsorbateKind": self.adsorbate.kind,
            "normal0": self.normal.to_dict() if self.normal else None,
            "run": self.run.to_dict(),
        }
