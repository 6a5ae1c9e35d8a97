"""
Adsorption-site and surface-normal estimation on a parsed geometry.

The host structure (a fullerene cage) is written first and the probe
molecule is appended at the end of the atom list. The probe is recognized by
a fixed convention on the trailing atoms:

- last 2 atoms both H -> H2
- otherwise last 3 atoms are one C and two O (any order) -> CO2

Nothing checks that the trailing atoms are chemically separate from the
host; the convention is taken as given.
"""

from typing import Optional

import numpy as np
from scipy.spatial.distance import cdist

from src.orca.models import (
    ADSORBATE_CO2,
    ADSORBATE_GENERIC,
    ADSORBATE_H2,
    NO_ADSORBATE,
    AdsorbateSelection,
    Geometry,
    Normal,
)
from src.utils.logger import get_logger

logger = get_logger(__name__)

# Minimum cross-product norm for a usable plane
DEGENERACY_TOL = 1e-12
NORMAL_NEIGHBORS = 3
HOST_ELEMENT = "C"


def _symbol(element: str) -> str:
    return element.strip().capitalize()


def _positions(geometry: Geometry) -> np.ndarray:
    return np.array([atom.position for atom in geometry], dtype=float).reshape(-1, 3)


def detect_adsorbate(geometry: Geometry) -> AdsorbateSelection:
    """Classify the trailing atoms of ``geometry`` as H2, CO2 or nothing."""
    n = len(geometry)
    if n >= 2:
        tail = [_symbol(atom.element) for atom in geometry[-2:]]
        if tail == ["H", "H"]:
            return AdsorbateSelection(indices=(n - 2, n - 1), kind=ADSORBATE_H2)
    if n >= 3:
        tail = [_symbol(atom.element) for atom in geometry[-3:]]
        if tail.count("C") == 1 and tail.count("O") == 2:
            return AdsorbateSelection(indices=(n - 3, n - 2, n - 1), kind=ADSORBATE_CO2)
    return NO_ADSORBATE


def center_of(geometry: Geometry, selection: AdsorbateSelection) -> Optional[np.ndarray]:
    """
    Reference point of the adsorbate.

    CO2 uses the carbon position, H2 the midpoint of the two atoms, and any
    other selection the unweighted centroid of its atoms.
    """
    if selection.is_empty:
        return None
    selected = [geometry[i] for i in selection.indices]
    if selection.kind == ADSORBATE_CO2:
        for atom in selected:
            if _symbol(atom.element) == "C":
                return np.array(atom.position, dtype=float)
    return _positions(tuple(selected)).mean(axis=0)


def locate_site(geometry: Geometry, selection: AdsorbateSelection) -> Optional[int]:
    """Index of the host atom closest to the adsorbate center, or None."""
    center = center_of(geometry, selection)
    if center is None:
        return None
    host = geometry[:selection.first_index]
    if not host:
        return None
    distances = cdist(_positions(host), center.reshape(1, 3)).ravel()
    # argmin keeps the first index on ties
    return int(np.argmin(distances))


def estimate_normal(
    geometry: Geometry,
    selection: AdsorbateSelection,
    site_index: Optional[int],
) -> Optional[Normal]:
    """
    Outward unit normal of the plane through the three host carbons nearest
    the site atom.

    Returns None when there is no site, fewer than three candidate carbons,
    or the three carbons are (nearly) collinear.
    """
    if site_index is None or selection.is_empty:
        return None
    host = geometry[:selection.first_index]
    if site_index >= len(host):
        return None

    positions = _positions(host)
    site = positions[site_index]
    centroid = positions.mean(axis=0)

    candidates = [
        i for i, atom in enumerate(host)
        if i != site_index and _symbol(atom.element) == HOST_ELEMENT
    ]
    if len(candidates) < NORMAL_NEIGHBORS:
        logger.debug(f"Only {len(candidates)} host carbons around site {site_index}; no normal")
        return None

    candidate_positions = positions[candidates]
    distances = cdist(candidate_positions, site.reshape(1, 3)).ravel()
    order = np.argsort(distances, kind="stable")[:NORMAL_NEIGHBORS]
    p0, p1, p2 = candidate_positions[order]

    normal = np.cross(p1 - p0, p2 - p0)
    norm = np.linalg.norm(normal)
    if norm < DEGENERACY_TOL:
        return None
    normal = normal / norm

    if np.dot(normal, site - centroid) < 0:
        normal = -normal
    return Normal(x=float(normal[0]), y=float(normal[1]), z=float(normal[2]))
