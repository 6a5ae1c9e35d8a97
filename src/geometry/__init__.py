"""
Geometric analysis of parsed ORCA structures.

Usage:
    from src.geometry import detect_adsorbate, locate_site, estimate_normal

    selection = detect_adsorbate(result.initial_atoms)
    site = locate_site(result.initial_atoms, selection)
    normal = estimate_normal(result.initial_atoms, selection, site)
"""

from src.geometry.adsorption import center_of, detect_adsorbate, estimate_normal, locate_site
from src.geometry.export import geometry_to_atoms, write_geometries

__all__ = [
    "center_of",
    "detect_adsorbate",
    "estimate_normal",
    "locate_site",
    "geometry_to_atoms",
    "write_geometries",
]
