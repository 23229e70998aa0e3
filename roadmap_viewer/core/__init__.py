"""Core algorithms for road network queries.

- GeoCalculator: Planar projection of lat/lon to kilometres
- PathFinder: A* shortest route search (import from path_finder module)
- ArticulationPointFinder: Cut vertex scan (import from connectivity module)
"""

from roadmap_viewer.core.geo_calculator import GeoCalculator

# PathFinder and ArticulationPointFinder have a circular import with model.location
# Import directly: from roadmap_viewer.core.path_finder import PathFinder

__all__ = [
    "GeoCalculator",
]
