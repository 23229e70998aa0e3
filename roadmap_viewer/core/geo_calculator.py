"""Planar projection and straight-line distance.

Road segment lengths in the data sets are kilometres, so the search
heuristic must measure in kilometres too. Geographic coordinates are
projected onto a plane around a fixed centre with an equirectangular
projection, which is accurate enough at city scale and keeps the
heuristic a true metric (Euclidean distance).
"""

from math import cos, hypot, radians

from roadmap_viewer.constants import GeoConfig


class GeoCalculator:
    """Static methods for projecting coordinates and measuring distances.

    Coordinates are in decimal degrees (WGS84).
    Planar positions and distances are in kilometres.
    """

    KM_PER_DEGREE_LAT = GeoConfig.KM_PER_DEGREE_LAT
    KM_PER_DEGREE_LON = GeoConfig.KM_PER_DEGREE_LAT * cos(radians(GeoConfig.CENTRE_LAT))

    @staticmethod
    def project(lat: float, lon: float) -> tuple[float, float]:
        """Project a geographic coordinate onto the plane.

        Args:
            lat: Latitude (decimal degrees)
            lon: Longitude (decimal degrees)

        Returns:
            Tuple (x, y) in kilometres east and north of the projection centre.
        """
        x = (lon - GeoConfig.CENTRE_LON) * GeoCalculator.KM_PER_DEGREE_LON
        y = (lat - GeoConfig.CENTRE_LAT) * GeoCalculator.KM_PER_DEGREE_LAT
        return x, y

    @staticmethod
    def planar_distance_km(x1: float, y1: float, x2: float, y2: float) -> float:
        """Euclidean distance between two planar positions in kilometres."""
        return hypot(x2 - x1, y2 - y1)
