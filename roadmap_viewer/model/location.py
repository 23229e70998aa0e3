"""Location - planar position of an intersection.

A Location is a point on the projected plane, in kilometres east (x)
and north (y) of the projection centre. It is the geometry used by the
path finder heuristic and by point location.
"""

from dataclasses import dataclass

import numpy as np

from roadmap_viewer.core.geo_calculator import GeoCalculator


@dataclass(frozen=True)
class Location:
    """A planar position in kilometres.

    Attributes:
        x: Kilometres east of the projection centre
        y: Kilometres north of the projection centre

    Example:
        loc = Location.from_lat_lon(lat=-36.85, lon=174.76)
        loc.distance_to(other=Location(x=0.0, y=0.0))
    """

    x: float
    y: float

    def __post_init__(self) -> None:
        """Validate data after initialization."""
        if not (np.isfinite(self.x) and np.isfinite(self.y)):
            raise ValueError(f"Location must be finite, got ({self.x}, {self.y})")

    @classmethod
    def from_lat_lon(cls, lat: float, lon: float) -> "Location":
        """Create Location by projecting geographic coordinates."""
        x, y = GeoCalculator.project(lat=lat, lon=lon)
        return cls(x=x, y=y)

    def distance_to(self, other: "Location") -> float:
        """Straight-line distance to another location in kilometres."""
        return GeoCalculator.planar_distance_km(x1=self.x, y1=self.y, x2=other.x, y2=other.y)

    def __repr__(self) -> str:
        return f"Location(x={self.x:.3f}, y={self.y:.3f})"
