from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional, Tuple


class ProjectionKind(str, Enum):
    PLATE_CARREE = "PlateCarree"
    TRANSVERSE_MERCATOR = "TransverseMercator"
    MERCATOR = "Mercator"
    LAMBERT_CONFORMAL_CONIC = "LambertConformalConic"
    LAMBERT_AZIMUTHAL_EQUAL_AREA = "LambertAzimuthalEqualArea"
    ALBERS_EQUAL_AREA_CONIC = "AlbersEqualAreaConic"
    AZIMUTHAL_EQUIDISTANT = "AzimuthalEquidistant"
    EQUIDISTANT_CONIC = "EquidistantConic"
    STEREOGRAPHIC = "Stereographic"
    UTM = "UTM"
    CASSINI_SOLDNER = "CassiniSoldner"
    MILLER = "Miller"
    POLYCONIC = "Polyconic"
    ROBINSON = "Robinson"
    SINUSOIDAL = "Sinusoidal"
    BONNE = "Bonne"


@dataclass(frozen=True)
class Ellipsoid:
    """Reference ellipsoid; the default is a unit sphere."""

    semimajor_axis: float = 1.0  # meters
    flattening: float = 0.0

    @property
    def eccentricity(self) -> float:
        f = self.flattening
        return math.sqrt(max(f * (2.0 - f), 0.0))

    @property
    def is_sphere(self) -> bool:
        return self.flattening == 0.0


Limits = Tuple[float, float]

# Field groups that translation can mark as explicitly set
ORIGIN = "origin"
FALSE_EASTING = "falseeasting"
FALSE_NORTHING = "falsenorthing"
SCALE_FACTOR = "scalefactor"
ELLIPSOID = "ellipsoid"
ZONE = "zone"


@dataclass(frozen=True)
class ProjectionDescriptor:
    """Resolved projection parameters.

    ``ProjectionDescriptor()`` is the all-defaults descriptor. ``explicit``
    names the field groups that were set from catalog parameters; a field
    whose value happens to equal its default is only distinguishable through it.
    """

    kind: ProjectionKind = ProjectionKind.PLATE_CARREE
    origin: Tuple[float, float, float] = (0.0, 0.0, 0.0)  # lat, lon, height
    false_easting: float = 0.0
    false_northing: float = 0.0
    scale_factor: float = 1.0
    ellipsoid: Ellipsoid = field(default_factory=Ellipsoid)
    zone: Optional[str] = None
    map_lat_limits: Optional[Limits] = None
    map_lon_limits: Optional[Limits] = None
    explicit: FrozenSet[str] = frozenset()

    def is_set(self, group: str) -> bool:
        return group in self.explicit

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "origin": list(self.origin),
            "false_easting": self.false_easting,
            "false_northing": self.false_northing,
            "scale_factor": self.scale_factor,
            "ellipsoid": {
                "semimajor_axis": self.ellipsoid.semimajor_axis,
                "flattening": self.ellipsoid.flattening,
                "eccentricity": self.ellipsoid.eccentricity,
            },
            "zone": self.zone,
            "map_lat_limits": list(self.map_lat_limits) if self.map_lat_limits else None,
            "map_lon_limits": list(self.map_lon_limits) if self.map_lon_limits else None,
            "explicit": sorted(self.explicit),
        }


__all__ = [
    "ProjectionKind",
    "Ellipsoid",
    "ProjectionDescriptor",
    "ORIGIN",
    "FALSE_EASTING",
    "FALSE_NORTHING",
    "SCALE_FACTOR",
    "ELLIPSOID",
    "ZONE",
]
