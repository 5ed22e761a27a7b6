from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Sequence, Set, Tuple

from .descriptor import (
    ELLIPSOID,
    FALSE_EASTING,
    FALSE_NORTHING,
    ORIGIN,
    SCALE_FACTOR,
    ZONE,
    Ellipsoid,
    ProjectionDescriptor,
    ProjectionKind,
)
from .errors import UnknownEllipsoid, UnknownZone
from .geodesy import lookup_ellipsoid, lookup_utm_zone

logger = logging.getLogger(__name__)

EllipsoidLookup = Callable[[str], Tuple[float, float]]
ZoneLookup = Callable[[str], Tuple[Tuple[float, float], Tuple[float, float]]]

# proj4 +proj codes
PROJ_KINDS: Dict[str, ProjectionKind] = {
    "tmerc": ProjectionKind.TRANSVERSE_MERCATOR,
    "merc": ProjectionKind.MERCATOR,
    "lcc": ProjectionKind.LAMBERT_CONFORMAL_CONIC,
    "laea": ProjectionKind.LAMBERT_AZIMUTHAL_EQUAL_AREA,
    "aea": ProjectionKind.ALBERS_EQUAL_AREA_CONIC,
    "aeqd": ProjectionKind.AZIMUTHAL_EQUIDISTANT,
    "eqdc": ProjectionKind.EQUIDISTANT_CONIC,
    "stere": ProjectionKind.STEREOGRAPHIC,
    "utm": ProjectionKind.UTM,
    "cass": ProjectionKind.CASSINI_SOLDNER,
    "mill": ProjectionKind.MILLER,
    "poly": ProjectionKind.POLYCONIC,
    "robin": ProjectionKind.ROBINSON,
    "sinu": ProjectionKind.SINUSOIDAL,
    "longlat": ProjectionKind.PLATE_CARREE,
}
DEFAULT_KIND = ProjectionKind.PLATE_CARREE

# Applied after all tokens, keyed on the matched catalog name
NAME_OVERRIDES: Dict[str, ProjectionKind] = {
    "World Bonne": ProjectionKind.BONNE,
    "World Plate Carree": ProjectionKind.PLATE_CARREE,
}

# Recognized but without a descriptor field
IGNORED_KEYS = {"+datum", "+pm", "+towgs84"}


def split_token(token: str) -> Tuple[str, Optional[str]]:
    key, sep, value = token.partition("=")
    return key, (value if sep else None)


@dataclass
class _DescriptorBuilder:
    """Accumulates descriptor fields while tokens are read left to right."""

    kind: ProjectionKind = DEFAULT_KIND
    lat0: float = 0.0
    lon0: float = 0.0
    height: float = 0.0
    false_easting: float = 0.0
    false_northing: float = 0.0
    scale_factor: float = 1.0
    semimajor_axis: float = 1.0
    flattening: float = 0.0
    zone: Optional[str] = None
    lat_limits: Optional[Tuple[float, float]] = None
    lon_limits: Optional[Tuple[float, float]] = None
    explicit: Set[str] = field(default_factory=set)

    def build(self) -> ProjectionDescriptor:
        return ProjectionDescriptor(
            kind=self.kind,
            origin=(self.lat0, self.lon0, self.height),
            false_easting=self.false_easting,
            false_northing=self.false_northing,
            scale_factor=self.scale_factor,
            ellipsoid=Ellipsoid(self.semimajor_axis, self.flattening),
            zone=self.zone,
            map_lat_limits=self.lat_limits,
            map_lon_limits=self.lon_limits,
            explicit=frozenset(self.explicit),
        )


def _number(key: str, value: Optional[str]) -> Optional[float]:
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        logger.warning("Ignoring %s with non-numeric value %r", key, value)
        return None


def _zone_number(value: Optional[str]) -> Optional[str]:
    # '14', '014' and '14.0' all name zone 14
    try:
        return str(int(float(value)))  # type: ignore[arg-type]
    except (TypeError, ValueError):
        logger.warning("Ignoring +zone with non-numeric value %r", value)
        return None


def translate_parameters(
    name: str,
    tokens: Sequence[str],
    ellipsoids: EllipsoidLookup = lookup_ellipsoid,
    zones: ZoneLookup = lookup_utm_zone,
) -> ProjectionDescriptor:
    """Turn a catalog entry's proj4 tokens into a ProjectionDescriptor.

    Tokens are processed strictly in the given order: ``+to_meter`` scales
    whatever semimajor axis ``+ellps`` produced before it. The hemisphere of
    a ``+zone`` comes from the last character of ``name``, the matched
    catalog name, since proj zone numbers carry none.
    """
    b = _DescriptorBuilder()

    for token in tokens:
        key, value = split_token(token)

        if key == "+proj":
            kind = PROJ_KINDS.get(value or "")
            if kind is None:
                logger.warning("No match found for %s, using default: %s", value, b.kind.value)
            else:
                b.kind = kind
        elif key in ("+lat_0", "+lon_0"):
            v = _number(key, value)
            if v is None:
                continue
            if key == "+lat_0":
                b.lat0 = v
            else:
                b.lon0 = v
            b.explicit.add(ORIGIN)
        elif key == "+k":
            v = _number(key, value)
            if v is not None:
                b.scale_factor = v
                b.explicit.add(SCALE_FACTOR)
        elif key == "+x_0":
            v = _number(key, value)
            if v is not None:
                b.false_easting = v
                b.explicit.add(FALSE_EASTING)
        elif key == "+y_0":
            v = _number(key, value)
            if v is not None:
                b.false_northing = v
                b.explicit.add(FALSE_NORTHING)
        elif key == "+ellps":
            try:
                axis_km, flattening = ellipsoids(value or "")
            except UnknownEllipsoid as e:
                logger.warning("%s; keeping default ellipsoid", e)
                continue
            b.semimajor_axis = 1000.0 * axis_km
            b.flattening = flattening
            b.explicit.add(ELLIPSOID)
        elif key == "+to_meter":
            # Feet-based entries: the descriptor axis stays in meters
            v = _number(key, value)
            if v is not None:
                b.semimajor_axis = v * b.semimajor_axis
        elif key == "+zone":
            number = _zone_number(value)
            if number is None:
                continue
            code = number + name[-1:]
            try:
                lat, lon = zones(code)
            except UnknownZone as e:
                logger.warning("Ignoring +zone: %s", e)
                continue
            b.zone = code
            b.lat_limits, b.lon_limits = tuple(lat), tuple(lon)  # type: ignore[assignment]
            b.explicit.add(ZONE)
        elif key in IGNORED_KEYS:
            continue

    override = NAME_OVERRIDES.get(name)
    if override is not None:
        b.kind = override

    desc = b.build()
    for group in sorted(desc.explicit):
        logger.debug("%s set", group)
    return desc


__all__ = [
    "PROJ_KINDS",
    "NAME_OVERRIDES",
    "translate_parameters",
    "split_token",
]
