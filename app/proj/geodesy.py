from __future__ import annotations

import re
from functools import lru_cache
from typing import Dict, Tuple

from pyproj.list import get_ellps_map

from .errors import UnknownEllipsoid, UnknownZone

Limits = Tuple[float, float]

# -----------------------------
# Ellipsoids (PROJ's own table, keyed by +ellps names)
# -----------------------------


def _flattening(params: Dict[str, object]) -> float:
    a = float(params["a"])  # type: ignore[arg-type]
    rf = params.get("rf")
    if rf:
        return 1.0 / float(rf)  # type: ignore[arg-type]
    b = params.get("b")
    if b:
        return (a - float(b)) / a  # type: ignore[arg-type]
    return 0.0


@lru_cache(maxsize=1)
def _ellipsoid_table() -> Dict[str, Tuple[float, float]]:
    table: Dict[str, Tuple[float, float]] = {}
    for name, params in get_ellps_map().items():
        table[name] = (float(params["a"]) / 1000.0, _flattening(params))
    return table


def lookup_ellipsoid(name: str) -> Tuple[float, float]:
    """Return ``(semimajor_axis_km, flattening)`` for a proj ``+ellps`` name.

    Exact names win; otherwise a case-insensitive match is tried
    ('grs80' finds 'GRS80'). Raises UnknownEllipsoid when neither matches.
    """
    table = _ellipsoid_table()
    hit = table.get(name)
    if hit is not None:
        return hit
    folded = (name or "").lower()
    for key, value in table.items():
        if key.lower() == folded:
            return value
    raise UnknownEllipsoid(name)


# -----------------------------
# UTM zones
# -----------------------------

ZONE_CODE_RE = re.compile(r"^\s*(\d{1,2})\s*([A-Za-z]?)\s*$")
# MGRS latitude bands, 8 degrees each from 80S; X is stretched to 84N
LAT_BANDS = "CDEFGHJKLMNPQRSTUVWX"
HEMISPHERES: Dict[str, Limits] = {
    "N": (0.0, 84.0),
    "S": (-80.0, 0.0),
}
FULL_LATITUDES: Limits = (-80.0, 84.0)


def _band_limits(letter: str) -> Limits:
    idx = LAT_BANDS.find(letter)
    if idx < 0:
        raise UnknownZone(f"Unknown latitude band {letter!r}")
    south = -80.0 + 8.0 * idx
    north = 84.0 if letter == "X" else south + 8.0
    return south, north


def lookup_utm_zone(code: str) -> Tuple[Limits, Limits]:
    """Return ``(lat_limits, lon_limits)`` for a UTM zone code like '14N'.

    A trailing N or S is read as the hemisphere, not as the MGRS bands of
    the same letters (N is 0-8N, S is 32-40N in MGRS): catalog names end in
    a hemisphere letter, never a band. Any other letter is an MGRS latitude
    band.
    """
    m = ZONE_CODE_RE.match(code or "")
    if not m:
        raise UnknownZone(f"Malformed UTM zone code {code!r}")
    zone = int(m.group(1))
    if not 1 <= zone <= 60:
        raise UnknownZone(f"UTM zone out of range: {zone}")
    letter = m.group(2).upper()

    if not letter:
        lat = FULL_LATITUDES
    elif letter in HEMISPHERES:
        lat = HEMISPHERES[letter]
    else:
        lat = _band_limits(letter)

    west = -180.0 + 6.0 * (zone - 1)
    return lat, (west, west + 6.0)


__all__ = ["lookup_ellipsoid", "lookup_utm_zone", "LAT_BANDS"]
