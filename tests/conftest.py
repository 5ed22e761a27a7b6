import os
import sys

import pytest

# Ensure imports like `from app.main import app` work when pytest is run from repo root
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from app.proj.catalog import parse_catalog  # noqa: E402
from app.proj.errors import UnknownEllipsoid  # noqa: E402

SMALL_CATALOG = """\
## test catalog
# WGS 84 / UTM zone 14N
<32614> +proj=utm +zone=14 +ellps=WGS84 +datum=WGS84 +units=m +no_defs  <>
# WGS 84 / UTM zone 33S
<32733> +proj=utm +zone=33 +south +ellps=WGS84 +datum=WGS84 +units=m +no_defs  <>
# NAD 1983 HARN StatePlane Texas Central FIPS 4203
<2846> +proj=lcc +lat_1=31.88333333333333 +lat_2=30.11666666666667 +lat_0=29.66666666666667 +lon_0=-100.3333333333333 +x_0=700000 +y_0=3000000 +ellps=GRS80 +units=m +no_defs  <>
# NAD 1927 StatePlane Texas Central FIPS 4203
<32040> +proj=lcc +lat_0=29.66666666666667 +lon_0=-100.3333333333333 +x_0=609601.2192024384 +y_0=0 +ellps=Clarke1866 +datum=NAD27 +to_meter=0.3048006096012192 +no_defs  <>
# World Bonne
<54024> +proj=bonne +lon_0=0 +lat_1=60 +x_0=0 +y_0=0 +ellps=WGS84 +datum=WGS84 +units=m +no_defs  no_defs <>
# World Loximuthal
# World Cube
# WGS 84
<4326> +proj=longlat +ellps=WGS84 +datum=WGS84 +no_defs  no_defs <>
"""

ELLIPSOIDS = {
    "WGS84": (6378.137, 1 / 298.257223563),
    "GRS80": (6378.137, 1 / 298.257222101),
    "Clarke1866": (6378.2064, 1 / 294.9786982),
}


def fake_ellipsoids(name):
    try:
        return ELLIPSOIDS[name]
    except KeyError:
        raise UnknownEllipsoid(name)


@pytest.fixture
def small_catalog():
    return parse_catalog(SMALL_CATALOG.splitlines(keepends=True))


@pytest.fixture
def catalog_file(tmp_path):
    p = tmp_path / "esri"
    p.write_text(SMALL_CATALOG, encoding="utf-8")
    return p


@pytest.fixture
def ellipsoids():
    return fake_ellipsoids


@pytest.fixture
def resolver(small_catalog):
    from app.proj.resolver import Resolver

    return Resolver(catalog=small_catalog, ellipsoids=fake_ellipsoids)
