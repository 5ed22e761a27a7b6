import pytest

from app.proj.errors import UnknownEllipsoid, UnknownZone
from app.proj.geodesy import lookup_ellipsoid, lookup_utm_zone


def test_grs80_from_proj_table():
    axis_km, f = lookup_ellipsoid("GRS80")
    assert axis_km == pytest.approx(6378.137)
    assert f == pytest.approx(1 / 298.257222101)


def test_ellipsoid_name_is_case_insensitive():
    assert lookup_ellipsoid("grs80") == lookup_ellipsoid("GRS80")
    assert lookup_ellipsoid("wgs84") == lookup_ellipsoid("WGS84")


def test_ellipsoid_given_by_minor_axis():
    axis_km, f = lookup_ellipsoid("clrk66")
    assert axis_km == pytest.approx(6378.2064)
    assert f == pytest.approx((6378206.4 - 6356583.8) / 6378206.4)


def test_unknown_ellipsoid():
    with pytest.raises(UnknownEllipsoid) as exc:
        lookup_ellipsoid("NotAnEllipsoid")
    assert "NotAnEllipsoid" in str(exc.value)
    # still a KeyError for callers that treat lookups generically
    assert isinstance(exc.value, KeyError)


def test_northern_zone():
    lat, lon = lookup_utm_zone("14N")
    assert lat == (0.0, 84.0)
    assert lon == (-102.0, -96.0)


def test_southern_zone():
    lat, lon = lookup_utm_zone("33S")
    assert lat == (-80.0, 0.0)
    assert lon == (12.0, 18.0)


def test_zone_without_hemisphere_spans_all_latitudes():
    lat, lon = lookup_utm_zone("31")
    assert lat == (-80.0, 84.0)
    assert lon == (0.0, 6.0)


def test_zone_edges():
    assert lookup_utm_zone("1N")[1] == (-180.0, -174.0)
    assert lookup_utm_zone("60N")[1] == (174.0, 180.0)
    assert lookup_utm_zone(" 14n ") == lookup_utm_zone("14N")


@pytest.mark.parametrize(
    "code,lat",
    [
        ("32V", (56.0, 64.0)),
        ("33X", (72.0, 84.0)),
        ("18C", (-80.0, -72.0)),
        ("18M", (-8.0, 0.0)),
    ],
)
def test_latitude_bands(code, lat):
    assert lookup_utm_zone(code)[0] == lat


@pytest.mark.parametrize("code", ["", "0N", "61N", "14I", "14O", "N14", "144N", "14NN", None])
def test_invalid_zone_codes(code):
    with pytest.raises(UnknownZone):
        lookup_utm_zone(code)


def test_n_and_s_are_hemispheres_not_mgrs_bands():
    assert lookup_utm_zone("33N")[0] == (0.0, 84.0)
    assert lookup_utm_zone("33S")[0] == (-80.0, 0.0)
    assert lookup_utm_zone("33P")[0] == (8.0, 16.0)
