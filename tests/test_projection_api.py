from fastapi.testclient import TestClient
import geopandas as gpd
import pytest
from shapely.geometry import Point

from app.main import app

client = TestClient(app)

UTM_14N = 'PROJCS["WGS_1984_UTM_Zone_14N",GEOGCS["GCS_WGS_1984"],PROJECTION["Transverse_Mercator"]]'


class _DictCache:
    def __init__(self):
        self.data = {}

    async def get_json(self, key):
        return self.data.get(key)

    async def set_json(self, key, value, ttl=None):
        self.data[key] = value
        return True


@pytest.fixture(autouse=True)
def _small_resolver(monkeypatch, resolver):
    monkeypatch.setattr(app.state, "resolver", resolver, raising=False)


def test_health():
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_resolve_text():
    resp = client.post("/projection/resolve_text", json={"text": UTM_14N})
    assert resp.status_code == 200
    data = resp.json()
    assert data["reason"] == "OK"
    assert data["tag"] == "Projected"
    assert data["matched_name"] == "WGS 84 UTM zone 14N"
    assert data["descriptor"]["kind"] == "UTM"
    assert data["descriptor"]["zone"] == "14N"
    assert data["descriptor"]["map_lon_limits"] == [-102.0, -96.0]
    assert "zone" in data["descriptor"]["explicit"]


def test_resolve_text_unrecognized_is_not_an_error():
    resp = client.post("/projection/resolve_text", json={"text": 'GEOCCS["WGS 84"]'})
    assert resp.status_code == 200
    data = resp.json()
    assert data["reason"] == "UnrecognizedTag"
    assert data["descriptor"] is None


def test_resolve_text_rejects_blank():
    resp = client.post("/projection/resolve_text", json={"text": "   "})
    assert resp.status_code == 422


def test_resolve_upload():
    files = {"file": ("roads.prj", UTM_14N.encode("utf-8"))}
    resp = client.post("/projection/resolve", files=files)
    assert resp.status_code == 200
    data = resp.json()
    assert data["reason"] == "OK"
    assert data["source"] == "roads.prj"


def test_resolve_empty_upload():
    resp = client.post("/projection/resolve", files={"file": ("roads.prj", b"")})
    assert resp.status_code == 400


def test_resolve_needs_file_or_path():
    resp = client.post("/projection/resolve", data={})
    assert resp.status_code == 400


def test_resolve_path(tmp_path):
    (tmp_path / "roads.prj").write_text(UTM_14N)
    resp = client.post("/projection/resolve", data={"path": str(tmp_path / "roads.shp")})
    assert resp.status_code == 200
    assert resp.json()["source"] == str(tmp_path / "roads.prj")


def test_resolve_path_without_companion(tmp_path):
    resp = client.post("/projection/resolve", data={"path": str(tmp_path / "roads.shp")})
    assert resp.status_code == 200
    assert resp.json()["reason"] == "NoFile"


def test_resolve_uses_cache(monkeypatch):
    cache = _DictCache()
    monkeypatch.setattr(app.state, "cache", cache)
    first = client.post("/projection/resolve_text", json={"text": UTM_14N}).json()
    assert len(cache.data) == 1
    key = next(iter(cache.data))
    assert key.startswith("resolve:")
    cache.data[key]["message"] = "from cache"
    second = client.post("/projection/resolve_text", json={"text": UTM_14N}).json()
    assert first["message"] == "WGS 84 UTM zone 14N projection found!"
    assert second["message"] == "from cache"


def test_missing_catalog_is_server_error(monkeypatch, tmp_path):
    from app.proj.resolver import Resolver

    monkeypatch.setattr(app.state, "resolver", Resolver(catalog_path=str(tmp_path / "missing")), raising=False)
    resp = client.post("/projection/resolve_text", json={"text": UTM_14N})
    assert resp.status_code == 500
    assert "Projection catalog not found" in resp.json()["detail"]


def test_match():
    resp = client.get("/projection/match", params={"name": "NAD_1983_StatePlane_Texas_Central_FIPS_4203"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["normalized"] == "NAD 1983 HARN StatePlane Texas Central FIPS 4203"
    assert data["matched_name"] == "NAD 1983 HARN StatePlane Texas Central FIPS 4203"
    assert data["parameters"][0] == "+proj=lcc"


def test_match_not_found():
    resp = client.get("/projection/match", params={"name": "Some_Local_Grid"})
    assert resp.status_code == 404


def test_preview_prj(tmp_path):
    (tmp_path / "roads.prj").write_text(UTM_14N)
    resp = client.get("/projection/preview_prj", params={"path": str(tmp_path / "roads.shp")})
    assert resp.status_code == 200
    data = resp.json()
    assert data["tag"] == "Projected"
    assert data["text"] == UTM_14N


def test_preview_prj_missing(tmp_path):
    resp = client.get("/projection/preview_prj", params={"path": str(tmp_path / "roads.shp")})
    assert resp.status_code == 404


def test_read(tmp_path):
    path = tmp_path / "wells.shp"
    gpd.GeoDataFrame({"NAME": ["w1", "w2"]}, geometry=[Point(1, 2), Point(3, 4)]).to_file(path)
    (tmp_path / "wells.prj").write_text(UTM_14N)
    resp = client.post("/projection/read", json={"path": str(path), "record_numbers": [2]})
    assert resp.status_code == 200
    data = resp.json()
    assert data["descriptor"]["zone"] == "14N"
    assert data["count"] == 1
    assert data["features"][0]["geometry"]["coordinates"] == [3.0, 4.0]
    assert data["attributes"] == [{"NAME": "w2"}]


def test_read_rejects_zero_record_number(tmp_path):
    resp = client.post("/projection/read", json={"path": str(tmp_path / "x.shp"), "record_numbers": [0]})
    assert resp.status_code == 422


def test_read_missing_file(tmp_path):
    resp = client.post("/projection/read", json={"path": str(tmp_path / "x.shp")})
    assert resp.status_code == 404


def test_cache_not_shared_between_resolvers_with_other_lookups(monkeypatch, small_catalog):
    from app.proj.resolver import Resolver

    cache = _DictCache()
    monkeypatch.setattr(app.state, "cache", cache)
    client.post("/projection/resolve_text", json={"text": UTM_14N})

    def tiny_ellipsoids(name):
        return (1.0, 0.0)

    monkeypatch.setattr(app.state, "resolver", Resolver(catalog=small_catalog, ellipsoids=tiny_ellipsoids), raising=False)
    data = client.post("/projection/resolve_text", json={"text": UTM_14N}).json()
    assert data["descriptor"]["ellipsoid"]["semimajor_axis"] == 1000.0
    assert len(cache.data) == 2
