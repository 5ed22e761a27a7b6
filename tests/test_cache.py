import asyncio
import json
import logging

from app.cache import RedisCache, build_cache_from_env, resolution_key
from app.logging_setup import _JsonFormatter


class _FakeRedis:
    def __init__(self):
        self.store = {}

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.store[key] = value


def test_resolution_key_depends_on_catalog():
    UTM = 'PROJCS["WGS_1984_UTM_Zone_14N"]'
    a = resolution_key(UTM, "/cat/esri")
    assert a == resolution_key(UTM, "/cat/esri")
    assert a != resolution_key(UTM, "/other/esri")
    assert a.startswith("resolve:")


def test_redis_cache_roundtrip_with_prefix():
    client = _FakeRedis()
    cache = RedisCache(client, prefix="prj:", default_ttl=60)

    async def go():
        assert await cache.set_json("resolve:abc", {"reason": "OK"})
        return await cache.get_json("resolve:abc")

    assert asyncio.run(go()) == {"reason": "OK"}
    assert list(client.store) == ["prj:resolve:abc"]


def test_undecodable_entry_is_a_miss():
    client = _FakeRedis()
    client.store["prj:resolve:bad"] = b"{not json"
    cache = RedisCache(client)
    assert asyncio.run(cache.get_json("resolve:bad")) is None


def test_cache_disabled_without_redis_url(monkeypatch):
    monkeypatch.delenv("REDIS_URL", raising=False)
    cache = asyncio.run(build_cache_from_env())
    assert not isinstance(cache, RedisCache)
    monkeypatch.setenv("REDIS_URL", "redis://localhost:1/0")
    monkeypatch.setenv("CACHE_DISABLE", "1")
    assert not isinstance(asyncio.run(build_cache_from_env()), RedisCache)


def test_json_log_line_carries_resolution_fields():
    record = logging.LogRecord("app.proj.resolver", logging.INFO, __file__, 1, "%s projection not found", ("X",), None)
    record.reason = "NameNotFound"
    record.prj = "/data/roads.prj"
    line = json.loads(_JsonFormatter().format(record))
    assert line["msg"] == "X projection not found"
    assert line["reason"] == "NameNotFound"
    assert line["prj"] == "/data/roads.prj"
    assert "request_id" not in line
