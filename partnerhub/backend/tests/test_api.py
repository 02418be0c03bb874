# tests/test_api.py
import httpx
import pytest

from conftest import make_settings
from portal.entrypoints.api.deps import get_gateway
from portal.entrypoints.fastapi_app import create_app
from portal.service_layer.gateway import ListingsGateway


def _client(cfg, handler) -> httpx.AsyncClient:
    app = create_app()
    upstream = httpx.MockTransport(handler)
    app.dependency_overrides[get_gateway] = lambda: ListingsGateway(cfg=cfg, transport=upstream)
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://gateway")


def _never_called(req: httpx.Request) -> httpx.Response:
    raise AssertionError(f"unexpected upstream call: {req.url}")


@pytest.mark.asyncio
async def test_health():
    async with _client(make_settings(), _never_called) as c:
        r = await c.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_missing_credentials_per_endpoint(missing_cfg):
    async with _client(missing_cfg, _never_called) as c:
        cats = await c.get("/categories")
        sale = await c.get("/listings/sale")
        status = await c.get("/status")

    assert cats.status_code == 200
    assert cats.json()["fallback"] is True
    assert len(cats.json()["categories"]) == 4

    assert sale.status_code == 500
    body = sale.json()
    assert body["error"] == "Missing API configuration"
    assert body["details"]["missing"] == ["VAULTRE_API_URL", "VAULTRE_API_TOKEN", "VAULTRE_API_KEY"]

    assert status.status_code == 200
    assert status.json()["connected"] is False
    assert status.json()["status"] == "error"


@pytest.mark.asyncio
async def test_sale_search_normalizes_and_sets_cache_header(cfg):
    seen = {}

    def handler(req: httpx.Request) -> httpx.Response:
        seen.update(dict(req.url.params))
        return httpx.Response(200, json={"items": [{"id": "1", "title": "A"}], "totalItems": 99})

    async with _client(cfg, handler) as c:
        r = await c.get("/listings/sale", params={"status": "conditional,listing", "limit": "10", "suburb": "Bondi"})

    assert r.status_code == 200
    assert r.json()["properties"] == [{"id": "1", "title": "A"}]
    assert r.json()["totalItems"] == 1
    assert "s-maxage=300" in r.headers["cache-control"]
    assert seen["status"] == "listing,conditional"
    assert seen["pagesize"] == "10"
    assert seen["published"] == "true"
    assert seen["suburb"] == "Bondi"


@pytest.mark.asyncio
async def test_sale_search_surfaces_upstream_status(cfg):
    async with _client(cfg, lambda req: httpx.Response(403, json={"message": "forbidden"})) as c:
        r = await c.get("/listings/sale")
    assert r.status_code == 403
    assert r.json()["status"] == 403
    assert r.json()["details"] == {"message": "forbidden"}


@pytest.mark.asyncio
async def test_unreachable_upstream_is_a_500(cfg):
    def down(req):
        raise httpx.ConnectError("refused", request=req)

    async with _client(cfg, down) as c:
        r = await c.get("/listings/sale")
    assert r.status_code == 500
    assert r.json()["error"] == "Server error"


@pytest.mark.asyncio
async def test_text_search(cfg):
    body = [
        {"id": "1", "heading": "Beach house", "address": {"suburb": "Bondi"}},
        {"id": "2", "heading": "Cabin", "address": {"suburb": "Leura"}},
    ]
    async with _client(cfg, lambda req: httpx.Response(200, json=body)) as c:
        r = await c.get("/listings/search", params={"q": "leura"})
    assert r.status_code == 200
    assert [x["id"] for x in r.json()["properties"]] == ["2"]
    assert r.json()["totalItems"] == 1


@pytest.mark.asyncio
async def test_listing_detail(cfg):
    async with _client(cfg, lambda req: httpx.Response(200, json={"property": {"id": 9, "status": "listing"}})) as c:
        r = await c.get("/listings/9")
    assert r.status_code == 200
    assert r.json() == {"id": 9, "status": "listing"}


@pytest.mark.asyncio
async def test_mock_listings():
    async with _client(make_settings(), _never_called) as c:
        r = await c.get("/mock")
    assert r.status_code == 200
    assert r.json()["totalItems"] == 3


@pytest.mark.asyncio
async def test_relay_reconciles_shape_and_strips_path_param(cfg):
    seen = {}

    def handler(req: httpx.Request) -> httpx.Response:
        seen["url"] = str(req.url)
        return httpx.Response(200, json={"0": {"id": "a"}, "1": {"id": "b"}})

    async with _client(cfg, handler) as c:
        r = await c.get("/relay", params={"path": "/properties/sale", "pagesize": "2"})

    assert r.status_code == 200
    assert r.json()["properties"] == [{"id": "a"}, {"id": "b"}]
    assert r.json()["totalItems"] == 2
    assert seen["url"] == "https://relay.test/properties/sale?pagesize=2"


@pytest.mark.asyncio
async def test_relay_non_json_is_reported(cfg):
    html = "<html>" + "x" * 200 + "</html>"
    async with _client(cfg, lambda req: httpx.Response(200, text=html, headers={"content-type": "text/html"})) as c:
        r = await c.get("/relay", params={"path": "properties"})
    assert r.status_code == 500
    body = r.json()
    assert body["error"] == "Proxy did not return JSON"
    assert body["details"] == "Content type: text/html"
    assert body["sample"] == html[:100] + "..."


@pytest.mark.asyncio
async def test_relay_error_status_passes_through(cfg):
    async with _client(cfg, lambda req: httpx.Response(404, json={"m": "no"})) as c:
        r = await c.get("/relay", params={"path": "nope"})
    assert r.status_code == 404
    assert r.json()["error"] == "Proxy returned status 404"


@pytest.mark.asyncio
async def test_relay_raw_passes_body_through(cfg):
    async with _client(cfg, lambda req: httpx.Response(200, text="plain body", headers={"content-type": "text/plain"})) as c:
        r = await c.get("/relay-raw", params={"path": "anything"})
    assert r.status_code == 200
    assert r.text == "plain body"
    assert r.headers["content-type"].startswith("text/plain")


@pytest.mark.asyncio
async def test_relay_forwards_post_body(cfg):
    seen = {}

    def handler(req: httpx.Request) -> httpx.Response:
        seen["method"] = req.method
        seen["body"] = req.content
        return httpx.Response(201, json=[{"id": "n"}])

    async with _client(cfg, handler) as c:
        r = await c.post("/relay", params={"path": "contacts"}, json={"name": "x"})
    assert r.status_code == 201
    assert seen["method"] == "POST"
    assert b'"name"' in seen["body"]


@pytest.mark.asyncio
async def test_relay_requires_base_url():
    async with _client(make_settings(RELAY_BASE_URL=None), _never_called) as c:
        r = await c.get("/relay", params={"path": "x"})
    assert r.status_code == 500
    assert r.json()["details"]["missing"] == ["RELAY_BASE_URL"]


@pytest.mark.asyncio
async def test_categories_with_non_object_entries_fall_back(cfg):
    async with _client(cfg, lambda req: httpx.Response(200, json={"items": ["Residential", "Land"]})) as c:
        r = await c.get("/categories")
    assert r.status_code == 200
    assert r.json()["fallback"] is True
    assert [x["id"] for x in r.json()["categories"]] == ["residential", "commercial", "rural", "land"]


def _corrupt_gzip(req: httpx.Request) -> httpx.Response:
    return httpx.Response(200, content=b"not gzip at all", headers={"content-encoding": "gzip"})


@pytest.mark.asyncio
async def test_undecodable_upstream_body_does_not_break_categories_or_status(cfg):
    async with _client(cfg, _corrupt_gzip) as c:
        cats = await c.get("/categories")
        status = await c.get("/status")

    assert cats.status_code == 200
    assert cats.json()["fallback"] is True
    assert len(cats.json()["categories"]) == 4

    assert status.status_code == 200
    assert status.json()["connected"] is False
    assert status.json()["status"] == "error"


@pytest.mark.asyncio
async def test_redirect_loop_does_not_break_status(cfg):
    def loop(req: httpx.Request) -> httpx.Response:
        raise httpx.TooManyRedirects("Exceeded maximum allowed redirects.", request=req)

    async with _client(cfg, loop) as c:
        r = await c.get("/status")
    assert r.status_code == 200
    assert r.json()["connected"] is False


@pytest.mark.asyncio
async def test_relay_forwards_repeated_query_keys(cfg):
    seen = {}

    def handler(req: httpx.Request) -> httpx.Response:
        seen["status"] = req.url.params.get_list("status")
        seen["query"] = req.url.query
        return httpx.Response(200, json=[])

    async with _client(cfg, handler) as c:
        r = await c.get("/relay?path=properties&status=listing&status=conditional&page=2")
    assert r.status_code == 200
    assert seen["status"] == ["listing", "conditional"]
    assert seen["query"] == b"status=listing&status=conditional&page=2"


@pytest.mark.asyncio
async def test_listing_detail_non_json_is_a_bad_gateway(cfg):
    async with _client(cfg, lambda req: httpx.Response(200, text="<html>maintenance</html>")) as c:
        r = await c.get("/listings/9")
    assert r.status_code == 502
    assert r.json()["status"] == 502
    assert r.json()["details"] == "<html>maintenance</html>"
