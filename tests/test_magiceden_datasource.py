import httpx
import pytest

from knights_ledger.datasources import UpstreamFetchError, magiceden
from knights_ledger.datasources.magiceden import MagicEdenDataSource

BASE_URL = "https://api-mainnet.magiceden.test/v2"


def _activity(i: int) -> dict:
    return {
        "type": "buyNow",
        "signature": f"sig{i}",
        "buyer": f"buyer{i}",
        "seller": f"seller{i}",
        "price": 1.0,
        "blockTime": 1767225600 + i,
    }


def _datasource(handler) -> MagicEdenDataSource:
    client = httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    return MagicEdenDataSource(api_url=BASE_URL, client=client, page_delay=0)


@pytest.mark.asyncio
async def test_stops_once_limit_is_reached():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        offset = int(request.url.params["offset"])
        return httpx.Response(200, json=[_activity(offset + i) for i in range(500)])

    datasource = _datasource(handler)
    activities = await datasource.get_collection_activities("vibe_knights", limit=150)
    await datasource.close()

    assert len(calls) == 1
    assert len(activities) == 150
    assert calls[0].url.path == "/v2/collections/vibe_knights/activities"
    assert calls[0].url.params["limit"] == "500"
    assert calls[0].url.params["offset"] == "0"


@pytest.mark.asyncio
async def test_pages_until_short_page():
    offsets = []

    def handler(request: httpx.Request) -> httpx.Response:
        offset = int(request.url.params["offset"])
        offsets.append(offset)
        size = 500 if offset < 1000 else 20
        return httpx.Response(200, json=[_activity(offset + i) for i in range(size)])

    datasource = _datasource(handler)
    activities = await datasource.get_collection_activities("vibe_knights", limit=10000)

    assert offsets == [0, 500, 1000]
    assert len(activities) == 1020
    assert activities[0].signature == "sig0"
    assert activities[-1].signature == "sig1019"


@pytest.mark.asyncio
async def test_stops_at_page_ceiling():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=[_activity(i) for i in range(500)])

    datasource = _datasource(handler)
    activities = await datasource.get_collection_activities("vibe_knights", limit=1_000_000)

    assert len(calls) == magiceden.MAX_PAGES
    assert len(activities) == magiceden.MAX_PAGES * 500


@pytest.mark.asyncio
async def test_empty_page_ends_pagination():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[])

    datasource = _datasource(handler)
    assert await datasource.get_collection_activities("vibe_knights") == []


@pytest.mark.asyncio
async def test_returns_partial_results_when_later_page_fails(monkeypatch):
    monkeypatch.setattr(magiceden, "PAGE_SIZE", 200)

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.params["offset"] == "0":
            return httpx.Response(200, json=[_activity(i) for i in range(200)])
        raise httpx.ConnectError("connection reset", request=request)

    datasource = _datasource(handler)
    activities = await datasource.get_collection_activities("vibe_knights", limit=10000)

    assert len(activities) == 200


@pytest.mark.asyncio
async def test_later_page_failure_after_unparseable_page_returns_empty(monkeypatch):
    monkeypatch.setattr(magiceden, "PAGE_SIZE", 2)

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.params["offset"] == "0":
            return httpx.Response(200, json=["junk", "junk"])
        return httpx.Response(503)

    datasource = _datasource(handler)
    activities = await datasource.get_collection_activities("vibe_knights")

    assert activities == []


@pytest.mark.asyncio
async def test_first_page_http_error_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    datasource = _datasource(handler)
    with pytest.raises(UpstreamFetchError, match="API Error 503"):
        await datasource.get_collection_activities("vibe_knights")


@pytest.mark.asyncio
async def test_first_page_network_error_raises_with_cause():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("no route to host", request=request)

    datasource = _datasource(handler)
    with pytest.raises(UpstreamFetchError) as excinfo:
        await datasource.get_collection_activities("vibe_knights")

    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_invalid_json_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>not json</html>")

    datasource = _datasource(handler)
    with pytest.raises(UpstreamFetchError, match="Invalid JSON"):
        await datasource.get_collection_activities("vibe_knights")


@pytest.mark.asyncio
async def test_non_list_body_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"error": "rate limited"})

    datasource = _datasource(handler)
    with pytest.raises(UpstreamFetchError):
        await datasource.get_collection_activities("vibe_knights")


@pytest.mark.asyncio
async def test_malformed_items_are_skipped():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json=[
                _activity(1),
                "not-an-object",
                {"type": "buyNow", "signature": "bad", "price": "lots"},
                _activity(2),
            ],
        )

    datasource = _datasource(handler)
    activities = await datasource.get_collection_activities("vibe_knights")

    assert [a.signature for a in activities] == ["sig1", "sig2"]


@pytest.mark.asyncio
async def test_wallet_activities_single_page():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=[_activity(1), _activity(2)])

    datasource = _datasource(handler)
    activities = await datasource.get_wallet_activities("Wallet111", limit=500)

    assert len(calls) == 1
    assert calls[0].url.path == "/v2/wallets/Wallet111/activities"
    assert calls[0].url.params["limit"] == "500"
    assert len(activities) == 2
