import asyncio
from urllib.parse import parse_qs

import httpx
import pytest

from astroclient.errors import InputValidationError, RemoteRejectionError, TransportError
from astroclient.models.birth_data import (
    BirthData,
    PrimaryBirthData,
    SecondaryBirthData,
    TwoPersonBirthData,
)
from astroclient.services.astrology_api import AsyncAstrologyAPI
from astroclient.services.auth import ClientConfig, basic_auth_header
from astroclient.services.transport import AsyncFormTransport

BASE_URL = "https://json.astrologyapi.com/v1"
CONFIG = ClientConfig(user_id="608154", api_key="secret-key", base_url=BASE_URL)

BIRTH = BirthData(day=10, month=5, year=1990, hour=19, min=55, lat=19.20, lon=25.20, tzone=5.5)
PAIR = TwoPersonBirthData(
    primary=PrimaryBirthData(day=10, month=5, year=1990, hour=11, min=55, lat=19.20, lon=25.20, tzone=5.5),
    secondary=SecondaryBirthData(day=10, month=5, year=1990, hour=15, min=22, lat=19.33, lon=25.20, tzone=5.5),
    orb=1,
)


def make_api(handler) -> AsyncAstrologyAPI:
    transport = AsyncFormTransport(CONFIG, transport=httpx.MockTransport(handler))
    return AsyncAstrologyAPI(CONFIG, transport=transport)


def form_of(request: httpx.Request) -> dict:
    return {k: v[0] for k, v in parse_qs(request.content.decode()).items()}


def test_async_client_posts_composite_form():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["request"] = request
        return httpx.Response(200, json={"first": {}, "second": {}})

    async def _run():
        async with make_api(handler) as api:
            return await api.synastry_horoscope(PAIR)

    result = asyncio.run(_run())

    assert result == {"first": {}, "second": {}}
    request = captured["request"]
    assert str(request.url) == f"{BASE_URL}/synastry_horoscope"
    assert request.headers["Authorization"] == basic_auth_header("608154", "secret-key")
    assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
    form = form_of(request)
    assert form["p_hour"] == "11"
    assert form["s_lat"] == "19.33"
    assert form["orb"] == "1"
    assert len(form) == 17


def test_async_hybrid_with_separate_records():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["form"] = form_of(request)
        captured["url"] = str(request.url)
        return httpx.Response(200, json=[{"house": 1}])

    async def _run():
        async with make_api(handler) as api:
            return await api.general_house_report(primary=BIRTH, secondary=PAIR.secondary)

    result = asyncio.run(_run())

    assert result == [{"house": 1}]
    assert captured["url"] == f"{BASE_URL}/general_house_report/tropical"
    assert captured["form"]["day"] == "10"
    assert captured["form"]["hour"] == "19"
    assert "orb" not in captured["form"]


def test_validation_raises_at_call_time():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={})

    api = make_api(handler)

    # raised before any coroutine exists, so nothing needs awaiting
    with pytest.raises(InputValidationError):
        api.general_sign_report("", PAIR)
    with pytest.raises(InputValidationError):
        api.love_compatibility_report(TwoPersonBirthData(secondary=PAIR.secondary))

    asyncio.run(api.aclose())
    assert calls == []


def test_async_405_is_rejection():
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(405, json={"status": False, "msg": "not in plan"})

    async def _run():
        async with make_api(handler) as api:
            await api.karma_destiny_report(PAIR)

    with pytest.raises(RemoteRejectionError) as exc_info:
        asyncio.run(_run())

    assert exc_info.value.endpoint_unavailable
    assert exc_info.value.payload == {"status": False, "msg": "not in plan"}


def test_async_network_error_is_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async def _run():
        async with make_api(handler) as api:
            await api.lunar_metrics(BIRTH)

    with pytest.raises(TransportError):
        asyncio.run(_run())


def test_cancelling_task_aborts_request():
    async def _run():
        in_flight = asyncio.Event()

        async def handler(request: httpx.Request) -> httpx.Response:
            in_flight.set()
            await asyncio.sleep(30)
            return httpx.Response(200, json={})

        async with make_api(handler) as api:
            task = asyncio.create_task(api.western_horoscope(BIRTH))
            await in_flight.wait()
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task
            return task.cancelled()

    assert asyncio.run(_run()) is True


def test_concurrent_requests_share_one_client():
    seen = []

    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        await asyncio.sleep(0)
        return httpx.Response(200, json={"path": request.url.path})

    async def _run():
        async with make_api(handler) as api:
            return await asyncio.gather(
                api.solar_return_planets(BIRTH),
                api.solar_return_house_cusps(BIRTH),
                api.personalized_planet_prediction("moon", BIRTH),
            )

    results = asyncio.run(_run())

    assert [r["path"] for r in results] == [
        "/v1/solar_return_planets",
        "/v1/solar_return_house_cusps",
        "/v1/personalized_planet_prediction/daily/moon",
    ]
    assert sorted(seen) == sorted(r["path"] for r in results)
