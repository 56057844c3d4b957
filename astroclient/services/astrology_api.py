"""
AstrologyAPI clients (json.astrologyapi.com/v1).

    config = ClientConfig(user_id="123456", api_key="…")
    with AstrologyAPI(config) as api:
        chart = api.western_horoscope(BirthData(day=10, month=5, year=1990,
                                                hour=19, min=55, lat=19.2,
                                                lon=25.2, tzone=5.5))

AsyncAstrologyAPI exposes the same methods as coroutines. Credentials are
fixed at construction; one client instance can serve concurrent requests.

Every method takes an optional `response_model`: anything pydantic can
validate (a BaseModel subclass, `list[dict]`, …). Without it the decoded
JSON is returned unchanged.
"""
import logging
from typing import Any, Optional

import requests
from pydantic import TypeAdapter

from astroclient.models.birth_data import (
    BirthData,
    TarotScores,
    TransitBirthData,
    TwoPersonBirthData,
)
from astroclient.services.auth import ClientConfig
from astroclient.services.endpoints import PreparedRequest, prepare
from astroclient.services.transport import AsyncFormTransport, FormTransport

logger = logging.getLogger(__name__)


def parse_response(data: Any, response_model=None) -> Any:
    if response_model is None:
        return data
    return TypeAdapter(response_model).validate_python(data)


class _OperationMethods:
    """
    One method per AstrologyAPI operation. Subclasses implement _dispatch();
    the async client returns a coroutine from it, the sync client a value.
    """

    def _dispatch(self, request: PreparedRequest, response_model=None):
        raise NotImplementedError

    def call(
        self,
        operation: str,
        payload=None,
        *,
        path_params=None,
        primary: Optional[BirthData] = None,
        secondary: Optional[BirthData] = None,
        orb: Optional[float] = None,
        response_model=None,
    ):
        """Generic entry point: any operation from endpoints.OPERATIONS by name."""
        request = prepare(
            operation,
            payload,
            path_params=path_params,
            primary=primary,
            secondary=secondary,
            orb=orb,
        )
        return self._dispatch(request, response_model)

    # ── Western horoscope ────────────────────────────────────────────

    def western_horoscope(self, birth_data: BirthData, response_model=None):
        return self.call("western_horoscope", birth_data, response_model=response_model)

    def western_chart_data(self, birth_data: BirthData, response_model=None):
        """Same endpoint as western_horoscope; kept as its own operation name."""
        return self.call("western_chart_data", birth_data, response_model=response_model)

    def natal_wheel_chart(self, birth_data: BirthData, response_model=None):
        """Western natal wheel chart; the response carries the chart image URL."""
        return self.call("natal_wheel_chart", birth_data, response_model=response_model)

    def personalized_planet_prediction(self, planet: str, birth_data: BirthData, response_model=None):
        """Daily prediction for one planet ("mars", "moon", …)."""
        return self.call(
            "personalized_planet_prediction",
            birth_data,
            path_params={"planet": planet},
            response_model=response_model,
        )

    # ── Tropical transits ────────────────────────────────────────────

    def tropical_transits_daily(self, birth_data: TransitBirthData, response_model=None):
        return self.call("tropical_transits_daily", birth_data, response_model=response_model)

    def tropical_transits_weekly(self, birth_data: TransitBirthData, response_model=None):
        return self.call("tropical_transits_weekly", birth_data, response_model=response_model)

    def tropical_transits_monthly(self, birth_data: TransitBirthData, response_model=None):
        return self.call("tropical_transits_monthly", birth_data, response_model=response_model)

    # ── Solar return / lunar ─────────────────────────────────────────

    def solar_return_details(self, birth_data: BirthData, response_model=None):
        return self.call("solar_return_details", birth_data, response_model=response_model)

    def solar_return_planets(self, birth_data: BirthData, response_model=None):
        return self.call("solar_return_planets", birth_data, response_model=response_model)

    def solar_return_house_cusps(self, birth_data: BirthData, response_model=None):
        return self.call("solar_return_house_cusps", birth_data, response_model=response_model)

    def solar_return_planet_aspects(self, birth_data: BirthData, response_model=None):
        return self.call("solar_return_planet_aspects", birth_data, response_model=response_model)

    def lunar_metrics(self, birth_data: BirthData, response_model=None):
        return self.call("lunar_metrics", birth_data, response_model=response_model)

    # ── Single-person reports ────────────────────────────────────────

    def personality_report(self, birth_data: BirthData, response_model=None):
        return self.call("personality_report", birth_data, response_model=response_model)

    def romantic_personality_report(self, birth_data: BirthData, response_model=None):
        return self.call("romantic_personality_report", birth_data, response_model=response_model)

    def life_forecast_report(self, birth_data: BirthData, response_model=None):
        return self.call("life_forecast_report", birth_data, response_model=response_model)

    def romantic_forecast_report(self, birth_data: BirthData, response_model=None):
        return self.call("romantic_forecast_report", birth_data, response_model=response_model)

    # ── Two-person (p_/s_ body) ──────────────────────────────────────

    def synastry_horoscope(self, data: TwoPersonBirthData, response_model=None):
        return self.call("synastry_horoscope", data, response_model=response_model)

    def friendship_report(self, data: TwoPersonBirthData, response_model=None):
        return self.call("friendship_report", data, response_model=response_model)

    def karma_destiny_report(self, data: TwoPersonBirthData, response_model=None):
        return self.call("karma_destiny_report", data, response_model=response_model)

    def love_compatibility_report(self, data: TwoPersonBirthData, response_model=None):
        return self.call("love_compatibility_report", data, response_model=response_model)

    def romantic_forecast_couple_report(self, data: TwoPersonBirthData, response_model=None):
        return self.call("romantic_forecast_couple_report", data, response_model=response_model)

    def zodiac_compatibility(
        self,
        zodiac_name: str,
        partner_zodiac_name: str,
        data: TwoPersonBirthData,
        response_model=None,
    ):
        return self.call(
            "zodiac_compatibility",
            data,
            path_params={"zodiac_name": zodiac_name, "partner_zodiac_name": partner_zodiac_name},
            response_model=response_model,
        )

    def compatibility(
        self,
        sun_sign: str,
        rising_sign: str,
        partner_sun_sign: str,
        partner_rising_sign: str,
        data: TwoPersonBirthData,
        response_model=None,
    ):
        """Compatibility from both people's sun and rising signs."""
        return self.call(
            "compatibility",
            data,
            path_params={
                "sun_sign": sun_sign,
                "rising_sign": rising_sign,
                "partner_sun_sign": partner_sun_sign,
                "partner_rising_sign": partner_rising_sign,
            },
            response_model=response_model,
        )

    # ── General reports (hybrid body) ────────────────────────────────
    # Accept either a TwoPersonBirthData or primary=/secondary=(/orb=).

    def general_ascendant_report(
        self,
        data: Optional[TwoPersonBirthData] = None,
        *,
        primary: Optional[BirthData] = None,
        secondary: Optional[BirthData] = None,
        orb: Optional[float] = None,
        response_model=None,
    ):
        return self.call(
            "general_ascendant_report",
            data,
            primary=primary,
            secondary=secondary,
            orb=orb,
            response_model=response_model,
        )

    def general_sign_report(
        self,
        sign: str,
        data: Optional[TwoPersonBirthData] = None,
        *,
        primary: Optional[BirthData] = None,
        secondary: Optional[BirthData] = None,
        orb: Optional[float] = None,
        response_model=None,
    ):
        """`sign` is the planet whose sign is reported on ("sun", "moon", …)."""
        return self.call(
            "general_sign_report",
            data,
            path_params={"sign": sign},
            primary=primary,
            secondary=secondary,
            orb=orb,
            response_model=response_model,
        )

    def general_house_report(
        self,
        data: Optional[TwoPersonBirthData] = None,
        *,
        primary: Optional[BirthData] = None,
        secondary: Optional[BirthData] = None,
        orb: Optional[float] = None,
        response_model=None,
    ):
        return self.call(
            "general_house_report",
            data,
            primary=primary,
            secondary=secondary,
            orb=orb,
            response_model=response_model,
        )

    # ── Tarot ────────────────────────────────────────────────────────

    def tarot_predictions(self, scores: TarotScores, response_model=None):
        return self.call("tarot_predictions", scores, response_model=response_model)


class AstrologyAPI(_OperationMethods):
    """Synchronous client (requests)."""

    def __init__(
        self,
        config: ClientConfig,
        session: Optional[requests.Session] = None,
        transport: Optional[FormTransport] = None,
    ):
        self.config = config
        self.transport = transport or FormTransport(config, session=session)

    def _dispatch(self, request: PreparedRequest, response_model=None):
        logger.debug(f"{request.operation} → {request.path}")
        data = self.transport.post(request.path, request.form)
        return parse_response(data, response_model)

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> "AstrologyAPI":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class AsyncAstrologyAPI(_OperationMethods):
    """
    asyncio client (httpx). Methods validate and encode immediately, then
    return a coroutine that performs the request.
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: Optional[AsyncFormTransport] = None,
    ):
        self.config = config
        self.transport = transport or AsyncFormTransport(config)

    def _dispatch(self, request: PreparedRequest, response_model=None):
        logger.debug(f"{request.operation} → {request.path}")
        return self._send(request, response_model)

    async def _send(self, request: PreparedRequest, response_model=None):
        data = await self.transport.post(request.path, request.form)
        return parse_response(data, response_model)

    async def aclose(self) -> None:
        await self.transport.aclose()

    async def __aenter__(self) -> "AsyncAstrologyAPI":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
