"""
License availability probe.

AstrologyAPI answers HTTP 405 for endpoints that are not part of the
account's plan. probe_availability() calls every operation once with fixed
sample data and records which ones the configured credentials can reach;
render_markdown() turns the result into a shareable report.

Calls run one after another so a probe never bursts the account's quota.
"""
import logging
from typing import List, Optional, Tuple

from astroclient.errors import RemoteRejectionError, TransportError
from astroclient.models.availability import AvailabilityReport, EndpointStatus
from astroclient.models.birth_data import (
    BirthData,
    PrimaryBirthData,
    SecondaryBirthData,
    TarotScores,
    TransitBirthData,
    TwoPersonBirthData,
)
from astroclient.services.astrology_api import AsyncAstrologyAPI
from astroclient.services.endpoints import prepare
from astroclient.services.transport import build_url

logger = logging.getLogger(__name__)

# ─────────────────────────────────────────────
# Sample payloads
# ─────────────────────────────────────────────

SAMPLE_BIRTH = BirthData(day=10, month=5, year=1990, hour=19, min=55, lat=19.20, lon=25.20, tzone=5.5)

SAMPLE_TRANSIT = TransitBirthData(
    day=10, month=5, year=1990, hour=19, min=55, lat=19.20, lon=25.20, tzone=5.5,
    prediction_timezone=0,
)

SAMPLE_PAIR = TwoPersonBirthData(
    primary=PrimaryBirthData(day=10, month=5, year=1990, hour=11, min=55, lat=19.20, lon=25.20, tzone=5.5),
    secondary=SecondaryBirthData(day=10, month=5, year=1990, hour=15, min=22, lat=19.33, lon=25.20, tzone=5.5),
    orb=1,
)

SAMPLE_TAROT = TarotScores(love=57, career=32, finance=54)

# (label, operation, payload, path_params)
PROBES: List[Tuple[str, str, object, Optional[dict]]] = [
    ("Western Horoscope",               "western_horoscope",               SAMPLE_BIRTH, None),
    ("Western Chart Data",              "western_chart_data",              SAMPLE_BIRTH, None),
    ("Western Chart Image",             "natal_wheel_chart",               SAMPLE_BIRTH, None),
    ("Planet Prediction (Mars)",        "personalized_planet_prediction",  SAMPLE_BIRTH, {"planet": "mars"}),
    ("Planet Prediction (Moon)",        "personalized_planet_prediction",  SAMPLE_BIRTH, {"planet": "moon"}),
    ("Tropical Transits Daily",         "tropical_transits_daily",         SAMPLE_TRANSIT, None),
    ("Tropical Transits Weekly",        "tropical_transits_weekly",        SAMPLE_TRANSIT, None),
    ("Tropical Transits Monthly",       "tropical_transits_monthly",       SAMPLE_TRANSIT, None),
    ("Solar Return Details",            "solar_return_details",            SAMPLE_BIRTH, None),
    ("Solar Return Planets",            "solar_return_planets",            SAMPLE_BIRTH, None),
    ("Solar Return House Cusps",        "solar_return_house_cusps",        SAMPLE_BIRTH, None),
    ("Solar Return Planet Aspects",     "solar_return_planet_aspects",     SAMPLE_BIRTH, None),
    ("Lunar Metrics",                   "lunar_metrics",                   SAMPLE_BIRTH, None),
    ("Synastry Horoscope",              "synastry_horoscope",              SAMPLE_PAIR, None),
    ("Personality Report",              "personality_report",              SAMPLE_BIRTH, None),
    ("Romantic Personality Report",     "romantic_personality_report",     SAMPLE_BIRTH, None),
    ("Life Forecast Report",            "life_forecast_report",            SAMPLE_BIRTH, None),
    ("Romantic Forecast Report",        "romantic_forecast_report",        SAMPLE_BIRTH, None),
    ("Friendship Report",               "friendship_report",               SAMPLE_PAIR, None),
    ("Karma Destiny Report",            "karma_destiny_report",            SAMPLE_PAIR, None),
    ("Love Compatibility Report",       "love_compatibility_report",       SAMPLE_PAIR, None),
    ("Romantic Forecast Couple Report", "romantic_forecast_couple_report", SAMPLE_PAIR, None),
    ("General Ascendant Report",        "general_ascendant_report",        SAMPLE_PAIR, None),
    ("General Sign Report (Sun)",       "general_sign_report",             SAMPLE_PAIR, {"sign": "sun"}),
    ("General House Report",            "general_house_report",            SAMPLE_PAIR, None),
    ("Zodiac Compatibility",            "zodiac_compatibility",            SAMPLE_PAIR,
        {"zodiac_name": "virgo", "partner_zodiac_name": "pisces"}),
    ("Compatibility",                   "compatibility",                   SAMPLE_PAIR,
        {"sun_sign": "leo", "rising_sign": "aries", "partner_sun_sign": "cancer", "partner_rising_sign": "virgo"}),
    ("Tarot Predictions",               "tarot_predictions",               SAMPLE_TAROT, None),
]

_REJECTION_OUTCOMES = {
    405: ("license", "405 Method Not Allowed - License not available for this endpoint"),
    401: ("unauthorized", "401 Unauthorized - Invalid credentials"),
    403: ("forbidden", "403 Forbidden - Access denied"),
    404: ("not_found", "404 Not Found - Endpoint not found"),
}


# ─────────────────────────────────────────────
# Probe
# ─────────────────────────────────────────────

def classify_rejection(error: RemoteRejectionError) -> Tuple[str, str]:
    """Map a rejection to (outcome, message)."""
    if error.status_code in _REJECTION_OUTCOMES:
        return _REJECTION_OUTCOMES[error.status_code]
    return "rejected", f"{error.status_code} - {error.body[:200]}"


async def probe_operation(
    api: AsyncAstrologyAPI,
    label: str,
    operation: str,
    payload,
    path_params: Optional[dict] = None,
) -> EndpointStatus:
    request = prepare(operation, payload, path_params=path_params)
    url = build_url(api.config.base_url, request.path)
    status = EndpointStatus(name=label, operation=operation, path=request.path, accessible=False, url=url)

    try:
        await api.call(operation, payload, path_params=path_params)
    except RemoteRejectionError as e:
        outcome, message = classify_rejection(e)
        return status.model_copy(update={
            "outcome": outcome,
            "status_code": e.status_code,
            "message": message,
            "response_body": e.body,
        })
    except TransportError as e:
        logger.error(f"[Availability] {label}: {e}")
        return status.model_copy(update={"outcome": "error", "message": f"Error: {e}"})

    return status.model_copy(update={"accessible": True, "outcome": "accessible", "status_code": 200})


async def probe_availability(api: AsyncAstrologyAPI) -> AvailabilityReport:
    """Call every endpoint once and report which ones the license covers."""
    report = AvailabilityReport(base_url=api.config.base_url)
    for label, operation, payload, path_params in PROBES:
        result = await probe_operation(api, label, operation, payload, path_params)
        report.results.append(result)
        logger.info(f"[Availability] {'✓' if result.accessible else '✗'} {label} ({result.outcome})")

    logger.info(
        f"[Availability] {len(report.accessible)} accessible, "
        f"{len(report.not_accessible)} not accessible"
    )
    return report


# ─────────────────────────────────────────────
# Markdown report
# ─────────────────────────────────────────────

def _detail_section(title: str, results: List[EndpointStatus]) -> List[str]:
    lines = ["", f"### {title}", ""]
    for r in results:
        lines += [
            f"#### {r.name}",
            "",
            f"**Full URL:** `{r.url}`",
            "",
            "**Full Response:**",
            "```",
            r.response_body or "",
            "```",
            "",
        ]
    return lines


def render_markdown(report: AvailabilityReport) -> str:
    accessible = report.accessible
    not_accessible = report.not_accessible

    lines = [
        "# API Availability Report",
        "",
        f"**Generated:** {report.generated_at.strftime('%Y-%m-%d %H:%M:%S')} UTC",
        "",
        f"**Base URL:** {report.base_url}",
        "",
        "---",
        "",
        "## Summary",
        "",
        f"- **Total APIs Tested:** {len(report.results)}",
        f"- **✅ Accessible:** {len(accessible)}",
        f"- **❌ Not Accessible:** {len(not_accessible)}",
        "",
        "---",
        "",
        "## ✅ Accessible APIs",
        "",
    ]

    if accessible:
        lines += ["| # | API Endpoint | Status |", "|---|--------------|--------|"]
        lines += [f"| {i} | {r.name} | ✅ Available |" for i, r in enumerate(accessible, 1)]
    else:
        lines.append("*No accessible APIs found.*")

    lines += [
        "",
        "---",
        "",
        "## ❌ Not Accessible APIs",
        "",
        "> **Note:** 405 (Method Not Allowed) means the endpoint is not included in your current license.",
        "",
    ]

    if not_accessible:
        lines += [
            "| # | API Endpoint | Status Code | Error Message | Full URL |",
            "|---|--------------|-------------|---------------|----------|",
        ]
        lines += [
            f"| {i} | {r.name} | {r.status_code or 'N/A'} | {r.message or 'Unknown error'} | {r.url or 'N/A'} |"
            for i, r in enumerate(not_accessible, 1)
        ]
        for code, title in ((405, "Detailed 405 Error Responses"), (404, "Detailed 404 Error Responses")):
            detailed = [r for r in not_accessible if r.status_code == code and r.response_body]
            if detailed:
                lines += _detail_section(title, detailed)
    else:
        lines.append("*All APIs are accessible.*")

    lines += [
        "",
        "---",
        "",
        "## License Information",
        "",
        "If you need access to APIs that are currently not available, "
        "contact your API provider to upgrade your license.",
        "",
    ]
    return "\n".join(lines)
