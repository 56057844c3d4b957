"""
Endpoint dispatcher — operation name → (path, payload kind, body format).

The table below is static. Two-person operations use the COMPOSITE body
except the names in HYBRID_OPERATIONS; that set was found by calling the
live service and cannot be derived from the endpoint names, so it is an
explicit allow-list rather than a pattern.

prepare() is the only entry point the clients use: it validates the
payload shape and path parameters, then encodes the body. Nothing is sent
if it raises.
"""
import string
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple
from urllib.parse import quote

from astroclient.errors import InputValidationError
from astroclient.models.birth_data import (
    BirthData,
    TarotScores,
    TransitBirthData,
    TwoPersonBirthData,
)
from astroclient.services.form_encoder import (
    FormData,
    FormFormat,
    encode,
    encode_hybrid_pair,
    encode_tarot,
    encode_transit,
)


class PayloadKind(str, Enum):
    BIRTH = "birth"         # BirthData
    TRANSIT = "transit"     # TransitBirthData
    PAIR = "pair"           # TwoPersonBirthData (or primary + secondary for HYBRID)
    TAROT = "tarot"         # TarotScores


HYBRID_OPERATIONS = frozenset({
    "general_ascendant_report",
    "general_sign_report",
    "general_house_report",
})


@dataclass(frozen=True)
class Operation:
    name: str
    path: str                               # may contain {placeholders}
    kind: PayloadKind
    form_format: Optional[FormFormat]       # None only for TAROT

    @property
    def path_params(self) -> Tuple[str, ...]:
        return tuple(
            field for _, field, _, _ in string.Formatter().parse(self.path) if field
        )


@dataclass(frozen=True)
class PreparedRequest:
    operation: str
    path: str
    form: FormData


def _op(name: str, path: str, kind: PayloadKind) -> Operation:
    if kind in (PayloadKind.BIRTH, PayloadKind.TRANSIT):
        form_format = FormFormat.SINGLE
    elif kind is PayloadKind.PAIR:
        form_format = FormFormat.HYBRID if name in HYBRID_OPERATIONS else FormFormat.COMPOSITE
    else:
        form_format = None
    return Operation(name=name, path=path, kind=kind, form_format=form_format)


_B, _T, _P = PayloadKind.BIRTH, PayloadKind.TRANSIT, PayloadKind.PAIR

OPERATIONS: Dict[str, Operation] = {op.name: op for op in (
    # Western horoscope / charts
    _op("western_horoscope",               "western_horoscope",                           _B),
    _op("western_chart_data",              "western_horoscope",                           _B),
    _op("natal_wheel_chart",               "natal_wheel_chart",                           _B),
    _op("personalized_planet_prediction",  "personalized_planet_prediction/daily/{planet}", _B),

    # Tropical transits
    _op("tropical_transits_daily",         "tropical_transits/daily",                     _T),
    _op("tropical_transits_weekly",        "tropical_transits/weekly",                    _T),
    _op("tropical_transits_monthly",       "tropical_transits/monthly",                   _T),

    # Solar return / lunar
    _op("solar_return_details",            "solar_return_details",                        _B),
    _op("solar_return_planets",            "solar_return_planets",                        _B),
    _op("solar_return_house_cusps",        "solar_return_house_cusps",                    _B),
    _op("solar_return_planet_aspects",     "solar_return_planet_aspects",                 _B),
    _op("lunar_metrics",                   "lunar_metrics",                               _B),

    # Single-person reports
    _op("personality_report",              "personality_report/tropical",                 _B),
    _op("romantic_personality_report",     "romantic_personality_report/tropical",        _B),
    _op("life_forecast_report",            "life_forecast_report/tropical",               _B),
    _op("romantic_forecast_report",        "romantic_forecast_report/tropical",           _B),

    # Two-person
    _op("synastry_horoscope",              "synastry_horoscope",                          _P),
    _op("friendship_report",               "friendship_report/tropical",                  _P),
    _op("karma_destiny_report",            "karma_destiny_report/tropical",               _P),
    _op("love_compatibility_report",       "love_compatibility_report/tropical",          _P),
    _op("romantic_forecast_couple_report", "romantic_forecast_couple_report/tropical",    _P),
    _op("general_ascendant_report",        "general_ascendant_report/tropical",           _P),
    _op("general_sign_report",             "general_sign_report/tropical/{sign}",         _P),
    _op("general_house_report",            "general_house_report/tropical",               _P),
    _op("zodiac_compatibility",            "zodiac_compatibility/{zodiac_name}/{partner_zodiac_name}", _P),
    _op("compatibility",
        "compatibility/{sun_sign}/{rising_sign}/{partner_sun_sign}/{partner_rising_sign}", _P),

    # Tarot
    _op("tarot_predictions",               "tarot_predictions",                           PayloadKind.TAROT),
)}

_PAYLOAD_TYPES = {
    PayloadKind.BIRTH: BirthData,
    PayloadKind.TRANSIT: TransitBirthData,
    PayloadKind.PAIR: TwoPersonBirthData,
    PayloadKind.TAROT: TarotScores,
}


def get_operation(name: str) -> Operation:
    try:
        return OPERATIONS[name]
    except KeyError:
        raise InputValidationError(f"Unknown operation: {name!r}") from None


def resolve_path(operation: Operation, path_params: Optional[Mapping[str, str]] = None) -> str:
    """Fill the operation's path template, rejecting missing or blank segments."""
    path_params = path_params or {}
    values = {}
    for param in operation.path_params:
        value = path_params.get(param)
        if value is None or not str(value).strip():
            raise InputValidationError(f"{param} cannot be empty for {operation.name}")
        values[param] = quote(str(value).strip(), safe="")

    unexpected = set(path_params) - set(operation.path_params)
    if unexpected:
        raise InputValidationError(
            f"{operation.name} takes no path parameter(s): {', '.join(sorted(unexpected))}"
        )
    return operation.path.format(**values)


def encode_payload(
    operation: Operation,
    payload=None,
    *,
    primary: Optional[BirthData] = None,
    secondary: Optional[BirthData] = None,
    orb: Optional[float] = None,
) -> FormData:
    """Check the payload shape against the operation and encode it."""
    separate = primary is not None or secondary is not None

    if separate:
        if operation.form_format is not FormFormat.HYBRID:
            raise InputValidationError(
                f"{operation.name} does not accept separate primary/secondary birth data"
            )
        if payload is not None:
            raise InputValidationError("Pass either a TwoPersonBirthData or primary/secondary, not both")
        return encode_hybrid_pair(primary, secondary, orb)

    if payload is None:
        raise InputValidationError(f"{operation.name} requires a {operation.kind.value} payload")

    expected = _PAYLOAD_TYPES[operation.kind]
    if not isinstance(payload, expected):
        raise InputValidationError(
            f"{operation.name} expects {expected.__name__}, got {type(payload).__name__}"
        )
    if orb is not None:
        raise InputValidationError("orb is only accepted together with primary/secondary")

    if operation.kind is PayloadKind.TAROT:
        return encode_tarot(payload)
    if operation.kind is PayloadKind.TRANSIT:
        return encode_transit(payload)
    return encode(operation.form_format, payload)


def prepare(
    name: str,
    payload=None,
    *,
    path_params: Optional[Mapping[str, str]] = None,
    primary: Optional[BirthData] = None,
    secondary: Optional[BirthData] = None,
    orb: Optional[float] = None,
) -> PreparedRequest:
    """Resolve path and body for one call of operation `name`."""
    operation = get_operation(name)
    path = resolve_path(operation, path_params)
    form = encode_payload(operation, payload, primary=primary, secondary=secondary, orb=orb)
    return PreparedRequest(operation=name, path=path, form=form)
