"""
Form encoder — birth-data models → flat `application/x-www-form-urlencoded` bodies.

AstrologyAPI is inconsistent about how it names the fields of a two-person
request, so three body formats exist:

  SINGLE     day, month, year, hour, min, lat, lon, tzone
             (+ prediction_timezone on the tropical transit endpoints)
  COMPOSITE  p_day … p_tzone  +  s_day … s_tzone  (+ orb)
  HYBRID     day … tzone      +  s_day … s_tzone  (+ orb)

HYBRID is what the general ascendant / sign / house reports accept; they
reject COMPOSITE bodies with "day is required". Which operation uses which
format is decided in endpoints.py, never here.

Every numeric value goes through format_number() so all formats render
numbers identically.
"""
from decimal import Decimal
from enum import Enum
from typing import Callable, Dict, Optional

from astroclient.errors import InputValidationError
from astroclient.models.birth_data import (
    BirthData,
    TarotScores,
    TransitBirthData,
    TwoPersonBirthData,
)

FormData = Dict[str, str]

# Field order matters only for readability of logged bodies.
BIRTH_FIELDS = ("day", "month", "year", "hour", "min", "lat", "lon", "tzone")

PRIMARY_PREFIX = "p_"
SECONDARY_PREFIX = "s_"


class FormFormat(str, Enum):
    SINGLE = "single"
    COMPOSITE = "composite"
    HYBRID = "hybrid"


# ─────────────────────────────────────────────
# Numbers
# ─────────────────────────────────────────────

def format_number(value) -> str:
    """
    Canonical number → string rendering used for every form field.

    Integral values lose their fractional part (1.0 → "1"), everything else
    uses the shortest round-trip digits in plain decimal notation
    (19.20 → "19.2", 0.00001 → "0.00001", never "1e-05"). Never locale-aware.
    """
    if isinstance(value, bool):
        raise InputValidationError(f"Expected a number, got bool {value!r}")
    if isinstance(value, int):
        return str(value)
    number = float(value)
    if number.is_integer():
        return str(int(number))
    return format(Decimal(repr(number)), "f")


# ─────────────────────────────────────────────
# Building blocks
# ─────────────────────────────────────────────

def _require(value, name: str):
    if value is None:
        raise InputValidationError(f"{name} is required")
    return value


def _person_fields(person: BirthData, prefix: str = "") -> FormData:
    return {f"{prefix}{field}": format_number(getattr(person, field)) for field in BIRTH_FIELDS}


def _with_orb(form: FormData, orb: Optional[float]) -> FormData:
    # orb is omitted entirely when unset; the API treats "" and "0" as values
    if orb is not None:
        form["orb"] = format_number(orb)
    return form


def _pair_members(data: TwoPersonBirthData):
    _require(data, "two-person birth data")
    return _require(data.primary, "primary"), _require(data.secondary, "secondary")


# ─────────────────────────────────────────────
# Encoders (one per format)
# ─────────────────────────────────────────────

def encode_single(data: BirthData) -> FormData:
    """SINGLE format: the eight birth fields, whatever subclass `data` is."""
    _require(data, "birth data")
    return _person_fields(data)


def encode_transit(data: TransitBirthData) -> FormData:
    """SINGLE format plus `prediction_timezone`, for the tropical transit endpoints."""
    form = encode_single(data)
    form["prediction_timezone"] = format_number(data.prediction_timezone)
    return form


def encode_composite(data: TwoPersonBirthData) -> FormData:
    """COMPOSITE format: `p_` primary, `s_` secondary, optional orb."""
    primary, secondary = _pair_members(data)
    form = _person_fields(primary, PRIMARY_PREFIX)
    form.update(_person_fields(secondary, SECONDARY_PREFIX))
    return _with_orb(form, data.orb)


def _hybrid_form(primary: BirthData, secondary: BirthData, orb: Optional[float]) -> FormData:
    form = _person_fields(primary)
    form.update(_person_fields(secondary, SECONDARY_PREFIX))
    return _with_orb(form, orb)


def encode_hybrid(data: TwoPersonBirthData) -> FormData:
    """HYBRID format from a TwoPersonBirthData."""
    primary, secondary = _pair_members(data)
    return _hybrid_form(primary, secondary, data.orb)


def encode_hybrid_pair(
    primary: BirthData,
    secondary: BirthData,
    orb: Optional[float] = None,
) -> FormData:
    """HYBRID format from two separate birth records."""
    return _hybrid_form(_require(primary, "primary"), _require(secondary, "secondary"), orb)


def encode_tarot(data: TarotScores) -> FormData:
    _require(data, "tarot scores")
    return {
        "love": format_number(data.love),
        "career": format_number(data.career),
        "finance": format_number(data.finance),
    }


ENCODERS: Dict[FormFormat, Callable[..., FormData]] = {
    FormFormat.SINGLE: encode_single,
    FormFormat.COMPOSITE: encode_composite,
    FormFormat.HYBRID: encode_hybrid,
}


def encode(form_format: FormFormat, data) -> FormData:
    """Encode `data` with the encoder registered for `form_format`."""
    return ENCODERS[form_format](data)
