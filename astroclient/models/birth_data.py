"""
Pydantic models for the request payloads sent to AstrologyAPI.

All payloads are frozen value objects: built by the caller right before a
request, handed to the form encoder, then discarded. Ranges (day 1-31,
tarot 0-100, ...) are deliberately not enforced here; the remote service
validates them.
"""
from pydantic import BaseModel, ConfigDict
from typing import Optional


class BirthData(BaseModel):
    """Birth moment and place for one person (single-person endpoints)."""
    model_config = ConfigDict(frozen=True)

    day: int        # 1–31
    month: int      # 1–12
    year: int
    hour: int       # 0–23
    min: int        # 0–59
    lat: float      # degrees, north positive
    lon: float      # degrees, east positive
    tzone: float    # hours from UTC, e.g. 5.5


class PrimaryBirthData(BirthData):
    """The first person of a two-person calculation."""


class SecondaryBirthData(BirthData):
    """The second person of a two-person calculation."""


class TwoPersonBirthData(BaseModel):
    """
    Both people of a synastry / compatibility calculation.

    `primary` and `secondary` may be left unset at construction time, but
    the encoder refuses to build a request body until both are present.
    `orb` is only sent when set.
    """
    model_config = ConfigDict(frozen=True)

    primary: Optional[PrimaryBirthData] = None
    secondary: Optional[SecondaryBirthData] = None
    orb: Optional[float] = None


class TransitBirthData(BirthData):
    """Birth data plus the timezone the transit prediction is computed for."""
    prediction_timezone: float = 0.0


class TarotScores(BaseModel):
    """Tarot prediction scores, nominally 0–100 each."""
    model_config = ConfigDict(frozen=True)

    love: int
    career: int
    finance: int
