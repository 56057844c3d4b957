"""
Client configuration and HTTP Basic credentials.

A ClientConfig is built once (usually from Settings) and handed to a
client; the client derives its headers from it at construction and never
looks credentials up again.
"""
import base64
from typing import Dict

from pydantic import BaseModel, ConfigDict, SecretStr

from astroclient.errors import InputValidationError

DEFAULT_BASE_URL = "https://json.astrologyapi.com/v1"
DEFAULT_TIMEOUT = 30.0


class ClientConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: str
    api_key: SecretStr
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_settings(cls, settings) -> "ClientConfig":
        return cls(
            user_id=settings.ASTROLOGY_API_USER_ID,
            api_key=settings.ASTROLOGY_API_KEY,
            base_url=settings.ASTROLOGY_API_BASE_URL,
            timeout=settings.ASTROLOGY_API_TIMEOUT,
        )

    @property
    def has_credentials(self) -> bool:
        return bool(self.user_id.strip() and self.api_key.get_secret_value().strip())


def basic_auth_header(user_id: str, api_key: str) -> str:
    """`Basic base64(user_id:api_key)` — username is the account id, password the key."""
    if not user_id or not user_id.strip():
        raise InputValidationError("User ID cannot be empty")
    if not api_key or not api_key.strip():
        raise InputValidationError("API key cannot be empty")
    token = base64.b64encode(f"{user_id}:{api_key}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


def build_headers(config: ClientConfig) -> Dict[str, str]:
    """Headers attached to every request made with `config`."""
    return {
        "Authorization": basic_auth_header(config.user_id, config.api_key.get_secret_value()),
        "Accept": "application/json",
    }
