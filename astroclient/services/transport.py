"""
HTTP transports — POST a form body, return decoded JSON.

FormTransport       requests.Session, for plain synchronous code
AsyncFormTransport  httpx.AsyncClient, for asyncio; cancelling the awaiting
                    task aborts the in-flight request

Both treat any non-2xx status and any `{"status": false, ...}` envelope as a
RemoteRejectionError carrying the raw status and body. No retries.
"""
import json
import logging
from typing import Any, Optional

import httpx
import requests

from astroclient.errors import RemoteRejectionError, TransportError
from astroclient.services.auth import ClientConfig, build_headers
from astroclient.services.form_encoder import FormData

logger = logging.getLogger(__name__)


def build_url(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def _is_error_envelope(payload: Any) -> bool:
    return isinstance(payload, dict) and payload.get("status") is False


def decode_response(status_code: int, body: str, url: str) -> Any:
    """Decode a response body, raising RemoteRejectionError for failures."""
    try:
        payload = json.loads(body) if body.strip() else None
    except ValueError:
        payload = None
        if 200 <= status_code < 300:
            logger.warning(f"Non-JSON body from {url} (HTTP {status_code})")
            raise RemoteRejectionError(status_code, body, url=url)

    if not 200 <= status_code < 300:
        if status_code == 405:
            logger.warning(f"HTTP 405 from {url} — endpoint not included in license tier")
        else:
            logger.warning(f"HTTP {status_code} from {url}: {body[:200]}")
        raise RemoteRejectionError(status_code, body, url=url, payload=payload)

    if _is_error_envelope(payload):
        logger.warning(f"Error envelope from {url}: {body[:200]}")
        raise RemoteRejectionError(status_code, body, url=url, payload=payload)

    return payload


class FormTransport:
    """Synchronous transport on a shared requests.Session."""

    def __init__(self, config: ClientConfig, session: Optional[requests.Session] = None):
        self.base_url = config.base_url
        self.timeout = config.timeout
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.session.headers.update(build_headers(config))

    def post(self, path: str, form: FormData) -> Any:
        url = build_url(self.base_url, path)
        logger.debug(f"POST {url} ({len(form)} fields)")
        try:
            response = self.session.post(url, data=form, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"POST {url} failed: {e}", url=url) from e
        return decode_response(response.status_code, response.text, url)

    def close(self) -> None:
        if self._owns_session:
            self.session.close()


class AsyncFormTransport:
    """asyncio transport on a shared httpx.AsyncClient."""

    def __init__(
        self,
        config: ClientConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = config.base_url
        self._client = httpx.AsyncClient(
            headers=build_headers(config),
            timeout=config.timeout,
            transport=transport,
        )

    async def post(self, path: str, form: FormData) -> Any:
        url = build_url(self.base_url, path)
        logger.debug(f"POST {url} ({len(form)} fields)")
        try:
            response = await self._client.post(url, data=form)
        except httpx.HTTPError as e:
            raise TransportError(f"POST {url} failed: {e}", url=url) from e
        return decode_response(response.status_code, response.text, url)

    async def aclose(self) -> None:
        await self._client.aclose()
