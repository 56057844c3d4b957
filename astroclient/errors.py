"""Exception hierarchy for the AstrologyAPI client."""
from typing import Any, Optional


class AstrologyAPIError(Exception):
    """Base class for every error raised by the client."""


class InputValidationError(AstrologyAPIError, ValueError):
    """
    Raised before any network call when a request cannot be built:
    a missing person record, a blank path segment, or a payload of the
    wrong shape for the operation.
    """


class TransportError(AstrologyAPIError):
    """Network-level failure (connect error, timeout, broken response)."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class RemoteRejectionError(AstrologyAPIError):
    """
    The remote service refused the request: either a non-2xx status or a
    `{"status": false, ...}` envelope. Status and body are kept untouched.
    """

    def __init__(
        self,
        status_code: int,
        body: str,
        url: Optional[str] = None,
        payload: Any = None,
    ):
        self.status_code = status_code
        self.body = body
        self.url = url
        self.payload = payload
        super().__init__(f"{status_code} from {url or 'AstrologyAPI'}: {body[:200]}")

    @property
    def endpoint_unavailable(self) -> bool:
        """True when the account's license tier does not include the endpoint."""
        return self.status_code == 405
