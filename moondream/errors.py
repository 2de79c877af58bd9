"""Error taxonomy — every public operation fails with exactly one of these kinds."""
from enum import Enum

from moondream.constants import MSG_STATUS_ERROR


class ErrorKind(Enum):
    NETWORK = "network"
    API_STATUS = "api_status"
    DECODE = "decode"
    VALIDATION = "validation"


class MoondreamError(Exception):
    """Base class for client failures. Only the four kinds below are raised."""

    kind: ErrorKind


class NetworkError(MoondreamError):
    """The endpoint could not be reached or the connection failed (DNS, refused, timeout)."""

    kind = ErrorKind.NETWORK


class ApiStatusError(MoondreamError):
    """The service answered with a non-2xx status.

    ``code`` and ``message`` are copied verbatim from the service's error
    envelope; both are ``None`` when the envelope is missing or malformed.
    """

    kind = ErrorKind.API_STATUS

    def __init__(
        self,
        status: int,
        code: str | int | None = None,
        message: str | None = None,
    ) -> None:
        self.status = status
        self.code = code
        self.message = message
        super().__init__(self._describe())

    def _describe(self) -> str:
        head = MSG_STATUS_ERROR % self.status
        match (self.code, self.message):
            case (None, None):
                return head
            case (code, None):
                return f"{head} [{code}]"
            case (None, message):
                return f"{head}: {message}"
            case (code, message):
                return f"{head} [{code}]: {message}"


class DecodeError(MoondreamError):
    """A 2xx response body was not valid JSON or did not have the expected shape."""

    kind = ErrorKind.DECODE

    def __init__(self, message: str, body: str | None = None) -> None:
        self.body = body
        super().__init__(message)


class ValidationError(MoondreamError):
    """A request parameter or configuration value failed a local precondition."""

    kind = ErrorKind.VALIDATION
