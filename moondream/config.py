"""ClientConfig — endpoint, auth mode and per-request header resolution."""
from dataclasses import dataclass, field
from enum import Enum
import os

import aiohttp
from dotenv import load_dotenv
from multidict import CIMultiDict

from moondream.constants import (
    BEARER_PREFIX,
    CONTENT_TYPE_JSON,
    DEFAULT_TIMEOUT_SECONDS,
    ENV_API_KEY,
    ENV_ENDPOINT,
    ENV_TIMEOUT,
    HEADER_ACCEPT,
    HEADER_AUTHORIZATION,
    HEADER_CONTENT_TYPE,
    HOSTED_ENDPOINT,
    MSG_BAD_ENDPOINT,
    MSG_BAD_ENV_TIMEOUT,
    MSG_BAD_TIMEOUT,
    MSG_EMPTY_ENDPOINT,
    MSG_EMPTY_TOKEN,
    MSG_MISSING_API_KEY,
)
from moondream.errors import ValidationError


class AuthMode(Enum):
    LOCAL = "local"
    REMOTE = "remote"


@dataclass(frozen=True)
class ClientConfig:
    endpoint: str
    auth_mode: AuthMode
    token: str | None = None
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    headers: tuple[tuple[str, str], ...] = ()
    trace_configs: tuple[aiohttp.TraceConfig, ...] = field(default=(), compare=False)

    def __post_init__(self) -> None:
        match self.endpoint:
            case None | "":
                raise ValidationError(MSG_EMPTY_ENDPOINT)
            case str() as e if not e.startswith(("http://", "https://")):
                raise ValidationError(MSG_BAD_ENDPOINT % e)
            case str() as e:
                object.__setattr__(self, "endpoint", e.rstrip("/"))
            case _:
                raise ValidationError(MSG_EMPTY_ENDPOINT)

        match (self.auth_mode, self.token):
            case (AuthMode.REMOTE, None | ""):
                raise ValidationError(MSG_EMPTY_TOKEN)
            case (AuthMode.LOCAL, _):
                object.__setattr__(self, "token", None)
            case _:
                pass

        match self.timeout:
            case bool():
                raise ValidationError(MSG_BAD_TIMEOUT)
            case int() | float() as t if t > 0:
                pass
            case _:
                raise ValidationError(MSG_BAD_TIMEOUT)

        object.__setattr__(self, "headers", tuple(dict(self.headers).items()))
        object.__setattr__(self, "trace_configs", tuple(self.trace_configs))

    # ── factories ─────────────────────────────────────────────────────────────

    @classmethod
    def local(cls, endpoint: str, **options) -> "ClientConfig":
        """Self-hosted deployment: no authorization header is ever attached."""
        return cls(endpoint=endpoint, auth_mode=AuthMode.LOCAL, **options)

    @classmethod
    def remote(cls, token: str, endpoint: str = HOSTED_ENDPOINT, **options) -> "ClientConfig":
        """Hosted service: the bearer token is attached to every request."""
        return cls(endpoint=endpoint, auth_mode=AuthMode.REMOTE, token=token, **options)

    @classmethod
    def from_env(cls) -> "ClientConfig":
        load_dotenv()

        endpoint = os.getenv(ENV_ENDPOINT) or None
        api_key = os.getenv(ENV_API_KEY) or None
        raw_timeout = os.getenv(ENV_TIMEOUT) or None

        options = {}
        match raw_timeout:
            case None:
                pass
            case str() as t:
                try:
                    options["timeout"] = float(t)
                except ValueError:
                    raise ValidationError(MSG_BAD_ENV_TIMEOUT % t) from None

        match (endpoint, api_key):
            case (str() as e, _):
                return cls.local(e, **options)
            case (None, str() as k):
                return cls.remote(k, **options)
            case _:
                raise ValidationError(MSG_MISSING_API_KEY)

    # ── request resolution ────────────────────────────────────────────────────

    def url_for(self, path: str) -> str:
        return f"{self.endpoint}/{path.lstrip('/')}"

    def request_headers(self) -> CIMultiDict:
        """Caller headers first; JSON content type and authorization always win."""
        headers = CIMultiDict(self.headers)
        headers.setdefault(HEADER_ACCEPT, CONTENT_TYPE_JSON)
        headers.popall(HEADER_CONTENT_TYPE, None)
        headers[HEADER_CONTENT_TYPE] = CONTENT_TYPE_JSON
        headers.popall(HEADER_AUTHORIZATION, None)
        match self.auth_mode:
            case AuthMode.REMOTE:
                headers[HEADER_AUTHORIZATION] = BEARER_PREFIX + self.token
            case AuthMode.LOCAL:
                pass
        return headers

    def __repr__(self) -> str:
        token = "***" if self.token else None
        return (
            f"ClientConfig(endpoint={self.endpoint!r}, auth_mode={self.auth_mode.value}, "
            f"token={token}, timeout={self.timeout})"
        )
