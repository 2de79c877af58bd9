"""Transport — one POST per operation, mapped to a typed result or a typed error."""
import asyncio
import json
import logging
import time
from typing import Any, TypeVar

import aiohttp
import pydantic
from pydantic import BaseModel

from moondream.config import ClientConfig
from moondream.constants import (
    MSG_BAD_SHAPE,
    MSG_NETWORK_FAILED,
    MSG_NETWORK_TIMEOUT,
    MSG_NOT_JSON,
    MSG_RECEIVED,
    MSG_SENDING,
)
from moondream.errors import ApiStatusError, DecodeError, NetworkError
from moondream.models import ErrorEnvelope

logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT", bound=BaseModel)


# ── response mapping (module-level so tests can import them directly) ─────────


def _is_success(status: int) -> bool:
    return 200 <= status < 300


def parse_error(status: int, text: str) -> ApiStatusError:
    """Best-effort read of the error envelope; falls back to the bare status."""
    try:
        envelope = ErrorEnvelope.model_validate_json(text)
    except (pydantic.ValidationError, ValueError):
        return ApiStatusError(status)
    return ApiStatusError(status, envelope.error.code, envelope.error.message)


def parse_result(model: type[ResultT], status: int, text: str) -> ResultT:
    match _is_success(status):
        case False:
            raise parse_error(status, text)
        case True:
            pass

    try:
        payload = json.loads(text)
    except ValueError as exc:
        raise DecodeError(MSG_NOT_JSON, body=text) from exc

    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as exc:
        raise DecodeError(MSG_BAD_SHAPE % (model.__name__, exc), body=text) from exc


# ── dispatch ──────────────────────────────────────────────────────────────────


class Transport:
    """Owns the single outbound call per operation. No retries, no caching."""

    def __init__(self, config: ClientConfig, session: aiohttp.ClientSession | None = None) -> None:
        self._config = config
        self._session = session

    @property
    def config(self) -> ClientConfig:
        return self._config

    def open_session(self) -> aiohttp.ClientSession:
        return aiohttp.ClientSession(trace_configs=list(self._config.trace_configs) or None)

    async def post(self, path: str, body: dict[str, Any]) -> tuple[int, str]:
        """POST ``body`` as JSON to ``path``; return the status and raw body text."""
        url = self._config.url_for(path)
        match self._session:
            case None:
                async with self.open_session() as session:
                    return await self._send(session, url, body)
            case session:
                return await self._send(session, url, body)

    async def call(self, path: str, body: dict[str, Any], model: type[ResultT]) -> ResultT:
        status, text = await self.post(path, body)
        return parse_result(model, status, text)

    async def _send(
        self, session: aiohttp.ClientSession, url: str, body: dict[str, Any]
    ) -> tuple[int, str]:
        logger.debug(MSG_SENDING, url)
        start = time.monotonic()
        try:
            async with session.post(
                url,
                json=body,
                headers=self._config.request_headers(),
                timeout=aiohttp.ClientTimeout(total=self._config.timeout),
            ) as response:
                text = await response.text(errors="replace")
                status = response.status
        except asyncio.TimeoutError as exc:
            raise NetworkError(MSG_NETWORK_TIMEOUT % (url, self._config.timeout)) from exc
        except aiohttp.ClientError as exc:
            raise NetworkError(MSG_NETWORK_FAILED % (url, exc)) from exc

        logger.debug(MSG_RECEIVED, url, status, (time.monotonic() - start) * 1000)
        return status, text
