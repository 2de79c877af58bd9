"""MoonDream — client facade for the Moondream vision API."""
import aiohttp

from moondream.config import ClientConfig
from moondream.constants import MSG_ALREADY_ENTERED
from moondream.models import (
    CaptionLength,
    CaptionRequest,
    CaptionResult,
    DetectRequest,
    DetectResult,
    ImagePayload,
    PointRequest,
    PointResult,
    QueryRequest,
    QueryResult,
)
from moondream.transport import Transport

Image = ImagePayload | bytes | str


class MoonDream:
    """Typed access to the ``/point``, ``/detect``, ``/caption`` and ``/query`` endpoints.

    Use :meth:`MoonDream.remote` with an API key for the hosted service, or
    :meth:`MoonDream.local` for an unauthenticated self-hosted deployment.
    Every operation issues exactly one HTTP call and either returns a fully
    populated result or raises one :class:`moondream.errors.MoondreamError` kind.

    Configuration is fixed at construction, so one instance can serve many
    concurrent calls. Used as an async context manager, the client shares a
    single ``aiohttp.ClientSession`` across the calls made inside the block;
    otherwise each call opens its own.
    """

    def __init__(self, config: ClientConfig, session: aiohttp.ClientSession | None = None) -> None:
        self._config = config
        self._session = session
        self._owned_session: aiohttp.ClientSession | None = None
        self._transport = Transport(config, session)

    @classmethod
    def local(cls, endpoint: str, **options) -> "MoonDream":
        return cls(ClientConfig.local(endpoint, **options))

    @classmethod
    def remote(cls, token: str, **options) -> "MoonDream":
        return cls(ClientConfig.remote(token, **options))

    @classmethod
    def from_env(cls) -> "MoonDream":
        return cls(ClientConfig.from_env())

    @property
    def config(self) -> ClientConfig:
        return self._config

    # ── session scope ─────────────────────────────────────────────────────────

    async def __aenter__(self) -> "MoonDream":
        match (self._session, self._owned_session):
            case (None, None):
                self._owned_session = self._transport.open_session()
                return MoonDream(self._config, self._owned_session)
            case (None, _):
                raise RuntimeError(MSG_ALREADY_ENTERED)
            case _:
                return self

    async def __aexit__(self, *exc_info) -> None:
        match self._owned_session:
            case None:
                pass
            case session:
                await session.close()
                self._owned_session = None

    # ── operations ────────────────────────────────────────────────────────────

    async def point(self, image: Image, label: str) -> PointResult:
        """Centre points of every ``label`` instance in the image."""
        request = PointRequest(ImagePayload.of(image), label)
        return await self._transport.call(request.path, request.to_body(), PointResult)

    points = point

    async def detect(self, image: Image, label: str) -> DetectResult:
        """Bounding boxes of every ``label`` instance in the image."""
        request = DetectRequest(ImagePayload.of(image), label)
        return await self._transport.call(request.path, request.to_body(), DetectResult)

    async def caption(
        self, image: Image, length: CaptionLength | str = CaptionLength.NORMAL
    ) -> CaptionResult:
        """Describe the image, briefly or at normal length."""
        request = CaptionRequest(ImagePayload.of(image), length)
        return await self._transport.call(request.path, request.to_body(), CaptionResult)

    async def query(self, image: Image, question: str) -> QueryResult:
        """Answer a natural-language question about the image."""
        request = QueryRequest(ImagePayload.of(image), question)
        return await self._transport.call(request.path, request.to_body(), QueryResult)

    def __repr__(self) -> str:
        return f"MoonDream({self._config!r})"
