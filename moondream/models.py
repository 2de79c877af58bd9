"""Request and result models for the /point, /detect, /caption and /query endpoints."""
import base64
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from moondream.constants import (
    FIELD_IMAGE,
    FIELD_LENGTH,
    FIELD_OBJECT,
    FIELD_QUESTION,
    MSG_BAD_LENGTH,
    MSG_EMPTY_IMAGE,
    MSG_EMPTY_OBJECT,
    MSG_EMPTY_QUESTION,
    PATH_CAPTION,
    PATH_DETECT,
    PATH_POINT,
    PATH_QUERY,
)
from moondream.errors import ValidationError


# ── image payload ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ImagePayload:
    """An encoded image attached to every request.

    ``bytes`` are base64-encoded on the wire. A ``str`` is taken as already
    encoded (plain base64 or a ``data:`` URI) and sent verbatim.
    """

    data: bytes | str

    def __post_init__(self) -> None:
        match self.data:
            case bytes() | str() as d if d and (isinstance(d, bytes) or d.strip()):
                pass
            case _:
                raise ValidationError(MSG_EMPTY_IMAGE)

    @classmethod
    def of(cls, image: "ImagePayload | bytes | str") -> "ImagePayload":
        match image:
            case ImagePayload():
                return image
            case _:
                return cls(image)

    @classmethod
    def from_file(cls, path: str | Path) -> "ImagePayload":
        return cls(Path(path).read_bytes())

    def encoded(self) -> str:
        match self.data:
            case bytes() as raw:
                return base64.standard_b64encode(raw).decode("ascii")
            case str() as text:
                return text


class CaptionLength(Enum):
    SHORT = "short"
    NORMAL = "normal"

    @classmethod
    def coerce(cls, value: "CaptionLength | str") -> "CaptionLength":
        match value:
            case CaptionLength():
                return value
            case str() as s:
                try:
                    return cls(s.lower())
                except ValueError:
                    pass
        raise ValidationError(MSG_BAD_LENGTH % ", ".join(m.value for m in cls))


def _require_text(value: str, message: str) -> str:
    match value:
        case str() as s if s.strip():
            return s
        case _:
            raise ValidationError(message)


# ── requests ──────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class PointRequest:
    image: ImagePayload
    label: str

    path = PATH_POINT

    def __post_init__(self) -> None:
        object.__setattr__(self, "image", ImagePayload.of(self.image))
        _require_text(self.label, MSG_EMPTY_OBJECT)

    def to_body(self) -> dict[str, Any]:
        return {FIELD_IMAGE: self.image.encoded(), FIELD_OBJECT: self.label}


@dataclass(frozen=True)
class DetectRequest:
    image: ImagePayload
    label: str

    path = PATH_DETECT

    def __post_init__(self) -> None:
        object.__setattr__(self, "image", ImagePayload.of(self.image))
        _require_text(self.label, MSG_EMPTY_OBJECT)

    def to_body(self) -> dict[str, Any]:
        return {FIELD_IMAGE: self.image.encoded(), FIELD_OBJECT: self.label}


@dataclass(frozen=True)
class CaptionRequest:
    image: ImagePayload
    length: CaptionLength = CaptionLength.NORMAL

    path = PATH_CAPTION

    def __post_init__(self) -> None:
        object.__setattr__(self, "image", ImagePayload.of(self.image))
        object.__setattr__(self, "length", CaptionLength.coerce(self.length))

    def to_body(self) -> dict[str, Any]:
        return {FIELD_IMAGE: self.image.encoded(), FIELD_LENGTH: self.length.value}


@dataclass(frozen=True)
class QueryRequest:
    image: ImagePayload
    question: str

    path = PATH_QUERY

    def __post_init__(self) -> None:
        object.__setattr__(self, "image", ImagePayload.of(self.image))
        _require_text(self.question, MSG_EMPTY_QUESTION)

    def to_body(self) -> dict[str, Any]:
        return {FIELD_IMAGE: self.image.encoded(), FIELD_QUESTION: self.question}


# ── results ───────────────────────────────────────────────────────────────────

Normalized = Annotated[float, Field(ge=0.0, le=1.0)]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Point(_Frozen):
    """Centre of a detected object, normalized to the image size (0-1)."""

    x: Normalized
    y: Normalized

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)

    def to_pixels(self, width: int, height: int) -> tuple[float, float]:
        return (self.x * width, self.y * height)


class BoundingBox(_Frozen):
    """Box around a detected object, normalized to the image size (0-1)."""

    x_min: Normalized
    y_min: Normalized
    x_max: Normalized
    y_max: Normalized

    @model_validator(mode="after")
    def _check_order(self) -> "BoundingBox":
        if self.x_min > self.x_max or self.y_min > self.y_max:
            raise ValueError("box minimum exceeds maximum")
        return self

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.x_min, self.y_min, self.x_max, self.y_max)

    def to_pixels(self, width: int, height: int) -> tuple[float, float, float, float]:
        return (
            self.x_min * width,
            self.y_min * height,
            self.x_max * width,
            self.y_max * height,
        )


class PointResult(_Frozen):
    points: tuple[Point, ...]
    request_id: str | None = None
    count: int | None = None


class DetectResult(_Frozen):
    objects: tuple[BoundingBox, ...]
    request_id: str | None = None


class CaptionResult(_Frozen):
    caption: str
    request_id: str | None = None


class QueryResult(_Frozen):
    answer: str
    request_id: str | None = None


# ── error envelope ────────────────────────────────────────────────────────────


class ErrorBody(BaseModel):
    """Each field is read on its own; an unusable one becomes ``None``."""

    code: str | int | None = None
    message: str | None = None

    @field_validator("code", mode="before")
    @classmethod
    def _lenient_code(cls, value: Any) -> str | int | None:
        match value:
            case bool():
                return str(value).lower()
            case str() | int() | None:
                return value
            case float() as f if f.is_integer():
                return int(f)
            case float():
                return str(value)
            case _:
                return None

    @field_validator("message", mode="before")
    @classmethod
    def _lenient_message(cls, value: Any) -> str | None:
        match value:
            case str():
                return value
            case _:
                return None


class ErrorEnvelope(BaseModel):
    """``{"error": {"code": ..., "message": ...}}`` returned with non-2xx statuses."""

    error: ErrorBody
