"""Public value types shared by the client and its callers."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from vl_client.transport.stream import TextStream


@dataclass(frozen=True)
class SamplingSettings:
    max_tokens: Optional[int] = None


@dataclass(frozen=True)
class EncodedImage:
    base64: str


@dataclass(frozen=True)
class CaptionOutput:
    caption: str | TextStream


@dataclass(frozen=True)
class QueryOutput:
    answer: str | TextStream


@dataclass(frozen=True)
class ClientConfig:
    base_url: Optional[str] = None
    timeout: Optional[float] = None
