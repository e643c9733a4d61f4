"""TextStream — lazily pulled text chunks over a streaming HTTP response."""
import asyncio
import codecs
import logging
import weakref
from collections.abc import AsyncGenerator

import httpx

from vl_client.constants import (
    MSG_BODY_NOT_READABLE,
    MSG_STREAM_ABANDONED,
    MSG_STREAM_RELEASED,
    STREAM_ENCODING,
)
from vl_client.errors import NetworkError, StreamUnavailableError

logger = logging.getLogger(__name__)

_pending_releases: set[asyncio.Task] = set()


async def _decode_chunks(response: httpx.Response) -> AsyncGenerator[str, None]:
    # Must not reference the owning TextStream, or dropping it leaves a cycle.
    decoder = codecs.getincrementaldecoder(STREAM_ENCODING)()
    count = 0
    try:
        async for raw in response.aiter_bytes():
            match decoder.decode(raw):
                case "":
                    continue
                case text:
                    count += 1
                    yield text
    except httpx.TransportError as exc:
        raise NetworkError(str(exc) or type(exc).__name__) from exc
    finally:
        await response.aclose()
        logger.debug(MSG_STREAM_RELEASED, count)


def _spawn_release(response: httpx.Response) -> None:
    task = asyncio.get_running_loop().create_task(response.aclose())
    _pending_releases.add(task)
    task.add_done_callback(_pending_releases.discard)


def _release_abandoned(
    response: httpx.Response, loop: asyncio.AbstractEventLoop | None
) -> None:
    """Finalizer for a dropped TextStream; runs outside any coroutine."""
    if response.is_closed or loop is None or loop.is_closed():
        return
    logger.debug(MSG_STREAM_ABANDONED)
    loop.call_soon_threadsafe(_spawn_release, response)


class TextStream:
    """Forward-only, single-pass async iterator of decoded text chunks.

    Owns the response exclusively. The response is closed when the body is
    exhausted, when a pull fails, on ``aclose()`` / ``async with`` exit, and
    when the caller drops the stream, pulled or not. A transport failure
    mid-body surfaces as ``NetworkError``.
    """

    def __init__(self, response: httpx.Response) -> None:
        if response.is_closed or response.is_stream_consumed:
            raise StreamUnavailableError(MSG_BODY_NOT_READABLE)
        self._response = response
        self._chunks = _decode_chunks(response)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        self._finalizer = weakref.finalize(self, _release_abandoned, response, loop)
        self._finalizer.atexit = False

    @property
    def closed(self) -> bool:
        return self._response.is_closed

    def __aiter__(self) -> "TextStream":
        return self

    async def __anext__(self) -> str:
        return await self._chunks.__anext__()

    async def aclose(self) -> None:
        self._finalizer.detach()
        await self._chunks.aclose()
        # aclose() on a generator that never started skips its finally block.
        await self._response.aclose()

    async def __aenter__(self) -> "TextStream":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
