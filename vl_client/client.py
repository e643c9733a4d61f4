"""VL — caption and query calls against a vision-language inference service."""
import logging
from typing import Any, NamedTuple, Optional

import httpx

from vl_client.config import Config, get_config
from vl_client.constants import (
    CAPTION_PATH,
    CONTENT_TYPE_HEADER,
    CONTENT_TYPE_JSON,
    DEFAULT_CAPTION_LENGTH,
    DEFAULT_TIMEOUT,
    FIELD_IMAGE,
    FIELD_LENGTH,
    FIELD_MAX_TOKENS,
    FIELD_QUESTION,
    FIELD_STREAM,
    HTTP_METHOD,
    MSG_BODY_NOT_JSON,
    MSG_CAPTION_FAILED,
    MSG_CLIENT_READY,
    MSG_MISSING_FIELD,
    MSG_QUERY_FAILED,
    QUERY_PATH,
    RESULT_ANSWER,
    RESULT_CAPTION,
)
from vl_client.encoding import image_to_base64
from vl_client.errors import NetworkError, ResponseFormatError, TaskError, VLError
from vl_client.transport.executor import RequestExecutor
from vl_client.transport.stream import TextStream
from vl_client.types import (
    CaptionOutput,
    ClientConfig,
    EncodedImage,
    QueryOutput,
    SamplingSettings,
)

logger = logging.getLogger(__name__)


class _Task(NamedTuple):
    path: str
    result_field: str
    failure_prefix: str


CAPTION_TASK = _Task(CAPTION_PATH, RESULT_CAPTION, MSG_CAPTION_FAILED)
QUERY_TASK = _Task(QUERY_PATH, RESULT_ANSWER, MSG_QUERY_FAILED)


async def _read_result(response: httpx.Response, field: str) -> Any:
    try:
        await response.aread()
    except httpx.TransportError as exc:
        raise NetworkError(str(exc) or type(exc).__name__) from exc
    finally:
        await response.aclose()

    try:
        data = response.json()
    except ValueError as exc:
        raise ResponseFormatError(MSG_BODY_NOT_JSON) from exc

    match data:
        case dict() if field in data:
            return data[field]
        case _:
            raise ResponseFormatError(MSG_MISSING_FIELD % field)


async def _open_stream(response: httpx.Response) -> TextStream:
    try:
        return TextStream(response)
    except VLError:
        await response.aclose()
        raise


class VL:
    """Client for the ``/caption`` and ``/query`` endpoints.

    Base URL, timeout and the default token limit are resolved once here and
    never re-read. Pass ``http_client`` to reuse an existing
    ``httpx.AsyncClient``; it is then left open by ``aclose()``.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        *,
        config: Optional[Config] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        defaults = config or get_config()
        self.base_url = (base_url or defaults.base_url).rstrip("/")
        self.timeout = timeout or DEFAULT_TIMEOUT
        self.max_tokens = defaults.max_tokens
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=httpx.Timeout(None))
        self._executor = RequestExecutor(self._http, self.timeout)
        logger.info(MSG_CLIENT_READY, self.base_url, self.timeout, self.max_tokens)

    @classmethod
    def from_client_config(
        cls, client_config: ClientConfig, **kwargs: Any
    ) -> "VL":
        return cls(client_config.base_url, client_config.timeout, **kwargs)

    # ── lifecycle ─────────────────────────────────────────────────────────────

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def __aenter__(self) -> "VL":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    # ── public API ────────────────────────────────────────────────────────────

    async def encode_image(self, image: Any) -> EncodedImage:
        match image:
            case EncodedImage():
                return image
            case _:
                return EncodedImage(base64=image_to_base64(image))

    async def caption(
        self,
        image: Any,
        length: str = DEFAULT_CAPTION_LENGTH,
        stream: bool = False,
        settings: Optional[SamplingSettings] = None,
    ) -> CaptionOutput:
        result = await self._submit(CAPTION_TASK, image, {FIELD_LENGTH: length}, stream, settings)
        return CaptionOutput(caption=result)

    async def query(
        self,
        image: Any,
        question: str,
        stream: bool = False,
        settings: Optional[SamplingSettings] = None,
    ) -> QueryOutput:
        result = await self._submit(QUERY_TASK, image, {FIELD_QUESTION: question}, stream, settings)
        return QueryOutput(answer=result)

    # ── internals ─────────────────────────────────────────────────────────────

    def resolve_max_tokens(self, settings: Optional[SamplingSettings] = None) -> int:
        return (settings and settings.max_tokens) or self.max_tokens

    def _build_request(
        self,
        task: _Task,
        image: EncodedImage,
        fields: dict[str, Any],
        stream: bool,
        max_tokens: int,
    ) -> httpx.Request:
        body = {
            FIELD_IMAGE: image.base64,
            **fields,
            FIELD_STREAM: stream,
            FIELD_MAX_TOKENS: max_tokens,
        }
        return self._http.build_request(
            HTTP_METHOD,
            f"{self.base_url}{task.path}",
            headers={CONTENT_TYPE_HEADER: CONTENT_TYPE_JSON},
            json=body,
        )

    async def _submit(
        self,
        task: _Task,
        image: Any,
        fields: dict[str, Any],
        stream: bool,
        settings: Optional[SamplingSettings],
    ) -> str | TextStream:
        try:
            encoded = await self.encode_image(image)
            request = self._build_request(
                task, encoded, fields, stream, self.resolve_max_tokens(settings)
            )
            response = await self._executor.execute(request)
            if stream:
                return await _open_stream(response)
            return await _read_result(response, task.result_field)
        except Exception as exc:
            kind = exc.kind if isinstance(exc, VLError) else VLError.kind
            logger.debug("%s (%s): %s", task.failure_prefix, kind, exc)
            raise TaskError(f"{task.failure_prefix}: {exc}", kind=kind) from exc
