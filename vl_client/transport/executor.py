"""RequestExecutor — one HTTP request bounded by a wall-clock deadline."""
import asyncio
import json
import logging

import httpx

from vl_client.constants import (
    DEFAULT_TIMEOUT,
    ERROR_MESSAGE_FIELD,
    MSG_ABORTED,
    MSG_ERROR_BODY_ABORTED,
    MSG_ERROR_BODY_UNREADABLE,
    MSG_HTTP_ERROR,
    MSG_HTTP_FAILED,
    MSG_NETWORK_FAILED,
    MSG_RECEIVED,
    MSG_SENDING,
    MSG_TIMED_OUT,
)
from vl_client.errors import HttpError, NetworkError, RequestTimeoutError

logger = logging.getLogger(__name__)


def _error_payload(body: bytes) -> dict:
    """Best-effort JSON object from an error body; anything else counts as {}."""
    try:
        payload = json.loads(body) if body else {}
    except ValueError:
        return {}
    match payload:
        case dict():
            return payload
        case _:
            return {}


async def _read_error_body(response: httpx.Response) -> bytes:
    try:
        return await response.aread()
    finally:
        await response.aclose()


def _error_message(status_code: int, body: bytes) -> str:
    match _error_payload(body).get(ERROR_MESSAGE_FIELD):
        case message if message:
            return str(message)
        case _:
            return MSG_HTTP_ERROR % status_code


class RequestExecutor:
    """Sends requests through an httpx client and classifies every failure.

    The deadline covers sending the request, receiving the response headers
    and, for non-2xx responses, reading the error body. A successful
    response is returned still open with its body unread.
    """

    def __init__(self, client: httpx.AsyncClient, timeout: float | None = None) -> None:
        self._client = client
        self.timeout = timeout or DEFAULT_TIMEOUT

    async def execute(
        self, request: httpx.Request, timeout: float | None = None
    ) -> httpx.Response:
        seconds = timeout or self.timeout
        url = str(request.url)
        logger.debug(MSG_SENDING, request.method, url, seconds)

        response: httpx.Response | None = None
        error_body = b""
        try:
            async with asyncio.timeout(seconds):
                response = await self._client.send(request, stream=True)
                if not response.is_success:
                    error_body = await _read_error_body(response)
        except TimeoutError as exc:
            if response is None:
                logger.warning(MSG_TIMED_OUT, url, seconds)
                raise RequestTimeoutError(MSG_ABORTED) from exc
            logger.warning(MSG_ERROR_BODY_ABORTED, url, seconds)
        except httpx.TransportError as exc:
            if response is None:
                logger.warning(MSG_NETWORK_FAILED, url, exc)
                raise NetworkError(str(exc) or type(exc).__name__) from exc
            logger.debug(MSG_ERROR_BODY_UNREADABLE, url, exc)

        logger.debug(MSG_RECEIVED, response.status_code, url)
        if not response.is_success:
            message = _error_message(response.status_code, error_body)
            logger.warning(MSG_HTTP_FAILED, url, response.status_code, message)
            raise HttpError(message, response.status_code)
        return response
