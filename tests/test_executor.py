"""RequestExecutor: deadline, status classification and cleanup."""
import asyncio
import json

import httpx
import pytest

from fakes import BASE_URL, ChunkedBody
from vl_client.constants import DEFAULT_TIMEOUT
from vl_client.errors import HttpError, NetworkError, RequestTimeoutError
from vl_client.transport.executor import RequestExecutor, _error_message


class FailingBody(ChunkedBody):
    """Error body whose connection drops before any byte arrives."""

    def __init__(self) -> None:
        super().__init__([])

    async def __aiter__(self):
        raise httpx.ReadError("connection reset")
        yield b""


def make_executor(handler, timeout: float | None = None) -> tuple[RequestExecutor, httpx.Request]:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    request = http.build_request("POST", f"{BASE_URL}/caption", json={"image": "x"})
    return RequestExecutor(http, timeout), request


# ── success ───────────────────────────────────────────────────────────────────


async def test_success_returns_unconsumed_response():
    body = ChunkedBody([b'{"caption": "ok"}'])
    executor, request = make_executor(lambda r: httpx.Response(200, stream=body))

    response = await executor.execute(request)

    assert response.status_code == 200
    assert not response.is_stream_consumed
    assert body.pulled == 0
    assert json.loads(await response.aread()) == {"caption": "ok"}


async def test_response_before_deadline_succeeds():
    async def slow(request):
        await asyncio.sleep(0.02)
        return httpx.Response(200, json={})

    executor, request = make_executor(slow, timeout=0.5)

    response = await executor.execute(request)

    assert response.status_code == 200


# ── timeout ───────────────────────────────────────────────────────────────────


async def test_deadline_aborts_with_fixed_message():
    async def never_in_time(request):
        await asyncio.sleep(0.2)
        return httpx.Response(200, json={})

    executor, request = make_executor(never_in_time, timeout=0.1)

    with pytest.raises(RequestTimeoutError, match="The operation was aborted"):
        await executor.execute(request)


async def test_timeout_error_is_builtin_timeout_error():
    async def never_in_time(request):
        await asyncio.sleep(0.2)
        return httpx.Response(200, json={})

    executor, request = make_executor(never_in_time, timeout=0.05)

    with pytest.raises(TimeoutError):
        await executor.execute(request)


async def test_falsy_timeout_means_default():
    executor, _ = make_executor(lambda r: httpx.Response(200), timeout=0)
    assert executor.timeout == DEFAULT_TIMEOUT


async def test_falsy_per_call_timeout_uses_executor_timeout():
    async def slow(request):
        await asyncio.sleep(0.05)
        return httpx.Response(200, json={})

    executor, request = make_executor(slow, timeout=1.0)

    response = await executor.execute(request, timeout=0)

    assert response.status_code == 200


async def test_per_call_timeout_overrides_executor_timeout():
    async def slow(request):
        await asyncio.sleep(0.2)
        return httpx.Response(200, json={})

    executor, request = make_executor(slow, timeout=5.0)

    with pytest.raises(RequestTimeoutError):
        await executor.execute(request, timeout=0.05)


async def test_deadline_is_disarmed_after_success():
    executor, request = make_executor(lambda r: httpx.Response(200, json={}), timeout=0.05)

    await executor.execute(request)

    # A leaked deadline would cancel this task during the sleep.
    await asyncio.sleep(0.1)


async def test_deadline_is_disarmed_after_http_error():
    executor, request = make_executor(lambda r: httpx.Response(503), timeout=0.05)

    with pytest.raises(HttpError):
        await executor.execute(request)

    await asyncio.sleep(0.1)


# ── HTTP errors ───────────────────────────────────────────────────────────────


async def test_http_error_uses_message_from_body():
    executor, request = make_executor(
        lambda r: httpx.Response(400, json={"message": "Image too large"})
    )

    with pytest.raises(HttpError) as exc_info:
        await executor.execute(request)

    assert str(exc_info.value) == "Image too large"
    assert exc_info.value.status_code == 400


async def test_http_error_with_unparseable_body_mentions_status():
    executor, request = make_executor(
        lambda r: httpx.Response(500, content=b"<html>Internal Server Error</html>")
    )

    with pytest.raises(HttpError, match="500"):
        await executor.execute(request)


async def test_http_error_with_empty_body_synthesizes_message():
    executor, request = make_executor(lambda r: httpx.Response(500))

    with pytest.raises(HttpError) as exc_info:
        await executor.execute(request)

    assert str(exc_info.value) == "HTTP error! status: 500"


async def test_http_error_closes_response_body():
    body = ChunkedBody([b'{"message": "nope"}'])
    executor, request = make_executor(lambda r: httpx.Response(422, stream=body))

    with pytest.raises(HttpError, match="nope"):
        await executor.execute(request)

    assert body.closed


async def test_stalled_error_body_is_bounded_by_deadline():
    body = ChunkedBody([b'{"message": "x"}'], delay=5.0)
    executor, request = make_executor(lambda r: httpx.Response(500, stream=body), timeout=0.1)

    with pytest.raises(HttpError) as exc_info:
        await asyncio.wait_for(executor.execute(request), 1.0)

    assert str(exc_info.value) == "HTTP error! status: 500"
    assert exc_info.value.status_code == 500
    assert body.closed


async def test_error_body_read_failure_synthesizes_message():
    body = FailingBody()
    executor, request = make_executor(lambda r: httpx.Response(502, stream=body))

    with pytest.raises(HttpError) as exc_info:
        await executor.execute(request)

    assert str(exc_info.value) == "HTTP error! status: 502"
    assert body.closed


def test_error_message_ignores_non_object_json():
    assert _error_message(502, b'["message"]') == "HTTP error! status: 502"


def test_error_message_ignores_empty_message():
    assert _error_message(404, b'{"message": ""}') == "HTTP error! status: 404"


# ── network errors ────────────────────────────────────────────────────────────


async def test_transport_failure_becomes_network_error():
    def refuse(request):
        raise httpx.ConnectError("Connection refused", request=request)

    executor, request = make_executor(refuse)

    with pytest.raises(NetworkError, match="Connection refused") as exc_info:
        await executor.execute(request)

    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
