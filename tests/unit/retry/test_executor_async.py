r"""Unit tests for asynchronous retry executor."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from esplora_client.exceptions import EsploraTransportError
from esplora_client.retry import AsyncRetryExecutor, RetryConfig
from esplora_client.transport import AsyncBaseTransport, RawResponse, Request
from tests.helpers import AsyncScriptedTransport, mock_async_transport

TEST_REQUEST = Request("GET", "https://esplora.example.com/api/blocks/tip/height")


def make_executor(
    transport: AsyncBaseTransport,
    max_retries: int = 3,
    status_forcelist: tuple[int, ...] = (429, 500, 503),
    **kwargs: object,
) -> AsyncRetryExecutor:
    return AsyncRetryExecutor(
        transport,
        RetryConfig(
            max_retries=max_retries,
            status_forcelist=status_forcelist,
            base_delay=0.256,
            **kwargs,
        ),
    )


########################################
#     Tests for AsyncRetryExecutor     #
########################################


def test_async_retry_executor_creation() -> None:
    """Test AsyncRetryExecutor initialization."""
    transport = AsyncScriptedTransport(RawResponse(status=200))
    config = RetryConfig(max_retries=3, status_forcelist=(429,), base_delay=0.256)
    executor = AsyncRetryExecutor(transport, config)

    assert executor.transport is transport
    assert executor.config is config


@pytest.mark.asyncio
async def test_async_retry_executor_successful_request(mock_asleep: Mock) -> None:
    """Test successful request without retries."""
    transport = AsyncScriptedTransport(RawResponse(status=200, body=b"840000"))
    response = await make_executor(transport).execute(TEST_REQUEST)

    assert response.status == 200
    assert transport.requests == [TEST_REQUEST]
    mock_asleep.assert_not_called()


@pytest.mark.asyncio
async def test_async_retry_executor_retry_then_success(mock_asleep: Mock) -> None:
    """Test that retryable responses are retried until success."""
    transport = AsyncScriptedTransport(
        RawResponse(status=500), RawResponse(status=503), RawResponse(status=200)
    )
    response = await make_executor(transport).execute(TEST_REQUEST)

    assert response.status == 200
    assert len(transport.requests) == 3
    assert [c.args[0] for c in mock_asleep.call_args_list] == pytest.approx([0.512, 1.024])


@pytest.mark.asyncio
async def test_async_retry_executor_exhausts_retries(mock_asleep: Mock) -> None:
    """Test that an always failing server gets max_retries + 1 attempts
    and the last response is returned."""
    transport = AsyncScriptedTransport(RawResponse(status=503))
    response = await make_executor(transport, max_retries=3).execute(TEST_REQUEST)

    assert response.status == 503
    assert len(transport.requests) == 4
    assert mock_asleep.call_count == 3


@pytest.mark.asyncio
async def test_async_retry_executor_zero_retries(mock_asleep: Mock) -> None:
    """Test that max_retries=0 makes exactly one attempt."""
    transport = AsyncScriptedTransport(RawResponse(status=429))
    response = await make_executor(transport, max_retries=0).execute(TEST_REQUEST)

    assert response.status == 429
    assert len(transport.requests) == 1
    mock_asleep.assert_not_called()


@pytest.mark.asyncio
async def test_async_retry_executor_not_found_not_retried(mock_asleep: Mock) -> None:
    """Test that 404 is returned at once."""
    transport = AsyncScriptedTransport(RawResponse(status=404))
    response = await make_executor(transport).execute(TEST_REQUEST)

    assert response.status == 404
    assert len(transport.requests) == 1
    mock_asleep.assert_not_called()


@pytest.mark.asyncio
async def test_async_retry_executor_retry_after_seconds(mock_asleep: Mock) -> None:
    """Test that the Retry-After header sets the wait."""
    transport = AsyncScriptedTransport(
        RawResponse(status=429, headers={"Retry-After": "3"}), RawResponse(status=200)
    )
    response = await make_executor(transport).execute(TEST_REQUEST)

    assert response.status == 200
    mock_asleep.assert_called_once_with(3.0)


@pytest.mark.asyncio
async def test_async_retry_executor_status_forcelist_override(mock_asleep: Mock) -> None:
    """Test that the retry set can be overridden per call."""
    transport = AsyncScriptedTransport(RawResponse(status=500))
    response = await make_executor(transport).execute(TEST_REQUEST, status_forcelist=(429,))

    assert response.status == 500
    assert len(transport.requests) == 1
    mock_asleep.assert_not_called()


@pytest.mark.asyncio
async def test_async_retry_executor_on_retry(mock_asleep: Mock, mock_callback: Mock) -> None:
    """Test that on_retry is invoked before each sleep."""
    transport = AsyncScriptedTransport(RawResponse(status=429), RawResponse(status=200))
    await make_executor(transport, on_retry=mock_callback).execute(TEST_REQUEST)

    mock_callback.assert_called_once()
    assert mock_callback.call_args.args[0].status_code == 429
    assert mock_asleep.call_count == 1


@pytest.mark.asyncio
async def test_async_retry_executor_transport_error_not_retried(mock_asleep: Mock) -> None:
    """Test that transport failures propagate without retry."""
    transport = Mock(spec=AsyncBaseTransport)
    transport.send = AsyncMock(
        side_effect=EsploraTransportError(
            method="GET", url=TEST_REQUEST.url, message="request timed out"
        )
    )

    with pytest.raises(EsploraTransportError, match=r"timed out"):
        await make_executor(transport).execute(TEST_REQUEST)

    transport.send.assert_awaited_once_with(TEST_REQUEST)
    mock_asleep.assert_not_called()


@pytest.mark.asyncio
async def test_async_retry_executor_cancelled_during_backoff() -> None:
    """Test that cancelling the task during the backoff sleep stops the
    loop without further attempts."""
    sent = asyncio.Event()

    class SignalingTransport(AsyncScriptedTransport):
        async def send(self, request: Request) -> RawResponse:
            response = await super().send(request)
            sent.set()
            return response

    transport = SignalingTransport(RawResponse(status=503))
    executor = AsyncRetryExecutor(
        transport, RetryConfig(max_retries=3, status_forcelist=(503,), base_delay=30.0)
    )
    task = asyncio.create_task(executor.execute(TEST_REQUEST))
    await sent.wait()
    await asyncio.sleep(0)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert len(transport.requests) == 1


@pytest.mark.asyncio
async def test_async_retry_executor_with_httpx_transport(mock_asleep: Mock) -> None:
    """Test the executor end to end with an httpx mock transport."""
    statuses = iter([429, 200])

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(next(statuses), text="ok")

    response = await make_executor(mock_async_transport(handler)).execute(TEST_REQUEST)

    assert response.status == 200
    assert mock_asleep.call_count == 1


@pytest.mark.asyncio
async def test_async_retry_executor_with_httpx_timeout(mock_asleep: Mock) -> None:
    """Test that httpx timeouts surface as EsploraTransportError."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(EsploraTransportError, match=r"timed out") as exc_info:
        await make_executor(mock_async_transport(handler)).execute(TEST_REQUEST)

    assert isinstance(exc_info.value.cause, httpx.ReadTimeout)
    mock_asleep.assert_not_called()
