r"""Retry package implementing the retry loop shared by both transports.

Public API:
    - RetryConfig: Configuration for retry behavior
    - RetryDecider: Logic for deciding whether to retry
    - RetryState: Per-call retry bookkeeping
    - RetryExecutor: Synchronous retry executor
    - AsyncRetryExecutor: Asynchronous retry executor
"""

from __future__ import annotations

__all__ = [
    "AsyncRetryExecutor",
    "RetryConfig",
    "RetryDecider",
    "RetryExecutor",
    "RetryState",
    "is_retryable",
]

from esplora_client.retry.config import RetryConfig
from esplora_client.retry.decider import RetryDecider, is_retryable
from esplora_client.retry.executor import RetryExecutor
from esplora_client.retry.executor_async import AsyncRetryExecutor
from esplora_client.retry.executor_core import RetryState
