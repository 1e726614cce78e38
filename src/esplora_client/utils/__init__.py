r"""Utility functions for the retry logic.

This package provides the Retry-After header parsing and the
exponential backoff computation used by the retry executors.
"""

from __future__ import annotations

__all__ = ["compute_next_delay", "parse_retry_after"]

from esplora_client.utils.backoff import compute_next_delay
from esplora_client.utils.retry_after import parse_retry_after
