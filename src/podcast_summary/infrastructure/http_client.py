"""Shared HTTP client utilities (requests + retry/backoff).

Page fetches and downloads go through here so they share one retry policy.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

import requests
from tenacity import (
    before_sleep_log,
    retry as tenacity_retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from podcast_summary.domain.config.retry import RetryConfig
from podcast_summary.infrastructure.retry import should_retry_http_error

logger = logging.getLogger(__name__)

MAX_HTTP_BACKOFF = 60.0


def get_with_retries(
    url: str,
    *,
    timeout: float,
    retry: RetryConfig,
    headers: Optional[Dict[str, str]] = None,
    stream: bool = False,
) -> requests.Response:
    """GET a URL with retry on network errors, 429 and 5xx.

    Raises:
        requests.HTTPError: On a non-retryable status, or the last retryable one
        RuntimeError: If the request could not be completed
    """

    def _retry_condition(exception: BaseException) -> bool:
        if isinstance(exception, requests.exceptions.HTTPError):
            return should_retry_http_error(exception)
        # Retry network errors
        return isinstance(exception, requests.exceptions.RequestException)

    @tenacity_retry(
        stop=stop_after_attempt(retry.max_attempts),
        wait=wait_exponential(
            multiplier=retry.base_delay,
            exp_base=2,
            min=retry.base_delay,
            max=MAX_HTTP_BACKOFF,
        ),
        retry=retry_if_exception(_retry_condition),
        reraise=True,
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )
    def _request_with_retry() -> requests.Response:
        logger.debug(f"HTTP GET {url}")
        resp = requests.get(url, headers=headers, timeout=timeout, stream=stream)
        resp.raise_for_status()
        return resp

    try:
        return _request_with_retry()
    except requests.exceptions.HTTPError:
        raise
    except Exception as e:
        raise RuntimeError(f"HTTP request failed: {e}") from e
