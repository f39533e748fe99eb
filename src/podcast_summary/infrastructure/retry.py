"""Retry utilities using tenacity.

``retry_with_backoff`` wraps a single remote model call. Rate-limited calls
wait for the delay suggested by the server, every other failure backs off
exponentially. The HTTP predicate below is shared with the page fetcher.
"""

from __future__ import annotations

import json
import logging
import re
import time
from typing import Any, Callable, Dict, List, Optional, TypeVar

import requests
from tenacity import (
    RetryCallState,
    RetryError,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
)

from podcast_summary.domain.models.remote_error import (
    ErrorClassification,
    ErrorKind,
    QuotaViolation,
    RemoteCallError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_RETRIES = 5
DEFAULT_BASE_DELAY_MS = 1000
RATE_LIMIT_STATUS = 429
RETRY_INFO_TYPE = "type.googleapis.com/google.rpc.RetryInfo"
QUOTA_FAILURE_TYPE = "type.googleapis.com/google.rpc.QuotaFailure"
RETRY_INFO_SUFFIX = "google.rpc.RetryInfo"
QUOTA_FAILURE_SUFFIX = "google.rpc.QuotaFailure"

_DELAY_PATTERN = re.compile(r"^\s*(\d+)")


class RetryExhaustedError(RuntimeError):
    """Raised once every attempt of a remote call has failed."""

    def __init__(self, attempts: int, last_error: BaseException):
        super().__init__(f"Failed after {attempts} attempts: {last_error}")
        self.attempts = attempts
        self.last_error = last_error


def should_retry_http_error(exception: requests.exceptions.HTTPError) -> bool:
    """Check if HTTPError should be retried."""
    response = exception.response
    status_code = response.status_code if response is not None else None
    # Don't retry on auth errors or most 4xx (except 429)
    if status_code in (401, 403):
        return False
    if status_code and 400 <= status_code < 500 and status_code != RATE_LIMIT_STATUS:
        return False
    # Retry on 429 and 5xx
    return True


def extract_error_payload(message: str) -> Optional[Dict[str, Any]]:
    """Find the JSON error object embedded in an error message.

    The payload spans from the first ``{`` to the last ``}``; it may be the
    error object itself or wrapped as ``{"error": {...}}``.

    Returns:
        The error object, or None when the message holds no parsable payload
    """
    start = message.find("{")
    end = message.rfind("}")
    if start == -1 or end < start:
        return None
    try:
        payload = json.loads(message[start : end + 1])
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    error = payload.get("error", payload)
    return error if isinstance(error, dict) else None


def get_retry_delay(details: List[Dict[str, Any]]) -> Optional[int]:
    """Extract the server-suggested retry delay, in whole seconds."""
    for detail in details:
        if not str(detail.get("@type", "")).endswith(RETRY_INFO_SUFFIX):
            continue
        raw_delay = detail.get("retryDelay")
        if not raw_delay:
            return None
        match = _DELAY_PATTERN.match(str(raw_delay))
        return int(match.group(1)) if match else None
    return None


def get_quota_violations(details: List[Dict[str, Any]]) -> List[QuotaViolation]:
    """Collect the quota violations reported in the error details."""
    for detail in details:
        if not str(detail.get("@type", "")).endswith(QUOTA_FAILURE_SUFFIX):
            continue
        return [
            QuotaViolation(quota_id=v.get("quotaId"), quota_value=v.get("quotaValue"))
            for v in detail.get("violations") or []
        ]
    return []


def classify_error(error: BaseException) -> ErrorClassification:
    """Classify a failed attempt as rate limited or transient.

    Typed RemoteCallErrors are read directly. Any other exception is scanned
    for an embedded JSON payload; anything unparsable is transient.
    """
    if isinstance(error, RemoteCallError):
        status_code = error.status_code
        details = error.details
    else:
        payload = extract_error_payload(str(error))
        if payload is None:
            return ErrorClassification()
        status_code = payload.get("code")
        details = payload.get("details") or []

    if status_code != RATE_LIMIT_STATUS:
        return ErrorClassification()

    try:
        delay = get_retry_delay(details)
        violations = get_quota_violations(details)
    except (AttributeError, TypeError) as e:
        logger.warning(f"Could not parse rate limit details: {e}")
        return ErrorClassification(kind=ErrorKind.RATE_LIMIT)

    return ErrorClassification(
        kind=ErrorKind.RATE_LIMIT,
        retry_delay=delay,
        quota_violations=violations,
    )


def retry_with_backoff(
    operation: Callable[[], T],
    max_retries: int = DEFAULT_MAX_RETRIES,
    *,
    base_delay_ms: int = DEFAULT_BASE_DELAY_MS,
    sleep: Optional[Callable[[float], None]] = None,
    description: str = "Remote call",
) -> T:
    """Run a remote call, retrying on rate limits and transient failures.

    Every failure counts against ``max_retries``. A rate-limited failure that
    carries a retry delay waits that many seconds; any other failure waits
    ``base_delay_ms * 2^n`` where n is the number of failures so far.

    Args:
        operation: Zero-argument callable doing exactly one remote call
        max_retries: Maximum number of attempts, including the first one
        base_delay_ms: Base of the exponential backoff in milliseconds
        sleep: Sleep function (defaults to time.sleep)
        description: Name of the call used in log messages

    Returns:
        Whatever the operation returned

    Raises:
        RetryExhaustedError: If the operation failed max_retries times
    """
    if max_retries < 1:
        raise ValueError("max_retries must be >= 1")
    if base_delay_ms <= 0:
        raise ValueError("base_delay_ms must be positive")

    def _log_failure(retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception()
        attempt = retry_state.attempt_number
        logger.debug(f"{description} failed (attempt {attempt}/{max_retries}): {error}")
        classification = classify_error(error)
        if not classification.is_rate_limit:
            return
        logger.warning(f"Rate limit reached (attempt {attempt}/{max_retries})")
        for violation in classification.quota_violations:
            logger.warning(
                f"Quota violation - quota ID: {violation.quota_id}, value: {violation.quota_value}"
            )

    def _wait(retry_state: RetryCallState) -> float:
        classification = classify_error(retry_state.outcome.exception())
        if classification.is_rate_limit and classification.retry_delay:
            return float(classification.retry_delay)
        return base_delay_ms / 1000.0 * (2**retry_state.attempt_number)

    def _log_retry(retry_state: RetryCallState) -> None:
        # Only called when a sleep and another attempt follow
        classification = classify_error(retry_state.outcome.exception())
        attempt = retry_state.attempt_number
        delay = retry_state.next_action.sleep
        if classification.is_rate_limit and classification.retry_delay:
            logger.warning(f"Waiting {delay:g} seconds before retry...")
        else:
            logger.warning(f"Retrying in {delay:g} seconds... (attempt {attempt}/{max_retries})")

    retrying = Retrying(
        stop=stop_after_attempt(max_retries),
        wait=_wait,
        retry=retry_if_exception_type(Exception),
        after=_log_failure,
        before_sleep=_log_retry,
        sleep=sleep or time.sleep,
    )

    try:
        return retrying(operation)
    except RetryError as e:
        last_error = e.last_attempt.exception()
        attempts = e.last_attempt.attempt_number
        logger.error(f"{description} failed after {attempts} attempts: {last_error}")
        raise RetryExhaustedError(attempts, last_error) from last_error
