"""Tests for the remote call retry wrapper"""

from __future__ import annotations

import json
import logging

import pytest

from podcast_summary.domain.models.remote_error import ErrorKind, RemoteCallError
from podcast_summary.infrastructure.retry import (
    QUOTA_FAILURE_TYPE,
    RETRY_INFO_TYPE,
    RetryExhaustedError,
    classify_error,
    extract_error_payload,
    get_quota_violations,
    get_retry_delay,
    retry_with_backoff,
)


class FlakyOperation:
    """Callable that raises the queued errors before returning a result"""

    def __init__(self, errors=None, result="ok", always_fail_with=None):
        self.errors = list(errors or [])
        self.result = result
        self.always_fail_with = always_fail_with
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.always_fail_with is not None:
            raise self.always_fail_with
        if self.errors:
            raise self.errors.pop(0)
        return self.result


def _rate_limit_error(delay: str | None = None, violations=None) -> RemoteCallError:
    details = []
    if delay is not None:
        details.append({"@type": RETRY_INFO_TYPE, "retryDelay": delay})
    if violations is not None:
        details.append({"@type": QUOTA_FAILURE_TYPE, "violations": violations})
    return RemoteCallError("429 RESOURCE_EXHAUSTED", status_code=429, details=details)


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def fake_sleep(sleeps):
    return sleeps.append


class TestRetryWithBackoff:
    """Tests for retry_with_backoff"""

    def test_first_attempt_success_does_not_sleep(self, sleeps, fake_sleep):
        operation = FlakyOperation(result="summary")

        assert retry_with_backoff(operation, sleep=fake_sleep) == "summary"
        assert operation.calls == 1
        assert sleeps == []

    def test_generic_failures_back_off_exponentially(self, sleeps, fake_sleep):
        operation = FlakyOperation(always_fail_with=RuntimeError("boom"))

        with pytest.raises(RetryExhaustedError) as exc_info:
            retry_with_backoff(operation, 5, sleep=fake_sleep)

        assert operation.calls == 5
        assert sleeps == [2.0, 4.0, 8.0, 16.0]
        assert exc_info.value.attempts == 5

    def test_recovers_after_two_failures(self, sleeps, fake_sleep):
        operation = FlakyOperation(
            errors=[RuntimeError("first"), RuntimeError("second")], result="third"
        )

        assert retry_with_backoff(operation, 5, sleep=fake_sleep) == "third"
        assert operation.calls == 3
        assert sleeps == [2.0, 4.0]

    def test_exhaustion_message_keeps_original_error(self, fake_sleep):
        original = RuntimeError("service unavailable")
        operation = FlakyOperation(always_fail_with=original)

        with pytest.raises(RetryExhaustedError, match="Failed after 3 attempts: service unavailable"):
            retry_with_backoff(operation, 3, sleep=fake_sleep)

    def test_exhaustion_is_chained_to_last_error(self, fake_sleep):
        original = RuntimeError("boom")
        operation = FlakyOperation(always_fail_with=original)

        with pytest.raises(RetryExhaustedError) as exc_info:
            retry_with_backoff(operation, 2, sleep=fake_sleep)

        assert exc_info.value.last_error is original
        assert exc_info.value.__cause__ is original

    def test_single_attempt_never_sleeps(self, sleeps, fake_sleep):
        operation = FlakyOperation(always_fail_with=RuntimeError("boom"))

        with pytest.raises(RetryExhaustedError, match="Failed after 1 attempts"):
            retry_with_backoff(operation, 1, sleep=fake_sleep)
        assert sleeps == []

    def test_base_delay_scales_backoff(self, sleeps, fake_sleep):
        operation = FlakyOperation(errors=[RuntimeError("a"), RuntimeError("b")])

        retry_with_backoff(operation, 5, base_delay_ms=500, sleep=fake_sleep)

        assert sleeps == [1.0, 2.0]

    def test_rate_limit_uses_server_delay(self, sleeps, fake_sleep):
        operation = FlakyOperation(errors=[_rate_limit_error("7s")])

        assert retry_with_backoff(operation, sleep=fake_sleep) == "ok"
        assert sleeps == [7.0]

    def test_rate_limit_delay_in_error_text(self, sleeps, fake_sleep):
        payload = {
            "error": {
                "code": 429,
                "message": "Resource has been exhausted",
                "details": [{"@type": RETRY_INFO_TYPE, "retryDelay": "13s"}],
            }
        }
        error = RuntimeError(f"[429 Too Many Requests] {json.dumps(payload)}")
        operation = FlakyOperation(errors=[error])

        retry_with_backoff(operation, sleep=fake_sleep)

        assert sleeps == [13.0]

    def test_rate_limit_without_delay_falls_back_to_backoff(self, sleeps, fake_sleep):
        operation = FlakyOperation(errors=[_rate_limit_error(), _rate_limit_error()])

        retry_with_backoff(operation, sleep=fake_sleep)

        assert sleeps == [2.0, 4.0]

    def test_rate_limit_retries_share_attempt_budget(self, sleeps, fake_sleep):
        operation = FlakyOperation(always_fail_with=_rate_limit_error("1s"))

        with pytest.raises(RetryExhaustedError, match="Failed after 3 attempts"):
            retry_with_backoff(operation, 3, sleep=fake_sleep)

        assert operation.calls == 3
        assert sleeps == [1.0, 1.0]

    def test_mixed_failures_follow_each_classification(self, sleeps, fake_sleep):
        operation = FlakyOperation(
            errors=[RuntimeError("boom"), _rate_limit_error("30s"), RuntimeError("boom")]
        )

        retry_with_backoff(operation, 5, sleep=fake_sleep)

        assert sleeps == [2.0, 30.0, 8.0]

    def test_quota_violations_are_logged(self, caplog, fake_sleep):
        caplog.set_level(logging.WARNING, logger="podcast_summary.infrastructure.retry")
        error = _rate_limit_error("5s", violations=[{"quotaId": "A", "quotaValue": 10}])
        operation = FlakyOperation(errors=[error])

        retry_with_backoff(operation, sleep=fake_sleep)

        assert "Rate limit reached (attempt 1/5)" in caplog.text
        assert "quota ID: A" in caplog.text
        assert "value: 10" in caplog.text
        assert "Waiting 5 seconds" in caplog.text

    def test_final_attempt_logs_no_retry(self, caplog, fake_sleep):
        caplog.set_level(logging.WARNING, logger="podcast_summary.infrastructure.retry")
        operation = FlakyOperation(always_fail_with=RuntimeError("boom"))

        with pytest.raises(RetryExhaustedError):
            retry_with_backoff(operation, 3, sleep=fake_sleep)

        retry_lines = [r.getMessage() for r in caplog.records if "Retrying in" in r.getMessage()]
        assert retry_lines == [
            "Retrying in 2 seconds... (attempt 1/3)",
            "Retrying in 4 seconds... (attempt 2/3)",
        ]

    def test_rate_limit_wait_logged_once_per_sleep(self, caplog, sleeps, fake_sleep):
        caplog.set_level(logging.WARNING, logger="podcast_summary.infrastructure.retry")
        operation = FlakyOperation(always_fail_with=_rate_limit_error("9s"))

        with pytest.raises(RetryExhaustedError):
            retry_with_backoff(operation, 2, sleep=fake_sleep)

        waits = [r for r in caplog.records if "Waiting 9 seconds" in r.getMessage()]
        assert len(waits) == 1
        assert sleeps == [9.0]

    def test_invalid_max_retries(self):
        with pytest.raises(ValueError, match="max_retries"):
            retry_with_backoff(lambda: "ok", 0)

    def test_invalid_base_delay(self):
        with pytest.raises(ValueError, match="base_delay_ms"):
            retry_with_backoff(lambda: "ok", base_delay_ms=0)

    def test_defaults_to_time_sleep(self, monkeypatch):
        sleeps = []
        monkeypatch.setattr("time.sleep", sleeps.append)
        operation = FlakyOperation(errors=[RuntimeError("boom")])

        retry_with_backoff(operation, base_delay_ms=1)

        assert sleeps == [pytest.approx(0.002)]


class TestClassifyError:
    """Tests for classify_error"""

    def test_plain_error_is_transient(self):
        classification = classify_error(RuntimeError("connection reset"))
        assert classification.kind == ErrorKind.TRANSIENT
        assert classification.retry_delay is None

    def test_malformed_payload_is_always_transient(self):
        error = RuntimeError("bad gateway {not: json}")
        first = classify_error(error)
        second = classify_error(error)
        assert first.kind == ErrorKind.TRANSIENT
        assert first == second

    def test_non_rate_limit_status_is_transient(self):
        error = RemoteCallError("500 INTERNAL", status_code=500)
        assert classify_error(error).kind == ErrorKind.TRANSIENT

    def test_typed_rate_limit(self):
        error = _rate_limit_error("41s", violations=[{"quotaId": "PerMinute", "quotaValue": "15"}])
        classification = classify_error(error)

        assert classification.is_rate_limit
        assert classification.retry_delay == 41
        assert classification.quota_violations[0].quota_id == "PerMinute"
        assert classification.quota_violations[0].quota_value == "15"

    def test_unparsable_rate_limit_details(self, caplog):
        caplog.set_level(logging.WARNING, logger="podcast_summary.infrastructure.retry")
        error = RemoteCallError("429", status_code=429, details=["not-a-dict"])

        classification = classify_error(error)

        assert classification.is_rate_limit
        assert classification.retry_delay is None
        assert "Could not parse rate limit details" in caplog.text

    def test_unwrapped_payload(self):
        message = 'quota: {"code": 429, "details": []}'
        assert classify_error(RuntimeError(message)).is_rate_limit


class TestPayloadHelpers:
    """Tests for payload parsing helpers"""

    def test_extract_payload_without_braces(self):
        assert extract_error_payload("timeout") is None

    def test_extract_payload_wrapped(self):
        payload = extract_error_payload('prefix {"error": {"code": 429}} suffix')
        assert payload == {"code": 429}

    def test_extract_payload_non_object(self):
        assert extract_error_payload("{}") == {}
        assert extract_error_payload('{"error": "oops"}') is None

    def test_retry_delay_fractional_seconds(self):
        details = [{"@type": RETRY_INFO_TYPE, "retryDelay": "41.5s"}]
        assert get_retry_delay(details) == 41

    def test_retry_delay_missing(self):
        assert get_retry_delay([{"@type": QUOTA_FAILURE_TYPE}]) is None
        assert get_retry_delay([{"@type": RETRY_INFO_TYPE, "retryDelay": "soon"}]) is None

    def test_detail_type_matched_by_suffix(self):
        details = [
            {"@type": "google.rpc.QuotaFailure", "violations": [{"quotaId": "Q", "quotaValue": 1}]},
            {"@type": "google.rpc.RetryInfo", "retryDelay": "12s"},
        ]
        assert get_retry_delay(details) == 12
        assert get_quota_violations(details)[0].quota_id == "Q"

    def test_other_detail_types_ignored(self):
        details = [{"@type": "type.googleapis.com/google.rpc.ErrorInfo", "retryDelay": "12s"}]
        assert get_retry_delay(details) is None
        assert get_quota_violations(details) == []
