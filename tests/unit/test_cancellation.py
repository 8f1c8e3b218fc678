"""Tests for CancellationToken."""

import threading

import pytest

from bashlike.core.cancellation import (
    CancellationReason,
    CancellationToken,
    PipelineCancelledError,
)
from bashlike.exceptions import BashlikeError, ErrorCode


@pytest.mark.unit
class TestCancellationToken:
    """Tests for the cancellation flag."""

    def test_new_token_is_active(self):
        """Test a fresh token is not cancelled."""
        token = CancellationToken()

        assert token.is_cancelled is False
        assert token.reason is None
        token.raise_if_cancelled()

    def test_cancel_sets_flag_and_reason(self):
        """Test cancel records the reason."""
        token = CancellationToken()
        token.cancel(CancellationReason.EXTERNAL)

        assert token.is_cancelled is True
        assert token.reason is CancellationReason.EXTERNAL

    def test_first_reason_wins(self):
        """Test later cancel calls do not overwrite the reason."""
        token = CancellationToken()
        token.cancel(CancellationReason.TIMEOUT)
        token.cancel(CancellationReason.USER_REQUESTED)

        assert token.reason is CancellationReason.TIMEOUT

    def test_raise_if_cancelled(self):
        """Test raise_if_cancelled raises a cancellation error."""
        token = CancellationToken()
        token.cancel()

        with pytest.raises(PipelineCancelledError) as exc_info:
            token.raise_if_cancelled()

        error = exc_info.value
        assert isinstance(error, BashlikeError)
        assert error.code is ErrorCode.CANCELLED
        assert error.to_dict()["details"] == {"reason": "user_requested"}

    def test_cancel_from_other_thread_wakes_waiter(self):
        """Test wait returns once another thread cancels."""
        token = CancellationToken()
        threading.Timer(0.01, token.cancel).start()

        assert token.wait(5) is True

    def test_wait_times_out(self):
        """Test wait returns False when nobody cancels."""
        assert CancellationToken().wait(0.01) is False

    def test_with_timeout(self):
        """Test a timed token cancels itself."""
        token = CancellationToken.with_timeout(0.01)

        assert token.wait(5) is True
        assert token.reason is CancellationReason.TIMEOUT

    def test_dispose_stops_timer(self):
        """Test dispose prevents a pending auto-cancel."""
        token = CancellationToken.with_timeout(0.05)
        token.dispose()

        assert token.wait(0.15) is False

    def test_negative_timeout_rejected(self):
        """Test with_timeout refuses a negative duration."""
        with pytest.raises(ValueError):
            CancellationToken.with_timeout(-1)

    def test_repr(self):
        """Test repr reflects state."""
        token = CancellationToken()
        assert repr(token) == "CancellationToken(active)"
        token.cancel(CancellationReason.TIMEOUT)
        assert repr(token) == "CancellationToken(timeout)"
