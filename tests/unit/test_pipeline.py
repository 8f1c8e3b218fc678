"""Tests for the sequential pipeline chain."""

import io
import threading

import pytest

from bashlike.core.cancellation import (
    CancellationReason,
    CancellationToken,
    PipelineCancelledError,
)
from bashlike.core.pipeline import Pipeline, Stage


def _append(char):
    def handler(token, stream):
        return io.StringIO(stream.read() + char)

    handler.__name__ = f"append_{char}"
    return handler


@pytest.mark.unit
class TestPipelineExecution:
    """Tests for Pipeline.execute."""

    def test_stages_run_in_order(self):
        """Test each stage sees the output of the previous one."""
        chain = Pipeline.of(_append("A"), _append("B"), _append("C"))

        result = chain.execute(CancellationToken(), io.StringIO(""))

        assert result.read() == "ABC"

    def test_empty_pipeline_returns_input_stream(self):
        """Test an empty chain hands back the very same stream."""
        stream = io.StringIO("unchanged")

        result = Pipeline().execute(CancellationToken(), stream)

        assert result is stream
        assert result.read() == "unchanged"

    def test_none_token_is_allowed(self):
        """Test execute without a token runs every stage."""
        chain = Pipeline.of(_append("x"))

        assert chain.execute(None, io.StringIO("")).read() == "x"

    def test_stage_error_stops_the_chain(self):
        """Test a failing stage propagates and later stages never run."""
        calls = []

        def record(name):
            def handler(token, stream):
                calls.append(name)
                return stream

            return handler

        error = RuntimeError("stage failed")

        def boom(token, stream):
            calls.append("boom")
            raise error

        chain = Pipeline.of(record("first"), boom, record("last"))

        with pytest.raises(RuntimeError) as exc_info:
            chain.execute(CancellationToken(), io.StringIO(""))

        assert exc_info.value is error
        assert calls == ["first", "boom"]

    def test_stage_error_type_is_not_wrapped(self):
        """Test a library error from a stage is not turned into a cancellation."""
        error = ValueError("bad record")

        def fail(token, stream):
            raise error

        with pytest.raises(ValueError) as exc_info:
            Pipeline.of(fail).execute(CancellationToken(), io.StringIO(""))

        assert exc_info.value is error
        assert not isinstance(exc_info.value, PipelineCancelledError)

    def test_stage_receives_token(self):
        """Test the pipeline passes its own token to each stage."""
        seen = []
        token = CancellationToken()

        def capture(tok, stream):
            seen.append(tok)
            return stream

        Pipeline.of(capture, capture).execute(token, io.StringIO(""))

        assert seen == [token, token]


@pytest.mark.unit
class TestPipelineCancellation:
    """Tests for cancellation between stages."""

    def test_pre_cancelled_token_runs_no_stage(self):
        """Test a cancelled token fails before the first stage."""
        called = []

        def handler(token, stream):
            called.append(True)
            return stream

        token = CancellationToken()
        token.cancel()

        with pytest.raises(PipelineCancelledError) as exc_info:
            Pipeline.of(handler).execute(token, io.StringIO(""))

        assert called == []
        assert exc_info.value.reason is CancellationReason.USER_REQUESTED

    def test_cancel_inside_stage_stops_following_stages(self):
        """Test a stage that cancels lets itself finish but blocks the next."""
        counter = {"value": 0}

        def increment(token, stream):
            counter["value"] += 1
            return stream

        def cancel_then_increment(token, stream):
            token.cancel()
            counter["value"] += 1
            return stream

        chain = Pipeline.of(increment, cancel_then_increment, increment, increment)

        with pytest.raises(PipelineCancelledError):
            chain.execute(CancellationToken(), io.StringIO(""))

        assert counter["value"] == 2

    def test_timeout_token_cancels_between_stages(self):
        """Test a timed token stops a chain whose stage outlives the timeout."""
        token = CancellationToken.with_timeout(0.05)
        ran_second = threading.Event()

        def slow(tok, stream):
            tok.wait(2)
            return stream

        def second(tok, stream):
            ran_second.set()
            return stream

        try:
            with pytest.raises(PipelineCancelledError) as exc_info:
                Pipeline.of(slow, second).execute(token, io.StringIO(""))
        finally:
            token.dispose()

        assert not ran_second.is_set()
        assert exc_info.value.reason is CancellationReason.TIMEOUT


@pytest.mark.unit
class TestPipelineComposition:
    """Tests for building pipelines."""

    def test_pipe_returns_new_pipeline(self):
        """Test pipe leaves the original chain untouched."""
        base = Pipeline.of(_append("A"))
        extended = base.pipe(_append("B"))

        assert len(base) == 1
        assert len(extended) == 2
        assert base.execute(None, io.StringIO("")).read() == "A"
        assert extended.execute(None, io.StringIO("")).read() == "AB"

    def test_pipe_with_name(self):
        """Test pipe uses an explicit stage name."""
        chain = Pipeline().pipe(_append("A"), name="add-a")

        assert chain.stages[0].name == "add-a"

    def test_stage_names_in_repr(self):
        """Test repr lists stage names in order."""
        chain = Pipeline([Stage("first", _append("1")), Stage("second", _append("2"))])

        assert repr(chain) == "Pipeline(stages=['first', 'second'])"

    def test_stage_is_callable(self):
        """Test Stage delegates to its handler."""
        stage = Stage("a", _append("A"))

        assert stage(CancellationToken(), io.StringIO("")).read() == "A"

    def test_generator_of_stages(self):
        """Test the constructor accepts any iterable."""
        chain = Pipeline(Stage(c, _append(c)) for c in "xyz")

        assert chain.execute(None, io.StringIO("")).read() == "xyz"
