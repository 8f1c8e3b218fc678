"""Tests for pipeline stage adapters and step parsing."""

import io
import sys
import threading

import pytest

from bashlike.commands.stages import parse_stage, process_stage, text_stage
from bashlike.core.cancellation import CancellationToken, PipelineCancelledError
from bashlike.core.pipeline import Pipeline
from bashlike.exceptions import CommandExecutionError, InvalidArgumentError, InvalidRegexError

PYTHON = sys.executable


def _run(steps, text):
    chain = Pipeline(parse_stage(step) for step in steps)
    return chain.execute(CancellationToken(), io.StringIO(text)).read()


@pytest.mark.unit
class TestTextStage:
    """Tests for text_stage."""

    def test_wraps_function(self):
        """Test the function output becomes the next stream."""
        stage = text_stage(str.upper, name="upper")

        out = stage(CancellationToken(), io.StringIO("abc"))

        assert stage.name == "upper"
        assert out.read() == "ABC"

    def test_bytes_input_decoded(self):
        """Test binary streams are decoded before the function runs."""
        stage = text_stage(lambda text: text[::-1])

        assert stage(CancellationToken(), io.BytesIO(b"abc")).read() == "cba"


@pytest.mark.unit
class TestParseStage:
    """Tests for building stages from step strings."""

    def test_grep_sort_uniq(self, log_text):
        """Test the classic filter, sort, dedupe chain."""
        result = _run(["grep ERROR", "sort", "uniq"], log_text)

        assert result == "ERROR disk full\nERROR timeout\n"

    def test_quoted_arguments(self):
        """Test shell-style quoting groups words."""
        assert _run(["sed 'a b' X"], "a b c\n") == "X c\n"

    def test_head_tail(self):
        """Test head and tail with and without counts."""
        text = "".join(f"{i}\n" for i in range(20))

        assert _run(["head 3"], text) == "0\n1\n2\n"
        assert _run(["tail 2"], text) == "18\n19\n"
        assert _run(["head"], text).count("\n") == 10

    def test_cut(self):
        """Test cut with delimiter and fields."""
        assert _run(["cut , 2 1"], "a,b,c\nd,e,f\n") == "b,a\ne,d\n"

    def test_tr_and_wc(self):
        """Test tr then wc."""
        assert _run(["tr ab xy"], "aabb\n") == "xxyy\n"
        assert _run(["wc"], "one two\nthree\n") == "2 3 14\n"

    def test_empty_input(self):
        """Test line steps on empty input produce empty output."""
        assert _run(["grep x", "sort", "head 2"], "") == ""

    def test_invalid_regex_fails_at_build(self):
        """Test a bad grep pattern is reported before running."""
        with pytest.raises(InvalidRegexError):
            parse_stage("grep (")

    @pytest.mark.parametrize(
        "step",
        ["", "   ", "sort extra", "grep", "sed only-one", "head x", "tr abc x", "cut ,", "sed 'open"],
    )
    def test_invalid_steps(self, step):
        """Test malformed steps raise InvalidArgumentError."""
        with pytest.raises(InvalidArgumentError):
            parse_stage(step)

    def test_unknown_name_runs_program(self):
        """Test any other name becomes an external command stage."""
        stage = parse_stage(f"{PYTHON} -c 'import sys; sys.stdout.write(sys.stdin.read()[::-1])'")

        out = stage(CancellationToken(), io.StringIO("abc"))

        assert out.read() == "cba"


@pytest.mark.unit
class TestProcessStage:
    """Tests for process_stage."""

    def test_failure_raises(self):
        """Test a failing command aborts the pipeline."""
        stage = process_stage(PYTHON, "-c", "import sys; sys.exit(1)")

        with pytest.raises(CommandExecutionError):
            Pipeline([stage]).execute(CancellationToken(), io.StringIO(""))

    def test_cancellation_kills_running_command(self):
        """Test cancelling the run kills the command and reports cancellation."""
        stage = process_stage(PYTHON, "-c", "import time; time.sleep(10)")
        token = CancellationToken()
        threading.Timer(0.1, token.cancel).start()

        with pytest.raises(PipelineCancelledError):
            Pipeline([stage]).execute(token, io.StringIO(""))

    def test_stage_name(self):
        """Test the stage is named after its command line."""
        assert process_stage("sort", "-r").name == "sort -r"
