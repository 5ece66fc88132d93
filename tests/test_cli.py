"""End-to-end tests for the linecat command."""
from __future__ import annotations

import io
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from linecat.cli import main, run
from linecat.config import CONFIG_FILE_NAME
from linecat.errors import FileOpenError
from linecat.output.pager import PROMPT
from linecat.pipeline.builder import Features

SAMPLE = "Line 1\nLine 2\nLine 3\n"


@pytest.fixture()
def runner(config_dir: Path) -> CliRunner:
    return CliRunner()


def _invoke(runner: CliRunner, args: list[str], input: str | bytes | None = None):
    return runner.invoke(main, args, input=input, catch_exceptions=False)


class TestFeatures:
    @pytest.mark.parametrize("args, content, expected", [
        (["-n"], SAMPLE, "1 Line 1\n2 Line 2\n3 Line 3\n"),
        (["-d"], SAMPLE, "Line 1$\nLine 2$\nLine 3$\n"),
        (["-t"], "Line 1\tLine 2\tLine 3\n", "Line 1^ILine 2^ILine 3\n"),
        (["-s"], "Line 1\n\n\nLine 2\n\nLine 3\n", "Line 1\n\nLine 2\n\nLine 3\n"),
        (["--search", "Line 2"], SAMPLE, "Line 2\n"),
        (["--search", "line 2", "-i"], SAMPLE, "Line 2\n"),
        (["--encode-base64"], SAMPLE, "TGluZSAx\nTGluZSAy\nTGluZSAz\n"),
        (["--decode-base64"], "TGluZSAx\nTGluZSAy\nTGluZSAz\n", SAMPLE),
    ])
    def test_file_and_stdin(
        self, runner: CliRunner, make_file, args: list[str], content: str, expected: str
    ) -> None:
        path = make_file(content)
        assert _invoke(runner, [*args, str(path)]).output == expected
        assert _invoke(runner, args, input=content).output == expected

    def test_search_regex_with_numbers(self, runner: CliRunner) -> None:
        result = _invoke(runner, ["--search", r"reg:\d+", "-n"], input="no digits\nline 42\nalso 7\n")
        assert result.output == "1 line 42\n2 also 7\n"

    def test_decode_drops_bad_lines(self, runner: CliRunner) -> None:
        result = _invoke(runner, ["--decode-base64"], input="TGluZSAx\n!!!\nTGluZSAy\n")
        assert result.output == "Line 1\nLine 2\n"
        assert result.exit_code == 0

    def test_invalid_regex_outputs_nothing(self, runner: CliRunner) -> None:
        result = _invoke(runner, ["--search", "reg:("], input=SAMPLE)
        assert result.exit_code == 0
        assert "Line" not in result.output


class TestSources:
    def test_plain_copy(self, runner: CliRunner, make_file) -> None:
        path = make_file("a\r\nb\tc")
        assert _invoke(runner, [str(path)]).stdout_bytes == b"a\r\nb\tc"

    def test_mmap_copy(self, runner: CliRunner, make_file) -> None:
        path = make_file("mapped\n")
        assert _invoke(runner, ["--mmap", str(path)]).output == "mapped\n"

    def test_files_concatenated_in_order(self, runner: CliRunner, make_file) -> None:
        a = make_file("a1\na2\n", name="a.txt")
        b = make_file("b1\n", name="b.txt")
        result = _invoke(runner, ["-n", str(a), str(b)])
        assert result.output == "1 a1\n2 a2\n3 b1\n"

    def test_dash_reads_stdin(self, runner: CliRunner, make_file) -> None:
        a = make_file("file\n")
        result = _invoke(runner, ["-d", str(a), "-"], input="stdin\n")
        assert result.output == "file$\nstdin$\n"

    def test_missing_file(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(main, [str(tmp_path / "missing.txt")])
        assert result.exit_code == 1
        assert "FileOpenError" in result.output


class TestConfig:
    def test_config_enables_features(self, runner: CliRunner, config_dir: Path) -> None:
        config_dir.mkdir()
        (config_dir / CONFIG_FILE_NAME).write_text("dollar_sign_feature = true\n", encoding="utf-8")
        assert _invoke(runner, ["-n"], input="x\n").output == "1 x$\n"

    def test_bad_config_exits_nonzero(self, runner: CliRunner, config_dir: Path) -> None:
        config_dir.mkdir()
        (config_dir / CONFIG_FILE_NAME).write_text("not toml [", encoding="utf-8")
        result = runner.invoke(main, [], input="x\n")
        assert result.exit_code == 1
        assert "ConfigReadError" in result.output

    def test_init_config(self, runner: CliRunner, config_dir: Path) -> None:
        result = _invoke(runner, ["--init-config"])
        assert result.exit_code == 0
        assert (config_dir / CONFIG_FILE_NAME).is_file()

    def test_version(self, runner: CliRunner) -> None:
        assert "linecat" in _invoke(runner, ["--version"]).output


class TestPagination:
    def test_pages_output(self, runner: CliRunner) -> None:
        with patch("linecat.output.terminal.terminal_height", return_value=3), \
                patch("linecat.output.terminal.Terminal.wait_for_key", return_value=b" ") as wait:
            result = _invoke(runner, ["-p"], input="1\n2\n3\n4\n5\n")
        assert wait.call_count == 2
        assert result.output.count(PROMPT) == 2
        for i in range(1, 6):
            assert f"{i}\n" in result.output

    def test_run_pages_with_transforms(self, config_dir: Path) -> None:
        sink = io.BytesIO()
        with patch("linecat.output.terminal.terminal_height", return_value=100):
            with patch("sys.stdin", io.TextIOWrapper(io.BytesIO(b"a\nb\n"))):
                run([], Features(number=True), paginate=True, sink=sink)
        assert sink.getvalue() == b"1 a\n2 b\n"

    def test_run_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileOpenError):
            run([str(tmp_path / "x")], Features(number=True), paginate=False, sink=io.BytesIO())
