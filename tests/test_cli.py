"""Tests for the click CLI."""
from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from jsondedup.cli import main, run


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------

class TestRun:
    def test_stdin_to_stdout(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["run"], input=b'{"a":null,"a":"x","b":""}\n')
        assert result.exit_code == 0
        assert result.stdout_bytes == b'{"a":"x","b":""}\n'

    def test_udf_entry_point_takes_no_arguments(self, runner: CliRunner) -> None:
        result = runner.invoke(run, [], input=b'{"a.b":1,"a.c":2}')
        assert result.exit_code == 0
        assert result.stdout_bytes == b'{"a":{"b":1,"c":2}}'

    def test_file_to_file(self, runner: CliRunner, tmp_path: Path, sample_rows) -> None:
        src = tmp_path / "in.tsv"
        dst = tmp_path / "out.tsv"
        src.write_text("\n".join(sample_rows) + "\n", encoding="utf-8")
        result = runner.invoke(main, ["run", str(src), "-o", str(dst)])
        assert result.exit_code == 0
        lines = dst.read_text(encoding="utf-8").splitlines()
        assert lines[0] == '{"id":1,"a":"x","b":""}'
        assert len(lines) == 4

    def test_malformed_line_fails_stream(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["run"], input=b'{"a":1}\n{"a":\n{"b":2}\n')
        assert result.exit_code == 1
        assert result.stdout_bytes == b'{"a":1}\n'
        assert "line 2" in result.stderr

    def test_trailing_backslash_fails_stream(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["run"], input=b'{"a":1}\\\n')
        assert result.exit_code == 1
        assert result.stdout_bytes == b""
        assert "trailing backslash" in result.stderr

    def test_strict_escapes_flag(self, runner: CliRunner) -> None:
        lenient = runner.invoke(main, ["run"], input=b'{\\"a\\":1}\n')
        assert lenient.exit_code == 0
        strict = runner.invoke(main, ["run", "--strict-escapes"], input=b'{\\"a\\":1}\n')
        assert strict.exit_code == 1

    def test_max_depth_option(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["run", "--max-depth", "1"], input=b'{"a":{}}\n')
        assert result.exit_code == 1
        assert "nesting depth" in result.stderr

    def test_workers(self, runner: CliRunner, tmp_path: Path) -> None:
        src = tmp_path / "in.tsv"
        rows = [f'{{"n":{i},"n":null}}' for i in range(30)]
        src.write_text("\n".join(rows) + "\n", encoding="utf-8")
        result = runner.invoke(main, ["run", str(src), "--workers", "2", "--chunk-size", "5"])
        assert result.exit_code == 0
        assert result.stdout_bytes.decode().splitlines() == [f'{{"n":{i}}}' for i in range(30)]


# ---------------------------------------------------------------------------
# stats / version
# ---------------------------------------------------------------------------

class TestStats:
    def test_reports_counters(self, runner: CliRunner, tmp_path: Path, sample_rows) -> None:
        src = tmp_path / "in.tsv"
        src.write_text("\n".join(sample_rows) + "\n", encoding="utf-8")
        result = runner.invoke(main, ["stats", str(src)])
        assert result.exit_code == 0
        assert "Duplicate keys removed" in result.stdout
        assert "Dotted keys expanded" in result.stdout
        assert '{"id"' not in result.stdout

    def test_fails_like_run(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["stats"], input=b"[1,\n")
        assert result.exit_code == 1
        assert "line 1" in result.stderr


def test_version(runner: CliRunner) -> None:
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "1.0.0" in result.output
