"""
Contract tests for the memquery CLI
"""

import json
from pathlib import Path

from typer.testing import CliRunner

from memquery.main import app

EXAMPLE = """\
MemTotal:       1048576 kB
MemAvailable:    524288 kB
SwapFree:        131072 kB
HugePages_Total:      4
HugePages_Free:       2
Hugepagesize:      2048 kB
"""


def _meminfo(tmp_path: Path, text: str = EXAMPLE) -> str:
    path = tmp_path / "meminfo"
    path.write_text(text, encoding="utf-8")
    return str(path)


def _report_line(output: str) -> dict:
    for line in output.splitlines():
        try:
            payload = json.loads(line)
        except ValueError:
            continue
        if "event_type" not in payload:
            return payload
    raise AssertionError(f"no report in output: {output!r}")


def test_show_text_output(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["show", "--meminfo-path", _meminfo(tmp_path)])

    assert result.exit_code == 0
    assert "Available: 524288 KB" in result.output
    assert "Free Swap: 131072 KB" in result.output
    assert "Free Huge Pages: 4096 KB" in result.output
    assert "Total Allocatable: 659456 KB" in result.output


def test_show_json_without_huge_pages(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(
        app,
        ["show", "--json", "--no-huge-pages", "--meminfo-path", _meminfo(tmp_path)],
    )

    assert result.exit_code == 0
    assert _report_line(result.output) == {
        "available_kb": 524288,
        "free_swap_kb": 131072,
        "huge_pages_free_kb": None,
        "total_allocatable_kb": 655360,
    }


def test_show_reads_path_from_env(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(
        app,
        ["show", "--json"],
        env={"MEMQUERY_MEMINFO_PATH": _meminfo(tmp_path)},
    )

    assert result.exit_code == 0
    assert _report_line(result.output)["huge_pages_free_kb"] == 4096


def test_show_missing_source_exits_nonzero(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["show", "--meminfo-path", str(tmp_path / "nope")])

    assert result.exit_code == 1
    assert "SourceUnavailable" in result.output
    assert "Available:" not in result.output


def test_show_missing_field_exits_nonzero(tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(
        app,
        ["show", "--meminfo-path", _meminfo(tmp_path, "MemAvailable: 1 kB\n")],
    )

    assert result.exit_code == 1
    assert "RequiredFieldMissing" in result.output
    assert "SwapFree" in result.output


def test_version_command() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert result.output.startswith("memquery v0.1.0")


def test_version_reports_configured_meminfo_path(tmp_path: Path) -> None:
    """
    version checks the same source show would read
    """
    runner = CliRunner()
    present = _meminfo(tmp_path)
    missing = str(tmp_path / "nope")

    result = runner.invoke(app, ["version"], env={"MEMQUERY_MEMINFO_PATH": present})
    assert f"meminfo_path={present}" in result.output
    assert "meminfo_present=True" in result.output

    result = runner.invoke(app, ["version", "--meminfo-path", missing])
    assert f"meminfo_path={missing}" in result.output
    assert "meminfo_present=False" in result.output
