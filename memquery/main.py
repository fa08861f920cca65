"""
memquery.main
------------
AUTHOR: carter-vin

PURPOSE:
- Stable CLI entrypoint around read_memory_info
- Show what can be allocated right now (RAM, swap, huge pages)

Key contract:
- `memquery show` prints the report, exit 0 on success
- either read failure exits 1 and prints the reason to stderr
- events are JSON lines on stderr
"""

from __future__ import annotations

import json
import platform
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

import typer

from memquery import __version__
from memquery.evaluate import unified_allocatable_kb
from memquery.logging import emit_event
from memquery.meminfo import PROC_MEMINFO, read_memory_info
from memquery.outcome import run_reader

app = typer.Typer(
    add_completion=False,
    help="memquery: report memory that can be allocated right now",
)

MEMINFO_PATH_ENV = "MEMQUERY_MEMINFO_PATH"


# -----------------------------
# DATA CLASSES
# -----------------------------
@dataclass(frozen=True)
class EnvironmentInfo:
    """
    Snapshot of the runtime environment
    - meminfo_path: the source `show` would read
    """

    python_version: str
    os: str
    machine: str
    meminfo_path: str
    meminfo_present: bool
    utc_now: str


def collect_environment_info(meminfo_path: str = str(PROC_MEMINFO)) -> EnvironmentInfo:
    return EnvironmentInfo(
        python_version=sys.version.split()[0],
        os=f"{platform.system()} {platform.release()}",
        machine=platform.machine(),
        meminfo_path=meminfo_path,
        meminfo_present=Path(meminfo_path).is_file(),
        utc_now=datetime.now(timezone.utc).isoformat(),
    )


# -----------------------------
# ROOT COMMAND BEHAVIOR
# -----------------------------
@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    """
    Print a hint when no subcommand is given
    """
    if ctx.invoked_subcommand is None:
        typer.echo("No command provided. Try: memquery --help")


# -----------------------------
# CLI COMMANDS
# -----------------------------
@app.command()
def version(
    meminfo_path: str = typer.Option(
        str(PROC_MEMINFO),
        "--meminfo-path",
        envvar=MEMINFO_PATH_ENV,
        help="meminfo source to check.",
    ),
) -> None:
    """
    Print version & runtime env
    """
    env = collect_environment_info(meminfo_path)

    typer.echo(f"memquery v{__version__}")
    typer.echo(f"python={env.python_version}")
    typer.echo(f"os={env.os}")
    typer.echo(f"machine={env.machine}")
    typer.echo(f"meminfo_path={env.meminfo_path}")
    typer.echo(f"meminfo_present={env.meminfo_present}")
    typer.echo(f"utc_now={env.utc_now}")


@app.command("show")
def show(
    huge_pages: bool = typer.Option(
        True,
        "--huge-pages/--no-huge-pages",
        help="Include free huge-page memory.",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print one JSON object instead of text lines.",
    ),
    meminfo_path: str = typer.Option(
        str(PROC_MEMINFO),
        "--meminfo-path",
        envvar=MEMINFO_PATH_ENV,
        help="meminfo source to read.",
    ),
) -> None:
    """
    Read meminfo once and print allocatable memory in KB

    Total Allocatable sums RAM, swap and huge pages. That sum is a
    unified-memory heuristic, not a guarantee.
    """
    emit_event(
        "query_start",
        version=__version__,
        meminfo_path=meminfo_path,
        huge_pages=huge_pages,
    )

    try:
        out = run_reader(read_memory_info, huge_pages, path=meminfo_path)

        if not out.ok:
            emit_event(
                "query_failed",
                version=__version__,
                meminfo_path=meminfo_path,
                error_type=out.error_type,
                message=out.error_message,
            )
            typer.echo(f"error: {out.error_message}", err=True)
            raise typer.Exit(code=1)

        report = out.value
        total_kb = unified_allocatable_kb(report)

        emit_event(
            "report_read",
            version=__version__,
            meminfo_path=meminfo_path,
            **report.to_dict(),
        )

        if as_json:
            payload = {**report.to_dict(), "total_allocatable_kb": total_kb}
            typer.echo(json.dumps(payload, sort_keys=True, separators=(",", ":")))
            return

        typer.echo(f"Available: {report.available_kb} KB")
        typer.echo(f"Free Swap: {report.free_swap_kb} KB")
        if report.huge_pages_free_kb is not None:
            typer.echo(f"Free Huge Pages: {report.huge_pages_free_kb} KB")
        typer.echo(f"Total Allocatable: {total_kb} KB")

    finally:
        emit_event("query_done", version=__version__)


if __name__ == "__main__":
    app()
