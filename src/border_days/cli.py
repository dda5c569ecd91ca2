from __future__ import annotations

from pathlib import Path
from typing import Optional

from rich import print
from rich.markup import escape
import typer

from .commands import cmd_calculate, cmd_correct, cmd_ping
from .config import load_config
from .ingest import IngestionError
from .log import configure_logging

app = typer.Typer(add_completion=False)


def _setup():
    cfg = load_config()
    configure_logging(cfg.log_level)
    return cfg


def _fail(exc: Exception) -> None:
    print(f"[red]error:[/red] {escape(str(exc))}")
    raise typer.Exit(code=2)


@app.command()
def ping() -> None:
    """
    Sanity check: config files, env wiring, calendar offset.
    """
    cmd_ping(_setup())


@app.command()
def correct(
    events: Path = typer.Option(..., "--events", help="JSON or CSV border records"),
    out: Optional[Path] = typer.Option(None, "--out", help="Write corrected records here (JSON)"),
) -> None:
    """
    Repair exit/entry document mismatches and report anomalies.
    """
    _setup()
    try:
        cmd_correct(events, out)
    except IngestionError as exc:
        _fail(exc)


@app.command()
def calculate(
    events: Path = typer.Option(..., "--events", help="JSON or CSV border records"),
    start: str = typer.Option(..., "--from", help="Window start, YYYY-MM-DD"),
    end: str = typer.Option(..., "--to", help="Window end, YYYY-MM-DD (may be in the future)"),
    category: Optional[str] = typer.Option(None, "--category", help="Only count one document category (e.g. hkm, overseas)"),
    no_correct: bool = typer.Option(False, "--no-correct", help="Skip the document-matching correction pass"),
    target_days: Optional[int] = typer.Option(None, "--target-days", help="Eligibility threshold (default from settings)"),
    records: bool = typer.Option(False, "--records", help="List overseas / domestic records"),
) -> None:
    """
    Count overseas days within a window.
    """
    cfg = _setup()
    try:
        cmd_calculate(
            events,
            start,
            end,
            cfg=cfg,
            category=category,
            correct=not no_correct,
            target_days=target_days,
            show_records=records,
        )
    except ValueError as exc:  # IngestionError, unknown category
        _fail(exc)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
