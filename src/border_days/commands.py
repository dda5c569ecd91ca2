from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from rich import print
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import AppConfig, default_settings_path, load_config, repo_root
from .documents import filter_by_category
from .ingest import dump_events, load_events, parse_query_bound
from .log import get_logger
from .matcher import correct_document_matching
from .models import BorderEvent, ValidationIssue
from .summary import port_frequency, summarize_window


log = get_logger()
console = Console()


def _issues_table(issues: List[ValidationIssue]) -> Table:
    t = Table(title=f"Issues ({len(issues)})")
    t.add_column("type", no_wrap=True)
    t.add_column("severity", no_wrap=True)
    t.add_column("records", no_wrap=True)
    t.add_column("message")
    for i in issues:
        t.add_row(i.type.value, i.severity.value, ", ".join(i.record_ids), i.message)
    return t


def _records_table(title: str, records: List[BorderEvent]) -> Table:
    t = Table(title=title)
    for col in ("id", "date", "type", "port", "document"):
        t.add_column(col)
    for r in records:
        t.add_row(r.id, r.date.isoformat(), r.type.value, r.port, f"{r.document_name} {r.document_number}".strip())
    return t


def cmd_ping(cfg: Optional[AppConfig] = None) -> None:
    cfg = cfg or load_config()
    root = repo_root()
    settings_path = default_settings_path()

    print(f"[bold]border-days[/bold] version={__version__}")
    print(f"env={cfg.env}")
    print(f"repo_root={root}")
    print(f"settings.yaml exists={settings_path.exists()}")
    print(f"utc_offset_hours={cfg.utc_offset_hours}")
    print(f"today={cfg.calendar.today().isoformat()}")
    print(f"target_days={cfg.target_days}")
    print(f"document categories: {', '.join(f'{k}={v}' for k, v in cfg.document_categories.items())}")


def cmd_correct(events_path: Path, out_path: Optional[Path] = None) -> None:
    events = load_events(events_path)
    result = correct_document_matching(events)

    print(f"events={result.original_count}")
    print(f"corrected={result.corrected_count}")
    if result.issues:
        console.print(_issues_table(result.issues))

    if out_path is not None:
        stored = dump_events(result.corrected_events, out_path)
        print(f"stored: {stored}")


def cmd_calculate(
    events_path: Path,
    start: str,
    end: str,
    *,
    cfg: AppConfig,
    category: Optional[str] = None,
    correct: bool = True,
    target_days: Optional[int] = None,
    show_records: bool = False,
) -> None:
    q_start = parse_query_bound(start)
    q_end = parse_query_bound(end)
    events = load_events(events_path)

    issues: List[ValidationIssue] = []
    if correct:
        corrected = correct_document_matching(events)
        events = corrected.corrected_events
        issues = corrected.issues

    events = filter_by_category(events, category, cfg.document_categories)
    log.info("calculating over {} events (category={})", len(events), category or "all")

    s = summarize_window(
        events,
        q_start,
        q_end,
        target_days=target_days if target_days is not None else cfg.target_days,
        calendar=cfg.calendar,
    )

    print(f"window={s.start.isoformat()}..{s.end.isoformat()} total_days={s.total_days}")
    if s.future_days:
        print(f"[yellow]window extends {s.future_days} days past today; only {s.past_days} days counted[/yellow]")
    print(f"[bold]overseas_days={s.overseas_days}[/bold] domestic_days={s.domestic_days} ratio={s.overseas_ratio:.1%}")
    print(f"records_in_window={s.result.total_records}")

    if s.eligible:
        print(f"[green]eligible: {s.overseas_days} >= {s.target_days} days[/green]")
    else:
        print(f"[red]not eligible: {s.remaining_days} more days needed (target {s.target_days})[/red]")

    if issues:
        console.print(_issues_table(issues))

    ports = port_frequency(s.result.overseas_records + s.result.domestic_records, limit=5)
    if ports:
        print("top ports:")
        for port, n in ports:
            print(f"  - {port}: {n}")

    if show_records:
        console.print(_records_table("Overseas records", s.result.overseas_records))
        console.print(_records_table("Domestic records", s.result.domestic_records))
