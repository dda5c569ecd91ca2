from __future__ import annotations

from typing import Dict, Iterable, List

from .chronology import OrderKey, chronological_key, sort_chronological, sort_source_order
from .documents import group_by_document
from .log import get_logger
from .models import (
    BorderEvent,
    CorrectionResult,
    IssueType,
    Severity,
    ValidationIssue,
)


log = get_logger()

# More than an exit+entry pair on one day for one document is worth flagging
SAME_DAY_LIMIT = 2


def _mismatch_issue(exit_event: BorderEvent, entry: BorderEvent) -> ValidationIssue:
    return ValidationIssue(
        type=IssueType.DOCUMENT_MISMATCH,
        severity=Severity.INFO,
        record_ids=[exit_event.id, entry.id],
        message=(
            f"Corrected document mismatch: exited on {exit_event.date.isoformat()} "
            f"using {exit_event.document_name}; the entry on {entry.date.isoformat()} "
            f"now uses {exit_event.document_name}"
        ),
        suggestion=None,
    )


def detect_same_day_multiple(events: Iterable[BorderEvent]) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []

    for group in group_by_document(events).values():
        by_date: Dict[str, List[BorderEvent]] = {}
        for e in group:
            by_date.setdefault(e.date.isoformat(), []).append(e)

        for day, recs in by_date.items():
            if len(recs) > SAME_DAY_LIMIT:
                issues.append(
                    ValidationIssue(
                        type=IssueType.SAME_DAY_MULTIPLE,
                        severity=Severity.INFO,
                        record_ids=[r.id for r in recs],
                        message=f"{day} has {len(recs)} border records for the same document",
                        suggestion="This is usually several genuine crossings on the same day",
                    )
                )
    return issues


def correct_document_matching(
    events: Iterable[BorderEvent],
    *,
    order: OrderKey = chronological_key,
) -> CorrectionResult:
    """
    Pair every entry with the nearest unmatched exit (bracket matching over
    the merged chronological stream) and make the entry carry the exit's
    document identity: you come back on the document you left with.

    Border logs never hold two consecutive exits or entries for one person,
    so a plain stack is enough. Orphan entries pass through untouched.
    Input events are never modified; corrected ones are copies.
    """
    events = list(events)
    issues: List[ValidationIssue] = []
    corrected: List[BorderEvent] = []
    corrected_count = 0

    stack: List[BorderEvent] = []

    for e in sort_chronological(events, order):
        if e.is_exit:
            stack.append(e)
            corrected.append(e)
            continue

        if not stack:
            log.debug("orphan entry {} on {} passed through", e.id, e.date)
            corrected.append(e)
            continue

        matched_exit = stack.pop()
        if matched_exit.identity != e.identity:
            corrected.append(e.with_identity(matched_exit.identity))
            corrected_count += 1
            issues.append(_mismatch_issue(matched_exit, e))
        else:
            corrected.append(e)

    issues.extend(detect_same_day_multiple(corrected))

    log.debug(
        "document matching: {} events, {} corrected, {} unmatched exits, {} issues",
        len(events),
        corrected_count,
        len(stack),
        len(issues),
    )

    return CorrectionResult(
        corrected_events=sort_source_order(corrected),
        issues=issues,
        original_count=len(events),
        corrected_count=corrected_count,
    )
