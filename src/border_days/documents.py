from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Optional

from .models import BorderEvent, DocumentIdentity


# Category -> keyword expected inside documentName.
# Keyword match tolerates prefixes/suffixes/spacing in parsed document names.
DEFAULT_CATEGORIES: Dict[str, str] = {
    "hkm": "往来港澳通行证",
    "overseas": "普通护照",
}


def group_by_document(events: Iterable[BorderEvent]) -> Dict[DocumentIdentity, List[BorderEvent]]:
    groups: Dict[DocumentIdentity, List[BorderEvent]] = {}
    for e in events:
        groups.setdefault(e.identity, []).append(e)
    return groups


def filter_by_category(
    events: Iterable[BorderEvent],
    category: Optional[str],
    categories: Optional[Mapping[str, str]] = None,
) -> List[BorderEvent]:
    """
    Keep only events whose document name contains the category keyword.
    category=None keeps everything.
    """
    if category is None:
        return list(events)

    cats = categories if categories is not None else DEFAULT_CATEGORIES
    keyword = cats.get(category)
    if keyword is None:
        raise ValueError(f"Unknown document category: {category} (known: {', '.join(sorted(cats))})")
    return [e for e in events if keyword in e.document_name]
