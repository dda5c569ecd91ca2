from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Any, List, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


_TYPE_LABELS = {
    "exit": "exit",
    "出境": "exit",
    "entry": "entry",
    "入境": "entry",
}


class BorderType(str, Enum):
    EXIT = "exit"
    ENTRY = "entry"


class DocumentIdentity(NamedTuple):
    document_name: str
    document_number: str


class _FeedModel(BaseModel):
    # Feed / UI payloads use camelCase keys
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BorderEvent(_FeedModel):
    """
    One border-crossing record.

    Ids follow the feed convention: a numerically smaller id is a more
    recent crossing. See chronology.py for the only place that relies on it.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str = Field(min_length=1)
    type: BorderType
    date: dt.date
    time: Optional[str] = None
    port: str = ""
    document_name: str = ""
    document_number: str = ""
    flight_number: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("type", mode="before")
    @classmethod
    def _type_label(cls, v: Any) -> Any:
        if isinstance(v, str):
            return _TYPE_LABELS.get(v.strip().lower(), v)
        return v

    @field_validator("port", "document_name", "document_number", mode="before")
    @classmethod
    def _blank_if_missing(cls, v: Any) -> Any:
        return "" if v is None else v

    @property
    def identity(self) -> DocumentIdentity:
        return DocumentIdentity(self.document_name, self.document_number)

    @property
    def sequence_number(self) -> Optional[int]:
        try:
            return int(self.id.strip())
        except ValueError:
            return None

    @property
    def is_exit(self) -> bool:
        return self.type is BorderType.EXIT

    def with_identity(self, identity: DocumentIdentity) -> "BorderEvent":
        return self.model_copy(
            update={
                "document_name": identity.document_name,
                "document_number": identity.document_number,
            }
        )


class AbroadSegment(BaseModel):
    """Inclusive stay abroad; entry_date None means still abroad."""
    exit_date: dt.date
    entry_date: Optional[dt.date] = None

    @property
    def is_open(self) -> bool:
        return self.entry_date is None

    def end(self, today: dt.date) -> dt.date:
        return self.entry_date if self.entry_date is not None else today

    def contains(self, day: dt.date, today: dt.date) -> bool:
        return self.exit_date <= day <= self.end(today)

    def touches(self, other: "AbroadSegment", today: dt.date) -> bool:
        return other.exit_date <= self.end(today) + dt.timedelta(days=1)


class IssueType(str, Enum):
    DOCUMENT_MISMATCH = "document_mismatch"
    SAME_DAY_MULTIPLE = "same_day_multiple"


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"


class ValidationIssue(_FeedModel):
    type: IssueType
    severity: Severity = Severity.INFO
    record_ids: List[str] = Field(default_factory=list)
    message: str
    suggestion: Optional[str] = None


class CorrectionResult(_FeedModel):
    corrected_events: List[BorderEvent] = Field(default_factory=list)
    issues: List[ValidationIssue] = Field(default_factory=list)
    original_count: int = 0
    corrected_count: int = 0


class CalculationResult(_FeedModel):
    total_overseas_days: int = 0
    total_records: int = 0
    overseas_records: List[BorderEvent] = Field(default_factory=list)
    domestic_records: List[BorderEvent] = Field(default_factory=list)
