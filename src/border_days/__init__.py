from loguru import logger

from .calculator import build_abroad_segments, build_overseas_days, calculate_overseas_days, get_days_in_range
from .chronology import chronological_key, sort_chronological
from .dates import CST, FixedOffsetCalendar
from .matcher import correct_document_matching
from .models import (
    AbroadSegment,
    BorderEvent,
    BorderType,
    CalculationResult,
    CorrectionResult,
    DocumentIdentity,
    IssueType,
    Severity,
    ValidationIssue,
)

__version__ = "0.1.0"

# Library code stays quiet unless an application enables it
logger.disable(__name__)

__all__ = [
    "AbroadSegment",
    "BorderEvent",
    "BorderType",
    "CST",
    "CalculationResult",
    "CorrectionResult",
    "DocumentIdentity",
    "FixedOffsetCalendar",
    "IssueType",
    "Severity",
    "ValidationIssue",
    "build_abroad_segments",
    "build_overseas_days",
    "calculate_overseas_days",
    "chronological_key",
    "correct_document_matching",
    "get_days_in_range",
    "sort_chronological",
]
