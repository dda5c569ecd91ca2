from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from .dates import FixedOffsetCalendar
from .documents import DEFAULT_CATEGORIES
from .summary import DEFAULT_TARGET_DAYS


def repo_root() -> Path:
    # Assumes this file lives at: repo/src/border_days/config.py
    return Path(__file__).resolve().parents[2]


def default_settings_path() -> Path:
    return repo_root() / "configs" / "settings.yaml"


def load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Missing config file: {path}")
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


@dataclass(frozen=True)
class AppConfig:
    env: str
    utc_offset_hours: int
    target_days: int
    document_categories: Dict[str, str]
    log_level: str
    settings: Dict[str, Any]

    @property
    def calendar(self) -> FixedOffsetCalendar:
        return FixedOffsetCalendar(self.utc_offset_hours)


def _as_int(value: Any, name: str) -> int:
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


def load_config(settings_path: Optional[Path] = None) -> AppConfig:
    load_dotenv(repo_root() / ".env")

    settings_path = settings_path or default_settings_path()
    settings = load_yaml(settings_path)

    env = os.getenv("APP_ENV", settings.get("app", {}).get("env", "local"))

    offset = _as_int(
        os.getenv("BORDER_DAYS_UTC_OFFSET", settings.get("calendar", {}).get("utc_offset_hours", 8)),
        "calendar.utc_offset_hours",
    )
    if not -12 <= offset <= 14:
        raise ValueError(f"calendar.utc_offset_hours out of range: {offset}")

    target = _as_int(
        settings.get("eligibility", {}).get("target_days", DEFAULT_TARGET_DAYS),
        "eligibility.target_days",
    )

    categories = settings.get("documents", {}).get("categories") or DEFAULT_CATEGORIES
    if not isinstance(categories, dict) or not all(isinstance(v, str) for v in categories.values()):
        raise ValueError("configs/settings.yaml documents.categories must map category -> keyword")

    log_level = os.getenv("BORDER_DAYS_LOG_LEVEL", settings.get("logging", {}).get("level", "WARNING"))

    return AppConfig(
        env=str(env),
        utc_offset_hours=offset,
        target_days=target,
        document_categories={str(k): v.strip() for k, v in categories.items() if v.strip()},
        log_level=str(log_level).upper(),
        settings=settings,
    )
