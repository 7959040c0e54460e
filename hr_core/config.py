from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

from hr_core.csv_codec import CSVMode


DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    csv_mode: CSVMode = CSVMode.SCHEMA_FREE
    upload_timeout_seconds: float = 10.0
    admin_username: str = "admin"
    admin_password: str = "admin123"
    employee_password: str = "password123"
    log_level: str = "INFO"
    cors_origins: List[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))


def _as_mode(value: Optional[str]) -> CSVMode:
    if not value:
        return CSVMode.SCHEMA_FREE
    try:
        return CSVMode(value.strip().lower().replace("_", "-"))
    except ValueError:
        return CSVMode.SCHEMA_FREE


def _as_positive_float(value: Optional[str], default: float) -> float:
    try:
        out = float(value) if value is not None else default
    except ValueError:
        return default
    return out if out > 0 else default


def _as_list(value: Optional[str], default: List[str]) -> List[str]:
    if not value:
        return list(default)
    items = [v.strip() for v in value.split(",") if v.strip()]
    return items or list(default)


def load_settings(environ: Optional[dict] = None) -> Settings:
    env = os.environ if environ is None else environ
    level = (env.get("HR_DASH_LOG_LEVEL") or "INFO").upper()
    if not isinstance(logging.getLevelName(level), int):
        level = "INFO"
    return Settings(
        csv_mode=_as_mode(env.get("HR_DASH_CSV_MODE")),
        upload_timeout_seconds=_as_positive_float(env.get("HR_DASH_UPLOAD_TIMEOUT"), 10.0),
        admin_username=env.get("HR_DASH_ADMIN_USER") or "admin",
        admin_password=env.get("HR_DASH_ADMIN_PASSWORD") or "admin123",
        employee_password=env.get("HR_DASH_EMPLOYEE_PASSWORD") or "password123",
        log_level=level,
        cors_origins=_as_list(env.get("HR_DASH_CORS_ORIGINS"), DEFAULT_CORS_ORIGINS),
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
