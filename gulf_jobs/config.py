"""Runtime configuration.

All environment variable reads live here. `Settings.from_env()` loads a
`.env` file from the working directory (if any) and returns a frozen
settings object; every other module receives that object explicitly instead
of calling `os.getenv()` itself.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _env_str(name: str, default: str) -> str:
    value = os.getenv(name, "").strip()
    return value or default


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


def _env_positive_float(name: str, default: float) -> float:
    value = _env_float(name, default)
    return value if value > 0 else default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str) -> Tuple[str, ...]:
    raw = os.getenv(name, "")
    return tuple(part.strip() for part in raw.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    """Pipeline configuration.

    Attributes:
        data_dir: Directory holding snapshot files (and `backups/`).
        file_prefix: Snapshot filename prefix, e.g. ``gulf-jobs``.
        backup_enabled: Copy existing snapshots to `backups/` before each save.
        keep_last: Number of snapshots kept by pruning.
        interval_hours: Scheduler interval.
        scheduler_enabled: When False, `JobScheduler.start()` is a no-op.
        run_on_start: Fire the first scheduled cycle immediately on start.
        http_timeout_s: Per-request timeout for source adapters.
        max_retries: HTTP attempts per listing page.
        max_jobs_per_site: Cap on jobs kept from one source per cycle.
        period: Listing period filter passed to sources that support it.
        sources: Enabled source names; empty means all.
        log_level: Root logging level name.
    """

    data_dir: Path = Path("data/gulf-jobs")
    file_prefix: str = "gulf-jobs"
    backup_enabled: bool = True
    keep_last: int = 5
    interval_hours: float = 6.0
    scheduler_enabled: bool = True
    run_on_start: bool = False
    http_timeout_s: float = 20.0
    max_retries: int = 3
    max_jobs_per_site: int = 100
    period: str = "7d"
    sources: Tuple[str, ...] = field(default_factory=tuple)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "Settings":
        load_dotenv(dotenv_path)
        return cls(
            data_dir=Path(_env_str("GULF_JOBS_DATA_DIR", "data/gulf-jobs")),
            file_prefix=_env_str("GULF_JOBS_FILE_PREFIX", "gulf-jobs"),
            backup_enabled=_env_bool("GULF_JOBS_BACKUP", True),
            keep_last=max(1, _env_int("GULF_JOBS_KEEP_LAST", 5)),
            interval_hours=_env_positive_float("GULF_JOBS_INTERVAL_HOURS", 6.0),
            scheduler_enabled=_env_bool("GULF_JOBS_SCHEDULER_ENABLED", True),
            run_on_start=_env_bool("GULF_JOBS_RUN_ON_START", False),
            http_timeout_s=_env_positive_float("GULF_JOBS_HTTP_TIMEOUT", 20.0),
            max_retries=max(1, _env_int("GULF_JOBS_MAX_RETRIES", 3)),
            max_jobs_per_site=max(0, _env_int("GULF_JOBS_MAX_JOBS_PER_SITE", 100)),
            period=_env_str("GULF_JOBS_PERIOD", "7d"),
            sources=_env_list("GULF_JOBS_SOURCES"),
            log_level=_env_str("GULF_JOBS_LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
