"""Process-wide wiring.

`build_services` constructs storage, sources, scraper and scheduler once,
at process start, and hands them out as one bundle. Nothing in the package
keeps module-level instances.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from .config import Settings
from .models import SchedulerConfig
from .scheduler import JobScheduler
from .scraper import Scraper
from .sources import build_sources
from .sources.base import JobSource
from .storage import JobStorage


@dataclass
class Services:
    settings: Settings
    storage: JobStorage
    scraper: Scraper
    scheduler: JobScheduler


def build_services(settings: Settings, sources: Optional[Sequence[JobSource]] = None) -> Services:
    """Wire up the pipeline. `sources` overrides the configured connectors (tests, custom sites)."""
    storage = JobStorage(settings.data_dir, file_prefix=settings.file_prefix, backup_enabled=settings.backup_enabled)
    scraper = Scraper(sources if sources is not None else build_sources(settings))
    scheduler = JobScheduler(
        scraper,
        storage,
        SchedulerConfig(
            enabled=settings.scheduler_enabled,
            interval_hours=settings.interval_hours,
            keep_last_files=settings.keep_last,
            run_on_start=settings.run_on_start,
        ),
    )
    return Services(settings=settings, storage=storage, scraper=scraper, scheduler=scheduler)
