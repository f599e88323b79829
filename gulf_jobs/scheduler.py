"""Periodic scrape scheduling.

`JobScheduler` arms an APScheduler interval job that runs one cycle:

    scrape all sources -> dedupe -> JobStorage.save -> JobStorage.prune

At most one cycle runs at a time. The guard is an in-process lock taken
without blocking: a scheduled tick that finds it held is skipped, and a
manual trigger gets a `CycleResult(busy=True)` back. It does not protect
against a second process sharing the same data directory.

Scheduler state lives in memory only and starts over as `stopped` after a
restart.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from pydantic.alias_generators import to_camel

from .models import CycleResult, SchedulerConfig, SchedulerStatus
from .scraper import Scraper
from .stats import summarize
from .storage import JobStorage
from .utils import utc_now

logger = logging.getLogger(__name__)

JOB_ID = "gulf-jobs-scrape"

_FIELD_BY_ALIAS = {to_camel(name): name for name in SchedulerConfig.model_fields}


class JobScheduler:
    """Runs scrape cycles on an interval and on demand."""

    def __init__(
        self,
        scraper: Scraper,
        storage: JobStorage,
        config: Optional[SchedulerConfig] = None,
    ) -> None:
        self.scraper = scraper
        self.storage = storage
        self.config = config or SchedulerConfig()
        self.last_run_at: Optional[datetime] = None
        self.last_result: Optional[CycleResult] = None

        self._run_lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._scheduler: Optional[BackgroundScheduler] = None
        self._armed_interval: Optional[float] = None

    @property
    def is_running(self) -> bool:
        return self._run_lock.locked()

    @property
    def is_scheduled(self) -> bool:
        return self._scheduler is not None

    @property
    def state(self) -> str:
        if self.is_running:
            return "running"
        return "scheduled" if self.is_scheduled else "stopped"

    def start(self) -> bool:
        """Arm the interval timer. Returns False if already scheduled or disabled."""
        with self._state_lock:
            if self._scheduler is not None:
                logger.info("Scheduler is already running")
                return False
            if not self.config.enabled:
                logger.info("Scheduler is disabled")
                return False

            interval = self.config.interval_hours
            job_kwargs: Dict[str, Any] = {}
            if self.config.run_on_start:
                job_kwargs["next_run_time"] = utc_now()

            scheduler = BackgroundScheduler(timezone="UTC")
            scheduler.add_job(
                self._scheduled_tick,
                "interval",
                hours=interval,
                id=JOB_ID,
                max_instances=1,
                coalesce=True,
                **job_kwargs,
            )
            scheduler.start()
            self._scheduler = scheduler
            self._armed_interval = interval

        logger.info("Starting job scheduler - running every %s hours", interval)
        return True

    def stop(self) -> bool:
        """Disarm the timer. A cycle already in flight is left to finish."""
        with self._state_lock:
            scheduler, self._scheduler = self._scheduler, None
            self._armed_interval = None
        if scheduler is None:
            return False
        scheduler.shutdown(wait=False)
        logger.info("Job scheduler stopped")
        return True

    def update_config(self, changes: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> SchedulerConfig:
        """Merge `changes` and `kwargs` (snake_case or camelCase keys) into the config.

        An interval change is picked up by the armed timer at its next tick.

        Raises:
            pydantic.ValidationError: unknown keys or invalid values.
        """
        merged = {**(changes or {}), **kwargs}
        normalized = {_FIELD_BY_ALIAS.get(k, k): v for k, v in merged.items()}
        with self._state_lock:
            self.config = SchedulerConfig.model_validate({**self.config.model_dump(), **normalized})
            config = self.config
        logger.info("Scheduler configuration updated: %s", config.model_dump())
        return config

    def get_status(self) -> SchedulerStatus:
        next_run = None
        with self._state_lock:
            scheduler = self._scheduler
            if scheduler is not None:
                job = scheduler.get_job(JOB_ID)
                next_run = job.next_run_time if job else None
            return SchedulerStatus(
                state=self.state,
                is_running=self.is_running,
                is_scheduled=scheduler is not None,
                config=self.config,
                next_run=next_run,
                last_run_at=self.last_run_at,
                last_result=self.last_result,
            )

    def trigger_manual_scraping(self) -> CycleResult:
        """Run one cycle now, unless one is already running."""
        logger.info("Manual job scraping triggered")
        return self._run_exclusive()

    def _scheduled_tick(self) -> None:
        with self._state_lock:
            scheduler = self._scheduler
            interval = self.config.interval_hours
            if scheduler is not None and self._armed_interval != interval:
                scheduler.reschedule_job(JOB_ID, trigger="interval", hours=interval)
                self._armed_interval = interval
                logger.info("Rearmed scheduler with new interval of %s hours", interval)

        if not self.config.enabled:
            logger.info("Scheduler is disabled, skipping this execution")
            return
        logger.info("Starting scheduled Gulf job scraping...")
        result = self._run_exclusive()
        if result.busy:
            logger.info("Job is already running, skipping this execution")

    def _run_exclusive(self) -> CycleResult:
        if not self._run_lock.acquire(blocking=False):
            return CycleResult(success=False, busy=True, message="Job scraping is already running")
        try:
            return self._execute_cycle()
        finally:
            self._run_lock.release()

    def _execute_cycle(self) -> CycleResult:
        started = utc_now()
        try:
            result = self._scrape_and_store()
        except Exception as exc:
            logger.exception("Error in job scraping execution")
            result = CycleResult(success=False, message=f"Job scraping failed: {exc}")

        result.started_at = started
        result.finished_at = utc_now()
        with self._state_lock:
            self.last_run_at = result.finished_at
            self.last_result = result
        return result

    def _scrape_and_store(self) -> CycleResult:
        report = self.scraper.scrape_all()
        if report.all_failed:
            logger.error("All %d source(s) failed", len(report.attempted))
            return CycleResult(
                success=False,
                message=f"All {len(report.attempted)} source(s) failed",
                failed_sources=report.failures,
            )
        if not report.jobs:
            logger.info("No jobs scraped, skipping save operation")
            return CycleResult(success=True, message="No jobs scraped", failed_sources=report.failures)

        filename = self.storage.save(report.jobs)
        if self.config.cleanup_old_files:
            self.storage.prune(self.config.keep_last_files)

        stats = summarize(report.jobs)
        logger.info(
            "Job scraping statistics: total=%d by_country=%s by_source=%s",
            stats.total_jobs,
            stats.by_country,
            stats.by_source,
        )
        return CycleResult(
            success=True,
            message=f"Successfully scraped and saved {len(report.jobs)} jobs",
            total_jobs=len(report.jobs),
            filename=filename,
            failed_sources=report.failures,
        )
