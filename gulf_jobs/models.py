"""Data models for the Gulf jobs pipeline.

Everything that crosses a boundary (snapshot files on disk, scheduler status,
HTTP responses) is a Pydantic model. JSON keys are camelCase so snapshot files
stay compatible with the job board front-end that reads them; Python code uses
the snake_case attribute names.

This file uses Pydantic v2.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .utils import utc_now


SCHEMA_VERSION = "1.0.0"

JobType = Literal["full-time", "part-time", "contract", "internship", "freelance"]
JobStatus = Literal["open", "closed", "paused"]
SchedulerStateName = Literal["stopped", "scheduled", "running"]


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys, populated by either name."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self, **kwargs) -> dict:
        return self.model_dump(mode="json", by_alias=True, **kwargs)


class ScrapedJob(CamelModel):
    """One job posting, normalized to the board's canonical shape.

    `uid` is only unique within a source. Cross-source identity is the
    (title, company_name, location) triple, see `gulf_jobs.dedupe`.
    """

    uid: str
    title: str
    description: str = ""
    location: str = "Unknown"
    company_name: str
    company_industry: str = "Other"

    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    currency: str = "AED"

    type: JobType = "full-time"
    remote: bool = False
    status: JobStatus = "open"
    posted_date: Optional[datetime] = None

    source: str
    source_url: str = ""
    scraped_at: datetime = Field(default_factory=utc_now)


class SnapshotMetadata(CamelModel):
    total_jobs: int
    scraped_at: datetime
    sources: List[str] = Field(default_factory=list)
    countries: List[str] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    version: str = SCHEMA_VERSION
    initialized: Optional[bool] = Field(
        default=None,
        description="Only set on the placeholder snapshot written by JobStorage.initialize().",
    )


class Snapshot(CamelModel):
    """The full content of one snapshot file."""

    metadata: SnapshotMetadata
    jobs: List[ScrapedJob] = Field(default_factory=list)


class JobStatistics(CamelModel):
    total_jobs: int = 0
    by_country: Dict[str, int] = Field(default_factory=dict)
    by_source: Dict[str, int] = Field(default_factory=dict)
    by_category: Dict[str, int] = Field(default_factory=dict)
    by_type: Dict[str, int] = Field(default_factory=dict)
    recent_jobs: int = 0


class SourceConfig(CamelModel):
    """Per-source scraping configuration handed to a `JobSource.fetch` call.

    `selectors` maps logical field names (card, title, company, location,
    description, salary, posted, job_type, category, link) to CSS selectors.
    `search_url` may contain `{period}` and `{location}` placeholders.
    `locations` maps the URL slug substituted for `{location}` to the label
    used for cards that carry no location of their own; when it is empty a
    single listing page is fetched.
    """

    name: str
    base_url: str
    search_url: str
    selectors: Dict[str, str] = Field(default_factory=dict)
    enabled: bool = True
    currency: str = "AED"
    period: str = "7d"
    locations: Dict[str, str] = Field(default_factory=dict)
    max_jobs: int = Field(default=100, ge=0)


class SchedulerConfig(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    enabled: bool = True
    interval_hours: float = Field(default=6.0, gt=0)
    cleanup_old_files: bool = True
    keep_last_files: int = Field(default=5, ge=1)
    run_on_start: bool = False


class CycleResult(CamelModel):
    """Outcome of one scrape-dedupe-save-prune cycle.

    A manual trigger rejected because another cycle holds the run lock comes
    back as `success=False, busy=True`; it is a normal result, not an error.
    """

    success: bool
    message: str
    busy: bool = False
    total_jobs: int = 0
    filename: Optional[str] = None
    failed_sources: Dict[str, str] = Field(default_factory=dict)
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None


class SchedulerStatus(CamelModel):
    state: SchedulerStateName
    is_running: bool
    is_scheduled: bool
    config: SchedulerConfig
    next_run: Optional[datetime] = None
    last_run_at: Optional[datetime] = None
    last_result: Optional[CycleResult] = None
