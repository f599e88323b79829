"""Source connectors.

Each connector scrapes one job site and returns `ScrapedJob` records. New
sites are added by subclassing `HtmlJobSource` (or `JobSource` for JSON
APIs) and listing the class in `SOURCE_CLASSES`.
"""

from __future__ import annotations

from typing import List, Type

from ..config import Settings
from .base import HtmlJobSource, JobSource
from .bayt import BaytSource
from .dubizzle import DubizzleSource
from .gulftalent import GulfTalentSource
from .naukrigulf import NaukriGulfSource

SOURCE_CLASSES: List[Type[HtmlJobSource]] = [
    BaytSource,
    GulfTalentSource,
    NaukriGulfSource,
    DubizzleSource,
]


def build_sources(settings: Settings) -> List[JobSource]:
    """Instantiate the connectors enabled in `settings` (all when none are listed)."""
    wanted = {s.lower() for s in settings.sources}
    out: List[JobSource] = []
    for cls in SOURCE_CLASSES:
        config = cls.default_config()
        config = config.model_copy(
            update={
                "period": settings.period,
                "max_jobs": settings.max_jobs_per_site,
                "enabled": not wanted or config.name.lower() in wanted,
            }
        )
        out.append(cls(config=config, timeout_s=settings.http_timeout_s, max_retries=settings.max_retries))
    return out


__all__ = [
    "JobSource",
    "HtmlJobSource",
    "BaytSource",
    "GulfTalentSource",
    "NaukriGulfSource",
    "DubizzleSource",
    "SOURCE_CLASSES",
    "build_sources",
]
