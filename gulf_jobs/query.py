"""Filtering helpers for serving snapshot contents.

All matching is case-insensitive substring matching on the free-text
fields, the same way the board's search box behaves.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from .models import ScrapedJob
from .normalize import country_name


def by_country(jobs: Iterable[ScrapedJob], country: str) -> List[ScrapedJob]:
    """Jobs whose location mentions `country`, given as a name or an ISO code (AE, SA, ...)."""
    needle = (country_name(country) or country).strip().lower()
    return [j for j in jobs if needle in j.location.lower()]


def by_city(jobs: Iterable[ScrapedJob], city: str, country: Optional[str] = None) -> List[ScrapedJob]:
    needle = city.strip().lower()
    out = [j for j in jobs if needle in j.location.lower()]
    return by_country(out, country) if country else out


def by_category(jobs: Iterable[ScrapedJob], category: str) -> List[ScrapedJob]:
    """Jobs whose industry or title mentions `category`."""
    needle = category.strip().lower()
    return [j for j in jobs if needle in j.company_industry.lower() or needle in j.title.lower()]


def filter_jobs(
    jobs: Iterable[ScrapedJob],
    country: Optional[str] = None,
    city: Optional[str] = None,
    category: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[ScrapedJob]:
    """Apply the optional filters in order (country, city, category), then the limit."""
    out = list(jobs)
    if country:
        out = by_country(out, country)
    if city:
        out = by_city(out, city)
    if category:
        out = by_category(out, category)
    if limit is not None:
        out = out[: max(limit, 0)]
    return out
