"""Bayt.com jobs source connector.

Bayt publishes one server-rendered listing page per country; the `date`
filter narrows results to the configured period (24h, 7d, 30d, all).
"""

from __future__ import annotations

from ..models import SourceConfig
from .base import HtmlJobSource


class BaytSource(HtmlJobSource):
    """Fetch jobs from Bayt.com and normalize them."""

    source_name = "Bayt.com"

    @classmethod
    def default_config(cls) -> SourceConfig:
        return SourceConfig(
            name=cls.source_name,
            base_url="https://www.bayt.com",
            search_url="https://www.bayt.com/en/{location}/jobs/?filters[date]={period}",
            currency="AED",
            locations={
                "uae": "United Arab Emirates",
                "saudi-arabia": "Saudi Arabia",
                "qatar": "Qatar",
                "kuwait": "Kuwait",
                "bahrain": "Bahrain",
                "oman": "Oman",
            },
            selectors={
                "card": ".job-card, .t-job-item, li[data-js-job]",
                "title": ".job-title, h2 a",
                "company": ".company-name, .t-company",
                "location": ".job-location, .location, .t-location",
                "description": ".job-description, .t-description",
                "salary": ".salary, .t-salary",
                "posted": ".posted-date, .t-posted",
                "job_type": ".job-type",
                "link": ".job-title a, h2 a, a",
            },
        )
