"""Dubizzle jobs source connector.

Dubizzle is a classifieds site: many job ads are posted by individuals and
carry no employer name, so cards without a company are kept under a
placeholder instead of being dropped.
"""

from __future__ import annotations

from ..models import SourceConfig
from .base import HtmlJobSource


class DubizzleSource(HtmlJobSource):
    """Fetch jobs from Dubizzle (Dubai) and normalize them."""

    source_name = "Dubizzle"
    require_company = False

    @classmethod
    def default_config(cls) -> SourceConfig:
        return SourceConfig(
            name=cls.source_name,
            base_url="https://dubai.dubizzle.com",
            search_url="https://dubai.dubizzle.com/jobs/",
            currency="AED",
            locations={"dubai": "Dubai, United Arab Emirates"},
            selectors={
                "card": '[data-testid="listing-card"], .listing-card',
                "title": '[data-testid="listing-title"], .listing-title',
                "company": ".company-name",
                "location": '[data-testid="listing-location"], .location',
                "description": '[data-testid="listing-description"], .description',
                "salary": '.price, [data-testid="listing-price"]',
                "posted": '.date, [data-testid="listing-date"]',
                "job_type": '[data-testid="listing-employment-type"], .employment-type',
                "link": "a",
            },
        )
