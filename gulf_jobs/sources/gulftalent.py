"""GulfTalent jobs source connector."""

from __future__ import annotations

from ..models import SourceConfig
from .base import HtmlJobSource


class GulfTalentSource(HtmlJobSource):
    """Fetch jobs from GulfTalent and normalize them.

    GulfTalent quotes most packages in USD, so that is the fallback currency
    when a salary string carries no currency code.
    """

    source_name = "GulfTalent"

    @classmethod
    def default_config(cls) -> SourceConfig:
        return SourceConfig(
            name=cls.source_name,
            base_url="https://www.gulftalent.com",
            search_url="https://www.gulftalent.com/{location}/jobs",
            currency="USD",
            locations={
                "uae": "United Arab Emirates",
                "saudi-arabia": "Saudi Arabia",
                "qatar": "Qatar",
                "kuwait": "Kuwait",
                "bahrain": "Bahrain",
                "oman": "Oman",
            },
            selectors={
                "card": ".job-list-item, .job-result, .job-item",
                "title": ".job-title, h3",
                "company": ".company, .employer, .company-name",
                "location": ".location, .job-location",
                "description": ".description, .snippet",
                "salary": ".salary",
                "posted": ".date, .posted-date",
                "job_type": ".job-type",
                "link": ".job-title a, h3 a, a",
            },
        )
