"""NaukriGulf jobs source connector."""

from __future__ import annotations

from ..models import SourceConfig
from .base import HtmlJobSource


class NaukriGulfSource(HtmlJobSource):
    """Fetch jobs from NaukriGulf and normalize them."""

    source_name = "NaukriGulf"

    @classmethod
    def default_config(cls) -> SourceConfig:
        return SourceConfig(
            name=cls.source_name,
            base_url="https://www.naukrigulf.com",
            search_url="https://www.naukrigulf.com/jobs-in-{location}",
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
                "card": ".job-tuple, .jobTuple, .ng-box",
                "title": ".title, .job-title, .designation",
                "company": ".company, .companyInfo, .info-org",
                "location": ".location, .locWdth, .info-loc",
                "description": ".job-description, .desc",
                "salary": ".salary, .sal",
                "posted": ".date, .jobTupleFooter, .time",
                "job_type": ".job-type",
                "link": "a",
            },
        )
