from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict

from swarmcrawl.domain.crawl_job import CrawlLimits


@dataclass(frozen=True)
class CrawlTask:
    """A unit of dispatch. Self-contained so a consumer can apply per-task bounds
    without looking the job up first."""

    crawl_id: str
    url: str
    distance: int
    limits: CrawlLimits

    def child(self, url: str) -> "CrawlTask":
        return CrawlTask(crawl_id=self.crawl_id, url=url, distance=self.distance + 1, limits=self.limits)

    def to_message(self) -> Dict[str, Any]:
        return {
            "crawlId": self.crawl_id,
            "url": self.url,
            "distance": self.distance,
            "maxDistance": self.limits.max_distance,
            "maxSeconds": self.limits.max_seconds,
            "maxUrls": self.limits.max_urls,
        }

    @classmethod
    def from_message(cls, data: Dict[str, Any]) -> "CrawlTask":
        return cls(
            crawl_id=str(data["crawlId"]),
            url=str(data["url"]),
            distance=int(data["distance"]),
            limits=CrawlLimits(
                max_distance=int(data["maxDistance"]),
                max_seconds=int(data["maxSeconds"]),
                max_urls=int(data["maxUrls"]),
            ),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_message(), sort_keys=True)

    @classmethod
    def from_json(cls, payload: str) -> "CrawlTask":
        return cls.from_message(json.loads(payload))
