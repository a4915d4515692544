import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field, StrictInt

from swarmcrawl.exceptions import InvalidRequestError, JobNotFoundError, TransientInfrastructureError
from swarmcrawl.services.crawl_job_service import CrawlJobService
from swarmcrawl.services.status_reporter import StatusReporter

logger = logging.getLogger(__name__)


class SubmitCrawlRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: Optional[str] = None
    max_distance: Optional[StrictInt] = Field(default=None, alias="maxDistance")
    max_seconds: Optional[StrictInt] = Field(default=None, alias="maxSeconds")
    max_urls: Optional[StrictInt] = Field(default=None, alias="maxUrls")


class InjectTaskRequest(SubmitCrawlRequest):
    distance: Optional[StrictInt] = None


def create_crawls_router(job_service: CrawlJobService, status_reporter: StatusReporter, admin_guard):
    router = APIRouter(prefix="/crawls", tags=["Crawls"])

    @router.post("", status_code=202)
    def submit(req: SubmitCrawlRequest):
        try:
            crawl_id = job_service.submit(req.url, req.max_distance, req.max_seconds, req.max_urls)
        except InvalidRequestError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except TransientInfrastructureError:
            logger.exception("Could not create crawl for %s", req.url)
            raise HTTPException(status_code=503, detail="crawl store unavailable")
        return {"crawlId": crawl_id}

    @router.get("")
    def list_crawls(limit: Optional[int] = 20):
        """Return the most recently started crawls."""
        limit = max(1, min(int(limit or 20), 500))
        try:
            views = status_reporter.recent(limit=limit)
        except TransientInfrastructureError:
            logger.exception("Could not list crawls")
            raise HTTPException(status_code=503, detail="crawl store unavailable")
        return [v.to_dict() for v in views]

    @router.get("/{crawl_id}")
    def status(crawl_id: str):
        try:
            view = status_reporter.status(crawl_id)
        except TransientInfrastructureError:
            logger.exception("Could not read crawl %s", crawl_id)
            raise HTTPException(status_code=503, detail="crawl store unavailable")
        if view is None:
            raise HTTPException(status_code=404, detail="crawl not found")
        return view.to_dict()

    @router.post("/{crawl_id}/tasks", status_code=202)
    def inject(crawl_id: str, req: InjectTaskRequest, _admin: bool = Depends(admin_guard)):
        try:
            task = job_service.inject(
                crawl_id, req.url, req.distance, req.max_distance, req.max_seconds, req.max_urls
            )
        except InvalidRequestError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except JobNotFoundError:
            raise HTTPException(status_code=404, detail="crawl not found")
        except TransientInfrastructureError:
            logger.exception("Could not inject %s into crawl %s", req.url, crawl_id)
            raise HTTPException(status_code=503, detail="crawl store unavailable")
        return {"status": "queued", "task": task.to_message()}

    return router
