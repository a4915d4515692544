from dataclasses import FrozenInstanceError
from datetime import datetime

import pytest

from swarmcrawl.domain import CrawlJob, CrawlLimits, JobStatus, JobStatusView, StopReason


def _job(**kw):
    now = datetime(2026, 1, 1, 12, 0, 0)
    base = dict(
        crawl_id="job001",
        root_url="https://example.com/",
        scope_domain="example.com",
        limits=CrawlLimits(1, 300, 10),
        start_time=now,
        last_modified=now,
    )
    base.update(kw)
    return CrawlJob(**base)


def test_status_follows_stop_reason():
    assert _job().status is JobStatus.ACTIVE
    assert not _job().is_stopped
    stopped = _job(stop_reason=StopReason.MAX_URLS)
    assert stopped.status is JobStatus.STOPPED
    assert stopped.is_stopped


def test_snapshots_are_immutable():
    job = _job()
    with pytest.raises(FrozenInstanceError):
        job.num_pages = 5


def test_status_view_projection():
    job = _job(num_pages=4, max_distance_seen=1, stop_reason=StopReason.MAX_DISTANCE)
    view = JobStatusView.from_job(job)
    d = view.to_dict()
    assert d["crawlId"] == "job001"
    assert d["distance"] == 1
    assert d["numPages"] == 4
    assert d["status"] == "Stopped"
    assert d["stopReason"] == "MaxDistance"
    assert d["startTime"] == "2026-01-01T12:00:00"


def test_status_view_active_has_no_reason():
    d = JobStatusView.from_job(_job()).to_dict()
    assert d["stopReason"] is None
    assert d["status"] == "Active"
