import threading
from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from swarmcrawl.domain import CrawlJob, CrawlLimits, StopReason
from swarmcrawl.repository.jobs import JobsRepository


def _new_job(crawl_id="job001", start=None):
    start = start or datetime(2026, 1, 1, 12, 0, 0)
    return CrawlJob(
        crawl_id=crawl_id,
        root_url="https://example.com/",
        scope_domain="example.com",
        limits=CrawlLimits(max_distance=2, max_seconds=300, max_urls=10),
        start_time=start,
        last_modified=start,
    )


def test_create_and_read_round_trip(session_factory):
    repo = JobsRepository(session_factory)
    created = repo.create_job(_new_job())
    assert created.crawl_id == "job001"

    job = repo.read("job001")
    assert job is not None
    assert job.num_pages == 0
    assert job.stop_reason is None
    assert job.limits == CrawlLimits(2, 300, 10)
    assert job.scope_domain == "example.com"


def test_read_unknown_returns_none(session_factory):
    repo = JobsRepository(session_factory)
    assert repo.read("nope00") is None


def test_duplicate_id_raises_integrity_error(session_factory):
    repo = JobsRepository(session_factory)
    repo.create_job(_new_job())
    with pytest.raises(IntegrityError):
        repo.create_job(_new_job())


def test_increment_pages_returns_new_count(session_factory):
    repo = JobsRepository(session_factory)
    repo.create_job(_new_job())
    assert repo.increment_pages("job001") == 1
    assert repo.increment_pages("job001") == 2
    assert repo.read("job001").num_pages == 2


def test_increment_unknown_job_returns_zero(session_factory):
    repo = JobsRepository(session_factory)
    assert repo.increment_pages("ghost0") == 0


def test_concurrent_increments_are_not_lost(file_session_factory):
    repo = JobsRepository(file_session_factory)
    repo.create_job(_new_job())
    results = []
    lock = threading.Lock()

    def worker():
        for _ in range(5):
            n = repo.increment_pages("job001")
            with lock:
                results.append(n)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(results) == list(range(1, 21))
    assert repo.read("job001").num_pages == 20


def test_touch_never_moves_backwards(session_factory):
    repo = JobsRepository(session_factory)
    start = datetime(2026, 1, 1, 12, 0, 0)
    repo.create_job(_new_job(start=start))

    later = start + timedelta(seconds=30)
    repo.touch("job001", later)
    assert repo.read("job001").last_modified == later

    repo.touch("job001", start + timedelta(seconds=5))
    assert repo.read("job001").last_modified == later


def test_touch_defaults_to_now(session_factory):
    repo = JobsRepository(session_factory)
    repo.create_job(_new_job(start=datetime(2020, 1, 1)))
    repo.touch("job001")
    job = repo.read("job001")
    assert job.last_modified > job.start_time


def test_record_distance_keeps_maximum(session_factory):
    repo = JobsRepository(session_factory)
    repo.create_job(_new_job())
    repo.record_distance("job001", 2)
    repo.record_distance("job001", 1)
    assert repo.read("job001").max_distance_seen == 2


def test_try_stop_first_writer_wins_and_reason_is_final(session_factory):
    repo = JobsRepository(session_factory)
    repo.create_job(_new_job())

    assert repo.try_stop("job001", StopReason.TIMEOUT) is True
    assert repo.try_stop("job001", StopReason.MAX_URLS) is False
    assert repo.try_stop("job001", StopReason.TIMEOUT) is False

    job = repo.read("job001")
    assert job.is_stopped
    assert job.stop_reason is StopReason.TIMEOUT


def test_try_stop_race_has_exactly_one_winner(file_session_factory):
    repo = JobsRepository(file_session_factory)
    repo.create_job(_new_job())
    reasons = [StopReason.MAX_URLS, StopReason.MAX_DISTANCE, StopReason.TIMEOUT] * 3
    outcomes = []
    lock = threading.Lock()
    start = threading.Barrier(len(reasons), timeout=10)

    def worker(reason):
        start.wait()
        won = repo.try_stop("job001", reason)
        with lock:
            outcomes.append((reason, won))

    threads = [threading.Thread(target=worker, args=(r,)) for r in reasons]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    winners = [r for r, won in outcomes if won]
    assert len(winners) == 1
    assert repo.read("job001").stop_reason is winners[0]


def test_counters_still_move_after_stop(session_factory):
    # in-flight tasks may overshoot; the ledger keeps counting them
    repo = JobsRepository(session_factory)
    repo.create_job(_new_job())
    repo.try_stop("job001", StopReason.MAX_URLS)
    assert repo.increment_pages("job001") == 1
    assert repo.read("job001").stop_reason is StopReason.MAX_URLS


def test_list_jobs_most_recent_first(session_factory):
    repo = JobsRepository(session_factory)
    repo.create_job(_new_job("old000", start=datetime(2026, 1, 1)))
    repo.create_job(_new_job("new000", start=datetime(2026, 1, 2)))
    ids = [j.crawl_id for j in repo.list_jobs(limit=10)]
    assert ids == ["new000", "old000"]
    assert len(repo.list_jobs(limit=1)) == 1
