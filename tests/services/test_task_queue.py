import threading

from swarmcrawl.domain import CrawlLimits, CrawlTask
from swarmcrawl.services.task_queue import InMemoryTaskQueue


def _task(url="https://example.com/", crawl_id="job001"):
    return CrawlTask(crawl_id, url, 0, CrawlLimits(1, 60, 10))


def test_consume_returns_none_when_empty():
    q = InMemoryTaskQueue()
    assert q.consume() is None
    assert q.consume(timeout=0.01) is None


def test_task_stays_in_flight_until_acked():
    q = InMemoryTaskQueue()
    q.publish(_task())
    d = q.consume()
    assert d.task == _task()
    assert q.pending_count() == 1
    assert q.in_flight_count() == 1
    assert q.ack(d) is True
    assert q.pending_count() == 0
    assert q.ack(d) is False


def test_release_requeues_with_next_attempt():
    q = InMemoryTaskQueue()
    q.publish(_task())
    d1 = q.consume()
    assert q.release(d1) is True
    d2 = q.consume()
    assert d2.task == d1.task
    assert d2.attempt == 2


def test_blocking_consume_wakes_on_publish():
    q = InMemoryTaskQueue()
    got = []

    def consumer():
        got.append(q.consume(timeout=5))

    t = threading.Thread(target=consumer)
    t.start()
    q.publish(_task())
    t.join(5)
    assert got and got[0] is not None


def test_pending_count_by_crawl():
    q = InMemoryTaskQueue()
    q.publish(_task(crawl_id="a"))
    q.publish(_task(crawl_id="b"))
    q.consume()
    assert q.pending_count("a") == 1
    assert q.pending_count("b") == 1
