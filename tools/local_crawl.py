"""Run one crawl end to end in this process and print its status.

    python tools/local_crawl.py example.com --max-distance 1 --max-urls 20
"""
import argparse
import json
import logging
import os
import sys
import time

# Ensure repo root is on sys.path so `swarmcrawl` package imports resolve when
# running the script directly.
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, ROOT)

from swarmcrawl.container import Container
from swarmcrawl.db.engine import init_schema


logging.basicConfig(level=logging.INFO)


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("url")
    parser.add_argument("--max-distance", type=int, default=1)
    parser.add_argument("--max-seconds", type=int, default=60)
    parser.add_argument("--max-urls", type=int, default=25)
    parser.add_argument("--workers", type=int, default=4)
    parser.add_argument("--database-url", default="sqlite:///local_crawl.db")
    args = parser.parse_args()

    container = Container()
    container.config.DATABASE_URL.from_value(args.database_url)
    container.config.SWARMCRAWL_QUEUE_BACKEND.from_value("memory")
    container.config.SWARMCRAWL_WORKERS.from_value(args.workers)
    init_schema(container.db_engine())

    crawl_id = container.crawl_job_service().submit(args.url, args.max_distance, args.max_seconds, args.max_urls)
    print(f"crawl id: {crawl_id}")

    pool = container.worker_pool()
    pool.start()
    reporter = container.status_reporter()
    frontier = container.frontier()
    try:
        # the crawl is over once it stopped or its frontier drained
        while True:
            view = reporter.status(crawl_id)
            if view.stop_reason is not None or frontier.pending_count(crawl_id) == 0:
                break
            time.sleep(0.5)
    finally:
        pool.stop()

    print(json.dumps(reporter.status(crawl_id).to_dict(), indent=2))


if __name__ == '__main__':
    main()
