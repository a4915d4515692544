import argparse
import logging
import threading

import uvicorn

from swarmcrawl import config
from swarmcrawl.api.app import create_app
from swarmcrawl.container import Container
from swarmcrawl.db.engine import init_schema

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="SwarmCrawl coordinator: intake API plus crawl workers")
    parser.add_argument("--workers", type=int, default=None, help="worker threads in this process (default: SWARMCRAWL_WORKERS)")
    parser.add_argument("--no-api", action="store_true", help="run workers only")
    parser.add_argument("--no-workers", action="store_true", help="serve the API only")
    return parser.parse_args(argv)


def main(container: Container = None, argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, config.log_level(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s [%(threadName)s] %(message)s",
    )
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    container = container or Container()
    if args.workers is not None:
        container.config.SWARMCRAWL_WORKERS.from_value(args.workers)

    init_schema(container.db_engine())

    pool = None
    if not args.no_workers:
        pool = container.worker_pool()
        pool.start()

    try:
        if args.no_api:
            logger.info("API disabled; running workers until interrupted")
            threading.Event().wait()
        else:
            env = container.config()
            uvicorn.run(
                create_app(container),
                host=env["SWARMCRAWL_API_HOST"],
                port=int(env["SWARMCRAWL_API_PORT"]),
            )
    except KeyboardInterrupt:
        logger.info("Shutting down")
    finally:
        if pool is not None:
            pool.stop()


if __name__ == '__main__':
    main()
