"""Dependency injection container for the application."""
from dependency_injector import containers, providers
import requests

from swarmcrawl.db.engine import make_engine
from swarmcrawl.repository.jobs import JobsRepository
from swarmcrawl.repository.claims import ClaimsRepository
from swarmcrawl.repository.tasks import SqlTaskQueue
from swarmcrawl.services.crawl_job_service import CrawlJobService
from swarmcrawl.services.crawl_worker import CrawlWorker
from swarmcrawl.services.frontier import FrontierDispatcher
from swarmcrawl.services.http_service import HttpService
from swarmcrawl.services.link_extractor import LinkExtractor
from swarmcrawl.services.page_expander import HttpPageExpander
from swarmcrawl.services.status_reporter import StatusReporter
from swarmcrawl.services.task_queue import InMemoryTaskQueue
from swarmcrawl.services.worker_pool import WorkerPool
from swarmcrawl import config as env
from sqlalchemy.orm import sessionmaker


# Environment variables used by the container (read via `swarmcrawl.config` helpers).
#
# DATABASE_URL (str, default: "sqlite:///swarmcrawl.db")
#   Shared store for the job ledger, the claim set and (with the sql backend)
#   the task queue. Every worker process of a deployment must point at the same one.
#
# USER_AGENT (str, default: "SwarmCrawl/0.1")
#   User-Agent header for page fetches.
#
# HTTP_TIMEOUT (int seconds, default: 10)
#
# SWARMCRAWL_WORKERS (int, default: 4)
#   Worker threads started by this process.
#
# SWARMCRAWL_QUEUE_BACKEND (str, default: "sql")
#   "sql" shares the queue through DATABASE_URL; "memory" keeps it in-process.
#
# SWARMCRAWL_QUEUE_VISIBILITY_SECONDS (int seconds, default: 300)
#   Lease length for a consumed task; an unacked task reappears after it.
#
# SWARMCRAWL_CONSUME_TIMEOUT (float seconds, default: 1.0)
#   How long an idle worker waits on the queue before re-checking for shutdown.
#
# SWARMCRAWL_STORE_RETRIES / SWARMCRAWL_STORE_RETRY_DELAY (int, default: 3 / float seconds, default: 0.2)
#   Attempts and initial backoff for transient store/queue failures.
#
# SWARMCRAWL_API_HOST / SWARMCRAWL_API_PORT (default: "0.0.0.0" / 8000)
#
# ADMIN_TOKEN (str | optional)
#   Task injection requires `Authorization: Bearer <token>`; unset, it answers 503.
ENV = {
    "DATABASE_URL": env.get_str_env("DATABASE_URL", "sqlite:///swarmcrawl.db"),
    "USER_AGENT": env.get_str_env("USER_AGENT", "SwarmCrawl/0.1"),
    "HTTP_TIMEOUT": env.get_int_env("HTTP_TIMEOUT", 10),
    "SWARMCRAWL_WORKERS": env.get_int_env("SWARMCRAWL_WORKERS", 4),
    "SWARMCRAWL_QUEUE_BACKEND": env.get_str_env("SWARMCRAWL_QUEUE_BACKEND", "sql").strip().lower(),
    "SWARMCRAWL_QUEUE_VISIBILITY_SECONDS": env.get_int_env("SWARMCRAWL_QUEUE_VISIBILITY_SECONDS", 300),
    "SWARMCRAWL_CONSUME_TIMEOUT": env.get_float_env("SWARMCRAWL_CONSUME_TIMEOUT", 1.0),
    "SWARMCRAWL_STORE_RETRIES": env.get_int_env("SWARMCRAWL_STORE_RETRIES", 3),
    "SWARMCRAWL_STORE_RETRY_DELAY": env.get_float_env("SWARMCRAWL_STORE_RETRY_DELAY", 0.2),
    "SWARMCRAWL_API_HOST": env.get_str_env("SWARMCRAWL_API_HOST", "0.0.0.0"),
    "SWARMCRAWL_API_PORT": env.get_int_env("SWARMCRAWL_API_PORT", 8000),
    "ADMIN_TOKEN": env.get_optional_str_env("ADMIN_TOKEN"),
}


class Container(containers.DeclarativeContainer):
    """Dependency injection container for SwarmCrawl."""

    config = providers.Configuration(default=ENV)

    # Database engine - cached per URL by make_engine
    db_engine = providers.Singleton(
        make_engine,
        database_url=config.DATABASE_URL,
    )
    session_factory = providers.Singleton(
        sessionmaker,
        bind=db_engine,
        future=True,
    )

    # Shared store
    jobs_repository = providers.Singleton(
        JobsRepository,
        session_factory=session_factory,
    )

    claims_repository = providers.Singleton(
        ClaimsRepository,
        session_factory=session_factory,
    )

    task_queue = providers.Selector(
        config.SWARMCRAWL_QUEUE_BACKEND,
        sql=providers.Singleton(
            SqlTaskQueue,
            session_factory=session_factory,
            visibility_timeout_seconds=config.SWARMCRAWL_QUEUE_VISIBILITY_SECONDS.as_(int),
        ),
        memory=providers.Singleton(InMemoryTaskQueue),
    )

    frontier = providers.Singleton(
        FrontierDispatcher,
        queue=task_queue,
    )

    # Fetch/parse collaborator
    http_service = providers.Singleton(
        HttpService,
        user_agent=config.USER_AGENT.as_(str),
        http_client=providers.Object(requests.get),
        timeout=config.HTTP_TIMEOUT.as_(int),
    )

    link_extractor = providers.Singleton(LinkExtractor)

    page_expander = providers.Singleton(
        HttpPageExpander,
        http_service=http_service,
        link_extractor=link_extractor,
    )

    # Coordinator services
    crawl_job_service = providers.Singleton(
        CrawlJobService,
        ledger=jobs_repository,
        gate=claims_repository,
        frontier=frontier,
    )

    status_reporter = providers.Singleton(
        StatusReporter,
        ledger=jobs_repository,
    )

    crawl_worker = providers.Factory(
        CrawlWorker,
        ledger=jobs_repository,
        gate=claims_repository,
        frontier=frontier,
        expander=page_expander,
    )

    worker_pool = providers.Singleton(
        WorkerPool,
        worker_factory=crawl_worker.provider,
        size=config.SWARMCRAWL_WORKERS.as_(int),
        poll_timeout=config.SWARMCRAWL_CONSUME_TIMEOUT.as_(float),
    )
