from fastapi import FastAPI

from swarmcrawl.api.auth import make_admin_guard
from swarmcrawl.api.routers import create_crawls_router, create_systems_router


def create_app(container) -> FastAPI:
    """Build the FastAPI application from a wired Container."""
    app = FastAPI(title="SwarmCrawl", version="0.1.0")
    env = container.config()
    admin_guard = make_admin_guard(lambda: env.get("ADMIN_TOKEN"))

    app.include_router(
        create_crawls_router(
            job_service=container.crawl_job_service(),
            status_reporter=container.status_reporter(),
            admin_guard=admin_guard,
        )
    )
    app.include_router(
        create_systems_router(env, pending_count=container.frontier().pending_count)
    )
    return app
