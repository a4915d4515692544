from fastapi import APIRouter

SECRET_KEYS = {"ADMIN_TOKEN", "DATABASE_URL"}


def create_systems_router(container_env: dict, pending_count=None):
    """Create systems router with access to container environment config."""
    router = APIRouter(prefix="/systems", tags=["System"])

    @router.get("/health")
    def health():
        out = {"status": "ok"}
        if pending_count is not None:
            out["queuedTasks"] = pending_count()
        return out

    @router.get("/config")
    def get_config():
        """Return current environment configuration values (secrets masked)."""
        return {
            "environment": {
                key: ("***" if key in SECRET_KEYS and value else (str(value) if value is not None else None))
                for key, value in container_env.items()
            }
        }

    return router
