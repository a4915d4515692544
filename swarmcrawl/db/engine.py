from typing import Dict, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from swarmcrawl import config
from swarmcrawl.db.models import Base

# Simple cache to avoid creating multiple Engine objects in the same process.
_ENGINES: Dict[str, Engine] = {}


def make_engine(database_url: Optional[str] = None) -> Engine:
    """Create or return a cached SQLAlchemy Engine for `database_url`.

    Caches one Engine per URL so every repository in a process shares a pool.
    SQLite engines are opened with `check_same_thread=False` because worker
    threads share them.
    """
    database_url = database_url or config.DATABASE_URL
    if not database_url:
        raise RuntimeError("DATABASE_URL not set")
    engine = _ENGINES.get(database_url)
    if engine is None:
        kwargs = {"future": True}
        if database_url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False, "timeout": 30}
        else:
            kwargs["pool_pre_ping"] = True
        engine = create_engine(database_url, **kwargs)
        _ENGINES[database_url] = engine
    return engine


def init_schema(engine: Engine) -> None:
    """Create the coordinator tables if they do not exist."""
    Base.metadata.create_all(engine)
