import threading
from typing import Dict, List, Optional, Union

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from swarmcrawl.db.models import Base
from swarmcrawl.domain import ExpandedPage
from swarmcrawl.exceptions import FetchFailure


@pytest.fixture
def session_factory():
    """In-memory SQLite shared by every thread of the test (one connection)."""
    engine = create_engine(
        "sqlite://",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, future=True)
    engine.dispose()


@pytest.fixture
def file_session_factory(tmp_path):
    """File-backed SQLite so concurrent threads get real, separate connections."""
    dbfile = tmp_path / "swarm.db"
    engine = create_engine(
        f"sqlite:///{dbfile}",
        future=True,
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, future=True)
    engine.dispose()


class FakeExpander:
    """Site graph in a dict: url -> list of hrefs, or an exception to raise.

    `barriers` lets a test hold several workers inside expand() at once.
    """

    def __init__(self, pages: Dict[str, Union[List[str], Exception]], barriers: Optional[Dict[str, threading.Barrier]] = None):
        self.pages = pages
        self.barriers = barriers or {}
        self.calls: List[str] = []
        self._lock = threading.Lock()

    def expand(self, url: str) -> ExpandedPage:
        with self._lock:
            self.calls.append(url)
        barrier = self.barriers.get(url)
        if barrier is not None:
            barrier.wait()
        result = self.pages.get(url)
        if result is None:
            raise FetchFailure(url, "HTTP 404", status_code=404)
        if isinstance(result, Exception):
            raise result
        return ExpandedPage(url=url, status_code=200, links=list(result), content_type="text/html")


@pytest.fixture
def fake_expander_cls():
    return FakeExpander
