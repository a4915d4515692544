import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from swarmcrawl.exceptions import TransientInfrastructureError
from swarmcrawl.utils import retry as retry_module
from swarmcrawl.utils.retry import retry_transient


@pytest.fixture
def sleeps(monkeypatch):
    calls = []
    monkeypatch.setattr(retry_module.time, "sleep", calls.append)
    return calls


def _operational():
    return OperationalError("SELECT 1", {}, Exception("database is locked"))


def test_retries_then_succeeds(sleeps):
    attempts = []

    @retry_transient("store.op", attempts=3, delay=0.1)
    def flaky():
        attempts.append(1)
        if len(attempts) < 3:
            raise _operational()
        return "ok"

    assert flaky() == "ok"
    assert len(attempts) == 3
    assert sleeps == [0.1, 0.2]


def test_gives_up_with_transient_error(sleeps):
    @retry_transient("store.op", attempts=2, delay=0)
    def down():
        raise ConnectionError("refused")

    with pytest.raises(TransientInfrastructureError) as exc:
        down()
    assert exc.value.operation == "store.op"
    assert isinstance(exc.value.original, ConnectionError)
    assert len(sleeps) == 1


def test_integrity_error_is_not_retried(sleeps):
    calls = []

    @retry_transient(attempts=5, delay=0)
    def conflict():
        calls.append(1)
        raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))

    with pytest.raises(IntegrityError):
        conflict()
    assert len(calls) == 1
    assert sleeps == []


def test_defaults_come_from_environment(monkeypatch, sleeps):
    monkeypatch.setenv("SWARMCRAWL_STORE_RETRIES", "4")
    monkeypatch.setenv("SWARMCRAWL_STORE_RETRY_DELAY", "0.5")
    calls = []

    @retry_transient()
    def down():
        calls.append(1)
        raise _operational()

    with pytest.raises(TransientInfrastructureError) as exc:
        down()
    assert len(calls) == 4
    assert sleeps == [0.5, 1.0, 2.0]
    assert "down" in exc.value.operation
