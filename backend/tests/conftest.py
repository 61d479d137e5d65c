import os

# The app's own engine must never touch a file database during tests
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, create_engine  # noqa: E402

from court_lottery.config import LotterySettings  # noqa: E402
from court_lottery.database import init_db, make_session_factory  # noqa: E402
from court_lottery.dependencies import get_uow_factory  # noqa: E402
from court_lottery.main import app  # noqa: E402
from court_lottery.repositories.unit_of_work import make_uow_factory  # noqa: E402
from tests.helpers import TODAY  # noqa: E402

TEST_DATABASE_URL = "sqlite:///:memory:"

# ============================================================================
# Test Database Setup with StaticPool
# ============================================================================
# 1. sqlite:///:memory: with StaticPool so every session sees the same DB
# 2. check_same_thread=False required for TestClient/threaded access
# 3. A fresh engine per test, so no rows leak between tests
# 4. App dependency overridden to use the test engine (see client_fixture)


@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture(name="session")
def session_fixture(engine):
    """Session for seeding and inspecting rows. Commit before calling a service."""
    with Session(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture(name="uow_factory")
def uow_factory_fixture(engine):
    return make_uow_factory(make_session_factory(engine))


@pytest.fixture(name="settings")
def settings_fixture():
    return LotterySettings()


@pytest.fixture(name="today")
def today_fixture():
    return TODAY


@pytest.fixture(name="client")
def client_fixture(engine):
    """Test client whose routes run against the test engine

    Override MUST be set BEFORE TestClient() and stay in place for the
    entire duration.
    """
    app.dependency_overrides[get_uow_factory] = lambda: make_uow_factory(make_session_factory(engine))

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
