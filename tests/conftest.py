"""Pytest configuration and fixtures."""

import os

import httpx
import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

# Force testing environment before the application module is imported
os.environ["TESTING"] = "true"

from sitetracker import models  # noqa: E402,F401
from sitetracker.core.database import Base, create_session_factory  # noqa: E402
from sitetracker.core.deps import get_store  # noqa: E402
from sitetracker.core.store import DocumentStore  # noqa: E402
from sitetracker.dal.production import ProductionDAL  # noqa: E402
from sitetracker.dal.production_site import ProductionSiteDAL  # noqa: E402
from sitetracker.main import create_application  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
SITES_TABLE = "ProductionSiteTable"
PRODUCTION_TABLE = "ProductionTable"


class UnavailableStore(DocumentStore):
    """Store whose every round-trip fails as if the backend were down."""

    def _fail(self, *args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("store unavailable"))

    async def get_item(self, *args, **kwargs):
        self._fail()

    async def put_item(self, *args, **kwargs):
        self._fail()

    async def update_item(self, *args, **kwargs):
        self._fail()

    async def delete_item(self, *args, **kwargs):
        self._fail()

    async def scan(self, *args, **kwargs):
        self._fail()

    async def query(self, *args, **kwargs):
        self._fail()

    async def ping(self):
        self._fail()


@pytest.fixture(scope="function")
async def test_engine():
    """Create a fresh in-memory engine for each test function."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def store(test_engine) -> DocumentStore:
    return DocumentStore(create_session_factory(test_engine))


@pytest.fixture
def unavailable_store(test_engine) -> DocumentStore:
    return UnavailableStore(create_session_factory(test_engine))


@pytest.fixture
def site_dal(store) -> ProductionSiteDAL:
    return ProductionSiteDAL(store, SITES_TABLE)


@pytest.fixture
def production_dal(store) -> ProductionDAL:
    return ProductionDAL(store, PRODUCTION_TABLE)


@pytest.fixture
def app(store):
    """Application with the document store dependency pointed at the test store."""
    application = create_application()
    application.dependency_overrides[get_store] = lambda: store
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture
def sample_site():
    return {
        "companyId": 1,
        "productionSiteId": 1,
        "name": "Star_Radhapuram_600KW",
        "location": "Tirunelveli, Radhapuram",
        "type": "Wind",
        "banking": True,
        "capacity_MW": 0.6,
        "annualProduction_L": 9,
        "htscNo": "79204721131",
        "injectionVoltage_KV": 33,
        "status": "Active",
    }


@pytest.fixture
def unit_matrix():
    return {"c1": 100, "c2": 200, "c3": 300, "c4": 400, "c5": 500}
