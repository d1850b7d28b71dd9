from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from clinic import models
from clinic.database import create_tables, drop_tables, get_db_engine, get_session
from clinic.dependencies import get_collections, get_stats_cache
from clinic.main import app
from clinic.schemas.analysis import AnalysisRecord
from clinic.schemas.appointment import AppointmentRecord
from clinic.schemas.report import ReportRecord
from clinic.schemas.user import UserRecord
from clinic.stats_cache import StatsCache
from clinic.stores.base import Collections
from clinic.stores.sql import create_sql_collections
from factories import FakeClock, RecordingMemoryCollection, RecordingSqlCollection


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def stats_cache(clock):
    return StatsCache(ttl=timedelta(minutes=5), clock=clock)


@pytest.fixture
def memory_collections():
    return Collections(
        users=RecordingMemoryCollection(UserRecord),
        appointments=RecordingMemoryCollection(AppointmentRecord),
        analyses=RecordingMemoryCollection(AnalysisRecord),
        reports=RecordingMemoryCollection(ReportRecord),
    )


@pytest.fixture
def session():
    database_engine = get_db_engine("sqlite://")
    create_tables(database_engine)
    db = get_session(database_engine)()
    try:
        yield db
    finally:
        db.close()
        drop_tables(database_engine)


@pytest.fixture
def sql_collections(session):
    return Collections(
        users=RecordingSqlCollection(session, models.User),
        appointments=RecordingSqlCollection(session, models.Appointment),
        analyses=RecordingSqlCollection(session, models.AIAnalysis),
        reports=RecordingSqlCollection(session, models.Report),
    )


@pytest.fixture
def client(memory_collections, stats_cache):
    def get_test_collections():
        yield memory_collections

    app.dependency_overrides[get_collections] = get_test_collections
    app.dependency_overrides[get_stats_cache] = lambda: stats_cache

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def sql_client(session, stats_cache):
    def get_test_collections():
        yield create_sql_collections(session)

    app.dependency_overrides[get_collections] = get_test_collections
    app.dependency_overrides[get_stats_cache] = lambda: stats_cache

    yield TestClient(app)

    app.dependency_overrides.clear()
