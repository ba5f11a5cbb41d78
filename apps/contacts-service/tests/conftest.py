import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from contactbook.db import models
from contactbook.db import database as db_module
from contactbook.api.main import app
from contactbook.utils.feature_flags import refresh_feature_flag_cache

_ENV_VARS = (
    "DEV_MODE",
    "APP_BASE_URL",
    "ALLOW_DEV_MODE",
    "DEV_MODE_ALLOWED_HOSTS",
    "FEATURE_CSV_EXPORT_ENABLED",
    "FEATURE_BIRTHDAY_FILTERS_ENABLED",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Each test starts without dev mode and with default feature flags."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    refresh_feature_flag_cache()
    yield
    refresh_feature_flag_cache()


@pytest.fixture
def _engine():
    # Fresh in-memory database per test; StaticPool keeps the schema alive
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    models.Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def db_session(_engine):
    session = sessionmaker(bind=_engine, autoflush=False, autocommit=False)()
    try:
        yield session
    finally:
        session.close()


# Backwards compatibility: some tests expect a 'db' fixture name
@pytest.fixture
def db(db_session):
    return db_session


@pytest.fixture
def client(db_session):
    """TestClient whose requests share the test's session."""
    def _override_get_db():
        yield db_session

    app.dependency_overrides[db_module.get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(db_module.get_db, None)
