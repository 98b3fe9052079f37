"""
Pytest configuration and fixtures.

Repository and service tests run against an in-memory SQLite database
(one shared connection via StaticPool) so they need neither PostgreSQL nor
Redis. Redis is replaced by tests.mocks.cache_mocks.FakeRedis.
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core.cache import NullCache, RedisCache
from core.cache.views import CacheAside
from core.config_loader import AppConfig
from database.models import Base
from database.repository import HrRepository
from tests.fixtures.hr_fixtures import NOW, FixedClock
from tests.mocks.cache_mocks import FakeRedis


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "db: marks tests as requiring a database (SQLite in-memory here)"
    )
    config.addinivalue_line(
        "markers", "cache: marks tests that exercise the cache-aside layer"
    )


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def repo(db_session):
    return HrRepository(db_session)


@pytest.fixture
def app_config():
    return AppConfig()


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def redis_cache(fake_redis, app_config):
    return CacheAside(RedisCache(client=fake_redis), app_config.cache)


@pytest.fixture
def null_cache(app_config):
    return CacheAside(NullCache(), app_config.cache)


@pytest.fixture(params=["redis", "null"])
def any_cache(request, app_config):
    """Read-path suites run once per backend and must produce identical results."""
    if request.param == "redis":
        return CacheAside(RedisCache(client=FakeRedis()), app_config.cache)
    return CacheAside(NullCache(), app_config.cache)
