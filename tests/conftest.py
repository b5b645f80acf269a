"""Test config and shared fixtures."""
import pytest
from typing import Generator
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from datapipe.database import SQLDriver
from datapipe.source import DBSource, TableSource
from tests.models import User


# In-memory SQLite shared by every session of a test
TEST_DATABASE_URL = "sqlite://"

TOTAL_USERS = 12


class CountingSessionFactory:
    """Wraps a session factory and counts the sessions it opens."""

    def __init__(self, factory):
        self.factory = factory
        self.opened = 0

    def __call__(self, **kwargs):
        self.opened += 1
        return self.factory(**kwargs)


@pytest.fixture(scope="function")
def driver() -> Generator[SQLDriver, None, None]:
    """Create a driver over a fresh in-memory database."""
    driver = SQLDriver(
        TEST_DATABASE_URL,
        engine_options={
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        },
    )
    SQLModel.metadata.create_all(driver.engine)
    yield driver
    SQLModel.metadata.drop_all(driver.engine)
    driver.disconnect()


@pytest.fixture
def session_factory(driver: SQLDriver) -> CountingSessionFactory:
    return CountingSessionFactory(driver.session_factory)


@pytest.fixture
def sample_users(driver: SQLDriver) -> list[User]:
    """Insert users 1..12; odd ids are sex 1, even ids sex 2."""
    users = [
        User(
            id=i,
            user_id=1000 + i,
            nickname=f"user{i:02d}",
            sex=1 if i % 2 else 2,
            phone=f"1365465{i:04d}",
            email=f"user{i:02d}@example.com",
        )
        for i in range(1, TOTAL_USERS + 1)
    ]
    with driver.session_factory() as session:
        session.add_all(users)
        session.commit()
    return users


@pytest.fixture
def source(session_factory) -> DBSource[User, int]:
    return DBSource(session_factory, User)


@pytest.fixture
def strict_source(session_factory) -> DBSource[User, int]:
    return DBSource(session_factory, User, strict_update=True)


@pytest.fixture
def table_source(session_factory, driver) -> TableSource[int]:
    """Table source reflected by name."""
    return TableSource(session_factory, "users")
