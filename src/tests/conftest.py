from typing import AsyncGenerator, Callable, Generator
import os

# Force test configuration before any src module reads it
os.environ.setdefault("ENV", "test")

import databases
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from src import security
from src.bootstrap import bootstrap, get_message_bus
from src.db import enable_sqlite_foreign_keys, get_database, metadata
from src.main import app
from src.service_layer.unit_of_work import SqlAlchemyUnitOfWork

@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"

@pytest.fixture()
def db_url(tmp_path) -> str:
    # File-backed so the sync write side and the async read side share data
    return f"sqlite:///{tmp_path / 'postboard.db'}"

@pytest.fixture()
def session_factory(db_url: str) -> Generator:
    engine = create_engine(db_url, connect_args={"check_same_thread": False})
    enable_sqlite_foreign_keys(engine)
    metadata.create_all(engine)
    yield sessionmaker(bind=engine, expire_on_commit=False)
    engine.dispose()

@pytest.fixture()
def bus(session_factory):
    return bootstrap(uow=SqlAlchemyUnitOfWork(session_factory=session_factory))

@pytest.fixture()
async def database(db_url: str) -> AsyncGenerator:
    async with databases.Database(db_url) as db:
        yield db

@pytest.fixture()
async def async_client(session_factory, database) -> AsyncGenerator:
    """A client for the app wired to the per-test database."""
    app.dependency_overrides[get_message_bus] = lambda: bootstrap(
        uow=SqlAlchemyUnitOfWork(session_factory=session_factory)
    )
    app.dependency_overrides[get_database] = lambda: database
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver", timeout=5.0) as ac:
        yield ac
    app.dependency_overrides.clear()

@pytest.fixture()
def auth_headers() -> Callable[..., dict]:
    def make(user_id: int = 1, nickname: str = "alice") -> dict:
        token = security.create_access_token(user_id, nickname)
        return {"Authorization": f"Bearer {token}"}

    return make
