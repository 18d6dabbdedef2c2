import os

import pytest

os.environ.setdefault('DATABASE_URL', 'sqlite://')

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from ipractice.bootstrap import build_mediator, get_mediator  # noqa: E402
from ipractice.core.fault_injection import NoFaultInjector  # noqa: E402
from ipractice.database import Base  # noqa: E402
from ipractice.main import app  # noqa: E402
from ipractice.models.client import Client  # noqa: E402
from ipractice.models.psychologist import Psychologist  # noqa: E402
from ipractice.unit_of_work import SqlAlchemyUnitOfWork  # noqa: E402


@pytest.fixture
def db_engine():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=db_engine)


@pytest.fixture
def uow_factory(session_factory):
    return lambda: SqlAlchemyUnitOfWork(session_factory)


@pytest.fixture
def mediator(session_factory):
    return build_mediator(session_factory=session_factory, fault_injector=NoFaultInjector())


@pytest.fixture
def api_client(mediator):
    app.dependency_overrides[get_mediator] = lambda: mediator
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def load_psychologist(session_factory):
    def _load(psychologist_id: int) -> Psychologist:
        with session_factory() as session:
            return session.get(Psychologist, psychologist_id)

    return _load


@pytest.fixture
def load_client(session_factory):
    def _load(client_id: int) -> Client:
        with session_factory() as session:
            return session.get(Client, client_id)

    return _load
