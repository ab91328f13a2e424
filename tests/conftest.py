# tests/conftest.py
import pytest
from sqlalchemy.orm import sessionmaker

from infra.db.base import Base, build_engine
from infra.services import build_service_graph


@pytest.fixture
def session():
    # separate in-memory DB for tests
    engine = build_engine("sqlite:///:memory:")
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def services(session):
    # Same wiring as the CLI, bound to the test session
    return build_service_graph(session).as_dict()


@pytest.fixture
def checking(services):
    return services["account_service"].create_account("Checking", "checking", 3420.50)
