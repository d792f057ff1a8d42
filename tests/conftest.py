import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from models import Base


@pytest.fixture
def database():
    # Start up a fresh in-memory database instance for every test
    db_engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(db_engine)
    db_session = Session(bind=db_engine)
    yield db_session
    db_session.close()
    db_engine.dispose()
