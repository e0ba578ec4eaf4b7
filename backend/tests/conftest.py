"""Pytest fixtures: fresh SQLite database per test and a frozen clock."""
from datetime import datetime, timedelta
import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from fastapi.testclient import TestClient

from caronae.clock import get_now
from caronae.database import Base, get_db
from caronae.main import app

# Import all models so they register with Base.metadata
from caronae.models.place import Institution, Campus, Hub  # noqa: F401
from caronae.models.user import User
from caronae.models.ride import Ride
from caronae.models.ride_user import RideUser, ParticipantStatus
from caronae.models.notification import RideNotification  # noqa: F401

SQLITE_URL = "sqlite:///./test.db"

# Every test runs at this instant unless it moves the clock itself.
NOW = datetime(2017, 6, 1, 12, 0, 0)


class FrozenClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})

    # Enable WAL mode for better concurrency
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine):
    """Yield a database session, closed after the test."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def clock():
    """Mutable clock injected through the get_now dependency."""
    return FrozenClock(NOW)


@pytest.fixture(scope="function")
def client(db_engine, clock):
    """FastAPI TestClient with database and clock dependencies overridden."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_now] = clock
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers: build rows directly, the way the API would have stored them
# ---------------------------------------------------------------------------
def make_user(db: Session, name: str = "Test User", institution_id: int = None) -> User:
    user = User(name=name, email=f"{name.lower().replace(' ', '.')}@example.com",
                course="Engenharia", institution_id=institution_id)
    db.add(user)
    db.commit()
    return user


def make_ride(db: Session, driver: User = None, **fields) -> Ride:
    """Insert a ride two days after NOW; ``driver`` gets the driver edge."""
    values = {
        "date": NOW + timedelta(days=2),
        "going": True,
        "hub": "CT: Bloco A",
        "neighborhood": "Ipanema",
        "myzone": "Zona Sul",
        "slots": 3,
        "description": "Saio pontualmente",
        "done": False,
    }
    values.update(fields)
    ride = Ride(**values)
    db.add(ride)
    db.commit()
    if driver is not None:
        attach(db, ride, driver, "driver")
    return ride


def attach(db: Session, ride: Ride, user: User, status: str) -> RideUser:
    edge = RideUser(ride_id=ride.ride_id, user_id=user.user_id, status=ParticipantStatus(status))
    db.add(edge)
    db.commit()
    db.refresh(ride)
    return edge


def create_test_user(client: TestClient, name: str = "Test User") -> dict:
    """Helper: POST /api/users and return response JSON."""
    resp = client.post("/api/users/", json={"name": name, "course": "Física"})
    assert resp.status_code == 201, resp.text
    return resp.json()
