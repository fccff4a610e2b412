import os
from datetime import date

# Settings() reads these at import time
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("APP_ENV", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from fleetdesk.database import Base, get_db
from fleetdesk.main import app
from fleetdesk.models import Company, Driver, Trailer, TrailerColor, TrailerType, Truck


@pytest.fixture()
def engine(tmp_path):
    db_path = tmp_path / "test.db"
    engine = create_engine(
        f"sqlite+pysqlite:///{db_path}", connect_args={"check_same_thread": False}
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture()
def SessionLocal(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db_session(SessionLocal):
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(SessionLocal):
    def override_get_db():
        db = SessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def fleet(db_session):
    """
    Two trucks, one trailer, one company and two drivers:
    a1 holds truck t1 and trailer r1, b1 holds nothing.
    """
    company = Company(id="c1", code="ACME", short_name="Acme", full_name="Acme Logistics LLC")
    t1 = Truck(id="t1", truck_number="TRK-100", type="Volvo FH", model=2020, expiry_date=date(2030, 1, 1))
    t2 = Truck(id="t2", truck_number="TRK-200", type="Scania R", model=2021, expiry_date=date(2030, 1, 1))
    r1 = Trailer(
        id="r1", trailer_number="TRL-1", type=TrailerType.REEFER, model=2019,
        expiry_date=date(2030, 1, 1), color=TrailerColor.WHITE,
    )
    db_session.add_all([company, t1, t2, r1])
    db_session.flush()

    a1 = Driver(id="a1", code="D001", full_name="Ahmed Ali", truck_id="t1", trailer_id="r1", company_id="c1")
    b1 = Driver(id="b1", code="D002", full_name="Bilal Khan", company_id="c1")
    db_session.add_all([a1, b1])
    db_session.commit()
    return {"company": company, "t1": t1, "t2": t2, "r1": r1, "a1": a1, "b1": b1}


def reload(db_session, model, pk):
    """Fetch a row as committed by another session (e.g. a request)."""
    db_session.expire_all()
    return db_session.get(model, pk)
