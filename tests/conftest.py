import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.database import init_db, get_db
from main import app


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_category(client):
    def _make(name="Food", color="#FF5733", icon=None):
        resp = client.post("/api/categories", json={"name": name, "color": color, "icon": icon})
        assert resp.status_code == 200, resp.text
        return resp.json()["category"]
    return _make


@pytest.fixture
def make_transaction(client):
    def _make(amount, type="expense", category_id=None, date="2024-01-15", description="Test"):
        resp = client.post("/api/transactions", json={
            "amount": amount,
            "description": description,
            "type": type,
            "category_id": category_id,
            "date": date,
        })
        assert resp.status_code == 200, resp.text
        return resp.json()["transaction"]
    return _make


@pytest.fixture
def make_budget(client):
    def _make(category_id, amount=50000, period="monthly", start_date="2024-01-01", end_date=None):
        resp = client.post("/api/budgets", json={
            "category_id": category_id,
            "amount": amount,
            "period": period,
            "start_date": start_date,
            "end_date": end_date,
        })
        assert resp.status_code == 200, resp.text
        return resp.json()["budget"]
    return _make
