"""
Shared test fixtures
In-memory SQLite database, FastAPI TestClient and authenticated tenants
"""
import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.core.database import Base, get_db
from app.core.security import ROLE_ADMIN, ROLE_COMPANY, create_access_token, hash_password
from app.models.admin import Admin
from app.models.company import Company
from app.models.plan import Plan
from main import app

FULL_PERMISSIONS = {
    "dashboard": True,
    "appointments": True,
    "services": True,
    "professionals": True,
    "clients": True,
    "tasks": True,
    "coupons": True,
    "financial": True,
    "settings": True,
}


@pytest.fixture
def db_session():
    """Fresh in-memory database per test"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def test_client(db_session):
    """Test client bound to the per-test database"""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_plan(db_session):
    def _make_plan(name="Profissional", permissions=None, max_professionals=3, price="99.90", **kwargs):
        plan = Plan(
            name=name,
            price=Decimal(price),
            free_days=kwargs.pop("free_days", 7),
            max_professionals=max_professionals,
            is_active=kwargs.pop("is_active", True),
            permissions=dict(FULL_PERMISSIONS) if permissions is None else permissions,
        )
        db_session.add(plan)
        db_session.commit()
        db_session.refresh(plan)
        return plan

    return _make_plan


@pytest.fixture
def make_company(db_session):
    counter = {"n": 0}

    def _make_company(plan=None, **overrides):
        counter["n"] += 1
        n = counter["n"]
        fields = {
            "fantasy_name": f"Salão {n}",
            "document": f"{n:011d}",
            "email": f"empresa{n}@example.com",
            "password_hash": hash_password("senha123"),
            "plan_id": plan.id if plan else None,
            "is_active": True,
            "is_blocked": False,
            "subscription_status": "active",
            "trial_expires_at": datetime.utcnow() + timedelta(days=30),
        }
        fields.update(overrides)
        company = Company(**fields)
        db_session.add(company)
        db_session.commit()
        db_session.refresh(company)
        return company

    return _make_company


@pytest.fixture
def plan(make_plan):
    return make_plan()


@pytest.fixture
def company(make_company, plan):
    return make_company(plan=plan)


def _company_headers(company):
    return {"Authorization": f"Bearer {create_access_token(company.id, ROLE_COMPANY)}"}


@pytest.fixture
def headers_for():
    """Bearer headers for any company row"""
    return _company_headers


@pytest.fixture
def auth_headers(company):
    return _company_headers(company)


@pytest.fixture
def admin(db_session):
    admin = Admin(
        name="Admin",
        email="admin@example.com",
        password_hash=hash_password("admin123"),
        is_active=True,
    )
    db_session.add(admin)
    db_session.commit()
    db_session.refresh(admin)
    return admin


@pytest.fixture
def admin_headers(admin):
    return {"Authorization": f"Bearer {create_access_token(admin.id, ROLE_ADMIN)}"}
