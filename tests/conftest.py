"""
Pytest configuration and shared fixtures for the SnipRewards tests.
"""

import os
import sys
from pathlib import Path

import bcrypt
import pytest
from dotenv import load_dotenv
from flask import Flask

test_env_path = Path(__file__).parent / ".env.test"
if test_env_path.exists():
    load_dotenv(test_env_path, override=True)

os.environ["TESTING"] = "True"

from main import create_app  # noqa: E402
from sniprewards.config import is_production_database, is_test_database  # noqa: E402
from sniprewards.extensions import db as database  # noqa: E402
from sniprewards.models import AuthUser, Base, Profile, Salon, new_id  # noqa: E402
from sniprewards.utils import qr_codec  # noqa: E402
from sniprewards.utils.auth import issue_token  # noqa: E402

FRONTEND_URL = "https://app.example"


@pytest.fixture(scope="session")
def app():
    """Create and configure a test app instance."""
    test_db_url = os.environ.get("DATABASE_TEST_URL", "sqlite://")

    if is_production_database(test_db_url) or not is_test_database(test_db_url):
        print(f" DANGER: refusing to run the suite against {test_db_url}")
        sys.exit(1)

    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": test_db_url,
            "SECRET_KEY": "test-secret-key-for-testing-only",
            "FRONTEND_URL": FRONTEND_URL,
        }
    )

    yield app


@pytest.fixture
def db(app: Flask):
    """Fresh schema for every test."""
    with app.app_context():
        Base.metadata.create_all(bind=database.engine)

        yield database

        database.session.remove()
        Base.metadata.drop_all(bind=database.engine)


@pytest.fixture
def db_session(db):
    return db.session


@pytest.fixture
def client(app, db):
    return app.test_client()


@pytest.fixture
def runner(app):
    return app.test_cli_runner()


@pytest.fixture
def make_profile(db_session):
    """Factory creating an AuthUser + Profile pair."""

    def _make_profile(email, role, full_name=None, password=b"password123"):
        uid = new_id()
        auth_user = AuthUser(
            id=uid,
            email=email,
            password_hash=bcrypt.hashpw(password, bcrypt.gensalt(rounds=4)),
        )
        db_session.add(auth_user)
        db_session.flush()

        profile = Profile(
            id=uid,
            email=email,
            full_name=full_name,
            phone="555-0100",
            role=role,
        )
        db_session.add(profile)
        db_session.commit()
        return profile

    return _make_profile


@pytest.fixture
def sample_customer(make_profile):
    return make_profile("customer@example.com", "customer", "Test Customer")


@pytest.fixture
def sample_owner(make_profile):
    return make_profile("owner@example.com", "salon_owner", "Salon Owner")


@pytest.fixture
def sample_barber(make_profile):
    return make_profile("barber@example.com", "barber", "Bob Barber")


@pytest.fixture
def sample_salon(db_session, sample_owner):
    """Salon S: threshold 10, reward "Free haircut"."""
    salon = Salon(
        owner_id=sample_owner.id,
        name="Test Salon",
        address="123 Test St, Newark",
        phone="123-456-7890",
        qr_code=qr_codec.encode(sample_owner.id, FRONTEND_URL),
        loyalty_threshold=10,
        reward_description="Free haircut",
    )
    db_session.add(salon)
    db_session.commit()
    return salon


@pytest.fixture
def headers_for(app):
    """Bearer headers for an existing profile."""

    def _headers_for(profile):
        with app.app_context():
            token = issue_token(profile)
        return {"Authorization": f"Bearer {token}"}

    return _headers_for


@pytest.fixture
def customer_headers(headers_for, sample_customer):
    return headers_for(sample_customer)


@pytest.fixture
def owner_headers(headers_for, sample_owner):
    return headers_for(sample_owner)


@pytest.fixture
def test_user_data():
    """Provide a dictionary of user data for signup/login tests."""
    return {
        "email": "newuser122@example.com",
        "password": "password123",
        "full_name": "New User",
        "phone": "555-0199",
        "role": "customer",
    }
