from unittest.mock import patch

import pytest

from app.models import ROLE_ADMIN, ROLE_MEMBER, Family, User
from app.models import db as _db


@pytest.fixture(scope="session")
def app():
    """Create a Flask application configured for testing (session-scoped)."""
    with patch("app.upgrade"):
        from app import create_app

        _app = create_app("testing")

    yield _app


@pytest.fixture(autouse=True)
def db(app):
    """Create all tables before each test, drop them after."""
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture()
def client(app):
    """Unauthenticated test client."""
    return app.test_client()


def _make_family(name="The Testers", currency="USD"):
    """Create and persist a Family. Callable multiple times per test."""
    family = Family(name=name, currency=currency)
    _db.session.add(family)
    _db.session.commit()
    return family


def _make_user(
    family,
    email="member@test.com",
    password="TestPass1",
    role=ROLE_MEMBER,
    first_name="Test",
    last_name="Member",
):
    """Create and persist a User in ``family``."""
    user = User(
        email=email,
        first_name=first_name,
        last_name=last_name,
        role=role,
        family_id=family.id,
    )
    user.set_password(password)
    _db.session.add(user)
    _db.session.commit()
    return user


def _login(client, email="member@test.com", password="TestPass1", redirect=None, headers=None):
    """Post to the real /login route and return the response without following it."""
    url = "/login"
    query = {"redirect": redirect} if redirect is not None else None
    return client.post(
        url,
        query_string=query,
        data={"email": email, "password": password},
        headers=headers,
        follow_redirects=False,
    )


@pytest.fixture()
def family(db):
    return _make_family()


@pytest.fixture()
def member(family):
    """A default family member."""
    return _make_user(family)


@pytest.fixture()
def admin_user(family):
    return _make_user(
        family,
        email="admin@test.com",
        password="AdminPass1",
        role=ROLE_ADMIN,
        first_name="Test",
        last_name="Admin",
    )


@pytest.fixture()
def member_client(client, member):
    """A test client logged in as a family member."""
    _login(client, member.email, "TestPass1")
    return client
