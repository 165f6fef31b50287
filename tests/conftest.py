import os
# Ensure the app factory picks the Testing config & SQLite memory DB
os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("TEST_DATABASE_URL", "sqlite:///:memory:")

import pytest
from app import create_app
from app.extensions import db
from app.models import ROLE_ADMIN, ROLE_TRAINEE
from app.services import identity
from app.services.access import Actor

@pytest.fixture(scope="session")
def app():
    app = create_app()
    app.config.update(
        TESTING=True,
        SQLALCHEMY_DATABASE_URI="sqlite:///:memory:",
        WTF_CSRF_ENABLED=False,
        RATELIMIT_ENABLED=False,
    )
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.drop_all()

@pytest.fixture()
def client(app):
    return app.test_client()

@pytest.fixture(autouse=True)
def _db_clean(app):
    # Clean BEFORE each test
    with app.app_context():
        db.session.rollback()
        for tbl in reversed(db.metadata.sorted_tables):
            db.session.execute(tbl.delete())
        db.session.commit()
    yield
    # And AFTER each test (keeps state hermetic even if a test fails mid-transaction)
    with app.app_context():
        db.session.rollback()
        for tbl in reversed(db.metadata.sorted_tables):
            db.session.execute(tbl.delete())
        db.session.commit()

@pytest.fixture()
def make_account(app):
    """Create a user+profile and return its id."""
    def _make(role=ROLE_TRAINEE, email=None, full_name=None, password="secret123"):
        email = email or f"{role}-{os.urandom(4).hex()}@example.com"
        with app.app_context():
            user = identity.sign_up(email, password, full_name or f"Test {role.title()}", role)
            return user.id
    return _make

@pytest.fixture()
def trainee(make_account):
    uid = make_account(ROLE_TRAINEE, email="trainee@example.com", full_name="Tara Trainee")
    return Actor(subject_id=uid, role=ROLE_TRAINEE)

@pytest.fixture()
def other_trainee(make_account):
    uid = make_account(ROLE_TRAINEE, email="other@example.com", full_name="Omar Other")
    return Actor(subject_id=uid, role=ROLE_TRAINEE)

@pytest.fixture()
def admin(make_account):
    uid = make_account(ROLE_ADMIN, email="admin@example.com", full_name="Ada Admin")
    return Actor(subject_id=uid, role=ROLE_ADMIN)

@pytest.fixture()
def login(client):
    def _login(user_id: int):
        # Simulate Flask-Login session
        with client.session_transaction() as sess:
            sess["_user_id"] = str(user_id)
            sess["_fresh"] = True
    return _login
