import os
import sys
from datetime import datetime, timedelta

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app import create_app
from app.extensions import db
from app.models import User, Institution, Application

YEAR = 2026


class TestConfig:
    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    RQ_SYNC = True
    REDIS_URL = "redis://localhost:6379/15"
    SENDGRID_API_KEY = None
    MAIL_FROM = "noreply@example.com"
    MAIL_FROM_NAME = "Admissions Team"
    MAGIC_LINK_BASE_URL = "https://eval.example.org/evaluate/"
    MAGIC_LINK_TTL_DAYS = 30
    INTERVIEW_SCORE_MAX = 10.0
    LOG_LEVEL = "WARNING"


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def _make_user(email, role):
    u = User(email=email, role=role)
    u.set_password("correct horse battery")
    db.session.add(u)
    db.session.commit()
    return u


@pytest.fixture
def admin_client(app):
    _make_user("admin@example.com", "admin")
    c = app.test_client()
    res = c.post("/auth/login", json={"email": "admin@example.com", "password": "correct horse battery"})
    assert res.status_code == 200
    return c


@pytest.fixture
def viewer_client(app):
    _make_user("viewer@example.com", "viewer")
    c = app.test_client()
    res = c.post("/auth/login", json={"email": "viewer@example.com", "password": "correct horse battery"})
    assert res.status_code == 200
    return c


@pytest.fixture
def make_institution(app):
    def _make(name="Harvard", spots=2, year=YEAR):
        inst = Institution(name=name, year=year, available_spots=spots, filled_spots=0)
        db.session.add(inst)
        db.session.commit()
        return inst
    return _make


@pytest.fixture
def make_application(app):
    counter = {"n": 100}
    base = datetime(2026, 3, 1, 9, 0, 0)

    def _make(institution=None, year=YEAR, status="submitted", validity="valid",
              submitted_at=None, email=None, gpa=None):
        counter["n"] += 1
        app_row = Application(
            year=year,
            candidate_id=f"{counter['n']:03d}",
            email=email or f"applicant{counter['n']}@example.com",
            selected_institution_id=institution.id if institution is not None else None,
            status=status,
            validity_status=validity,
            gpa=gpa,
            submitted_at=submitted_at or base + timedelta(minutes=counter["n"]),
        )
        db.session.add(app_row)
        db.session.commit()
        return app_row
    return _make
