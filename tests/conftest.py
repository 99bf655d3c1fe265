import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app import create_app
from app.extensions import db
from app.models import Applicant, Question, Tenant


class TestConfig:
    TESTING = True
    SECRET_KEY = "test"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    REDIS_URL = None  # jobs run inline
    OPENAI_API_KEY = "test-key"
    OPENAI_MODEL = "gpt-4o-mini"
    OPENAI_TIMEOUT_SEC = 5
    OPENAI_MAX_ATTEMPTS = 1
    AI_MAX_CONCURRENCY = 4
    DEFAULT_SCORE_THRESHOLD = 75
    STATUS_PASS = "Interview"
    STATUS_REVIEW = "Review"
    PROCESS_JOB_RETRIES = 0


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def tenant(app):
    t = Tenant(name="Downtown Diner")
    db.session.add(t)
    db.session.commit()
    return t


@pytest.fixture
def add_question(tenant):
    def _add(qid, qtype, **kw):
        q = Question(tenant_id=tenant.id, id=qid, type=qtype,
                     question_text=kw.pop("question_text", qid), **kw)
        db.session.add(q)
        db.session.commit()
        return q
    return _add


@pytest.fixture
def add_applicant(tenant):
    def _add(answers, **kw):
        a = Applicant(tenant_id=tenant.id, answers=answers, **kw)
        db.session.add(a)
        db.session.commit()
        return a.id
    return _add
