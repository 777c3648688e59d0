import pytest
from faker import Faker
from flask_jwt_extended import create_access_token

from jobmatch import create_app
from jobmatch.billing.reconciliation import ReconciliationEngine
from jobmatch.billing.store import SqlRecordStore
from jobmatch.errors import StoreUnavailable
from jobmatch.extensions import db
from jobmatch.models import Job, Payment, User

# Initialize Faker for generating test data
fake = Faker()


def pytest_configure(config):
    config.addinivalue_line("markers", "payment: mark test as payment-related")
    config.addinivalue_line("markers", "db: mark test as database-intensive")


@pytest.fixture()
def app():
    """Create application for testing with an in-memory database"""
    app = create_app("testing")

    with app.app_context():
        db.create_all()

        yield app

        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def store(app):
    return SqlRecordStore()


@pytest.fixture()
def engine(store):
    return ReconciliationEngine(store)


class FlakyStore(SqlRecordStore):
    """SqlRecordStore whose updates to the given tables fail."""

    def __init__(self, fail_tables=()):
        super().__init__()
        self.fail_tables = set(fail_tables)

    def update(self, table, patch, match):
        if table in self.fail_tables:
            raise StoreUnavailable()
        return super().update(table, patch, match)


@pytest.fixture()
def flaky_store(app):
    return FlakyStore


@pytest.fixture()
def make_user(app):
    def _make_user(email=None, premium=False, **fields):
        user = User(email=email or fake.unique.email(), premium=premium, **fields)
        user.set_password("correct-horse-battery")
        db.session.add(user)
        db.session.commit()
        return user

    return _make_user


@pytest.fixture()
def make_job(app):
    def _make_job(employer, requirements=None, **fields):
        job = Job(
            employer_id=employer.id,
            title=fields.pop("title", fake.job()),
            description=fields.pop("description", fake.paragraph()),
            requirements=requirements if requirements is not None else ["Python", "SQL"],
            **fields,
        )
        db.session.add(job)
        db.session.commit()
        return job

    return _make_job


@pytest.fixture()
def make_payment(app):
    def _make_payment(user, kind="subscription", job=None, status="pending",
                      provider="paystack", external_ref=None, amount=1900, **fields):
        payment = Payment(
            user_id=user.id,
            amount=amount,
            currency=fields.pop("currency", "USD"),
            description=fields.pop("description", "Test payment"),
            status=status,
            kind=kind,
            provider=provider,
            external_ref=external_ref or f"payment_{fake.unique.random_number(digits=12)}",
            job_id=job.id if job else None,
            **fields,
        )
        db.session.add(payment)
        db.session.commit()
        return payment

    return _make_payment


@pytest.fixture()
def user(make_user):
    return make_user()


@pytest.fixture()
def auth_headers(app, user):
    return {"Authorization": f"Bearer {create_access_token(identity=user.id)}"}
