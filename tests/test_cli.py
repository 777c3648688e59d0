import pytest

from jobmatch.extensions import db
from jobmatch.models import Job

pytestmark = pytest.mark.payment


@pytest.fixture()
def runner(app):
    return app.test_cli_runner()


def test_reapply_command(runner, user, make_job, make_payment):
    job = make_job(user)
    payment = make_payment(user, kind="job_boost", job=job, status="completed")

    result = runner.invoke(args=["billing", "reapply", payment.external_ref])

    assert result.exit_code == 0
    assert f"Side effects re-applied for {payment.external_ref}" in result.output
    db.session.expire_all()
    assert db.session.get(Job, job.id).boosted is True


def test_reapply_unknown_reference(runner):
    result = runner.invoke(args=["billing", "reapply", "payment_missing"])

    assert result.exit_code != 0
    assert "No payment found for reference payment_missing" in result.output


def test_repair_command(runner, user, make_job, make_payment):
    job = make_job(user)
    make_payment(user, kind="job_boost", job=job, status="completed", external_ref="payment_cli")

    result = runner.invoke(args=["billing", "repair"])

    assert result.exit_code == 0
    assert "Repaired payment_cli" in result.output
    assert "1 payment(s) repaired" in result.output
