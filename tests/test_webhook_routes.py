from unittest.mock import patch

import pytest

from jobmatch.billing.gateways import Checkout
from jobmatch.billing.store import SqlRecordStore
from jobmatch.errors import StoreUnavailable
from jobmatch.extensions import db
from jobmatch.models import Job, Payment, User
from webhook_helpers import paystack_body, paystack_signature, stripe_body, stripe_signature

pytestmark = [pytest.mark.payment, pytest.mark.db]


def post_paystack(client, body, signature=None):
    return client.post(
        "/webhooks/paystack",
        data=body,
        content_type="application/json",
        headers={"x-paystack-signature": signature or paystack_signature(body)},
    )


def post_stripe(client, body, signature=None):
    return client.post(
        "/webhooks/stripe",
        data=body,
        content_type="application/json",
        headers={"Stripe-Signature": signature or stripe_signature(body)},
    )


def reload(model, id):
    db.session.expire_all()
    return db.session.get(model, id)


def test_paystack_success_grants_premium(client, user, make_payment):
    payment = make_payment(user)
    body = paystack_body("charge.success", reference=payment.external_ref)

    response = post_paystack(client, body)

    assert response.status_code == 200
    assert response.json == {"status": "success", "outcome": "completed"}
    assert reload(User, user.id).premium is True
    assert response.headers["X-Request-ID"]


def test_paystack_redelivery_is_acknowledged_as_duplicate(client, user, make_payment):
    payment = make_payment(user)
    body = paystack_body("charge.success", reference=payment.external_ref)

    post_paystack(client, body)
    response = post_paystack(client, body)

    assert response.status_code == 200
    assert response.json["outcome"] == "duplicate"


def test_stripe_success_boosts_job(client, user, make_job, make_payment):
    job = make_job(user)
    payment = make_payment(user, kind="job_boost", job=job, provider="stripe")
    body = stripe_body(
        "payment_intent.succeeded",
        id="pi_abc",
        metadata={"external_ref": payment.external_ref},
    )

    response = post_stripe(client, body)

    assert response.status_code == 200
    assert reload(Job, job.id).boosted is True


def test_stripe_failure_marks_payment_failed(client, user, make_payment):
    payment = make_payment(user, provider="stripe")
    body = stripe_body(
        "payment_intent.payment_failed",
        id="pi_abc",
        metadata={"external_ref": payment.external_ref},
    )

    response = post_stripe(client, body)

    assert response.status_code == 200
    assert response.json["outcome"] == "failed"
    assert reload(Payment, payment.id).status == "failed"


def test_cancellation_webhook(client, make_user):
    member = make_user(premium=True, subscription_status="active", subscription_ref="SUB_1")
    body = paystack_body("subscription.disable", subscription_code="SUB_1")

    response = post_paystack(client, body)

    assert response.status_code == 200
    assert response.json["outcome"] == "cancelled"
    assert reload(User, member.id).premium is False


def test_unrecognized_event_is_acknowledged(client):
    body = stripe_body("invoice.created", id="in_1")

    response = post_stripe(client, body)

    assert response.status_code == 200
    assert response.json["outcome"] == "ignored"


def test_bad_signature_is_401_and_changes_nothing(client, user, make_payment):
    payment = make_payment(user)
    body = paystack_body("charge.success", reference=payment.external_ref)

    response = post_paystack(client, body, signature="0" * 128)

    assert response.status_code == 401
    assert response.json["error"] == "INVALID_SIGNATURE"
    assert reload(Payment, payment.id).status == "pending"
    assert reload(User, user.id).premium is False


def test_missing_signature_header_is_401(client):
    response = client.post(
        "/webhooks/stripe",
        data=stripe_body("payment_intent.succeeded", id="pi_1"),
        content_type="application/json",
    )
    assert response.status_code == 401


def test_malformed_body_is_400(client):
    body = b"not json at all"
    response = post_paystack(client, body)

    assert response.status_code == 400
    assert response.json["error"] == "MALFORMED_PAYLOAD"


def test_unknown_reference_is_400_and_creates_nothing(client):
    body = paystack_body("charge.success", reference="payment_never_created")

    response = post_paystack(client, body)

    assert response.status_code == 400
    assert response.json["error"] == "UNKNOWN_REFERENCE"
    assert Payment.query.count() == 0


def test_partial_apply_is_500_with_reference(client, flaky_store, user, make_job, make_payment):
    job = make_job(user)
    payment = make_payment(user, kind="job_boost", job=job)
    body = paystack_body("charge.success", reference=payment.external_ref)

    with patch("jobmatch.routes.webhooks.SqlRecordStore", lambda: flaky_store(fail_tables={"jobs"})):
        response = post_paystack(client, body)

    assert response.status_code == 500
    assert response.json["error"] == "PARTIAL_APPLY_FAILURE"
    assert response.json["reference"] == payment.external_ref
    assert reload(Payment, payment.id).status == "completed"


def test_store_outage_is_503(client, user, make_payment):
    payment = make_payment(user)
    body = paystack_body("charge.success", reference=payment.external_ref)

    with patch.object(SqlRecordStore, "select_one", side_effect=StoreUnavailable()):
        response = post_paystack(client, body)

    assert response.status_code == 503
    assert response.json["error"] == "STORE_UNAVAILABLE"
    assert reload(Payment, payment.id).status == "pending"


def test_request_id_is_echoed(client):
    body = stripe_body("invoice.created", id="in_1")
    response = client.post(
        "/webhooks/stripe",
        data=body,
        content_type="application/json",
        headers={"Stripe-Signature": stripe_signature(body), "X-Request-ID": "req-123"},
    )
    assert response.headers["X-Request-ID"] == "req-123"


@patch("jobmatch.billing.gateways.PaystackGateway.create_checkout")
def test_initiate_then_webhook_grants_premium(mock_checkout, client, user, auth_headers):
    mock_checkout.return_value = Checkout("ACCESS_1", {})
    reference = client.post(
        "/api/payments",
        json={"kind": "subscription", "provider": "paystack"},
        headers=auth_headers,
    ).json["reference"]

    response = post_paystack(client, paystack_body("charge.success", reference=reference))

    assert response.status_code == 200
    refreshed = reload(User, user.id)
    assert refreshed.premium is True
    assert refreshed.subscription_status == "active"
    assert refreshed.subscription_ref == reference
