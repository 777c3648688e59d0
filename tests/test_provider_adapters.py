import json
import time

import pytest

from jobmatch.billing.events import Charge, SubscriptionCancelled, Unrecognized
from jobmatch.billing.providers import PaystackAdapter, StripeAdapter, get_adapter
from jobmatch.errors import InvalidSignature, MalformedPayload
from jobmatch.models.payment import PaymentProvider
from webhook_helpers import (
    PAYSTACK_SECRET,
    STRIPE_WEBHOOK_SECRET,
    paystack_body,
    paystack_signature,
    stripe_body,
    stripe_signature,
)

pytestmark = pytest.mark.payment


@pytest.fixture
def paystack():
    return PaystackAdapter(PAYSTACK_SECRET)


@pytest.fixture
def stripe_adapter():
    return StripeAdapter(STRIPE_WEBHOOK_SECRET)


# Paystack

def test_paystack_charge_success(paystack):
    body = paystack_body("charge.success", reference="payment_1", amount=1900)
    assert paystack.parse(body, paystack_signature(body)) == Charge("payment_1", True)


def test_paystack_charge_failed(paystack):
    body = paystack_body("charge.failed", reference="payment_2")
    assert paystack.parse(body, paystack_signature(body)) == Charge("payment_2", False)


def test_paystack_subscription_disable(paystack):
    body = paystack_body("subscription.disable", subscription_code="SUB_abc")
    assert paystack.parse(body, paystack_signature(body)) == SubscriptionCancelled("SUB_abc")


def test_paystack_unrecognized_event(paystack):
    body = paystack_body("transfer.success", reference="TRF_1")
    assert paystack.parse(body, paystack_signature(body)) == Unrecognized("transfer.success")


def test_paystack_rejects_tampered_body(paystack):
    body = paystack_body("charge.success", reference="payment_1")
    signature = paystack_signature(body)
    tampered = paystack_body("charge.success", reference="payment_other")

    with pytest.raises(InvalidSignature):
        paystack.parse(tampered, signature)


def test_paystack_rejects_wrong_secret(paystack):
    body = paystack_body("charge.success", reference="payment_1")
    with pytest.raises(InvalidSignature):
        paystack.parse(body, paystack_signature(body, secret="not-the-secret"))


def test_missing_signature_header(paystack):
    body = paystack_body("charge.success", reference="payment_1")
    with pytest.raises(InvalidSignature):
        paystack.parse(body, None)


def test_unconfigured_secret_rejects_everything():
    adapter = PaystackAdapter("")
    body = paystack_body("charge.success", reference="payment_1")
    with pytest.raises(InvalidSignature):
        adapter.parse(body, paystack_signature(body))


def test_paystack_malformed_json(paystack):
    body = b"{not json"
    with pytest.raises(MalformedPayload):
        paystack.parse(body, paystack_signature(body))


def test_paystack_non_object_body(paystack):
    body = json.dumps(["charge.success"]).encode()
    with pytest.raises(MalformedPayload):
        paystack.parse(body, paystack_signature(body))


def test_paystack_charge_without_reference(paystack):
    body = paystack_body("charge.success", amount=1900)
    with pytest.raises(MalformedPayload):
        paystack.parse(body, paystack_signature(body))


# Stripe

def test_stripe_payment_intent_succeeded_uses_id(stripe_adapter):
    body = stripe_body("payment_intent.succeeded", id="pi_123")
    assert stripe_adapter.parse(body, stripe_signature(body)) == Charge("pi_123", True)


def test_stripe_prefers_metadata_reference(stripe_adapter):
    body = stripe_body(
        "payment_intent.succeeded",
        id="pi_123",
        metadata={"external_ref": "payment_42"},
    )
    assert stripe_adapter.parse(body, stripe_signature(body)) == Charge("payment_42", True)


def test_stripe_payment_failed(stripe_adapter):
    body = stripe_body("payment_intent.payment_failed", id="pi_456", metadata={})
    assert stripe_adapter.parse(body, stripe_signature(body)) == Charge("pi_456", False)


def test_stripe_subscription_deleted(stripe_adapter):
    body = stripe_body("customer.subscription.deleted", id="sub_789")
    assert stripe_adapter.parse(body, stripe_signature(body)) == SubscriptionCancelled("sub_789")


def test_stripe_unrecognized_event(stripe_adapter):
    body = stripe_body("invoice.created", id="in_1")
    assert stripe_adapter.parse(body, stripe_signature(body)) == Unrecognized("invoice.created")


def test_stripe_rejects_bad_signature(stripe_adapter):
    body = stripe_body("payment_intent.succeeded", id="pi_123")
    with pytest.raises(InvalidSignature):
        stripe_adapter.parse(body, stripe_signature(body, secret="whsec_other"))


def test_stripe_rejects_stale_timestamp(stripe_adapter):
    body = stripe_body("payment_intent.succeeded", id="pi_123")
    stale = int(time.time()) - 3600
    with pytest.raises(InvalidSignature):
        stripe_adapter.parse(body, stripe_signature(body, timestamp=stale))


def test_stripe_rejects_garbage_header(stripe_adapter):
    body = stripe_body("payment_intent.succeeded", id="pi_123")
    with pytest.raises(InvalidSignature):
        stripe_adapter.parse(body, "not-a-stripe-header")


def test_stripe_charge_without_object(stripe_adapter):
    body = json.dumps({"type": "payment_intent.succeeded", "data": {}}).encode()
    with pytest.raises(MalformedPayload):
        stripe_adapter.parse(body, stripe_signature(body))


def test_stripe_missing_type(stripe_adapter):
    body = json.dumps({"data": {"object": {"id": "pi_1"}}}).encode()
    with pytest.raises(MalformedPayload):
        stripe_adapter.parse(body, stripe_signature(body))


def test_get_adapter_reads_config():
    config = {
        "PAYSTACK_SECRET_KEY": "ps",
        "STRIPE_WEBHOOK_SECRET": "wh",
        "STRIPE_WEBHOOK_TOLERANCE": 60,
    }
    paystack = get_adapter(PaymentProvider.PAYSTACK, config)
    stripe_adapter = get_adapter(PaymentProvider.STRIPE, config)

    assert isinstance(paystack, PaystackAdapter) and paystack.secret == "ps"
    assert isinstance(stripe_adapter, StripeAdapter) and stripe_adapter.tolerance == 60


def test_paystack_non_ascii_signature_is_rejected(paystack):
    body = paystack_body("charge.success", reference="payment_1")
    with pytest.raises(InvalidSignature):
        paystack.parse(body, "é" * 128)
