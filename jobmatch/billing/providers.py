"""
Webhook adapters for the supported payment providers.

Each adapter verifies the provider's signature over the raw request body and
turns the provider's event envelope into one of the neutral events in
:mod:`jobmatch.billing.events`. Nothing outside this module knows the
provider vocabulary.
"""

import hashlib
import hmac
import json
import logging

import stripe

from jobmatch.billing.events import Charge, SubscriptionCancelled, Unrecognized
from jobmatch.errors import InvalidSignature, MalformedPayload
from jobmatch.models.payment import PaymentProvider

logger = logging.getLogger(__name__)


def load_envelope(payload):
    try:
        envelope = json.loads(payload)
    except (TypeError, ValueError) as e:
        raise MalformedPayload(f"Webhook body is not valid JSON: {e}") from e

    if not isinstance(envelope, dict):
        raise MalformedPayload("Webhook body must be a JSON object")
    return envelope


def require_str(container, key, context):
    value = container.get(key) if isinstance(container, dict) else None
    if not isinstance(value, str) or not value:
        raise MalformedPayload(f"Missing '{key}' in {context}")
    return value


class ProviderAdapter:
    """Verify and normalize one provider's webhook deliveries."""

    name = None
    signature_header = None

    def __init__(self, secret):
        self.secret = secret

    def parse(self, payload, signature):
        """Return the normalized event for a raw webhook delivery."""
        if not self.secret:
            logger.error(f"{self.name} webhook secret is not configured; rejecting delivery")
            raise InvalidSignature(f"{self.name} webhook secret is not configured")
        if not signature:
            raise InvalidSignature(f"Missing {self.signature_header} header")

        self.verify(payload, signature)
        return self.normalize(load_envelope(payload))

    def verify(self, payload, signature):
        raise NotImplementedError

    def normalize(self, envelope):
        raise NotImplementedError


class PaystackAdapter(ProviderAdapter):
    name = PaymentProvider.PAYSTACK.value
    signature_header = "x-paystack-signature"

    CHARGE_EVENTS = {
        "charge.success": True,
        "charge.failed": False,
    }
    CANCEL_EVENTS = ("subscription.disable",)

    def verify(self, payload, signature):
        computed = hmac.new(self.secret.encode(), payload, hashlib.sha512).hexdigest()
        if not hmac.compare_digest(computed.encode(), signature.encode("utf-8", "surrogateescape")):
            raise InvalidSignature()

    def normalize(self, envelope):
        kind = require_str(envelope, "event", "Paystack envelope")
        data = envelope.get("data")

        if kind in self.CHARGE_EVENTS:
            return Charge(
                external_ref=require_str(data, "reference", "Paystack charge data"),
                succeeded=self.CHARGE_EVENTS[kind],
            )
        if kind in self.CANCEL_EVENTS:
            return SubscriptionCancelled(
                subscription_ref=require_str(data, "subscription_code", "Paystack subscription data")
            )
        return Unrecognized(raw_kind=kind)


class StripeAdapter(ProviderAdapter):
    name = PaymentProvider.STRIPE.value
    signature_header = "Stripe-Signature"

    CHARGE_EVENTS = {
        "payment_intent.succeeded": True,
        "payment_intent.payment_failed": False,
    }
    CANCEL_EVENTS = ("customer.subscription.deleted",)

    def __init__(self, secret, tolerance=stripe.Webhook.DEFAULT_TOLERANCE):
        super().__init__(secret)
        self.tolerance = tolerance

    def verify(self, payload, signature):
        try:
            stripe.WebhookSignature.verify_header(
                payload.decode("utf-8"), signature, self.secret, self.tolerance
            )
        except UnicodeDecodeError as e:
            raise MalformedPayload("Webhook body is not UTF-8") from e
        except stripe.SignatureVerificationError as e:
            raise InvalidSignature(str(e)) from e

    def normalize(self, envelope):
        kind = require_str(envelope, "type", "Stripe envelope")
        data = envelope.get("data")
        obj = data.get("object") if isinstance(data, dict) else None

        if kind in self.CHARGE_EVENTS:
            if not isinstance(obj, dict):
                raise MalformedPayload("Missing 'data.object' in Stripe event")
            metadata = obj.get("metadata") or {}
            reference = metadata.get("external_ref") if isinstance(metadata, dict) else None
            return Charge(
                external_ref=reference or require_str(obj, "id", "Stripe payment intent"),
                succeeded=self.CHARGE_EVENTS[kind],
            )
        if kind in self.CANCEL_EVENTS:
            return SubscriptionCancelled(
                subscription_ref=require_str(obj, "id", "Stripe subscription")
            )
        return Unrecognized(raw_kind=kind)


def get_adapter(provider, config):
    """Build the adapter for ``provider`` from the Flask config mapping."""
    if provider == PaymentProvider.PAYSTACK:
        return PaystackAdapter(config.get("PAYSTACK_SECRET_KEY"))
    if provider == PaymentProvider.STRIPE:
        return StripeAdapter(
            config.get("STRIPE_WEBHOOK_SECRET"),
            tolerance=config.get("STRIPE_WEBHOOK_TOLERANCE", stripe.Webhook.DEFAULT_TOLERANCE),
        )
    raise ValueError(f"Unsupported payment provider: {provider}")
