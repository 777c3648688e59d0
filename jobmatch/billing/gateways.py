"""Provider-side checkout creation for pending payments."""

import logging
from dataclasses import dataclass, field

import requests
import stripe

from jobmatch.errors import ProviderUnavailable
from jobmatch.models.payment import PaymentProvider

logger = logging.getLogger(__name__)


@dataclass
class Checkout:
    provider_ref: str
    client: dict = field(default_factory=dict)


class StripeGateway:
    def __init__(self, secret_key, publishable_key=""):
        self.secret_key = secret_key
        self.publishable_key = publishable_key

    def create_checkout(self, payment, email):
        try:
            intent = stripe.PaymentIntent.create(
                api_key=self.secret_key,
                amount=payment["amount"],
                currency=payment["currency"].lower(),
                description=payment["description"],
                receipt_email=email,
                metadata={
                    "external_ref": payment["external_ref"],
                    "user_id": payment["user_id"],
                    "kind": payment["kind"],
                },
                idempotency_key=payment["external_ref"],
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe PaymentIntent creation failed for {payment['external_ref']}: {e}")
            raise ProviderUnavailable("Stripe checkout could not be created") from e

        return Checkout(
            provider_ref=intent["id"],
            client={
                "client_secret": intent["client_secret"],
                "publishable_key": self.publishable_key,
            },
        )


class PaystackGateway:
    def __init__(self, secret_key, public_key="", base_url="https://api.paystack.co",
                 callback_url="", timeout=10):
        self.secret_key = secret_key
        self.public_key = public_key
        self.base_url = base_url.rstrip("/")
        self.callback_url = callback_url
        self.timeout = timeout

    def create_checkout(self, payment, email):
        body = {
            "email": email,
            "amount": payment["amount"],
            "currency": payment["currency"],
            "reference": payment["external_ref"],
            "metadata": {"user_id": payment["user_id"], "kind": payment["kind"]},
        }
        if self.callback_url:
            body["callback_url"] = self.callback_url

        try:
            response = requests.post(
                f"{self.base_url}/transaction/initialize",
                headers={"Authorization": f"Bearer {self.secret_key}"},
                json=body,
                timeout=self.timeout,
            )
            result = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Paystack initialize failed for {payment['external_ref']}: {e}")
            raise ProviderUnavailable("Paystack checkout could not be created") from e

        if not isinstance(result, dict):
            logger.error(
                f"Paystack initialize for {payment['external_ref']} returned a non-object body: "
                f"{response.status_code}"
            )
            raise ProviderUnavailable("Paystack returned an unexpected response")

        if not response.ok or not result.get("status"):
            logger.error(
                f"Paystack rejected initialize for {payment['external_ref']}: "
                f"{response.status_code} {result.get('message')}"
            )
            raise ProviderUnavailable(result.get("message") or "Paystack rejected the transaction")

        data = result.get("data")
        if not isinstance(data, dict) or not data.get("authorization_url"):
            logger.error(f"Paystack initialize for {payment['external_ref']} returned no checkout data")
            raise ProviderUnavailable("Paystack returned an unexpected response")

        return Checkout(
            provider_ref=data.get("access_code", ""),
            client={
                "authorization_url": data.get("authorization_url"),
                "access_code": data.get("access_code"),
                "public_key": self.public_key,
            },
        )


def get_gateway(provider, config):
    if provider == PaymentProvider.STRIPE:
        return StripeGateway(config.get("STRIPE_SECRET_KEY"), config.get("STRIPE_PUBLISHABLE_KEY", ""))
    if provider == PaymentProvider.PAYSTACK:
        return PaystackGateway(
            config.get("PAYSTACK_SECRET_KEY"),
            public_key=config.get("PAYSTACK_PUBLIC_KEY", ""),
            base_url=config.get("PAYSTACK_BASE_URL", "https://api.paystack.co"),
            callback_url=config.get("PAYSTACK_CALLBACK_URL", ""),
            timeout=config.get("PROVIDER_TIMEOUT_SECONDS", 10),
        )
    raise ValueError(f"Unsupported payment provider: {provider}")
