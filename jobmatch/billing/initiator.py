import logging
import secrets
import time

from jobmatch.billing.pricing import format_amount, price_for
from jobmatch.errors import NotFound, PermissionDenied, ProviderUnavailable, StoreUnavailable, ValidationError
from jobmatch.models.payment import PaymentKind, PaymentProvider, PaymentStatus

logger = logging.getLogger(__name__)


def generate_payment_ref():
    """Timestamp plus a random suffix; unique across concurrent initiations."""
    return f"payment_{int(time.time() * 1000)}_{secrets.token_hex(8)}"


class PaymentInitiator:
    """
    Creates the pending payment record, then hands the payer off to the provider.

    The record is always written before any provider call so that every
    webhook has something to correlate with. If the write fails, the
    provider is never contacted.
    """

    def __init__(self, store, gateway_factory):
        self.store = store
        self.gateway_factory = gateway_factory

    def initiate(self, ctx, kind, provider, country=None, job_id=None):
        try:
            kind = PaymentKind(kind)
            provider = PaymentProvider(provider)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        user = self.store.select_one("users", {"id": ctx.user_id})
        if user is None:
            raise NotFound("User not found")

        self._check_target(ctx, kind, user, job_id)

        amount, currency, description = price_for(kind, country)
        row = {
            "user_id": ctx.user_id,
            "amount": amount,
            "currency": currency,
            "description": description,
            "status": PaymentStatus.PENDING,
            "kind": kind,
            "provider": provider,
            "external_ref": generate_payment_ref(),
            "job_id": job_id if kind is PaymentKind.JOB_BOOST else None,
        }
        payment = self.store.insert("payments", row)
        logger.info(
            f"Pending {kind.value} payment {payment['external_ref']} created via {provider.value}",
            extra={"user_id": ctx.user_id, "amount": amount, "currency": currency},
        )

        try:
            checkout = self.gateway_factory(provider).create_checkout(payment, user["email"])
        except ProviderUnavailable:
            self.store.update(
                "payments",
                {"status": PaymentStatus.FAILED},
                {"external_ref": payment["external_ref"], "status": PaymentStatus.PENDING},
            )
            raise

        # The checkout already exists at the provider; losing provider_ref must not fail the request.
        try:
            self.store.update(
                "payments",
                {"provider_ref": checkout.provider_ref},
                {"external_ref": payment["external_ref"]},
            )
        except StoreUnavailable:
            logger.warning(
                f"Could not record provider reference for payment {payment['external_ref']}",
                extra={"provider_ref": checkout.provider_ref},
            )

        return {
            "payment_id": payment["id"],
            "reference": payment["external_ref"],
            "provider": provider.value,
            "kind": kind.value,
            "amount": amount,
            "currency": currency,
            "display_amount": format_amount(amount, currency),
            "description": description,
            "checkout": checkout.client,
        }

    def _check_target(self, ctx, kind, user, job_id):
        if kind is PaymentKind.SUBSCRIPTION:
            if job_id:
                raise ValidationError("Subscription payments cannot reference a job")
            if user["premium"]:
                raise ValidationError("Premium subscription is already active")
            return

        if not job_id:
            raise ValidationError("job_id is required for a job boost")
        job = self.store.select_one("jobs", {"id": job_id})
        if job is None:
            raise NotFound("Job not found")
        if job["employer_id"] != ctx.user_id:
            raise PermissionDenied("Only the employer who posted a job can boost it")
        if job["boosted"]:
            raise ValidationError("Job is already boosted")
