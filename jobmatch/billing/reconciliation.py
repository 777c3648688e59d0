from enum import Enum
import logging

from jobmatch.billing.events import Charge, SubscriptionCancelled, Unrecognized
from jobmatch.errors import PartialApplyFailure, UnknownReference, ValidationError
from jobmatch.models.payment import PaymentKind, PaymentStatus
from jobmatch.models.user import SubscriptionStatus

logger = logging.getLogger(__name__)


class Outcome(str, Enum):
    COMPLETED = "completed"
    FAILED = "failed"
    DUPLICATE = "duplicate"
    CANCELLED = "cancelled"
    IGNORED = "ignored"


class ReconciliationEngine:
    """
    Authoritative payment reconciliation.

    This class is the ONLY place where:
    - Payments leave the pending state
    - Users become premium or lose premium
    - Jobs become boosted

    Deliveries are at-least-once; effects are applied once. A payment only
    ever moves pending -> completed or pending -> failed.
    """

    def __init__(self, store):
        self.store = store

    def dispatch(self, event):
        """Apply a normalized provider event and return its Outcome."""
        if isinstance(event, Charge):
            return self.apply_charge(event.external_ref, event.succeeded)
        if isinstance(event, SubscriptionCancelled):
            self.apply_subscription_cancelled(event.subscription_ref)
            return Outcome.CANCELLED
        if isinstance(event, Unrecognized):
            logger.info(f"Ignoring unrecognized billing event: {event.raw_kind}")
            return Outcome.IGNORED
        raise TypeError(f"Unsupported billing event: {event!r}")

    def apply_charge(self, external_ref, succeeded):
        """
        Transition the payment identified by ``external_ref``.

        Raises UnknownReference if no payment matches. Raises
        PartialApplyFailure if the payment completed but its user/job update
        did not; use :meth:`reapply_side_effects` to finish it.
        """
        payment = self.store.select_one("payments", {"external_ref": external_ref})
        if payment is None:
            logger.warning(f"Charge event for unknown reference {external_ref}")
            raise UnknownReference(external_ref)

        if PaymentStatus(payment["status"]).is_terminal:
            logger.info(
                f"Duplicate charge event for {external_ref}; payment already {payment['status']}"
            )
            return Outcome.DUPLICATE

        target = PaymentStatus.COMPLETED if succeeded else PaymentStatus.FAILED

        # Conditional on pending so concurrent deliveries cannot both transition.
        updated = self.store.update(
            "payments",
            {"status": target},
            {"external_ref": external_ref, "status": PaymentStatus.PENDING},
        )
        if not updated:
            logger.info(f"Payment {external_ref} was transitioned by a concurrent delivery")
            return Outcome.DUPLICATE

        logger.info(f"Payment {external_ref} transitioned pending -> {target.value}")

        if target is PaymentStatus.FAILED:
            return Outcome.FAILED

        try:
            self._apply_side_effects(payment)
        except Exception as e:
            logger.error(
                f"Payment {external_ref} completed but side effect failed",
                extra={"reference": external_ref, "kind": payment["kind"]},
                exc_info=True,
            )
            raise PartialApplyFailure(external_ref, cause=e) from e

        return Outcome.COMPLETED

    def apply_subscription_cancelled(self, subscription_ref):
        """Revoke premium for the user holding ``subscription_ref``, if any."""
        updated = self.store.update(
            "users",
            {"premium": False, "subscription_status": SubscriptionStatus.CANCELLED},
            {"subscription_ref": subscription_ref},
        )
        if updated:
            logger.info(f"Subscription {subscription_ref} cancelled")
        else:
            logger.info(f"No user holds subscription {subscription_ref}; nothing to cancel")
        return updated

    def reapply_side_effects(self, external_ref):
        """Re-run the user/job update for an already completed payment."""
        payment = self.store.select_one("payments", {"external_ref": external_ref})
        if payment is None:
            raise UnknownReference(external_ref)
        if payment["status"] != PaymentStatus.COMPLETED:
            raise ValidationError(
                f"Payment {external_ref} is {payment['status']}; only completed payments can be re-applied"
            )
        self._apply_side_effects(payment)
        logger.info(f"Side effects re-applied for payment {external_ref}")

    def repair_completed(self):
        """
        Finish every completed payment whose user/job update is missing.

        Returns the list of references that were repaired.
        """
        completed = self.store.select_all("payments", {"status": PaymentStatus.COMPLETED})

        # Only a user's most recent subscription can be pending repair; older
        # ones were superseded and must not overwrite the current reference.
        latest_subscription = {}
        for payment in completed:
            if payment["kind"] != PaymentKind.SUBSCRIPTION:
                continue
            current = latest_subscription.get(payment["user_id"])
            if current is None or payment["created_at"] > current["created_at"]:
                latest_subscription[payment["user_id"]] = payment

        repaired = []
        for payment in completed:
            if payment["kind"] == PaymentKind.SUBSCRIPTION:
                if latest_subscription[payment["user_id"]] is not payment:
                    continue
            if self._side_effect_applied(payment):
                continue
            try:
                self._apply_side_effects(payment)
            except (LookupError, ValidationError) as e:
                logger.error(f"Cannot repair payment {payment['external_ref']}: {e}")
                continue
            repaired.append(payment["external_ref"])
            logger.info(f"Repaired side effects for payment {payment['external_ref']}")
        return repaired

    def _apply_side_effects(self, payment):
        # Must stay idempotent: the repair path may run it more than once.
        kind = PaymentKind(payment["kind"])

        if kind is PaymentKind.SUBSCRIPTION:
            updated = self.store.update(
                "users",
                {
                    "premium": True,
                    "subscription_status": SubscriptionStatus.ACTIVE,
                    "subscription_ref": payment["external_ref"],
                },
                {"id": payment["user_id"]},
            )
            entity = f"user {payment['user_id']}"
        else:
            if not payment.get("job_id"):
                raise ValidationError(f"Job boost payment {payment['external_ref']} has no job")
            updated = self.store.update("jobs", {"boosted": True}, {"id": payment["job_id"]})
            entity = f"job {payment['job_id']}"

        if not updated:
            raise LookupError(f"{entity} not found for payment {payment['external_ref']}")

    def _side_effect_applied(self, payment):
        if payment["kind"] == PaymentKind.SUBSCRIPTION:
            user = self.store.select_one("users", {"id": payment["user_id"]})
            # A cancellation keeps the reference, so a cancelled user counts as applied.
            return bool(user and user["subscription_ref"] == payment["external_ref"])

        job = self.store.select_one("jobs", {"id": payment["job_id"]})
        return bool(job and job["boosted"])
