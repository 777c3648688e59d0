"""
Payment provider webhooks.

Handled, duplicate and ignored events answer 200 so the provider stops
re-delivering. Every failure answers non-2xx through the registered error
handlers so the provider's retry policy re-delivers.
"""

import logging

from flask import Blueprint, current_app, jsonify, request

from jobmatch.billing.events import Charge
from jobmatch.billing.providers import get_adapter
from jobmatch.billing.reconciliation import ReconciliationEngine
from jobmatch.billing.store import SqlRecordStore
from jobmatch.models.payment import PaymentProvider

logger = logging.getLogger(__name__)

bp = Blueprint("webhooks", __name__, url_prefix="/webhooks")


def handle_webhook(provider):
    adapter = get_adapter(provider, current_app.config)
    event = adapter.parse(request.get_data(), request.headers.get(adapter.signature_header))

    logger.info(
        f"Received {provider.value} webhook: {type(event).__name__}",
        extra={"provider": provider.value, "event": repr(event)},
    )

    outcome = ReconciliationEngine(SqlRecordStore()).dispatch(event)

    if isinstance(event, Charge):
        logger.info(
            f"Charge {event.external_ref} reconciled: {outcome.value}",
            extra={"provider": provider.value, "reference": event.external_ref},
        )
    return jsonify({"status": "success", "outcome": outcome.value}), 200


@bp.post("/paystack")
def paystack_webhook():
    return handle_webhook(PaymentProvider.PAYSTACK)


@bp.post("/stripe")
def stripe_webhook():
    return handle_webhook(PaymentProvider.STRIPE)
