from collections import defaultdict

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from jobmatch.billing.gateways import get_gateway
from jobmatch.billing.initiator import PaymentInitiator
from jobmatch.billing.pricing import format_amount
from jobmatch.billing.store import SqlRecordStore
from jobmatch.errors import ValidationError
from jobmatch.models import Payment
from jobmatch.models.payment import PaymentStatus
from jobmatch.security.context import current_context

bp = Blueprint("payments", __name__, url_prefix="/api/payments")


def get_initiator():
    config = current_app.config
    return PaymentInitiator(SqlRecordStore(), lambda provider: get_gateway(provider, config))


@bp.post("")
@jwt_required()
def initiate_payment():
    """
    Create a pending payment and return the provider checkout details.

    Body: ``kind`` (subscription | job_boost), ``provider`` (stripe |
    paystack), optional ``country`` (ISO code, picks the currency) and
    ``job_id`` for boosts.
    """
    data = request.get_json(silent=True) or {}
    if not data.get("kind") or not data.get("provider"):
        raise ValidationError("kind and provider are required")

    checkout = get_initiator().initiate(
        current_context(),
        kind=data["kind"],
        provider=data["provider"],
        country=data.get("country"),
        job_id=data.get("job_id"),
    )
    return jsonify(checkout), 201


@bp.get("")
@jwt_required()
def payment_history():
    ctx = current_context()
    payments = (
        Payment.query
        .filter_by(user_id=ctx.user_id)
        .order_by(Payment.created_at.desc())
        .all()
    )

    totals = defaultdict(int)
    for payment in payments:
        if payment.status == PaymentStatus.COMPLETED.value:
            totals[payment.currency] += payment.amount

    return jsonify({
        "payments": [
            {**payment.to_dict(), "display_amount": format_amount(payment.amount, payment.currency)}
            for payment in payments
        ],
        "completed_totals": {
            currency: {"amount": amount, "display_amount": format_amount(amount, currency)}
            for currency, amount in totals.items()
        },
    }), 200
