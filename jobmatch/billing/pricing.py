"""
Prices and currency handling.

All amounts are integers in the currency's minor unit (cents, kobo). The
number of minor units per major unit comes from ``CURRENCY_EXPONENTS``; never
assume it is 100.
"""

from decimal import Decimal

from jobmatch.models.payment import PaymentKind

# USD cents
BASE_PRICES = {
    PaymentKind.SUBSCRIPTION: 1900,
    PaymentKind.JOB_BOOST: 2900,
}

DESCRIPTIONS = {
    PaymentKind.SUBSCRIPTION: "Premium Monthly Subscription",
    PaymentKind.JOB_BOOST: "Job Post Boost",
}

CURRENCY_EXPONENTS = {
    "USD": 2,
    "NGN": 2,
    "GHS": 2,
    "KES": 2,
    "ZAR": 2,
    "JPY": 0,
}

# Major units of the currency per 1 USD
CONVERSION_RATES = {
    "USD": 1,
    "NGN": 1600,
}

AFRICAN_COUNTRIES = {"NG", "GH", "KE", "ZA", "EG", "MA", "TN"}


def currency_for_region(country=None):
    if country and country.upper() in AFRICAN_COUNTRIES:
        return "NGN"
    return "USD"


def convert_amount(usd_cents, currency):
    """Convert a USD-cent amount to minor units of ``currency``."""
    rate = CONVERSION_RATES.get(currency, 1)
    scale = Decimal(10) ** (CURRENCY_EXPONENTS.get(currency, 2) - CURRENCY_EXPONENTS["USD"])
    return int((Decimal(usd_cents) * rate * scale).to_integral_value())


def price_for(kind, country=None):
    """Return ``(amount, currency, description)`` for a payment kind."""
    kind = PaymentKind(kind)
    currency = currency_for_region(country)
    return convert_amount(BASE_PRICES[kind], currency), currency, DESCRIPTIONS[kind]


def to_major_units(amount, currency):
    exponent = CURRENCY_EXPONENTS.get(currency, 2)
    return Decimal(amount).scaleb(-exponent)


def format_amount(amount, currency):
    exponent = CURRENCY_EXPONENTS.get(currency, 2)
    return f"{to_major_units(amount, currency):,.{exponent}f} {currency}"
