"""Provider-neutral billing events produced by the webhook adapters."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Charge:
    external_ref: str
    succeeded: bool


@dataclass(frozen=True)
class SubscriptionCancelled:
    subscription_ref: str


@dataclass(frozen=True)
class Unrecognized:
    raw_kind: str
