from dataclasses import dataclass

from flask_jwt_extended import get_jwt_identity


@dataclass(frozen=True)
class RequestContext:
    """The authenticated caller, passed explicitly into service functions."""

    user_id: str


def current_context():
    """Build the context for the current request. Requires a verified JWT."""
    return RequestContext(user_id=get_jwt_identity())
