from functools import wraps
import logging

from flask_jwt_extended import get_jwt_identity

from jobmatch.errors import PremiumRequired
from jobmatch.extensions import db
from jobmatch.models import User

logger = logging.getLogger(__name__)


def premium_required(fn):
    """
    Decorator to restrict an endpoint to premium users.
    Must be used after @jwt_required.
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        user = db.session.get(User, get_jwt_identity())
        if user is None or not user.premium:
            logger.info(f"Premium required for user: {get_jwt_identity()}")
            raise PremiumRequired()
        return fn(*args, **kwargs)

    return wrapper
