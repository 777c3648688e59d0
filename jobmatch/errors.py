class DomainError(Exception):
    """
    Base class for errors the API reports to clients.

    ``status_code`` is the HTTP status the error handler responds with and
    ``code`` is a stable machine-readable identifier.
    """

    status_code = 400
    code = "DOMAIN_ERROR"

    def __init__(self, message=None, payload=None):
        super().__init__(message or self.__class__.__doc__.strip().splitlines()[0])
        self.message = str(self)
        self.payload = payload or {}


class ValidationError(DomainError):
    """The request was missing required fields or carried invalid values."""
    code = "VALIDATION_ERROR"


class NotFound(DomainError):
    """The requested resource does not exist."""
    status_code = 404
    code = "NOT_FOUND"


class PermissionDenied(DomainError):
    """You do not have permission to perform this action."""
    status_code = 403
    code = "PERMISSION_DENIED"


class PremiumRequired(PermissionDenied):
    """An active premium subscription is required."""
    code = "PREMIUM_REQUIRED"


# Billing

class MalformedPayload(DomainError):
    """Webhook payload could not be parsed."""
    code = "MALFORMED_PAYLOAD"


class InvalidSignature(DomainError):
    """Webhook signature verification failed."""
    status_code = 401
    code = "INVALID_SIGNATURE"


class UnknownReference(DomainError):
    """No payment matches the event reference."""
    code = "UNKNOWN_REFERENCE"

    def __init__(self, reference, message=None):
        self.reference = reference
        super().__init__(message or f"No payment found for reference {reference}")


class PartialApplyFailure(DomainError):
    """Payment was completed but its side effect was not applied."""
    status_code = 500
    code = "PARTIAL_APPLY_FAILURE"

    def __init__(self, reference, cause=None):
        self.reference = reference
        self.cause = cause
        super().__init__(
            f"Payment {reference} completed but side effect failed: {cause}",
            payload={"reference": reference},
        )


class StoreUnavailable(DomainError):
    """The record store is temporarily unavailable."""
    status_code = 503
    code = "STORE_UNAVAILABLE"


class ProviderUnavailable(DomainError):
    """The payment provider could not be reached."""
    status_code = 502
    code = "PROVIDER_UNAVAILABLE"
