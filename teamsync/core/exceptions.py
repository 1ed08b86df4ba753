class TeamSyncException(Exception):
    """Base exception for the TeamSync API.

    Each subclass carries the HTTP status and a stable error code that the
    exception handlers in ``teamsync.main`` put into the error envelope.
    """

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class UnauthorizedException(TeamSyncException):
    """Raised when no actor can be resolved from the request"""

    status_code = 401
    code = "UNAUTHORIZED"


class ForbiddenException(TeamSyncException):
    """Raised when the actor lacks capability or scope for a resource"""

    status_code = 403
    code = "FORBIDDEN"


class NotFoundException(TeamSyncException):
    """Raised when resource not found"""

    status_code = 404
    code = "NOT_FOUND"


class ValidationException(TeamSyncException):
    """Raised for business logic validation errors"""

    status_code = 400
    code = "VALIDATION_ERROR"


class DuplicateNameException(ValidationException):
    """Raised when a name is already taken inside its uniqueness scope"""

    def __init__(self, entity: str, message: str | None = None):
        super().__init__(
            message or f"{entity.capitalize()} name already exists",
            code=f"DUPLICATE_{entity.upper()}_NAME",
        )


class TenantIdRequiredException(ValidationException):
    """Raised when a super admin omits the tenant filter on tenant-scoped data"""

    code = "TENANT_ID_REQUIRED"


class InvalidStatusException(ValidationException):
    """Raised for a status change outside the allowed lifecycle"""

    code = "INVALID_STATUS"


class PaymentProviderException(TeamSyncException):
    """Raised when the payment provider rejects or fails a call"""

    status_code = 502
    code = "PAYMENT_FAILED"


class InvalidWebhookException(ValidationException):
    """Raised when a provider webhook cannot be authenticated or parsed"""

    code = "INVALID_WEBHOOK"


class InvalidPasswordException(ValidationException):
    """Raised when the current password of a self-service change is wrong"""

    code = "INVALID_PASSWORD"
