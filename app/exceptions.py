"""Error taxonomy shared by the workflow services and the HTTP layer.

Every error carries a short human-readable ``message`` and the HTTP status
it is rendered with; ``app.main`` registers a single handler for the base
class.
"""


class ServiceError(Exception):
    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ServiceError):
    status_code = 400
    code = "VALIDATION_ERROR"


class Unauthenticated(ServiceError):
    status_code = 401
    code = "TOKEN_INVALID"


class TokenExpired(Unauthenticated):
    code = "TOKEN_EXPIRED"


class Unauthorized(ServiceError):
    """The caller is authenticated but may not act on the resource."""

    status_code = 403
    code = "FORBIDDEN"


class NotFound(ServiceError):
    status_code = 404
    code = "NOT_FOUND"


class Conflict(ServiceError):
    status_code = 409
    code = "CONFLICT"


class CapacityExceeded(ServiceError):
    status_code = 409
    code = "CAPACITY_EXCEEDED"


class AlreadyFinalized(ServiceError):
    """The application already left ``Pending``; terminal states are final."""

    status_code = 409
    code = "ALREADY_FINALIZED"


class ServiceUnavailable(ServiceError):
    status_code = 503
    code = "SERVICE_UNAVAILABLE"
