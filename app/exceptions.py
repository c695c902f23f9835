"""
Service-layer exceptions

Services raise these; the handler registered in app.main turns each into a
JSON envelope with the matching HTTP status.
"""


class ServiceError(Exception):
    """Base class for errors a client can act on"""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequestError(ServiceError):
    status_code = 400


class AuthenticationError(ServiceError):
    status_code = 401


class ForbiddenError(ServiceError):
    status_code = 403


class NotFoundError(ServiceError):
    status_code = 404


class ConflictError(ServiceError):
    """State conflicts: duplicate answers, already-completed attempts"""

    status_code = 409
