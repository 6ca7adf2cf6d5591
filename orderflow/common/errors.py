"""Domain error taxonomy raised by services and translated at the HTTP edge."""


class DomainError(Exception):
    """Base class for expected, client-visible failures."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    """Request shape or content is not acceptable."""


class NotFoundError(DomainError):
    status_code = 404


class ConflictError(DomainError):
    """Business rule violation, e.g. ordering an inactive product."""


class InvalidTransitionError(ConflictError):
    """Requested status change is not allowed by the state machine."""


class ExternalServiceError(DomainError):
    """A dependent service could not be reached or answered garbage."""

    status_code = 503
