"""
Domain Errors

Every error the engine raises on purpose derives from DomainError and
carries the HTTP status and machine-readable code the API answers with.
"""


class DomainError(Exception):
    """Base class for expected, caller-recoverable failures"""

    status_code = 400
    code = 'domain_error'

    def __init__(self, message: str = '', **details):
        super().__init__(message or self.__class__.__doc__)
        self.message = message or self.__class__.__doc__
        self.details = details

    def to_dict(self) -> dict:
        payload = {'detail': self.message, 'code': self.code}
        if self.details:
            payload.update(self.details)
        return payload


class ValidationFailed(DomainError):
    """Malformed or inconsistent input."""

    status_code = 400
    code = 'validation_error'


class NotFound(DomainError):
    """The requested object does not exist."""

    status_code = 404
    code = 'not_found'


class NotOwner(DomainError):
    """The booking belongs to another stay."""

    status_code = 403
    code = 'not_owner'


class Conflict(DomainError):
    """The current state does not allow the operation."""

    status_code = 409
    code = 'conflict'
