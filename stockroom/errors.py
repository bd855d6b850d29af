"""
stockroom/errors.py
───────────────────
Error taxonomy shared by the services and the HTTP layer.

    ValidationError   bad client input          → 400, field-level message
    NotFound          target row is absent      → 404
    AuthError         credentials / session     → 401 (or redirect to login)
    StoreError        database fault            → 500, generic message
"""
from typing import Dict, Optional


class StockroomError(Exception):
    """Base class for every error the application raises on purpose."""
    status_code = 500
    message = 'Something went wrong.'

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        self.message = message or self.message

    def to_dict(self) -> dict:
        return {'success': False, 'error': self.message}


class ValidationError(StockroomError):
    """
    Raised when submitted product or account data is invalid.
    `field` names the first offending field; `errors` holds all of them.
    """
    status_code = 400

    def __init__(self, field: str, message: str, errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.field = field
        self.errors = errors or {field: message}

    @classmethod
    def from_errors(cls, errors: Dict[str, str]) -> 'ValidationError':
        field, message = next(iter(errors.items()))
        return cls(field, message, dict(errors))

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['field'] = self.field
        data['errors'] = self.errors
        return data


class NotFound(StockroomError):
    status_code = 404
    message = 'Product not found.'


class AuthError(StockroomError):
    status_code = 401
    message = 'Not authenticated'


class InvalidCredentials(AuthError):
    # Same text for unknown user and wrong password
    message = 'Invalid username or password.'


class NotAuthenticated(AuthError):
    message = 'Not authenticated'


class StoreError(StockroomError):
    """A database fault. The original driver exception is chained as __cause__."""
    status_code = 500
    message = 'A database error occurred.'


class ConstraintViolation(StoreError):
    status_code = 409
    message = 'A database constraint was violated.'
