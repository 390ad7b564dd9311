"""Typed failures raised by the arena services.

Each error carries the HTTP status the boundary should answer with and a
short machine-readable code. Messages are safe to show to clients; they never
contain storage or cryptographic details.
"""


class ArenaError(Exception):
    status_code = 500
    code = 'internal_error'
    default_message = 'Internal server error'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self):
        return {'error': self.message, 'code': self.code}


class ValidationError(ArenaError):
    status_code = 400
    code = 'validation_error'
    default_message = 'Validation failed'

    def __init__(self, message=None, details=None):
        super().__init__(message)
        self.details = details or []

    def to_dict(self):
        payload = super().to_dict()
        if self.details:
            payload['details'] = self.details
        return payload


class RangeError(ValidationError):
    """A numeric field fell outside its inclusive bounds."""

    code = 'range_error'

    def __init__(self, field: str, low: int, high: int):
        self.field = field
        self.low = low
        self.high = high
        super().__init__(
            f'{field} must be between {low:,} and {high:,}',
            details=[{'field': field, 'min': low, 'max': high}],
        )


class DuplicateError(ArenaError):
    status_code = 400
    code = 'duplicate'

    def __init__(self, field: str):
        self.field = field
        if field == 'email':
            message = 'Email already registered'
        else:
            message = 'Username already taken'
        super().__init__(message)


class InvalidCredentials(ArenaError):
    status_code = 401
    code = 'invalid_credentials'
    default_message = 'Invalid credentials'


class AuthError(ArenaError):
    status_code = 401
    code = 'unauthorized'
    default_message = 'Unauthorized'


class InvalidSignature(AuthError):
    code = 'invalid_signature'


class Expired(AuthError):
    code = 'token_expired'


class Malformed(AuthError):
    code = 'token_malformed'


class NotFound(ArenaError):
    status_code = 404
    code = 'not_found'
    default_message = 'Not found'


class IntegrityViolation(ArenaError):
    status_code = 400
    code = 'integrity_violation'
    default_message = 'Score does not match wave progression'


class InternalFault(ArenaError):
    pass
