from .responses import ok, error, validation_error_response, internal_error_response
from .auth import auth_required, role_required
from .validation import validate_schema, validate_query
from .db import transactional, paginate
from .jwt import (
    create_access_token,
    create_refresh_token,
    decode_token,
    TokenError,
)

__all__ = [
    'ok',
    'error',
    'validation_error_response',
    'internal_error_response',
    'auth_required',
    'role_required',
    'create_access_token',
    'create_refresh_token',
    'decode_token',
    'TokenError',
    'validate_schema',
    'validate_query',
    'transactional',
    'paginate',
]
