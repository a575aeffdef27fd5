from functools import wraps
from flask import request
from pydantic import ValidationError
from .responses import validation_error_response, error


def validate_schema(schema):
    """Decorator to validate request JSON against a Pydantic schema."""

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            body = request.get_json(silent=True)
            if body is None and request.data:
                return error("Invalid JSON in request body", status=400)
            if not isinstance(body or {}, dict):
                return error("Request body must be a JSON object", status=400)
            try:
                obj = schema(**(body or {}))
            except ValidationError as ve:
                return validation_error_response(ve.errors())
            request.validated_data = obj
            return fn(*args, **kwargs)
        return wrapper

    return decorator


def validate_query(schema):
    """Decorator to validate query-string arguments against a Pydantic schema."""

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            params = {k: v for k, v in request.args.items() if v != ""}
            try:
                obj = schema(**params)
            except ValidationError as ve:
                return validation_error_response(ve.errors())
            request.validated_query = obj
            return fn(*args, **kwargs)
        return wrapper

    return decorator
