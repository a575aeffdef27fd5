import logging
from flask import Blueprint
from werkzeug.exceptions import HTTPException
from app.exceptions import MarketplaceError
from app.utils.responses import error, internal_error_response

errors_bp = Blueprint("errors_bp", __name__)

@errors_bp.app_errorhandler(MarketplaceError)
def handle_domain_error(e):
    if e.status_code >= 500:
        logging.exception("Domain error surfaced as %s", e.status_code)
        return internal_error_response()
    return error(e.message, status=e.status_code, details=e.details)

@errors_bp.app_errorhandler(HTTPException)
def handle_http_exception(e):
    msg = e.description or getattr(e, "name", "HTTP Error")
    return error(msg, status=e.code)

@errors_bp.app_errorhandler(Exception)
def handle_unexpected_exception(e):
    logging.exception("Unhandled exception")
    return internal_error_response()
