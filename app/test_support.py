from flask import Blueprint
from app.exceptions import ConflictError, InternalError
from app.utils.responses import ok
import logging


test_support_bp = Blueprint("test_support_bp", __name__)


@test_support_bp.route("/__ok", methods=["GET"])
def __ok():
    return ok({"ping": "pong"})


@test_support_bp.route("/__boom", methods=["GET"])
def __boom():
    raise RuntimeError("boom")


@test_support_bp.route("/__conflict", methods=["GET"])
def __conflict():
    raise ConflictError("already there", details={"field": "name"})


@test_support_bp.route("/__internal", methods=["GET"])
def __internal():
    raise InternalError("connection string postgres://secret")


@test_support_bp.route("/__log", methods=["GET"])
def __log():
    logging.getLogger(__name__).info({"event": "test log line", "email": "someone@example.com"})
    return ok({"logged": True})
