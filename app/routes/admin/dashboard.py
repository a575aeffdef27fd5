from flask import g
from app.services import directory
from app.utils import ok
from . import admin_bp


@admin_bp.route("/dashboard", methods=["GET"])
def dashboard():
    """Platform-wide counts, revenue and the latest activity feed."""
    return ok(directory.admin_dashboard(g.identity))


@admin_bp.route("/analytics", methods=["GET"])
def analytics():
    return ok(directory.admin_analytics(g.identity))
