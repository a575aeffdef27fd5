from flask import g
from app.services import directory
from app.utils import ok
from . import regional_admin_bp


@regional_admin_bp.route("/dashboard", methods=["GET"])
def district_dashboard():
    return ok(directory.regional_dashboard(g.identity))
