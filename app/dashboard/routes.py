from flask import Blueprint, render_template
from flask_login import current_user, login_required

from ..models import AuditLog, User

dashboard_bp = Blueprint("dashboard", __name__)

RECENT_ACTIVITY_LIMIT = 10


@dashboard_bp.route("/")
@login_required
def index():
    family = current_user.family
    members = User.query.filter_by(family_id=family.id).order_by(User.first_name.asc()).all()
    recent_activity = (
        AuditLog.query.filter_by(family_id=family.id)
        .order_by(AuditLog.timestamp.desc())
        .limit(RECENT_ACTIVITY_LIMIT)
        .all()
    )
    return render_template(
        "dashboard/index.html",
        family=family,
        members=members,
        recent_activity=recent_activity,
    )
