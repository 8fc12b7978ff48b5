from flask import has_request_context, request
from flask_login import current_user

from ..models import AuditLog, db

_DETAIL_MAX_LENGTH = 500


def _request_actor():
    """Return ``(user_id, family_id)`` of the signed-in member, if any."""
    if not has_request_context() or not current_user or not current_user.is_authenticated:
        return None, None
    return current_user.id, current_user.family_id


def log_event(action, target_type=None, target_id=None, detail=None, user=None, commit=None):
    """Record an audit event for the acting family member.

    ``user`` overrides the request's signed-in member, which is needed for
    events raised before login completes or after logout. Pending writes in
    the session are flushed together with the entry instead of being
    committed behind the caller's back.
    """
    if user is not None:
        user_id, family_id = user.id, user.family_id
    else:
        user_id, family_id = _request_actor()

    if detail is not None and len(detail) > _DETAIL_MAX_LENGTH:
        detail = detail[:_DETAIL_MAX_LENGTH]

    entry = AuditLog(
        user_id=user_id,
        family_id=family_id,
        action=action,
        target_type=target_type,
        target_id=target_id,
        detail=detail,
        ip_address=request.remote_addr if has_request_context() else None,
    )
    has_pending_writes = bool(db.session.new or db.session.dirty or db.session.deleted)
    db.session.add(entry)

    if commit is None:
        commit = not has_pending_writes
    if commit:
        db.session.commit()
    else:
        db.session.flush()
    return entry
