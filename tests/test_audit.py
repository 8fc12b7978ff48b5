"""Tests for audit event recording."""

from app.audit import log_event
from app.models import AuditLog, Family
from tests.conftest import _make_user


def test_log_event_outside_request_has_no_actor(db):
    entry = log_event("maintenance", detail="nightly check")
    assert entry.id is not None
    assert entry.user_id is None
    assert entry.family_id is None
    assert entry.ip_address is None


def test_log_event_explicit_user_sets_family(family):
    user = _make_user(family)
    entry = log_event("login_failed", "user", user.id, user=user)
    assert entry.user_id == user.id
    assert entry.family_id == family.id


def test_log_event_joins_pending_transaction(db):
    family = Family(name="Pending", currency="GBP")
    db.session.add(family)

    log_event("family_setup", "family")
    assert AuditLog.query.count() == 1

    db.session.rollback()
    assert AuditLog.query.count() == 0
    assert Family.query.count() == 0


def test_log_event_truncates_long_detail(db):
    entry = log_event("login_failed", detail="x" * 5000)
    assert len(entry.detail) == 500
