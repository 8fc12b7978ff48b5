from datetime import UTC, datetime, timedelta

import bcrypt
from flask import Blueprint, current_app, flash, render_template, request, session, url_for
from flask_login import current_user, login_user, logout_user

from .. import limiter
from ..audit import log_event
from ..htmx import is_htmx_request, redirect_to
from ..models import ROLE_ADMIN, Family, User, db
from ..url_utils import SAFE_REDIRECT_FALLBACK, contains_control_characters, sanitize_redirect_url
from .forms import LoginForm, SetupForm

auth_bp = Blueprint("auth", __name__)

REDIRECT_PARAM = "redirect"

# Precomputed so unknown-email attempts cost the same as a real check
_DUMMY_PASSWORD_HASH = bcrypt.hashpw(b"family-budget-dummy", bcrypt.gensalt(rounds=12))


def _post_login_target():
    """Resolve where a freshly signed-in member should land."""
    raw_target = request.args.get(REDIRECT_PARAM)
    target = sanitize_redirect_url(raw_target)
    # Decoded CR/LF would make the Location or HX-Redirect header invalid
    if contains_control_characters(target):
        target = SAFE_REDIRECT_FALLBACK
    if raw_target and target == SAFE_REDIRECT_FALLBACK and raw_target != SAFE_REDIRECT_FALLBACK:
        # The candidate itself is attacker-controlled and stays out of the log.
        current_app.logger.info(
            "Discarded unsafe post-login redirect target (user id=%s, length=%d)",
            current_user.id,
            len(raw_target),
        )
    return target


def _render_form(full_template, partial_template, status=200, **context):
    template = partial_template if is_htmx_request() else full_template
    return render_template(template, **context), status


def _login_error(form, message):
    flash(message, "danger")
    return _render_form(
        "auth/login.html",
        "auth/_login_form.html",
        status=422,
        form=form,
        redirect_param=request.args.get(REDIRECT_PARAM, ""),
    )


# ── Login ──────────────────────────────────────────────────────────


@auth_bp.route("/login", methods=["GET", "POST"])
@limiter.limit("5 per minute", methods=["POST"])
def login():
    if current_user.is_authenticated:
        return redirect_to(url_for("dashboard.index"))

    form = LoginForm()
    if request.method == "GET":
        return render_template("auth/login.html", form=form, redirect_param=request.args.get(REDIRECT_PARAM, ""))

    if not form.validate_on_submit():
        return _login_error(form, "Please check your input.")

    email = form.email.data.lower().strip()
    user = User.query.filter_by(email=email).first()

    if user is None:
        bcrypt.checkpw(form.password.data.encode("utf-8"), _DUMMY_PASSWORD_HASH)
        log_event("login_failed", detail=f"email={email}")
        return _login_error(form, "Invalid email or password.")

    if user.is_locked():
        bcrypt.checkpw(form.password.data.encode("utf-8"), _DUMMY_PASSWORD_HASH)
        log_event("login_locked", "user", user.id, user=user)
        return _login_error(
            form, "Account temporarily locked due to repeated failed sign-in attempts. Please try again later."
        )

    if not user.check_password(form.password.data):
        User.query.filter_by(id=user.id).update(
            {"failed_login_count": db.func.coalesce(User.failed_login_count, 0) + 1}
        )
        db.session.commit()
        db.session.refresh(user)

        max_failures = current_app.config.get("MAX_FAILED_LOGINS", 5)
        if user.failed_login_count >= max_failures:
            lockout_minutes = current_app.config.get("ACCOUNT_LOCKOUT_MINUTES", 15)
            user.locked_until = datetime.now(UTC) + timedelta(minutes=lockout_minutes)
            db.session.commit()
            log_event(
                "account_locked",
                "user",
                user.id,
                detail=f"Locked for {lockout_minutes} minutes after {user.failed_login_count} failed attempts",
                user=user,
            )
        log_event("login_failed", "user", user.id, user=user)
        return _login_error(form, "Invalid email or password.")

    user.failed_login_count = 0
    user.locked_until = None
    user.last_login_at = datetime.now(UTC)

    session.clear()
    login_user(user, remember=form.remember_me.data)
    db.session.commit()
    log_event("login_success", "user", user.id)

    return redirect_to(_post_login_target())


# ── First-run family setup ────────────────────────────────────────


def _setup_available():
    if not current_app.config.get("SETUP_ENABLED", True):
        return False
    return db.session.query(Family.id).first() is None


@auth_bp.route("/setup", methods=["GET", "POST"])
@limiter.limit("5 per minute", methods=["POST"])
def setup():
    if not _setup_available():
        flash("This family budget is already set up. Please sign in.", "info")
        return redirect_to(url_for("auth.login"))

    form = SetupForm(currency=current_app.config.get("DEFAULT_CURRENCY", "USD"))
    if request.method == "GET":
        return render_template("auth/setup.html", form=form)

    if not form.validate_on_submit():
        flash("Please check your input.", "danger")
        return _render_form("auth/setup.html", "auth/_setup_form.html", status=422, form=form)

    family = Family(name=form.family_name.data.strip(), currency=form.currency.data.strip().upper())
    db.session.add(family)
    db.session.flush()

    admin = User(
        email=form.email.data.lower().strip(),
        first_name=form.first_name.data.strip(),
        last_name=form.last_name.data.strip(),
        role=ROLE_ADMIN,
        family_id=family.id,
    )
    admin.set_password(form.password.data)
    db.session.add(admin)
    db.session.flush()

    log_event("family_setup", "family", family.id, detail=f"currency={family.currency}", user=admin)
    db.session.commit()
    current_app.logger.info("Family %s created with administrator id=%s", family.public_id, admin.id)

    flash("Your family budget is ready. Please sign in.", "success")
    return redirect_to(url_for("auth.login"))


# ── Logout ─────────────────────────────────────────────────────────


@auth_bp.route("/logout", methods=["GET", "POST"])
@limiter.limit("10 per minute")
def logout():
    if current_user.is_authenticated:
        log_event("logout", "user", current_user.id)
    logout_user()
    session.clear()
    flash("You have been signed out.", "info")
    return redirect_to(url_for("auth.login"))
