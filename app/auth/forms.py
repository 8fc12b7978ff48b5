import re

from flask_wtf import FlaskForm
from wtforms import BooleanField, PasswordField, StringField, SubmitField
from wtforms.validators import DataRequired, Email, EqualTo, Length, Regexp, ValidationError

_COMMON_PASSWORDS = {
    "password",
    "password1",
    "12345678",
    "123456789",
    "1234567890",
    "qwerty123",
    "iloveyou",
    "letmein1",
    "trustno1",
    "budget123",
    "family123",
    "money123",
}

_CURRENCY_RE = re.compile(r"^[A-Za-z]{3}$")


def _validate_password_strength(form, field):
    password = field.data
    if not password or len(password) < 8:
        return  # Length validator handles this
    if password.lower() in _COMMON_PASSWORDS:
        raise ValidationError("This password is too common. Please choose a stronger password.")
    if not re.search(r"[A-Z]", password):
        raise ValidationError("Password must contain at least one uppercase letter.")
    if not re.search(r"[a-z]", password):
        raise ValidationError("Password must contain at least one lowercase letter.")
    if not re.search(r"[0-9]", password):
        raise ValidationError("Password must contain at least one number.")
    if not password.isprintable():
        raise ValidationError("Password contains invalid characters.")


class LoginForm(FlaskForm):
    email = StringField(
        "Email",
        validators=[DataRequired(), Email(), Length(max=254)],
        render_kw={"placeholder": "Email address", "autofocus": True, "type": "email"},
    )
    password = PasswordField(
        "Password",
        validators=[DataRequired()],
        render_kw={"placeholder": "Password"},
    )
    remember_me = BooleanField("Remember me")
    submit = SubmitField("Sign In")


class SetupForm(FlaskForm):
    """First-run form creating the family and its administrator."""

    family_name = StringField(
        "Family Name",
        validators=[DataRequired(), Length(min=2, max=100)],
        render_kw={"placeholder": "e.g. The Smiths", "autofocus": True},
    )
    currency = StringField(
        "Currency",
        validators=[
            DataRequired(),
            Regexp(_CURRENCY_RE, message="Use a three-letter ISO currency code, e.g. USD."),
        ],
        render_kw={"placeholder": "USD", "maxlength": 3},
    )
    first_name = StringField("First Name", validators=[DataRequired(), Length(min=2, max=50)])
    last_name = StringField("Last Name", validators=[DataRequired(), Length(min=2, max=50)])
    email = StringField(
        "Email",
        validators=[DataRequired(), Email(), Length(max=254)],
        render_kw={"placeholder": "Email address", "type": "email"},
    )
    password = PasswordField(
        "Password",
        validators=[DataRequired(), Length(min=8, max=72), _validate_password_strength],
        render_kw={"placeholder": "Password (8-72 characters)"},
    )
    password_confirm = PasswordField(
        "Confirm Password",
        validators=[DataRequired(), EqualTo("password", message="Passwords must match.")],
        render_kw={"placeholder": "Confirm password"},
    )
    submit = SubmitField("Create Family")
