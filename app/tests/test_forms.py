# app/tests/test_forms.py
"""Tests for signup and login form validation."""
import pytest

from app.forms import FieldError, LoginForm, SignupForm, validate_login, validate_signup


class TestValidateSignup:
    """Tests for validate_signup."""

    def test_valid_submission(self):
        """A complete submission parses into a SignupForm."""
        result = validate_signup({"name": "Ann", "email": "ann@x.com", "password": "secret1"})

        assert result.ok
        assert isinstance(result.form, SignupForm)
        assert result.form.name == "Ann"
        assert result.errors == []
        assert result.first_error is None

    def test_password_boundary(self):
        """Six characters is enough, five is not."""
        assert validate_signup({"name": "A", "email": "a@x.com", "password": "123456"}).ok
        result = validate_signup({"name": "A", "email": "a@x.com", "password": "12345"})
        assert result.first_error == '"password" length must be at least 6 characters long'

    @pytest.mark.parametrize(
        "data, expected",
        [
            ({"name": "", "email": "a@x.com", "password": "secret1"}, '"name" is not allowed to be empty'),
            ({"email": "a@x.com", "password": "secret1"}, '"name" is required'),
            ({"name": None, "email": "a@x.com", "password": "secret1"}, '"name" is required'),
            ({"name": "A", "email": "nope", "password": "secret1"}, '"email" must be a valid email'),
            ({"name": "A", "email": "", "password": "secret1"}, '"email" is not allowed to be empty'),
            ({"name": "A", "email": "a@x.com"}, '"password" is required'),
        ],
    )
    def test_error_messages(self, data, expected):
        """Each failure maps to a readable message."""
        result = validate_signup(data)

        assert not result.ok
        assert result.form is None
        assert result.first_error == expected

    def test_errors_in_field_order(self):
        """All errors are reported, name first."""
        result = validate_signup({"password": "x", "email": "bad", "name": ""})

        assert [e.field for e in result.errors] == ["name", "email", "password"]
        assert result.errors[0] == FieldError(field="name", message='"name" is not allowed to be empty')

    @pytest.mark.parametrize("email", ["Ann <ann@x.com>", "<ann@x.com>", "ann @x.com"])
    def test_email_must_be_bare_address(self, email):
        """Display-name forms and embedded whitespace are rejected."""
        result = validate_signup({"name": "Ann", "email": email, "password": "secret1"})

        assert not result.ok
        assert result.first_error == '"email" must be a valid email'


class TestValidateLogin:
    """Tests for validate_login."""

    def test_valid_submission(self):
        """Any non-empty password passes validation."""
        result = validate_login({"email": "ann@x.com", "password": "x"})

        assert result.ok
        assert isinstance(result.form, LoginForm)

    def test_empty_password(self):
        """Password must not be empty."""
        result = validate_login({"email": "ann@x.com", "password": ""})
        assert result.first_error == '"password" is not allowed to be empty'

    def test_bad_email_reported_before_password(self):
        """Email is checked first."""
        result = validate_login({"email": "nope", "password": ""})
        assert result.first_error == '"email" must be a valid email'

    def test_display_name_email_rejected(self):
        """Login also requires a bare address."""
        result = validate_login({"email": "Ann <ann@x.com>", "password": "secret1"})
        assert result.first_error == '"email" must be a valid email'
