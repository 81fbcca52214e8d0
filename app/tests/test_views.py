# app/tests/test_views.py
"""Tests for the pure HTML views."""
from app.views import (
    LandingView,
    MembersView,
    render_inline_error,
    render_landing,
    render_login,
    render_members,
    render_not_found,
    render_signup,
)
from auth.models import SessionUser

ANN = SessionUser(name="Ann", email="ann@x.com")


class TestLanding:
    """Tests for render_landing."""

    def test_anonymous(self):
        """Anonymous landing links to signup and login."""
        html = render_landing(LandingView())
        assert 'href="/signup"' in html
        assert 'href="/login"' in html
        assert 'href="/logout"' not in html

    def test_logged_in(self):
        """Logged-in landing greets the user and links to members and logout."""
        html = render_landing(LandingView(user=ANN))
        assert "Hello, Ann!" in html
        assert 'href="/members"' in html
        assert 'href="/logout"' in html

    def test_name_is_escaped(self):
        """User-provided names cannot inject markup."""
        html = render_landing(LandingView(user=SessionUser("<script>x</script>", "e@x.com")))
        assert "<script>x</script>" not in html
        assert "&lt;script&gt;" in html


class TestForms:
    """Tests for the signup and login pages."""

    def test_signup_fields(self):
        """Signup form posts name, email and password."""
        html = render_signup()
        assert 'action="/signup"' in html
        for field in ("name", "email", "password"):
            assert f'name="{field}"' in html

    def test_login_fields(self):
        """Login form posts email and password."""
        html = render_login()
        assert 'action="/login"' in html
        assert 'name="name"' not in html


class TestMembers:
    """Tests for render_members."""

    def test_references_image(self):
        """The page shows the picked image."""
        html = render_members(MembersView(user=ANN, image="frog"))
        assert 'src="/static/frog.svg"' in html
        assert "Hello, Ann." in html


class TestMessages:
    """Tests for error fragments and the 404 page."""

    def test_inline_error(self):
        """Inline errors carry the message and a retry link."""
        html = render_inline_error('"email" must be a valid email', "/signup")
        assert html == '<p>&quot;email&quot; must be a valid email</p><a href="/signup">Try again</a>'

    def test_not_found(self):
        """404 page names the missing path, escaped."""
        html = render_not_found("/<b>")
        assert "404" in html
        assert "/&lt;b&gt;" in html
