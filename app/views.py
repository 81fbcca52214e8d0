# app/views.py
"""
HTML views.

Every page is a pure function from a small view model to an HTML
string, so pages can be tested without a running server. Anything
that came from a user is escaped before it is interpolated.
"""
from __future__ import annotations

from dataclasses import dataclass
from html import escape
from typing import Optional

from auth.models import SessionUser

SITE_TITLE = "Members Portal"

_STYLE = """
        body { font-family: system-ui; background: #111; color: #eee; padding: 2rem; text-align: center; }
        .container { max-width: 500px; margin: 4rem auto; }
        a { color: #3498db; }
        form { display: flex; flex-direction: column; gap: 0.75rem; margin-top: 1.5rem; }
        input { padding: 0.5rem; border-radius: 4px; border: 1px solid #444; background: #222; color: #eee; }
        button { padding: 0.6rem; border: 0; border-radius: 4px; background: #3498db; color: #fff; cursor: pointer; }
        img { max-width: 100%; margin-top: 1.5rem; border-radius: 8px; }
        .nav a { margin: 0 0.5rem; }
"""


@dataclass(frozen=True)
class LandingView:
    user: Optional[SessionUser] = None


@dataclass(frozen=True)
class MembersView:
    user: SessionUser
    image: str


def _page(title: str, body: str) -> str:
    """Wrap body markup in the shared page shell."""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>{escape(title)} - {SITE_TITLE}</title>
    <style>{_STYLE}    </style>
</head>
<body>
    <div class="container">
{body}
    </div>
</body>
</html>"""


def render_landing(view: LandingView) -> str:
    """Home page: greeting and navigation, depending on whether someone is logged in."""
    if view.user:
        body = f"""        <h1>Hello, {escape(view.user.name)}!</h1>
        <p class="nav">
            <a href="/members">Go to Members Area</a>
            <a href="/logout">Log out</a>
        </p>"""
    else:
        body = """        <h1>Welcome</h1>
        <p class="nav">
            <a href="/signup">Sign up</a>
            <a href="/login">Log in</a>
        </p>"""
    return _page("Home", body)


def render_signup() -> str:
    return _page(
        "Sign up",
        """        <h1>Sign up</h1>
        <form method="post" action="/signup">
            <input type="text" name="name" placeholder="Name">
            <input type="email" name="email" placeholder="Email">
            <input type="password" name="password" placeholder="Password">
            <button type="submit">Sign up</button>
        </form>
        <p>Already a member? <a href="/login">Log in</a></p>""",
    )


def render_login() -> str:
    return _page(
        "Log in",
        """        <h1>Log in</h1>
        <form method="post" action="/login">
            <input type="email" name="email" placeholder="Email">
            <input type="password" name="password" placeholder="Password">
            <button type="submit">Log in</button>
        </form>
        <p>New here? <a href="/signup">Sign up</a></p>""",
    )


def render_members(view: MembersView) -> str:
    """Members-only page showing the picked image."""
    image = escape(view.image)
    return _page(
        "Members",
        f"""        <h1>Hello, {escape(view.user.name)}.</h1>
        <img src="/static/{image}.svg" alt="{image}" data-image="{image}">
        <p class="nav">
            <a href="/">Home</a>
            <a href="/logout">Log out</a>
        </p>""",
    )


def render_not_found(path: str = "") -> str:
    detail = f"<p><code>{escape(path)}</code> does not exist.</p>" if path else ""
    return _page(
        "Page Not Found",
        f"""        <h1>404 - Page Not Found</h1>
        {detail}
        <p><a href="/">Back to home</a></p>""",
    )


def render_inline_error(message: str, retry_href: str) -> str:
    """
    Inline failure fragment for form submissions.

    Not a full page: just the message and a link back to the form.
    """
    return f'<p>{escape(message)}</p><a href="{escape(retry_href)}">Try again</a>'
