# app/routers/pages.py
"""
Page routes: signup, login, the members area and logout.

Session state reaches each handler as an explicit SessionContext
resolved once per request from the signed cookie.
"""
from __future__ import annotations

import logging
import random
from typing import Dict, Optional, Sequence

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse

from app.correlation import get_request_id
from app.forms import validate_login, validate_signup
from app.views import (
    LandingView,
    MembersView,
    render_inline_error,
    render_landing,
    render_login,
    render_members,
    render_signup,
)
from auth.middleware import SessionCookie, check_access, get_session_cookie, resolve_session_context
from auth.models import SessionContext
from auth.service import (
    AuthError,
    authenticate_user,
    create_session,
    create_user,
    destroy_session,
)
from persistence.db import StorageError

_logger = logging.getLogger(__name__)

router = APIRouter(tags=["Pages"])

MEMBER_IMAGES = ("cat", "dog", "frog")

SIGNUP_ERROR = "Error signing up."
LOGIN_ERROR = "Error logging in."
LOGOUT_ERROR = "Error logging out."


def pick_member_image(images: Sequence[str] = MEMBER_IMAGES, rng: Optional[random.Random] = None) -> str:
    """Pick one image uniformly at random."""
    return (rng or random).choice(images)


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=302)


async def form_fields(request: Request) -> Dict[str, Optional[str]]:
    """
    FastAPI dependency: the raw submitted form as text values.

    A field posted empty stays "" while a field that was never posted
    is absent, so validation can tell the two apart.
    """
    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str)}


def _start_session(cookie: SessionCookie, user, url: str) -> RedirectResponse:
    """Persist a session for user and redirect with the cookie set."""
    session = create_session(user.identity, duration_seconds=cookie.max_age)
    response = _redirect(url)
    cookie.set(response, session.id)
    return response


# =============================================================================
# Endpoints
# =============================================================================


@router.get("/", response_class=HTMLResponse)
async def landing_page(ctx: SessionContext = Depends(resolve_session_context)):
    return render_landing(LandingView(user=ctx.user))


@router.get("/signup", response_class=HTMLResponse)
async def signup_page():
    return render_signup()


@router.post("/signup")
def signup(
    request: Request,
    fields: Dict[str, Optional[str]] = Depends(form_fields),
    cookie: SessionCookie = Depends(get_session_cookie),
):
    """
    Create an account.

    Validation and duplicate-email failures are shown inline with a
    link back to the form; on success the new member is logged in and
    sent to the members area.
    """
    result = validate_signup(
        {"name": fields.get("name"), "email": fields.get("email"), "password": fields.get("password")}
    )
    if not result.ok:
        return HTMLResponse(render_inline_error(result.first_error, "/signup"))

    form = result.form
    try:
        user = create_user(name=form.name, email=form.email, password=form.password)
        return _start_session(cookie, user, "/members")
    except AuthError as e:
        return HTMLResponse(render_inline_error(str(e), "/signup"))
    except StorageError:
        _logger.exception(f"Signup failed request_id={get_request_id(request)}")
        return PlainTextResponse(SIGNUP_ERROR)


@router.get("/login", response_class=HTMLResponse)
async def login_page():
    return render_login()


@router.post("/login")
def login(
    request: Request,
    fields: Dict[str, Optional[str]] = Depends(form_fields),
    cookie: SessionCookie = Depends(get_session_cookie),
):
    """Log in with email and password; unknown emails and wrong passwords are reported inline."""
    result = validate_login({"email": fields.get("email"), "password": fields.get("password")})
    if not result.ok:
        return HTMLResponse(render_inline_error(result.first_error, "/login"))

    form = result.form
    try:
        user = authenticate_user(form.email, form.password)
        return _start_session(cookie, user, "/")
    except AuthError as e:
        return HTMLResponse(render_inline_error(str(e), "/login"))
    except StorageError:
        _logger.exception(f"Login failed request_id={get_request_id(request)}")
        return PlainTextResponse(LOGIN_ERROR)


@router.get("/members", response_class=HTMLResponse)
async def members_page(request: Request, ctx: SessionContext = Depends(resolve_session_context)):
    decision = check_access(ctx)
    if not decision.allowed:
        return _redirect(decision.redirect_to)

    rng = getattr(request.app.state, "image_rng", None)
    return render_members(MembersView(user=ctx.user, image=pick_member_image(rng=rng)))


@router.get("/logout")
def logout(
    request: Request,
    ctx: SessionContext = Depends(resolve_session_context),
    cookie: SessionCookie = Depends(get_session_cookie),
):
    """Destroy the current session and clear the cookie."""
    if ctx.session_id:
        try:
            destroy_session(ctx.session_id)
        except StorageError:
            _logger.exception(f"Logout failed request_id={get_request_id(request)}")
            return PlainTextResponse(LOGOUT_ERROR)

    response = _redirect("/")
    cookie.clear(response)
    return response
