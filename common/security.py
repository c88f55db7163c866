"""
Storefront - Security Utilities
=================================
Double-submit CSRF tokens and the cookie settings for storefront-issued cookies.

NOTE: Authentication itself is issued by the auth service; the storefront only
forwards the auth_token cookie as a bearer token.
"""

import secrets
from typing import Optional

from fastapi import Request, HTTPException, Response

from config.settings import CSRF_ENABLED, COOKIE_SECURE, COOKIE_SAMESITE, DRAFT_TTL_MINUTES

CSRF_COOKIE = "csrf_token"
CSRF_HEADER = "X-CSRF-Token"


def get_cookie_kwargs(max_age: Optional[int] = None) -> dict:
    """Cookie flags for the checkout session cookie. Lifetime follows the draft TTL."""
    return dict(
        httponly=True,
        secure=COOKIE_SECURE,
        samesite=COOKIE_SAMESITE,
        max_age=max_age if max_age is not None else DRAFT_TTL_MINUTES * 60,
    )


# ==========================================
# CSRF (double submit: cookie + form field or header)
# ==========================================

def new_csrf_token() -> str:
    return secrets.token_urlsafe(32)


def set_csrf_cookie(response: Response, token: str):
    """Pair a rendered page's token with its cookie."""
    response.set_cookie(CSRF_COOKIE, token, httponly=True, secure=COOKIE_SECURE, samesite=COOKIE_SAMESITE)


def csrf_check(request: Request, form_token: Optional[str] = None):
    """
    Compare the cookie token with the X-CSRF-Token header (AJAX) or the form field.
    Raises HTTPException(403) on mismatch. A no-op when CSRF_ENABLED is false.
    """
    if not CSRF_ENABLED:
        return

    cookie_token = request.cookies.get(CSRF_COOKIE) or ""
    token = request.headers.get(CSRF_HEADER) or form_token or ""
    if not cookie_token or not token or not secrets.compare_digest(cookie_token, token):
        raise HTTPException(403, "CSRF token missing or invalid")
