"""
Auth Module - Dependencies
===========================
FastAPI dependencies for user authentication.
These are injected into route handlers via Depends().

NOTE: Tokens are issued by the auth service. The storefront only resolves
the profile behind the auth_token cookie.
"""

import logging

import httpx
from fastapi import Request, Depends, HTTPException, status

from config.api import get_api, request_json
from config.settings import AUTH_COOKIE
from common.exceptions import RemoteServiceError
from modules.user.models import User

logger = logging.getLogger("storefront.auth")


def get_current_user(request: Request, api: httpx.Client = Depends(get_api)):
    """
    Identify the current user from the auth_token cookie.
    Returns User object or None.
    """
    if not request.cookies.get(AUTH_COOKIE):
        return None

    try:
        data = request_json(api, "GET", "/users/profile")
    except RemoteServiceError as e:
        if e.remote_status not in (401, 403):
            logger.error(f"Profile lookup failed: {e.message}")
        return None

    user = User.from_api(data)
    if user and not user.enabled:
        return None
    return user


def require_customer(user=Depends(get_current_user)):
    """Require an authenticated shopper. Raises 401 if not logged in."""
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="login_required")
    return user
