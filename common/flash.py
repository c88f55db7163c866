"""
Flash Messages
================
One-shot notices for the basket and checkout pages ("Discount code applied",
"Only 2 left in stock"), carried across a POST -> 303 -> GET round trip in a
short-lived cookie.

Routes queue messages with flash(); the middleware in main.py writes them to
the response; templates read them back with get_flashed_messages(request).
"""

import json
import urllib.parse
from typing import List

from fastapi import Request, Response

FLASH_COOKIE = "_flash"
FLASH_MAX_AGE = 60
CATEGORIES = ("success", "info", "warning", "danger")

# Browsers drop cookies above ~4 KB; keep only the latest few notices
MAX_MESSAGES = 5


def flash(request: Request, message: str, category: str = "info"):
    """Queue a notice for the page the client is redirected to."""
    if category not in CATEGORIES:
        category = "info"
    queued = pending_messages(request)
    queued.append({"text": str(message), "category": category})
    request.state.flash_messages = queued[-MAX_MESSAGES:]


def pending_messages(request: Request) -> list:
    """Notices queued while handling this request."""
    return list(getattr(request.state, "flash_messages", []))


def get_flashed_messages(request: Request) -> List[dict]:
    """Notices carried in by the flash cookie. Malformed cookies read as empty."""
    raw = request.cookies.get(FLASH_COOKIE)
    if not raw:
        return []
    try:
        messages = json.loads(urllib.parse.unquote(raw))
    except ValueError:
        return []
    if not isinstance(messages, list):
        return []
    return [m for m in messages if isinstance(m, dict) and "text" in m]


def set_flash_cookie(response: Response, messages: list):
    """Write queued notices, or drop the cookie once they have been shown."""
    if not messages:
        response.delete_cookie(FLASH_COOKIE)
        return
    encoded = urllib.parse.quote(json.dumps(messages[-MAX_MESSAGES:], ensure_ascii=False))
    response.set_cookie(FLASH_COOKIE, encoded, httponly=True, samesite="lax", max_age=FLASH_MAX_AGE)
