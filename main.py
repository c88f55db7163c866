"""
Storefront - Application Entry Point
======================================
FastAPI app initialization, middleware, and router registration.
"""

import logging
import urllib.parse

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings
from common.flash import FLASH_COOKIE, pending_messages, set_flash_cookie
from common.security import CSRF_COOKIE, new_csrf_token, set_csrf_cookie

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)


# ==========================================
# Exception handler: 401 → redirect to login
# ==========================================

async def auth_exception_handler(request: Request, exc: StarletteHTTPException):
    """Redirect 401 to the login page for browser requests; JSON for everything else."""
    is_html = "text/html" in request.headers.get("accept", "")
    if exc.status_code == 401 and is_html:
        # For POST requests (form submissions), use Referer as return URL
        if request.method == "POST":
            parsed = urllib.parse.urlparse(request.headers.get("referer", "/"))
            next_url = parsed.path or "/"
            if parsed.query:
                next_url += "?" + parsed.query
        else:
            next_url = str(request.url.path)
            if request.url.query:
                next_url += "?" + str(request.url.query)
        return RedirectResponse(
            f"{settings.LOGIN_URL}?next={urllib.parse.quote(next_url, safe='')}",
            status_code=302,
        )
    return JSONResponse({"detail": exc.detail}, status_code=exc.status_code)


# ==========================================
# Import routers
# ==========================================
from modules.cart.routes import router as cart_router
from modules.checkout.routes import router as checkout_router
from modules.payment.routes import router as payment_router
from modules.customer.routes import router as customer_router


# ==========================================
# Create App
# ==========================================
app = FastAPI(
    title="Storefront",
    description="Cart pricing and checkout",
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url=None,
)

# Register 401 handler for HTML redirects
app.add_exception_handler(StarletteHTTPException, auth_exception_handler)


# ==========================================
# Middleware: Flash Messages
# ==========================================
@app.middleware("http")
async def flash_message_middleware(request: Request, call_next):
    """Transfer flash messages from request.state to response cookie."""
    response = await call_next(request)
    messages = pending_messages(request)
    if messages:
        set_flash_cookie(response, messages)
    elif request.method == "GET" and request.cookies.get(FLASH_COOKIE):
        # Flash messages were displayed on this GET, clear the cookie
        set_flash_cookie(response, [])
    return response


# ==========================================
# Middleware: CSRF Cookie Refresh
# ==========================================
@app.middleware("http")
async def csrf_cookie_refresh(request: Request, call_next):
    """HTML pages without their own token still leave a CSRF cookie behind."""
    response = await call_next(request)
    if request.method != "GET" or request.cookies.get(CSRF_COOKIE):
        return response
    if "text/html" not in response.headers.get("content-type", ""):
        return response
    cookies = [value for name, value in response.headers.raw if name == b"set-cookie"]
    if not any(value.startswith(CSRF_COOKIE.encode() + b"=") for value in cookies):
        set_csrf_cookie(response, new_csrf_token())
    return response


# ==========================================
# Register Routers
# ==========================================
app.include_router(cart_router)
app.include_router(checkout_router)
app.include_router(payment_router)
app.include_router(customer_router)


# ==========================================
# Health check
# ==========================================
@app.get("/health")
async def health():
    return {"status": "ok", "version": "1.0.0"}
