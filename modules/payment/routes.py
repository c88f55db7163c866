"""
Payment Routes
================
Order submission (form + API), provider return pages, pay-again.
"""

import logging
from typing import Optional

import httpx
from fastapi import APIRouter, Request, Depends, Form
from fastapi.responses import HTMLResponse, RedirectResponse, JSONResponse

from config.api import get_api
from config.settings import CHECKOUT_COOKIE
from common.exceptions import RemoteServiceError, StorefrontError, error_json
from common.flash import flash
from common.security import csrf_check, new_csrf_token, set_csrf_cookie
from common.templating import templates
from modules.auth.deps import require_customer
from modules.cart.store import CartStore
from modules.checkout.routes import render_checkout
from modules.checkout.session import draft_store
from modules.payment.service import payment_service

logger = logging.getLogger("storefront.payment")

router = APIRouter(tags=["payment"])


# ==========================================
# 🧾 Submit Order (Form)
# ==========================================

@router.post("/checkout/submit")
def submit_order(
    request: Request,
    csrf_token: Optional[str] = Form(None),
    api: httpx.Client = Depends(get_api),
    me=Depends(require_customer),
):
    """303 to the provider's checkout page, or the checkout page again with the error and the draft intact."""
    csrf_check(request, csrf_token)
    session = draft_store.get(request.cookies.get(CHECKOUT_COOKIE), me.id)
    if session is None:
        flash(request, "Your checkout session has expired. Please review your order again.", "warning")
        return RedirectResponse("/checkout", status_code=303)

    try:
        cart = CartStore(api).refresh()
    except RemoteServiceError as e:
        flash(request, e.message, "danger")
        return RedirectResponse("/cart", status_code=303)

    try:
        result = payment_service.submit(api, session, cart)
    except StorefrontError as e:
        return render_checkout(request, api, me, session, cart, error=e.message, status_code=e.status_code)

    response = RedirectResponse(result.checkout_url, status_code=303)
    response.delete_cookie(CHECKOUT_COOKIE)
    return response


# ==========================================
# 🧾 Submit Order (API, for AJAX)
# ==========================================

@router.post("/api/checkout/submit")
def api_submit_order(
    request: Request,
    api: httpx.Client = Depends(get_api),
    me=Depends(require_customer),
):
    csrf_check(request, request.headers.get("X-CSRF-Token"))
    session = draft_store.get(request.cookies.get(CHECKOUT_COOKIE), me.id)
    if session is None:
        return JSONResponse(
            {"status": "error", "detail": "Your checkout session has expired. Please reload the checkout page."},
            status_code=409,
        )

    try:
        cart = CartStore(api).refresh()
        result = payment_service.submit(api, session, cart)
    except StorefrontError as e:
        return error_json(e)

    response = JSONResponse({
        "status": "success",
        "checkout_url": result.checkout_url,
        "order_id": result.order_id,
    })
    response.delete_cookie(CHECKOUT_COOKIE)
    return response


# ==========================================
# ✅ Return from Provider
# ==========================================

@router.get("/payment/success", response_class=HTMLResponse)
def payment_success(
    request: Request,
    session_id: str = "",
    order_id: str = "",
    api: httpx.Client = Depends(get_api),
    me=Depends(require_customer),
):
    """Stripe returns with ?session_id=..., PayU with ?order_id=..."""
    result = payment_service.verify_payment(api, {"session_id": session_id, "order_id": order_id})
    if not result.success:
        logger.warning(f"Payment not confirmed for user {me.id}: {result.status or result.error_message}")

    csrf = new_csrf_token()
    response = templates.TemplateResponse("shop/payment_result.html", {
        "request": request,
        "user": me,
        "success": result.success,
        "status": result.status,
        "order_id": result.order_id,
        "error": result.error_message,
        "retry_url": str(request.url) if not result.success and (session_id or order_id) else None,
        "csrf_token": csrf,
    })
    set_csrf_cookie(response, csrf)
    return response


@router.get("/payment/failure", response_class=HTMLResponse)
def payment_failure(
    request: Request,
    order_id: str = "",
    me=Depends(require_customer),
):
    csrf = new_csrf_token()
    response = templates.TemplateResponse("shop/payment_result.html", {
        "request": request,
        "user": me,
        "success": False,
        "status": "CANCELLED",
        "order_id": order_id or None,
        "error": "The payment was cancelled or did not complete.",
        "retry_url": None,
        "csrf_token": csrf,
    })
    set_csrf_cookie(response, csrf)
    return response


# ==========================================
# 🔁 Pay Again (unpaid order)
# ==========================================

@router.post("/payment/{provider}/pay-again")
def pay_again(
    request: Request,
    provider: str,
    order_id: int = Form(...),
    csrf_token: Optional[str] = Form(None),
    api: httpx.Client = Depends(get_api),
    me=Depends(require_customer),
):
    csrf_check(request, csrf_token)
    try:
        result = payment_service.pay_again(api, provider, order_id)
    except StorefrontError as e:
        flash(request, e.message, "danger")
        return RedirectResponse(f"/payment/failure?order_id={order_id}", status_code=303)
    return RedirectResponse(result.checkout_url, status_code=303)
