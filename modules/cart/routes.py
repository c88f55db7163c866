"""
Cart Routes
=============
Cart view, quantity update (form + API), discount codes, clear.
Every mutation is followed by a refetch; the response always reflects the
server-confirmed cart.
"""

from typing import Optional, Dict, Any

import httpx
from fastapi import APIRouter, Request, Depends, Form
from fastapi.responses import HTMLResponse, RedirectResponse, JSONResponse

from config.api import get_api
from common.exceptions import RemoteServiceError, raise_http
from common.flash import flash
from common.helpers import safe_int
from common.security import csrf_check, new_csrf_token, set_csrf_cookie
from common.templating import templates
from modules.auth.deps import require_customer
from modules.cart.store import CartStore, MutationResult, build_cart_summary
from modules.checkout.service import checkout_service
from modules.pricing.calculator import lowest_shipping_price

router = APIRouter(tags=["cart"])

_ACTIONS = ("increase", "decrease", "remove")


def _apply_action(store: CartStore, variant_id: int, action: str) -> MutationResult:
    if action == "increase":
        return store.increment(variant_id)
    if action == "decrease":
        return store.decrement(variant_id)
    return store.remove(variant_id)


def _mutation_response(store: CartStore, result: MutationResult) -> JSONResponse:
    # Only a confirmed snapshot is returned; a failed refetch leaves none
    cart = build_cart_summary(store.snapshot) if store.has_snapshot else None
    return JSONResponse({
        "status": "error" if result.status_code >= 400 else "success",
        "applied": result.applied,
        "message": result.message,
        "cart": cart,
    }, status_code=result.status_code)


# ==========================================
# 🛒 View Cart
# ==========================================

@router.get("/cart", response_class=HTMLResponse)
def view_cart(
    request: Request,
    api: httpx.Client = Depends(get_api),
    me=Depends(require_customer),
):
    store = CartStore(api)
    error = None
    try:
        summary = build_cart_summary(store.snapshot)
    except RemoteServiceError as e:
        summary, error = None, e.message

    delivery_from = lowest_shipping_price(checkout_service.get_shipping_methods(api))

    csrf = new_csrf_token()
    response = templates.TemplateResponse("shop/cart.html", {
        "request": request,
        "user": me,
        "cart": summary,
        "cart_count": summary["item_count"] if summary else 0,
        "delivery_from": delivery_from,
        "csrf_token": csrf,
        "error": error,
    })
    set_csrf_cookie(response, csrf)
    return response


@router.get("/api/cart")
def api_cart(
    api: httpx.Client = Depends(get_api),
    me=Depends(require_customer),
):
    try:
        return JSONResponse(build_cart_summary(CartStore(api).snapshot))
    except RemoteServiceError as e:
        raise_http(e)


# ==========================================
# ➕➖ Update Cart (Form-based)
# ==========================================

@router.post("/cart/update")
def update_cart_form(
    request: Request,
    variant_id: int = Form(...),
    action: str = Form(...),
    csrf_token: Optional[str] = Form(None),
    api: httpx.Client = Depends(get_api),
    me=Depends(require_customer),
):
    csrf_check(request, csrf_token)
    if action not in _ACTIONS:
        flash(request, "Unknown basket action.", "danger")
        return RedirectResponse("/cart", status_code=303)

    try:
        result = _apply_action(CartStore(api), variant_id, action)
    except RemoteServiceError as e:
        result = MutationResult(applied=False, message=e.message, status_code=502)
    if not result.applied:
        flash(request, result.message, "danger")
    elif not result.reloaded:
        flash(request, result.message, "warning")
    return RedirectResponse("/cart", status_code=303)


# ==========================================
# ➕➖ Update Cart (API, for AJAX)
# ==========================================

@router.post("/api/cart/update")
def api_update_cart(
    data: Dict[str, Any],
    request: Request,
    api: httpx.Client = Depends(get_api),
    me=Depends(require_customer),
):
    csrf_check(request, request.headers.get("X-CSRF-Token"))

    variant_id = safe_int(data.get("variant_id"))
    action = data.get("action")
    if variant_id is None or action not in _ACTIONS:
        return JSONResponse({"status": "error", "message": "variant_id and action are required."}, status_code=400)

    store = CartStore(api)
    try:
        result = _apply_action(store, variant_id, action)
    except RemoteServiceError as e:
        raise_http(e)
    return _mutation_response(store, result)


@router.post("/api/cart/add")
def api_add_to_cart(
    data: Dict[str, Any],
    request: Request,
    api: httpx.Client = Depends(get_api),
    me=Depends(require_customer),
):
    csrf_check(request, request.headers.get("X-CSRF-Token"))

    variant_id = safe_int(data.get("variant_id"))
    quantity = safe_int(data.get("quantity", 1))
    if variant_id is None or quantity is None:
        return JSONResponse({"status": "error", "message": "variant_id is required."}, status_code=400)

    store = CartStore(api)
    try:
        result = store.add(variant_id, quantity)
    except RemoteServiceError as e:
        raise_http(e)
    return _mutation_response(store, result)


# ==========================================
# 🏷️ Discount Codes
# ==========================================

@router.post("/cart/discount")
def apply_discount_form(
    request: Request,
    code: str = Form(""),
    csrf_token: Optional[str] = Form(None),
    api: httpx.Client = Depends(get_api),
    me=Depends(require_customer),
):
    csrf_check(request, csrf_token)
    try:
        result = CartStore(api).apply_discount(code)
    except RemoteServiceError as e:
        result = MutationResult(applied=False, message=e.message, status_code=502)

    if result.applied:
        flash(request, f"Discount code {code.strip()} applied.", "success")
        if not result.reloaded:
            flash(request, result.message, "warning")
    else:
        flash(request, result.message, "danger")
    return RedirectResponse("/cart", status_code=303)


@router.post("/api/cart/discount")
def api_apply_discount(
    data: Dict[str, Any],
    request: Request,
    api: httpx.Client = Depends(get_api),
    me=Depends(require_customer),
):
    csrf_check(request, request.headers.get("X-CSRF-Token"))
    store = CartStore(api)
    try:
        result = store.apply_discount(str(data.get("code") or ""))
    except RemoteServiceError as e:
        raise_http(e)
    return _mutation_response(store, result)


@router.post("/api/cart/clear")
def api_clear_cart(
    request: Request,
    api: httpx.Client = Depends(get_api),
    me=Depends(require_customer),
):
    csrf_check(request, request.headers.get("X-CSRF-Token"))
    store = CartStore(api)
    try:
        result = store.clear()
    except RemoteServiceError as e:
        raise_http(e)
    return _mutation_response(store, result)
