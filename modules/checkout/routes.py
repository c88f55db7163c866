"""
Checkout Routes
=================
Checkout page (fresh draft per load) and the AJAX step actions:
address, shipping, payment selection and step navigation.
"""

import logging
from typing import Optional, Dict, Any

import httpx
from fastapi import APIRouter, Request, Depends, HTTPException
from fastapi.responses import HTMLResponse, RedirectResponse, JSONResponse

from config.api import get_api
from config.settings import CHECKOUT_COOKIE
from common.exceptions import RemoteServiceError, StorefrontError, error_json, raise_http
from common.helpers import safe_int
from common.security import csrf_check, get_cookie_kwargs, new_csrf_token, set_csrf_cookie
from common.templating import templates
from modules.auth.deps import require_customer
from modules.cart.models import Cart
from modules.cart.store import CartStore, build_cart_summary
from modules.checkout.controller import CheckoutStep
from modules.checkout.models import SUPPORTED_COUNTRIES
from modules.checkout.service import checkout_service
from modules.checkout.session import CheckoutSession, draft_store
from modules.checkout.validation import address_errors
from modules.customer.service import address_service

logger = logging.getLogger("storefront.checkout")

router = APIRouter(tags=["checkout"])


def get_checkout_session(request: Request, me=Depends(require_customer)) -> CheckoutSession:
    """The caller's live checkout draft. 409 when it expired or never existed."""
    session = draft_store.get(request.cookies.get(CHECKOUT_COOKIE), me.id)
    if session is None:
        raise HTTPException(409, "Your checkout session has expired. Please reload the checkout page.")
    return session


def checkout_state(session: CheckoutSession, cart: Cart) -> dict:
    """Draft, step and blocking reasons, plus the cart summary priced with the chosen shipping."""
    draft = session.draft
    controller = session.controller
    shipping_price = draft.shipping_method.price if draft.shipping_method else None
    return {
        "step": controller.current_step(cart).name,
        "reachable_step": controller.reachable_step(cart).name,
        "draft": draft.as_dict(),
        "address_errors": address_errors(draft.address_values),
        "blocking_reasons": controller.blocking_reasons(cart),
        "submittable": controller.is_submittable(cart),
        "cart": build_cart_summary(cart, shipping_price),
    }


def render_checkout(
    request: Request,
    api: httpx.Client,
    me,
    session: CheckoutSession,
    cart: Cart,
    error: Optional[str] = None,
    status_code: int = 200,
):
    """Render the checkout page for an existing draft (also used after a failed submission)."""
    try:
        addresses = address_service.list_addresses(api)
    except RemoteServiceError as e:
        logger.error(f"Could not load saved addresses: {e.message}")
        addresses = []

    csrf = new_csrf_token()
    response = templates.TemplateResponse("shop/checkout.html", {
        "request": request,
        "user": me,
        "state": checkout_state(session, cart),
        "draft": session.draft,
        "addresses": addresses,
        "countries": SUPPORTED_COUNTRIES,
        "shipping_methods": checkout_service.get_shipping_methods(api),
        "payment_types": checkout_service.get_payment_types(api),
        "user_payment_methods": checkout_service.get_user_payment_methods(api),
        "cart_count": cart.item_count,
        "csrf_token": csrf,
        "error": error,
    }, status_code=status_code)
    set_csrf_cookie(response, csrf)
    response.set_cookie(CHECKOUT_COOKIE, session.sid, **get_cookie_kwargs())
    return response


def _fetch_cart(api: httpx.Client) -> Cart:
    try:
        return CartStore(api).snapshot
    except RemoteServiceError as e:
        raise_http(e)


# ==========================================
# ✅ Checkout Page
# ==========================================

@router.get("/checkout", response_class=HTMLResponse)
def checkout_page(
    request: Request,
    api: httpx.Client = Depends(get_api),
    me=Depends(require_customer),
):
    cart = _fetch_cart(api)
    if cart.is_empty:
        return RedirectResponse("/cart", status_code=302)

    session = draft_store.create(me.id, previous_sid=request.cookies.get(CHECKOUT_COOKIE))
    logger.debug(f"Checkout draft created for user {me.id}")
    return render_checkout(request, api, me, session, cart)


@router.get("/api/checkout")
def api_checkout_state(
    api: httpx.Client = Depends(get_api),
    session: CheckoutSession = Depends(get_checkout_session),
):
    return JSONResponse(checkout_state(session, _fetch_cart(api)))


# ==========================================
# 📬 Step 1: Address
# ==========================================

@router.post("/api/checkout/address")
def api_checkout_address(
    data: Dict[str, Any],
    request: Request,
    api: httpx.Client = Depends(get_api),
    session: CheckoutSession = Depends(get_checkout_session),
):
    """
    Body: {"saved_address_id": 7} to reuse a saved address,
          {"values": {...}} to edit fields (marks a saved address as changed),
          {"new": true} to start an ad-hoc address.
    """
    csrf_check(request, request.headers.get("X-CSRF-Token"))
    draft = session.draft

    saved_id = safe_int(data.get("saved_address_id"))
    if saved_id is not None:
        try:
            address = address_service.get_address(api, saved_id)
        except RemoteServiceError as e:
            return error_json(e)
        if address is None:
            return JSONResponse({"status": "error", "detail": "Address not found."}, status_code=404)
        draft.select_saved_address(address)
    if data.get("new"):
        draft.clear_saved_address()
    if isinstance(data.get("values"), dict):
        draft.update_address(data["values"])

    return JSONResponse(checkout_state(session, _fetch_cart(api)))


# ==========================================
# 🚚 Step 2: Shipping
# ==========================================

@router.post("/api/checkout/shipping")
def api_checkout_shipping(
    data: Dict[str, Any],
    request: Request,
    api: httpx.Client = Depends(get_api),
    session: CheckoutSession = Depends(get_checkout_session),
):
    csrf_check(request, request.headers.get("X-CSRF-Token"))
    method_id = safe_int(data.get("shipping_method_id"))
    method = checkout_service.find_shipping_method(api, method_id) if method_id is not None else None
    if method is None:
        return JSONResponse({"status": "error", "detail": "Please select a shipping method."}, status_code=400)

    session.draft.select_shipping(method)
    return JSONResponse(checkout_state(session, _fetch_cart(api)))


# ==========================================
# 💳 Step 3: Payment
# ==========================================

@router.post("/api/checkout/payment")
def api_checkout_payment(
    data: Dict[str, Any],
    request: Request,
    api: httpx.Client = Depends(get_api),
    session: CheckoutSession = Depends(get_checkout_session),
):
    """Body: {"payment_type_id": 1} or {"user_payment_method_id": 4}. Selecting one clears the other."""
    csrf_check(request, request.headers.get("X-CSRF-Token"))
    draft = session.draft

    type_id = safe_int(data.get("payment_type_id"))
    upm_id = safe_int(data.get("user_payment_method_id"))
    if type_id is not None:
        payment_type = checkout_service.find_payment_type(api, type_id)
        if payment_type is None:
            return JSONResponse({"status": "error", "detail": "Unknown payment method."}, status_code=400)
        draft.select_payment_type(payment_type)
    elif upm_id is not None:
        method = checkout_service.find_user_payment_method(api, upm_id)
        if method is None:
            return JSONResponse({"status": "error", "detail": "Unknown payment method."}, status_code=400)
        draft.select_user_payment_method(method)
    else:
        return JSONResponse({"status": "error", "detail": "Please select a payment method."}, status_code=400)

    return JSONResponse(checkout_state(session, _fetch_cart(api)))


# ==========================================
# ➡️ Step Navigation
# ==========================================

@router.post("/api/checkout/step")
def api_checkout_step(
    data: Dict[str, Any],
    request: Request,
    api: httpx.Client = Depends(get_api),
    session: CheckoutSession = Depends(get_checkout_session),
):
    """Body: {"step": "next" | "back" | "address" | "shipping" | "payment" | "submittable"}."""
    csrf_check(request, request.headers.get("X-CSRF-Token"))
    cart = _fetch_cart(api)
    controller = session.controller
    target = str(data.get("step") or "next").upper()

    try:
        if target == "NEXT":
            controller.advance(cart)
        elif target == "BACK":
            controller.back()
        elif target in CheckoutStep.__members__:
            controller.go_to(CheckoutStep[target], cart)
        else:
            return JSONResponse({"status": "error", "detail": f"Unknown step: {target.lower()}"}, status_code=400)
    except StorefrontError as e:
        return error_json(e)

    return JSONResponse(checkout_state(session, cart))
