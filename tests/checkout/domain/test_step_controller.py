"""Tests for the checkout wizard guards and transitions."""

from decimal import Decimal

import pytest

from common.exceptions import CheckoutStepError
from modules.cart.models import Cart, CartLine
from modules.checkout.controller import CheckoutController, CheckoutStep
from modules.checkout.draft import CheckoutDraft
from modules.checkout.models import PaymentType, ShippingMethod
from tests.fakes import VALID_ADDRESS

CART = Cart(lines=(CartLine(variant_id=1, quantity=2, unit_price=Decimal("100"), available_stock=5),))
COURIER = ShippingMethod(id=1, name="Courier", price=Decimal("15"))
STRIPE = PaymentType(id=1, provider="Stripe Checkout")


def _complete_draft():
    draft = CheckoutDraft()
    draft.update_address(VALID_ADDRESS)
    draft.select_shipping(COURIER)
    draft.select_payment_type(STRIPE)
    return draft


class TestForwardGuards:
    def test_starts_at_address(self):
        assert CheckoutController(CheckoutDraft()).step == CheckoutStep.ADDRESS

    def test_invalid_address_blocks_shipping(self):
        controller = CheckoutController(CheckoutDraft())
        with pytest.raises(CheckoutStepError) as exc_info:
            controller.advance(CART)
        assert exc_info.value.reasons == ["Please enter a valid shipping address."]
        assert controller.step == CheckoutStep.ADDRESS

    def test_walks_through_all_steps(self):
        controller = CheckoutController(_complete_draft())
        assert controller.advance(CART) == CheckoutStep.SHIPPING
        assert controller.advance(CART) == CheckoutStep.PAYMENT
        assert controller.advance(CART) == CheckoutStep.SUBMITTABLE
        assert controller.advance(CART) == CheckoutStep.SUBMITTABLE

    def test_missing_shipping_blocks_payment(self):
        draft = _complete_draft()
        draft.shipping_method = None
        controller = CheckoutController(draft)
        controller.advance(CART)
        with pytest.raises(CheckoutStepError):
            controller.advance(CART)

    def test_forward_jump_checks_every_guard(self):
        draft = CheckoutDraft()
        draft.select_shipping(COURIER)
        draft.select_payment_type(STRIPE)
        controller = CheckoutController(draft)
        with pytest.raises(CheckoutStepError) as exc_info:
            controller.go_to(CheckoutStep.SUBMITTABLE, CART)
        assert "Please enter a valid shipping address." in exc_info.value.reasons


class TestSubmittable:
    def test_complete_draft_is_submittable(self):
        assert CheckoutController(_complete_draft()).is_submittable(CART)

    def test_empty_cart_blocks(self):
        controller = CheckoutController(_complete_draft())
        assert controller.blocking_reasons(Cart()) == ["Your basket is empty."]

    def test_insufficient_stock_blocks(self):
        short = Cart(lines=(CartLine(variant_id=1, quantity=3, unit_price=Decimal("10"), available_stock=2),))
        controller = CheckoutController(_complete_draft())
        assert not controller.is_submittable(short)
        with pytest.raises(CheckoutStepError):
            controller.ensure_submittable(short)

    def test_no_payment_blocks(self):
        draft = _complete_draft()
        draft.payment_type = None
        assert CheckoutController(draft).blocking_reasons(CART) == ["Please select a payment method."]

    def test_ensure_submittable_moves_to_last_step(self):
        controller = CheckoutController(_complete_draft())
        controller.ensure_submittable(CART)
        assert controller.step == CheckoutStep.SUBMITTABLE


class TestBackwardNavigation:
    def test_back_keeps_selections(self):
        draft = _complete_draft()
        controller = CheckoutController(draft)
        controller.go_to(CheckoutStep.SUBMITTABLE, CART)
        controller.go_to(CheckoutStep.ADDRESS, CART)
        assert controller.step == CheckoutStep.ADDRESS
        assert draft.shipping_method == COURIER
        assert draft.payment_type == STRIPE
        assert controller.reachable_step(CART) == CheckoutStep.SUBMITTABLE

    def test_back_stops_at_address(self):
        controller = CheckoutController(CheckoutDraft())
        assert controller.back() == CheckoutStep.ADDRESS

    def test_invalid_address_edit_pulls_current_step_back(self):
        draft = _complete_draft()
        controller = CheckoutController(draft)
        controller.go_to(CheckoutStep.SUBMITTABLE, CART)
        draft.update_address({"phone_number": "12"})
        assert controller.current_step(CART) == CheckoutStep.ADDRESS
        assert not controller.is_submittable(CART)

    def test_step_labels(self):
        assert CheckoutStep.PAYMENT.label == "Payment"
