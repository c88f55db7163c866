"""
Checkout Module - Step Controller
===================================
Linear, forward-revisitable wizard: ADDRESS -> SHIPPING -> PAYMENT -> SUBMITTABLE.

Each forward transition has one guard. Entering a step requires the guards of
every step up to and including it, so a forward jump cannot skip a check and
an address edited into an invalid state blocks every later step again.
Going back is always allowed and keeps the later selections.
"""

import enum
import logging
from typing import Callable, Dict, List

from common.exceptions import CheckoutStepError
from modules.cart.models import Cart
from modules.checkout.draft import CheckoutDraft
from modules.checkout.validation import is_valid_address
from modules.inventory.validator import has_any_insufficient_stock

logger = logging.getLogger("storefront.checkout")


class CheckoutStep(int, enum.Enum):
    ADDRESS = 1
    SHIPPING = 2
    PAYMENT = 3
    SUBMITTABLE = 4

    @property
    def label(self) -> str:
        return self.name.capitalize()


# ==========================================
# Guards: return the reasons a step cannot be entered (empty = allowed)
# ==========================================

def _address_guard(draft: CheckoutDraft, cart: Cart) -> List[str]:
    if not is_valid_address(draft.address_values):
        return ["Please enter a valid shipping address."]
    return []


def _shipping_guard(draft: CheckoutDraft, cart: Cart) -> List[str]:
    if draft.shipping_method is None:
        return ["Please select a shipping method."]
    return []


def _payment_guard(draft: CheckoutDraft, cart: Cart) -> List[str]:
    reasons = []
    if not draft.payment_selected:
        reasons.append("Please select a payment method.")
    if cart.is_empty:
        reasons.append("Your basket is empty.")
    if has_any_insufficient_stock(cart):
        reasons.append("Some products in your basket are not available in the requested quantity.")
    return reasons


# Guard checked when entering the step (from the one before it)
_GUARDS: Dict[CheckoutStep, Callable[[CheckoutDraft, Cart], List[str]]] = {
    CheckoutStep.SHIPPING: _address_guard,
    CheckoutStep.PAYMENT: _shipping_guard,
    CheckoutStep.SUBMITTABLE: _payment_guard,
}


class CheckoutController:

    def __init__(self, draft: CheckoutDraft):
        self.draft = draft
        self.step = CheckoutStep.ADDRESS

    def reasons_for(self, target: CheckoutStep, cart: Cart) -> List[str]:
        """All reasons blocking entry into `target`, intermediate steps included."""
        reasons = []
        for step in CheckoutStep:
            if step > target:
                break
            guard = _GUARDS.get(step)
            if guard:
                reasons.extend(guard(self.draft, cart))
        return reasons

    def can_enter(self, target: CheckoutStep, cart: Cart) -> bool:
        return not self.reasons_for(target, cart)

    def go_to(self, target: CheckoutStep, cart: Cart) -> CheckoutStep:
        """Move to any step. Backward moves always succeed; forward moves raise CheckoutStepError."""
        if target <= self.step:
            self.step = target
            return self.step
        reasons = self.reasons_for(target, cart)
        if reasons:
            raise CheckoutStepError(reasons)
        self.step = target
        return self.step

    def advance(self, cart: Cart) -> CheckoutStep:
        if self.step == CheckoutStep.SUBMITTABLE:
            return self.step
        return self.go_to(CheckoutStep(self.step + 1), cart)

    def back(self) -> CheckoutStep:
        if self.step > CheckoutStep.ADDRESS:
            self.step = CheckoutStep(self.step - 1)
        return self.step

    def reachable_step(self, cart: Cart) -> CheckoutStep:
        """Furthest step whose guards currently pass."""
        reachable = CheckoutStep.ADDRESS
        for step in CheckoutStep:
            if self.can_enter(step, cart):
                reachable = step
            else:
                break
        return reachable

    def current_step(self, cart: Cart) -> CheckoutStep:
        """The stored step, pulled back if an earlier selection became invalid."""
        return min(self.step, self.reachable_step(cart))

    def blocking_reasons(self, cart: Cart) -> List[str]:
        return self.reasons_for(CheckoutStep.SUBMITTABLE, cart)

    def is_submittable(self, cart: Cart) -> bool:
        return not self.blocking_reasons(cart)

    def ensure_submittable(self, cart: Cart):
        """Re-check every guard right before submission."""
        reasons = self.blocking_reasons(cart)
        if reasons:
            logger.info(f"Submission blocked: {'; '.join(reasons)}")
            raise CheckoutStepError(reasons)
        self.step = CheckoutStep.SUBMITTABLE
