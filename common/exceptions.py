"""
Storefront - Custom Exceptions
================================
Business-level exceptions that can be caught and converted to HTTP responses.
"""

from typing import Dict, List, Optional

from fastapi import HTTPException, status
from fastapi.responses import JSONResponse


class StorefrontError(Exception):
    """Base exception for all business logic errors."""
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "Something went wrong."):
        self.message = message
        super().__init__(self.message)


# ==========================================
# Validation
# ==========================================

class AddressValidationError(StorefrontError):
    """Raised when the shipping address fails field validation."""

    def __init__(self, errors: Dict[str, List[str]]):
        self.errors = errors
        fields = ", ".join(sorted(errors))
        super().__init__(f"Invalid address: {fields}")


class CheckoutStepError(StorefrontError):
    """Raised when a checkout step transition is blocked by its guard."""

    def __init__(self, reasons: List[str]):
        self.reasons = reasons
        super().__init__("; ".join(reasons) or "This checkout step is not available yet.")


class InsufficientStockError(StorefrontError):
    """Raised when a requested quantity exceeds the available stock."""
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, variant_ids=()):
        self.variant_ids = set(variant_ids)
        super().__init__("Some products in your basket are not available in the requested quantity.")


# ==========================================
# Remote service
# ==========================================

class RemoteServiceError(StorefrontError):
    """Raised when the catalog/order service cannot be reached or rejects a call."""
    status_code = status.HTTP_502_BAD_GATEWAY

    def __init__(self, message: str = "Service unavailable.", status_code: Optional[int] = None):
        self.remote_status = status_code
        super().__init__(message)


# ==========================================
# Payment
# ==========================================

class PaymentError(StorefrontError):
    """Raised for payment provider errors."""
    status_code = status.HTTP_502_BAD_GATEWAY


class ProviderError(PaymentError):
    """Raised when a provider fails to open a checkout session."""
    pass


class UnsupportedProviderError(PaymentError):
    """Raised when a payment type does not map to a known provider. No request is sent."""
    status_code = 422

    def __init__(self, provider_name: str = ""):
        self.provider_name = provider_name
        super().__init__(f"This payment method is not supported: {provider_name or '-'}")


class SubmissionInProgressError(PaymentError):
    """Raised when an order is submitted while another submission is still in flight."""
    status_code = status.HTTP_409_CONFLICT

    def __init__(self):
        super().__init__("Your order is already being submitted.")


def raise_http(error: StorefrontError, status_code: Optional[int] = None):
    """Convert a business exception to an HTTP exception."""
    raise HTTPException(status_code=status_code or error.status_code, detail=error.message)


def error_json(error: StorefrontError, status_code: Optional[int] = None) -> JSONResponse:
    """JSON body for AJAX callers, carrying field errors or blocking reasons when present."""
    body = {"status": "error", "detail": error.message}
    if isinstance(error, AddressValidationError):
        body["errors"] = error.errors
    if isinstance(error, CheckoutStepError):
        body["reasons"] = error.reasons
    if isinstance(error, InsufficientStockError):
        body["variant_ids"] = sorted(error.variant_ids)
    return JSONResponse(body, status_code=status_code or error.status_code)
