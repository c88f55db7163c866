"""In-memory stand-in for the remote catalog/order service, served through httpx.MockTransport."""

import json
import re
from typing import Any, Dict, List, Optional, Tuple

import httpx

API_PREFIX = "/api/v1"


def make_variant(variant_id, price, discount=0, stock=10, size="42"):
    return {
        "id": variant_id,
        "price": price,
        "discount": discount,
        "qtyInStock": stock,
        "variations": [{"name": "size", "options": [{"value": size}]}],
    }


def make_item(variant_id, qty, price, discount=0, stock=10, name="Runner", colour="Black", size="42", item_id=None):
    return {
        "id": item_id or variant_id * 10,
        "qty": qty,
        "productItem": {
            "productId": 1,
            "productItemId": variant_id,
            "productName": name,
            "colour": colour,
            "productImages": [{"imageFilename": f"https://img.test/{variant_id}.jpg"}],
            "productItemOneByColour": [make_variant(variant_id, price, discount, stock, size)],
        },
    }


def make_code(code, discount, code_id=None):
    return {"id": code_id or abs(hash(code)) % 1000, "name": code, "code": code, "expiryDate": "2030-01-01", "discount": discount}


def make_cart(items=(), codes=(), cart_id=1):
    return {"id": cart_id, "shoppingCartItems": list(items), "discountCodes": list(codes)}


VALID_ADDRESS = {
    "country": "Poland",
    "city": "Krakow",
    "first_name": "Anna",
    "last_name": "Nowak",
    "postal_code": "30-001",
    "street": "Florianska 1",
    "phone_number": "123456789",
    "address_line1": "",
    "address_line2": "",
}

SAVED_ADDRESS = {
    "id": 7,
    "country": "Poland",
    "city": "Krakow",
    "firstName": "Anna",
    "lastName": "Nowak",
    "postalCode": "30-001",
    "street": "Florianska 1",
    "phoneNumber": "123456789",
    "addressLine1": "",
    "addressLine2": "",
}


class FakeRemote:
    """Routes requests by method + path and records every call."""

    def __init__(self):
        self.profile = {"id": "user-1", "email": "anna@example.com", "fullName": "Anna Nowak", "enabled": True}
        self.cart = make_cart([make_item(1, 2, 100)])
        self.catalog = {5: make_item(5, 1, 40, name="Sandal")}
        self.codes = {"SAVE10": make_code("SAVE10", 10), "SAVE15": make_code("SAVE15", 15)}
        self.shipping_methods = [
            {"id": 1, "name": "Courier", "price": 15},
            {"id": 2, "name": "Parcel locker", "price": 9.99},
        ]
        self.payment_types = [
            {"id": 1, "value": "Stripe Checkout"},
            {"id": 2, "value": "PayU Express"},
            {"id": 3, "value": "Bank Transfer"},
        ]
        self.user_payment_methods = [
            {"id": 4, "provider": "Visa", "last4CardNumber": "4242", "expiryDate": "2030-12",
             "paymentType": {"id": 1, "value": "Stripe Checkout"}},
        ]
        self.addresses = [dict(SAVED_ADDRESS)]
        self.payment_status = "SUCCEEDED"
        self.requests: List[Tuple[str, str, Optional[Dict[str, Any]]]] = []
        self._failures: Dict[Tuple[str, str], Tuple[int, str]] = {}

    # ── helpers for tests ──

    def fail(self, method: str, path_prefix: str, status: int = 500, message: str = "Internal error"):
        self._failures[(method, path_prefix)] = (status, message)

    def calls(self, method: str = None, path_prefix: str = "") -> list:
        return [
            r for r in self.requests
            if (method is None or r[0] == method) and r[1].startswith(path_prefix)
        ]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    # ── routing ──

    def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path.startswith(API_PREFIX):
            path = path[len(API_PREFIX):]
        body = json.loads(request.content) if request.content else None
        self.requests.append((request.method, path, body))

        for (method, prefix), (status, message) in self._failures.items():
            if request.method == method and path.startswith(prefix):
                return httpx.Response(status, json={"error": message})

        if "authorization" not in request.headers:
            return httpx.Response(401, json={"error": "Unauthorized"})

        for method, pattern, handler in self._routes():
            if request.method != method:
                continue
            match = re.fullmatch(pattern, path)
            if match:
                return handler(request, body, *match.groups())
        return httpx.Response(404, json={"error": f"No route for {request.method} {path}"})

    def _routes(self):
        return [
            ("GET", r"/users/profile", lambda r, b: httpx.Response(200, json=self.profile)),
            ("GET", r"/cart/users/cart", lambda r, b: httpx.Response(200, json=self.cart)),
            ("POST", r"/cart/products/(\d+)/quantity/(\d+)", self._add),
            ("PUT", r"/cart/update/products/(\d+)/quantity/(add|delete)", self._change),
            ("DELETE", r"/cart/delete/product/(\d+)", self._delete),
            ("POST", r"/cart/add-discount", self._discount),
            ("DELETE", r"/cart", self._clear),
            ("GET", r"/shipping-method/all", lambda r, b: httpx.Response(200, json=self.shipping_methods)),
            ("GET", r"/payment-type/all", lambda r, b: httpx.Response(200, json=self.payment_types)),
            ("GET", r"/user-payment-method", lambda r, b: httpx.Response(200, json=self.user_payment_methods)),
            ("GET", r"/address", lambda r, b: httpx.Response(200, json=self.addresses)),
            ("POST", r"/address/create", self._create_address),
            ("PUT", r"/address/(\d+)", self._update_address),
            ("DELETE", r"/address/(\d+)", self._delete_address),
            ("POST", r"/payment/(stripe|payu)/checkout", self._checkout),
            ("GET", r"/payment/verify/payu/(\w+)", self._verify),
            ("GET", r"/payment/verify/(\w+)", self._verify),
            ("POST", r"/payment/(stripe|payu)/pay-again", self._pay_again),
        ]

    def _items(self) -> list:
        return self.cart["shoppingCartItems"]

    def _find(self, variant_id: int):
        return next((i for i in self._items() if i["productItem"]["productItemId"] == variant_id), None)

    def _add(self, request, body, variant_id, qty):
        variant_id, qty = int(variant_id), int(qty)
        item = self._find(variant_id)
        if item:
            item["qty"] += qty
        else:
            item = json.loads(json.dumps(self.catalog[variant_id]))
            item["qty"] = qty
            self._items().append(item)
        return httpx.Response(200, json=self.cart)

    def _change(self, request, body, variant_id, direction):
        item = self._find(int(variant_id))
        if item is None:
            return httpx.Response(404, json={"error": "Item not found"})
        item["qty"] += 1 if direction == "add" else -1
        if item["qty"] <= 0:
            self._items().remove(item)
        return httpx.Response(200, json=self.cart)

    def _delete(self, request, body, variant_id):
        item = self._find(int(variant_id))
        if item:
            self._items().remove(item)
        return httpx.Response(204)

    def _discount(self, request, body):
        code = request.url.params.get("discountCode")
        if code not in self.codes:
            return httpx.Response(404, json={"error": "Discount code not found"})
        self.cart["discountCodes"].append(self.codes[code])
        return httpx.Response(200, json=self.cart)

    def _clear(self, request, body):
        self.cart["shoppingCartItems"] = []
        self.cart["discountCodes"] = []
        return httpx.Response(204)

    def _create_address(self, request, body):
        address = dict(body, id=100 + len(self.addresses))
        self.addresses.append(address)
        return httpx.Response(201, json=address)

    def _update_address(self, request, body, address_id):
        for i, a in enumerate(self.addresses):
            if a["id"] == int(address_id):
                self.addresses[i] = dict(body, id=int(address_id))
                return httpx.Response(200, json=self.addresses[i])
        return httpx.Response(404, json={"error": "Address not found"})

    def _delete_address(self, request, body, address_id):
        self.addresses = [a for a in self.addresses if a["id"] != int(address_id)]
        return httpx.Response(204)

    def _checkout(self, request, body, provider):
        if provider == "stripe":
            return httpx.Response(200, json={"checkoutUrl": "https://checkout.stripe.test/c/pay/cs_1", "orderId": 101})
        return httpx.Response(200, json={"checkoutUrl": "https://secure.payu.test/pay/?orderId=P2", "orderId": 102, "provider": "payu"})

    def _verify(self, request, body, reference):
        return httpx.Response(200, json={"id": 1, "status": self.payment_status, "shopOrder": {"id": 101}, "transaction": "tx-1"})

    def _pay_again(self, request, body, provider):
        return httpx.Response(200, json={"checkoutUrl": f"https://{provider}.test/again/{body['orderId']}"})
