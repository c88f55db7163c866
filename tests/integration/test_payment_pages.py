"""Provider return pages, pay-again and the address book API."""

import inspect

from tests.fakes import VALID_ADDRESS


class TestReturnPages:
    def test_stripe_success(self, client, remote):
        response = client.get("/payment/success", params={"session_id": "cs_1"})
        assert response.status_code == 200
        assert "Thank you for your order!" in response.text
        assert "101" in response.text
        assert remote.calls("GET", "/payment/verify/cs_1")

    def test_payu_pending_offers_check_again(self, client, remote):
        remote.payment_status = "PENDING"
        response = client.get("/payment/success", params={"order_id": "P2"})
        assert "Payment not confirmed" in response.text
        assert "Check again" in response.text
        assert remote.calls("GET", "/payment/verify/payu/P2")

    def test_failure_page_offers_pay_again(self, client):
        response = client.get("/payment/failure", params={"order_id": "101"})
        assert response.status_code == 200
        assert 'action="/payment/stripe/pay-again"' in response.text


class TestPayAgain:
    def test_redirects_to_new_session(self, client, remote):
        response = client.post("/payment/payu/pay-again", data={"order_id": 101}, follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "https://payu.test/again/101"
        assert remote.calls("POST", "/payment/payu/pay-again")[0][2]["orderId"] == 101

    def test_unknown_provider(self, client, remote):
        response = client.post("/payment/cash/pay-again", data={"order_id": 101}, follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/payment/failure?order_id=101"
        assert remote.calls("POST") == []


class TestAddressBook:
    def test_list(self, client):
        addresses = client.get("/api/addresses").json()["addresses"]
        assert addresses[0]["id"] == 7
        assert addresses[0]["postalCode"] == "30-001"

    def test_create(self, client, remote):
        response = client.post("/api/addresses", json=dict(VALID_ADDRESS, city="Warsaw"))
        assert response.status_code == 201
        assert response.json()["address"]["city"] == "Warsaw"
        assert len(remote.addresses) == 2

    def test_invalid_address_is_not_sent(self, client, remote):
        response = client.post("/api/addresses", json=dict(VALID_ADDRESS, phone_number="abc"))
        assert response.status_code == 400
        assert response.json()["errors"] == {"phone_number": ["Phone number must be a 9-digit number"]}
        assert remote.calls("POST", "/address") == []

    def test_update_and_delete(self, client, remote):
        response = client.put("/api/addresses/7", json=dict(VALID_ADDRESS, street="Dluga 5"))
        assert response.json()["address"]["street"] == "Dluga 5"
        client.delete("/api/addresses/7")
        assert remote.addresses == []


class TestBlockingHandlers:
    """Handlers that call the remote service run in the threadpool, off the event loop."""

    def test_remote_calling_routes_are_plain_functions(self):
        from fastapi.routing import APIRoute

        from main import app

        routes = [r for r in app.routes if isinstance(r, APIRoute) and r.path != "/health"]
        assert routes
        for route in routes:
            assert not inspect.iscoroutinefunction(route.endpoint), route.path

    def test_submission_and_pay_again_are_covered(self):
        from main import app

        paths = {r.path for r in app.routes}
        assert {"/checkout/submit", "/api/checkout/submit", "/payment/{provider}/pay-again"} <= paths
