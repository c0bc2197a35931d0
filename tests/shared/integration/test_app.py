"""HTTP tests for application wiring: health and error mapping."""

from unittest import mock

from sqlalchemy.exc import OperationalError


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "env": "test", "failed_notifications": 0}

    def test_reports_failed_notifications(self, client, email_adapter, make_product, make_address):
        email_adapter.configure(should_succeed=False)
        make_address(user_id="user-1")
        fan = make_product()

        client.post(
            "/orders",
            json={"cart_lines": [{"product_id": fan.id, "quantity": 1}]},
            headers={"X-User-Id": "user-1"},
        )

        assert client.get("/health").json()["failed_notifications"] == 2


class TestErrorMapping:
    def test_infrastructure_failure_is_503(self, client, make_product, make_address):
        make_address(user_id="user-1")
        fan = make_product()
        placement = client.app.state.placement
        error = OperationalError("UPDATE products", {}, Exception("database is locked"))

        with mock.patch.object(placement.ledger, "reserve_all", side_effect=error):
            response = client.post(
                "/orders",
                json={"cart_lines": [{"product_id": fan.id, "quantity": 1}]},
                headers={"X-User-Id": "user-1"},
            )

        assert response.status_code == 503
        assert "order" in response.json()["error"]

    def test_malformed_body_is_400(self, client):
        response = client.post("/checkout", json={"cart_lines": "nope"})
        assert response.status_code == 400
        assert "cart_lines" in response.json()["error"]
