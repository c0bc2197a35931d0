"""HTTP tests for the address book."""

ADDRESS = {
    "name": "Jane Doe",
    "email": "Jane@Example.com",
    "phone": "+1 555 0100",
    "street": "12 Market Street",
}

USER = {"X-User-Id": "user-1"}


class TestMyAddress:
    def test_none_on_file(self, client):
        assert client.get("/addresses/me", headers=USER).status_code == 404

    def test_requires_caller(self, client):
        assert client.get("/addresses/me").status_code == 401

    def test_upsert(self, client):
        created = client.put("/addresses/me", json=ADDRESS, headers=USER)
        updated = client.put("/addresses/me", json={**ADDRESS, "city": "Springfield"}, headers=USER)

        assert created.status_code == 200
        assert updated.json()["id"] == created.json()["id"]
        assert updated.json()["city"] == "Springfield"
        assert updated.json()["email"] == "jane@example.com"
        assert client.get("/addresses/me", headers=USER).json()["is_default"] is True

    def test_create(self, client):
        response = client.post("/addresses", json=ADDRESS, headers=USER)
        assert response.status_code == 201
        assert response.json()["user_id"] == "user-1"

    def test_validation_errors(self, client):
        response = client.post("/addresses", json={"name": "Jane"}, headers=USER)
        assert response.status_code == 400
        assert set(response.json()["error"]) == {"email", "phone", "street"}


class TestGuestAddress:
    def test_create(self, client):
        response = client.post("/addresses/guest", json=ADDRESS)
        assert response.status_code == 201
        assert response.json()["user_id"] is None
        assert response.json()["is_default"] is False
