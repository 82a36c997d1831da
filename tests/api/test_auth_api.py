from conftest import register

def signup_payload(**overrides):
    payload = {
        "name": "Owner",
        "email": "owner@acme.test",
        "tenant_name": "Acme",
        "password": "secret123",
        "password_confirmation": "secret123",
    }
    payload.update(overrides)
    return payload

def test_register_returns_token(client):
    resp = client.post("/register", json=signup_payload())
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "User register successfully."
    assert body["data"]["name"] == "Owner"
    assert body["data"]["token"]

def test_register_rejects_duplicate_email(client):
    client.post("/register", json=signup_payload())
    resp = client.post("/register", json=signup_payload(tenant_name="Other"))
    assert resp.status_code == 422
    assert resp.json()["errors"] == {"email": ["The email has already been taken."]}

def test_register_rejects_mismatched_passwords(client):
    resp = client.post("/register", json=signup_payload(password_confirmation="different"))
    assert resp.status_code == 422
    assert resp.json()["message"] == "Validation Error"

def test_register_rejects_short_password(client):
    resp = client.post("/register", json=signup_payload(password="abc", password_confirmation="abc"))
    assert resp.status_code == 422
    assert "password" in resp.json()["errors"]

def test_login_issues_a_working_token(client):
    client.post("/register", json=signup_payload())
    resp = client.post("/login", json={"email": "owner@acme.test", "password": "secret123"})
    assert resp.status_code == 200
    assert resp.json()["message"] == "User login successfully."
    token = resp.json()["data"]["token"]
    listing = client.get("/products", headers={"Authorization": f"Bearer {token}"})
    assert listing.status_code == 200

def test_login_with_wrong_password_is_unauthorised(client):
    client.post("/register", json=signup_payload())
    resp = client.post("/login", json={"email": "owner@acme.test", "password": "wrong-one"})
    assert resp.status_code == 401
    assert resp.json() == {"success": False, "message": "Unauthorised.", "errors": {"error": ["Unauthorised"]}}

def test_login_with_unknown_email_is_unauthorised(client):
    resp = client.post("/login", json={"email": "nobody@acme.test", "password": "secret123"})
    assert resp.status_code == 401

def test_logout_revokes_the_token(client):
    headers = register(client)
    assert client.get("/orders", headers=headers).status_code == 200

    resp = client.post("/logout", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["message"] == "Logged out successfully."

    assert client.get("/orders", headers=headers).status_code == 401

def test_logout_requires_a_token(client):
    assert client.post("/logout").status_code == 401
