def _signup(client, **overrides):
    payload = {
        "email": "New.Person@Example.com",
        "password": "secret123",
        "full_name": "New Person",
        "role": "trainee",
    }
    payload.update(overrides)
    return client.post("/auth/signup", json=payload)

def test_session_is_null_when_anonymous(client):
    resp = client.get("/auth/session")
    assert resp.status_code == 200
    assert resp.get_json() == {"session": None}

def test_signup_creates_profile_and_logs_in(client):
    resp = _signup(client)
    assert resp.status_code == 201
    session = resp.get_json()["session"]
    assert session["email"] == "new.person@example.com"
    assert session["role"] == "trainee"
    assert session["full_name"] == "New Person"

    current = client.get("/auth/session").get_json()["session"]
    assert current["subject_id"] == session["subject_id"]

def test_signup_rejects_unknown_role(client):
    resp = _signup(client, role="superuser")
    assert resp.status_code == 400
    assert "Role must be one of" in resp.get_json()["message"]

def test_signup_rejects_short_password(client):
    resp = _signup(client, password="123")
    assert resp.status_code == 400

def test_signup_duplicate_email_case_insensitive(client):
    assert _signup(client).status_code == 201
    client.post("/auth/logout")
    resp = _signup(client, email="NEW.PERSON@example.com")
    assert resp.status_code == 400
    assert "already exists" in resp.get_json()["message"]

def test_login_logout_roundtrip(client, make_account):
    make_account("admin", email="boss@example.com", password="hunter22")
    resp = client.post("/auth/login", json={"email": "BOSS@example.com", "password": "hunter22"})
    assert resp.status_code == 200
    assert resp.get_json()["session"]["role"] == "admin"

    assert client.post("/auth/logout").get_json() == {"ok": True}
    assert client.get("/auth/session").get_json() == {"session": None}
    assert client.get("/feedback").status_code == 401

def test_login_wrong_password(client, make_account):
    make_account("trainee", email="t@example.com", password="right-one")
    resp = client.post("/auth/login", json={"email": "t@example.com", "password": "wrong-one"})
    assert resp.status_code == 403
    assert resp.get_json()["message"] == "Invalid credentials"

def test_login_missing_fields(client):
    resp = client.post("/auth/login", json={"email": ""})
    assert resp.status_code == 400

def test_csrf_token_endpoint(client):
    resp = client.get("/auth/csrf-token")
    assert resp.status_code == 200
    assert resp.get_json()["csrf_token"]
    assert resp.headers["Cache-Control"] == "no-store"

def test_login_non_object_json_is_400(client):
    resp = client.post("/auth/login", json=["t@example.com", "secret123"])
    assert resp.status_code == 400

def test_signup_non_object_json_is_400(client):
    resp = client.post("/auth/signup", json=["x"])
    assert resp.status_code == 400
