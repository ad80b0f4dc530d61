from conftest import envelope, user_payload

VALID_REGISTRATION = {
    "username": "new_user",
    "firstName": "New",
    "lastName": "User",
    "email": "new@example.com",
    "password": "Secret123",
    "confirmPassword": "Secret123",
}


def location(response):
    return response.headers["Location"]


def test_login_page_renders(client):
    response = client.get("/login")

    assert response.status_code == 200
    assert b"Sign in" in response.data


def test_customer_lands_on_search(client, backend):
    backend.add("POST", "/auth/login", envelope(dict(user_payload(), token="abcdef123456")))

    response = client.post("/login", data={"username": "jdoe", "password": "Secret123"})

    assert response.status_code == 302
    assert location(response).endswith("/search")
    assert backend.last()["json"] == {"username": "jdoe", "password": "Secret123"}


def test_staff_lands_on_dashboard(client, backend):
    backend.add("POST", "/auth/login", envelope(dict(user_payload(role="OPERATOR"), token="abcdef123456")))

    response = client.post("/login", data={"username": "jdoe", "password": "Secret123"})

    assert location(response).endswith("/dashboard")


def test_login_follows_only_local_next(client, backend):
    backend.add("POST", "/auth/login", envelope(dict(user_payload(), token="abcdef123456")))

    response = client.post("/login", data={"username": "jdoe", "password": "Secret123", "next": "/my-bookings"})
    assert location(response).endswith("/my-bookings")

    client.post("/logout")
    response = client.post("/login", data={"username": "jdoe", "password": "x", "next": "//evil.example"})
    assert location(response).endswith("/search")


def test_rejected_credentials(client, backend):
    backend.add("POST", "/auth/login", {"success": False, "message": "Bad credentials"}, status=401)

    response = client.post("/login", data={"username": "jdoe", "password": "wrong"})

    assert response.status_code == 401
    assert b"Invalid username or password." in response.data
    with client.session_transaction() as sess:
        assert "sid" not in sess


def test_missing_credentials(client, backend):
    response = client.post("/login", data={"username": "jdoe"})

    assert response.status_code == 400
    assert backend.calls == []


def test_protected_page_redirects_to_login(client):
    response = client.get("/my-bookings")

    assert response.status_code == 302
    assert "/login" in location(response)
    assert "next=" in location(response)


def test_logout_calls_backend_and_clears_session(client, backend, login):
    login()
    backend.add("POST", "/auth/logout", envelope())

    response = client.post("/logout")

    assert location(response).endswith("/login")
    assert backend.last()["headers"]["Authorization"] == "Bearer token-jdoe-123456"
    assert client.get("/my-bookings").status_code == 302


def test_returning_session_is_checked_once(client, backend, login):
    login()
    with client.session_transaction() as sess:
        sess.pop("verified")
    backend.add("GET", "/auth/me", envelope(user_payload()))
    backend.add("GET", "/bookings/me", envelope([]))

    assert client.get("/my-bookings").status_code == 200
    assert client.get("/my-bookings").status_code == 200
    assert len(backend.calls_to("GET", "/auth/me")) == 1


def test_returning_session_with_expired_token(client, backend, login):
    login()
    with client.session_transaction() as sess:
        sess.pop("verified")
    backend.add("GET", "/auth/me", {"message": "Token expired"}, status=401)

    response = client.get("/my-bookings")

    assert response.status_code == 302
    assert "/login" in location(response)
    with client.session_transaction() as sess:
        assert "sid" not in sess


def test_token_rejected_mid_session(client, backend, login, container):
    login()
    with client.session_transaction() as sess:
        session_id = sess["sid"]
    backend.add("GET", "/bookings/me", {"message": "Token expired"}, status=401)

    response = client.get("/my-bookings")

    assert "/login" in location(response)
    assert container.get_session_storage().get_session(session_id) is None


def test_customer_cannot_open_management(client, login):
    login()

    response = client.get("/dashboard")

    assert response.status_code == 403
    assert b"Access denied" in response.data


def test_register_shows_field_errors(client, backend):
    response = client.post("/register", data=dict(VALID_REGISTRATION, username="", confirmPassword="nope"))

    assert response.status_code == 400
    assert b"Username is required" in response.data
    assert b"Passwords don&#39;t match" in response.data
    assert backend.calls_to("POST", "/auth/register") == []


def test_register_success(client, backend):
    backend.add("POST", "/auth/register", envelope(user_payload(username="new_user")))

    response = client.post("/register", data=VALID_REGISTRATION)

    assert location(response).endswith("/login")
    assert "confirmPassword" not in backend.last()["json"]


def test_forgot_password_does_not_reveal_accounts(client, backend):
    backend.add("POST", "/auth/forgot-password", {"message": "No such user"}, status=404)

    response = client.post("/forgot-password", data={"email": "ghost@example.com"}, follow_redirects=True)

    assert response.status_code == 200
    assert b"If an account exists for that email" in response.data


def test_reset_password_mismatch(client, backend):
    response = client.post("/reset-password", data={
        "token": "reset-token", "newPassword": "Secret123", "confirmPassword": "Secret124",
    })

    assert response.status_code == 400
    assert backend.calls == []
