import pytest

from conftest import envelope, user_payload


@pytest.fixture
def admin(login):
    return login("ADMINISTRATOR", 1, "root")


def flashes(client):
    with client.session_transaction() as sess:
        return [message for _, message in sess.get("_flashes", [])]


def test_user_list_passes_filters(admin, backend):
    backend.add("GET", "/users", envelope([user_payload(2, "OPERATOR", "bob", isActive=False)]))

    response = admin.get("/manage/users?role=operator&status=inactive&q=bo&sortBy=username&sortOrder=asc")

    assert response.status_code == 200
    assert b"bob" in response.data
    assert backend.last()["params"] == {
        "page": 1,
        "limit": 10,
        "role": "OPERATOR",
        "search": "bo",
        "isActive": "false",
        "sortBy": "username",
        "sortOrder": "asc",
    }


def test_user_list_with_unknown_role(admin, backend):
    response = admin.get("/manage/users?role=pilot")

    assert response.headers["Location"].endswith("/manage/users")
    assert backend.calls_to("GET", "/users") == []


def test_create_user(admin, backend):
    backend.add("POST", "/users", envelope(user_payload(5, "OPERATOR", "new_op")))

    response = admin.post("/manage/users/new", data={
        "username": "new_op", "firstName": "New", "lastName": "Op", "email": "op@example.com",
        "role": "OPERATOR", "password": "Secret123",
    })

    assert response.headers["Location"].endswith("/manage/users")
    assert backend.last()["json"]["role"] == "OPERATOR"


def test_create_user_validation(admin, backend):
    response = admin.post("/manage/users/new", data={"username": "x", "role": "OPERATOR"})

    assert response.status_code == 400
    assert b"Email is required" in response.data
    assert backend.calls_to("POST", "/users") == []


def test_edit_user_form(admin, backend):
    backend.add("GET", "/users/2", envelope(user_payload(2, username="bob")))

    response = admin.get("/manage/users/2/edit")

    assert response.status_code == 200
    assert b'value="bob"' in response.data
    assert b'name="password"' not in response.data


def test_cannot_delete_own_account(admin, backend):
    response = admin.post("/manage/users/1/delete")

    assert response.status_code == 400
    assert b"You cannot delete your own account" in response.data
    assert backend.calls_to("DELETE", "/users/1") == []


def test_delete_user(admin, backend):
    backend.add("DELETE", "/users/2", envelope())

    response = admin.post("/manage/users/2/delete")

    assert response.headers["Location"].endswith("/manage/users")
    assert backend.calls_to("DELETE", "/users/2")


def test_toggle_status(admin, backend):
    backend.add("PATCH", "/users/2/toggle-status", envelope(user_payload(2, username="bob", isActive=False)))

    admin.post("/manage/users/2/toggle-status")

    assert "User bob deactivated." in flashes(admin)


def test_toggle_status_without_data(admin, backend):
    backend.add("PATCH", "/users/2/toggle-status", envelope(message="Status updated"))

    response = admin.post("/manage/users/2/toggle-status")

    assert response.status_code == 302
    assert "User 2 status updated." in flashes(admin)


def test_reset_password_shows_temporary_password(admin, backend):
    backend.add("POST", "/users/2/reset-password", envelope({"temporaryPassword": "Tmp12345"}))

    admin.post("/manage/users/2/reset-password")

    assert "Temporary password: Tmp12345" in flashes(admin)
