from __future__ import annotations

from fastapi.testclient import TestClient

from natewerks_api.app.core.db import ANNOUNCEMENT, USER, DocumentStore
from natewerks_api.app.core.errors import StoreError
from natewerks_api.app.main import create_app


def test_register_and_login(client: TestClient, store: DocumentStore) -> None:
    response = client.post("/register", json={"name": "Jane", "email": "jane@example.com", "password": "secret"})
    assert response.status_code == 201
    assert response.json() == {"message": "User registered successfully"}

    response = client.post("/login", json={"email": "jane@example.com", "password": "secret"})
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Login successful"
    user = body["user"]
    assert user["subscriptionStatus"] == "inactive"
    assert user["role"] == "user"
    assert user["password"] == "secret"
    assert user["stripeCustomerId"] is None
    assert store.find_by_id(USER, user["id"])["email"] == "jane@example.com"


def test_login_invalid_credentials(client: TestClient, make_user) -> None:
    make_user(email="jane@example.com", password="secret")

    response = client.post("/login", json={"email": "jane@example.com", "password": "nope"})

    assert response.status_code == 400
    assert response.json() == {"message": "Invalid credentials"}


def test_numeric_fields_are_read_as_text(client: TestClient, store: DocumentStore) -> None:
    response = client.post("/register", json={"name": "a", "email": "a@example.com", "password": 1234})

    assert response.status_code == 201
    assert store.find_one(USER, email="a@example.com")["password"] == "1234"

    login = client.post("/login", json={"email": "a@example.com", "password": 1234})
    assert login.status_code == 200


def test_empty_body_reaches_services_as_nulls(client: TestClient, store: DocumentStore) -> None:
    response = client.post("/register")

    assert response.status_code == 201
    (record,) = store.find_all(USER)
    assert record["name"] is None
    assert record["email"] is None
    assert record["password"] is None

    assert client.post("/subscribe").status_code == 404
    assert client.post("/announcements").status_code == 403


def test_numeric_user_id_is_not_found(client: TestClient) -> None:
    response = client.post("/subscribe", json={"userId": 42, "paymentMethodId": "pm_card_visa"})

    assert response.status_code == 404
    assert response.json() == {"message": "User not found"}


def test_unreadable_body_is_500(client: TestClient) -> None:
    malformed = client.post("/register", content=b"{not json", headers={"Content-Type": "application/json"})
    assert malformed.status_code == 500
    assert "error" in malformed.json()

    wrong_type = client.post("/login", json={"email": ["a@example.com"], "password": "x"})
    assert wrong_type.status_code == 500
    assert "email" in wrong_type.json()["error"]


def test_new_card_after_decline(client: TestClient, gateway, make_user) -> None:
    gateway.declined_methods.add("pm_card_declined")
    user_id = make_user()

    declined = client.post("/subscribe", json={"userId": user_id, "paymentMethodId": "pm_card_declined"})
    assert declined.status_code == 500
    assert declined.json() == {"error": "Your card was declined."}

    retried = client.post("/subscribe", json={"userId": user_id, "paymentMethodId": "pm_card_visa"})
    assert retried.status_code == 200
    assert retried.json()["subscription"]["customer"] == gateway.customers[0]["id"]


def test_subscribe(client: TestClient, gateway, make_user, store: DocumentStore) -> None:
    user_id = make_user(email="payer@example.com")

    response = client.post(
        "/subscribe",
        json={"userId": user_id, "paymentMethodId": "pm_card_visa"},
        headers={"Idempotency-Key": "req-1"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Subscription successful"
    assert body["subscription"]["customer"] == gateway.customers[0]["id"]
    assert body["subscription"]["latest_invoice"]["payment_intent"]["client_secret"] == "pi_secret"
    assert gateway.subscriptions[0]["idempotency_key"] == "req-1"
    assert store.find_by_id(USER, user_id)["subscription_status"] == "active"


def test_subscribe_unknown_user(client: TestClient) -> None:
    response = client.post("/subscribe", json={"userId": "missing", "paymentMethodId": "pm_card_visa"})

    assert response.status_code == 404
    assert response.json() == {"message": "User not found"}


def test_subscribe_payment_failure_is_500(client: TestClient, gateway, make_user) -> None:
    gateway.fail_customer = "No such PaymentMethod: 'pm_bogus'"
    user_id = make_user()

    response = client.post("/subscribe", json={"userId": user_id, "paymentMethodId": "pm_bogus"})

    assert response.status_code == 500
    assert response.json() == {"error": "No such PaymentMethod: 'pm_bogus'"}


def test_announcements(client: TestClient, make_user, store: DocumentStore) -> None:
    user_id = make_user(role="user")
    admin_id = make_user(role="admin")

    denied = client.post("/announcements", json={"title": "T", "message": "M", "adminId": user_id})
    assert denied.status_code == 403
    assert denied.json() == {"message": "Unauthorized"}
    assert store.find_all(ANNOUNCEMENT) == []

    for title in ("first", "second"):
        created = client.post("/announcements", json={"title": title, "message": "M", "adminId": admin_id})
        assert created.status_code == 201
        assert created.json() == {"message": "Announcement created successfully"}

    listing = client.get("/announcements")
    assert listing.status_code == 200
    items = listing.json()
    assert [item["title"] for item in items] == ["second", "first"]
    assert set(items[0]) == {"id", "title", "message", "createdAt"}


def test_announcement_without_admin_id(client: TestClient) -> None:
    response = client.post("/announcements", json={"title": "T", "message": "M"})

    assert response.status_code == 403


def test_user_report_scenario(client: TestClient, make_user) -> None:
    user_a = make_user(name="A", email="a@example.com", password="a-secret", role="user")
    user_b = make_user(name="B", email="b@example.com", password="b-secret", role="admin")

    denied = client.get("/reports/users", params={"adminId": user_a})
    assert denied.status_code == 403
    assert denied.json() == {"message": "Unauthorized"}

    allowed = client.get("/reports/users", params={"adminId": user_b})
    assert allowed.status_code == 200
    users = {user["id"]: user for user in allowed.json()}
    assert users[user_a] == {
        "id": user_a,
        "name": "A",
        "email": "a@example.com",
        "password": "a-secret",
        "subscriptionStatus": "inactive",
        "stripeCustomerId": None,
        "role": "user",
    }
    assert users[user_b]["password"] == "b-secret"
    assert users[user_b]["role"] == "admin"


def test_user_report_without_admin_id(client: TestClient) -> None:
    assert client.get("/reports/users").status_code == 403


def test_store_failure_is_500(client: TestClient, store: DocumentStore, monkeypatch) -> None:
    def broken(*args, **kwargs):
        raise StoreError("disk I/O error")

    monkeypatch.setattr(store, "find_all", broken)

    response = client.get("/announcements")

    assert response.status_code == 500
    assert response.json() == {"error": "disk I/O error"}


def test_unexpected_error_is_500(store: DocumentStore, gateway, test_settings, monkeypatch) -> None:
    app = create_app(settings=test_settings, store=store, gateway=gateway)

    def explode(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(app.state.user_service, "register", explode)

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.post("/register", json={"name": "x", "email": "x@example.com", "password": "x"})

    assert response.status_code == 500
    assert response.json() == {"error": "boom"}


def test_startup_survives_unreachable_database(tmp_path, gateway, test_settings, caplog) -> None:
    store = DocumentStore(str(tmp_path / "missing-dir" / "db.sqlite3"))
    app = create_app(settings=test_settings, store=store, gateway=gateway)

    with TestClient(app) as client:
        response = client.get("/announcements")

    assert "Database connection failed" in caplog.text
    assert response.status_code == 500
    assert "error" in response.json()
