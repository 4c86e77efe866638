from conftest import PASSWORD, auth_headers
from weighin.models import UserRole
from weighin.services.auth_service import create_refresh_token


API = "/api/v1"


def test_register_login_refresh(client):
    response = client.post(f"{API}/auth/register", json={
        "email": "Sam@Example.com",
        "password": "SecurePass123!",
        "display_name": "Sam",
    })
    assert response.status_code == 201
    tokens = response.json()
    assert tokens["token_type"] == "bearer"

    duplicate = client.post(f"{API}/auth/register", json={
        "email": "sam@example.com",
        "password": "AnotherPass123!",
        "display_name": "Sam 2",
    })
    assert duplicate.status_code == 400

    login = client.post(f"{API}/auth/login", json={"email": "sam@example.com", "password": "SecurePass123!"})
    assert login.status_code == 200

    refreshed = client.post(f"{API}/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert refreshed.status_code == 200

    me = client.get(f"{API}/users/me", headers={"Authorization": f"Bearer {tokens['access_token']}"})
    assert me.status_code == 200
    assert me.json()["email"] == "sam@example.com"


def test_bad_credentials(client, make_user):
    sam = make_user("Sam")
    response = client.post(f"{API}/auth/login", json={"email": sam.email, "password": "wrong-password"})
    assert response.status_code == 401

    assert client.post(f"{API}/auth/login", json={"email": sam.email, "password": PASSWORD}).status_code == 200


def test_tokens_are_typed(client, make_user):
    sam = make_user("Sam")
    refresh = create_refresh_token(sam.id)

    assert client.get(f"{API}/users/me", headers={"Authorization": f"Bearer {refresh}"}).status_code == 401
    assert client.get(f"{API}/users/me", headers={"Authorization": "Bearer garbage"}).status_code == 401


def test_profile_and_height(client, make_user):
    sam = make_user("Sam")
    headers = auth_headers(sam)

    assert client.put(f"{API}/users/me", json={"display_name": "Sammy"}, headers=headers).json()["display_name"] == "Sammy"

    response = client.put(f"{API}/users/me/height", json={"unit": "ft", "feet": 5, "inches": 10}, headers=headers)
    assert response.status_code == 200
    assert abs(response.json()["height_cm"] - 177.8) < 1e-6

    assert client.put(f"{API}/users/me/height", json={"unit": "cm", "value": -3}, headers=headers).status_code == 422
    assert client.put(f"{API}/users/me/height", json={"unit": "cm"}, headers=headers).status_code == 422


def test_weights_and_health(client, make_user):
    sam = make_user("Sam", height_cm=175)
    headers = auth_headers(sam)

    assert client.get(f"{API}/users/me/health", headers=headers).status_code == 404

    first = client.post(f"{API}/weights", json={"weight": 150}, headers=headers)
    assert first.status_code == 201
    assert first.json()["percentage_change"] == 0.0

    second = client.post(f"{API}/weights", json={"weight": 145, "unit": "lb", "is_private": True}, headers=headers)
    assert round(second.json()["percentage_change"], 2) == -3.33

    assert client.post(f"{API}/weights", json={"weight": 0}, headers=headers).status_code == 422
    assert client.post(f"{API}/weights", json={"weight": 70, "unit": "stone"}, headers=headers).status_code == 422

    listing = client.get(f"{API}/weights", headers=headers).json()
    assert listing["total"] == 2
    assert [e["weight"] for e in listing["entries"]] == [145.0, 150.0]

    health = client.get(f"{API}/users/me/health", headers=headers).json()
    assert health["category"] in ("Normal", "Overweight", "Underweight")
    assert health["trend"] == "down"

    baseline_id = listing["entries"][1]["id"]
    assert client.delete(f"{API}/weights/{baseline_id}", headers=headers).status_code == 409

    entry_id = listing["entries"][0]["id"]
    assert client.delete(f"{API}/weights/{entry_id}", headers=headers).status_code == 204
    assert client.delete(f"{API}/weights/{entry_id}", headers=headers).status_code == 404


def test_reminders_are_admin_only(client, make_user, make_group):
    sam = make_user("Sam")
    admin = make_user("Admin", role=UserRole.ADMIN)
    make_group(sam)

    assert client.get(f"{API}/reminders/eligible", headers=auth_headers(sam)).status_code == 403
    assert client.post(f"{API}/reminders/dispatch", headers=auth_headers(sam)).status_code == 403

    eligible = client.get(f"{API}/reminders/eligible", headers=auth_headers(admin))
    assert eligible.status_code == 200
    assert [c["user_display_name"] for c in eligible.json()] == ["Sam"]
    assert eligible.json()[0]["days_since_last_entry"] == 999

    # No API key configured: every attempt is logged as not sent
    dispatched = client.post(f"{API}/reminders/dispatch", headers=auth_headers(admin)).json()
    assert dispatched["total_processed"] == 1
    assert dispatched["reminders_sent"] == 0
    assert dispatched["results"][0]["email_sent"] is False

    assert client.get(f"{API}/reminders/eligible", headers=auth_headers(admin)).json() == []
