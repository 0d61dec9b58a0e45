import pytest
from conftest import PASSWORD

from massage_booking.models import User

NEW_USER = {
    "email": "Nouveau@Example.com",
    "password": PASSWORD,
    "firstname": "Léa",
    "name": "Martin",
    "phoneNumber": "0611223344",
}


def test_register_creates_a_regular_user(client, db):
    response = client.post("/user", json=NEW_USER)

    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "nouveau@example.com"
    assert body["role"] == "USER"
    assert "password" not in body
    stored = db.query(User).filter(User.email == "nouveau@example.com").one()
    assert stored.password != PASSWORD


def test_registration_ignores_a_requested_role(client):
    response = client.post("/user", json={**NEW_USER, "role": "ADMIN"})

    assert response.status_code == 201
    assert response.json()["role"] == "USER"


def test_duplicate_email_is_a_conflict(client, user):
    response = client.post("/user", json={**NEW_USER, "email": " CLIENT@example.com"})

    assert response.status_code == 409
    assert response.json() == {"message": "Cet email est déjà utilisé", "statusCode": 409}


@pytest.mark.parametrize(
    "password, expected",
    [
        ("Sh0rt!", "11 caractères"),
        ("NOLOWERCASE1!", "minuscule"),
        ("nouppercase1!", "majuscule"),
        ("NoDigitsHere!", "chiffre"),
        ("NoSymbols1234", "symbole"),
    ],
)
def test_password_policy(client, password, expected):
    response = client.post("/user", json={**NEW_USER, "password": password})

    assert response.status_code == 400
    body = response.json()
    assert body["statusCode"] == 400
    assert isinstance(body["message"], list)
    assert any(expected in message for message in body["message"])


def test_every_failed_password_rule_is_reported(client):
    response = client.post("/user", json={**NEW_USER, "password": "abc"})

    message = " ".join(response.json()["message"])
    for rule in ("11 caractères", "majuscule", "chiffre", "symbole"):
        assert rule in message


def test_invalid_email_is_rejected(client):
    response = client.post("/user", json={**NEW_USER, "email": "not-an-email"})

    assert response.status_code == 400
    assert any("email" in message for message in response.json()["message"])


def test_only_admin_lists_users(client, user, admin, auth_headers):
    assert client.get("/user", headers=auth_headers(user)).status_code == 403

    response = client.get("/user", headers=auth_headers(admin))
    assert response.status_code == 200
    assert {u["email"] for u in response.json()} == {user.email, admin.email}


def test_admin_creates_admin(client, user, admin, auth_headers):
    assert client.post("/user/admin", json=NEW_USER, headers=auth_headers(user)).status_code == 403

    response = client.post("/user/admin", json=NEW_USER, headers=auth_headers(admin))
    assert response.status_code == 201
    assert response.json()["role"] == "ADMIN"


def test_user_reads_and_updates_own_profile(client, user, auth_headers):
    headers = auth_headers(user)

    assert client.get(f"/user/{user.id}", headers=headers).json()["email"] == user.email

    response = client.patch(f"/user/{user.id}", json={"firstname": "Camille"}, headers=headers)
    assert response.status_code == 200
    assert response.json()["firstname"] == "Camille"


def test_password_change_applies_to_login(client, user, auth_headers):
    new_password = "Nouveau-Secret-2025"
    response = client.patch(
        f"/user/{user.id}", json={"password": new_password}, headers=auth_headers(user)
    )
    assert response.status_code == 200

    login = client.post("/auth/login", json={"email": user.email, "password": new_password})
    assert login.status_code == 200


def test_user_cannot_touch_another_account(client, make_user, user, auth_headers):
    other = make_user(email="other@example.com")
    headers = auth_headers(user)

    assert client.get(f"/user/{other.id}", headers=headers).status_code == 403
    assert client.patch(f"/user/{other.id}", json={"name": "X"}, headers=headers).status_code == 403
    assert client.delete(f"/user/{other.id}", headers=headers).status_code == 403


def test_unknown_user(client, admin, auth_headers):
    response = client.get("/user/missing", headers=auth_headers(admin))

    assert response.status_code == 404
    assert response.json()["message"] == "Utilisateur non trouvé"


def test_delete_account(client, db, user, auth_headers):
    response = client.delete(f"/user/{user.id}", headers=auth_headers(user))

    assert response.status_code == 204
    db.expire_all()
    assert db.query(User).count() == 0


def test_role_change_requires_a_known_role(client, user, admin, auth_headers):
    response = client.patch(
        f"/user/{user.id}/role", json={"role": "SUPERUSER"}, headers=auth_headers(admin)
    )

    assert response.status_code == 400
