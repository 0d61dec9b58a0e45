from datetime import datetime

import pytest

SLOT = {"startTime": "2025-08-25T09:00:00.000Z", "endTime": "2025-08-25T17:00:00.000Z"}


@pytest.fixture
def slot(make_slot):
    return make_slot(datetime(2025, 8, 25, 9), datetime(2025, 8, 25, 17))


@pytest.fixture
def massage(make_massage):
    return make_massage(duration=60, price=70.0)


@pytest.fixture
def reserve(client, user, auth_headers, massage, slot):
    def _reserve(start, by=None, **extra):
        payload = {"massageId": massage.id, "timeSlotId": slot.id, "startTime": start, **extra}
        return client.post("/planning/reservations", json=payload, headers=auth_headers(by or user))

    return _reserve


def test_admin_creates_slot(client, admin, auth_headers):
    response = client.post("/planning/creneaux", json=SLOT, headers=auth_headers(admin))

    assert response.status_code == 201
    body = response.json()
    assert body["startTime"] == "2025-08-25T09:00:00.000Z"
    assert body["endTime"] == "2025-08-25T17:00:00.000Z"
    assert body["isActive"] is True
    assert body["bookings"] == []


def test_slot_creation_errors(client, admin, user, auth_headers):
    headers = auth_headers(admin)
    client.post(
        "/planning/creneaux",
        json={"startTime": "2025-08-25T09:00:00Z", "endTime": "2025-08-25T10:00:00Z"},
        headers=headers,
    )

    overlap = client.post(
        "/planning/creneaux",
        json={"startTime": "2025-08-25T09:30:00Z", "endTime": "2025-08-25T10:30:00Z"},
        headers=headers,
    )
    assert overlap.status_code == 409
    assert overlap.json()["statusCode"] == 409

    inverted = client.post(
        "/planning/creneaux",
        json={"startTime": "2025-08-26T10:00:00Z", "endTime": "2025-08-26T09:00:00Z"},
        headers=headers,
    )
    assert inverted.status_code == 400

    assert client.post("/planning/creneaux", json=SLOT, headers=auth_headers(user)).status_code == 403
    assert client.post("/planning/creneaux", json=SLOT).status_code == 401


def test_reservation_flow(client, notifier, reserve, massage, slot):
    response = reserve("2025-08-25T14:00:00.000Z", notes="Première séance")

    assert response.status_code == 201
    body = response.json()
    assert body["startTime"] == "2025-08-25T14:00:00.000Z"
    assert body["endTime"] == "2025-08-25T15:00:00.000Z"
    assert body["status"] == "PENDING"
    assert body["notes"] == "Première séance"
    assert body["massage"]["id"] == massage.id
    assert body["timeSlot"]["id"] == slot.id
    assert len(notifier.confirmations) == 1
    assert len(notifier.admin_notifications) == 1

    slots = client.get("/planning/creneaux").json()
    assert [b["id"] for b in slots[0]["bookings"]] == [body["id"]]


def test_reservation_conflicts_over_http(reserve):
    assert reserve("2025-08-25T14:00:00.000Z").status_code == 201

    overlap = reserve("2025-08-25T14:30:00.000Z")
    assert overlap.status_code == 409
    assert "Conflit d'horaire" in overlap.json()["message"]

    pause = reserve("2025-08-25T15:15:00.000Z")
    assert pause.status_code == 409
    assert "30 minutes de pause minimum" in pause.json()["message"]

    assert reserve("2025-08-25T15:45:00.000Z").status_code == 201

    late = reserve("2025-08-25T16:30:00.000Z")
    assert late.status_code == 400
    assert "se termine à 17:00" in late.json()["message"]


def test_reservation_for_unknown_massage(client, user, slot, auth_headers):
    response = client.post(
        "/planning/reservations",
        json={"massageId": "missing", "timeSlotId": slot.id, "startTime": "2025-08-25T10:00:00Z"},
        headers=auth_headers(user),
    )

    assert response.status_code == 404
    assert "massage n'existe pas" in response.json()["message"]


def test_malformed_reservation(client, user, auth_headers):
    response = client.post(
        "/planning/reservations", json={"startTime": "demain"}, headers=auth_headers(user)
    )

    assert response.status_code == 400
    body = response.json()
    assert body["statusCode"] == 400
    assert any(message.startswith("massageId") for message in body["message"])
    assert any(message.startswith("startTime") for message in body["message"])


def test_reservation_requires_authentication(client, massage, slot):
    response = client.post(
        "/planning/reservations",
        json={"massageId": massage.id, "timeSlotId": slot.id, "startTime": "2025-08-25T10:00:00Z"},
    )

    assert response.status_code == 401


def test_my_bookings_only_lists_mine(client, make_user, user, reserve, auth_headers):
    other = make_user(email="other@example.com")
    mine = reserve("2025-08-25T10:00:00Z").json()
    reserve("2025-08-25T12:00:00Z", by=other)

    response = client.get("/planning/mes-rendez-vous", headers=auth_headers(user))

    assert [b["id"] for b in response.json()] == [mine["id"]]


def test_admin_lists_every_booking(client, make_user, admin, reserve, auth_headers):
    other = make_user(email="other@example.com")
    reserve("2025-08-25T10:00:00Z")
    reserve("2025-08-25T12:00:00Z", by=other)

    response = client.get("/planning/reservations", headers=auth_headers(admin))

    assert response.status_code == 200
    assert len(response.json()) == 2


def test_cancel_over_http(client, notifier, user, reserve, auth_headers):
    booking = reserve("2025-08-25T10:00:00Z").json()

    response = client.delete(
        f"/planning/reservations/{booking['id']}/annuler", headers=auth_headers(user)
    )

    assert response.status_code == 200
    assert response.json()["status"] == "CANCELLED"
    assert len(notifier.cancellations) == 1
    assert client.get("/planning/creneaux").json()[0]["bookings"] == []
    assert reserve("2025-08-25T10:00:00Z").status_code == 201


def test_cannot_cancel_someone_elses_booking(client, make_user, reserve, auth_headers):
    booking = reserve("2025-08-25T10:00:00Z").json()
    other = make_user(email="other@example.com")

    response = client.delete(
        f"/planning/reservations/{booking['id']}/annuler", headers=auth_headers(other)
    )

    assert response.status_code == 403


def test_update_booking_notes(client, user, reserve, auth_headers):
    booking = reserve("2025-08-25T10:00:00Z").json()

    response = client.put(
        f"/planning/reservations/{booking['id']}",
        json={"notes": "Arrivée 5 minutes avant"},
        headers=auth_headers(user),
    )

    assert response.status_code == 200
    assert response.json()["notes"] == "Arrivée 5 minutes avant"
    assert response.json()["startTime"] == booking["startTime"]


def test_admin_confirms_booking(client, admin, reserve, auth_headers):
    booking = reserve("2025-08-25T10:00:00Z").json()

    response = client.put(
        f"/planning/reservations/{booking['id']}",
        json={"status": "CONFIRMED"},
        headers=auth_headers(admin),
    )

    assert response.json()["status"] == "CONFIRMED"


def test_admin_deletes_booking(client, admin, user, reserve, auth_headers):
    booking = reserve("2025-08-25T10:00:00Z").json()
    url = f"/planning/reservations/{booking['id']}"

    assert client.delete(url, headers=auth_headers(user)).status_code == 403

    response = client.delete(url, headers=auth_headers(admin))
    assert response.status_code == 200
    assert response.json()["id"] == booking["id"]
    assert client.delete(url, headers=auth_headers(admin)).status_code == 404


def test_deactivated_slot_is_hidden_and_closed(client, admin, slot, reserve, auth_headers):
    response = client.delete(f"/planning/creneaux/{slot.id}", headers=auth_headers(admin))

    assert response.status_code == 200
    assert response.json()["isActive"] is False
    assert client.get("/planning/creneaux").json() == []

    closed = reserve("2025-08-25T10:00:00Z")
    assert closed.status_code == 404
    assert "créneau n'est pas disponible" in closed.json()["message"]


def test_update_slot(client, admin, slot, auth_headers):
    response = client.put(
        f"/planning/creneaux/{slot.id}",
        json={"endTime": "2025-08-25T18:00:00Z"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    assert response.json()["endTime"] == "2025-08-25T18:00:00.000Z"


def test_unknown_slot_uses_error_body(client):
    response = client.get("/planning/creneaux/missing")

    assert response.status_code == 404
    assert response.json() == {"message": "Ce créneau n'existe pas", "statusCode": 404}


def test_unknown_path_uses_error_body(client):
    response = client.get("/nowhere")

    assert response.status_code == 404
    assert response.json() == {"message": "Not Found", "statusCode": 404}
