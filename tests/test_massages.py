MASSAGE = {"name": "Massage californien", "description": "Enveloppant", "duration": 60, "price": 75}


def test_catalogue_is_public_and_ordered(client, make_massage):
    third = make_massage(name="Pierres chaudes", position=3)
    first = make_massage(name="Suédois", position=1)
    second = make_massage(name="Thaï", position=2)

    response = client.get("/massages")

    assert response.status_code == 200
    assert [m["id"] for m in response.json()] == [first.id, second.id, third.id]


def test_admin_creates_massage(client, admin, auth_headers):
    response = client.post("/massages", json=MASSAGE, headers=auth_headers(admin))

    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "Massage californien"
    assert body["duration"] == 60
    assert body["position"] == 0
    assert body["createdAt"].endswith("Z")


def test_regular_user_cannot_edit_catalogue(client, user, make_massage, auth_headers):
    massage = make_massage()
    headers = auth_headers(user)

    assert client.post("/massages", json=MASSAGE, headers=headers).status_code == 403
    assert client.put(f"/massages/{massage.id}", json={"price": 1}, headers=headers).status_code == 403
    assert client.delete(f"/massages/{massage.id}", headers=headers).status_code == 403


def test_invalid_duration_and_price(client, admin, auth_headers):
    headers = auth_headers(admin)

    assert client.post("/massages", json={**MASSAGE, "duration": 0}, headers=headers).status_code == 400
    assert client.post("/massages", json={**MASSAGE, "price": -5}, headers=headers).status_code == 400


def test_update_massage(client, admin, make_massage, auth_headers):
    massage = make_massage(price=70.0)

    response = client.put(
        f"/massages/{massage.id}", json={"price": 80, "position": 4}, headers=auth_headers(admin)
    )

    assert response.status_code == 200
    assert response.json()["price"] == 80
    assert response.json()["position"] == 4
    assert response.json()["name"] == massage.name


def test_unknown_massage(client):
    response = client.get("/massages/missing")

    assert response.status_code == 404
    assert response.json() == {"message": "Massage avec l'ID missing non trouvé", "statusCode": 404}


def test_delete_massage(client, admin, make_massage, auth_headers):
    massage = make_massage()

    response = client.delete(f"/massages/{massage.id}", headers=auth_headers(admin))

    assert response.status_code == 200
    assert client.get(f"/massages/{massage.id}").status_code == 404
