from catalog.db import models
from catalog.db.repositories import cars as cars_repo


def test_get_and_update_me(client, user, auth_headers):
    headers = auth_headers(user)
    r = client.get("/api/v1/users/me", headers=headers)
    assert r.status_code == 200
    assert r.json()["data"]["firstName"] == "John"

    r = client.patch("/api/v1/users/me", headers=headers, json={"firstName": "Jane", "lastName": "Roe"})
    assert r.status_code == 200
    assert r.json()["data"]["firstName"] == "Jane"
    assert r.json()["message"] == "Profile updated"


def test_update_me_rejects_role_field(client, user, auth_headers):
    r = client.patch(
        "/api/v1/users/me",
        headers=auth_headers(user),
        json={"firstName": "Jane", "lastName": "Roe", "role": "admin"},
    )
    assert r.status_code == 400


def test_me_requires_authentication(client):
    r = client.get("/api/v1/users/me")
    assert r.status_code == 401
    assert r.json()["error"]["errorCode"] == 3000


def test_public_profile_by_username(client, user):
    r = client.get(f"/api/v1/users/by-username/{user.username}")
    assert r.status_code == 200
    assert r.json()["data"] == {"id": str(user.id), "firstName": "John", "lastName": "Doe"}

    r = client.get("/api/v1/users/by-username/ghost")
    assert r.status_code == 404
    assert r.json()["error"]["errorCode"] == 2004


def test_api_key_lifecycle(client, user, auth_headers):
    r = client.post("/api/v1/users/me/api-key", headers=auth_headers(user))
    assert r.status_code == 201
    api_key = r.json()["data"]["apiKey"]
    assert api_key.startswith("ak_test_")
    assert r.json()["data"]["hasApiKey"] is True

    r = client.get("/api/v1/users/me", headers={"x-api-key": api_key})
    assert r.status_code == 200
    assert r.json()["data"]["hasApiKey"] is True

    # Regenerating invalidates the previous key, including its cached user
    r = client.post("/api/v1/users/me/api-key", headers={"x-api-key": api_key})
    new_key = r.json()["data"]["apiKey"]
    assert new_key != api_key
    assert client.get("/api/v1/users/me", headers={"x-api-key": api_key}).status_code == 401
    assert client.get("/api/v1/users/me", headers={"x-api-key": new_key}).status_code == 200


def test_unknown_api_key_is_rejected(client):
    r = client.get("/api/v1/users/me", headers={"x-api-key": "ak_test_" + "f" * 64})
    assert r.status_code == 401


def test_admin_creates_api_key_for_user(client, user, admin, auth_headers):
    r = client.post(f"/api/v1/users/{user.id}/api-key", headers=auth_headers(admin))
    assert r.status_code == 201
    api_key = r.json()["data"]["apiKey"]
    r = client.get("/api/v1/users/me", headers={"x-api-key": api_key})
    assert r.json()["data"]["id"] == str(user.id)


def test_user_cannot_create_api_key_for_others(client, user, admin, auth_headers):
    r = client.post(f"/api/v1/users/{admin.id}/api-key", headers=auth_headers(user))
    assert r.status_code == 403


def test_admin_updates_role(client, user, admin, auth_headers):
    r = client.patch(f"/api/v1/users/{user.id}", headers=auth_headers(admin), json={"role": "admin"})
    assert r.status_code == 200
    assert r.json()["data"]["role"] == "admin"


def test_invalid_role_lists_options(client, user, admin, auth_headers):
    r = client.patch(f"/api/v1/users/{user.id}", headers=auth_headers(admin), json={"role": "owner"})
    assert r.status_code == 400
    issue = r.json()["error"]["errors"][0]
    assert issue["path"] == ["role"]
    assert issue["options"] == ["admin", "user"]


def test_non_admin_cannot_update_users(client, user, user_factory, auth_headers):
    other = user_factory(username="other")
    r = client.patch(f"/api/v1/users/{other.id}", headers=auth_headers(user), json={"firstName": "X"})
    assert r.status_code == 403
    assert r.json()["error"]["errorCode"] == 3001


def test_user_deletes_self_and_their_cars(client, db, user, auth_headers, car_factory):
    car = car_factory(user)
    headers = auth_headers(user)
    r = client.delete(f"/api/v1/users/{user.id}", headers=headers)
    assert r.status_code == 204
    assert r.content == b""

    db.expire_all()
    deleted = db.get(models.User, user.id)
    assert deleted.deleted_at is not None
    assert cars_repo.get_car(db, car.id) is None
    assert client.get(f"/api/v1/users/by-username/{user.username}").status_code == 404
    assert client.get("/api/v1/users/me", headers=headers).status_code == 404


def test_user_cannot_delete_others(client, user, admin, auth_headers):
    r = client.delete(f"/api/v1/users/{admin.id}", headers=auth_headers(user))
    assert r.status_code == 403


def test_admin_deletes_user(client, user, admin, auth_headers):
    assert client.delete(f"/api/v1/users/{user.id}", headers=auth_headers(admin)).status_code == 204
    assert client.delete(f"/api/v1/users/{user.id}", headers=auth_headers(admin)).status_code == 404


def test_deleted_username_stays_reserved(client, user, admin, auth_headers):
    client.delete(f"/api/v1/users/{user.id}", headers=auth_headers(admin))
    r = client.post(
        "/api/v1/auth/register",
        json={"username": user.username, "password": "another1", "firstName": "A", "lastName": "B"},
    )
    assert r.status_code == 409
