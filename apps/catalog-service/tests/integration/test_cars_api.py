import uuid

import pytest

CARS = "/api/v1/cars"


@pytest.fixture
def catalog(manufacturer_factory, model_factory):
    vw = manufacturer_factory("Volkswagen")
    bmw = manufacturer_factory("BMW")
    return {
        "golf": model_factory("Golf", manufacturer=vw),
        "passat": model_factory("Passat", manufacturer=vw),
        "x5": model_factory("X5", manufacturer=bmw),
    }


def _car_payload(model, **overrides):
    payload = {"modelId": str(model.id), "year": 2019, "color": "Blue", "kmDriven": 42000, "price": 18000}
    payload.update(overrides)
    return payload


def test_user_creates_car(client, user, auth_headers, catalog):
    r = client.post(CARS, headers=auth_headers(user), json=_car_payload(catalog["golf"]))
    assert r.status_code == 201
    data = r.json()["data"]
    assert data["createdBy"] == str(user.id)
    assert data["kmDriven"] == 42000
    assert data["isFavorite"] is False
    assert data["model"]["slug"] == "golf"
    assert r.json()["message"] == "Car created"


def test_create_car_requires_authentication(client, catalog):
    assert client.post(CARS, json=_car_payload(catalog["golf"])).status_code == 401


def test_create_car_unknown_model(client, user, auth_headers, catalog):
    payload = _car_payload(catalog["golf"], modelId=str(uuid.uuid4()))
    r = client.post(CARS, headers=auth_headers(user), json=payload)
    assert r.status_code == 404
    assert r.json()["error"]["errorCode"] == 2002


def test_create_car_validation(client, user, auth_headers, catalog):
    r = client.post(
        CARS,
        headers=auth_headers(user),
        json=_car_payload(catalog["golf"], year=1800, price=-1, color=""),
    )
    assert r.status_code == 400
    paths = {issue["path"][0] for issue in r.json()["error"]["errors"]}
    assert paths == {"year", "price", "color"}


def test_list_filters(client, user, car_factory, catalog):
    car_factory(user, model=catalog["golf"], color="Red", year=2015, price=9000)
    car_factory(user, model=catalog["passat"], color="red", year=2020, price=21000)
    car_factory(user, model=catalog["x5"], color="Black", year=2022, price=55000)

    def names(params):
        r = client.get(CARS, params=params)
        assert r.status_code == 200
        return sorted(car["model"]["name"] for car in r.json()["data"]["items"])

    assert names({"color": "RED"}) == ["Golf", "Passat"]
    assert names({"manufacturerSlug": "volkswagen"}) == ["Golf", "Passat"]
    assert names({"modelSlug": "x5"}) == ["X5"]
    assert names({"minYear": 2016, "maxYear": 2021}) == ["Passat"]
    assert names({"minPrice": 10000}) == ["Passat", "X5"]
    assert names({"maxPrice": 10000}) == ["Golf"]


def test_list_sorting(client, user, car_factory, catalog):
    car_factory(user, model=catalog["golf"], price=9000)
    car_factory(user, model=catalog["passat"], price=21000)
    car_factory(user, model=catalog["x5"], price=55000)

    r = client.get(CARS, params={"sortField": "price", "sortDirection": "desc"})
    assert [c["price"] for c in r.json()["data"]["items"]] == [55000, 21000, 9000]
    r = client.get(CARS, params={"sortField": "price"})
    assert [c["price"] for c in r.json()["data"]["items"]] == [9000, 21000, 55000]


def test_list_sorting_by_model_name(client, user, car_factory, catalog):
    car_factory(user, model=catalog["passat"], price=21000)
    car_factory(user, model=catalog["x5"], price=55000)
    car_factory(user, model=catalog["golf"], price=9000)

    r = client.get(CARS, params={"sortField": "model"})
    assert r.status_code == 200
    assert [c["model"]["name"] for c in r.json()["data"]["items"]] == ["Golf", "Passat", "X5"]
    r = client.get(CARS, params={"sortField": "model", "sortDirection": "desc", "manufacturerSlug": "volkswagen"})
    assert [c["model"]["name"] for c in r.json()["data"]["items"]] == ["Passat", "Golf"]
    assert r.json()["data"]["meta"]["total"] == 2


def test_invalid_sort_field(client):
    r = client.get(CARS, params={"sortField": "mileage"})
    assert r.status_code == 400
    issue = r.json()["error"]["errors"][0]
    assert issue["path"] == ["sortField"]
    assert "kmDriven" in issue["options"]


def test_get_car(client, user, car_factory, catalog):
    car = car_factory(user, model=catalog["golf"])
    r = client.get(f"{CARS}/{car.id}")
    assert r.status_code == 200
    assert r.json()["data"]["id"] == str(car.id)
    r = client.get(f"{CARS}/{uuid.uuid4()}")
    assert r.status_code == 404
    assert r.json()["error"]["errorCode"] == 2001


def test_owner_updates_car(client, user, auth_headers, car_factory, catalog):
    car = car_factory(user, model=catalog["golf"])
    r = client.put(f"{CARS}/{car.id}", headers=auth_headers(user), json={"price": 12345, "modelId": str(catalog["passat"].id)})
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["price"] == 12345
    assert data["model"]["name"] == "Passat"
    assert r.json()["message"] == "Car updated"


def test_other_user_cannot_update_or_delete(client, user, user_factory, auth_headers, car_factory, catalog):
    car = car_factory(user, model=catalog["golf"])
    intruder = user_factory(username="intruder")
    r = client.put(f"{CARS}/{car.id}", headers=auth_headers(intruder), json={"price": 1})
    assert r.status_code == 403
    assert r.json()["error"]["errorCode"] == 3005
    r = client.delete(f"{CARS}/{car.id}", headers=auth_headers(intruder))
    assert r.status_code == 403


def test_admin_can_update_any_car(client, user, admin, auth_headers, car_factory, catalog):
    car = car_factory(user, model=catalog["golf"])
    r = client.put(f"{CARS}/{car.id}", headers=auth_headers(admin), json={"color": "Green"})
    assert r.status_code == 200
    assert r.json()["data"]["color"] == "Green"


def test_soft_delete_hides_car(client, user, auth_headers, car_factory, catalog):
    car = car_factory(user, model=catalog["golf"])
    r = client.delete(f"{CARS}/{car.id}", headers=auth_headers(user))
    assert r.status_code == 204
    assert client.get(f"{CARS}/{car.id}").status_code == 404
    assert client.get(CARS).json()["data"]["meta"]["total"] == 0
    assert client.delete(f"{CARS}/{car.id}", headers=auth_headers(user)).status_code == 404


def test_toggle_favorite(client, user, user_factory, auth_headers, car_factory, catalog):
    car = car_factory(user, model=catalog["golf"])
    fan = user_factory(username="fan")
    headers = auth_headers(fan)

    r = client.post(f"{CARS}/{car.id}/favorite", headers=headers)
    assert r.status_code == 200
    assert r.json()["data"] == {"isFavorite": True}

    assert client.get(f"{CARS}/{car.id}", headers=headers).json()["data"]["isFavorite"] is True
    assert client.get(CARS, headers=headers).json()["data"]["items"][0]["isFavorite"] is True
    # Anonymous and other viewers do not see the flag
    assert client.get(f"{CARS}/{car.id}").json()["data"]["isFavorite"] is False
    assert client.get(f"{CARS}/{car.id}", headers=auth_headers(user)).json()["data"]["isFavorite"] is False

    favorites = client.get("/api/v1/users/me/favorites", headers=headers).json()["data"]
    assert [c["id"] for c in favorites["items"]] == [str(car.id)]

    r = client.post(f"{CARS}/{car.id}/favorite", headers=headers)
    assert r.json()["data"] == {"isFavorite": False}
    assert client.get("/api/v1/users/me/favorites", headers=headers).json()["data"]["meta"]["total"] == 0


def test_favorite_requires_authentication_and_existing_car(client, user, auth_headers):
    assert client.post(f"{CARS}/{uuid.uuid4()}/favorite").status_code == 401
    r = client.post(f"{CARS}/{uuid.uuid4()}/favorite", headers=auth_headers(user))
    assert r.status_code == 404


def test_favorites_exclude_soft_deleted_cars(client, user, auth_headers, car_factory, catalog):
    car = car_factory(user, model=catalog["golf"])
    headers = auth_headers(user)
    client.post(f"{CARS}/{car.id}/favorite", headers=headers)
    client.delete(f"{CARS}/{car.id}", headers=headers)
    assert client.get("/api/v1/users/me/favorites", headers=headers).json()["data"]["items"] == []


def test_my_cars(client, user, user_factory, auth_headers, car_factory, catalog):
    other = user_factory(username="other")
    mine = car_factory(user, model=catalog["golf"])
    car_factory(other, model=catalog["x5"])

    r = client.get("/api/v1/users/me/cars", headers=auth_headers(user))
    assert r.status_code == 200
    page = r.json()["data"]
    assert [c["id"] for c in page["items"]] == [str(mine.id)]
    assert page["meta"]["total"] == 1
