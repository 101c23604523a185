DEFAULT_PASSWORD = "secret123"

REGISTER = {"username": "newbie", "password": "hunter22", "firstName": "New", "lastName": "Bie"}


def _login(client, username, password=DEFAULT_PASSWORD):
    return client.post("/api/v1/auth/login", json={"username": username, "password": password})


def test_register_creates_user(client):
    r = client.post("/api/v1/auth/register", json=REGISTER)
    assert r.status_code == 201
    body = r.json()
    assert body["success"] is True
    assert body["message"] == "Account created"
    data = body["data"]
    assert data["username"] == "newbie"
    assert data["firstName"] == "New"
    assert data["role"] == "user"
    assert data["hasApiKey"] is False
    assert "password" not in data


def test_register_duplicate_username_conflicts(client):
    assert client.post("/api/v1/auth/register", json=REGISTER).status_code == 201
    r = client.post("/api/v1/auth/register", json=REGISTER)
    assert r.status_code == 409
    error = r.json()["error"]
    assert error["errorCode"] == 4001
    assert error["statusCode"] == 409
    assert r.json()["success"] is False


def test_register_validation_errors(client):
    r = client.post("/api/v1/auth/register", json={"username": "x", "password": "123"})
    assert r.status_code == 400
    error = r.json()["error"]
    assert error["errorCode"] == 1100
    paths = {tuple(issue["path"]) for issue in error["errors"]}
    assert ("password",) in paths
    assert ("firstName",) in paths
    assert ("lastName",) in paths


def test_login_returns_access_token_and_cookie(client, user):
    r = _login(client, user.username)
    assert r.status_code == 201
    assert r.json()["data"]["accessToken"]
    cookie = r.headers["set-cookie"]
    assert cookie.startswith("refresh_token=")
    assert "HttpOnly" in cookie
    assert "samesite=lax" in cookie.lower()
    assert "Path=/" in cookie
    assert "Max-Age=604800" in cookie


def test_login_with_wrong_password(client, user):
    r = _login(client, user.username, "wrong-password")
    assert r.status_code == 401
    assert r.json()["error"]["errorCode"] == 3002


def test_login_unknown_user(client):
    r = _login(client, "ghost")
    assert r.status_code == 401
    assert r.json()["error"]["errorCode"] == 3002


def test_access_token_authenticates(client, user):
    token = _login(client, user.username).json()["data"]["accessToken"]
    r = client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json()["data"]["username"] == user.username


def test_refresh_rotates_session(client, user):
    login = _login(client, user.username)
    old_refresh = login.cookies["refresh_token"]

    r = client.post("/api/v1/auth/refresh")
    assert r.status_code == 200
    assert r.json()["data"]["accessToken"]
    new_refresh = r.cookies["refresh_token"]
    assert new_refresh != old_refresh

    # The rotated-out token is no longer accepted
    client.cookies.clear()
    r = client.post("/api/v1/auth/refresh", json={"refreshToken": old_refresh})
    assert r.status_code == 401
    assert r.json()["error"]["errorCode"] == 3003

    r = client.post("/api/v1/auth/refresh", json={"refreshToken": new_refresh})
    assert r.status_code == 200


def test_refresh_without_token(client):
    r = client.post("/api/v1/auth/refresh")
    assert r.status_code == 401
    assert r.json()["error"]["errorCode"] == 3003


def test_refresh_with_garbage_token(client):
    r = client.post("/api/v1/auth/refresh", json={"refreshToken": "not-a-jwt"})
    assert r.status_code == 401


def test_logout_drops_session_and_clears_cookie(client, user):
    login = _login(client, user.username)
    token = login.json()["data"]["accessToken"]
    refresh = login.cookies["refresh_token"]

    r = client.post("/api/v1/auth/logout", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 204
    assert 'refresh_token=""' in r.headers["set-cookie"] or "Max-Age=0" in r.headers["set-cookie"]

    client.cookies.clear()
    r = client.post("/api/v1/auth/refresh", json={"refreshToken": refresh})
    assert r.status_code == 401


def test_logout_requires_authentication(client):
    assert client.post("/api/v1/auth/logout").status_code == 401
