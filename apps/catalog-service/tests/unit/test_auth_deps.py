import uuid

from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from catalog.api.deps import get_current_principal, get_optional_principal, require_admin, require_roles
from catalog.api.errors import register_exception_handlers
from catalog.context import Principal


def _app(dependency):
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/whoami")
    def whoami(principal=Depends(dependency)):
        if principal is None:
            return {"anonymous": True}
        return {"id": str(principal.id), "role": principal.role, "authType": principal.auth_type}

    return TestClient(app)


def test_missing_credentials_are_unauthorized():
    r = _app(get_current_principal).get("/whoami")
    assert r.status_code == 401
    assert r.json()["error"]["errorCode"] == 3000


def test_invalid_bearer_is_anonymous_on_optional_routes():
    r = _app(get_optional_principal).get("/whoami", headers={"Authorization": "Bearer garbage"})
    assert r.status_code == 200
    assert r.json() == {"anonymous": True}


def test_bearer_token_resolves_principal(user, auth_headers):
    r = _app(get_current_principal).get("/whoami", headers=auth_headers(user))
    assert r.status_code == 200
    assert r.json() == {"id": str(user.id), "role": "user", "authType": "jwt"}


def test_bearer_takes_precedence_over_api_key(user, auth_headers):
    headers = {**auth_headers(user), "x-api-key": "ak_test_" + "0" * 64}
    r = _app(get_current_principal).get("/whoami", headers=headers)
    assert r.json()["authType"] == "jwt"


def test_invalid_bearer_does_not_fall_back_to_api_key(user):
    headers = {"Authorization": "Bearer garbage", "x-api-key": "ak_test_" + "0" * 64}
    r = _app(get_current_principal).get("/whoami", headers=headers)
    assert r.status_code == 401


def test_require_admin_rejects_users(user, admin, auth_headers):
    client = _app(require_admin)
    r = client.get("/whoami", headers=auth_headers(user))
    assert r.status_code == 403
    assert r.json()["error"]["message"] == "Insufficient role"
    assert client.get("/whoami", headers=auth_headers(admin)).status_code == 200


def test_require_roles_is_exact_membership():
    app = FastAPI()
    register_exception_handlers(app)
    only_users = require_roles("user")

    @app.get("/whoami")
    def whoami(principal=Depends(only_users)):
        return {"ok": True}

    principal = Principal(id=uuid.uuid4(), role="admin", auth_type="jwt")
    app.dependency_overrides[get_current_principal] = lambda: principal
    r = TestClient(app).get("/whoami")
    assert r.status_code == 403
