import json

import pytest

from catalog.errors import AppError, Errors
from catalog.rpc import wire
from catalog.rpc.app_router import app_router
from catalog.rpc.base import Access, ProcedureType, RpcError, RpcRouter, trpc_code_for_status
from catalog.utils.rate_limit import RateLimitTier


def test_single_call_parsing():
    calls = wire.parse_calls("cars.getById", json.dumps({"id": "x"}), batch=False)
    assert calls == [("cars.getById", {"id": "x"})]
    assert wire.parse_calls("cars.list", None, batch=False) == [("cars.list", None)]


def test_batch_parsing_pairs_inputs_by_index():
    raw = json.dumps({"0": {"skip": 0}, "2": {"id": "abc"}})
    calls = wire.parse_calls("cars.list,accounts.getMe,cars.getById", raw, batch=True)
    assert calls == [
        ("cars.list", {"skip": 0}),
        ("accounts.getMe", None),
        ("cars.getById", {"id": "abc"}),
    ]


def test_invalid_json_is_a_parse_error():
    with pytest.raises(RpcError) as excinfo:
        wire.parse_calls("cars.list", "{not json", batch=False)
    assert excinfo.value.code == "PARSE_ERROR"
    assert excinfo.value.http_status == 400
    assert excinfo.value.to_shape(None)["error"]["code"] == -32700


def test_body_bytes_are_decoded_as_utf8():
    assert wire.parse_calls("auth.login", b'{"username": "j\xc3\xb6rg"}', batch=False) == [
        ("auth.login", {"username": "j\u00f6rg"})
    ]
    with pytest.raises(RpcError) as excinfo:
        wire.parse_calls("auth.login", b"\xff\xfe{", batch=False)
    assert excinfo.value.code == "PARSE_ERROR"
    assert excinfo.value.http_status == 400


def test_batch_input_must_be_an_object():
    with pytest.raises(RpcError):
        wire.parse_calls("a,b", "[1, 2]", batch=True)


def test_batch_status():
    assert wire.batch_status([200, 200]) == 200
    assert wire.batch_status([404]) == 404
    assert wire.batch_status([200, 401]) == 207


@pytest.mark.parametrize(
    "status,code,jsonrpc",
    [
        (400, "BAD_REQUEST", -32600),
        (401, "UNAUTHORIZED", -32001),
        (403, "FORBIDDEN", -32003),
        (404, "NOT_FOUND", -32004),
        (409, "CONFLICT", -32009),
        (429, "TOO_MANY_REQUESTS", -32029),
        (500, "INTERNAL_SERVER_ERROR", -32603),
    ],
)
def test_app_error_mapping(status, code, jsonrpc):
    entry = next(e for e in vars(Errors).values() if getattr(e, "status", None) == status)
    shape = RpcError.from_app_error(AppError(entry)).to_shape("some.path")
    assert trpc_code_for_status(status) == code
    assert shape["error"]["code"] == jsonrpc
    assert shape["error"]["data"]["code"] == code
    assert shape["error"]["data"]["httpStatus"] == status
    assert shape["error"]["data"]["path"] == "some.path"
    assert shape["error"]["data"]["errorCode"] == int(entry.code)


def test_validation_issues_travel_in_error_data():
    issues = [{"code": "missing", "path": ["id"], "message": "Field required", "received": None}]
    shape = RpcError.from_app_error(AppError(Errors.VALIDATION_ERROR, issues=issues)).to_shape("cars.getById")
    assert shape["error"]["data"]["errors"] == issues


def test_router_registration_and_resolution():
    router = RpcRouter()

    @router.query("ping")
    def ping(ctx, data):
        return "pong"

    root = RpcRouter()
    root.mount("health", router)
    procedure = root.resolve("health.ping")
    assert procedure.type is ProcedureType.QUERY
    assert procedure.access is Access.PUBLIC
    assert procedure.tier is RateLimitTier.LONG
    assert root.resolve("health.missing") is None
    assert root.resolve("nope.ping") is None

    with pytest.raises(ValueError):
        router.mutation("ping")(ping)


def test_app_router_exposes_all_procedures():
    paths = {path for path, _ in app_router.walk()}
    expected = {
        "auth.register", "auth.login", "auth.logout", "auth.refreshToken",
        "cars.list", "cars.getById", "cars.create", "cars.update", "cars.deleteById",
        "cars.toggleFavorite", "cars.getFavorites", "cars.getMyCars",
        "carModels.list", "carModels.getById", "carModels.getBySlug",
        "carModels.create", "carModels.update", "carModels.delete",
        "carManufacturers.list", "carManufacturers.getById", "carManufacturers.getBySlug",
        "carManufacturers.create", "carManufacturers.update", "carManufacturers.delete",
        "accounts.getMe", "accounts.updateProfile", "accounts.generateApiKey",
        "accounts.hasApiKey", "accounts.getByUsername",
    }
    assert paths == expected


def test_procedure_tiers_and_access():
    assert app_router.resolve("auth.login").tier is RateLimitTier.SHORT
    assert app_router.resolve("auth.refreshToken").tier is RateLimitTier.MEDIUM
    assert app_router.resolve("cars.create").tier is RateLimitTier.MEDIUM
    assert app_router.resolve("cars.deleteById").tier is RateLimitTier.SHORT
    assert app_router.resolve("cars.list").tier is RateLimitTier.LONG
    assert app_router.resolve("carManufacturers.create").access is Access.ADMIN
    assert app_router.resolve("accounts.getMe").access is Access.AUTHENTICATED
    assert app_router.resolve("accounts.getByUsername").access is Access.PUBLIC
