import os

# Test defaults must be in place before the catalog settings are first read
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("LOG_LEVEL", "INFO")
os.environ.setdefault("CORS_ORIGINS", "http://localhost:3000")

import pytest
from fastapi.testclient import TestClient

from catalog.db import models
from catalog.db.database import SessionLocal, engine, ensure_sqlite_schema
from catalog.db.repositories import car_manufacturers as manufacturers_repo
from catalog.db.repositories import car_models as models_repo
from catalog.db.repositories import cars as cars_repo
from catalog.db.repositories import users as users_repo
from catalog.utils import security
from catalog.utils.rate_limit import get_rate_limiter
from catalog.utils.settings import refresh_settings_cache
from catalog.utils.slugs import slugify
from catalog.utils.ttl_store import get_session_store

refresh_settings_cache()

DEFAULT_PASSWORD = "secret123"


@pytest.fixture(scope="session", autouse=True)
def create_schema_once():
    """Create all tables once per test session (SQLite in-memory lives for the process)."""
    ensure_sqlite_schema()
    yield


@pytest.fixture(autouse=True)
def clean_state():
    """Empty every table and the in-process stores between tests."""
    with engine.begin() as connection:
        for table in reversed(models.Base.metadata.sorted_tables):
            connection.execute(table.delete())
    get_rate_limiter().reset()
    get_session_store().clear()
    yield


@pytest.fixture
def rate_limits_enabled(monkeypatch):
    monkeypatch.setenv("RATE_LIMIT_ENABLED", "true")
    refresh_settings_cache()
    yield
    monkeypatch.setenv("RATE_LIMIT_ENABLED", "false")
    refresh_settings_cache()


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def db(db_session):
    return db_session


@pytest.fixture
def client():
    from catalog.api.main import app

    return TestClient(app)


@pytest.fixture
def user_factory(db_session):
    def _create(
        username: str = "jdoe",
        password: str = DEFAULT_PASSWORD,
        role: models.Role = models.Role.USER,
        first_name: str = "John",
        last_name: str = "Doe",
    ) -> models.User:
        return users_repo.create_user(
            db_session,
            username=username,
            password_hash=security.hash_password(password),
            first_name=first_name,
            last_name=last_name,
            role=role,
        )

    return _create


@pytest.fixture
def user(user_factory):
    return user_factory()


@pytest.fixture
def admin(user_factory):
    return user_factory(username="admin", role=models.Role.ADMIN, first_name="Ada", last_name="Admin")


@pytest.fixture
def auth_headers():
    """Build ``Authorization`` headers carrying a fresh access token for a user."""

    def _headers(user: models.User) -> dict:
        token = security.create_access_token(
            user_id=user.id,
            session_id=security.new_session_id(),
            role=user.role.value,
            first_name=user.first_name,
            last_name=user.last_name,
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def manufacturer_factory(db_session):
    def _create(name: str = "Toyota") -> models.CarManufacturer:
        return manufacturers_repo.create_manufacturer(db_session, name=name, slug=slugify(name))

    return _create


@pytest.fixture
def model_factory(db_session, manufacturer_factory):
    def _create(name: str = "Corolla", manufacturer=None) -> models.CarModel:
        manufacturer = manufacturer or manufacturer_factory()
        return models_repo.create_model(db_session, name=name, slug=slugify(name), manufacturer_id=manufacturer.id)

    return _create


@pytest.fixture
def car_factory(db_session, model_factory):
    def _create(owner: models.User, model=None, **fields) -> models.Car:
        values = {"year": 2020, "color": "Red", "km_driven": 10_000, "price": 15_000}
        values.update(fields)
        model = model or model_factory()
        return cars_repo.create_car(db_session, model_id=model.id, created_by_id=owner.id, **values)

    return _create
