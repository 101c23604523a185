import os
import shutil
import subprocess

import pytest
from alembic.config import Config

SERVICE_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))


def _docker_available() -> bool:
    if os.getenv("SKIP_DOCKER_TESTS") == "1":
        return False
    if not shutil.which("docker"):
        return False
    try:
        proc = subprocess.run(["docker", "info"], capture_output=True, text=True, timeout=5)
    except (OSError, subprocess.SubprocessError):
        return False
    return proc.returncode == 0


@pytest.fixture(scope="session")
def pg_url():
    """URL of a throwaway Postgres container, shared by the e2e session."""
    if not _docker_available():
        pytest.skip("Docker daemon is not available; skipping e2e tests that require containers")
    from testcontainers.postgres import PostgresContainer

    image = os.getenv("TEST_POSTGRES_IMAGE", "postgres:16-alpine")
    with PostgresContainer(image, driver=None) as pg:
        yield pg.get_connection_url()


@pytest.fixture
def alembic_config(pg_url, monkeypatch):
    monkeypatch.setenv("TEST_DATABASE_URL", pg_url)
    cfg = Config(os.path.join(SERVICE_ROOT, "alembic.ini"))
    cfg.set_main_option("script_location", os.path.join(SERVICE_ROOT, "migrations"))
    return cfg
