"""
App assembly entry point.

Re-exports the FastAPI `app` from `catalog.api.main` so the service can be
started with ``uvicorn app:app`` or ``python app.py`` (listens on ``PORT``).
"""

from catalog.api.main import app  # noqa: F401

if __name__ == "__main__":
    import uvicorn

    from catalog.utils.settings import get_settings

    uvicorn.run(app, host="0.0.0.0", port=get_settings().port)
