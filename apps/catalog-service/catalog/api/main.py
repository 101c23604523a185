"""
FastAPI app assembly: logging, middleware and router wiring.
"""
import logging
import time

from fastapi import APIRouter, Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.requests import Request

from catalog.context import RequestContextFilter, reset_request_ids, resolve_request_id, set_request_ids
from catalog.utils.rate_limit import RateLimitTier
from catalog.utils.settings import get_settings

settings = get_settings()

# Configure logging
LOG_LEVEL_NAME = settings.log_level.upper()
LOG_LEVEL = getattr(logging, LOG_LEVEL_NAME, logging.INFO)
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] [req=%(request_id)s corr=%(correlation_id)s user=%(user_id)s] %(message)s"
logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
for _handler in logging.getLogger().handlers:
    _handler.addFilter(RequestContextFilter())
logger = logging.getLogger(__name__)
logger.setLevel(LOG_LEVEL)
logger.info(f"app_startup: env={settings.app_env} log_level={LOG_LEVEL_NAME}")

traffic_logger = logging.getLogger("catalog.traffic")

from catalog.api.auth import router as auth_router  # noqa: E402
from catalog.api.car_manufacturers import router as car_manufacturers_router  # noqa: E402
from catalog.api.car_models import router as car_models_router  # noqa: E402
from catalog.api.cars import router as cars_router  # noqa: E402
from catalog.api.deps import rate_limit  # noqa: E402
from catalog.api.errors import register_exception_handlers  # noqa: E402
from catalog.api.users import router as users_router  # noqa: E402
from catalog.rpc.endpoint import router as trpc_router  # noqa: E402

# Database schema is managed by Alembic migrations.

app = FastAPI(
    title="Car Catalog Service",
    description="Car catalog API: manufacturers, models, cars, accounts and favorites.",
    version="1.0.0",
)

# Avoid implicit trailing-slash redirects for predictable URLs
app.router.redirect_slashes = False

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["x-request-id", "x-correlation-id", "Retry-After"],
)

register_exception_handlers(app)


# Middleware: request/correlation ids and the traffic log
@app.middleware("http")
async def request_context(request: Request, call_next):
    request_id = resolve_request_id(request.headers.get("x-request-id"))
    correlation_id = request.headers.get("x-correlation-id") or request_id
    tokens = set_request_ids(request_id, correlation_id)
    started = time.perf_counter()
    try:
        response = await call_next(request)
    finally:
        reset_request_ids(tokens)
    response.headers["x-request-id"] = request_id
    response.headers["x-correlation-id"] = correlation_id
    duration_ms = (time.perf_counter() - started) * 1000
    traffic_logger.debug(
        f"{request.method} {request.url.path} | Status: {response.status_code} | Duration: {duration_ms:.0f}ms"
    )
    return response


api_v1 = APIRouter(prefix="/api/v1", dependencies=[Depends(rate_limit(RateLimitTier.LONG))])
api_v1.include_router(auth_router)
api_v1.include_router(users_router)
api_v1.include_router(car_manufacturers_router)
api_v1.include_router(car_models_router)
api_v1.include_router(cars_router)

app.include_router(api_v1)
app.include_router(trpc_router)


@app.get("/health")
def health_check():
    return {"status": "ok", "service": "car-catalog-service"}
