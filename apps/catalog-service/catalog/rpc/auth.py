"""Session procedures: ``auth.register``, ``auth.login``, ``auth.logout``, ``auth.refreshToken``."""
from catalog.api.responses import REFRESH_TOKEN_COOKIE, clear_refresh_cookie, set_refresh_cookie
from catalog.db import schemas
from catalog.rpc.base import Access, ProcedureContext, RpcRouter
from catalog.services.auth_service import AuthService
from catalog.utils.rate_limit import RateLimitTier

router = RpcRouter()


@router.mutation("register", input_model=schemas.Register, tier=RateLimitTier.SHORT)
def register(ctx: ProcedureContext, data: schemas.Register):
    user = AuthService(ctx.db).register(data)
    return schemas.Account.model_validate(user)


@router.mutation("login", input_model=schemas.Login, tier=RateLimitTier.SHORT)
def login(ctx: ProcedureContext, data: schemas.Login):
    tokens = AuthService(ctx.db).login(data.username, data.password)
    set_refresh_cookie(ctx.response, tokens.refresh_token)
    return schemas.AccessToken(access_token=tokens.access_token)


@router.mutation("logout", access=Access.AUTHENTICATED)
def logout(ctx: ProcedureContext, _data):
    AuthService(ctx.db).logout(ctx.principal)
    clear_refresh_cookie(ctx.response)
    return schemas.SuccessFlag()


@router.mutation(
    "refreshToken",
    input_model=schemas.RefreshTokenInput,
    input_optional=True,
    tier=RateLimitTier.MEDIUM,
)
def refresh_token(ctx: ProcedureContext, data: schemas.RefreshTokenInput):
    # cookie first, body as a fallback for non-browser clients
    token = ctx.request.cookies.get(REFRESH_TOKEN_COOKIE) or data.refresh_token
    tokens = AuthService(ctx.db).refresh(token)
    set_refresh_cookie(ctx.response, tokens.refresh_token)
    return schemas.AccessToken(access_token=tokens.access_token)
