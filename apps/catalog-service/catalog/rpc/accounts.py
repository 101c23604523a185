"""Account procedures under ``accounts.*``: the caller's profile and API key, public lookups."""
from catalog.db import schemas
from catalog.rpc.base import Access, ProcedureContext, RpcRouter
from catalog.services import AuthService, UsersService
from catalog.utils.rate_limit import RateLimitTier

router = RpcRouter()


@router.query("getMe", access=Access.AUTHENTICATED)
def get_me(ctx: ProcedureContext, _data):
    user = UsersService(ctx.db).get_by_id(ctx.principal.id)
    return schemas.Account.model_validate(user)


@router.mutation(
    "updateProfile", input_model=schemas.ProfileUpdate, access=Access.AUTHENTICATED, tier=RateLimitTier.MEDIUM
)
def update_profile(ctx: ProcedureContext, data: schemas.ProfileUpdate):
    user = UsersService(ctx.db).update_profile(ctx.principal.id, data)
    return schemas.Account.model_validate(user)


@router.mutation("generateApiKey", access=Access.AUTHENTICATED, tier=RateLimitTier.MEDIUM)
def generate_api_key(ctx: ProcedureContext, _data):
    api_key = AuthService(ctx.db).create_api_key(ctx.principal)
    return schemas.ApiKey(api_key=api_key)


@router.query("hasApiKey", access=Access.AUTHENTICATED)
def has_api_key(ctx: ProcedureContext, _data):
    user = UsersService(ctx.db).get_by_id(ctx.principal.id)
    return schemas.HasApiKey(has_api_key=user.has_api_key)


@router.query("getByUsername", input_model=schemas.UsernameInput)
def get_by_username(ctx: ProcedureContext, data: schemas.UsernameInput):
    user = UsersService(ctx.db).get_by_username(data.username)
    return schemas.User.model_validate(user)
