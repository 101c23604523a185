"""Car procedures under ``cars.*``."""
from catalog.db import schemas
from catalog.rpc.base import Access, ProcedureContext, RpcRouter
from catalog.services import CarsService
from catalog.utils.rate_limit import RateLimitTier

router = RpcRouter()


def _viewer(ctx: ProcedureContext):
    return ctx.principal.id if ctx.principal else None


@router.query("list", input_model=schemas.CarListInput, input_optional=True)
def list_cars(ctx: ProcedureContext, params: schemas.CarListInput):
    return CarsService(ctx.db).list(params, viewer_id=_viewer(ctx))


@router.query("getById", input_model=schemas.IdInput)
def get_by_id(ctx: ProcedureContext, data: schemas.IdInput):
    return CarsService(ctx.db).get_by_id(data.id, viewer_id=_viewer(ctx))


@router.mutation("create", input_model=schemas.CarCreate, access=Access.AUTHENTICATED, tier=RateLimitTier.MEDIUM)
def create(ctx: ProcedureContext, data: schemas.CarCreate):
    return CarsService(ctx.db).create(data, ctx.principal)


@router.mutation(
    "update",
    input_model=schemas.UpdateInput[schemas.CarUpdate],
    access=Access.AUTHENTICATED,
    tier=RateLimitTier.MEDIUM,
)
def update(ctx: ProcedureContext, data):
    return CarsService(ctx.db).update(data.id, data.data, ctx.principal)


@router.mutation("deleteById", input_model=schemas.IdInput, access=Access.AUTHENTICATED, tier=RateLimitTier.SHORT)
def delete_by_id(ctx: ProcedureContext, data: schemas.IdInput):
    CarsService(ctx.db).soft_delete(data.id, ctx.principal)
    return schemas.SuccessFlag()


@router.mutation("toggleFavorite", input_model=schemas.IdInput, access=Access.AUTHENTICATED)
def toggle_favorite(ctx: ProcedureContext, data: schemas.IdInput):
    state = CarsService(ctx.db).toggle_favorite(data.id, ctx.principal.id)
    return schemas.FavoriteToggle(is_favorite=state)


@router.query("getFavorites", input_model=schemas.PaginationInput, input_optional=True, access=Access.AUTHENTICATED)
def get_favorites(ctx: ProcedureContext, page: schemas.PaginationInput):
    return CarsService(ctx.db).favorites(ctx.principal.id, skip=page.skip, limit=page.limit)


@router.query("getMyCars", input_model=schemas.PaginationInput, input_optional=True, access=Access.AUTHENTICATED)
def get_my_cars(ctx: ProcedureContext, page: schemas.PaginationInput):
    return CarsService(ctx.db).cars_by_user(
        ctx.principal.id, skip=page.skip, limit=page.limit, viewer_id=ctx.principal.id
    )
