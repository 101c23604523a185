"""Model procedures under ``carModels.*``. Writes are admin-only."""
from catalog.db import schemas
from catalog.rpc.base import Access, ProcedureContext, RpcRouter
from catalog.services import CarModelsService
from catalog.utils.rate_limit import RateLimitTier

router = RpcRouter()


@router.query("list", input_model=schemas.CarModelListInput, input_optional=True)
def list_models(ctx: ProcedureContext, params: schemas.CarModelListInput):
    return CarModelsService(ctx.db).list(params)


@router.query("getById", input_model=schemas.IdInput)
def get_by_id(ctx: ProcedureContext, data: schemas.IdInput):
    return CarModelsService(ctx.db).get_by_id(data.id)


@router.query("getBySlug", input_model=schemas.SlugInput)
def get_by_slug(ctx: ProcedureContext, data: schemas.SlugInput):
    return CarModelsService(ctx.db).get_by_slug(data.slug)


@router.mutation(
    "create", input_model=schemas.CarModelCreate, access=Access.ADMIN, tier=RateLimitTier.MEDIUM
)
def create(ctx: ProcedureContext, data: schemas.CarModelCreate):
    return CarModelsService(ctx.db).create(data)


@router.mutation(
    "update",
    input_model=schemas.UpdateInput[schemas.CarModelUpdate],
    access=Access.ADMIN,
    tier=RateLimitTier.MEDIUM,
)
def update(ctx: ProcedureContext, data):
    return CarModelsService(ctx.db).update(data.id, data.data)


@router.mutation("delete", input_model=schemas.IdInput, access=Access.ADMIN, tier=RateLimitTier.SHORT)
def delete(ctx: ProcedureContext, data: schemas.IdInput):
    CarModelsService(ctx.db).delete(data.id)
    return schemas.SuccessFlag()
