"""Manufacturer procedures under ``carManufacturers.*``. Writes are admin-only."""
from catalog.db import schemas
from catalog.rpc.base import Access, ProcedureContext, RpcRouter
from catalog.services import CarManufacturersService
from catalog.utils.rate_limit import RateLimitTier

router = RpcRouter()


@router.query("list", input_model=schemas.CarManufacturerListInput, input_optional=True)
def list_manufacturers(ctx: ProcedureContext, params: schemas.CarManufacturerListInput):
    return CarManufacturersService(ctx.db).list(params)


@router.query("getById", input_model=schemas.IdInput)
def get_by_id(ctx: ProcedureContext, data: schemas.IdInput):
    return CarManufacturersService(ctx.db).get_by_id(data.id)


@router.query("getBySlug", input_model=schemas.SlugInput)
def get_by_slug(ctx: ProcedureContext, data: schemas.SlugInput):
    return CarManufacturersService(ctx.db).get_by_slug(data.slug)


@router.mutation(
    "create", input_model=schemas.CarManufacturerCreate, access=Access.ADMIN, tier=RateLimitTier.MEDIUM
)
def create(ctx: ProcedureContext, data: schemas.CarManufacturerCreate):
    return CarManufacturersService(ctx.db).create(data)


@router.mutation(
    "update",
    input_model=schemas.UpdateInput[schemas.CarManufacturerUpdate],
    access=Access.ADMIN,
    tier=RateLimitTier.MEDIUM,
)
def update(ctx: ProcedureContext, data):
    return CarManufacturersService(ctx.db).update(data.id, data.data)


@router.mutation("delete", input_model=schemas.IdInput, access=Access.ADMIN, tier=RateLimitTier.SHORT)
def delete(ctx: ProcedureContext, data: schemas.IdInput):
    CarManufacturersService(ctx.db).delete(data.id)
    return schemas.SuccessFlag()
