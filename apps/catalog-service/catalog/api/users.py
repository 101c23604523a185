"""
User endpoints: the current account, public profiles and admin management.
"""
import uuid

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.orm import Session

from catalog.api.deps import get_current_principal, require_admin
from catalog.api.params import pagination_params
from catalog.api.responses import ERROR_RESPONSES, no_content, ok
from catalog.context import Principal
from catalog.db import schemas
from catalog.db.database import get_db
from catalog.errors import AppError, Errors
from catalog.services import AuthService, CarsService, UsersService

router = APIRouter(prefix="/users", tags=["users"], responses=ERROR_RESPONSES)


@router.get("/me", response_model=schemas.SuccessResponse[schemas.Account])
def get_me(principal: Principal = Depends(get_current_principal), db: Session = Depends(get_db)):
    user = UsersService(db).get_by_id(principal.id)
    return ok(schemas.Account.model_validate(user))


@router.patch("/me", response_model=schemas.SuccessResponse[schemas.Account])
def update_me(
    payload: schemas.ProfileUpdate,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    user = UsersService(db).update_profile(principal.id, payload)
    return ok(schemas.Account.model_validate(user), "Profile updated")


@router.post(
    "/me/api-key",
    status_code=status.HTTP_201_CREATED,
    response_model=schemas.SuccessResponse[schemas.ApiKey],
)
def create_my_api_key(principal: Principal = Depends(get_current_principal), db: Session = Depends(get_db)):
    api_key = AuthService(db).create_api_key(principal)
    return ok(schemas.ApiKey(api_key=api_key), "Store this key now; it will not be shown again")


@router.get("/me/favorites", response_model=schemas.SuccessResponse[schemas.Page[schemas.Car]])
def my_favorites(
    page: schemas.PaginationInput = Depends(pagination_params),
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return ok(CarsService(db).favorites(principal.id, skip=page.skip, limit=page.limit))


@router.get("/me/cars", response_model=schemas.SuccessResponse[schemas.Page[schemas.Car]])
def my_cars(
    page: schemas.PaginationInput = Depends(pagination_params),
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return ok(CarsService(db).cars_by_user(principal.id, skip=page.skip, limit=page.limit, viewer_id=principal.id))


@router.get("/by-username/{username}", response_model=schemas.SuccessResponse[schemas.User])
def get_by_username(
    username: str = Path(..., min_length=1, max_length=80),
    db: Session = Depends(get_db),
):
    user = UsersService(db).get_by_username(username)
    return ok(schemas.User.model_validate(user))


@router.patch("/{user_id}", response_model=schemas.SuccessResponse[schemas.Account])
def update_user(
    user_id: uuid.UUID,
    payload: schemas.UserUpdate,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    user = UsersService(db).update(user_id, payload, principal)
    return ok(schemas.Account.model_validate(user), "User updated")


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_user(
    user_id: uuid.UUID,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    if not principal.is_admin and principal.id != user_id:
        raise AppError(Errors.FORBIDDEN)
    UsersService(db).soft_delete(user_id)
    return no_content()


@router.post(
    "/{user_id}/api-key",
    status_code=status.HTTP_201_CREATED,
    response_model=schemas.SuccessResponse[schemas.ApiKey],
)
def create_api_key_for_user(
    user_id: uuid.UUID,
    principal: Principal = Depends(require_admin),
    db: Session = Depends(get_db),
):
    api_key = AuthService(db).create_api_key(principal, user_id)
    return ok(schemas.ApiKey(api_key=api_key), "Store this key now; it will not be shown again")
