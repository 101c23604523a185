"""
Authentication endpoints: register, login, token refresh and logout.

The refresh token travels in the ``refresh_token`` httpOnly cookie; the
refresh endpoint also accepts it in the body as ``refreshToken``.
"""
from typing import Optional

from fastapi import APIRouter, Body, Cookie, Depends, Response, status
from sqlalchemy.orm import Session

from catalog.api.deps import get_current_principal, rate_limit
from catalog.api.responses import (
    ERROR_RESPONSES,
    REFRESH_TOKEN_COOKIE,
    clear_refresh_cookie,
    no_content,
    ok,
    set_refresh_cookie,
)
from catalog.context import Principal
from catalog.db import schemas
from catalog.db.database import get_db
from catalog.services.auth_service import AuthService
from catalog.utils.rate_limit import RateLimitTier

router = APIRouter(prefix="/auth", tags=["auth"], responses=ERROR_RESPONSES)


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=schemas.SuccessResponse[schemas.Account],
    dependencies=[Depends(rate_limit(RateLimitTier.SHORT))],
)
def register(payload: schemas.Register, db: Session = Depends(get_db)):
    user = AuthService(db).register(payload)
    return ok(schemas.Account.model_validate(user), "Account created")


@router.post(
    "/login",
    status_code=status.HTTP_201_CREATED,
    response_model=schemas.SuccessResponse[schemas.AccessToken],
    dependencies=[Depends(rate_limit(RateLimitTier.SHORT))],
)
def login(payload: schemas.Login, response: Response, db: Session = Depends(get_db)):
    tokens = AuthService(db).login(payload.username, payload.password)
    set_refresh_cookie(response, tokens.refresh_token)
    return ok(schemas.AccessToken(access_token=tokens.access_token))


@router.post(
    "/refresh",
    response_model=schemas.SuccessResponse[schemas.AccessToken],
    dependencies=[Depends(rate_limit(RateLimitTier.MEDIUM))],
)
def refresh(
    response: Response,
    payload: Optional[schemas.RefreshTokenInput] = Body(default=None),
    refresh_cookie: Optional[str] = Cookie(default=None, alias=REFRESH_TOKEN_COOKIE),
    db: Session = Depends(get_db),
):
    token = refresh_cookie or (payload.refresh_token if payload else None)
    tokens = AuthService(db).refresh(token)
    set_refresh_cookie(response, tokens.refresh_token)
    return ok(schemas.AccessToken(access_token=tokens.access_token))


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def logout(principal: Principal = Depends(get_current_principal), db: Session = Depends(get_db)):
    AuthService(db).logout(principal)
    response = no_content()
    clear_refresh_cookie(response)
    return response
