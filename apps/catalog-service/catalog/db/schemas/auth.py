from typing import Optional

from pydantic import Field

from .common import CamelModel, StrictInput


class Login(StrictInput):
    username: str = Field(..., min_length=1, max_length=80, description="Unique login name")
    password: str = Field(..., min_length=5, max_length=255)


class Register(Login):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)


class RefreshTokenInput(StrictInput):
    refresh_token: Optional[str] = None


class AccessToken(CamelModel):
    access_token: str


class ApiKey(CamelModel):
    api_key: str
    has_api_key: bool = True


class HasApiKey(CamelModel):
    has_api_key: bool
