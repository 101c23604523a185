import uuid
from datetime import datetime
from typing import Optional

from pydantic import Field

from catalog.db.models.users import Role

from .common import CamelModel, StrictInput


class ProfileUpdate(StrictInput):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)


class UserUpdate(StrictInput):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    role: Optional[Role] = None


class UsernameInput(StrictInput):
    username: str = Field(..., min_length=1, max_length=80)


class User(CamelModel):
    id: uuid.UUID
    first_name: str
    last_name: str


class Me(User):
    role: Role


class Account(CamelModel):
    id: uuid.UUID
    username: str
    first_name: str
    last_name: str
    role: Role
    has_api_key: bool
    created_at: datetime
    updated_at: datetime
