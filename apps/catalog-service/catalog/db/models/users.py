import enum
import uuid

from sqlalchemy import Column, DateTime, Enum, String, Text
from sqlalchemy.dialects.postgresql import UUID

from .base import Base, now_utc


class Role(str, enum.Enum):
    ADMIN = "admin"
    USER = "user"


class User(Base):
    __tablename__ = 'users'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    role = Column(
        Enum(Role, name='users_role_enum', values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=Role.USER,
    )
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    username = Column(String(80), nullable=False, unique=True)
    password = Column(Text, nullable=False)

    # SHA-256 of the raw key for lookup; the Argon2 hash of the key for verification
    api_key_lookup_hash = Column(String(64), nullable=True, unique=True)
    api_key_secret = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key_lookup_hash and self.api_key_secret)
