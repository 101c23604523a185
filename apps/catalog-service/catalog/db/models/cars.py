import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Table
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from .base import Base, now_utc


user_favorite_cars = Table(
    'user_favorite_cars',
    Base.metadata,
    Column('user_id', UUID(as_uuid=True), ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
    Column('car_id', UUID(as_uuid=True), ForeignKey('cars.id', ondelete='CASCADE'), primary_key=True),
    Index('ix_user_favorite_cars_user_id', 'user_id'),
    Index('ix_user_favorite_cars_car_id', 'car_id'),
)


class CarManufacturer(Base):
    __tablename__ = 'car_manufacturers'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False, unique=True)
    slug = Column(String(255), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc, nullable=False)

    models = relationship("CarModel", back_populates="manufacturer", passive_deletes="all")


class CarModel(Base):
    __tablename__ = 'car_models'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False, unique=True)
    slug = Column(String(255), nullable=False, unique=True)
    manufacturer_id = Column(
        UUID(as_uuid=True), ForeignKey('car_manufacturers.id', ondelete='RESTRICT'), nullable=False, index=True
    )
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc, nullable=False)

    manufacturer = relationship("CarManufacturer", back_populates="models")


class Car(Base):
    __tablename__ = 'cars'

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    year = Column(Integer, nullable=False)
    color = Column(String(100), nullable=False)
    km_driven = Column(Integer, nullable=False)
    price = Column(Integer, nullable=False)
    model_id = Column(UUID(as_uuid=True), ForeignKey('car_models.id', ondelete='RESTRICT'), nullable=False)
    created_by_id = Column(UUID(as_uuid=True), ForeignKey('users.id', ondelete='RESTRICT'), nullable=False)
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    model = relationship("CarModel", lazy="joined")

    __table_args__ = (
        Index('ix_cars_model_id', 'model_id'),
        Index('ix_cars_created_by_id', 'created_by_id'),
        Index('ix_cars_deleted_at', 'deleted_at'),
    )
