"""Initial car catalog schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2025-10-01 12:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '0001_initial_schema'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

users_role_enum = postgresql.ENUM('admin', 'user', name='users_role_enum', create_type=False)


def upgrade() -> None:
    users_role_enum.create(op.get_bind(), checkfirst=True)

    # 1) users
    op.create_table(
        'users',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('role', users_role_enum, nullable=False, server_default='user'),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('username', sa.String(length=80), nullable=False),
        sa.Column('password', sa.Text(), nullable=False),
        sa.Column('api_key_lookup_hash', sa.String(length=64), nullable=True),
        sa.Column('api_key_secret', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_users'),
        sa.UniqueConstraint('username', name='uq_users_username'),
        sa.UniqueConstraint('api_key_lookup_hash', name='uq_users_api_key_lookup_hash'),
    )

    # 2) car_manufacturers
    op.create_table(
        'car_manufacturers',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id', name='pk_car_manufacturers'),
        sa.UniqueConstraint('name', name='uq_car_manufacturers_name'),
        sa.UniqueConstraint('slug', name='uq_car_manufacturers_slug'),
    )

    # 3) car_models
    op.create_table(
        'car_models',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('manufacturer_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id', name='pk_car_models'),
        sa.UniqueConstraint('name', name='uq_car_models_name'),
        sa.UniqueConstraint('slug', name='uq_car_models_slug'),
        sa.ForeignKeyConstraint(
            ['manufacturer_id'], ['car_manufacturers.id'],
            name='fk_car_models_manufacturer_id', ondelete='RESTRICT',
        ),
    )
    op.create_index('ix_car_models_manufacturer_id', 'car_models', ['manufacturer_id'], unique=False)

    # 4) cars
    op.create_table(
        'cars',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('color', sa.String(length=100), nullable=False),
        sa.Column('km_driven', sa.Integer(), nullable=False),
        sa.Column('price', sa.Integer(), nullable=False),
        sa.Column('model_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('created_by_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id', name='pk_cars'),
        sa.ForeignKeyConstraint(['model_id'], ['car_models.id'], name='fk_cars_model_id', ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['created_by_id'], ['users.id'], name='fk_cars_created_by_id', ondelete='RESTRICT'),
    )
    op.create_index('ix_cars_model_id', 'cars', ['model_id'], unique=False)
    op.create_index('ix_cars_created_by_id', 'cars', ['created_by_id'], unique=False)
    op.create_index('ix_cars_deleted_at', 'cars', ['deleted_at'], unique=False)

    # 5) favorites join table
    op.create_table(
        'user_favorite_cars',
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('car_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.PrimaryKeyConstraint('user_id', 'car_id', name='pk_user_favorite_cars'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='fk_user_favorite_cars_user_id', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['car_id'], ['cars.id'], name='fk_user_favorite_cars_car_id', ondelete='CASCADE'),
    )
    op.create_index('ix_user_favorite_cars_user_id', 'user_favorite_cars', ['user_id'], unique=False)
    op.create_index('ix_user_favorite_cars_car_id', 'user_favorite_cars', ['car_id'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_user_favorite_cars_car_id', table_name='user_favorite_cars')
    op.drop_index('ix_user_favorite_cars_user_id', table_name='user_favorite_cars')
    op.drop_table('user_favorite_cars')
    op.drop_index('ix_cars_deleted_at', table_name='cars')
    op.drop_index('ix_cars_created_by_id', table_name='cars')
    op.drop_index('ix_cars_model_id', table_name='cars')
    op.drop_table('cars')
    op.drop_index('ix_car_models_manufacturer_id', table_name='car_models')
    op.drop_table('car_models')
    op.drop_table('car_manufacturers')
    op.drop_table('users')
    users_role_enum.drop(op.get_bind(), checkfirst=True)
