"""Seed the catalog with an admin, a regular user, manufacturers, models and cars.

Safe to run repeatedly: users are matched by username, manufacturers and
models by slug, and cars are only created for a seed user that has none.
"""

from __future__ import annotations

import argparse
import logging
import sys

from catalog.db import database, models
from catalog.db.repositories import car_manufacturers as manufacturers_repo
from catalog.db.repositories import car_models as models_repo
from catalog.db.repositories import cars as cars_repo
from catalog.db.repositories import users as users_repo
from catalog.utils.security import hash_password
from catalog.utils.slugs import slugify


logger = logging.getLogger("catalog.scripts.seed")


# Access SessionLocal dynamically so test fixtures that rebind the
# sessionmaker (e.g. Postgres testcontainers) are respected.
SessionLocal = lambda: database.SessionLocal()

CATALOG = {
    "Toyota": ["Corolla", "Camry", "RAV4"],
    "Volkswagen": ["Golf", "Passat"],
    "Škoda": ["Octavia", "Superb"],
    "BMW": ["3 Series", "X5"],
}

CARS = [
    ("corolla", 2019, "White", 45_000, 15_500),
    ("golf", 2017, "Blue", 88_000, 11_900),
    ("octavia", 2021, "Grey", 23_000, 21_000),
    ("x5", 2020, "Black", 51_000, 48_000),
]


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Populate the catalog with demo data")
    parser.add_argument("--admin-username", default="admin")
    parser.add_argument("--admin-password", default="admin123")
    parser.add_argument("--user-username", default="johndoe")
    parser.add_argument("--user-password", default="user12345")
    return parser.parse_args(argv)


def ensure_user(session, username: str, password: str, first: str, last: str, role: models.Role) -> models.User | None:
    user = users_repo.get_user_by_username(session, username)
    if user is not None:
        return user
    if users_repo.username_taken(session, username):
        logger.warning(f"Username {username} belongs to a deleted account; skipping")
        return None
    user = users_repo.create_user(
        session,
        username=username,
        password_hash=hash_password(password),
        first_name=first,
        last_name=last,
        role=role,
    )
    logger.info(f"Seeded user {username} ({role.value})")
    return user


def ensure_catalog(session) -> dict[str, models.CarModel]:
    by_slug: dict[str, models.CarModel] = {}
    for manufacturer_name, model_names in CATALOG.items():
        manufacturer = manufacturers_repo.get_manufacturer_by_slug(session, slugify(manufacturer_name))
        if manufacturer is None:
            manufacturer = manufacturers_repo.create_manufacturer(
                session, name=manufacturer_name, slug=slugify(manufacturer_name)
            )
            logger.info(f"Seeded manufacturer {manufacturer_name}")
        for model_name in model_names:
            slug = slugify(model_name)
            model = models_repo.get_model_by_slug(session, slug)
            if model is None:
                model = models_repo.create_model(session, name=model_name, slug=slug, manufacturer_id=manufacturer.id)
                logger.info(f"Seeded model {manufacturer_name} {model_name}")
            by_slug[slug] = model
    return by_slug


def ensure_cars(session, owner: models.User, catalog: dict[str, models.CarModel]) -> int:
    _, existing = cars_repo.list_cars_by_creator(session, owner.id, skip=0, limit=1)
    if existing:
        return 0
    created = 0
    for model_slug, year, color, km_driven, price in CARS:
        cars_repo.create_car(
            session,
            model_id=catalog[model_slug].id,
            created_by_id=owner.id,
            year=year,
            color=color,
            km_driven=km_driven,
            price=price,
        )
        created += 1
    return created


def seed(args: argparse.Namespace) -> int:
    database.ensure_sqlite_schema()
    session = SessionLocal()
    try:
        ensure_user(session, args.admin_username, args.admin_password, "Admin", "User", models.Role.ADMIN)
        owner = ensure_user(session, args.user_username, args.user_password, "John", "Doe", models.Role.USER)
        catalog = ensure_catalog(session)
        created = ensure_cars(session, owner, catalog) if owner is not None else 0
        print(f"Seed complete; {created} car(s) created.")
        return 0
    finally:
        session.close()


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO)
    return seed(parse_args(argv))


if __name__ == "__main__":
    sys.exit(main())
