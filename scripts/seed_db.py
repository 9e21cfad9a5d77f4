"""Seed the cars collection with priced records for the popular lineup.

Replaces all existing cars. Safe to re-run; prices are recomputed from
the market tables for the current year.

Usage: .venv/bin/python -m scripts.seed_db
"""

import asyncio

from motor.motor_asyncio import AsyncIOMotorClient

from app.cars.pricing import popular_models
from app.config import settings
from app.logging_config import configure_logging, get_logger

logger = get_logger(__name__)


async def seed():
    client = AsyncIOMotorClient(settings.MONGODB_URI)
    db = client[settings.DATABASE_NAME]

    cars = [car.model_dump() for car in popular_models()]

    await db.cars.delete_many({})  # destructive: wipes all existing cars
    result = await db.cars.insert_many(cars)
    await db.cars.create_index("car_id", unique=True)
    logger.info("cars_seeded", count=len(result.inserted_ids), database=settings.DATABASE_NAME)

    client.close()


if __name__ == "__main__":
    configure_logging()
    asyncio.run(seed())
