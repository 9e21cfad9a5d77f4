"""MongoDB connection lifecycle for the car catalogue.

Uses a module-level singleton client. Call connect_db() at app startup
(via the FastAPI lifespan) before using get_database(). Negotiation
sessions are never written here; only priced cars live in the database.
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from app.config import settings
from app.logging_config import get_logger

logger = get_logger(__name__)

client: Optional[AsyncIOMotorClient] = None


def get_database() -> AsyncIOMotorDatabase:
    if client is None:
        raise RuntimeError("Database client is not initialized. Call connect_db() first.")
    return client[settings.DATABASE_NAME]


async def connect_db() -> None:
    global client
    client = AsyncIOMotorClient(settings.MONGODB_URI)
    logger.info("database_connected", database=settings.DATABASE_NAME)


async def ensure_indexes() -> None:
    """car_id is the catalogue's lookup key; keep it unique."""
    db = get_database()
    await db.cars.create_index("car_id", unique=True)


async def disconnect_db() -> None:
    global client
    if client:
        client.close()
        client = None
        logger.info("database_disconnected")
