import re
from typing import Optional

from app.cars.models import PricedCar
from app.database import get_database
from app.logging_config import get_logger

logger = get_logger(__name__)


async def list_cars(make: Optional[str] = None, max_price: Optional[float] = None) -> list[PricedCar]:
    """List catalogue cars, optionally filtered by make and asking price.

    - make: case-insensitive exact match ("honda" matches "Honda").
    - max_price: only cars whose dealer asking price is at or below it.

    Sorted by asking price, cheapest first. Capped at 100 results.
    """
    db = get_database()

    query: dict = {}
    if make:
        query["make"] = {"$regex": f"^{re.escape(make.strip())}$", "$options": "i"}
    if max_price is not None:
        query["price"] = {"$lte": max_price}

    cursor = db.cars.find(query, {"_id": 0})
    results = await cursor.to_list(length=100)
    cars = [PricedCar(**doc) for doc in results]
    cars.sort(key=lambda car: car.price)
    return cars


async def get_car(car_id: str) -> Optional[PricedCar]:
    """Fetch a single priced car by car_id.

    Returns None if the catalogue doesn't have it; callers must not start
    a negotiation without a priced car.
    """
    db = get_database()
    doc = await db.cars.find_one({"car_id": car_id}, {"_id": 0})
    if not doc:
        logger.info("car_not_found", car_id=car_id)
        return None
    return PricedCar(**doc)
