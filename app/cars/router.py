from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from app.cars.models import CarListResponse, PricedCar
from app.cars.pricing import price_car
from app.cars.service import get_car, list_cars

router = APIRouter(prefix="/api/cars", tags=["cars"])


@router.get("", response_model=CarListResponse)
async def list_catalogue(
    make: Optional[str] = Query(None),  # e.g. "Honda"
    max_price: Optional[float] = Query(None, gt=0),  # Budget ceiling in USD
):
    """List the cars available to negotiate for, cheapest first."""
    cars = await list_cars(make=make, max_price=max_price)
    return CarListResponse(cars=cars, total=len(cars))


# Declared before /{car_id} so "quote" isn't captured as an id.
@router.get("/quote", response_model=PricedCar)
async def quote(
    make: str = Query(..., min_length=1),
    model: str = Query(..., min_length=1),
    year: int = Query(..., ge=1980, le=2100),
):
    """Price any make/model/year on demand from the market tables."""
    return price_car(make, model, year)


@router.get("/{car_id}", response_model=PricedCar)
async def get_catalogue_car(car_id: str):
    """Retrieve one catalogue car with its market data."""
    car = await get_car(car_id)
    if not car:
        raise HTTPException(status_code=404, detail="Car not found")
    return car
