from typing import Literal

from pydantic import BaseModel, Field

MarketTrend = Literal["rising", "stable", "declining"]
MarketActivity = Literal["high", "moderate", "low"]


class PricedCar(BaseModel):
    """A market-data snapshot for one vehicle.

    This is both the catalogue document shape and the API response shape.
    `price` (the dealer's asking price) is the reference price every
    persona factor is applied to.
    """

    car_id: str  # Slug, e.g. "honda-civic-2024"
    make: str  # e.g. "Honda"
    model: str  # e.g. "Civic"
    year: int
    price: float = Field(..., gt=0)  # Dealer asking price in USD
    msrp: float = Field(..., gt=0)  # Manufacturer's suggested retail price
    trade_in_value: float = Field(..., ge=0)  # What a dealer would pay for it
    private_party_value: float = Field(..., ge=0)  # Typical private sale price
    market_trend: MarketTrend = "stable"
    market_activity: MarketActivity = "moderate"
    fuel_economy: int = 28  # Combined MPG (MPGe for EVs)
    safety_rating: int = Field(4, ge=1, le=5)  # Stars
    available_listings: int = 0  # Comparable listings nearby
    description: str = ""  # Flavor text used in the persona's opening line


class CarListResponse(BaseModel):
    """Wrapper for catalogue listings returned to the client."""

    cars: list[PricedCar]
    total: int
