"""Deterministic market pricing for a make/model/year.

Produces the PricedCar records the catalogue is seeded with, and prices
arbitrary cars on demand for the quote endpoint. All figures derive from
a base-price table, an age-based depreciation curve and two market
multipliers (luxury brand, popular model).
"""

import re
from datetime import UTC, datetime
from typing import Optional

from app.cars.models import MarketActivity, MarketTrend, PricedCar


# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------

# New-car base prices in USD, keyed by normalised make then model
BASE_PRICES: dict[str, dict[str, int]] = {
    "honda": {"civic": 28000, "accord": 32000, "crv": 35000, "pilot": 42000},
    "toyota": {"camry": 32000, "corolla": 25000, "rav4": 38000, "highlander": 45000},
    "ford": {"f150": 45000, "mustang": 38000, "escape": 35000, "explorer": 42000},
    "chevrolet": {"silverado": 43000, "malibu": 28000, "equinox": 33000, "tahoe": 58000},
    "bmw": {"3series": 45000, "x3": 52000, "x5": 68000},
    "mercedes": {"cclass": 48000, "glc": 55000, "gle": 72000},
    "tesla": {"model3": 42000, "modely": 52000, "models": 85000},
}
DEFAULT_BASE_PRICE = 35000

# Value retained by age in years; anything older than 10 keeps 35%
DEPRECIATION: dict[int, float] = {
    0: 1.0, 1: 0.82, 2: 0.70, 3: 0.62, 4: 0.56, 5: 0.52,
    6: 0.48, 7: 0.45, 8: 0.42, 9: 0.40, 10: 0.38,
}
FULLY_DEPRECIATED = 0.35

LUXURY_BRANDS = {"bmw", "mercedes", "audi", "lexus", "tesla"}
POPULAR_MODELS = {"civic", "camry", "f150", "rav4", "crv"}
EV_MODELS = ("model3", "modely", "models", "modelx", "leaf", "bolt", "ioniq")

SAFETY_RATINGS = {"honda": 5, "toyota": 5, "subaru": 5, "volvo": 5, "tesla": 5, "bmw": 4, "mercedes": 4}
FUEL_ECONOMY = {"honda": 32, "toyota": 31, "tesla": 120, "ford": 28, "chevrolet": 27, "bmw": 26}

# Price multipliers applied to the depreciated base price
TRADE_IN_FACTOR = 0.75
PRIVATE_PARTY_FACTOR = 0.85
DEALER_FACTOR = 0.92

_DESCRIPTIONS = [
    "a mighty {year} {make} {model}. This mechanical steed will carry you to victory in your daily conquests!",
    "the {year} {make} {model}. Like my war horses, reliable and built for the long campaign ahead.",
    "the {year} {make} {model}, engineered for dominance! This machine commands respect on any battlefield.",
    "a formidable {year} {make} {model}! Your enemies will tremble as you approach in this war chariot.",
    "this {year} {make} {model}, a rival to the finest steeds in my imperial stable. Choose wisely, warrior!",
]

# The models the catalogue is seeded with
_POPULAR_LINEUP = [
    ("Honda", "Civic", 2024),
    ("Toyota", "Camry", 2024),
    ("Ford", "F-150", 2024),
    ("Tesla", "Model 3", 2024),
    ("Honda", "CR-V", 2024),
    ("Toyota", "RAV4", 2024),
]


def _normalise(value: str) -> str:
    """Lowercase and drop spaces/hyphens: "CR-V" becomes "crv"."""
    return re.sub(r"[\s\-]", "", value.strip().lower())


def make_car_id(make: str, model: str, year: int) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", f"{make} {model}".lower()).strip("-")
    return f"{slug}-{year}"


# ---------------------------------------------------------------------------
# Pricing rules
# ---------------------------------------------------------------------------


def base_price(make: str, model: str, year: int, current_year: int) -> int:
    """New-car price depreciated by the car's age."""
    price = BASE_PRICES.get(_normalise(make), {}).get(_normalise(model), DEFAULT_BASE_PRICE)
    age = max(current_year - year, 0)
    factor = DEPRECIATION.get(age, FULLY_DEPRECIATED)
    return round(price * factor)


def market_trend(model: str, year: int, current_year: int) -> MarketTrend:
    """EVs are rising, cars older than eight years declining, the rest stable."""
    if _normalise(model) in EV_MODELS:
        return "rising"
    if current_year - year > 8:
        return "declining"
    return "stable"


def market_activity(make: str, model: str) -> MarketActivity:
    """Popular models sell fast; luxury brands move slowly."""
    if _normalise(model) in POPULAR_MODELS:
        return "high"
    if _normalise(make) in LUXURY_BRANDS:
        return "low"
    return "moderate"


def price_car(make: str, model: str, year: int, current_year: Optional[int] = None) -> PricedCar:
    """Build a PricedCar for any make/model/year.

    Luxury brands list 20% above base MSRP but carry 10% less demand;
    popular models carry 10% more demand (popularity wins when both apply).
    Dealer, trade-in and private-party prices all scale with demand.
    """
    if current_year is None:
        current_year = datetime.now(UTC).year

    base = base_price(make, model, year, current_year)
    make_key = _normalise(make)
    model_key = _normalise(model)

    msrp_multiplier = 1.0
    demand = 1.0
    if make_key in LUXURY_BRANDS:
        msrp_multiplier = 1.2
        demand = 0.9
    if model_key in POPULAR_MODELS:
        demand = 1.1

    description = _DESCRIPTIONS[(year + len(model_key)) % len(_DESCRIPTIONS)]

    return PricedCar(
        car_id=make_car_id(make, model, year),
        make=make,
        model=model,
        year=year,
        price=round(base * DEALER_FACTOR * demand),
        msrp=round(base * msrp_multiplier),
        trade_in_value=round(base * TRADE_IN_FACTOR * demand),
        private_party_value=round(base * PRIVATE_PARTY_FACTOR * demand),
        market_trend=market_trend(model, year, current_year),
        market_activity=market_activity(make, model),
        fuel_economy=FUEL_ECONOMY.get(make_key, 28),
        safety_rating=SAFETY_RATINGS.get(make_key, 4),
        available_listings=10 + sum(ord(c) for c in make_key + model_key) % 50,
        description=description.format(year=year, make=make, model=model),
    )


def popular_models(current_year: Optional[int] = None) -> list[PricedCar]:
    """Priced records for the default lineup the catalogue is seeded with."""
    return [price_car(make, model, year, current_year) for make, model, year in _POPULAR_LINEUP]
