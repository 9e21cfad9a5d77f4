from app.cars.pricing import (
    base_price,
    make_car_id,
    market_activity,
    market_trend,
    popular_models,
    price_car,
)


class TestBasePrice:
    def test_new_car_keeps_full_value(self):
        assert base_price("Honda", "Civic", 2024, current_year=2024) == 28000

    def test_hyphenated_model_names_resolve(self):
        assert base_price("Honda", "CR-V", 2024, current_year=2024) == 35000
        assert base_price("Ford", "F-150", 2024, current_year=2024) == 45000

    def test_depreciation_by_age(self):
        # Three years old keeps 62%
        assert base_price("Toyota", "Camry", 2021, current_year=2024) == round(32000 * 0.62)

    def test_very_old_car_floor(self):
        assert base_price("Toyota", "Camry", 2000, current_year=2024) == round(32000 * 0.35)

    def test_unknown_model_uses_default(self):
        assert base_price("Saab", "900", 2024, current_year=2024) == 35000


class TestMarketSignals:
    def test_ev_is_rising(self):
        assert market_trend("Model 3", 2024, current_year=2024) == "rising"

    def test_old_car_is_declining(self):
        assert market_trend("Civic", 2010, current_year=2024) == "declining"

    def test_recent_car_is_stable(self):
        assert market_trend("Civic", 2022, current_year=2024) == "stable"

    def test_popular_model_is_high_demand(self):
        assert market_activity("Toyota", "RAV4") == "high"

    def test_luxury_brand_is_low_demand(self):
        assert market_activity("BMW", "X5") == "low"

    def test_other_models_are_moderate(self):
        assert market_activity("Chevrolet", "Tahoe") == "moderate"


class TestPriceCar:
    def test_popular_model_prices(self):
        car = price_car("Honda", "Civic", 2024, current_year=2024)
        assert car.car_id == "honda-civic-2024"
        assert car.msrp == 28000
        assert car.price == round(28000 * 0.92 * 1.1)
        assert car.trade_in_value == round(28000 * 0.75 * 1.1)
        assert car.private_party_value == round(28000 * 0.85 * 1.1)
        assert car.safety_rating == 5
        assert car.fuel_economy == 32

    def test_luxury_msrp_premium(self):
        car = price_car("BMW", "X5", 2024, current_year=2024)
        assert car.msrp == round(68000 * 1.2)
        assert car.price == round(68000 * 0.92 * 0.9)

    def test_dealer_price_sits_between_private_party_and_msrp(self):
        car = price_car("Chevrolet", "Malibu", 2023, current_year=2024)
        assert car.private_party_value < car.price < car.msrp

    def test_pricing_is_deterministic(self):
        assert price_car("Ford", "F-150", 2022, current_year=2024) == price_car(
            "Ford", "F-150", 2022, current_year=2024
        )

    def test_car_id_slug(self):
        assert make_car_id("Tesla", "Model 3", 2024) == "tesla-model-3-2024"


def test_popular_lineup():
    cars = popular_models(current_year=2024)
    assert len(cars) == 6
    assert len({car.car_id for car in cars}) == 6
    assert all(car.price > 0 for car in cars)
