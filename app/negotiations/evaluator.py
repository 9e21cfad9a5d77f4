"""Offer evaluation: decide how a persona responds to one offer.

Scoring (additive):
- Price:      +1 at or above the persona's minimum acceptable price,
              -1 below 70% of the asking price, 0 in between or when no
              price was named.
- Financing:  +0.5 / -0.5 per term the persona constrains and the user
              specified (down payment, loan term, interest rate). A failing
              term stages a counter pinning the persona's threshold.

Decision from the total:
- >= 1            -> Accept
- -0.5 .. < 1     -> Counter (price plus any staged financing terms)
- < -0.5          -> Reject, no counter

All boundaries are inclusive as written. Time pressure only changes the
wording of the context, never the decision.
"""

from typing import Optional

from app.cars.models import PricedCar
from app.exceptions import MissingCarError
from app.logging_config import get_logger
from app.negotiations.models import CounterOffer, Decision, NegotiationTurnResult
from app.offers.models import Financing, Offer
from app.personas.models import FinancingPreferences, PersonaProfile

logger = get_logger(__name__)

# Below this fraction of the asking price an offer counts as a lowball
LOWBALL_FACTOR = 0.7
# The persona counters 5% above the user's price
COUNTER_MARKUP = 1.05

ACCEPT_THRESHOLD = 1.0
REJECT_THRESHOLD = -0.5

PRICE_FAVORABLE = 1.0
PRICE_LOWBALL = -1.0
FINANCING_WEIGHT = 0.5


def _money(value: float) -> str:
    return f"${value:,.0f}"


def _evaluate_price(
    price: Optional[float],
    asking_price: float,
    min_acceptable: float,
    notes: list[str],
) -> float:
    if price is None:
        notes.append("No price was given.")
        return 0.0
    if price >= min_acceptable:
        notes.append(
            f"The offer of {_money(price)} is acceptable "
            f"(minimum acceptable price is {_money(min_acceptable)})."
        )
        return PRICE_FAVORABLE
    if price < asking_price * LOWBALL_FACTOR:
        notes.append(
            f"The offer of {_money(price)} is far below the asking price of {_money(asking_price)}."
        )
        return PRICE_LOWBALL
    notes.append(
        f"The offer of {_money(price)} is below the minimum acceptable price of "
        f"{_money(min_acceptable)} and needs improvement."
    )
    return 0.0


def _evaluate_financing(
    preferences: Optional[FinancingPreferences],
    financing: Financing,
    asking_price: float,
    notes: list[str],
    staged: dict,
) -> float:
    """Score each constrained financing term the user actually specified.

    Terms the persona doesn't constrain, or the user didn't mention,
    contribute nothing and are skipped silently.
    """
    if preferences is None:
        return 0.0

    score = 0.0

    if preferences.min_down_payment_ratio is not None and financing.down_payment is not None:
        required = round(asking_price * preferences.min_down_payment_ratio, 2)
        if financing.down_payment >= required:
            score += FINANCING_WEIGHT
            notes.append(f"A down payment of {_money(financing.down_payment)} is sufficient.")
        else:
            score -= FINANCING_WEIGHT
            staged["down_payment"] = required
            notes.append(
                f"A down payment of {_money(financing.down_payment)} is too low; "
                f"at least {_money(required)} is required."
            )

    if preferences.max_loan_term_months is not None and financing.loan_term is not None:
        if financing.loan_term <= preferences.max_loan_term_months:
            score += FINANCING_WEIGHT
            notes.append(f"A {financing.loan_term}-month loan term is acceptable.")
        else:
            score -= FINANCING_WEIGHT
            staged["loan_term"] = preferences.max_loan_term_months
            notes.append(
                f"A {financing.loan_term}-month loan term is too long; "
                f"the maximum is {preferences.max_loan_term_months} months."
            )

    if preferences.min_interest_rate is not None and financing.interest_rate is not None:
        if financing.interest_rate >= preferences.min_interest_rate:
            score += FINANCING_WEIGHT
            notes.append(f"An interest rate of {financing.interest_rate:g}% is acceptable.")
        else:
            score -= FINANCING_WEIGHT
            staged["interest_rate"] = preferences.min_interest_rate
            notes.append(
                f"An interest rate of {financing.interest_rate:g}% is too low; "
                f"the minimum is {preferences.min_interest_rate:g}%."
            )

    return score


def _time_pressure_note(persona: PersonaProfile, time_remaining: Optional[float]) -> Optional[str]:
    thresholds = persona.patience_thresholds
    if time_remaining is None or thresholds is None:
        return None
    if time_remaining <= thresholds.high:
        return "Time is almost up; the persona is issuing an ultimatum."
    if thresholds.medium is not None and time_remaining <= thresholds.medium:
        return "Time is running out; the persona is growing impatient."
    return None


def evaluate_offer(
    persona: PersonaProfile,
    offer: Offer,
    car: Optional[PricedCar],
    time_remaining: Optional[float] = None,
) -> NegotiationTurnResult:
    """Evaluate one offer against a persona's profile and the car's asking price.

    Raises MissingCarError when car is None: without a reference price
    there is nothing to evaluate against. Everything else is optional.
    """
    if car is None:
        raise MissingCarError()

    notes: list[str] = []
    staged: dict = {}

    min_acceptable = car.price * persona.min_acceptable_price_factor
    overall = _evaluate_price(offer.price, car.price, min_acceptable, notes)
    overall += _evaluate_financing(
        persona.financing_preferences, offer.financing, car.price, notes, staged
    )

    counter = CounterOffer()
    if overall >= ACCEPT_THRESHOLD:
        decision = Decision.ACCEPT
    elif overall >= REJECT_THRESHOLD:
        decision = Decision.COUNTER
        if offer.price is not None:
            counter_price = max(min_acceptable, offer.price * COUNTER_MARKUP)
        else:
            counter_price = car.price * persona.initial_offer_factor
        counter = CounterOffer(price=round(counter_price, 2), **staged)
        notes.append(f"Countering at {_money(counter.price)}.")
    else:
        decision = Decision.REJECT
        notes.append("The offer is rejected.")

    if decision != Decision.ACCEPT:
        pressure = _time_pressure_note(persona, time_remaining)
        if pressure:
            notes.append(pressure)

    logger.debug(
        "offer_evaluated",
        persona_id=persona.id,
        car_id=car.car_id,
        overall_score=overall,
        decision=decision.value,
    )
    return NegotiationTurnResult(
        decision=decision,
        context=" ".join(notes),
        counter_offer=counter,
    )
