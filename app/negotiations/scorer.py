from typing import Optional

from app.cars.models import PricedCar
from app.negotiations.models import Decision, NegotiationTurnResult
from app.offers.models import Offer

MIN_SCORE = 0
MAX_SCORE = 100

ACCEPT_BONUS = 10
REJECT_PENALTY = 10
COUNTER_DOWN_BONUS = 5  # Persona countered below the user's own price
STAGNATION_PENALTY = 2


def clamp_score(score: float) -> int:
    return int(max(MIN_SCORE, min(MAX_SCORE, score)))


def update_score(
    current_score: float,
    user_offer: Offer,
    persona_response: NegotiationTurnResult,
    car: Optional[PricedCar] = None,
) -> int:
    """Return the running negotiation score after one turn.

    - Accept:  +10
    - Reject:  -10
    - Counter: +5 if the counter price is lower than what the user offered
               (the user talked the persona down), otherwise -2.
    - Nudge:   unchanged; the user made no move.

    Always clamped to [0, 100]. Pure: the caller stores the result.
    `car` is accepted for callers that score against market data; the
    current rules don't need it.
    """
    score = current_score
    decision = persona_response.decision

    if decision == Decision.ACCEPT:
        score += ACCEPT_BONUS
    elif decision == Decision.REJECT:
        score -= REJECT_PENALTY
    elif decision == Decision.COUNTER:
        counter_price = persona_response.counter_offer.price
        if (
            counter_price is not None
            and user_offer.price is not None
            and counter_price < user_offer.price
        ):
            score += COUNTER_DOWN_BONUS
        else:
            score -= STAGNATION_PENALTY

    return clamp_score(score)
