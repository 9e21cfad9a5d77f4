from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field

from app.cars.models import PricedCar
from app.offers.models import Offer
from app.personas.models import PersonaSummary

SessionStatus = Literal["active", "accepted", "rejected", "expired", "ended"]
TacticRating = Literal["+", "-", "0"]


class Decision(str, Enum):
    ACCEPT = "Accept"
    COUNTER = "Counter"
    REJECT = "Reject"
    NUDGE = "Nudge"


class CounterOffer(BaseModel):
    """Terms the persona proposes back. Only the pinned fields are set."""

    price: Optional[float] = None
    down_payment: Optional[float] = None
    loan_term: Optional[int] = None  # Months
    interest_rate: Optional[float] = None  # Percent

    def is_empty(self) -> bool:
        return all(
            value is None
            for value in (self.price, self.down_payment, self.loan_term, self.interest_rate)
        )


class NegotiationTurnResult(BaseModel):
    """What the evaluator decided about one offer.

    `context` is the human-readable rationale, built from the notes each
    evaluation step produced. It is what the dialogue generator gets
    prompted with, or what the UI shows directly.
    """

    decision: Decision
    context: str = ""
    counter_offer: CounterOffer = Field(default_factory=CounterOffer)  # Empty unless Counter


class HistoryEntry(BaseModel):
    """One exchange in a session's history. Appended, never edited."""

    user_message: str  # Raw text the user sent ("" for timer nudges)
    user_offer: Offer  # What the parser pulled out of it
    persona_response: NegotiationTurnResult
    persona_reply: str  # Persona-voiced text for the response
    score_after: int  # Running score once this turn was scored
    tactic: TacticRating = "0"  # Negotiation-style rating of the user's message


# ---------------------------------------------------------------------------
# API request / response schemas
# ---------------------------------------------------------------------------


class StartNegotiationRequest(BaseModel):
    """Request body for starting a negotiation over one car with one persona."""

    car_id: str  # Catalogue car, e.g. "honda-civic-2024"
    persona_id: str  # e.g. "genghis_khan"
    # Overrides the REJECT_IS_TERMINAL setting for this session when set
    reject_is_terminal: Optional[bool] = None


class TurnRequest(BaseModel):
    """A user message, already transcribed if it came from voice input."""

    message: str = Field(..., min_length=1, max_length=2000)
    # Seconds left on the negotiation timer; omitted means no time pressure
    time_remaining: Optional[float] = Field(None, ge=0)


class NudgeRequest(BaseModel):
    time_remaining: float = Field(..., ge=0)


class TurnResponse(BaseModel):
    """Returned after each turn so the caller can render and speak the reply."""

    session_id: str
    turn_number: int  # 1-based position of this entry in the history
    offer: Offer
    decision: Decision
    context: str
    counter_offer: CounterOffer
    reply: str
    score: int
    status: SessionStatus


class SessionState(BaseModel):
    session_id: str
    persona: PersonaSummary
    car: PricedCar
    score: int
    status: SessionStatus
    opening_line: str
    time_limit_seconds: int
    history: list[HistoryEntry]


class KeyMoment(BaseModel):
    turn: int  # 1-based
    offered_price: Optional[float] = None
    decision: Decision
    context: str
    tactic: TacticRating


class NegotiationFeedback(BaseModel):
    """End-of-negotiation summary shown on the feedback screen."""

    session_id: str
    persona_id: str
    outcome: SessionStatus
    final_score: int
    initial_score: int
    score_difference: int
    is_positive: bool  # Finished at or above the starting score
    message: str
    key_moments: list[KeyMoment]
    coaching_tips: list[str]
