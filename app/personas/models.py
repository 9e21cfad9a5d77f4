from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class FinancingPreferences(BaseModel):
    """Financing constraints a persona enforces.

    Each field is optional; None means the persona doesn't care about that
    dimension and the evaluator skips it entirely.
    """

    model_config = ConfigDict(frozen=True)

    min_down_payment_ratio: Optional[float] = Field(None, ge=0, le=1)  # Fraction of asking price
    max_loan_term_months: Optional[int] = Field(None, gt=0)
    min_interest_rate: Optional[float] = Field(None, ge=0)  # Percent


class PatienceThresholds(BaseModel):
    """Seconds-remaining cutoffs at which the persona's tone escalates."""

    model_config = ConfigDict(frozen=True)

    medium: Optional[float] = Field(None, ge=0)  # Grows impatient at or below this
    high: float = Field(..., ge=0)  # Ultimatums at or below this


class PersonaProfile(BaseModel):
    """A configured negotiation opponent.

    Built once from the catalogue and never mutated during a session
    (the model is frozen). The numeric factors carry their defaults here
    so the evaluator never has to fall back on anything itself.
    """

    model_config = ConfigDict(frozen=True)

    id: str  # e.g. "genghis_khan"
    name: str  # Display name, e.g. "Genghis Khan"
    title: str  # e.g. "The Conquering Salesman"
    description: str = ""
    style: Literal["aggressive", "diplomatic", "data_driven"] = "diplomatic"
    voice_id: str = ""  # Voice used by the external text-to-speech service
    stats: dict[str, int] = Field(default_factory=dict)  # 0-10 flavor stats, display only

    # Fraction of the asking price below which a price counts as too low
    min_acceptable_price_factor: float = Field(0.8, gt=0)
    # Fraction of the asking price used as the opening counter when the user names no price
    initial_offer_factor: float = Field(0.9, gt=0)
    financing_preferences: Optional[FinancingPreferences] = None
    patience_thresholds: Optional[PatienceThresholds] = None

    # "{name}", "{title}", "{car}" and "{description}" are filled at session start
    opening_line: str = "I am {name}, {title}. You show interest in the {car}."
    coaching_tips: list[str] = Field(default_factory=list)


class PersonaSummary(BaseModel):
    """Public view of a persona for the selection screen."""

    id: str
    name: str
    title: str
    description: str
    style: str
    stats: dict[str, int]


class PersonaListResponse(BaseModel):
    personas: list[PersonaSummary]
    total: int
