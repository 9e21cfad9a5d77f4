from typing import Optional

from pydantic import BaseModel, Field


class Financing(BaseModel):
    """Financing terms attached to an offer.

    Every field is independently optional: None means the user did not
    mention that term this turn, never zero.
    """

    down_payment: Optional[float] = None  # Cash paid up front in USD
    loan_term: Optional[int] = None  # Loan length in months
    interest_rate: Optional[float] = None  # APR in percent, e.g. 4.5

    def is_empty(self) -> bool:
        return self.down_payment is None and self.loan_term is None and self.interest_rate is None


class Offer(BaseModel):
    """The terms a user proposed in one turn, as extracted by the parser."""

    price: Optional[float] = None  # Proposed vehicle price in USD
    financing: Financing = Field(default_factory=Financing)

    def is_empty(self) -> bool:
        return self.price is None and self.financing.is_empty()


class ParseRequest(BaseModel):
    """Request body for running the offer parser on its own."""

    message: str = Field(..., max_length=2000)
