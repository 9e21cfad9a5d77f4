"""Pattern-based extraction of offer terms from a free-text message.

One pure function per field. Each scans the message independently and
takes the first match, so "25000 at 5%, 6000 down" yields a price of
25000, a rate of 5 and a down payment of 6000 without any attempt to
work out which number the user "meant". This is a heuristic, not NLU:
anything that doesn't match resolves to None and nothing ever raises.
"""

import math
import re
from typing import Optional

from app.offers.models import Financing, Offer


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

# Digit groups with thousands separators ("25,000") tried before plain
# digits ("25000"); both accept two-decimal cents.
_AMOUNT = r"\d{1,3}(?:,\d{3})+(?:\.\d{2})?|\d+(?:\.\d{2})?"

# "k" multiplier only when it ends the word, so "5 kids" isn't 5000.
_K_SUFFIX = r"(?P<k>k\b)?"

_PRICE_PATTERN = re.compile(rf"\$?(?P<amount>{_AMOUNT}){_K_SUFFIX}", re.IGNORECASE)

_DOWN_PAYMENT_PATTERNS = [
    # "down payment of $5,000"
    re.compile(rf"down\s+payment\s+of\s+\$?(?P<amount>{_AMOUNT}){_K_SUFFIX}", re.IGNORECASE),
    # "5000 down", "5k down"
    re.compile(rf"\$?(?P<amount>{_AMOUNT}){_K_SUFFIX}\s+down\b", re.IGNORECASE),
]

_LOAN_TERM_PATTERN = re.compile(
    r"(?P<amount>\d+(?:\.\d+)?)\s*-?\s*(?P<unit>months?|years?)\b", re.IGNORECASE
)

_INTEREST_RATE_PATTERN = re.compile(
    r"(?P<amount>\d+(?:\.\d+)?)\s*(?:%|percent\b)", re.IGNORECASE
)


def _to_number(raw: str, thousands: bool = False) -> Optional[float]:
    """Strip currency formatting and convert; None for anything non-numeric."""
    cleaned = raw.replace("$", "").replace(",", "").strip()
    try:
        value = float(cleaned)
    except ValueError:
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value * 1000 if thousands else value


# ---------------------------------------------------------------------------
# Field parsers
# ---------------------------------------------------------------------------


def parse_price(text: Optional[str]) -> Optional[float]:
    """First currency-like amount in the text, e.g. "$25,000" or "25k"."""
    if not text:
        return None
    match = _PRICE_PATTERN.search(text)
    if not match:
        return None
    return _to_number(match.group("amount"), thousands=bool(match.group("k")))


def parse_down_payment(text: Optional[str]) -> Optional[float]:
    """Down payment from "down payment of N" or "N down"."""
    if not text:
        return None
    for pattern in _DOWN_PAYMENT_PATTERNS:
        match = pattern.search(text)
        if match:
            return _to_number(match.group("amount"), thousands=bool(match.group("k")))
    return None


def parse_loan_term(text: Optional[str]) -> Optional[int]:
    """Loan term in months; "5 years" becomes 60."""
    if not text:
        return None
    match = _LOAN_TERM_PATTERN.search(text)
    if not match:
        return None
    value = _to_number(match.group("amount"))
    if value is None:
        return None
    if match.group("unit").lower().startswith("year"):
        value *= 12
    return int(round(value))


def parse_interest_rate(text: Optional[str]) -> Optional[float]:
    """Interest rate in percent from "4.5%" or "4.5 percent"."""
    if not text:
        return None
    match = _INTEREST_RATE_PATTERN.search(text)
    if not match:
        return None
    return _to_number(match.group("amount"))


def parse_offer(text: Optional[str]) -> Offer:
    """Run every field parser over the message and assemble an Offer."""
    return Offer(
        price=parse_price(text),
        financing=Financing(
            down_payment=parse_down_payment(text),
            loan_term=parse_loan_term(text),
            interest_rate=parse_interest_rate(text),
        ),
    )
