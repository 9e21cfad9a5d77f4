"""Rate a user message against "Getting to Yes" negotiation principles.

Plain phrase matching: "+" for principled moves (asking about interests,
inventing options, appealing to objective criteria, separating people
from the problem), "-" for positional or hostile moves (attacks,
ultimatums, threats, outbursts), "0" otherwise. A negative phrase wins
over a positive one in the same message.
"""

from app.negotiations.models import TacticRating

POSITIVE_PHRASES: dict[str, tuple[str, ...]] = {
    "interests": ("why is that important", "what's your interest", "what's the underlying need"),
    "options": ("what if we tried", "how can we both benefit", "other possibilities"),
    "criteria": ("what's a fair price", "based on market value", "independent appraisal"),
    "separation": ("let's focus on the issue", "i understand your concern", "we can work this out"),
}

NEGATIVE_PHRASES: dict[str, tuple[str, ...]] = {
    "attack": ("you're wrong", "you always do this", "that's a ridiculous idea"),
    "position": ("my final offer", "take it or leave it", "i won't budge"),
    "threat": ("if you don't", "i'll walk away", "you'll regret this"),
    "outburst": ("i'm furious", "this is unacceptable", "i'm done with this"),
}


def _normalise(text: str) -> str:
    # Voice transcripts often come back with typographic apostrophes
    return text.lower().replace("’", "'")


def _contains_any(text: str, groups: dict[str, tuple[str, ...]]) -> bool:
    return any(phrase in text for phrases in groups.values() for phrase in phrases)


def classify_tactic(message: str) -> TacticRating:
    if not message:
        return "0"
    text = _normalise(message)
    if _contains_any(text, NEGATIVE_PHRASES):
        return "-"
    if _contains_any(text, POSITIVE_PHRASES):
        return "+"
    return "0"
