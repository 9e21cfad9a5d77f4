"""Scripted persona-voiced replies.

Stands in for the external dialogue generator: given the evaluator's
decision it produces a line in the persona's voice. Topic keywords in the
user's message ("price", "think", "compare") take priority over the
decision line on counters and rejections, the way a salesman answers the
objection before restating his terms.
Line choice is keyed on the turn number, so a given turn always renders
the same text.
"""

from typing import Optional

from app.cars.models import PricedCar
from app.negotiations.models import Decision, NegotiationTurnResult
from app.personas.models import PersonaProfile

# Keywords that route a message to a topic reply
_TOPIC_KEYWORDS: dict[str, tuple[str, ...]] = {
    "price": ("price", "expensive", "cost"),
    "hesitation": ("think", "consider", "decide"),
    "shopping": ("other", "compare", "shop"),
}

_TOPIC_LINES: dict[str, dict[str, str]] = {
    "genghis_khan": {
        "price": "The price reflects this vehicle's power to conquer highways! I do not negotiate with those who question the value of victory!",
        "hesitation": "Warriors do not hesitate when opportunity presents itself! While you ponder, three other buyers circle like vultures!",
        "shopping": "You may ride to distant dealerships as my scouts once rode distant lands. You will find only inferior steeds!",
    },
    "benjamin_franklin": {
        "price": "A penny saved is a penny earned, my friend. Let us discuss how we might find a price agreeable to both our purses.",
        "hesitation": "Take your time, for haste makes waste. A well-considered decision benefits all.",
        "shopping": "Comparison is the thief of joy, but also a path to wisdom. Yet, I believe you'll find our offer quite reasonable.",
    },
    "john_d_rockefeller": {
        "price": "Price is arithmetic, not opinion. Show me the figures that justify yours.",
        "hesitation": "Deliberate if you must. The market will not wait for you, and neither will I.",
        "shopping": "Compare all you like. I have already priced every competitor on this street.",
    },
}

_DECISION_LINES: dict[str, dict[Decision, list[str]]] = {
    "genghis_khan": {
        Decision.ACCEPT: [
            "You bargain like a warrior! The steed is yours.",
            "So be it. The Khan accepts your tribute.",
        ],
        Decision.COUNTER: [
            "Bold, but not bold enough. Here are the Khan's terms.",
            "You test my patience. Meet these terms or leave my lands.",
        ],
        Decision.REJECT: [
            "You insult the Khan! Such an offer is fit only for a mule.",
            "Empires were not built on offers like that. Begone, or come back with real gold!",
        ],
        Decision.NUDGE: [
            "The sun sets on your indecision. Speak your offer!",
            "My horsemen grow restless. Name your price or ride away!",
        ],
    },
    "benjamin_franklin": {
        Decision.ACCEPT: [
            "A bargain well struck benefits us both. We have a deal, my friend.",
            "Well said, and well offered. Let us shake hands on it.",
        ],
        Decision.COUNTER: [
            "We are close, I think. Allow me to propose a small amendment.",
            "Reasonable men meet in the middle. Consider these terms.",
        ],
        Decision.REJECT: [
            "I fear that offer would leave my purse lighter than my conscience allows.",
            "Alas, we are too far apart for now. Perhaps reconsider the figure?",
        ],
        Decision.NUDGE: [
            "Lost time is never found again. Shall we settle on something?",
            "The clock ticks, friend. What figure would you propose?",
        ],
    },
    "john_d_rockefeller": {
        Decision.ACCEPT: [
            "The numbers work. Sign here.",
            "Acceptable. I'll have the papers drawn up.",
        ],
        Decision.COUNTER: [
            "Your figure is inefficient. These are the terms that clear.",
            "Close, but the margin is wrong. Here is my counter.",
        ],
        Decision.REJECT: [
            "That offer doesn't survive a glance at the ledger. No.",
            "I don't lose money to make friends. Rejected.",
        ],
        Decision.NUDGE: [
            "Time is capital and you are spending mine. Make an offer.",
            "Every minute you wait, the terms get worse for you.",
        ],
    },
}

_FALLBACK_LINE = "I hear you. Tell me what you're prepared to offer."


def _match_topic(message: str) -> Optional[str]:
    lowered = message.lower()
    for topic, keywords in _TOPIC_KEYWORDS.items():
        if any(keyword in lowered for keyword in keywords):
            return topic
    return None


def _format_counter(result: NegotiationTurnResult) -> str:
    counter = result.counter_offer
    parts = []
    if counter.price is not None:
        parts.append(f"${counter.price:,.0f}")
    if counter.down_payment is not None:
        parts.append(f"${counter.down_payment:,.0f} down")
    if counter.loan_term is not None:
        parts.append(f"{counter.loan_term} months")
    if counter.interest_rate is not None:
        parts.append(f"{counter.interest_rate:g}% interest")
    return ", ".join(parts)


def opening_line(persona: PersonaProfile, car: PricedCar) -> str:
    """The scripted line the persona greets the user with at session start."""
    return persona.opening_line.format(
        name=persona.name,
        title=persona.title,
        car=f"{car.year} {car.make} {car.model}",
        description=car.description,
    )


def render_reply(
    persona: PersonaProfile,
    message: str,
    result: NegotiationTurnResult,
    turn_number: int = 0,
) -> str:
    """Persona-voiced text for one turn result.

    Counter replies always spell out the counter terms, even when a topic
    line leads, so the user can see what's on the table.
    """
    decision_lines = _DECISION_LINES.get(persona.id, {}).get(result.decision)
    line = decision_lines[turn_number % len(decision_lines)] if decision_lines else _FALLBACK_LINE

    topic = None
    if result.decision in (Decision.COUNTER, Decision.REJECT):
        topic = _match_topic(message)
    if topic and topic in _TOPIC_LINES.get(persona.id, {}):
        line = _TOPIC_LINES[persona.id][topic]

    if result.decision == Decision.COUNTER:
        terms = _format_counter(result)
        if terms:
            line = f"{line} {terms}."
    return line
