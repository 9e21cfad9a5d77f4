"""Configured personas and lookup helpers.

The three historical dealers differ only in configuration: how low they
let a price go, where they open, which financing terms they insist on,
and how quickly they lose patience. Nothing in the evaluator is special
cased per persona.
"""

from app.exceptions import PersonaNotFoundError
from app.personas.models import (
    FinancingPreferences,
    PatienceThresholds,
    PersonaProfile,
    PersonaSummary,
)


GENGHIS_KHAN = PersonaProfile(
    id="genghis_khan",
    name="Genghis Khan",
    title="The Conquering Salesman",
    description=(
        "The Great Khan now rules the car lot with the same iron will "
        "that built the largest empire in history."
    ),
    style="aggressive",
    voice_id="RqYO5vKm63p7RwjA4a3y",
    stats={
        "aggression": 9,
        "dataReliance": 3,
        "patience": 2,
        "flexibility": 4,
        "emotionalAppeal": 1,
        "riskTolerance": 8,
    },
    # Barely gives ground and opens close to sticker
    min_acceptable_price_factor=0.9,
    initial_offer_factor=0.98,
    financing_preferences=FinancingPreferences(
        min_down_payment_ratio=0.2,
        max_loan_term_months=48,
    ),
    # Low patience: impatient with five minutes left, ultimatums at two
    patience_thresholds=PatienceThresholds(medium=300, high=120),
    opening_line=(
        "I am {name}, {title}. You have entered my domain. "
        "You show interest in {description}"
    ),
    coaching_tips=[
        "The Khan respects strength: anchor with a firm, specific number instead of asking what he'll take.",
        "Don't bluff about walking away unless you mean it. He calls bluffs.",
        "Bring a larger down payment; he counts cash on the table as tribute.",
        "He loses patience fast, so put your best structured offer forward early.",
    ],
)

BENJAMIN_FRANKLIN = PersonaProfile(
    id="benjamin_franklin",
    name="Benjamin Franklin",
    title="The Diplomatic Dealer",
    description="Master of charm and persuasion, uses wit and wisdom to close deals.",
    style="diplomatic",
    voice_id="LVWu6fUcVpyUDlzDrQ8u",
    stats={
        "diplomacy": 8,
        "patience": 9,
        "wit": 10,
        "flexibility": 7,
        "emotionalAppeal": 8,
        "riskTolerance": 3,
    },
    min_acceptable_price_factor=0.8,
    initial_offer_factor=0.9,
    financing_preferences=FinancingPreferences(max_loan_term_months=72),
    patience_thresholds=PatienceThresholds(medium=60, high=20),
    opening_line=(
        "Good day! I am {name}, {title}. A fine choice, the {car}. "
        "Let us reason together about a price agreeable to both our purses."
    ),
    coaching_tips=[
        "Franklin rewards reasoning: cite market value and fair standards to justify your number.",
        "He is patient, so you can afford to move in small, well-explained steps.",
        "Keep the tone cordial. Attacks on his character cost you more than a high price would.",
    ],
)

JOHN_D_ROCKEFELLER = PersonaProfile(
    id="john_d_rockefeller",
    name="John D. Rockefeller",
    title="The Ruthless Businessman",
    description="Calculates every move, dominates through data and strategic thinking.",
    style="data_driven",
    voice_id="MijWJwalV0YTI5cNnz0a",
    stats={
        "strategy": 10,
        "dataFocus": 9,
        "patience": 7,
        "flexibility": 5,
        "emotionalAppeal": 2,
        "riskTolerance": 9,
    },
    min_acceptable_price_factor=0.85,
    initial_offer_factor=0.95,
    financing_preferences=FinancingPreferences(
        min_down_payment_ratio=0.15,
        max_loan_term_months=60,
        min_interest_rate=4.5,
    ),
    patience_thresholds=PatienceThresholds(medium=120, high=45),
    opening_line=(
        "{name}. {title}. I've run the numbers on the {car} already. "
        "Make me an offer the figures can support."
    ),
    coaching_tips=[
        "Rockefeller negotiates the whole deal: structure the financing, not just the price.",
        "Quote trade-in and private party values; he only moves for data.",
        "Keep loan terms at or under five years and don't ask for a rate below his floor.",
    ],
)

PERSONAS: dict[str, PersonaProfile] = {
    persona.id: persona
    for persona in (GENGHIS_KHAN, BENJAMIN_FRANKLIN, JOHN_D_ROCKEFELLER)
}


def list_personas() -> list[PersonaProfile]:
    return list(PERSONAS.values())


def get_persona(persona_id: str) -> PersonaProfile:
    """Look up a persona by id, raising PersonaNotFoundError if unknown."""
    persona = PERSONAS.get(persona_id)
    if persona is None:
        raise PersonaNotFoundError(persona_id)
    return persona


def summarize(persona: PersonaProfile) -> PersonaSummary:
    return PersonaSummary(
        id=persona.id,
        name=persona.name,
        title=persona.title,
        description=persona.description,
        style=persona.style,
        stats=dict(persona.stats),
    )
