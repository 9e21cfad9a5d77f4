from typing import TYPE_CHECKING

from app.negotiations.models import KeyMoment, NegotiationFeedback

if TYPE_CHECKING:
    from app.negotiations.session import NegotiationSession


def build_feedback(session: "NegotiationSession") -> NegotiationFeedback:
    """Summarise a negotiation for the feedback screen.

    Scores are compared against where the session started; every history
    entry becomes a key moment. Coaching falls back to a generic hint
    built from the persona's style when it has no tips configured.
    """
    difference = session.score - session.initial_score
    is_positive = difference >= 0

    if is_positive:
        message = (
            f"Great job! Your final score of {session.score} is "
            f"{difference} points above your starting point."
        )
    else:
        message = (
            f"Your final score of {session.score} is "
            f"{abs(difference)} points below your starting point."
        )

    key_moments = [
        KeyMoment(
            turn=index,
            offered_price=entry.user_offer.price,
            decision=entry.persona_response.decision,
            context=entry.persona_response.context,
            tactic=entry.tactic,
        )
        for index, entry in enumerate(session.history, start=1)
    ]

    persona = session.persona
    tips = list(persona.coaching_tips) or [
        f"Consider {persona.name}'s {persona.style.replace('_', '-')} style "
        "and adjust your approach to it."
    ]

    return NegotiationFeedback(
        session_id=session.session_id,
        persona_id=persona.id,
        outcome=session.status,
        final_score=session.score,
        initial_score=session.initial_score,
        score_difference=difference,
        is_positive=is_positive,
        message=message,
        key_moments=key_moments,
        coaching_tips=tips,
    )
