from typing import Optional

from app.cars.service import get_car
from app.config import settings
from app.exceptions import CarNotFoundError
from app.negotiations.models import (
    HistoryEntry,
    NegotiationFeedback,
    SessionState,
    StartNegotiationRequest,
    TurnResponse,
)
from app.negotiations.session import NegotiationSession
from app.negotiations.store import SessionStore
from app.personas.catalog import get_persona, summarize


async def start_negotiation(store: SessionStore, request: StartNegotiationRequest) -> NegotiationSession:
    """Open a negotiation for a catalogue car against a configured persona.

    The car is looked up from the catalogue rather than taken from the
    client, so the asking price every persona factor applies to can't be
    tampered with.

    Raises PersonaNotFoundError / CarNotFoundError; in either case no
    session is created.
    """
    persona = get_persona(request.persona_id)
    car = await get_car(request.car_id)
    if car is None:
        raise CarNotFoundError(request.car_id)

    reject_is_terminal = (
        settings.REJECT_IS_TERMINAL
        if request.reject_is_terminal is None
        else request.reject_is_terminal
    )
    session = NegotiationSession.start(
        persona,
        car,
        initial_score=settings.INITIAL_SCORE,
        reject_is_terminal=reject_is_terminal,
        time_limit_seconds=settings.NEGOTIATION_DURATION_SECONDS,
    )
    return store.add(session)


def to_state(session: NegotiationSession) -> SessionState:
    return SessionState(
        session_id=session.session_id,
        persona=summarize(session.persona),
        car=session.car,
        score=session.score,
        status=session.status,
        opening_line=session.opening_line,
        time_limit_seconds=session.time_limit_seconds,
        history=list(session.history),
    )


def to_turn_response(session: NegotiationSession, entry: HistoryEntry) -> TurnResponse:
    result = entry.persona_response
    return TurnResponse(
        session_id=session.session_id,
        turn_number=len(session.history),
        offer=entry.user_offer,
        decision=result.decision,
        context=result.context,
        counter_offer=result.counter_offer,
        reply=entry.persona_reply,
        score=entry.score_after,
        status=session.status,
    )


def submit_turn(
    store: SessionStore,
    session_id: str,
    message: str,
    time_remaining: Optional[float] = None,
) -> TurnResponse:
    """Run one user message through the session and shape the result for the API."""
    session = store.get(session_id)
    entry = session.take_turn(message, time_remaining)
    return to_turn_response(session, entry)


def nudge(store: SessionStore, session_id: str, time_remaining: float) -> Optional[TurnResponse]:
    session = store.get(session_id)
    entry = session.nudge(time_remaining)
    if entry is None:
        return None
    return to_turn_response(session, entry)


def end_negotiation(store: SessionStore, session_id: str) -> NegotiationFeedback:
    """Close the session, build its feedback, and drop it from the store."""
    session = store.get(session_id)
    session.end()
    feedback = session.summary()
    store.discard(session_id)
    return feedback
