from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from starlette.status import HTTP_201_CREATED

from app.dependencies import get_session_store
from app.exceptions import (
    CarNotFoundError,
    PersonaNotFoundError,
    SessionClosedError,
    SessionNotFoundError,
)
from app.negotiations.models import (
    NegotiationFeedback,
    NudgeRequest,
    SessionState,
    StartNegotiationRequest,
    TurnRequest,
    TurnResponse,
)
from app.negotiations.service import (
    end_negotiation,
    nudge,
    start_negotiation,
    submit_turn,
    to_state,
)
from app.negotiations.store import SessionStore
from app.offers.models import Offer, ParseRequest
from app.offers.parser import parse_offer

router = APIRouter(prefix="/api/negotiations", tags=["negotiations"])


@router.post("/parse", response_model=Offer)
async def parse(request: ParseRequest):
    """Show what the parser extracts from a message, without negotiating."""
    return parse_offer(request.message)


@router.post("", response_model=SessionState, status_code=HTTP_201_CREATED)
async def start(
    request: StartNegotiationRequest,
    store: SessionStore = Depends(get_session_store),
):
    """Start a negotiation over a catalogue car against the chosen persona.

    Flow:
    1. Resolve the persona → 404 if unknown
    2. Look up the car's market data → 404 if not in the catalogue
    3. Open a session with the starting score and the persona's opening line
    """
    try:
        session = await start_negotiation(store, request)
    except PersonaNotFoundError:
        raise HTTPException(status_code=404, detail="Persona not found")
    except CarNotFoundError:
        raise HTTPException(status_code=404, detail="Car not found")
    return to_state(session)


@router.get("/{session_id}", response_model=SessionState)
async def get_state(session_id: str, store: SessionStore = Depends(get_session_store)):
    try:
        return to_state(store.get(session_id))
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Negotiation not found")


@router.post("/{session_id}/turns", response_model=TurnResponse)
async def take_turn(
    session_id: str,
    request: TurnRequest,
    store: SessionStore = Depends(get_session_store),
):
    """Evaluate one user message.

    Returns the persona's decision, the rationale, any counter offer, a
    scripted reply and the updated score. The caller may hand the context
    to its own dialogue generator instead of using the scripted reply.
    """
    try:
        return submit_turn(store, session_id, request.message, request.time_remaining)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Negotiation not found")
    except SessionClosedError as exc:
        raise HTTPException(status_code=409, detail=exc.message)


@router.post("/{session_id}/nudge", response_model=Optional[TurnResponse])
async def timer_nudge(
    session_id: str,
    request: NudgeRequest,
    store: SessionStore = Depends(get_session_store),
):
    """Timer tick. Returns a Nudge turn when a patience threshold is crossed, else null."""
    try:
        return nudge(store, session_id, request.time_remaining)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Negotiation not found")
    except SessionClosedError as exc:
        raise HTTPException(status_code=409, detail=exc.message)


@router.post("/{session_id}/end", response_model=NegotiationFeedback)
async def end(session_id: str, store: SessionStore = Depends(get_session_store)):
    """End the negotiation and return the feedback summary. The session is discarded."""
    try:
        return end_negotiation(store, session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Negotiation not found")
