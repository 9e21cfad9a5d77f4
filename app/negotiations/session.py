"""Per-negotiation running state and turn sequencing.

A session owns the only mutable state in a negotiation: the running
score, the history and the lifecycle status. Each turn runs
parser -> evaluator -> scorer, then appends to history, all under the
session's lock so turns are processed strictly one at a time.

Lifecycle:
- active   -> accepted  when the persona accepts an offer
- active   -> rejected  on a reject, if reject_is_terminal
- active   -> expired   when the timer reaches zero
- active   -> ended     when the user walks away
Once closed, further turns raise SessionClosedError.
"""

import threading
from typing import Optional
from uuid import uuid4

from app.cars.models import PricedCar
from app.exceptions import MissingCarError, SessionClosedError
from app.logging_config import get_logger
from app.negotiations.evaluator import evaluate_offer
from app.negotiations.feedback import build_feedback
from app.negotiations.models import (
    Decision,
    HistoryEntry,
    NegotiationFeedback,
    NegotiationTurnResult,
    SessionStatus,
)
from app.negotiations.scorer import clamp_score, update_score
from app.negotiations.tactics import classify_tactic
from app.offers.models import Offer
from app.offers.parser import parse_offer
from app.personas.dialogue import opening_line, render_reply
from app.personas.models import PersonaProfile

logger = get_logger(__name__)

DEFAULT_INITIAL_SCORE = 50
DEFAULT_TIME_LIMIT_SECONDS = 600


class NegotiationSession:
    def __init__(
        self,
        persona: PersonaProfile,
        car: Optional[PricedCar],
        *,
        session_id: Optional[str] = None,
        initial_score: int = DEFAULT_INITIAL_SCORE,
        reject_is_terminal: bool = False,
        time_limit_seconds: int = DEFAULT_TIME_LIMIT_SECONDS,
    ):
        if car is None:
            raise MissingCarError()
        self.session_id = session_id or str(uuid4())
        self.persona = persona
        self.car = car
        self.initial_score = clamp_score(initial_score)
        self.score = self.initial_score
        self.history: list[HistoryEntry] = []
        self.opening_line = opening_line(persona, car)
        self.status: SessionStatus = "active"
        self.reject_is_terminal = reject_is_terminal
        self.time_limit_seconds = time_limit_seconds
        self._nudges_sent: set[str] = set()
        self._lock = threading.Lock()

    @classmethod
    def start(cls, persona: PersonaProfile, car: Optional[PricedCar], **kwargs) -> "NegotiationSession":
        session = cls(persona, car, **kwargs)
        logger.info(
            "negotiation_started",
            session_id=session.session_id,
            persona_id=persona.id,
            car_id=session.car.car_id,
            reject_is_terminal=session.reject_is_terminal,
        )
        return session

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    def _ensure_active(self) -> None:
        if not self.is_active:
            raise SessionClosedError(self.session_id, self.status)

    def _close(self, status: SessionStatus) -> None:
        self.status = status
        logger.info(
            "negotiation_closed",
            session_id=self.session_id,
            status=status,
            score=self.score,
            turns=len(self.history),
        )

    def take_turn(self, message: str, time_remaining: Optional[float] = None) -> HistoryEntry:
        """Process one user message end to end and return the new history entry.

        A turn arriving with no time left expires the session instead of
        being evaluated.
        """
        with self._lock:
            self._ensure_active()
            if time_remaining is not None and time_remaining <= 0:
                self._close("expired")
                raise SessionClosedError(self.session_id, self.status)

            offer = parse_offer(message)
            result = evaluate_offer(self.persona, offer, self.car, time_remaining)
            self.score = update_score(self.score, offer, result, self.car)

            entry = HistoryEntry(
                user_message=message,
                user_offer=offer,
                persona_response=result,
                persona_reply=render_reply(self.persona, message, result, len(self.history)),
                score_after=self.score,
                tactic=classify_tactic(message),
            )
            self.history.append(entry)
            logger.info(
                "turn_evaluated",
                session_id=self.session_id,
                turn=len(self.history),
                decision=result.decision.value,
                score=self.score,
            )

            if result.decision == Decision.ACCEPT:
                self._close("accepted")
            elif result.decision == Decision.REJECT and self.reject_is_terminal:
                self._close("rejected")
            return entry

    def nudge(self, time_remaining: float) -> Optional[HistoryEntry]:
        """Timer tick with no user input.

        Emits a Nudge once per patience level (impatient, then ultimatum)
        as the timer crosses the persona's thresholds. Returns None when
        there is nothing to say. Reaching zero expires the session.
        """
        with self._lock:
            self._ensure_active()
            if time_remaining <= 0:
                self._close("expired")
                return None

            thresholds = self.persona.patience_thresholds
            if thresholds is None:
                return None
            if time_remaining <= thresholds.high:
                level = "ultimatum"
                context = "Time is almost up. The persona is giving an ultimatum."
            elif thresholds.medium is not None and time_remaining <= thresholds.medium:
                level = "impatient"
                context = "Time is running out. The persona is becoming impatient."
            else:
                return None
            if level in self._nudges_sent:
                return None
            self._nudges_sent.add(level)

            result = NegotiationTurnResult(decision=Decision.NUDGE, context=context)
            self.score = update_score(self.score, Offer(), result, self.car)
            entry = HistoryEntry(
                user_message="",
                user_offer=Offer(),
                persona_response=result,
                persona_reply=render_reply(self.persona, "", result, len(self.history)),
                score_after=self.score,
            )
            self.history.append(entry)
            logger.info("negotiation_nudged", session_id=self.session_id, level=level)
            return entry

    def expire(self) -> None:
        with self._lock:
            if self.is_active:
                self._close("expired")

    def end(self) -> None:
        with self._lock:
            if self.is_active:
                self._close("ended")

    def summary(self) -> NegotiationFeedback:
        with self._lock:
            return build_feedback(self)
