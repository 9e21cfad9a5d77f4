import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from app.exceptions import MissingCarError, SessionClosedError, SessionNotFoundError
from app.negotiations.models import Decision
from app.negotiations.session import NegotiationSession
from app.negotiations.store import SessionStore
from app.personas.catalog import BENJAMIN_FRANKLIN, GENGHIS_KHAN


def test_start_initialises_score_history_and_opening_line(persona, car):
    session = NegotiationSession.start(persona, car)
    assert session.score == 50
    assert session.history == []
    assert session.status == "active"
    assert "Test Dealer" in session.opening_line
    assert "2024 Honda Civic" in session.opening_line


def test_start_requires_a_car(persona):
    with pytest.raises(MissingCarError):
        NegotiationSession.start(persona, None)


def test_initial_score_is_clamped(persona, car):
    assert NegotiationSession(persona, car, initial_score=150).score == 100


def test_acceptable_offer_closes_session(persona, car):
    session = NegotiationSession.start(persona, car)
    entry = session.take_turn("I'll give you $28,000")

    assert entry.user_offer.price == 28000
    assert entry.persona_response.decision == Decision.ACCEPT
    assert entry.score_after == 60
    assert session.score == 60
    assert session.status == "accepted"


def test_closed_session_refuses_turns(persona, car):
    session = NegotiationSession.start(persona, car)
    session.take_turn("$29,000")
    with pytest.raises(SessionClosedError):
        session.take_turn("$30,000")
    assert len(session.history) == 1


def test_reject_keeps_negotiating_by_default(persona, car):
    session = NegotiationSession.start(persona, car)
    entry = session.take_turn("How about $15,000")
    assert entry.persona_response.decision == Decision.REJECT
    assert entry.persona_response.counter_offer.is_empty()
    assert session.score == 40
    assert session.status == "active"


def test_reject_can_be_terminal(persona, car):
    session = NegotiationSession.start(persona, car, reject_is_terminal=True)
    session.take_turn("How about $15,000")
    assert session.status == "rejected"
    with pytest.raises(SessionClosedError):
        session.take_turn("Fine, $29,000")


def test_history_is_chronological(persona, car):
    session = NegotiationSession.start(persona, car)
    messages = ["What's your best price?", "$15,000", "$24,000", "$24,000"]
    for message in messages:
        session.take_turn(message)

    assert [entry.user_message for entry in session.history] == messages
    assert [entry.persona_response.decision for entry in session.history] == [
        Decision.COUNTER,
        Decision.REJECT,
        Decision.COUNTER,
        Decision.COUNTER,
    ]
    # 50 → 48 (no price) → 38 → 36 (counter at floor above offer) → 34
    assert [entry.score_after for entry in session.history] == [48, 38, 36, 34]


def test_turn_with_no_time_left_expires(persona, car):
    session = NegotiationSession.start(persona, car)
    with pytest.raises(SessionClosedError):
        session.take_turn("$28,000", time_remaining=0)
    assert session.status == "expired"
    assert session.history == []


def test_end_and_expire_only_close_active_sessions(persona, car):
    session = NegotiationSession.start(persona, car)
    session.take_turn("$29,000")
    session.end()
    session.expire()
    assert session.status == "accepted"


def test_counter_reply_spells_out_terms(car):
    session = NegotiationSession.start(BENJAMIN_FRANKLIN, car)
    entry = session.take_turn("I could do $22,000")
    assert entry.persona_response.decision == Decision.COUNTER
    assert "$24,000" in entry.persona_reply


def test_tactic_rating_recorded(persona, car):
    session = NegotiationSession.start(persona, car)
    entry = session.take_turn("Based on market value, what's a fair price? I'd say $22,000")
    assert entry.tactic == "+"


# --- Nudges ---

def test_nudge_fires_once_per_patience_level(car):
    session = NegotiationSession.start(GENGHIS_KHAN, car)

    assert session.nudge(400) is None  # above medium (300)

    impatient = session.nudge(250)
    assert impatient.persona_response.decision == Decision.NUDGE
    assert "impatient" in impatient.persona_response.context
    assert session.nudge(200) is None  # already nudged at this level

    ultimatum = session.nudge(100)
    assert "ultimatum" in ultimatum.persona_response.context
    assert session.nudge(50) is None

    assert len(session.history) == 2
    assert session.score == 50  # nudges don't move the score


def test_nudge_without_thresholds_is_silent(persona, car):
    session = NegotiationSession.start(persona, car)
    assert session.nudge(5) is None


def test_nudge_at_zero_expires(car):
    session = NegotiationSession.start(GENGHIS_KHAN, car)
    assert session.nudge(0) is None
    assert session.status == "expired"


# --- Feedback ---

def test_summary_reports_score_change_and_moments(car):
    session = NegotiationSession.start(GENGHIS_KHAN, car)
    session.take_turn("Take it or leave it: $15,000")
    session.take_turn("$28,500")
    feedback = session.summary()

    # Khan floors at 90% ($27,000): reject then accept → 50 − 10 + 10
    assert feedback.outcome == "accepted"
    assert feedback.final_score == 50
    assert feedback.initial_score == 50
    assert feedback.score_difference == 0
    assert feedback.is_positive
    assert [moment.turn for moment in feedback.key_moments] == [1, 2]
    assert feedback.key_moments[0].offered_price == 15000
    assert feedback.key_moments[0].tactic == "-"
    assert feedback.coaching_tips == list(GENGHIS_KHAN.coaching_tips)


def test_summary_below_start_is_negative(persona, car):
    session = NegotiationSession.start(persona, car)
    session.take_turn("$10,000")
    feedback = session.summary()
    assert not feedback.is_positive
    assert "10 points below" in feedback.message
    # No configured tips → generic style hint
    assert "Test Dealer" in feedback.coaching_tips[0]


def test_store_lookup_and_discard(persona, car):
    store = SessionStore()
    session = store.add(NegotiationSession.start(persona, car))
    assert store.get(session.session_id) is session
    assert len(store) == 1

    assert store.discard(session.session_id) is session
    assert store.discard(session.session_id) is None
    with pytest.raises(SessionNotFoundError):
        store.get(session.session_id)


def test_store_clear(persona, car):
    store = SessionStore()
    store.add(NegotiationSession.start(persona, car))
    store.add(NegotiationSession.start(persona, car))
    store.clear()
    assert len(store) == 0


def test_store_keeps_closed_session_for_retention_window(persona, car, clock):
    store = SessionStore(retention_seconds=300, clock=clock)
    session = store.add(NegotiationSession.start(persona, car))
    session.take_turn("$29,000")
    assert session.status == "accepted"

    clock.advance(300)
    assert store.get(session.session_id) is session

    clock.advance(301)
    assert store.prune() == [session]
    assert len(store) == 0


def test_store_expires_abandoned_active_session(persona, car, clock):
    store = SessionStore(retention_seconds=300, clock=clock)
    session = store.add(NegotiationSession.start(persona, car, time_limit_seconds=600))

    # Idle for exactly time limit + retention: still kept
    clock.advance(900)
    assert store.prune() == []

    clock.advance(1)
    assert store.prune() == [session]
    assert session.status == "expired"


def test_concurrent_turns_are_processed_one_at_a_time(persona, car):
    session = NegotiationSession.start(persona, car)
    turns = 20
    barrier = threading.Barrier(turns)

    def submit():
        barrier.wait()
        session.take_turn("$22,000")

    with ThreadPoolExecutor(max_workers=turns) as pool:
        for future in [pool.submit(submit) for _ in range(turns)]:
            future.result()

    # Each $22,000 offer is countered above the user's price: -2 per turn
    assert len(session.history) == turns
    assert session.score == 50 - 2 * turns
    assert [entry.score_after for entry in session.history] == [
        50 - 2 * n for n in range(1, turns + 1)
    ]
