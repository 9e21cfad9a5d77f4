import pytest
from pydantic import ValidationError

from app.exceptions import PersonaNotFoundError
from app.negotiations.models import CounterOffer, Decision, NegotiationTurnResult
from app.personas.catalog import (
    BENJAMIN_FRANKLIN,
    GENGHIS_KHAN,
    JOHN_D_ROCKEFELLER,
    get_persona,
    list_personas,
)
from app.personas.dialogue import opening_line, render_reply


class TestCatalog:
    def test_three_personas(self):
        ids = [persona.id for persona in list_personas()]
        assert ids == ["genghis_khan", "benjamin_franklin", "john_d_rockefeller"]

    def test_get_persona(self):
        assert get_persona("benjamin_franklin") is BENJAMIN_FRANKLIN

    def test_unknown_persona_raises(self):
        with pytest.raises(PersonaNotFoundError):
            get_persona("napoleon")

    def test_styles_are_distinct(self):
        assert {p.style for p in list_personas()} == {"aggressive", "diplomatic", "data_driven"}

    def test_aggressive_persona_is_toughest_on_price(self):
        assert GENGHIS_KHAN.min_acceptable_price_factor > JOHN_D_ROCKEFELLER.min_acceptable_price_factor
        assert JOHN_D_ROCKEFELLER.min_acceptable_price_factor > BENJAMIN_FRANKLIN.min_acceptable_price_factor

    def test_profiles_are_immutable(self):
        with pytest.raises(ValidationError):
            GENGHIS_KHAN.min_acceptable_price_factor = 0.1


class TestDialogue:
    def test_opening_line_uses_car_description(self, car):
        line = opening_line(GENGHIS_KHAN, car)
        assert line.startswith("I am Genghis Khan, The Conquering Salesman.")
        assert car.description in line

    def test_reply_is_deterministic_per_turn(self):
        result = NegotiationTurnResult(decision=Decision.ACCEPT)
        first = render_reply(BENJAMIN_FRANKLIN, "$28,000", result, turn_number=3)
        again = render_reply(BENJAMIN_FRANKLIN, "$28,000", result, turn_number=3)
        assert first == again

    def test_price_objection_gets_topic_reply(self):
        result = NegotiationTurnResult(
            decision=Decision.COUNTER,
            counter_offer=CounterOffer(price=27000),
        )
        reply = render_reply(GENGHIS_KHAN, "That's too expensive, $20,000", result)
        assert "conquer highways" in reply
        assert reply.endswith("$27,000.")

    def test_counter_reply_lists_financing_terms(self):
        result = NegotiationTurnResult(
            decision=Decision.COUNTER,
            counter_offer=CounterOffer(price=29400, down_payment=4500, loan_term=60, interest_rate=4.5),
        )
        reply = render_reply(JOHN_D_ROCKEFELLER, "$28,000", result)
        assert "$29,400, $4,500 down, 60 months, 4.5% interest." in reply

    def test_accept_ignores_topic_keywords(self):
        result = NegotiationTurnResult(decision=Decision.ACCEPT)
        reply = render_reply(GENGHIS_KHAN, "Fine, that price works", result)
        assert "conquer highways" not in reply

    def test_unknown_persona_falls_back(self, persona):
        result = NegotiationTurnResult(decision=Decision.REJECT)
        assert render_reply(persona, "$1", result) == "I hear you. Tell me what you're prepared to offer."
