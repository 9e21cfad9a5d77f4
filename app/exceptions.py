"""Domain exceptions raised by the negotiation core and services.

Routers translate these into HTTP errors; the pure core only ever raises
MissingCarError (a caller precondition violation).
"""

from typing import Any, Optional


class NegotiationLegendsError(Exception):
    """Base class for domain errors. Carries a stable machine-readable code."""

    def __init__(self, message: str, code: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}


class MissingCarError(NegotiationLegendsError):
    """Raised when an offer is evaluated without a priced car to compare against."""

    def __init__(self):
        super().__init__(
            message="A priced car is required to evaluate an offer",
            code="MISSING_CAR",
        )


class PersonaNotFoundError(NegotiationLegendsError):
    def __init__(self, persona_id: str):
        super().__init__(
            message=f"Persona not found: {persona_id}",
            code="PERSONA_NOT_FOUND",
            details={"persona_id": persona_id},
        )


class CarNotFoundError(NegotiationLegendsError):
    def __init__(self, car_id: str):
        super().__init__(
            message=f"Car not found: {car_id}",
            code="CAR_NOT_FOUND",
            details={"car_id": car_id},
        )


class SessionNotFoundError(NegotiationLegendsError):
    def __init__(self, session_id: str):
        super().__init__(
            message=f"Negotiation session not found: {session_id}",
            code="SESSION_NOT_FOUND",
            details={"session_id": session_id},
        )


class SessionClosedError(NegotiationLegendsError):
    """Raised when a turn is submitted to a session that has already ended."""

    def __init__(self, session_id: str, status: str):
        super().__init__(
            message=f"Negotiation session {session_id} is no longer active (status: {status})",
            code="SESSION_CLOSED",
            details={"session_id": session_id, "status": status},
        )
