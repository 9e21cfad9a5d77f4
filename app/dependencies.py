from app.negotiations.store import SessionStore, session_store


def get_session_store() -> SessionStore:
    """FastAPI dependency for the live-session registry; override it in tests."""
    return session_store
