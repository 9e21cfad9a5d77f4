from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    MONGODB_URI: str = "mongodb://localhost:27017"
    DATABASE_NAME: str = "negotiation_legends"
    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:8000"
    DOCS_ENABLED: bool = True

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # Negotiation defaults applied to every new session
    INITIAL_SCORE: int = 50
    NEGOTIATION_DURATION_SECONDS: int = 600
    REJECT_IS_TERMINAL: bool = False
    # How long a closed session stays readable before eviction
    SESSION_RETENTION_SECONDS: int = 300

    model_config = {"env_file": ".env"}


settings = Settings()
