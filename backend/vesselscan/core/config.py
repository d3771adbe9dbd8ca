"""
Pydantic Settings — centralized configuration loaded from environment variables.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Application ───────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # ── Confidence scoring ───────────────────
    CONFIDENCE_BASE: float = 0.5
    CONFIDENCE_TEXT_BONUS: float = 0.2
    CONFIDENCE_FIELDS_BONUS: float = 0.2
    CONFIDENCE_ENTITIES_BONUS: float = 0.1
    CONFIDENCE_TEXT_LENGTH_THRESHOLD: int = 100

    # ── Field mapping ────────────────────────
    FUZZY_MIN_NAME_LENGTH: int = 3
    MIN_ENTITY_CONFIDENCE: float = 0.0

    # ── Validation ───────────────────────────
    YEAR_FUTURE_TOLERANCE: int = 2

    model_config = {"env_file": ["../.env", ".env"], "extra": "ignore"}


settings = Settings()
