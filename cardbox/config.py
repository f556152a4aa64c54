from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "Cardbox"
    debug: bool = False

    database_url: str = "postgresql+asyncpg://localhost:5432/cardbox"

    # Signing key for access tokens. Must be overridden outside development.
    jwt_signing_key: str = "change-me-outside-development-0123456789"
    jwt_algorithm: str = "HS256"

    # Duration string ("1 day", "10h") or a seconds count
    access_token_expiry: str = "1 day"

    bcrypt_rounds: int = 12


settings = Settings()


# =============================================================================
# SCORE LIMITS
# =============================================================================

# Points never drop below this; a first result of either kind lands here
MIN_POINTS = 1

# Points cap, bounds review-interval growth
MAX_POINTS = 10
