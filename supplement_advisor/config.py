"""
Configuration module for the Supplement Advisor backend.

Loads environment variables and validates required settings.
"""
import os
from typing import List
from dotenv import load_dotenv

# Load .env file
load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() == "true"


class Settings:
    """Application settings loaded from environment variables."""

    # Google Gemini API (direct model backend)
    GOOGLE_API_KEY: str = os.getenv("GOOGLE_API_KEY", "")
    LLM_MODEL: str = os.getenv("LLM_MODEL", "gemini-2.5-flash")

    # Which live backend serves recommendations: "gemini" or "proxy"
    RECOMMENDATION_BACKEND: str = os.getenv("RECOMMENDATION_BACKEND", "gemini")

    # Intermediary recommendation backend (proxy variant)
    RECOMMENDATION_BACKEND_URL: str = os.getenv("RECOMMENDATION_BACKEND_URL", "")
    RECOMMENDATION_BACKEND_PATH: str = os.getenv(
        "RECOMMENDATION_BACKEND_PATH", "/health/recommend"
    )

    # Bypass every live call and use the rule-based generator
    USE_MOCK_API: bool = _env_flag("USE_MOCK_API")

    # Fetch policy
    LLM_TIMEOUT_SECONDS: float = float(os.getenv("LLM_TIMEOUT_SECONDS", "60"))
    LLM_MAX_RETRIES: int = int(os.getenv("LLM_MAX_RETRIES", "2"))

    # Application Settings
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS Settings (only read in production, see main._get_cors_origins)
    CORS_ALLOWED_ORIGINS: List[str] = [
        origin.strip()
        for origin in os.getenv("CORS_ALLOWED_ORIGINS", "").split(",")
        if origin.strip()
    ]

    @classmethod
    def has_google_api_key(cls) -> bool:
        """
        Check whether a usable Gemini API key is configured.

        Copy-pasted example values from .env.example (anything containing
        "your_api") count as missing.
        """
        key = cls.GOOGLE_API_KEY.strip()
        return bool(key) and "your_api" not in key.lower()

    @classmethod
    def validate(cls) -> None:
        """
        Validate that the selected live backend is configured.

        Raises:
            ValueError: If the selected backend is unknown or missing its
                credential while mock mode is off.
        """
        backend = cls.RECOMMENDATION_BACKEND.lower()
        if backend not in ("gemini", "proxy"):
            raise ValueError(
                f"Unknown RECOMMENDATION_BACKEND '{cls.RECOMMENDATION_BACKEND}'. "
                "Expected 'gemini' or 'proxy'."
            )

        if cls.USE_MOCK_API:
            return

        missing = []
        if backend == "gemini" and not cls.has_google_api_key():
            missing.append("GOOGLE_API_KEY")
        if backend == "proxy" and not cls.RECOMMENDATION_BACKEND_URL:
            missing.append("RECOMMENDATION_BACKEND_URL")

        if missing:
            raise ValueError(
                f"Missing required environment variables: {', '.join(missing)}. "
                "Set them in your .env file or use USE_MOCK_API=true."
            )

    @classmethod
    def is_production(cls) -> bool:
        """Check if running in production environment."""
        return cls.ENVIRONMENT.lower() == "production"

    @classmethod
    def is_development(cls) -> bool:
        """Check if running in development environment."""
        return cls.ENVIRONMENT.lower() == "development"


# Create a singleton instance
settings = Settings()

# Validate settings on module import (will fail fast if misconfigured)
# Skip validation during tests or when importing for introspection
if os.getenv("VALIDATE_CONFIG", "true").lower() == "true":
    try:
        settings.validate()
    except ValueError as e:
        # Outside production a missing key just means mock mode
        if not settings.is_production():
            print(f"⚠️  Warning: {e}")
            print("   Recommendations will be served in mock mode until you configure your .env file.")
        else:
            raise
