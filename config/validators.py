"""
Configuration Validation for the Feed Sync Client

This module contains configuration validation logic.
Extracted from settings.py for better separation of concerns.
"""

import logging

from utils.exceptions import ConfigurationError


def validate_settings():
    """
    Validate that all required settings are properly configured.

    Raises:
        ConfigurationError: If required settings are missing or invalid.
    """
    # Import settings here to avoid circular imports
    from config import settings

    logger = logging.getLogger(__name__)
    errors = []

    if not settings.NHOST_GRAPHQL_URL:
        errors.append("Missing GraphQL endpoint. Set NHOST_SUBDOMAIN and NHOST_REGION, or NHOST_GRAPHQL_URL.")
    if not settings.NHOST_AUTH_URL:
        errors.append("Missing auth endpoint. Set NHOST_SUBDOMAIN and NHOST_REGION, or NHOST_AUTH_URL.")

    # AI generation degrades gracefully, so a missing key is only a warning
    if not settings.GOOGLE_AI_API_KEY:
        logger.warning("GOOGLE_AI_API_KEY is not set. AI suggestions and bot content will be unavailable.")

    probability_validations = [
        ("FOLLOW_UP_COMMENT_CHANCE", settings.FOLLOW_UP_COMMENT_CHANCE),
    ]
    for name, value in probability_validations:
        if value < 0.0 or value > 1.0:
            errors.append(f"{name} must be between 0.0 and 1.0, got {value}")

    delay_settings = [
        ("WELCOME_POST_DELAY", settings.WELCOME_POST_DELAY),
        ("FOLLOW_UP_BASE_DELAY", settings.FOLLOW_UP_BASE_DELAY),
        ("FOLLOW_UP_JITTER", settings.FOLLOW_UP_JITTER),
    ]
    for name, value in delay_settings:
        if value < 0:
            errors.append(f"{name} must not be negative, got {value}")

    if settings.REQUEST_TIMEOUT <= 0:
        errors.append(f"REQUEST_TIMEOUT must be positive, got {settings.REQUEST_TIMEOUT}")

    for index, profile in enumerate(settings.BOT_PROFILES):
        if not profile.get("actualUsername"):
            errors.append(f"BOT_PROFILES[{index}] is missing 'actualUsername'")

    # Raise all errors at once
    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ConfigurationError(error_msg)

    return True


def get_config_summary() -> dict:
    """
    Returns a summary of current configuration (without sensitive values).
    Useful for logging startup state.
    """
    from config import settings

    return {
        "backend": {
            "graphql_url": settings.NHOST_GRAPHQL_URL,
            "auth_url": settings.NHOST_AUTH_URL,
        },
        "ai": {
            "configured": bool(settings.GOOGLE_AI_API_KEY),
            "model": settings.GEMINI_MODEL_NAME,
        },
        "bot_assist": {
            "personas": len(settings.BOT_PROFILES),
            "welcome_delay": settings.WELCOME_POST_DELAY,
            "follow_up_chance": f"{int(settings.FOLLOW_UP_COMMENT_CHANCE * 100)}%",
        },
    }
