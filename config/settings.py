"""
Configuration Settings for the Feed Sync Client

This module centralizes all configuration settings for the client,
including environment variables, backend endpoints, and application constants.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Determine the application root directory
APP_ROOT = Path(__file__).resolve().parent.parent

# Load environment variables from .env file
load_dotenv(dotenv_path=os.path.join(APP_ROOT, '.env'))

# =============================================================================
# Backend (Nhost) Settings
# =============================================================================

NHOST_SUBDOMAIN = os.getenv("NHOST_SUBDOMAIN", "")
NHOST_REGION = os.getenv("NHOST_REGION", "")

# Explicit URLs win over the subdomain/region pair (useful for local dev stacks)
NHOST_GRAPHQL_URL = os.getenv("NHOST_GRAPHQL_URL") or (
    f"https://{NHOST_SUBDOMAIN}.graphql.{NHOST_REGION}.nhost.run/v1"
    if NHOST_SUBDOMAIN and NHOST_REGION else ""
)
NHOST_AUTH_URL = os.getenv("NHOST_AUTH_URL") or (
    f"https://{NHOST_SUBDOMAIN}.auth.{NHOST_REGION}.nhost.run/v1"
    if NHOST_SUBDOMAIN and NHOST_REGION else ""
)

REQUEST_TIMEOUT = int(os.getenv("REQUEST_TIMEOUT", "15"))   # Seconds per backend HTTP call

# Optional credentials used by the CLI
FEED_EMAIL = os.getenv("FEED_EMAIL")
FEED_PASSWORD = os.getenv("FEED_PASSWORD")

# =============================================================================
# AI Model Settings
# =============================================================================

GOOGLE_AI_API_KEY = os.getenv("GOOGLE_AI_API_KEY") or os.getenv("API_KEY")
GEMINI_MODEL_NAME = os.getenv("GEMINI_MODEL_NAME", "gemini-2.5-flash")

# Preference order used when the configured model is not listed by the API
DEFAULT_AI_MODELS = [
    'gemini-2.5-flash',
    'gemini-2.0-flash',
    'gemini-2.0-flash-lite',
]

POST_CHARACTER_LIMIT = 280           # Requested length for generated posts
COMMENT_CHARACTER_LIMIT = 150        # Requested length for generated comments

# =============================================================================
# Display Defaults
# =============================================================================

DEFAULT_USER_AVATAR = "https://picsum.photos/seed/defaultuser/200/200"
SIGNUP_AVATAR_TEMPLATE = "https://picsum.photos/seed/{username}/200/200"

# =============================================================================
# Bot Assist Settings
# =============================================================================

WELCOME_POST_DELAY = 3.0             # Seconds after login before the welcome post
FOLLOW_UP_COMMENT_CHANCE = 0.15      # Probability of a bot follow-up after a comment
FOLLOW_UP_BASE_DELAY = 2.0           # Seconds
FOLLOW_UP_JITTER = 3.0               # Extra random seconds on top of the base delay

# Personas used to theme the welcome post
BOT_PROFILES = [
    {
        "id": "bot_tech_guru",
        "displayName": "Tech Guru",
        "actualUsername": "techguru",
        "avatarUrl": "https://picsum.photos/seed/techguru/200/200",
        "isBot": True,
    },
    {
        "id": "bot_foodie_fan",
        "displayName": "Foodie Fan",
        "actualUsername": "foodiefan",
        "avatarUrl": "https://picsum.photos/seed/foodiefan/200/200",
        "isBot": True,
    },
    {
        "id": "bot_travel_bug",
        "displayName": "Travel Bug",
        "actualUsername": "travelbug",
        "avatarUrl": "https://picsum.photos/seed/travelbug/200/200",
        "isBot": True,
    },
]


def validate_settings():
    """Validate settings; see config.validators.validate_settings."""
    from config.validators import validate_settings as _validate
    return _validate()


def get_config_summary() -> dict:
    """Summary of the current configuration; see config.validators."""
    from config.validators import get_config_summary as _summary
    return _summary()
