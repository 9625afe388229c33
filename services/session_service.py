"""
Session Service Module

Connects the auth provider to the feed synchronizer: a successful sign-in or
sign-up starts a session (viewer mapped, feed loaded, welcome evaluated) and
sign-out ends it. Auth failures become the state's user-visible message.
"""

from typing import Optional

from config import settings
from data.mapper import map_viewer
from data.models import Identity
from services.feed_service import FeedSynchronizer
from services.protocols import AuthProvider
from services.results import AuthResult
from utils.logger import get_logger

logger = get_logger(__name__)

SIGNUP_FIELDS_REQUIRED = "App Username and Name are required for sign up."


class SessionService:
    """Sign-in, sign-up and sign-out on behalf of the presentation layer."""

    def __init__(self, auth: AuthProvider, feed: FeedSynchronizer):
        self.auth = auth
        self.feed = feed

    def _start(self) -> Optional[Identity]:
        viewer = map_viewer(self.auth.user)
        if viewer is None:
            logger.warning("Authenticated session has no user payload")
            self.feed.end_session()
            return None
        self.feed.start_session(viewer)
        return viewer

    def restore(self) -> Optional[Identity]:
        """Adopt an already-authenticated provider session, if any."""
        if self.auth.is_loading or not self.auth.is_authenticated:
            self.feed.end_session()
            return None
        return self._start()

    def _finish(self, result: AuthResult, fallback: str) -> bool:
        if not result.ok:
            self.feed.set_message(result.error or fallback)
            return False
        return self._start() is not None

    def sign_in(self, email: str, password: str) -> bool:
        """
        Sign in and start the session.

        Returns:
            bool: True if a viewer is now signed in.
        """
        self.feed.set_message(None)
        return self._finish(self.auth.sign_in(email, password), "Authentication failed.")

    def sign_up(self, email: str, password: str, display_name: str, username: str) -> bool:
        """
        Create an account with the app username stored in metadata.

        Returns:
            bool: True if a viewer is now signed in.
        """
        self.feed.set_message(None)
        display_name = (display_name or "").strip()
        username = (username or "").strip()
        if not username or not display_name:
            self.feed.set_message(SIGNUP_FIELDS_REQUIRED)
            return False

        metadata = {
            "actualUsername": username,
            "avatarUrl": settings.SIGNUP_AVATAR_TEMPLATE.format(username=username),
            "isBot": False,
        }
        result = self.auth.sign_up(email, password, display_name, metadata)
        return self._finish(result, "Authentication failed.")

    def sign_out(self) -> bool:
        """End the session; on provider failure the viewer stays signed in."""
        result = self.auth.sign_out()
        if not result.ok:
            self.feed.set_message(result.error or "Logout failed.")
            return False
        self.feed.end_session()
        return True
