"""
Auth Service Module

This module handles the Nhost authentication API: email/password sign-in,
sign-up and sign-out. It keeps the current session (access token and user
payload) in memory for the GraphQL client to use.
"""

from typing import Any, Dict, Optional

import requests

from config import settings
from services.results import AuthResult
from utils.exceptions import AuthenticationError
from utils.logger import get_logger

logger = get_logger(__name__)


class AuthService:
    """Session provider backed by the Nhost auth REST endpoints."""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[int] = None):
        """
        Initialize the auth service.

        Args:
            base_url: Auth API root, defaults to settings.NHOST_AUTH_URL
            timeout: Seconds per request, defaults to settings.REQUEST_TIMEOUT
        """
        self.base_url = (base_url or settings.NHOST_AUTH_URL).rstrip('/')
        self.timeout = timeout or settings.REQUEST_TIMEOUT
        self._session: Optional[Dict[str, Any]] = None
        self._loading = False

    # -- session state -----------------------------------------------------

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def is_authenticated(self) -> bool:
        return bool(self._session and self._session.get("accessToken"))

    @property
    def user(self) -> Optional[Dict[str, Any]]:
        return self._session.get("user") if self._session else None

    @property
    def user_id(self) -> Optional[str]:
        user = self.user
        return user.get("id") if user else None

    @property
    def access_token(self) -> Optional[str]:
        return self._session.get("accessToken") if self._session else None

    # -- operations --------------------------------------------------------

    def _post(self, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        headers = {"Content-Type": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"

        response = requests.post(f"{self.base_url}{path}", json=body,
                                 headers=headers, timeout=self.timeout)
        try:
            payload = response.json()
        except ValueError:
            payload = {}

        if not response.ok:
            message = payload.get("message") if isinstance(payload, dict) else None
            raise AuthenticationError(message or f"{response.status_code} Error")
        return payload if isinstance(payload, dict) else {}

    def _authenticate(self, path: str, body: Dict[str, Any], action: str) -> AuthResult:
        self._loading = True
        try:
            payload = self._post(path, body)
            session = payload.get("session")
            if not session:
                # Sign-up with email verification enabled returns no session
                logger.warning(f"{action} succeeded but no session was returned")
                return AuthResult.failure("No session returned. Check your email to verify the account.")

            self._session = session
            logger.info(f"{action} succeeded for {body.get('email')}")
            return AuthResult.success()

        except (requests.exceptions.RequestException, AuthenticationError) as e:
            logger.error(f"Authentication error during {action}: {e}")
            return AuthResult.failure(str(e) or "Authentication failed.")
        finally:
            self._loading = False

    def sign_in(self, email: str, password: str) -> AuthResult:
        """
        Sign in with email and password.

        Returns:
            AuthResult: ok on success, otherwise the provider's message
        """
        return self._authenticate("/signin/email-password",
                                  {"email": email, "password": password}, "Sign-in")

    def sign_up(self, email: str, password: str, display_name: str,
                metadata: Dict[str, Any]) -> AuthResult:
        """
        Create an account; the provider signs the new user in on success.

        Returns:
            AuthResult: ok on success, otherwise the provider's message
        """
        body = {
            "email": email,
            "password": password,
            "options": {"displayName": display_name, "metadata": metadata},
        }
        return self._authenticate("/signup/email-password", body, "Sign-up")

    def sign_out(self) -> AuthResult:
        """
        End the current session. On failure the session is kept and the
        viewer stays signed in.
        """
        if not self._session:
            return AuthResult.success()

        refresh_token = self._session.get("refreshToken")
        try:
            self._post("/signout", {"refreshToken": refresh_token})
        except (requests.exceptions.RequestException, AuthenticationError) as e:
            logger.error(f"Logout error: {e}")
            return AuthResult.failure(str(e) or "Logout failed.")

        self._session = None
        logger.info("Signed out")
        return AuthResult.success()
