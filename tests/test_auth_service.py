"""
Tests for the Nhost auth client
"""

import requests
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.auth_service import AuthService

AUTH_URL = "https://testsub.auth.eu-central-1.nhost.run/v1"

SESSION = {
    "accessToken": "access-1",
    "refreshToken": "refresh-1",
    "user": {"id": "viewer-1", "email": "vera@example.com", "displayName": "Vera Viewer",
             "avatarUrl": None, "metadata": {"actualUsername": "vera"}},
}


class TestSignIn:
    """Tests for sign-in and the resulting session state."""

    def test_sign_in_success(self, mock_requests):
        mock_requests.post.return_value = mock_requests.response(json_data={"session": SESSION})
        auth = AuthService(base_url=AUTH_URL, timeout=5)

        result = auth.sign_in("vera@example.com", "pw")

        assert result.ok is True
        assert auth.is_authenticated is True
        assert auth.is_loading is False
        assert auth.access_token == "access-1"
        assert auth.user_id == "viewer-1"
        mock_requests.post.assert_called_once_with(
            f"{AUTH_URL}/signin/email-password",
            json={"email": "vera@example.com", "password": "pw"},
            headers={"Content-Type": "application/json"},
            timeout=5,
        )

    def test_sign_in_rejected(self, mock_requests):
        mock_requests.post.return_value = mock_requests.response(
            status_code=401, json_data={"message": "Incorrect email or password"}
        )
        auth = AuthService(base_url=AUTH_URL)

        result = auth.sign_in("vera@example.com", "bad")

        assert result.ok is False
        assert result.error == "Incorrect email or password"
        assert auth.is_authenticated is False
        assert auth.user is None

    def test_network_failure(self, mock_requests):
        mock_requests.post.side_effect = requests.exceptions.ConnectionError("unreachable")
        auth = AuthService(base_url=AUTH_URL)

        result = auth.sign_in("vera@example.com", "pw")

        assert result.ok is False
        assert "unreachable" in result.error
        assert auth.is_loading is False


class TestSignUp:
    """Tests for sign-up."""

    def test_sign_up_sends_display_name_and_metadata(self, mock_requests):
        mock_requests.post.return_value = mock_requests.response(json_data={"session": SESSION})
        auth = AuthService(base_url=AUTH_URL)

        result = auth.sign_up("vera@example.com", "pw", "Vera Viewer", {"actualUsername": "vera"})

        assert result.ok is True
        body = mock_requests.post.call_args.kwargs["json"]
        assert mock_requests.post.call_args.args[0] == f"{AUTH_URL}/signup/email-password"
        assert body["options"] == {"displayName": "Vera Viewer", "metadata": {"actualUsername": "vera"}}

    def test_sign_up_without_session(self, mock_requests):
        mock_requests.post.return_value = mock_requests.response(json_data={"session": None})
        auth = AuthService(base_url=AUTH_URL)

        result = auth.sign_up("vera@example.com", "pw", "Vera", {})

        assert result.ok is False
        assert "verify" in result.error
        assert auth.is_authenticated is False


class TestSignOut:
    """Tests for sign-out."""

    def _signed_in(self, mock_requests):
        mock_requests.post.return_value = mock_requests.response(json_data={"session": SESSION})
        auth = AuthService(base_url=AUTH_URL)
        auth.sign_in("vera@example.com", "pw")
        return auth

    def test_sign_out_clears_session(self, mock_requests):
        auth = self._signed_in(mock_requests)
        mock_requests.post.return_value = mock_requests.response(json_data={})

        assert auth.sign_out().ok is True

        assert auth.is_authenticated is False
        args, kwargs = mock_requests.post.call_args
        assert args[0] == f"{AUTH_URL}/signout"
        assert kwargs["json"] == {"refreshToken": "refresh-1"}
        assert kwargs["headers"]["Authorization"] == "Bearer access-1"

    def test_sign_out_failure_keeps_session(self, mock_requests):
        auth = self._signed_in(mock_requests)
        mock_requests.post.return_value = mock_requests.response(status_code=500, json_data={})

        result = auth.sign_out()

        assert result.ok is False
        assert auth.is_authenticated is True

    def test_sign_out_without_session(self, mock_requests):
        auth = AuthService(base_url=AUTH_URL)

        assert auth.sign_out().ok is True
        mock_requests.post.assert_not_called()
