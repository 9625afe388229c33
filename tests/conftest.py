"""
Shared Test Fixtures for the Feed Sync Client

This module provides common fixtures used across all test modules.
Fixtures include mocks for settings and HTTP responses, data factories for
raw GraphQL records, an in-memory GraphQL backend, manual timers and a
scripted text generator.
"""

import pytest
from unittest.mock import MagicMock, patch
from typing import Optional, Dict, Any, List
import itertools
import random
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from data import queries
from services.results import GenerationResult
from utils.exceptions import QueryError


# =============================================================================
# Settings Fixtures
# =============================================================================

@pytest.fixture
def mock_settings():
    """
    Mock the settings module with test configuration values.

    This fixture patches the config.settings module with safe test values,
    preventing tests from reaching a real backend or AI provider.

    Returns:
        MagicMock: A mock settings object with default test values.
    """
    with patch('config.settings') as mock_settings_module:
        mock_settings_module.NHOST_SUBDOMAIN = "testsub"
        mock_settings_module.NHOST_REGION = "eu-central-1"
        mock_settings_module.NHOST_GRAPHQL_URL = "https://testsub.graphql.eu-central-1.nhost.run/v1"
        mock_settings_module.NHOST_AUTH_URL = "https://testsub.auth.eu-central-1.nhost.run/v1"
        mock_settings_module.REQUEST_TIMEOUT = 15

        mock_settings_module.GOOGLE_AI_API_KEY = "test-google-api-key"
        mock_settings_module.GEMINI_MODEL_NAME = "gemini-2.5-flash"
        mock_settings_module.DEFAULT_AI_MODELS = ['gemini-2.5-flash', 'gemini-2.0-flash']
        mock_settings_module.POST_CHARACTER_LIMIT = 280
        mock_settings_module.COMMENT_CHARACTER_LIMIT = 150

        mock_settings_module.DEFAULT_USER_AVATAR = "https://example.com/default.png"
        mock_settings_module.SIGNUP_AVATAR_TEMPLATE = "https://picsum.photos/seed/{username}/200/200"

        mock_settings_module.WELCOME_POST_DELAY = 3.0
        mock_settings_module.FOLLOW_UP_COMMENT_CHANCE = 0.15
        mock_settings_module.FOLLOW_UP_BASE_DELAY = 2.0
        mock_settings_module.FOLLOW_UP_JITTER = 3.0
        mock_settings_module.BOT_PROFILES = [{"id": "bot_1", "actualUsername": "botty", "isBot": True}]

        yield mock_settings_module


# =============================================================================
# Logging Fixtures
# =============================================================================

@pytest.fixture
def capture_logs():
    """
    Capture log messages for assertion in tests.

    Returns:
        list: A list that will contain captured log records.
    """
    import logging

    class LogCapture(logging.Handler):
        def __init__(self):
            super().__init__()
            self.records = []

        def emit(self, record):
            self.records.append(record)

    handler = LogCapture()
    handler.setLevel(logging.DEBUG)

    app_logger = logging.getLogger("feedsync")
    original_level = app_logger.level
    app_logger.setLevel(logging.DEBUG)
    app_logger.addHandler(handler)

    yield handler.records

    app_logger.removeHandler(handler)
    app_logger.setLevel(original_level)


# =============================================================================
# HTTP Response Fixtures
# =============================================================================

@pytest.fixture
def mock_http_response():
    """
    Factory fixture for creating mock HTTP responses.

    Usage:
        def test_http_request(mock_http_response):
            response = mock_http_response(status_code=200, json_data={'data': {}})

    Returns:
        callable: A factory function for creating mock responses.
    """
    def _create_response(
        status_code: int = 200,
        json_data: Optional[Any] = None,
        text: str = '',
        headers: Optional[Dict[str, str]] = None,
        raise_for_status: bool = False
    ) -> MagicMock:
        import json

        mock_response = MagicMock()
        mock_response.status_code = status_code
        mock_response.headers = headers or {'Content-Type': 'application/json'}
        mock_response.ok = 200 <= status_code < 300
        mock_response.text = text or (json.dumps(json_data) if json_data is not None else '')

        if json_data is not None:
            mock_response.json.return_value = json_data
        else:
            mock_response.json.side_effect = ValueError("No JSON data")

        if raise_for_status or status_code >= 400:
            from requests.exceptions import HTTPError
            mock_response.raise_for_status.side_effect = HTTPError(
                f"{status_code} Error",
                response=mock_response
            )
        else:
            mock_response.raise_for_status.return_value = None

        return mock_response

    return _create_response


@pytest.fixture
def mock_requests(mock_http_response):
    """
    Mock the requests library for HTTP testing.

    Returns:
        MagicMock: A mock requests module with response factory attached.
    """
    with patch('requests.get') as mock_get, \
         patch('requests.post') as mock_post:

        mock_req = MagicMock()
        mock_req.get = mock_get
        mock_req.post = mock_post
        mock_req.response = mock_http_response

        yield mock_req


# =============================================================================
# Raw GraphQL Record Factories
# =============================================================================

@pytest.fixture
def raw_user_factory():
    """Factory for embedded ``user`` objects as returned by the backend."""
    def _create_user(
        id: str = "user-1",
        display_name: Optional[str] = "Test User",
        avatar_url: Optional[str] = "https://example.com/avatar.png",
        username: Optional[str] = "testuser",
        is_bot: bool = False
    ) -> Dict[str, Any]:
        metadata = {"isBot": is_bot}
        if username is not None:
            metadata["actualUsername"] = username
        return {
            "id": id,
            "displayName": display_name,
            "avatarUrl": avatar_url,
            "metadata": metadata,
        }

    return _create_user


@pytest.fixture
def raw_post_factory(raw_user_factory):
    """Factory for ``posts`` elements with nested user, aggregates and comments."""
    def _create_post(
        id: str = "post-1",
        content: str = "Hello world",
        user: Optional[Dict[str, Any]] = "default",
        likes: Optional[int] = 0,
        comments: Optional[List[Dict[str, Any]]] = None,
        created_at: str = "2024-01-15T10:00:00+00:00",
        is_bot_post: bool = False,
        image_url: Optional[str] = None
    ) -> Dict[str, Any]:
        comments = comments or []
        return {
            "id": id,
            "content": content,
            "image_url": image_url,
            "created_at": created_at,
            "is_bot_post": is_bot_post,
            "user": raw_user_factory() if user == "default" else user,
            "comments_aggregate": {"aggregate": {"count": len(comments)}},
            "comments": comments,
            "likes_aggregate": None if likes is None else {"aggregate": {"count": likes}},
        }

    return _create_post


# =============================================================================
# In-memory Backend
# =============================================================================

class FakeGraphQLBackend:
    """
    In-memory stand-in for the Nhost GraphQL API.

    Understands exactly the operations in data.queries and keeps posts,
    comments and likes in relational form so aggregates are computed on read.
    """

    def __init__(self):
        self.users: Dict[str, Dict[str, Any]] = {}
        self.posts: List[Dict[str, Any]] = []
        self.comments: List[Dict[str, Any]] = []
        self.likes = set()
        self.calls: List[tuple] = []
        self.failures: Dict[str, Exception] = {}
        self._ids = itertools.count(1)
        self._clock = itertools.count(1)

    # -- seeding -----------------------------------------------------------

    def add_user(self, id: str, display_name: str = None, username: str = None, is_bot: bool = False):
        metadata = {"isBot": is_bot}
        if username:
            metadata["actualUsername"] = username
        self.users[id] = {
            "id": id,
            "displayName": display_name or id,
            "avatarUrl": f"https://example.com/{id}.png",
            "metadata": metadata,
        }
        return self.users[id]

    def _timestamp(self) -> str:
        return f"2024-01-01T00:00:{next(self._clock):02d}+00:00"

    def seed_post(self, user_id: str, content: str = "seeded", is_bot_post: bool = False) -> str:
        post_id = f"post-{next(self._ids)}"
        self.posts.append({
            "id": post_id, "user_id": user_id, "content": content, "image_url": None,
            "is_bot_post": is_bot_post, "created_at": self._timestamp(),
        })
        return post_id

    def seed_comment(self, post_id: str, user_id: str, content: str = "nice", is_bot_comment: bool = False) -> str:
        comment_id = f"comment-{next(self._ids)}"
        self.comments.append({
            "id": comment_id, "post_id": post_id, "user_id": user_id, "content": content,
            "is_bot_comment": is_bot_comment, "created_at": self._timestamp(),
        })
        return comment_id

    def delete_post(self, post_id: str) -> None:
        self.posts = [p for p in self.posts if p["id"] != post_id]
        self.comments = [c for c in self.comments if c["post_id"] != post_id]
        self.likes = {like for like in self.likes if like[0] != post_id}

    def fail(self, query: str, error: Exception) -> None:
        self.failures[query] = error

    def count(self, query: str) -> int:
        return sum(1 for q, _ in self.calls if q is query)

    # -- reads -------------------------------------------------------------

    def _render_post(self, post):
        comments = sorted(
            (c for c in self.comments if c["post_id"] == post["id"]),
            key=lambda c: c["created_at"],
        )
        return {
            "id": post["id"],
            "content": post["content"],
            "image_url": post["image_url"],
            "created_at": post["created_at"],
            "is_bot_post": post["is_bot_post"],
            "user": self.users.get(post["user_id"]),
            "comments_aggregate": {"aggregate": {"count": len(comments)}},
            "comments": [
                {
                    "id": c["id"],
                    "content": c["content"],
                    "created_at": c["created_at"],
                    "is_bot_comment": c["is_bot_comment"],
                    "user": self.users.get(c["user_id"]),
                }
                for c in comments
            ],
            "likes_aggregate": {"aggregate": {"count": sum(1 for like in self.likes if like[0] == post["id"])}},
        }

    def request(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        variables = variables or {}
        self.calls.append((query, variables))
        if query in self.failures:
            raise self.failures[query]

        if query is queries.GET_POSTS_QUERY:
            ordered = sorted(self.posts, key=lambda p: p["created_at"], reverse=True)
            return {"posts": [self._render_post(p) for p in ordered]}

        if query is queries.GET_POST_BY_ID_QUERY:
            post = next((p for p in self.posts if p["id"] == variables["postId"]), None)
            return {"posts_by_pk": self._render_post(post) if post else None}

        if query is queries.GET_USER_LIKES_FOR_POSTS_QUERY:
            return {"post_likes": [
                {"post_id": post_id} for post_id, user_id in sorted(self.likes)
                if user_id == variables["userId"] and post_id in variables["postIds"]
            ]}

        if query is queries.ADD_POST_MUTATION:
            post_id = f"post-{next(self._ids)}"
            self.posts.append({
                "id": post_id, "user_id": variables["userId"], "content": variables["content"],
                "image_url": variables.get("imageUrl"), "is_bot_post": bool(variables.get("isBotPost")),
                "created_at": self._timestamp(),
            })
            return {"insert_posts_one": {"id": post_id}}

        if query is queries.ADD_COMMENT_MUTATION:
            if not any(p["id"] == variables["postId"] for p in self.posts):
                raise QueryError("Foreign key violation on comments.post_id")
            comment_id = self.seed_comment(
                variables["postId"], variables["userId"], variables["content"],
                bool(variables.get("isBotComment")),
            )
            comment = self.comments[-1]
            return {"insert_comments_one": {
                "id": comment_id, "created_at": comment["created_at"], "content": comment["content"],
                "is_bot_comment": comment["is_bot_comment"], "user": self.users.get(variables["userId"]),
            }}

        if query is queries.LIKE_POST_MUTATION:
            key = (variables["postId"], variables["userId"])
            if key in self.likes:
                raise QueryError("Uniqueness violation on post_likes_pkey")
            self.likes.add(key)
            return {"insert_post_likes_one": {"post_id": key[0], "user_id": key[1]}}

        if query is queries.UNLIKE_POST_MUTATION:
            key = (variables["postId"], variables["userId"])
            if key not in self.likes:
                return {"delete_post_likes_by_pk": None}
            self.likes.discard(key)
            return {"delete_post_likes_by_pk": {"post_id": key[0], "user_id": key[1]}}

        raise QueryError("Unknown operation")


@pytest.fixture
def backend():
    """A fresh in-memory backend with a viewer ('viewer-1') and another user ('other-1')."""
    fake = FakeGraphQLBackend()
    fake.add_user("viewer-1", "Vera Viewer", "vera")
    fake.add_user("other-1", "Otto Other", "otto")
    return fake


# =============================================================================
# Timers and AI
# =============================================================================

class ManualTimer:
    """Timer that only runs when fired by the test."""

    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.started = False
        self.cancelled = False
        self.fired = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if self.cancelled:
            return
        self.fired = True
        self.callback()


class ManualTimers:
    """Timer factory collecting ManualTimer instances."""

    def __init__(self):
        self.timers: List[ManualTimer] = []

    def __call__(self, delay, callback):
        timer = ManualTimer(delay, callback)
        self.timers.append(timer)
        return timer

    def fire_all(self):
        for timer in list(self.timers):
            if not timer.fired:
                timer.fire()


@pytest.fixture
def manual_timers():
    return ManualTimers()


class ScriptedAI:
    """TextGenerator returning canned results and recording prompts."""

    def __init__(self, result: Optional[GenerationResult] = None):
        self.result = result or GenerationResult.success("Generated test content #welcome")
        self.calls: List[tuple] = []

    def generate_text(self, prompt):
        self.calls.append(("generate_text", prompt))
        return self.result

    def generate_post_suggestion(self, topic=None):
        self.calls.append(("generate_post_suggestion", topic))
        return self.result

    def complete_post(self, partial_post):
        self.calls.append(("complete_post", partial_post))
        return self.result

    def generate_comment(self, post_content, post_author_handle):
        self.calls.append(("generate_comment", post_content, post_author_handle))
        return self.result


@pytest.fixture
def scripted_ai():
    return ScriptedAI()


@pytest.fixture
def seeded_rng():
    return random.Random(1234)
