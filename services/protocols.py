"""
Service Protocol Definitions

This module defines typing.Protocol interfaces for the external collaborators
of the feed client. These protocols enable loose coupling, dependency
injection, and easier testing.

Protocols defined:
- GraphQLTransport: Interface for executing GraphQL reads and mutations
- AuthProvider: Interface for the session/identity provider
- TextGenerator: Interface for AI text generation
- TimerFactory: Interface for deferred execution used by bot assist
"""

from typing import Any, Callable, Dict, Optional, Protocol

from services.results import AuthResult, GenerationResult


class GraphQLTransport(Protocol):
    """Protocol for the relational read/write API.

    Implementations return the ``data`` member of the GraphQL response and
    raise a RemoteAPIError subclass on any failure.
    """

    def request(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Execute a query or mutation.

        Args:
            query: GraphQL document.
            variables: Operation variables.

        Returns:
            The response ``data`` object.
        """
        ...


class AuthProvider(Protocol):
    """Protocol for the session provider (sign-in, sign-up, sign-out)."""

    @property
    def is_loading(self) -> bool:
        ...

    @property
    def is_authenticated(self) -> bool:
        ...

    @property
    def user(self) -> Optional[Dict[str, Any]]:
        """Raw user payload: id, email, displayName, avatarUrl, metadata."""
        ...

    @property
    def access_token(self) -> Optional[str]:
        ...

    def sign_in(self, email: str, password: str) -> AuthResult:
        ...

    def sign_up(self, email: str, password: str, display_name: str,
                metadata: Dict[str, Any]) -> AuthResult:
        ...

    def sign_out(self) -> AuthResult:
        ...


class TextGenerator(Protocol):
    """Protocol for AI-powered text generation.

    Calls are network bound and fallible; failures come back as a
    GenerationResult with ``ok`` False rather than as exceptions.
    """

    def generate_text(self, prompt: str) -> GenerationResult:
        ...

    def generate_post_suggestion(self, topic: Optional[str] = None) -> GenerationResult:
        ...

    def complete_post(self, partial_post: str) -> GenerationResult:
        ...

    def generate_comment(self, post_content: str, post_author_handle: str) -> GenerationResult:
        ...


class Timer(Protocol):
    """A started deferred call that can be cancelled before it runs."""

    def start(self) -> None:
        ...

    def cancel(self) -> None:
        ...


TimerFactory = Callable[[float, Callable[[], None]], Timer]
