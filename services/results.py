"""
Result types returned across service boundaries.

The text-generation provider and the auth provider report failure through
these tagged results instead of raising, so callers branch on ``ok``.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of a text generation call."""
    ok: bool
    text: str = ""
    reason: Optional[str] = None

    @classmethod
    def success(cls, text: str) -> "GenerationResult":
        return cls(ok=True, text=text)

    @classmethod
    def failure(cls, reason: str) -> "GenerationResult":
        return cls(ok=False, reason=reason)


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a session operation."""
    ok: bool
    error: Optional[str] = None

    @classmethod
    def success(cls) -> "AuthResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, error: str) -> "AuthResult":
        return cls(ok=False, error=error)
