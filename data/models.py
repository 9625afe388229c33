"""
Data Models for the Feed Sync Client

This module contains the display entities produced by the mapper and the
application state owned by the feed synchronizer. Entities are frozen value
snapshots: relationships are embedded copies valid as of the last fetch.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class Identity:
    """Denormalized snapshot of an account."""
    id: str
    name: str                          # Display name
    handle: str                        # App username (metadata.actualUsername)
    avatar_url: str
    is_bot: bool = False
    email: Optional[str] = None        # Only known for the signed-in viewer


@dataclass(frozen=True)
class Comment:
    """A comment as displayed under its post."""
    id: str
    post_id: str
    content: str
    created_at: str                    # ISO timestamp as returned by the backend
    author: Identity
    is_bot_comment: bool = False


@dataclass(frozen=True)
class Post:
    """A feed post with server-derived aggregates and viewer like state."""
    id: str
    author: Identity
    content: str
    created_at: str
    image_url: Optional[str] = None
    is_bot_post: bool = False
    like_count: int = 0
    comment_count: int = 0
    comments: Tuple[Comment, ...] = ()
    is_liked_by_viewer: bool = False


@dataclass
class AppState:
    """
    Mutable session state. Only the FeedSynchronizer and SessionService write
    to it; presentation code reads it through FeedView snapshots.
    """
    viewer: Optional[Identity] = None
    posts: Tuple[Post, ...] = ()
    focused_post: Optional[Post] = None
    is_loading: bool = False
    message: Optional[str] = None
    welcome_fired: bool = False


@dataclass(frozen=True)
class FeedView:
    """Read-only view of the state handed to presentation."""
    viewer: Optional[Identity]
    posts: Tuple[Post, ...] = field(default_factory=tuple)
    focused_post: Optional[Post] = None
    is_loading: bool = False
    message: Optional[str] = None

    @classmethod
    def of(cls, state: AppState) -> "FeedView":
        return cls(
            viewer=state.viewer,
            posts=state.posts,
            focused_post=state.focused_post,
            is_loading=state.is_loading,
            message=state.message,
        )
