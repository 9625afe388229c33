"""
Denormalization Mapper

Converts nested GraphQL result trees (user + aggregates + comment list) into
flat display entities. Every function here is total over partial input: gaps
are filled with defaults and nothing is fetched over the network.
"""

from typing import Any, Dict, Iterable, Optional, Set

from config import settings
from data.models import Comment, Identity, Post
from utils.helpers import safe_get, sanitize_handle

UNKNOWN_USER_ID = "unknown_user_id"
UNKNOWN_COMMENT_USER_ID = "unknown_comment_user_id"
UNKNOWN_USER_NAME = "Unknown User"
UNKNOWN_HANDLE = "unknownuser"
VIEWER_DEFAULT_NAME = "Anonymous"
VIEWER_DEFAULT_HANDLE = "user"


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any, default: str = "") -> str:
    if isinstance(value, str) and value:
        return value
    return default


def _count(raw: Dict[str, Any], aggregate_key: str) -> int:
    count = safe_get(raw, aggregate_key, "aggregate", "count", default=0)
    if isinstance(count, bool) or not isinstance(count, int):
        return 0
    return count


def _identity(raw_user: Any, fallback_id: str, fallback_name: str,
              fallback_handle: str, email: Optional[str] = None) -> Identity:
    user = _as_dict(raw_user)
    metadata = _as_dict(user.get("metadata"))
    display_name = user.get("displayName")

    handle = (
        _as_str(metadata.get("actualUsername"))
        or sanitize_handle(display_name)
        or fallback_handle
    )

    return Identity(
        id=_as_str(user.get("id"), fallback_id),
        name=_as_str(display_name, fallback_name),
        handle=handle,
        avatar_url=_as_str(user.get("avatarUrl"), settings.DEFAULT_USER_AVATAR),
        is_bot=bool(metadata.get("isBot") or False),
        email=email,
    )


def map_identity(raw_user: Optional[Dict[str, Any]], fallback_id: str = UNKNOWN_USER_ID) -> Identity:
    """
    Map an embedded ``user`` object to an Identity snapshot.

    Args:
        raw_user: The nested user record, possibly None or partial.
        fallback_id: Sentinel id used when the author is missing.

    Returns:
        Identity: Never contains None fields except ``email``.
    """
    return _identity(raw_user, fallback_id, UNKNOWN_USER_NAME, UNKNOWN_HANDLE)


def map_viewer(raw_user: Optional[Dict[str, Any]]) -> Optional[Identity]:
    """
    Map the signed-in account returned by the auth provider.

    Returns None when there is no user, since a viewer without an id cannot
    issue any scoped request.
    """
    user = _as_dict(raw_user)
    if not user.get("id"):
        return None
    return _identity(user, user["id"], VIEWER_DEFAULT_NAME, VIEWER_DEFAULT_HANDLE,
                     email=user.get("email"))


def map_comment(raw_comment: Optional[Dict[str, Any]], post_id: str) -> Comment:
    """Map one nested comment of ``post_id``."""
    comment = _as_dict(raw_comment)
    return Comment(
        id=_as_str(comment.get("id")),
        post_id=post_id,
        content=_as_str(comment.get("content")),
        created_at=_as_str(comment.get("created_at")),
        author=map_identity(comment.get("user"), fallback_id=UNKNOWN_COMMENT_USER_ID),
        is_bot_comment=bool(comment.get("is_bot_comment") or False),
    )


def map_post(raw_post: Optional[Dict[str, Any]], liked_set: Iterable[str]) -> Post:
    """
    Map a raw post tree to a Post.

    Args:
        raw_post: A ``posts`` / ``posts_by_pk`` element.
        liked_set: Post ids the viewer has liked, as resolved by the caller.

    Returns:
        Post: Aggregates default to 0 and comments to an empty tuple.
    """
    post = _as_dict(raw_post)
    post_id = _as_str(post.get("id"))
    liked: Set[str] = liked_set if isinstance(liked_set, (set, frozenset)) else set(liked_set)

    raw_comments = post.get("comments")
    if not isinstance(raw_comments, list):
        raw_comments = []

    image_url = post.get("image_url")

    return Post(
        id=post_id,
        author=map_identity(post.get("user")),
        content=_as_str(post.get("content")),
        created_at=_as_str(post.get("created_at")),
        image_url=image_url if isinstance(image_url, str) and image_url else None,
        is_bot_post=bool(post.get("is_bot_post") or False),
        like_count=_count(post, "likes_aggregate"),
        comment_count=_count(post, "comments_aggregate"),
        comments=tuple(map_comment(c, post_id) for c in raw_comments),
        is_liked_by_viewer=post_id in liked,
    )
