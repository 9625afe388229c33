"""
Like-Set Resolver

Determines which of a set of posts the viewer has already liked.
"""

from typing import Iterable, Set

from data.queries import GET_USER_LIKES_FOR_POSTS_QUERY
from services.protocols import GraphQLTransport
from utils.exceptions import LikeResolutionError, RemoteAPIError
from utils.logger import get_logger

logger = get_logger(__name__)


class LikeSetResolver:
    """Resolves the viewer's like membership for a batch of post ids."""

    def __init__(self, graphql: GraphQLTransport):
        self.graphql = graphql

    def resolve_likes(self, viewer_id: str, post_ids: Iterable[str]) -> Set[str]:
        """
        Return the subset of ``post_ids`` liked by ``viewer_id``.

        An empty ``post_ids`` short-circuits to an empty set without a remote
        call.

        Raises:
            LikeResolutionError: If the read fails or the response is malformed.
                Callers treat this as a failed read of the whole view.
        """
        ids = [post_id for post_id in post_ids if post_id]
        if not ids:
            return set()

        try:
            data = self.graphql.request(
                GET_USER_LIKES_FOR_POSTS_QUERY,
                {"userId": viewer_id, "postIds": ids},
            )
        except RemoteAPIError as e:
            raise LikeResolutionError(f"Could not resolve likes: {e}") from e

        rows = data.get("post_likes")
        if not isinstance(rows, list):
            raise LikeResolutionError("Malformed likes response: 'post_likes' missing")

        wanted = set(ids)
        liked = set()
        for row in rows:
            post_id = row.get("post_id") if isinstance(row, dict) else None
            if post_id in wanted:
                liked.add(post_id)

        logger.debug(f"Viewer {viewer_id} liked {len(liked)} of {len(ids)} posts")
        return liked
