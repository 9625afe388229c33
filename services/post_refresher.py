"""
Single-Post Refresher

Re-fetches one post's full subtree so a focused view can be updated without
reloading the entire feed.
"""

from typing import Optional

from data.mapper import map_post
from data.models import Post
from data.queries import GET_POST_BY_ID_QUERY
from services.like_resolver import LikeSetResolver
from services.protocols import GraphQLTransport
from utils.exceptions import RemoteAPIError
from utils.logger import get_logger

logger = get_logger(__name__)


class PostRefresher:
    """Fetches and maps a single post for the current viewer."""

    def __init__(self, graphql: GraphQLTransport, like_resolver: LikeSetResolver):
        self.graphql = graphql
        self.like_resolver = like_resolver

    def refresh_post(self, viewer_id: Optional[str], post_id: str) -> Optional[Post]:
        """
        Fetch ``post_id`` with the same nested shape as the feed load.

        Returns:
            Optional[Post]: The fresh post, or None if there is no viewer, the
            post no longer exists, or any read failed. None means "keep the
            prior state".
        """
        if not viewer_id:
            return None

        try:
            data = self.graphql.request(GET_POST_BY_ID_QUERY, {"postId": post_id})
            raw_post = data.get("posts_by_pk")
            if not raw_post:
                logger.info(f"Post {post_id} not found while refreshing")
                return None

            liked = self.like_resolver.resolve_likes(viewer_id, [post_id])
            return map_post(raw_post, liked)

        except RemoteAPIError as e:
            logger.error(f"Error fetching fresh post data for {post_id}: {e}")
            return None
