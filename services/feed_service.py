"""
Feed Synchronizer

Keeps the in-memory working set of posts consistent with the remote store.
Every mutation is followed by a full reload; cached aggregates and like flags
are never adjusted locally.
"""

from typing import Optional

from data.mapper import map_post
from data.models import AppState, FeedView, Identity, Post
from data.queries import (
    ADD_COMMENT_MUTATION, ADD_POST_MUTATION, GET_POSTS_QUERY,
    LIKE_POST_MUTATION, UNLIKE_POST_MUTATION,
)
from services.bot_scheduler import BotAssistScheduler
from services.like_resolver import LikeSetResolver
from services.post_refresher import PostRefresher
from services.protocols import GraphQLTransport
from utils.exceptions import MutationError, QueryError, RemoteAPIError
from utils.logger import get_logger

logger = get_logger(__name__)


class FeedSynchronizer:
    """
    Orchestrates the fetch-mutate-refetch cycle and owns the AppState.

    Presentation code reads through view() and drives the feed through the
    public operations; nothing else writes to the state.
    """

    def __init__(self, graphql: GraphQLTransport,
                 bot_scheduler: Optional[BotAssistScheduler] = None,
                 state: Optional[AppState] = None,
                 like_resolver: Optional[LikeSetResolver] = None,
                 refresher: Optional[PostRefresher] = None):
        self.graphql = graphql
        self.state = state or AppState()
        self.like_resolver = like_resolver or LikeSetResolver(graphql)
        self.refresher = refresher or PostRefresher(graphql, self.like_resolver)
        self.bot_scheduler = bot_scheduler

    # -- session lifetime --------------------------------------------------

    @property
    def viewer(self) -> Optional[Identity]:
        return self.state.viewer

    def view(self) -> FeedView:
        """Read-only snapshot for presentation."""
        return FeedView.of(self.state)

    def set_message(self, message: Optional[str]) -> None:
        self.state.message = message

    def start_session(self, viewer: Identity) -> None:
        """
        Adopt ``viewer`` as the current identity and load the feed.

        A session held by a different account is ended first, so its bot
        tasks, welcome flag, working set and focused post do not carry over.
        """
        current = self.state.viewer
        if current is not None and current.id != viewer.id:
            logger.info(f"Replacing session of @{current.handle} with @{viewer.handle}")
            self.end_session()
        self.state.viewer = viewer
        self.state.message = None
        self.load()

    def end_session(self) -> None:
        """Forget the viewer and everything derived for them."""
        if self.bot_scheduler is not None:
            self.bot_scheduler.cancel_all()
        self.state.viewer = None
        self.state.posts = ()
        self.state.focused_post = None
        self.state.is_loading = False
        self.state.welcome_fired = False

    # -- reads -------------------------------------------------------------

    def load(self) -> bool:
        """
        Fetch every post with its subtree and replace the working set.

        Returns:
            bool: True if the working set was replaced. On failure the
            previous working set is kept and the error is stored as the message.
        """
        viewer = self.state.viewer
        if viewer is None:
            self.state.posts = ()
            self.state.is_loading = False
            return False

        self.state.is_loading = True
        try:
            data = self.graphql.request(GET_POSTS_QUERY)
            raw_posts = data.get("posts")
            if not isinstance(raw_posts, list):
                raise QueryError("Failed to fetch posts: No data returned")

            post_ids = [p.get("id") for p in raw_posts if isinstance(p, dict)]
            liked = self.like_resolver.resolve_likes(viewer.id, post_ids)

            self.state.posts = tuple(map_post(p, liked) for p in raw_posts)
            logger.info(f"Loaded {len(self.state.posts)} posts")
            loaded = True

        except RemoteAPIError as e:
            logger.error(f"Error fetching posts: {e}")
            self.state.message = str(e) or "Could not load posts."
            loaded = False
        finally:
            self.state.is_loading = False

        if self.bot_scheduler is not None:
            if loaded:
                self.bot_scheduler.prune(p.id for p in self.state.posts)
            self.bot_scheduler.maybe_schedule_welcome(self.state, self.add_bot_post)

        return loaded

    def _find_post(self, post_id: str) -> Optional[Post]:
        for post in self.state.posts:
            if post.id == post_id:
                return post
        focused = self.state.focused_post
        if focused is not None and focused.id == post_id:
            return focused
        return None

    def _refresh_focused(self, post_id: str) -> None:
        focused = self.state.focused_post
        if focused is None or focused.id != post_id:
            return
        fresh = self.refresher.refresh_post(self.state.viewer.id if self.state.viewer else None, post_id)
        if fresh is not None:
            self.state.focused_post = fresh

    def open_focused_post(self, post_id: str) -> Optional[Post]:
        """Expand ``post_id``, preferring a fresh copy over the cached one."""
        viewer_id = self.state.viewer.id if self.state.viewer else None
        fresh = self.refresher.refresh_post(viewer_id, post_id)
        self.state.focused_post = fresh or self._find_post(post_id)
        return self.state.focused_post

    def close_focused_post(self) -> None:
        self.state.focused_post = None

    # -- mutations ---------------------------------------------------------

    def _create_post(self, viewer: Identity, content: str, is_bot_post: bool,
                     image_url: Optional[str] = None) -> str:
        data = self.graphql.request(ADD_POST_MUTATION, {
            "userId": viewer.id,
            "content": content,
            "imageUrl": image_url,
            "isBotPost": is_bot_post,
        })
        created = data.get("insert_posts_one")
        if not created or not created.get("id"):
            raise MutationError("Post was not created")
        return created["id"]

    def _create_comment(self, viewer: Identity, post_id: str, content: str, is_bot_comment: bool) -> str:
        data = self.graphql.request(ADD_COMMENT_MUTATION, {
            "postId": post_id,
            "userId": viewer.id,
            "content": content,
            "isBotComment": is_bot_comment,
        })
        created = data.get("insert_comments_one")
        if not created or not created.get("id"):
            raise MutationError("Comment was not created")
        return created["id"]

    def add_post(self, content: str, is_bot_post: bool = False, image_url: Optional[str] = None) -> bool:
        """
        Create a post as the viewer, then reload.

        Returns:
            bool: True if the post was created.
        """
        viewer = self.state.viewer
        if viewer is None or not content or not content.strip():
            return False

        try:
            post_id = self._create_post(viewer, content, is_bot_post, image_url)
        except RemoteAPIError as e:
            logger.error(f"Error adding post: {e}")
            self.state.message = f"Failed to add post: {e}"
            return False

        logger.info(f"Created post {post_id} (bot={is_bot_post})")
        self.load()
        return True

    def _is_current_viewer(self, viewer: Identity) -> bool:
        current = self.state.viewer
        return current is not None and current.id == viewer.id

    def add_bot_post(self, viewer: Identity, content: str) -> bool:
        """
        Create an AI-assisted post as ``viewer``, flagged bot-origin.

        ``viewer`` is the identity the task was scheduled for; if the session
        now belongs to someone else nothing is created. Errors are only logged.
        """
        if not content or not content.strip():
            return False
        if not self._is_current_viewer(viewer):
            logger.warning(f"Dropping AI-assisted post for @{viewer.handle}: session has changed")
            return False

        try:
            self._create_post(viewer, content, is_bot_post=True)
        except RemoteAPIError as e:
            logger.error(f"Error adding AI-assisted post by @{viewer.handle}: {e}")
            return False

        self.load()
        return True

    def toggle_like(self, post_id: str) -> bool:
        """
        Like or unlike ``post_id`` based on the cached like flag, then reload.

        The cached flag comes from the last full synchronization. A post that
        is neither in the feed nor focused is ignored.
        """
        viewer = self.state.viewer
        if viewer is None:
            return False

        post = self._find_post(post_id)
        if post is None:
            return False

        mutation = UNLIKE_POST_MUTATION if post.is_liked_by_viewer else LIKE_POST_MUTATION
        try:
            self.graphql.request(mutation, {"postId": post_id, "userId": viewer.id})
        except RemoteAPIError as e:
            logger.error(f"Error toggling like for post ID {post_id}: {e}")
            self.state.message = f"Failed to update like: {e}"
            return False

        self.load()
        self._refresh_focused(post_id)
        return True

    def add_comment(self, post_id: str, content: str) -> bool:
        """
        Comment on ``post_id`` as the viewer, reload, and maybe schedule a
        bot follow-up on someone else's post.
        """
        viewer = self.state.viewer
        if viewer is None or not content or not content.strip():
            return False

        target_post = next((p for p in self.state.posts if p.id == post_id), None)

        try:
            self._create_comment(viewer, post_id, content, is_bot_comment=False)
        except RemoteAPIError as e:
            logger.error(f"Error adding comment to post ID {post_id}: {e}")
            self.state.message = f"Failed to add comment: {e}"
            return False

        self.load()
        self._refresh_focused(post_id)

        if self.bot_scheduler is not None:
            self.bot_scheduler.maybe_schedule_follow_up(viewer, target_post, self.add_bot_comment)
        return True

    def add_bot_comment(self, viewer: Identity, post_id: str, content: str) -> bool:
        """Create a bot-flagged comment as ``viewer`` if their session is still current."""
        if not content or not content.strip():
            return False
        if not self._is_current_viewer(viewer):
            logger.warning(f"Dropping AI comment for post ID {post_id}: session of @{viewer.handle} has ended")
            return False

        try:
            self._create_comment(viewer, post_id, content, is_bot_comment=True)
        except RemoteAPIError as e:
            logger.error(f"Error during AI comment posting for post ID {post_id}: {e}")
            return False

        self.load()
        self._refresh_focused(post_id)
        return True
