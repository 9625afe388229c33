"""
Feed Sync Client

This is the main entry point for the feed client. It signs in to the Nhost
backend, loads the feed, optionally performs a post/comment/like action and
prints the resulting working set.
"""

import sys
import time
import argparse
import logging
from typing import List, Optional

from config import settings
from data.models import FeedView, Post
from utils.logger import get_logger, setup_file_logging
from utils.exceptions import ConfigurationError, FeedClientError
from utils.helpers import truncate_text
from services.ai_service import AIService
from services.auth_service import AuthService
from services.bot_scheduler import BotAssistScheduler
from services.composer import PostComposer
from services.feed_service import FeedSynchronizer
from services.graphql_client import GraphQLClient
from services.session_service import SessionService

# Set up logging
logger = get_logger(__name__)


class FeedClient:
    """
    Main application class for the feed client.

    Wires the auth provider, GraphQL client, AI service and bot scheduler into
    a feed synchronizer and exposes the presentation-facing hooks.
    """

    def __init__(self, auth_service=None, graphql_client=None, ai_service=None,
                 bot_scheduler=None, validate: bool = True):
        """Initialize the client, creating any service not injected."""
        if validate:
            settings.validate_settings()

        self.auth_service = auth_service or AuthService()
        self.graphql_client = graphql_client or GraphQLClient(
            token_provider=lambda: self.auth_service.access_token
        )
        self.ai_service = ai_service or AIService()
        self.bot_scheduler = bot_scheduler or BotAssistScheduler(self.ai_service)

        self.feed = FeedSynchronizer(self.graphql_client, bot_scheduler=self.bot_scheduler)
        self.session = SessionService(self.auth_service, self.feed)
        self.composer = PostComposer(self.ai_service, self.feed)

    # Hooks handed to presentation
    def view(self) -> FeedView:
        return self.feed.view()

    def add_post(self, content: str) -> bool:
        return self.composer.submit(content)

    def toggle_like(self, post_id: str) -> bool:
        return self.feed.toggle_like(post_id)

    def add_comment(self, post_id: str, content: str) -> bool:
        return self.feed.add_comment(post_id, content)

    def open_focused_post(self, post_id: str) -> Optional[Post]:
        return self.feed.open_focused_post(post_id)

    def close_focused_post(self) -> None:
        self.feed.close_focused_post()


def format_post(post: Post, show_comments: bool = False) -> str:
    """Render a post as plain text for the console."""
    badge = " [bot]" if post.is_bot_post else ""
    liked = "♥" if post.is_liked_by_viewer else "♡"
    lines = [
        f"{post.id}  {post.author.name} @{post.author.handle}{badge}  {post.created_at}",
        f"    {truncate_text(post.content, 200)}",
        f"    {liked} {post.like_count}   comments: {post.comment_count}",
    ]
    if show_comments:
        for comment in post.comments:
            bot = " [bot]" if comment.is_bot_comment else ""
            lines.append(f"      - @{comment.author.handle}{bot}: {truncate_text(comment.content, 150)}")
    return "\n".join(lines)


def print_view(view: FeedView) -> None:
    if view.viewer is not None:
        print(f"Signed in as {view.viewer.name} (@{view.viewer.handle})")
    if view.message:
        print(f"! {view.message}")
    if view.focused_post is not None:
        print(format_post(view.focused_post, show_comments=True))
        return
    if not view.posts:
        print("No posts yet.")
    for post in view.posts:
        print(format_post(post))


def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description='Feed Sync Client')
    parser.add_argument('--email', type=str, default=settings.FEED_EMAIL, help='Account email')
    parser.add_argument('--password', type=str, default=settings.FEED_PASSWORD, help='Account password')
    parser.add_argument('--signup', action='store_true', help='Create the account before signing in')
    parser.add_argument('--name', type=str, default='', help='Display name (sign up only)')
    parser.add_argument('--username', type=str, default='', help='App username (sign up only)')
    parser.add_argument('--post', type=str, help='Create a post with this text')
    parser.add_argument('--ai-post', action='store_true', help='Create a post drafted by the AI')
    parser.add_argument('--suggest', type=str, nargs='?', const='', default=None,
                        help='Print an AI suggestion, completing the given draft if any')
    parser.add_argument('--comment', type=str, nargs=2, metavar=('POST_ID', 'TEXT'), help='Comment on a post')
    parser.add_argument('--like', type=str, metavar='POST_ID', help='Toggle like on a post')
    parser.add_argument('--show', type=str, metavar='POST_ID', help='Show one post with its comments')
    parser.add_argument('--wait', type=float, default=0.0,
                        help='Seconds to keep running so scheduled bot activity can fire')
    parser.add_argument('--log-file', type=str, default='feed_client.log', help='Log file path')
    parser.add_argument('--log-level', type=str, choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        default='INFO', help='Logging level')
    return parser.parse_args(argv)


def run(client: FeedClient, args) -> bool:
    """Run the requested actions. Returns True when every action succeeded."""
    if not args.email or not args.password:
        logger.error("Email and password are required (flags or FEED_EMAIL/FEED_PASSWORD)")
        return False

    if args.signup:
        signed_in = client.session.sign_up(args.email, args.password, args.name, args.username)
    else:
        signed_in = client.session.sign_in(args.email, args.password)

    if not signed_in:
        print_view(client.view())
        return False

    success = True

    if args.suggest is not None:
        result = client.composer.generate_with_ai(args.suggest)
        if result.error:
            print(f"! {result.error}")
            success = False
        else:
            print(result.content)

    if args.ai_post:
        result = client.composer.generate_with_ai()
        if result.error:
            print(f"! {result.error}")
            success = False
        else:
            success = client.add_post(result.content) and success

    if args.post:
        success = client.add_post(args.post) and success

    if args.comment:
        post_id, text = args.comment
        success = client.add_comment(post_id, text) and success

    if args.like:
        success = client.toggle_like(args.like) and success

    if args.wait > 0:
        logger.info(f"Waiting {args.wait:.1f}s for scheduled bot activity")
        time.sleep(args.wait)
        client.feed.load()

    if args.show:
        if client.open_focused_post(args.show) is None:
            logger.warning(f"Post not found: {args.show}")
            success = False

    print_view(client.view())
    return success


def main(argv: Optional[List[str]] = None):
    """Main entry point for the application."""
    args = parse_arguments(argv)

    # Set up logging
    log_level = getattr(logging, args.log_level)
    setup_file_logging(args.log_file, log_level)

    logger.info("Starting Feed Sync Client")

    try:
        client = FeedClient()
        success = run(client, args)

        if success:
            logger.info("Feed Sync Client completed successfully")
            exit_code = 0
        else:
            logger.warning("Feed Sync Client completed with warnings or errors")
            exit_code = 1

    except ConfigurationError as e:
        logger.error(f"{e}")
        exit_code = 2
    except FeedClientError as e:
        logger.error(f"Feed client error: {e}", exc_info=True)
        exit_code = 2
    except Exception as e:
        logger.error(f"Unhandled exception in Feed Sync Client: {e}", exc_info=True)
        exit_code = 2

    logger.info(f"Feed Sync Client finished with exit code {exit_code}")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
