"""
Post Composer

The create-post form's logic: AI-assisted drafting and submission.
"""

from dataclasses import dataclass
from typing import Optional

from services.feed_service import FeedSynchronizer
from services.protocols import TextGenerator
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ComposeResult:
    """Draft content after an AI assist, plus an error to display."""
    content: str
    error: Optional[str] = None


class PostComposer:
    """Drafts posts with AI help and submits them through the feed."""

    def __init__(self, ai_service: TextGenerator, feed: FeedSynchronizer):
        self.ai_service = ai_service
        self.feed = feed

    def generate_with_ai(self, draft: str = "") -> ComposeResult:
        """
        Complete ``draft`` if it has text, otherwise suggest a fresh post.

        On generation failure the draft is cleared and the failure reason is
        returned as the error. Nothing is posted either way.
        """
        if draft and draft.strip():
            result = self.ai_service.complete_post(draft)
        else:
            result = self.ai_service.generate_post_suggestion()

        if not result.ok:
            logger.warning(f"AI suggestion failed: {result.reason}")
            return ComposeResult(content="", error=result.reason)
        return ComposeResult(content=result.text)

    def submit(self, draft: str) -> bool:
        """Post ``draft`` as the viewer; blank drafts are ignored."""
        if not draft or not draft.strip() or self.feed.viewer is None:
            return False
        return self.feed.add_post(draft)
