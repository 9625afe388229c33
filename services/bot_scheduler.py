"""
Bot-Assist Scheduler

Best-effort, fire-and-forget bot activity layered on top of the feed:

- a welcome post, at most once per session, when a real user lands on an
  empty feed;
- occasional follow-up comments after the viewer comments on someone
  else's post.

Generated content is created with the viewer's credentials but flagged as
bot-origin. Every scheduled action returns a ScheduledTask handle; tasks are
cancelled when the session ends, and follow-ups are cancelled once a reload
shows their target post is gone.
"""

import random
import threading
from typing import Callable, Dict, List, Optional, Sequence

from config import settings
from data.models import AppState, Identity, Post
from services.protocols import TextGenerator, Timer, TimerFactory
from utils.logger import get_logger

logger = get_logger(__name__)

WELCOME = "welcome"
FOLLOW_UP = "follow_up"


def daemon_timer(delay: float, callback: Callable[[], None]) -> Timer:
    """Default timer factory: a daemon ``threading.Timer``."""
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    return timer


class ScheduledTask:
    """Handle for one deferred bot action."""

    def __init__(self, kind: str, delay: float, target_post_id: Optional[str] = None):
        self.kind = kind
        self.delay = delay
        self.target_post_id = target_post_id
        self.cancelled = False
        self.finished = False
        self._timer: Optional[Timer] = None

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.finished)

    def cancel(self) -> None:
        """Prevent the action from running if it has not started yet."""
        if not self.pending:
            return
        self.cancelled = True
        if self._timer is not None:
            self._timer.cancel()
        logger.debug(f"Cancelled {self.kind} task (post={self.target_post_id})")

    def __repr__(self):
        state = "cancelled" if self.cancelled else "finished" if self.finished else "pending"
        return f"ScheduledTask({self.kind!r}, delay={self.delay:.2f}, post={self.target_post_id!r}, {state})"


class BotAssistScheduler:
    """Decides when bot activity fires and runs it after a delay."""

    def __init__(self, ai_service: TextGenerator,
                 timer_factory: Optional[TimerFactory] = None,
                 rng: Optional[random.Random] = None,
                 personas: Optional[Sequence[Dict]] = None):
        """
        Args:
            ai_service: Text generator used for welcome posts and follow-ups
            timer_factory: ``(delay, callback) -> Timer``; defaults to daemon threads
            rng: Source of randomness for persona choice, chance and jitter
            personas: Bot personas, defaults to settings.BOT_PROFILES
        """
        self.ai_service = ai_service
        self.timer_factory = timer_factory or daemon_timer
        self.rng = rng or random.Random()
        self.personas = list(settings.BOT_PROFILES if personas is None else personas)
        self._tasks: List[ScheduledTask] = []

    @property
    def pending_tasks(self) -> List[ScheduledTask]:
        return [task for task in self._tasks if task.pending]

    def _schedule(self, task: ScheduledTask, action: Callable[[], None]) -> ScheduledTask:
        def run():
            if task.cancelled:
                return
            try:
                action()
            except Exception as e:
                # Fire-and-forget: nothing propagates out of a timer thread
                logger.error(f"Bot {task.kind} task failed: {e}", exc_info=True)
            finally:
                task.finished = True

        self._tasks = [t for t in self._tasks if t.pending]
        task._timer = self.timer_factory(task.delay, run)
        self._tasks.append(task)
        task._timer.start()
        return task

    # -- welcome post ------------------------------------------------------

    def maybe_schedule_welcome(self, state: AppState,
                               post_welcome: Callable[[Identity, str], None]) -> Optional[ScheduledTask]:
        """
        Schedule the welcome post if the session qualifies.

        The session's ``welcome_fired`` flag is set before the timer starts so
        repeated checks never schedule twice.

        Args:
            state: Current session state
            post_welcome: ``(viewer, text)`` creating a bot-flagged post as the
                scheduling viewer
        """
        viewer = state.viewer
        if viewer is None or viewer.is_bot or state.welcome_fired:
            return None
        if not self.personas or state.posts:
            return None

        state.welcome_fired = True
        logger.info("Triggering initial content sequence for real user login...")
        task = ScheduledTask(WELCOME, settings.WELCOME_POST_DELAY)
        return self._schedule(task, lambda: self._run_welcome(viewer, post_welcome))

    def _run_welcome(self, viewer: Identity, post_welcome: Callable[[Identity, str], None]) -> None:
        persona = self.rng.choice(self.personas)
        topic = (f"a welcome topic from @{persona['actualUsername']} to the community, "
                 f"posted by @{viewer.handle}")
        result = self.ai_service.generate_post_suggestion(topic)
        if not result.ok:
            logger.error(f"Failed to generate content for initial user experience post: {result.reason}")
            return
        post_welcome(viewer, result.text)

    # -- follow-up comments ------------------------------------------------

    def maybe_schedule_follow_up(self, viewer: Optional[Identity], target_post: Optional[Post],
                                 post_comment: Callable[[Identity, str, str], None]) -> Optional[ScheduledTask]:
        """
        Roll for a follow-up comment on ``target_post``.

        Never fires on the viewer's own posts. Otherwise fires with probability
        FOLLOW_UP_COMMENT_CHANCE after a jittered delay.

        Args:
            viewer: The signed-in identity
            target_post: Cached post as it was before the comment was added
            post_comment: ``(viewer, post_id, text)`` creating a bot-flagged comment
        """
        if viewer is None or target_post is None:
            return None
        if target_post.author.id == viewer.id:
            logger.debug(f"AI comment trigger skipped for own post ID: {target_post.id}")
            return None
        if self.rng.random() >= settings.FOLLOW_UP_COMMENT_CHANCE:
            return None

        delay = settings.FOLLOW_UP_BASE_DELAY + self.rng.random() * settings.FOLLOW_UP_JITTER
        logger.info(f"Scheduling AI comment attempt on post ID {target_post.id} in {delay:.1f}s")
        task = ScheduledTask(FOLLOW_UP, delay, target_post_id=target_post.id)
        return self._schedule(task, lambda: self._run_follow_up(viewer, target_post, post_comment))

    def _run_follow_up(self, viewer: Identity, target_post: Post,
                       post_comment: Callable[[Identity, str, str], None]) -> None:
        result = self.ai_service.generate_comment(target_post.content, target_post.author.handle)
        if not result.ok:
            logger.error(f"Failed to generate AI comment for post ID {target_post.id}: {result.reason}")
            return
        post_comment(viewer, target_post.id, result.text)

    # -- lifetime ----------------------------------------------------------

    def prune(self, live_post_ids) -> int:
        """Cancel follow-ups whose target post no longer exists. Returns the count."""
        live = set(live_post_ids)
        cancelled = 0
        for task in self.pending_tasks:
            if task.kind == FOLLOW_UP and task.target_post_id not in live:
                task.cancel()
                cancelled += 1
        return cancelled

    def cancel_all(self) -> int:
        """Cancel every pending task, e.g. on sign-out. Returns the count."""
        tasks = self.pending_tasks
        for task in tasks:
            task.cancel()
        self._tasks = []
        return len(tasks)
