"""
AI Service Module

This module handles AI operations using Google's Gemini API.
It provides post suggestions, post completion and comment generation for the
feed client. Every call returns a GenerationResult; provider failures are
never raised to the caller.
"""

from typing import Optional

import google.generativeai as genai

from config import settings
from services.results import GenerationResult
from utils.logger import get_logger

logger = get_logger(__name__)

MISSING_KEY_MESSAGE = "Error: API_KEY not configured. Please set the API_KEY environment variable."
UNKNOWN_ERROR_MESSAGE = "An unknown error occurred while contacting Gemini."


class AIService:
    """Service for AI operations with Google's Gemini API."""

    def __init__(self, api_key: Optional[str] = None):
        """
        Initialize the AI service with the Gemini API.

        Configures the API key and selects an appropriate model based on
        availability. A missing key is not fatal: the service stays usable and
        every generation reports the misconfiguration.
        """
        self.model = None
        api_key = api_key or settings.GOOGLE_AI_API_KEY
        if not api_key:
            logger.error("API_KEY environment variable not set. Gemini API calls will fail.")
            return

        genai.configure(api_key=api_key)
        model_name = self._select_model_name()
        logger.info(f"Selected AI model: {model_name}")
        self.model = genai.GenerativeModel(model_name=model_name)

    def _select_model_name(self) -> str:
        """Pick the configured model, falling back through DEFAULT_AI_MODELS."""
        try:
            available_models = [m.name for m in genai.list_models()]
        except Exception as e:
            logger.warning(f"Could not list Gemini models, using {settings.GEMINI_MODEL_NAME}: {e}")
            return settings.GEMINI_MODEL_NAME

        for preferred in [settings.GEMINI_MODEL_NAME] + list(settings.DEFAULT_AI_MODELS):
            for available in available_models:
                if available.endswith(preferred):
                    return available

        if available_models:
            # If none of our preferred models are available, just use the first one
            return available_models[0]
        return settings.GEMINI_MODEL_NAME

    def generate_text(self, prompt: str) -> GenerationResult:
        """
        Generate text for a prompt.

        Args:
            prompt: The full prompt

        Returns:
            GenerationResult: success with the text, or failure with a reason
        """
        if self.model is None:
            return GenerationResult.failure(MISSING_KEY_MESSAGE)

        try:
            response = self.model.generate_content(prompt)
            text = (response.text or "").strip()
        except Exception as e:
            logger.error(f"Error generating text with Gemini: {e}")
            return GenerationResult.failure(f"Error from Gemini: {e}")

        if not text:
            logger.warning("Gemini returned an empty response")
            return GenerationResult.failure(UNKNOWN_ERROR_MESSAGE)

        return GenerationResult.success(text)

    def generate_post_suggestion(self, topic: Optional[str] = None) -> GenerationResult:
        """Suggest a short post, optionally about ``topic``."""
        subject = f'"{topic}"' if topic else "a random interesting topic"
        prompt = (
            f"Write a short, engaging social media post (like a tweet) about {subject}. "
            f"Include relevant hashtags. Keep it under {settings.POST_CHARACTER_LIMIT} characters."
        )
        return self.generate_text(prompt)

    def complete_post(self, partial_post: str) -> GenerationResult:
        """Finish a draft the user has started."""
        prompt = (
            f'Complete the following social media post in a creative and engaging way: "{partial_post}" '
            f"Keep it under {settings.POST_CHARACTER_LIMIT} characters."
        )
        return self.generate_text(prompt)

    def generate_comment(self, post_content: str, post_author_handle: str) -> GenerationResult:
        """
        Write a reply to a post.

        Args:
            post_content: Body of the post being replied to
            post_author_handle: Handle of the post's author, without the @

        Returns:
            GenerationResult: The comment text or the failure reason
        """
        prompt = f"""You are a friendly and engaging social media user.
Given the following social media post by @{post_author_handle}:
"{post_content}"

Write a short, relevant, and insightful comment for this post.
- If it's a question, try to provide a helpful answer or perspective.
- If it's an opinion, react to it respectfully, perhaps adding your own thought.
- If it's news or an announcement, show engagement.
- Keep the comment concise and natural, like a real user would write. Avoid generic replies.
- Include a relevant emoji if it fits the tone.
- Maximum {settings.COMMENT_CHARACTER_LIMIT} characters."""
        return self.generate_text(prompt)
