"""Insight generator backed by the OpenAI chat completions API."""

from __future__ import annotations

import logging
from typing import Optional

from openai import OpenAI, OpenAIError

from fittrack.config.settings import InsightSettings

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a fitness and nutrition analyst. "
    "Reply with a single JSON object and nothing else."
)


class InsightGeneratorError(Exception):
    """Raised when the language model request fails."""


class OpenAIInsightGenerator:
    """Send insight prompts to an OpenAI chat model and return the reply text."""

    DEFAULT_TEMPERATURE = 0.4

    def __init__(self, client: OpenAI, model: str):
        self.client = client
        self.model = model

    @classmethod
    def from_settings(cls, settings: InsightSettings) -> Optional[OpenAIInsightGenerator]:
        """Build a generator, or None when insights are disabled or no API key is set."""
        if not settings.is_configured:
            logger.debug("Insights disabled or %s not set", settings.api_key_env)
            return None
        return cls(OpenAI(api_key=settings.api_key), settings.model)

    def generate(self, prompt: str) -> str:
        """Run one chat completion for the prompt.

        Raises:
            InsightGeneratorError: If the API call fails
        """
        logger.debug("Requesting insights from %s (%d chars)", self.model, len(prompt))
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=self.DEFAULT_TEMPERATURE,
            )
        except OpenAIError as e:
            raise InsightGeneratorError(f"Language model error: {e}") from e

        usage = getattr(response, "usage", None)
        if usage is not None:
            logger.info(
                "Insight tokens: prompt=%s completion=%s",
                usage.prompt_tokens, usage.completion_tokens,
            )

        if not response.choices:
            raise InsightGeneratorError("Language model returned no choices")
        return (response.choices[0].message.content or "").strip()
