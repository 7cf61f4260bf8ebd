"""
Groq API Client - async wrapper for drug classification calls.

================================================================================
LLM ROLE IS CLASSIFIER ONLY
================================================================================

This client sends one JSON-mode chat completion per drug registration and
hands back the raw text. It does not:
- touch the catalog or the ledger
- retry on its own (a failed registration is retried by the user)
- log API keys

Every failure surfaces as ClassificationError so registration can abort
cleanly with nothing added to the catalog.
================================================================================
"""

import logging
from typing import Optional

from groq import AsyncGroq, APIError, APITimeoutError, RateLimitError

from csinventory.core.config import settings
from csinventory.core.exceptions import ClassificationError

# Configure logging (NEVER log API keys)
logger = logging.getLogger(__name__)


class GroqClient:
    """
    Minimal async wrapper for the Groq chat completions API.

    - Model: settings.GROQ_MODEL (llama-3.3-70b-versatile by default)
    - Temperature: 0 (same drug name = same answer)
    - Max tokens: 256 (the answer is three short JSON fields)
    - Timeout: settings.CLASSIFIER_TIMEOUT_SECONDS
    - Retries: none
    """

    TEMPERATURE = 0
    MAX_TOKENS = 256

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        api_key = settings.GROQ_API_KEY if api_key is None else api_key
        self.model = model or settings.GROQ_MODEL
        self.timeout = settings.CLASSIFIER_TIMEOUT_SECONDS if timeout is None else timeout

        if not api_key:
            logger.warning(
                "GROQ_API_KEY not found in environment. "
                "Drug registration will fail until it is set in backend/.env."
            )
            self.client = None
        else:
            self.client = AsyncGroq(api_key=api_key, timeout=self.timeout, max_retries=0)
            logger.info(f"Groq client initialized (model={self.model})")

    def is_available(self) -> bool:
        """Check if Groq client is ready to use."""
        return self.client is not None

    async def complete_json(self, system_prompt: str, user_prompt: str) -> str:
        """
        Run one JSON-mode completion and return the raw message text.

        Raises:
            ClassificationError: client not configured, API failure, empty answer
        """
        if not self.is_available():
            raise ClassificationError("Classification service is not configured")

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=self.TEMPERATURE,
                max_tokens=self.MAX_TOKENS,
                response_format={"type": "json_object"},
                stream=False,
            )
        except APITimeoutError as e:
            logger.warning(f"Groq API timeout after {self.timeout}s")
            raise ClassificationError("Classification service timed out") from e
        except RateLimitError as e:
            logger.warning("Groq API rate limit exceeded")
            raise ClassificationError("Classification service is busy, try again shortly") from e
        except APIError as e:
            logger.error(f"Groq API error: {e}")
            raise ClassificationError("Classification service request failed") from e

        if not response.choices:
            logger.warning("LLM returned empty response")
            raise ClassificationError("Classification service returned no answer")

        content = response.choices[0].message.content
        if not content:
            logger.warning("LLM returned empty message content")
            raise ClassificationError("Classification service returned no answer")

        logger.debug(f"LLM response received: {len(content)} chars")
        return content
