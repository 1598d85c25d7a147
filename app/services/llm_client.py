"""
Text-generation backend client.

The backend speaks the OpenAI chat-completions API (Ollama exposes it under
/v1), so we use the openai library.

ONE CALL PER REQUEST:
- stream=False, the full response comes back in one shot
- SDK retries are disabled, a failed attempt is surfaced immediately
- every call carries its own timeout
"""
import logging
from typing import Optional

import openai
from openai import OpenAI

from app.core.config import get_settings
from app.core.errors import (
    AppError,
    BackendError,
    BackendUnavailable,
    EmptyBackendResponse,
    ModelNotFound,
)

logger = logging.getLogger(__name__)


class LLMClient:
    """
    Wrapper for the text-generation backend with error translation.
    """

    def __init__(self, client: Optional[OpenAI] = None):
        settings = get_settings()
        self.base_url = settings.llm_base_url
        self.model = settings.llm_model
        self.client = client or OpenAI(
            api_key=settings.llm_api_key,
            base_url=settings.llm_base_url,
            max_retries=0,
        )

    def _call_api(self, prompt: str, timeout: float, max_tokens: Optional[int] = None) -> str:
        """
        Internal method to call the backend.
        Returns raw text response (may be empty).
        """
        kwargs = {}
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens

        response = self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            stream=False,
            timeout=timeout,
            **kwargs,
        )
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    def generate(self, prompt: str, timeout: float, max_tokens: Optional[int] = None) -> str:
        """
        Send a single prompt and return the backend's text.

        Raises:
            BackendUnavailable: backend could not be reached
            ModelNotFound: backend does not know the configured model
            BackendError: timeout or any other backend-side failure
            EmptyBackendResponse: backend answered with no text
        """
        try:
            text = self._call_api(prompt, timeout=timeout, max_tokens=max_tokens)
        except openai.APITimeoutError as e:
            # APITimeoutError subclasses APIConnectionError, check it first
            logger.error("AI service timed out after %ss: %s", timeout, e)
            raise BackendError(f"AI service error: {e}") from e
        except openai.APIConnectionError as e:
            logger.error("Cannot connect to AI service at %s: %s", self.base_url, e)
            raise BackendUnavailable(
                f"Cannot connect to AI service. Make sure it is running at {self.base_url}"
            ) from e
        except openai.NotFoundError as e:
            logger.error("Model %r not found: %s", self.model, e)
            raise ModelNotFound(
                f'Model "{self.model}" not found. Please run: ollama pull {self.model}'
            ) from e
        except openai.APIError as e:
            logger.error("AI service error: %s", e)
            raise BackendError(f"AI service error: {e}") from e

        if not text.strip():
            raise EmptyBackendResponse()

        logger.info("Received %d characters from AI service", len(text))
        return text

    def test_connection(self) -> bool:
        """Test if the backend is reachable and the model answers."""
        try:
            response = self.generate("Reply with exactly: OK", timeout=10, max_tokens=10)
            return "OK" in response.upper()
        except AppError as e:
            logger.warning("AI service connection failed: %s", e)
            return False


# Singleton instance
_llm_client: Optional[LLMClient] = None


def get_llm_client() -> LLMClient:
    """Get or create the backend client (singleton pattern)"""
    global _llm_client
    if _llm_client is None:
        _llm_client = LLMClient()
    return _llm_client
