"""
Text generation client for the primary AI data source.

Requests go through LiteLLM so the model can be swapped with the
TICKER_AI_MODEL setting. Each call draws the next credential from the
key pool.
"""
from typing import Any

import litellm

from .config import AI_MODEL, AI_TIMEOUT
from .exceptions import FetchError, ParseError
from .key_pool import KeyRotationPool
from .logger import logger
from .utils import decode_fenced_json, format_error_message

# Suppress LiteLLM's verbose logging
litellm.suppress_debug_info = True

# Drop parameters the selected model does not accept
litellm.drop_params = True

WEB_SEARCH_TOOL = {"googleSearch": {}}


class AIClient:
    """Issues single-turn prompts and returns the raw response text."""

    def __init__(self, key_pool: KeyRotationPool, model: str = AI_MODEL,
                 timeout: float = AI_TIMEOUT):
        self.key_pool = key_pool
        self.model = model
        self.timeout = timeout

    def generate(self, prompt: str, web_search: bool = False, json_mode: bool = False) -> str:
        """
        Run one prompt against the model.

        Args:
            prompt: Natural-language instruction
            web_search: Let the model ground its answer with web search
            json_mode: Ask for a JSON response body

        Returns:
            Response text

        Raises:
            ConfigurationError: If no credential is available
            FetchError: If the request fails or times out
        """
        api_key = self.key_pool.next()

        kwargs: dict = {}
        if web_search:
            kwargs["tools"] = [WEB_SEARCH_TOOL]
        elif json_mode:
            # Gemini rejects a JSON response format combined with search tools
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = litellm.completion(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                api_key=api_key,
                timeout=self.timeout,
                **kwargs
            )
        except Exception as e:
            raise FetchError(f"AI request failed: {format_error_message(e)}") from e

        try:
            text = response.choices[0].message.content
        except (AttributeError, IndexError) as e:
            raise FetchError("AI response had no message") from e

        logger.debug(f"AI response: {len(text or '')} characters")
        return text or ""

    def generate_json(self, prompt: str, web_search: bool = False) -> Any:
        """
        Run a prompt and decode its structured reply.

        Raises:
            ConfigurationError: If no credential is available
            FetchError: If the request fails
            ParseError: If the reply is not decodable JSON
        """
        text = self.generate(prompt, web_search=web_search, json_mode=True)
        result = decode_fenced_json(text)
        if not result.ok:
            logger.warning(f"Could not decode AI response ({result.error})")
            logger.debug(f"Raw AI response: {text[:500]}")
            raise ParseError(f"AI response was not valid JSON: {result.error}")
        return result.value
