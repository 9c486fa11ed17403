"""API Client for OpenRouter
============================

Minimal async client for OpenRouter chat completions.

One request per generation turn with a fixed timeout; no retry and no
circuit breaking. Transport failures are reported with status 408 so the
caller can treat them as a timeout.
"""

import asyncio
import logging
import time
import uuid
from typing import Any, Dict, List, Tuple

import aiohttp

from ..constants import (
    GENERATION_MAX_TOKENS,
    GENERATION_TEMPERATURE,
    GENERATION_TIMEOUT_SECONDS,
    GENERATION_TITLE,
    GENERATION_TOP_P,
)

logger = logging.getLogger(__name__)

TRANSPORT_FAILURE_STATUS = 408


class OpenRouterClient:
    """Client for OpenRouter chat completions.

    Usage:
        client = OpenRouterClient(api_key, referer="http://localhost:3000")
        success, data, status = await client.chat_completion(
            model="microsoft/wizardlm-2-8x22b",
            messages=[{"role": "user", "content": "Hello"}],
        )
    """

    API_URL = "https://openrouter.ai/api/v1/chat/completions"

    def __init__(self, api_key: str, *, api_url: str = API_URL, referer: str = '',
                 title: str = GENERATION_TITLE, timeout: int = GENERATION_TIMEOUT_SECONDS):
        self.api_key = api_key
        self.api_url = api_url
        self.referer = referer
        self.title = title
        self.timeout = timeout

    @classmethod
    def from_config(cls, config) -> 'OpenRouterClient':
        return cls(
            config.get('OPENROUTER_API_KEY', ''),
            api_url=config.get('OPENROUTER_API_URL') or cls.API_URL,
            referer=config.get('FRONTEND_URL', ''),
        )

    def _headers(self) -> Dict[str, str]:
        """Build request headers."""
        return {
            "Authorization": f"Bearer {self.api_key}",
            "HTTP-Referer": self.referer,
            "X-Title": self.title,
            "Content-Type": "application/json",
            "X-Request-ID": str(uuid.uuid4()),
        }

    def _payload(self, model: str, messages: List[Dict[str, str]]) -> Dict[str, Any]:
        """Build request payload with the fixed sampling parameters."""
        return {
            "model": model,
            "messages": messages,
            "max_tokens": GENERATION_MAX_TOKENS,
            "temperature": GENERATION_TEMPERATURE,
            "top_p": GENERATION_TOP_P,
        }

    async def chat_completion(self, model: str, messages: List[Dict[str, str]]) -> Tuple[bool, Dict[str, Any], int]:
        """Make a single chat completion request.

        Returns:
            Tuple of (success, response_data, status_code)
        """
        short_model = model.split('/')[-1] if '/' in model else model
        start_time = time.perf_counter()

        try:
            logger.info(f"API call -> {short_model}")
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    self.api_url,
                    json=self._payload(model, messages),
                    headers=self._headers(),
                    timeout=aiohttp.ClientTimeout(total=self.timeout),
                ) as response:
                    status_code = response.status
                    content_type = response.headers.get('Content-Type', '')
                    if 'application/json' in content_type:
                        try:
                            data = await response.json()
                        except (aiohttp.ContentTypeError, ValueError):
                            text = await response.text()
                            data = {"error": f"Invalid JSON: {text[:200]}"}
                    else:
                        text = await response.text()
                        data = {"error": f"Non-JSON response: {text[:200]}"}
        except asyncio.TimeoutError:
            logger.warning(f"Timeout after {self.timeout}s ({short_model})")
            return False, {"error": "Request timeout"}, TRANSPORT_FAILURE_STATUS
        except aiohttp.ClientError as e:
            logger.warning(f"Network error calling OpenRouter: {e}")
            return False, {"error": f"Network error: {e}"}, TRANSPORT_FAILURE_STATUS

        elapsed = time.perf_counter() - start_time
        if not isinstance(data, dict):
            data = {"error": "Unexpected response body"}

        if status_code == 200:
            if 'choices' not in data:
                error_msg = data.get('error', 'Missing choices')
                if isinstance(error_msg, dict):
                    error_msg = error_msg.get('message', 'Missing choices')
                logger.error(f"Malformed 200 response: {error_msg}")
                return False, {"error": error_msg}, status_code

            usage = data.get('usage') or {}
            logger.info(f"{short_model} answered in {elapsed:.1f}s ({usage.get('total_tokens', 0)} tokens)")
            return True, data, status_code

        error_obj = data.get('error', {})
        error_msg = error_obj.get('message', str(data)) if isinstance(error_obj, dict) else str(error_obj)
        logger.warning(f"API error {status_code} ({short_model}): {error_msg}")
        return False, {"error": error_msg}, status_code
