"""
Generation Service
==================

Handles one generation turn: validate the request, build the prompt,
call OpenRouter once, normalize the reply and report timing and token
usage. Upstream failures are translated into the service exception
hierarchy so the HTTP layer can map them to status codes.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..constants import DEFAULT_MODEL, Dialect
from ..utils.async_utils import run_async_safely
from .code_normalizer import normalize
from .openrouter_client import TRANSPORT_FAILURE_STATUS, OpenRouterClient
from .prompt_builder import build_messages
from .service_base import (
    ConfigurationError,
    GenerationFailed,
    UpstreamAuthError,
    UpstreamRateLimited,
    UpstreamTimeout,
    ValidationError,
)

logger = logging.getLogger(__name__)


@dataclass
class GenerationRequest:
    prompt: str
    model: str = DEFAULT_MODEL
    language: str = Dialect.JSX.value
    attachments: List[Dict[str, Any]] = field(default_factory=list)
    previous_code: Optional[Dict[str, Any]] = None


@dataclass
class GenerationResult:
    response: str
    component_code: Dict[str, str]
    model: str
    language: str
    processing_time_ms: int
    tokens: int

    @property
    def metadata(self) -> Dict[str, Any]:
        return {
            'model': self.model,
            'language': self.language,
            'processingTime': self.processing_time_ms,
            'tokens': self.tokens,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            'response': self.response,
            'componentCode': dict(self.component_code),
            'metadata': self.metadata,
        }


def validate_request(request: GenerationRequest) -> None:
    """Reject requests that must never reach the upstream API."""
    if not request.prompt or not request.prompt.strip():
        raise ValidationError('Prompt is required')
    if request.language not in Dialect.values():
        raise ValidationError(f"Unsupported language '{request.language}'")
    if not request.model or not request.model.strip():
        raise ValidationError('Model is required')


class GenerationService:
    """One OpenRouter round-trip per call; stateless apart from the client."""

    def __init__(self, client: OpenRouterClient, *, expose_upstream_details: bool = False):
        self.client = client
        self.expose_upstream_details = expose_upstream_details

    def generate(self, request: GenerationRequest) -> GenerationResult:
        validate_request(request)
        if not self.client.api_key:
            raise ConfigurationError('OpenRouter API key not configured')

        messages = build_messages(request.prompt, request.language, request.attachments, request.previous_code)

        started = time.perf_counter()
        success, data, status = run_async_safely(self.client.chat_completion(request.model, messages))
        elapsed_ms = int((time.perf_counter() - started) * 1000)

        if not success:
            self._raise_for_upstream(status, data)

        content = self._message_content(data)
        output = normalize(content, request.language)
        usage = data.get('usage') or {}

        logger.info(f"Component generated with {request.model} in {elapsed_ms}ms via {output.strategy}")
        return GenerationResult(
            response=output.explanation,
            component_code=output.code_bundle(),
            model=request.model,
            language=request.language,
            processing_time_ms=elapsed_ms,
            tokens=int(usage.get('total_tokens') or 0),
        )

    def _details(self, **details: Any) -> Optional[Dict[str, Any]]:
        return details if self.expose_upstream_details else None

    def _raise_for_upstream(self, status: int, data: Dict[str, Any]) -> None:
        upstream_error = data.get('error') if isinstance(data, dict) else None
        if status == TRANSPORT_FAILURE_STATUS:
            raise UpstreamTimeout('Request timeout. Please try again.')
        if status == 401:
            raise UpstreamAuthError('Invalid OpenRouter API key')
        if status == 429:
            raise UpstreamRateLimited('Rate limit exceeded. Please try again later.')
        logger.error(f"OpenRouter request failed with status {status}: {upstream_error}")
        raise GenerationFailed(
            'Failed to generate component. Please try again.',
            details=self._details(upstream_status=status, upstream_error=upstream_error),
        )

    def _message_content(self, data: Dict[str, Any]) -> str:
        try:
            content = data['choices'][0]['message']['content']
        except (KeyError, IndexError, TypeError):
            content = None
        if not isinstance(content, str):
            logger.error("OpenRouter response did not contain message content")
            raise GenerationFailed(
                'Failed to generate component. Please try again.',
                details=self._details(reason='missing message content'),
            )
        return content
