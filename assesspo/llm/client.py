"""LLM API wrapper for AssessPO, backed by litellm.

Supports any litellm-compatible provider (OpenAI, Anthropic, DeepSeek, Gemini,
etc.) via the Responses API. Model names use litellm's provider/model format,
e.g. "openai/gpt-4o", "anthropic/claude-sonnet-4-5-20250929".

Retries are not done here: the optimization loop owns retry and backoff, so
this layer only classifies failures as transient or permanent.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import litellm
import openai
from litellm.exceptions import (
    APIConnectionError,
    APIError,
    AuthenticationError,
    BadRequestError,
    InternalServerError,
    NotFoundError,
    RateLimitError,
    ServiceUnavailableError,
    Timeout,
)

from assesspo.config import ModelConfig
from assesspo.errors import GenerationError
from assesspo.types import Prompt

logger = logging.getLogger(__name__)

_TRANSIENT_ERRORS = (
    RateLimitError,
    InternalServerError,
    APIConnectionError,
    ServiceUnavailableError,
    Timeout,
)
_PERMANENT_ERRORS = (AuthenticationError, BadRequestError, NotFoundError)
# Statuses worth retrying among otherwise unclassified provider errors (plus 5xx).
_TRANSIENT_STATUS = frozenset({408, 409, 429})


@dataclass(frozen=True)
class LLMResponse:
    """Uniform response wrapper over litellm's ResponsesAPIResponse."""

    output_text: str
    id: str
    usage: Any


@dataclass(frozen=True)
class GenerationOptions:
    """Per-request generation knobs, passed through to the provider."""

    temperature: float | None = None
    max_tokens: int | None = None


@dataclass(frozen=True)
class GenerationRequest:
    """A prompt plus the options to generate it with."""

    prompt: Prompt
    options: GenerationOptions = field(default_factory=GenerationOptions)


class TextGenerator(ABC):
    """Abstract text-generation service.

    Implementations raise GenerationError on provider/network failure.
    """

    @abstractmethod
    async def generate(self, request: GenerationRequest) -> str:
        ...


def _get_output_text(response: Any) -> str:
    """Extract output text from a litellm ResponsesAPIResponse.

    litellm does NOT have .output_text — we walk response.output[i].content[j]
    looking for type=="output_text". Reasoning model responses have items with
    content=None (reasoning summary items) which we skip.
    """
    for item in response.output:
        content = getattr(item, "content", None)
        if not content:
            continue
        for block in content:
            if getattr(block, "type", None) == "output_text":
                return getattr(block, "text", "") or ""
    return ""


def _convert_messages(
    messages: list[dict[str, str]], is_reasoning: bool
) -> list[dict[str, Any]]:
    """Convert simple messages to Responses API input format.

    Callers pass: [{"role": "system", "content": "..."}]
    We convert to: [{"role": "system"|"developer", "content": [{"type": "input_text", "text": "..."}]}]
    """
    converted = []
    for msg in messages:
        role = msg["role"]
        if role == "system" and is_reasoning:
            role = "developer"
        content_type = "output_text" if role == "assistant" else "input_text"
        converted.append(
            {
                "role": role,
                "content": [{"type": content_type, "text": msg["content"]}],
            }
        )
    return converted


async def call_llm(
    *,
    model: str,
    messages: list[dict[str, str]],
    is_reasoning: bool = False,
    reasoning_effort: str = "medium",
    temperature: float = 0.0,
    max_tokens: int | None = None,
) -> LLMResponse:
    """Call an LLM once via litellm's Responses API.

    Raises:
        GenerationError: transient=True for rate limits, server errors,
            connection failures and provider timeouts; transient=False for
            authentication, bad-request and unknown-model errors. Any other
            provider API error is classified by status code: 5xx, 408, 409,
            429 and status-less errors are transient, other 4xx permanent.
    """
    kwargs: dict[str, Any] = {
        "model": model,
        "input": _convert_messages(messages, is_reasoning),
        "text": {"format": {"type": "text"}},
    }
    if is_reasoning:
        kwargs["reasoning"] = {"effort": reasoning_effort, "summary": "auto"}
    else:
        kwargs["temperature"] = temperature
    if max_tokens is not None:
        kwargs["max_output_tokens"] = max_tokens

    try:
        response = await litellm.aresponses(**kwargs)
    except _TRANSIENT_ERRORS as e:
        logger.warning("call_llm to %s failed (transient): %s", model, e)
        raise GenerationError(f"{model}: {e}", transient=True) from e
    except _PERMANENT_ERRORS as e:
        logger.error("call_llm to %s failed: %s", model, e)
        raise GenerationError(f"{model}: {e}", transient=False) from e
    except (APIError, openai.APIError) as e:
        status = getattr(e, "status_code", None)
        transient = status is None or status >= 500 or status in _TRANSIENT_STATUS
        logger.warning("call_llm to %s failed (status=%s): %s", model, status, e)
        raise GenerationError(f"{model}: {e}", transient=transient) from e

    return LLMResponse(
        output_text=_get_output_text(response),
        id=response.id,
        usage=response.usage,
    )


class LiteLLMGenerator(TextGenerator):
    """TextGenerator backed by call_llm()."""

    def __init__(self, model: ModelConfig) -> None:
        self.model = model

    async def generate(self, request: GenerationRequest) -> str:
        options = request.options
        temperature = (
            options.temperature if options.temperature is not None else self.model.temperature
        )
        max_tokens = options.max_tokens if options.max_tokens is not None else self.model.max_tokens
        response = await call_llm(
            model=self.model.name,
            messages=[{"role": "user", "content": request.prompt.render()}],
            is_reasoning=self.model.is_reasoning,
            reasoning_effort=self.model.reasoning_effort,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        return response.output_text
