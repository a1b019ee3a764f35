"""LiteLLM client wrapper for answer generation.

Every model call in repochat routes through ``generate()``. The credential
is passed per call rather than read from the environment, and nothing is
retried: one request, one response.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import litellm

from repochat.errors import RepoChatError

# Disable LiteLLM verbose logging unless explicitly enabled
litellm.suppress_debug_info = True
litellm.set_verbose = False  # type: ignore[assignment]


class ProviderError(RepoChatError):
    """The model provider returned a non-success response."""

    status_code = 500


@dataclass(frozen=True)
class GenerationConfig:
    temperature: float = 0.7
    top_k: int = 40
    top_p: float = 0.95
    max_output_tokens: int = 2048


def generate(
    model: str,
    messages: list[dict],
    api_key: str,
    config: GenerationConfig = GenerationConfig(),
) -> Any:
    """Send *messages* to *model* and return the raw completion response.

    Args:
        model: LiteLLM model string (provider/model format).
        messages: Role-tagged message list, in prompt order.
        api_key: Provider credential for this call.
        config: Sampling parameters.

    Raises:
        ProviderError: On any provider or transport failure; the message
            carries the provider's error text.
    """
    try:
        return litellm.completion(
            model=model,
            messages=messages,
            api_key=api_key,
            temperature=config.temperature,
            top_k=config.top_k,
            top_p=config.top_p,
            max_tokens=config.max_output_tokens,
            num_retries=0,
        )
    except Exception as exc:
        detail = getattr(exc, "message", None) or str(exc)
        raise ProviderError(f"LLM API error: {detail}") from exc


def first_text(response: Any) -> str | None:
    """Return the first candidate's text, or None if the response has no such shape."""
    try:
        content = response.choices[0].message.content
    except (AttributeError, IndexError, KeyError, TypeError):
        return None
    if isinstance(content, str) and content:
        return content
    return None
