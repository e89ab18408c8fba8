"""Single-shot HTTP transport shared by every provider adapter."""

import logging
from typing import Dict, Union

import requests

from src.adapters.anthropic_adapter import AnthropicAdapter
from src.adapters.openai_adapter import OpenAIAdapter
from src.core.errors import ConfigError, ProviderError, TransportError, envelope_error_message
from src.core.schemas import Provider, RequestConfig
from src.interfaces.llm_provider import LLMProvider

logger = logging.getLogger(__name__)

_PROVIDERS: Dict[Provider, LLMProvider] = {
    Provider.OPENAI: OpenAIAdapter(),
    Provider.ANTHROPIC: AnthropicAdapter(),
}


def get_provider(provider: Union[Provider, str]) -> LLMProvider:
    """Resolves a provider name to its adapter. Unknown names are a ConfigError."""
    if not isinstance(provider, Provider):
        try:
            provider = Provider(str(provider).strip().lower())
        except ValueError:
            raise ConfigError(f"Unsupported AI provider: {provider!r}") from None
    return _PROVIDERS[provider]


def send(
    provider: Union[Provider, str],
    config: RequestConfig,
    system_prompt: str,
    user_message: str,
) -> str:
    """
    Performs exactly one POST to the provider and returns the assistant's raw text.

    No retries: a failed attempt surfaces immediately. TLS verification is
    always on.

    Args:
        provider (Union[Provider, str]): Which API envelope to speak.
        config (RequestConfig): Credentials, model and generation settings.
        system_prompt (str): Classification instructions.
        user_message (str): The ticket content as a user turn.

    Returns:
        str: The raw assistant reply (purportedly JSON).

    Raises:
        TransportError: No HTTP response was obtained (network error, timeout).
        ProviderError: HTTP status >= 400 or a malformed/erroring envelope.
    """
    adapter = get_provider(provider)
    request = adapter.build_request(config, system_prompt, user_message)

    try:
        logger.debug(f"Sending classification request to {adapter.name} ({config.model})")
        response = requests.post(
            request.url,
            json=request.payload,
            headers=request.headers,
            timeout=config.timeout_seconds,
            verify=True,
        )
    except requests.Timeout as e:
        raise TransportError(
            f"{adapter.name} request timed out after {config.timeout_seconds}s: {e}"
        ) from e
    except requests.RequestException as e:
        raise TransportError(f"{adapter.name} request failed: {e}") from e

    if response.status_code >= 400:
        try:
            body = response.json()
        except ValueError:
            body = None
        message = envelope_error_message(body) or response.text
        raise ProviderError(
            f"{adapter.name} API error (HTTP {response.status_code}): {message}",
            status_code=response.status_code,
        )

    try:
        envelope = response.json()
    except ValueError as e:
        raise ProviderError(
            f"Invalid JSON from {adapter.name}: {e}", status_code=response.status_code
        ) from e

    if not isinstance(envelope, dict):
        raise ProviderError(
            f"Invalid JSON from {adapter.name}: expected an object",
            status_code=response.status_code,
        )

    text = adapter.extract_text(envelope)
    logger.debug(f"{adapter.name} replied with {len(text)} characters")
    return text
