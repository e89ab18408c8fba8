import logging
from typing import Any, Dict

from src.core.constants import ANTHROPIC_URL, ANTHROPIC_VERSION
from src.core.errors import ProviderError, envelope_error_message
from src.core.schemas import RequestConfig
from src.interfaces.llm_provider import LLMProvider, ProviderRequest

logger = logging.getLogger(__name__)


class AnthropicAdapter(LLMProvider):
    """
    Adapter implementation for the Anthropic Messages API.
    A body without an `error` key is a success; the reply is `content[0].text`.
    """

    name = "Anthropic"

    def __init__(self, url: str = ANTHROPIC_URL, version: str = ANTHROPIC_VERSION) -> None:
        self.url = url
        self.version = version

    def build_request(
        self,
        config: RequestConfig,
        system_prompt: str,
        user_message: str,
    ) -> ProviderRequest:
        payload = {
            "model": config.model,
            "max_tokens": config.max_output_tokens,
            "system": system_prompt,
            "messages": [{"role": "user", "content": user_message}],
            "temperature": config.temperature,
        }
        headers = {
            "Content-Type": "application/json",
            "x-api-key": config.api_key.get_secret_value(),
            "anthropic-version": self.version,
        }

        logger.debug(f"Prepared Anthropic request for model {config.model}")
        return ProviderRequest(url=self.url, headers=headers, payload=payload)

    def extract_text(self, envelope: Dict[str, Any]) -> str:
        error = envelope_error_message(envelope)
        if error:
            raise ProviderError(f"Anthropic API error: {error}")

        content = envelope.get("content")
        try:
            text = content[0]["text"]
        except (IndexError, KeyError, TypeError):
            raise ProviderError("Unexpected Anthropic response format") from None

        if not isinstance(text, str):
            raise ProviderError("Unexpected Anthropic response format")
        return text
