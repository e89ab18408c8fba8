import logging
from typing import Any, Dict

from src.core.constants import OPENAI_URL
from src.core.errors import ProviderError, envelope_error_message
from src.core.schemas import RequestConfig
from src.interfaces.llm_provider import LLMProvider, ProviderRequest

# Initialize logger for this module
logger = logging.getLogger(__name__)


class OpenAIAdapter(LLMProvider):
    """
    Adapter implementation for the OpenAI Responses API.
    Success is signalled by `status == "completed"`; the reply text lives in
    the first `output_text` block of the first `message` output item.
    """

    name = "OpenAI"

    def __init__(self, url: str = OPENAI_URL) -> None:
        self.url = url

    def build_request(
        self,
        config: RequestConfig,
        system_prompt: str,
        user_message: str,
    ) -> ProviderRequest:
        payload: Dict[str, Any] = {
            "model": config.model,
            "instructions": system_prompt,
            "input": user_message,
            "max_output_tokens": config.max_output_tokens,
            "store": config.store_responses,
        }

        # Reasoning-tier models reject the parameter itself, not only bad values
        if config.supports_temperature:
            payload["temperature"] = config.temperature
        elif config.reasoning_effort:
            payload["reasoning"] = {"effort": config.reasoning_effort}

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {config.api_key.get_secret_value()}",
        }

        logger.debug(
            f"Prepared OpenAI request for model {config.model} "
            f"(temperature {'sent' if 'temperature' in payload else 'omitted'})"
        )
        return ProviderRequest(url=self.url, headers=headers, payload=payload)

    def extract_text(self, envelope: Dict[str, Any]) -> str:
        error = envelope_error_message(envelope)
        if error:
            raise ProviderError(f"OpenAI API error: {error}")

        status = envelope.get("status")
        if status == "incomplete":
            details = envelope.get("incomplete_details") or {}
            reason = details.get("reason", "unknown") if isinstance(details, dict) else "unknown"
            raise ProviderError(
                f"OpenAI response incomplete: {reason}. Try increasing max_output_tokens."
            )
        if status != "completed":
            raise ProviderError(f"OpenAI response status: {status or 'unknown'}")

        output = envelope.get("output")
        if not isinstance(output, list):
            raise ProviderError("OpenAI response missing output array")

        for item in output:
            if not isinstance(item, dict) or item.get("type") != "message":
                continue
            for block in item.get("content") or []:
                if (
                    isinstance(block, dict)
                    and block.get("type") == "output_text"
                    and isinstance(block.get("text"), str)
                ):
                    return block["text"]

        raise ProviderError("No text content found in OpenAI response")
