from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict

from src.core.schemas import RequestConfig


@dataclass
class ProviderRequest:
    """A fully built outbound call: where to POST, with which headers and JSON body."""

    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    payload: Dict[str, Any] = field(default_factory=dict)


class LLMProvider(ABC):
    """
    Abstract base class for LLM providers.

    This enforces a Strategy Pattern: each provider owns its request shape
    and its response envelope, while the transport stays provider-agnostic.
    """

    name: str = "provider"

    @abstractmethod
    def build_request(
        self,
        config: RequestConfig,
        system_prompt: str,
        user_message: str,
    ) -> ProviderRequest:
        """
        Builds the provider-specific HTTP request.

        Args:
            config (RequestConfig): Model, credentials and generation settings.
            system_prompt (str): The classification instructions.
            user_message (str): The ticket content wrapped as a user turn.

        Returns:
            ProviderRequest: URL, headers (including auth) and JSON payload.
        """

    @abstractmethod
    def extract_text(self, envelope: Dict[str, Any]) -> str:
        """
        Pulls the assistant's raw text out of a decoded 2xx response body.

        Args:
            envelope (Dict[str, Any]): The decoded JSON response.

        Returns:
            str: The assistant reply, untouched.

        Raises:
            ProviderError: If the envelope reports an error, is incomplete,
                or does not contain the text where the provider puts it.
        """
