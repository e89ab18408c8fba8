import logging

from src.core import transport
from src.core.prompt_builder import build_prompts
from src.core.schemas import ClassificationResult, ClassificationSchema, RequestConfig
from src.core.validator import parse_classification

logger = logging.getLogger(__name__)


class ClassificationClient:
    """
    Classifies ticket content through the configured AI provider.

    Each call is an independent transaction: build the prompt, send one
    request, validate the reply. Nothing is kept between calls, so one
    instance can be shared across threads.
    """

    def __init__(self, config: RequestConfig) -> None:
        self.config = config

    def classify(self, content: str, schema: ClassificationSchema) -> ClassificationResult:
        """
        Args:
            content (str): Plain-text ticket content, already cleaned by the caller.
            schema (ClassificationSchema): Allowed topics, priorities and custom fields.

        Returns:
            ClassificationResult: A fully schema-valid result.

        Raises:
            ConfigError, TransportError, ProviderError, ParseError
        """
        system_prompt, user_message = build_prompts(content, schema)
        raw_text = transport.send(
            self.config.provider, self.config, system_prompt, user_message
        )
        result = parse_classification(raw_text, schema)

        logger.debug(
            f"Classification via {self.config.provider.value}: topic={result.topic_id} "
            f"priority={result.priority_id} custom_fields={sorted(result.custom_fields)}"
        )
        return result


def classify(
    content: str, schema: ClassificationSchema, config: RequestConfig
) -> ClassificationResult:
    """Shortcut for a one-off classification."""
    return ClassificationClient(config).classify(content, schema)
