import logging
from typing import List, Optional

from src.core.client import ClassificationClient
from src.core.config import ClassifierSettings
from src.core.errors import ClassifierError
from src.core.schemas import (
    ChoicesField,
    ClassificationResult,
    ClassificationSchema,
    RequestConfig,
)
from src.core.utils import build_ticket_content, clean_message_body

logger = logging.getLogger(__name__)


class ClassifierService:
    """
    Host-side glue around the classification client.

    Narrows the schema to the custom fields the administrator opted into,
    masks topic/priority when those are disabled, and decides what happens
    to failures (log or stay silent).
    """

    def __init__(
        self,
        config: RequestConfig,
        settings: Optional[ClassifierSettings] = None,
        client: Optional[ClassificationClient] = None,
    ) -> None:
        self.config = config
        self.settings = settings or ClassifierSettings()
        self.client = client or ClassificationClient(config)

    def restrict_schema(self, schema: ClassificationSchema) -> ClassificationSchema:
        """Keeps only opted-in custom fields. `None` means every field in the schema."""
        selected = self.settings.custom_fields
        if selected is None:
            return schema
        return schema.model_copy(
            update={
                "custom_fields": {
                    key: field
                    for key, field in schema.custom_fields.items()
                    if key in selected
                }
            }
        )

    def run(self, content: str, schema: ClassificationSchema) -> ClassificationResult:
        """
        Classifies content and applies the topic/priority toggles.

        Raises:
            ClassifierError: Any typed failure from the client, unchanged.
        """
        result = self.client.classify(content, self.restrict_schema(schema))

        updates = {}
        if not self.settings.classify_topic:
            updates["topic_id"] = None
        if not self.settings.classify_priority:
            updates["priority_id"] = None
        if updates:
            result = result.model_copy(update=updates)

        if self.settings.debug_logging:
            changes = describe_changes(result, schema)
            logger.info(f"Classification: {', '.join(changes) or 'no changes'}")
        return result

    def classify_ticket(
        self,
        subject: str,
        message: Optional[str],
        schema: ClassificationSchema,
    ) -> Optional[ClassificationResult]:
        """
        Automatic classification path: never raises a ClassifierError.

        Returns None on failure; whether the failure is logged depends on
        the `error_handling` setting.
        """
        content = build_ticket_content(subject, clean_message_body(message))
        return self.classify_content(content, schema)

    def classify_content(
        self, content: str, schema: ClassificationSchema
    ) -> Optional[ClassificationResult]:
        try:
            return self.run(content, schema)
        except ClassifierError as e:
            self.handle_error(e)
            return None

    def handle_error(self, error: ClassifierError) -> None:
        if self.settings.error_handling == "log":
            logger.error(
                f"Classification failed: {error}",
                extra={"error_type": type(error).__name__},
            )
        # 'silent': the ticket simply stays unclassified


def describe_changes(result: ClassificationResult, schema: ClassificationSchema) -> List[str]:
    """
    Human-readable lines for what a host would apply, e.g. `Topic: Billing`.
    """
    changes = []
    if result.topic_id is not None:
        changes.append(f"Topic: {schema.topics.get(result.topic_id, 'Unknown')}")
    if result.priority_id is not None:
        changes.append(f"Priority: {schema.priorities.get(result.priority_id, 'Unknown')}")

    for key, value in result.custom_fields.items():
        field = schema.custom_fields.get(key)
        if isinstance(field, ChoicesField):
            keys = sorted(value) if isinstance(value, set) else [value]
            display = ", ".join(field.choices.get(k, k) for k in keys)
        elif isinstance(value, bool):
            display = "true" if value else "false"
        else:
            display = str(value)
        changes.append(f"{key}: {display}")

    return changes
