import logging
from typing import Tuple

from src.core.schemas import (
    BoolField,
    ChoicesField,
    ClassificationSchema,
    FieldDefinition,
    MemoField,
    TextField,
)

logger = logging.getLogger(__name__)

INTRO = "You are a support ticket classifier. Analyze tickets and classify them.\n\n"


def _describe_field(key: str, field: FieldDefinition) -> str:
    line = f"- Field: {key} (Label: {field.label}, Type: {field.type})"

    if isinstance(field, (TextField, MemoField)) and field.max_length:
        line += f" - Max {field.max_length} characters"
    if field.validator_hint:
        line += f" - Must be valid {field.validator_hint}"

    if isinstance(field, ChoicesField) and field.choices:
        if field.multiselect:
            line += " - Multiple selections allowed, return as array"
        line += " - Choices: " + ", ".join(field.choices.values())
    elif isinstance(field, BoolField):
        line += " - Use true or false"

    return line


def _placeholder(field: FieldDefinition) -> str:
    if isinstance(field, BoolField):
        return "<true|false>"
    if isinstance(field, ChoicesField) and field.multiselect:
        return '["<value>"]'
    return '"<value>"'


def build_system_prompt(schema: ClassificationSchema) -> str:
    """
    Renders the instruction prompt for a classification schema.

    Topics, priorities and custom fields are listed in schema order, followed
    by a JSON skeleton using the exact keys the validator reads back.

    Args:
        schema (ClassificationSchema): Allowed topics, priorities and custom fields.

    Returns:
        str: The system/instruction prompt.
    """
    prompt = INTRO

    prompt += "AVAILABLE TOPICS (choose one topic_id):\n"
    for topic_id, name in schema.topics.items():
        prompt += f"- ID: {topic_id}, Name: {name}\n"
    prompt += "\n"

    prompt += "AVAILABLE PRIORITIES (choose one priority_id):\n"
    for priority_id, name in schema.priorities.items():
        prompt += f"- ID: {priority_id}, Name: {name}\n"
    prompt += "\n"

    if schema.custom_fields:
        prompt += "CUSTOM FIELDS TO FILL:\n"
        for key, field in schema.custom_fields.items():
            prompt += _describe_field(key, field) + "\n"
        prompt += "\n"

    # --- RESPONSE FORMAT ---
    prompt += "RESPOND WITH VALID JSON ONLY (no markdown, no explanation):\n"
    prompt += '{\n  "topic_id": <number>,\n  "priority_id": <number>'

    if schema.custom_fields:
        lines = [
            f'    "{key}": {_placeholder(field)}'
            for key, field in schema.custom_fields.items()
        ]
        prompt += ',\n  "custom_fields": {\n' + ",\n".join(lines) + "\n  }"

    prompt += "\n}"
    return prompt


def build_user_message(content: str) -> str:
    return f"Classify this ticket:\n\n{content}"


def build_prompts(content: str, schema: ClassificationSchema) -> Tuple[str, str]:
    """Returns `(system_prompt, user_message)` for one ticket."""
    system_prompt = build_system_prompt(schema)
    logger.debug(
        f"Built prompt with {len(schema.topics)} topics, {len(schema.priorities)} "
        f"priorities and {len(schema.custom_fields)} custom fields."
    )
    return system_prompt, build_user_message(content)
