"""
Turns the untrusted assistant reply into a schema-conformant ClassificationResult.

Only a payload that cannot be parsed as a JSON object is fatal. Every
individual value that cannot be resolved against the schema is dropped.
"""

import json
import logging
import re
from typing import Any, Dict, Mapping, Optional, Set

from src.core.errors import ParseError
from src.core.schemas import (
    BoolField,
    ChoicesField,
    ClassificationResult,
    ClassificationSchema,
    FieldDefinition,
    FieldValue,
)

logger = logging.getLogger(__name__)

_FENCE_OPEN = re.compile(r"^```(?:json)?\s*", re.I)
_FENCE_CLOSE = re.compile(r"\s*```$")

_TRUE_WORDS = {"true", "yes", "y", "on", "1"}
_FALSE_WORDS = {"false", "no", "n", "off", "0"}


def strip_code_fence(text: str) -> str:
    """Removes surrounding whitespace and an optional ```json / ``` wrapper."""
    text = text.strip()
    text = _FENCE_OPEN.sub("", text)
    text = _FENCE_CLOSE.sub("", text)
    return text.strip()


def _coerce_id(value: Any, allowed: Mapping[int, str]) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, int):
        candidate = value
    elif isinstance(value, float):
        if not value.is_integer():
            return None
        candidate = int(value)
    elif isinstance(value, str):
        try:
            candidate = int(value.strip())
        except ValueError:
            return None
    else:
        return None

    return candidate if candidate in allowed else None


def _coerce_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    return None


def _choice_token(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return None


def _resolve_choice(value: Any, choices: Mapping[str, str]) -> Optional[str]:
    """Matches a display value first, then a choice key. Returns the choice key."""
    token = _choice_token(value)
    if token is None:
        return None

    for key, display in choices.items():
        if display == token:
            return key
    if token in choices:
        return token
    return None


def _coerce_text(value: Any, max_length: Optional[int]) -> Optional[str]:
    if isinstance(value, str):
        text = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        text = str(value)
    else:
        return None

    if max_length and len(text) > max_length:
        text = text[:max_length]
    return text


def coerce_field(field: FieldDefinition, value: Any) -> Optional[FieldValue]:
    """
    Coerces one parsed value to the type its field demands.

    Returns None when the value cannot be resolved; the caller drops it.
    """
    if value is None:
        return None

    if isinstance(field, BoolField):
        return _coerce_bool(value)

    if isinstance(field, ChoicesField):
        if not field.multiselect:
            return _resolve_choice(value, field.choices)
        if not isinstance(value, list):
            return None
        keys: Set[str] = set()
        for item in value:
            key = _resolve_choice(item, field.choices)
            if key is not None:
                keys.add(key)
        return keys or None

    return _coerce_text(value, field.max_length)


def _coerce_custom_fields(
    raw_fields: Any, schema: ClassificationSchema
) -> Dict[str, FieldValue]:
    if not isinstance(raw_fields, dict):
        return {}

    values: Dict[str, FieldValue] = {}
    for key, value in raw_fields.items():
        field = schema.custom_fields.get(key)
        if field is None:
            logger.debug(f"Dropping unknown custom field '{key}'")
            continue

        try:
            coerced = coerce_field(field, value)
        except (TypeError, ValueError) as e:
            logger.debug(f"Dropping custom field '{key}': {e}")
            continue

        if coerced is None:
            logger.debug(f"Dropping unresolvable value for custom field '{key}'")
            continue
        values[key] = coerced

    return values


def parse_classification(raw_text: str, schema: ClassificationSchema) -> ClassificationResult:
    """
    Validates the assistant's raw reply against a classification schema.

    Args:
        raw_text (str): The reply extracted from the provider envelope.
        schema (ClassificationSchema): The allowed ids and custom fields.

    Returns:
        ClassificationResult: Only ids and keys present in the schema.

    Raises:
        ParseError: If the text is not a JSON object, even after fence stripping.
    """
    cleaned = strip_code_fence(raw_text or "")

    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ParseError(f"Failed to parse AI response: {e.msg}", raw_text or "") from e
    except (ValueError, RecursionError) as e:
        # Oversized integer literals and pathological nesting
        raise ParseError(f"Failed to parse AI response: {e}", raw_text or "") from e

    if not isinstance(payload, dict):
        raise ParseError("AI response is not a JSON object", raw_text)

    return ClassificationResult(
        topic_id=_coerce_id(payload.get("topic_id"), schema.topics),
        priority_id=_coerce_id(payload.get("priority_id"), schema.priorities),
        custom_fields=_coerce_custom_fields(payload.get("custom_fields"), schema),
    )
