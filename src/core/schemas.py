from enum import Enum
from typing import Annotated, Any, Dict, Literal, Optional, Set, Union

from pydantic import BaseModel, Field, PositiveInt, SecretStr, field_validator

from src.core.constants import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
    DEFAULT_STORE_RESPONSES,
    DEFAULT_TEMPERATURE,
    DEFAULT_TIMEOUT,
    NO_TEMPERATURE_PATTERN,
    SUPPORTED_FIELD_TYPES,
)


class Provider(str, Enum):
    """The two supported AI services. Their HTTP envelopes are incompatible."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"


# --- Custom field definitions (closed tagged union on `type`) ---


class _BaseField(BaseModel):
    label: str
    validator_hint: Optional[str] = Field(
        None, description="Advisory format hint (e.g. 'email'), shown to the model only"
    )


class TextField(_BaseField):
    type: Literal["text"] = "text"
    max_length: Optional[PositiveInt] = None


class MemoField(_BaseField):
    type: Literal["memo"] = "memo"
    max_length: Optional[PositiveInt] = None


class ChoicesField(_BaseField):
    type: Literal["choices"] = "choices"
    choices: Dict[str, str] = Field(
        default_factory=dict, description="Choice key -> display value, in display order"
    )
    multiselect: bool = False


class BoolField(_BaseField):
    type: Literal["bool"] = "bool"


FieldDefinition = Annotated[
    Union[TextField, MemoField, ChoicesField, BoolField],
    Field(discriminator="type"),
]

FieldValue = Union[bool, str, Set[str]]


class ClassificationSchema(BaseModel):
    """
    The allowed outputs for one classification call.

    Keys of `topics` and `priorities` are the only valid ids; keys of
    `custom_fields` are the only custom-field keys a result may contain.
    """

    topics: Dict[int, str] = Field(default_factory=dict)
    priorities: Dict[int, str] = Field(default_factory=dict)
    custom_fields: Dict[str, FieldDefinition] = Field(default_factory=dict)

    @field_validator("custom_fields", mode="before")
    @classmethod
    def drop_unsupported_types(cls, value: Any) -> Any:
        # Host forms may carry other field types; those never reach the model
        if not isinstance(value, dict):
            return value
        return {
            key: field
            for key, field in value.items()
            if not isinstance(field, dict) or field.get("type") in SUPPORTED_FIELD_TYPES
        }


class RequestConfig(BaseModel):
    """
    Per-call provider settings.

    Build it through `src.core.config.build_request_config` to get a
    `ConfigError` instead of a pydantic `ValidationError` on bad input.
    """

    provider: Provider = Provider.OPENAI
    api_key: SecretStr
    model: str = DEFAULT_MODEL
    timeout_seconds: PositiveInt = DEFAULT_TIMEOUT
    temperature: float = Field(DEFAULT_TEMPERATURE, ge=0.0, le=2.0)
    max_output_tokens: PositiveInt = DEFAULT_MAX_TOKENS
    store_responses: bool = DEFAULT_STORE_RESPONSES
    reasoning_effort: Optional[
        Literal["none", "minimal", "low", "medium", "high", "xhigh"]
    ] = None

    @field_validator("api_key")
    @classmethod
    def api_key_not_blank(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value().strip():
            raise ValueError("API key is required.")
        return value

    @field_validator("model")
    @classmethod
    def model_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Model name is required.")
        return value

    @property
    def supports_temperature(self) -> bool:
        return not NO_TEMPERATURE_PATTERN.match(self.model)


class ClassificationResult(BaseModel):
    """Schema-conformant classification. Carries no ties to any ticket object."""

    topic_id: Optional[int] = None
    priority_id: Optional[int] = None
    custom_fields: Dict[str, FieldValue] = Field(default_factory=dict)
