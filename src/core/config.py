import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Literal, Optional, TypeVar

import yaml
from pydantic import BaseModel, ValidationError, field_validator

from src.core.constants import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
    DEFAULT_PROVIDER,
    DEFAULT_STORE_RESPONSES,
    DEFAULT_TEMPERATURE,
    DEFAULT_TIMEOUT,
)
from src.core.errors import ConfigError
from src.core.schemas import RequestConfig

# Initialize logger
logger = logging.getLogger(__name__)

T = TypeVar("T", int, float)

API_KEY_ENV = "AI_API_KEY"
PROVIDER_KEY_ENV = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}


class ClassifierSettings(BaseModel):
    """Host-side options: what to apply and how to react to failures."""

    classify_topic: bool = True
    classify_priority: bool = True
    custom_fields: Optional[List[str]] = None
    error_handling: Literal["log", "silent"] = "log"
    debug_logging: bool = False

    @field_validator("custom_fields", mode="before")
    @classmethod
    def split_field_list(cls, value: Any) -> Any:
        # Accepts "a, b" as well as a YAML list; None forwards every field
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value


def load_config(config_path: str = "config.yaml") -> Dict[str, Any]:
    """
    Loads the YAML configuration file from the project root.

    Args:
        config_path (str): Relative path to the config file.

    Returns:
        Dict[str, Any]: The configuration dictionary.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ConfigError: If the file contains invalid YAML.
    """
    # Look in the current working directory first, then relative to the project root
    path = Path(config_path)

    if not path.exists():
        base_dir = Path(__file__).resolve().parent.parent.parent
        path = base_dir / config_path

    if not path.exists():
        logger.critical(f"Configuration file not found at: {path.absolute()}")
        raise FileNotFoundError(f"Config file '{config_path}' is missing.")

    try:
        with open(path, "r") as file:
            config = yaml.safe_load(file) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing YAML configuration: {e}") from e

    if not isinstance(config, dict):
        raise ConfigError(f"Configuration in {path} must be a mapping.")

    logger.info(f"Configuration loaded successfully from {path}")
    return config


def get_classifier_section(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Helper to extract the `classifier` section safely.
    """
    section = config.get("classifier") or {}
    if not isinstance(section, dict):
        raise ConfigError("Invalid Config: 'classifier' must be a mapping.")
    return section


def _number(section: Dict[str, Any], key: str, cast: Callable[[Any], T], default: T, label: str) -> T:
    value = section.get(key)
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise ConfigError(f"{label} must be a number.")
    try:
        return cast(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{label} must be a number.") from None


def _whole(value: Any) -> int:
    # 30.9 is rejected like "30.5", never truncated
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(value)
    return int(value)


def _flag(value: Any, default: bool) -> Any:
    # Left to pydantic so "false" / "0" / "no" parse as False
    return default if value is None or value == "" else value


def resolve_api_key(provider: str, api_key: Optional[str] = None) -> str:
    """Explicit key first, then AI_API_KEY, then the provider-specific variable."""
    if api_key:
        return api_key
    key = os.getenv(API_KEY_ENV) or os.getenv(PROVIDER_KEY_ENV.get(provider, ""), "")
    if not key:
        raise ConfigError("API key not configured")
    return key


def build_request_config(section: Dict[str, Any], api_key: Optional[str] = None) -> RequestConfig:
    """
    Builds a validated RequestConfig from a `classifier` config section.

    The API key never comes from YAML; it is passed in or read from the
    environment.

    Raises:
        ConfigError: Missing API key, non-numeric or out-of-range settings.
    """
    provider = str(section.get("provider") or DEFAULT_PROVIDER).strip().lower()
    key = resolve_api_key(provider, api_key)

    timeout = _number(section, "timeout", _whole, DEFAULT_TIMEOUT, "Timeout")
    temperature = _number(section, "temperature", float, DEFAULT_TEMPERATURE, "Temperature")
    max_tokens = _number(section, "max_tokens", _whole, DEFAULT_MAX_TOKENS, "Max tokens")

    try:
        return RequestConfig(
            provider=provider,
            api_key=key,
            model=section.get("model") or DEFAULT_MODEL,
            timeout_seconds=timeout,
            temperature=temperature,
            max_output_tokens=max_tokens,
            store_responses=_flag(section.get("store_responses"), DEFAULT_STORE_RESPONSES),
            reasoning_effort=section.get("reasoning_effort") or None,
        )
    except ValidationError as e:
        raise ConfigError(f"Invalid classifier configuration: {_summarize(e)}") from None


def load_settings(section: Dict[str, Any]) -> ClassifierSettings:
    try:
        return ClassifierSettings(
            **{k: v for k, v in section.items() if k in ClassifierSettings.model_fields}
        )
    except ValidationError as e:
        raise ConfigError(f"Invalid classifier settings: {_summarize(e)}") from None


def _summarize(error: ValidationError) -> str:
    # Input values are left out so an API key can never leak into the message
    return "; ".join(
        f"{'.'.join(str(part) for part in item['loc'])}: {item['msg']}"
        for item in error.errors()
    )
