"""Single source of truth for provider endpoints, defaults and model patterns."""

import re
from typing import Final, Tuple

# ===== Provider endpoints =====

OPENAI_URL: Final[str] = "https://api.openai.com/v1/responses"
ANTHROPIC_URL: Final[str] = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION: Final[str] = "2023-06-01"

# ===== Request defaults =====

DEFAULT_PROVIDER: Final[str] = "openai"
DEFAULT_MODEL: Final[str] = "gpt-4o-mini"
DEFAULT_TIMEOUT: Final[int] = 30
DEFAULT_TEMPERATURE: Final[float] = 1.0
DEFAULT_MAX_TOKENS: Final[int] = 500
DEFAULT_STORE_RESPONSES: Final[bool] = False

# Reasoning-tier models reject the temperature parameter outright.
NO_TEMPERATURE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^(gpt-5|o1|o3)", re.I)

REASONING_EFFORTS: Final[Tuple[str, ...]] = (
    "none",
    "minimal",
    "low",
    "medium",
    "high",
    "xhigh",
)

# ===== Custom fields =====

SUPPORTED_FIELD_TYPES: Final[Tuple[str, ...]] = ("text", "memo", "choices", "bool")
