from typing import Any, Optional


class ClassifierError(Exception):
    """Base exception for every failure raised by the classification client."""


class ConfigError(ClassifierError):
    """Missing API key or an invalid numeric setting. Raised before any network call."""


class TransportError(ClassifierError):
    """Network failure or timeout: no HTTP response was obtained."""


class ProviderError(ClassifierError):
    """
    The provider answered, but with an error.

    Covers HTTP status >= 400, an error envelope in a 2xx body, an incomplete
    or otherwise non-completed response, and envelopes that do not contain
    the assistant text where it is expected.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ParseError(ClassifierError):
    """The assistant reply is not valid JSON, even after fence stripping."""

    SNIPPET_LENGTH = 200

    def __init__(self, message: str, raw_text: str = "") -> None:
        self.snippet = raw_text[: self.SNIPPET_LENGTH]
        if self.snippet:
            message = f"{message} (received: {self.snippet!r})"
        super().__init__(message)


def envelope_error_message(body: Any) -> Optional[str]:
    """
    Returns `error.message` from a decoded provider body, if there is one.

    Both providers report failures as a top-level `error` object; a bare
    string error is passed through as-is.
    """
    if not isinstance(body, dict):
        return None

    error = body.get("error")
    if not error:
        return None
    if isinstance(error, dict):
        message = error.get("message")
        return str(message) if message else "Unknown"
    return str(error)
