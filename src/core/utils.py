import html
import re
from typing import Optional

_BLOCK_TAG = re.compile(r"<\s*/?\s*(?:p|br|div|li|ul|ol|tr|td|th|h[1-6]|blockquote|pre|table)\b[^>]*>", re.I)
_TAG = re.compile(r"<[^>]+>")
_WHITESPACE = re.compile(r"\s+")


def clean_message_body(body: Optional[str]) -> str:
    """
    Reduces an HTML message body to plain text.

    Fallback cleaner for hosts without their own: block tags become
    whitespace, inline tags are removed, entities are decoded and
    whitespace is collapsed.

    Args:
        body (Optional[str]): The raw message body.

    Returns:
        str: Single-line plain text.
    """
    if not body:
        return ""
    text = _BLOCK_TAG.sub(" ", body)
    text = _TAG.sub("", text)
    text = html.unescape(text)
    return _WHITESPACE.sub(" ", text).strip()


def build_ticket_content(subject: str, message: Optional[str] = None) -> str:
    """
    Assembles the text sent for classification.

    When the ticket has no customer message yet, the subject stands in for it.
    """
    subject = (subject or "").strip()
    body = (message or "").strip() or subject
    return f"Subject: {subject}\n\n{body}"
