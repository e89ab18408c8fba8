"""Shared fixtures for the classifier tests."""

import pytest

from src.core.schemas import (
    BoolField,
    ChoicesField,
    ClassificationSchema,
    MemoField,
    Provider,
    RequestConfig,
    TextField,
)


@pytest.fixture
def schema() -> ClassificationSchema:
    """A schema with one field of every supported type."""
    return ClassificationSchema(
        topics={1: "Billing", 2: "Technical"},
        priorities={1: "Low", 2: "High"},
        custom_fields={
            "summary": TextField(label="Short summary", max_length=5),
            "notes": MemoField(label="Internal notes"),
            "email": TextField(label="Customer email", validator_hint="email"),
            "risk": ChoicesField(label="Risk", choices={"lo": "Low Risk", "hi": "High Risk"}),
            "fruit": ChoicesField(
                label="Fruit", choices={"a": "Apple", "b": "Banana"}, multiselect=True
            ),
            "urgent": BoolField(label="Needs urgent attention"),
        },
    )


@pytest.fixture
def openai_config() -> RequestConfig:
    return RequestConfig(
        provider=Provider.OPENAI,
        api_key="sk-test-openai",
        model="gpt-4o-mini",
        timeout_seconds=12,
        temperature=0.3,
        max_output_tokens=400,
        store_responses=True,
    )


@pytest.fixture
def anthropic_config() -> RequestConfig:
    return RequestConfig(
        provider=Provider.ANTHROPIC,
        api_key="sk-ant-test",
        model="claude-3-haiku-20240307",
        timeout_seconds=20,
        temperature=0.5,
        max_output_tokens=300,
    )


def openai_envelope(text: str) -> dict:
    """A completed Responses API body carrying `text`."""
    return {
        "id": "resp_123",
        "status": "completed",
        "error": None,
        "output": [
            {"type": "reasoning", "summary": []},
            {
                "type": "message",
                "role": "assistant",
                "content": [{"type": "output_text", "text": text, "annotations": []}],
            },
        ],
    }


def anthropic_envelope(text: str) -> dict:
    """A Messages API body carrying `text`."""
    return {
        "id": "msg_123",
        "type": "message",
        "role": "assistant",
        "content": [{"type": "text", "text": text}],
        "stop_reason": "end_turn",
    }


def mock_response(mocker, status_code: int = 200, json_data=None, text: str = ""):
    """A stand-in for `requests.Response`."""
    response = mocker.Mock()
    response.status_code = status_code
    response.text = text
    if json_data is None:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = json_data
    return response
