"""Tests for the command-line entry point."""

import json

import pytest

from conftest import mock_response, openai_envelope
from src.main import main


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("classifier:\n  provider: openai\n  model: gpt-4o-mini\n")
    return path


@pytest.fixture
def ticket_file(tmp_path):
    path = tmp_path / "ticket.json"
    path.write_text(
        json.dumps(
            {
                "subject": "Invoice wrong",
                "message": "<p>I was charged twice</p>",
                "schema": {
                    "topics": {"1": "Billing"},
                    "priorities": {"2": "High"},
                    "custom_fields": {"urgent": {"type": "bool", "label": "Urgent"}},
                },
            }
        )
    )
    return path


@pytest.fixture(autouse=True)
def api_key(monkeypatch):
    monkeypatch.setenv("AI_API_KEY", "sk-cli")
    monkeypatch.setattr("src.main.load_dotenv", lambda: None)


def test_prints_result(mocker, capsys, config_file, ticket_file):
    mock_post = mocker.patch("src.core.transport.requests.post")
    mock_post.return_value = mock_response(
        mocker,
        json_data=openai_envelope('{"topic_id": 1, "priority_id": 2, "custom_fields": {"urgent": "yes"}}'),
    )

    exit_code = main([str(ticket_file), "--config", str(config_file)])

    assert exit_code == 0
    output = json.loads(capsys.readouterr().out)
    assert output["result"] == {"topic_id": 1, "priority_id": 2, "custom_fields": {"urgent": True}}
    assert output["changes"] == ["Topic: Billing", "Priority: High", "urgent: true"]
    assert mock_post.call_args.kwargs["json"]["input"].endswith(
        "Subject: Invoice wrong\n\nI was charged twice"
    )


def test_model_override(mocker, config_file, ticket_file):
    mock_post = mocker.patch("src.core.transport.requests.post")
    mock_post.return_value = mock_response(mocker, json_data=openai_envelope("{}"))

    assert main([str(ticket_file), "--config", str(config_file), "--model", "o3-mini"]) == 0

    payload = mock_post.call_args.kwargs["json"]
    assert payload["model"] == "o3-mini"
    assert "temperature" not in payload


def test_failure_exit_code(mocker, config_file, ticket_file):
    mock_post = mocker.patch("src.core.transport.requests.post")
    mock_post.return_value = mock_response(mocker, json_data=openai_envelope("not json"))

    assert main([str(ticket_file), "--config", str(config_file)]) == 1


def test_missing_api_key(monkeypatch, config_file, ticket_file):
    for name in ("AI_API_KEY", "OPENAI_API_KEY"):
        monkeypatch.delenv(name, raising=False)

    assert main([str(ticket_file), "--config", str(config_file)]) == 2


def test_invalid_ticket_file(tmp_path, config_file):
    path = tmp_path / "ticket.json"
    path.write_text("{not json")

    assert main([str(path), "--config", str(config_file)]) == 2
