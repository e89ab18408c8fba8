"""Tests for YAML/environment configuration."""

import pytest

from src.core.config import (
    ClassifierSettings,
    build_request_config,
    get_classifier_section,
    load_config,
    load_settings,
)
from src.core.errors import ConfigError
from src.core.schemas import Provider


@pytest.fixture(autouse=True)
def clear_key_env(monkeypatch):
    for name in ("AI_API_KEY", "OPENAI_API_KEY", "ANTHROPIC_API_KEY"):
        monkeypatch.delenv(name, raising=False)


class TestLoadConfig:
    def test_reads_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("classifier:\n  provider: anthropic\n  timeout: 10\n")

        config = load_config(str(path))
        assert get_classifier_section(config) == {"provider": "anthropic", "timeout": 10}

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.yaml"))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("classifier: [unclosed\n")

        with pytest.raises(ConfigError, match="Error parsing YAML"):
            load_config(str(path))

    def test_empty_section_is_allowed(self):
        assert get_classifier_section({}) == {}

    def test_section_must_be_mapping(self):
        with pytest.raises(ConfigError):
            get_classifier_section({"classifier": ["openai"]})


class TestBuildRequestConfig:
    def test_defaults(self, monkeypatch):
        monkeypatch.setenv("AI_API_KEY", "sk-env")

        config = build_request_config({})

        assert config.provider is Provider.OPENAI
        assert config.api_key.get_secret_value() == "sk-env"
        assert config.model == "gpt-4o-mini"
        assert config.timeout_seconds == 30
        assert config.temperature == 1.0
        assert config.max_output_tokens == 500
        assert config.store_responses is False
        assert config.reasoning_effort is None

    def test_provider_specific_env_key(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant")

        config = build_request_config({"provider": "Anthropic"})

        assert config.provider is Provider.ANTHROPIC
        assert config.api_key.get_secret_value() == "sk-ant"

    def test_explicit_key_wins(self, monkeypatch):
        monkeypatch.setenv("AI_API_KEY", "sk-env")
        assert build_request_config({}, api_key="sk-arg").api_key.get_secret_value() == "sk-arg"

    def test_missing_key(self):
        with pytest.raises(ConfigError, match="API key not configured"):
            build_request_config({"provider": "openai"})

    @pytest.mark.parametrize(
        "key, value, label",
        [("timeout", "soon", "Timeout"), ("temperature", "warm", "Temperature"), ("max_tokens", True, "Max tokens")],
    )
    def test_non_numeric_settings(self, key, value, label):
        with pytest.raises(ConfigError, match=f"{label} must be a number"):
            build_request_config({key: value}, api_key="sk")

    @pytest.mark.parametrize(
        "section",
        [{"temperature": 2.5}, {"timeout": 0}, {"max_tokens": -1}, {"provider": "gemini"}, {"reasoning_effort": "max"}],
    )
    def test_out_of_range_settings(self, section):
        with pytest.raises(ConfigError, match="Invalid classifier configuration"):
            build_request_config(section, api_key="sk")

    def test_numeric_strings_are_accepted(self):
        config = build_request_config(
            {"timeout": "15", "temperature": "0.2", "max_tokens": "800"}, api_key="sk"
        )
        assert (config.timeout_seconds, config.temperature, config.max_output_tokens) == (15, 0.2, 800)

    def test_blank_values_fall_back_to_defaults(self):
        config = build_request_config({"timeout": "", "model": ""}, api_key="sk")
        assert config.timeout_seconds == 30
        assert config.model == "gpt-4o-mini"

    @pytest.mark.parametrize("key, value", [("timeout", 30.9), ("max_tokens", 12.5), ("timeout", "30.5")])
    def test_fractional_whole_numbers_are_rejected(self, key, value):
        with pytest.raises(ConfigError, match="must be a number"):
            build_request_config({key: value}, api_key="sk")

    def test_integral_float_is_accepted(self):
        config = build_request_config({"timeout": 45.0, "max_tokens": 800.0}, api_key="sk")
        assert (config.timeout_seconds, config.max_output_tokens) == (45, 800)

    @pytest.mark.parametrize("value, expected", [("false", False), ("no", False), ("0", False), ("true", True), (True, True)])
    def test_store_responses_parses_yaml_and_env_strings(self, value, expected):
        assert build_request_config({"store_responses": value}, api_key="sk").store_responses is expected

    def test_store_responses_defaults_when_blank(self):
        assert build_request_config({"store_responses": None}, api_key="sk").store_responses is False

    def test_invalid_store_responses(self):
        with pytest.raises(ConfigError, match="Invalid classifier configuration"):
            build_request_config({"store_responses": "sometimes"}, api_key="sk")

    def test_secret_is_not_in_repr(self):
        config = build_request_config({}, api_key="sk-very-secret")
        assert "sk-very-secret" not in repr(config)


class TestLoadSettings:
    def test_defaults(self):
        settings = load_settings({"provider": "openai"})
        assert settings == ClassifierSettings()
        assert settings.custom_fields is None
        assert settings.error_handling == "log"

    def test_comma_separated_custom_fields(self):
        assert load_settings({"custom_fields": "risk, urgent,"}).custom_fields == ["risk", "urgent"]

    def test_invalid_error_handling(self):
        with pytest.raises(ConfigError, match="error_handling"):
            load_settings({"error_handling": "email"})
