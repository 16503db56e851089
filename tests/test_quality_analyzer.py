"""Tests for the LLM client, quality analyzer and LLM config resolution."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
import requests

import ai.quality_analyzer as quality_analyzer
from ai.llm_client import chat, extract_json
from ai.quality_analyzer import QualityAnalyzer, quality_coefficient_from
from utils.config import LLMConfig, resolve_llm_config
from utils.errors import AnalyzerFailure, LLMCallError

CONFIG = LLMConfig(provider="deepseek", api_key="sk-test", base_url="https://llm.test", model="m")


class TestChat:
    def test_returns_first_choice(self):
        session = MagicMock()
        session.post.return_value.json.return_value = {
            "choices": [{"message": {"content": "  hello  "}}],
        }

        assert chat(CONFIG, [{"role": "user", "content": "hi"}], 0.5, 10, session=session) == "hello"
        assert session.post.call_args.args[0] == "https://llm.test/chat/completions"
        assert session.post.call_args.kwargs["headers"]["Authorization"] == "Bearer sk-test"

    def test_missing_api_key(self):
        config = LLMConfig(provider="deepseek", api_key="", base_url="https://llm.test", model="m")
        with pytest.raises(LLMCallError):
            chat(config, [], 0.5, 10, session=MagicMock())

    def test_timeout(self):
        session = MagicMock()
        session.post.side_effect = requests.exceptions.Timeout()
        with pytest.raises(LLMCallError, match="timeout"):
            chat(CONFIG, [], 0.5, 10, session=session)

    def test_empty_completion(self):
        session = MagicMock()
        session.post.return_value.json.return_value = {"choices": [{"message": {"content": ""}}]}
        with pytest.raises(LLMCallError):
            chat(CONFIG, [], 0.5, 10, session=session)


class TestExtractJson:
    def test_plain(self):
        assert extract_json('{"overallScore": 7}') == {"overallScore": 7}

    def test_fenced(self):
        assert extract_json('```json\n{"overallScore": 7}\n```') == {"overallScore": 7}

    def test_embedded_in_prose(self):
        assert extract_json('Here you go: {"a": 1} thanks') == {"a": 1}

    def test_not_an_object(self):
        with pytest.raises(ValueError):
            extract_json("[1, 2]")

    def test_no_json(self):
        with pytest.raises(ValueError):
            extract_json("no json here")


class TestQualityAnalyzer:
    def test_parses_review(self, monkeypatch):
        monkeypatch.setattr(quality_analyzer, "chat", lambda *a, **k: '{"overallScore": 8}')
        analysis = QualityAnalyzer(CONFIG).analyze("x = 1", "python", "desc")
        assert analysis == {"overallScore": 8}

    def test_llm_error_becomes_analyzer_failure(self, monkeypatch):
        def boom(*args, **kwargs):
            raise LLMCallError("timeout")

        monkeypatch.setattr(quality_analyzer, "chat", boom)
        with pytest.raises(AnalyzerFailure):
            QualityAnalyzer(CONFIG).analyze("x = 1", "python", "desc")

    def test_unparseable_reply_becomes_analyzer_failure(self, monkeypatch):
        monkeypatch.setattr(quality_analyzer, "chat", lambda *a, **k: "looks good to me")
        with pytest.raises(AnalyzerFailure):
            QualityAnalyzer(CONFIG).analyze("x = 1", "python", "desc")


class TestQualityCoefficient:
    @pytest.mark.parametrize(
        "analysis,expected",
        [
            (None, 1.0),
            ({}, 1.0),
            ({"overallScore": 8}, 0.8),
            ({"overallScore": "7"}, 0.7),
            ({"overallScore": 15}, 1.0),
            ({"overallScore": -3}, 0.0),
            ({"overallScore": "great"}, 1.0),
            ({"suggestions": []}, 1.0),
        ],
    )
    def test_mapping(self, analysis, expected):
        assert quality_coefficient_from(analysis) == pytest.approx(expected)


class TestResolveLlmConfig:
    def test_platform_default_without_user_key(self, monkeypatch):
        monkeypatch.setenv("LLM_API_KEY", "platform-key")
        user = SimpleNamespace(llm_provider=None, llm_api_key=None, llm_base_url=None, llm_model=None)

        config = resolve_llm_config(user)

        assert config.api_key == "platform-key"
        assert config.is_user_config is False

    def test_user_override_fills_gaps_from_default(self, monkeypatch):
        monkeypatch.setenv("LLM_MODEL", "platform-model")
        user = SimpleNamespace(
            llm_provider="openai", llm_api_key="user-key",
            llm_base_url="https://api.openai.com/v1/", llm_model=None,
        )

        config = resolve_llm_config(user)

        assert config.is_user_config is True
        assert config.provider == "openai"
        assert config.api_key == "user-key"
        assert config.base_url == "https://api.openai.com/v1"
        assert config.model == "platform-model"
