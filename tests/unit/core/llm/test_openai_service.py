"""
Unit tests for the OpenAI-backed scoring oracle.

Tests verify:
- Chat completion parameters and raw content passthrough
- Transient errors are retried, others are not
- Client selection between OpenAI and Azure OpenAI
"""
import threading
import time

import pytest
from unittest.mock import MagicMock, patch

import httpx
import openai

from core.config_loader import LlmConfig
from core.llm.openai_service import OpenAIService, _parse_reset_duration, _retry_after_seconds


def _completion(content):
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    return response


def _rate_limit_error(headers=None):
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    response = httpx.Response(429, headers=headers or {}, request=request)
    return openai.RateLimitError("rate limited", response=response, body=None)


@pytest.fixture
def service():
    svc = OpenAIService(api_key="test", model_config={"model": "gpt-4o-mini", "max_retries": 3})
    svc.client = MagicMock()
    svc.client.chat.completions.create.return_value = _completion('{"overallFit": 0.7}')
    return svc


class TestGenerateResponse:

    def test_returns_raw_content(self, service):
        assert service.generate_response("prompt") == '{"overallFit": 0.7}'

    def test_sends_model_temperature_and_max_tokens(self, service):
        service.generate_response("prompt", temperature=0.1, max_tokens=300)

        kwargs = service.client.chat.completions.create.call_args[1]
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["temperature"] == 0.1
        assert kwargs["max_tokens"] == 300
        assert kwargs["messages"][0]["role"] == "system"
        assert kwargs["messages"][1] == {"role": "user", "content": "prompt"}

    def test_config_defaults_used_when_not_overridden(self, service):
        service.generate_response("prompt")

        kwargs = service.client.chat.completions.create.call_args[1]
        assert kwargs["temperature"] == 0.2
        assert kwargs["max_tokens"] == 2000

    def test_empty_content_raises(self, service):
        service.client.chat.completions.create.return_value = _completion(None)

        with pytest.raises(ValueError):
            service.generate_response("prompt")

    @patch("core.llm.openai_service._wait_respecting_retry_after", return_value=0)
    def test_transient_error_is_retried(self, _wait, service):
        service.client.chat.completions.create.side_effect = [
            openai.APIConnectionError(request=httpx.Request("POST", "https://api.openai.com")),
            _completion("ok"),
        ]

        assert service.generate_response("prompt") == "ok"
        assert service.client.chat.completions.create.call_count == 2

    @patch("core.llm.openai_service._wait_respecting_retry_after", return_value=0)
    def test_gives_up_after_max_attempts(self, _wait, service):
        service.client.chat.completions.create.side_effect = _rate_limit_error()

        with pytest.raises(openai.RateLimitError):
            service.generate_response("prompt")
        assert service.client.chat.completions.create.call_count == 3

    def test_non_transient_error_not_retried(self, service):
        service.client.chat.completions.create.side_effect = KeyError("boom")

        with pytest.raises(KeyError):
            service.generate_response("prompt")
        assert service.client.chat.completions.create.call_count == 1


class TestRetryHelpers:

    @pytest.mark.parametrize("value,expected", [
        ("1s", 1.0),
        ("500ms", 0.5),
        ("1m30s", 90.0),
        ("", 0.0),
    ])
    def test_parse_reset_duration(self, value, expected):
        assert _parse_reset_duration(value) == pytest.approx(expected)

    def test_retry_after_header(self):
        exc = _rate_limit_error({"retry-after": "3", "x-ratelimit-reset-tokens": "1s"})
        assert _retry_after_seconds(exc) == 3.0


class TestClientSelection:

    def test_plain_openai_by_default(self):
        svc = OpenAIService.from_config(LlmConfig(api_key="sk-test", base_url="http://local:8000/v1"))

        with patch("core.llm.openai_service.OpenAI") as mock_openai:
            svc._get_client()

        kwargs = mock_openai.call_args[1]
        assert kwargs["api_key"] == "sk-test"
        assert kwargs["base_url"] == "http://local:8000/v1"
        assert kwargs["max_retries"] == 0

    def test_azure_when_endpoint_configured(self):
        svc = OpenAIService.from_config(LlmConfig(
            api_key="az-key",
            azure_endpoint="https://example.openai.azure.com",
            azure_deployment="gpt4o",
        ))

        with patch("core.llm.openai_service.AzureOpenAI") as mock_azure:
            svc._get_client()

        kwargs = mock_azure.call_args[1]
        assert kwargs["azure_endpoint"] == "https://example.openai.azure.com"
        assert kwargs["azure_deployment"] == "gpt4o"

    def test_client_is_built_lazily(self):
        svc = OpenAIService()
        assert svc.client is None

    def test_concurrent_first_calls_build_one_client(self):
        svc = OpenAIService(api_key="sk-test")
        start = threading.Barrier(8)
        clients = []

        def slow_client(**kwargs):
            time.sleep(0.05)
            return MagicMock()

        def first_call():
            start.wait()
            clients.append(svc._get_client())

        with patch("core.llm.openai_service.OpenAI", side_effect=slow_client) as mock_openai:
            threads = [threading.Thread(target=first_call) for _ in range(8)]
            for t in threads:
                t.start()
            for t in threads:
                t.join()

        assert mock_openai.call_count == 1
        assert all(c is clients[0] for c in clients)
        assert len(clients) == 8

    def test_connection_check_false_on_error(self, service):
        service.client.chat.completions.create.side_effect = KeyError("boom")

        assert service.test_connection() is False

    def test_connection_check_true(self, service):
        service.client.chat.completions.create.return_value = _completion("Connection successful!")

        assert service.test_connection() is True
