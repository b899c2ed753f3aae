"""
Unit tests for the OpenAI-backed LLM provider.

Tests verify:
- The client is built with a timeout and without SDK-level retries
- complete() returns the first choice's content
- Empty responses raise
- Transient errors are retried a bounded number of times
"""
import pytest
from unittest.mock import MagicMock, patch

import httpx
import openai

from core.llm.openai_service import OpenAIService, _parse_reset_duration


def _response(content):
    response = MagicMock()
    if content is None:
        response.choices = []
    else:
        choice = MagicMock()
        choice.message.content = content
        response.choices = [choice]
    return response


def _timeout_error():
    return openai.APITimeoutError(request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions"))


@pytest.fixture
def mock_openai():
    with patch('core.llm.openai_service.OpenAI') as mock_client_class:
        client = MagicMock()
        mock_client_class.return_value = client
        yield mock_client_class, client


class TestOpenAIService:

    def test_client_has_timeout_and_no_sdk_retries(self, mock_openai):
        mock_client_class, _ = mock_openai

        OpenAIService(api_key="sk-test", base_url="http://llm:8000/v1", timeout_seconds=12.5)

        kwargs = mock_client_class.call_args.kwargs
        assert kwargs['timeout'] == 12.5
        assert kwargs['max_retries'] == 0
        assert kwargs['api_key'] == "sk-test"
        assert kwargs['base_url'] == "http://llm:8000/v1"

    def test_complete_returns_content(self, mock_openai):
        _, client = mock_openai
        client.chat.completions.create.return_value = _response('{"overallMatch": 80}')
        service = OpenAIService(api_key="sk-test", model_config={'model': 'gpt-test', 'temperature': 0.1})

        result = service.complete("score this", system_prompt="be brief")

        assert result == '{"overallMatch": 80}'
        call = client.chat.completions.create.call_args.kwargs
        assert call['model'] == 'gpt-test'
        assert call['temperature'] == 0.1
        assert call['messages'][0] == {"role": "system", "content": "be brief"}
        assert call['messages'][1] == {"role": "user", "content": "score this"}

    def test_no_choices_raises(self, mock_openai):
        _, client = mock_openai
        client.chat.completions.create.return_value = _response(None)

        with pytest.raises(ValueError):
            OpenAIService(api_key="sk-test").complete("prompt")

    def test_empty_content_raises(self, mock_openai):
        _, client = mock_openai
        client.chat.completions.create.return_value = _response("")

        with pytest.raises(ValueError):
            OpenAIService(api_key="sk-test").complete("prompt")

    def test_transient_error_retried(self, mock_openai):
        _, client = mock_openai
        client.chat.completions.create.side_effect = [_timeout_error(), _response("ok")]

        result = OpenAIService(api_key="sk-test", max_retries=1).complete("prompt")

        assert result == "ok"
        assert client.chat.completions.create.call_count == 2

    def test_retries_bounded(self, mock_openai):
        _, client = mock_openai
        client.chat.completions.create.side_effect = _timeout_error()

        with pytest.raises(openai.APITimeoutError):
            OpenAIService(api_key="sk-test", max_retries=1).complete("prompt")

        assert client.chat.completions.create.call_count == 2

    def test_non_transient_error_not_retried(self, mock_openai):
        _, client = mock_openai
        client.chat.completions.create.side_effect = RuntimeError("bad request")

        with pytest.raises(RuntimeError):
            OpenAIService(api_key="sk-test", max_retries=3).complete("prompt")

        assert client.chat.completions.create.call_count == 1


class TestParseResetDuration:

    @pytest.mark.parametrize("value, expected", [
        ("1s", 1.0),
        ("500ms", 0.5),
        ("1m30s", 90.0),
        ("", 0.0),
    ])
    def test_parse(self, value, expected):
        assert _parse_reset_duration(value) == pytest.approx(expected)
