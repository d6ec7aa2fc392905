import asyncio
import json

import httpx
import pytest

from chat_screen.domain.exceptions import DecodeError
from chat_screen.domain.models import ChatMessage, ChatRequest, Failure, Success
from chat_screen.providers.openai_client import OpenAIClient


class SettingsStub:
    openai_api_key = "sk-test-0123456789"
    openai_base_url = "https://api.openai.com/v1"
    default_model = "chat"
    http_timeout = 1.0


def envelope(content="ok", **overrides):
    data = {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "gpt-4o-2024-08-06",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "logprobs": None,
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 3, "completion_tokens": 1, "total_tokens": 4},
    }
    data.update(overrides)
    return data


class Resp:
    def __init__(self, data=None, status_code=200, text=None):
        self.status_code = status_code
        self._data = data
        self.text = text if text is not None else json.dumps(data)

    def json(self):
        return json.loads(self.text)


def fake_client(response=None, error=None, captured=None):
    captured = captured if captured is not None else {}

    class Client:
        def __init__(self, *a, **kw):
            captured["client_kwargs"] = kw

        async def __aenter__(self):
            return self

        async def __aexit__(self, *a):
            return False

        async def post(self, url, json=None, headers=None, **_):
            captured["url"] = url
            captured["payload"] = json
            captured["headers"] = headers
            if error is not None:
                raise error
            return response

    return Client


def test_complete_returns_first_choice_content(monkeypatch):
    monkeypatch.setattr("httpx.AsyncClient", fake_client(Resp(envelope("4"))))
    result = asyncio.run(OpenAIClient(SettingsStub()).complete("2+2?"))
    assert result == Success("4")


def test_request_shape(monkeypatch):
    captured = {}
    monkeypatch.setattr("httpx.AsyncClient", fake_client(Resp(envelope()), captured=captured))
    asyncio.run(OpenAIClient(SettingsStub()).complete("hello"))
    assert captured["url"] == "https://api.openai.com/v1/chat/completions"
    assert captured["payload"] == {
        "model": "gpt-4o",
        "messages": [{"role": "user", "content": "hello"}],
    }
    assert captured["headers"]["Authorization"] == "Bearer sk-test-0123456789"
    assert captured["headers"]["Content-Type"] == "application/json"
    assert captured["client_kwargs"]["timeout"] == 1.0


def test_prompt_with_quotes_is_serialized_safely(monkeypatch):
    captured = {}
    monkeypatch.setattr("httpx.AsyncClient", fake_client(Resp(envelope()), captured=captured))
    prompt = 'say "hi"\n\tand \\ leave'
    asyncio.run(OpenAIClient(SettingsStub()).complete(prompt))
    body = json.dumps(captured["payload"])
    assert json.loads(body)["messages"][0]["content"] == prompt


def test_empty_prompt_is_sent(monkeypatch):
    captured = {}
    monkeypatch.setattr("httpx.AsyncClient", fake_client(Resp(envelope()), captured=captured))
    asyncio.run(OpenAIClient(SettingsStub()).complete(""))
    assert captured["payload"]["messages"][0]["content"] == ""


def test_answer_echoes_content_without_mutation(monkeypatch):
    class EchoClient:
        def __init__(self, *a, **kw):
            pass

        async def __aenter__(self):
            return self

        async def __aexit__(self, *a):
            return False

        async def post(self, url, json=None, **_):
            return Resp(envelope(json["messages"][0]["content"]))

    monkeypatch.setattr("httpx.AsyncClient", EchoClient)
    text = "  Line one\n**not markdown**\n" + "x" * 5000 + " ünïcødé  "
    result = asyncio.run(OpenAIClient(SettingsStub()).complete(text))
    assert result == Success(text)


def test_empty_choices_is_placeholder_success(monkeypatch):
    monkeypatch.setattr("httpx.AsyncClient", fake_client(Resp(envelope(choices=[]))))
    result = asyncio.run(OpenAIClient(SettingsStub()).complete("x"))
    assert result == Success("No response received")


def test_missing_choices_and_content_are_placeholder_success(monkeypatch):
    client = OpenAIClient(SettingsStub())
    monkeypatch.setattr("httpx.AsyncClient", fake_client(Resp({})))
    assert asyncio.run(client.complete("x")) == Success("No response received")
    no_content = envelope()
    del no_content["choices"][0]["message"]["content"]
    monkeypatch.setattr("httpx.AsyncClient", fake_client(Resp(no_content)))
    assert asyncio.run(client.complete("x")) == Success("No response received")


def test_unknown_fields_and_camel_case_are_tolerated(monkeypatch):
    data = envelope("fine", system_fingerprint="fp_1", service_tier="default")
    data["choices"][0] = {
        "index": 0,
        "message": {"role": "assistant", "content": "fine", "refusal": None},
        "finishReason": "length",
    }
    data["usage"] = {"promptTokens": 2, "completionTokens": 5, "totalTokens": 7}
    monkeypatch.setattr("httpx.AsyncClient", fake_client(Resp(data)))
    req = ChatRequest(provider="openai", model="chat", messages=[ChatMessage(role="user", content="q")])
    res = asyncio.run(OpenAIClient(SettingsStub()).chat(req))
    assert res.first_content() == "fine"
    assert res.choices[0].finish_reason == "length"
    assert res.usage.total_tokens == 7
    assert res.response_id == "chatcmpl-1"


def test_non_null_logprobs_is_decode_failure(monkeypatch):
    data = envelope()
    data["choices"][0]["logprobs"] = {"content": []}
    monkeypatch.setattr("httpx.AsyncClient", fake_client(Resp(data)))
    result = asyncio.run(OpenAIClient(SettingsStub()).complete("x"))
    assert isinstance(result, Failure)
    assert "logprobs" in result.message


def test_schema_mismatch_raises_decode_error_from_chat(monkeypatch):
    monkeypatch.setattr("httpx.AsyncClient", fake_client(Resp(envelope(content=42))))
    req = ChatRequest(provider="openai", model="chat", messages=[ChatMessage(role="user", content="q")])
    with pytest.raises(DecodeError) as exc:
        asyncio.run(OpenAIClient(SettingsStub()).chat(req))
    assert exc.value.code == "DECODE_ERROR"
    assert "choices.0.message.content" in exc.value.message


def test_top_level_array_is_decode_failure(monkeypatch):
    monkeypatch.setattr("httpx.AsyncClient", fake_client(Resp([1, 2])))
    result = asyncio.run(OpenAIClient(SettingsStub()).complete("x"))
    assert isinstance(result, Failure)
    assert result.message.startswith("Unexpected response format at response")


def test_invalid_json_is_failure(monkeypatch):
    monkeypatch.setattr("httpx.AsyncClient", fake_client(Resp(text="<html>bad gateway</html>")))
    result = asyncio.run(OpenAIClient(SettingsStub()).complete("x"))
    assert isinstance(result, Failure)
    assert result.message.startswith("Response is not valid JSON")


def test_transport_error_is_failure(monkeypatch):
    monkeypatch.setattr("httpx.AsyncClient", fake_client(error=httpx.ConnectTimeout("timeout")))
    result = asyncio.run(OpenAIClient(SettingsStub()).complete("x"))
    assert result == Failure("timeout")


def test_http_error_status_is_failure(monkeypatch):
    body = {"error": {"message": "Incorrect API key provided", "type": "invalid_request_error"}}
    monkeypatch.setattr("httpx.AsyncClient", fake_client(Resp(body, status_code=401)))
    result = asyncio.run(OpenAIClient(SettingsStub()).complete("x"))
    assert isinstance(result, Failure)
    assert result.message.startswith("HTTP 401: ")
    assert "Incorrect API key provided" in result.message


def test_missing_api_key_is_failure(monkeypatch):
    class NoKey(SettingsStub):
        openai_api_key = ""

    def explode(*a, **kw):
        raise AssertionError("no request should be made")

    monkeypatch.setattr("httpx.AsyncClient", explode)
    result = asyncio.run(OpenAIClient(NoKey()).complete("x"))
    assert result == Failure("OPENAI_API_KEY not set")


def test_unknown_model_is_failure():
    class OtherModel(SettingsStub):
        default_model = "nope"

    result = asyncio.run(OpenAIClient(OtherModel()).complete("x"))
    assert result == Failure("Unknown model: 'nope'")


def test_unexpected_error_is_failure(monkeypatch):
    class NonAsciiKey(SettingsStub):
        openai_api_key = "sk-tést-0123456789"

    class Client:
        def __init__(self, *a, **kw):
            pass

        async def __aenter__(self):
            return self

        async def __aexit__(self, *a):
            return False

        async def post(self, url, headers=None, **_):
            # httpx 按 ASCII 编码请求头
            headers["Authorization"].encode("ascii")
            raise AssertionError("header should not encode")

    monkeypatch.setattr("httpx.AsyncClient", Client)
    result = asyncio.run(OpenAIClient(NonAsciiKey()).complete("x"))
    assert isinstance(result, Failure)
    assert "'ascii' codec can't encode" in result.message
