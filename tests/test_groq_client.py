from types import SimpleNamespace

import pytest

from api.groq_client import SYSTEM_PROMPT, GroqClient
from models.errors import ModelError

pytestmark = pytest.mark.unit


# -------------------------------------------------------------------
# Fake OpenAI-compatible SDK client
# -------------------------------------------------------------------


class FakeStream:
    def __init__(self, contents, error=None):
        self.contents = contents
        self.error = error
        self.closed = False

    def __iter__(self):
        for content in self.contents:
            if content is None:
                yield SimpleNamespace(choices=[])
            else:
                yield SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=content))])
        if self.error is not None:
            raise self.error

    def close(self):
        self.closed = True


class FakeCompletions:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls: list[dict] = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.result


def _client(result=None, error=None, **kwargs):
    completions = FakeCompletions(result=result, error=error)
    sdk = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return GroqClient(api_key="test-key", client=sdk, **kwargs), completions


def _response(text):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


# -------------------------------------------------------------------
# Tests
# -------------------------------------------------------------------


def test_completion_sends_system_and_user_messages():
    client, completions = _client(result=_response("Hello back"))

    assert client.get_completion("Hello") == "Hello back"

    call = completions.calls[0]
    assert call["model"] == "llama-3.1-8b-instant"
    assert call["temperature"] == 0.7
    assert call["messages"] == [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": "Hello"},
    ]


def test_per_call_overrides():
    client, completions = _client(result=_response("ok"), temperature=0.2)

    client.get_completion("x", model="llama-3.1-70b-versatile")

    assert completions.calls[0]["model"] == "llama-3.1-70b-versatile"
    assert completions.calls[0]["temperature"] == 0.2


def test_empty_choices_returns_empty_text():
    client, _ = _client(result=SimpleNamespace(choices=[]))
    assert client.get_completion("x") == ""


def test_provider_error_becomes_model_error():
    client, _ = _client(error=RuntimeError("Error code: 401 - invalid api key"))

    with pytest.raises(ModelError) as exc_info:
        client.get_completion("x")

    assert exc_info.value.provider == "groq"
    assert exc_info.value.retryable is False
    assert exc_info.value.message.startswith("groq API error:")


@pytest.mark.parametrize(
    "message", ["Request timed out.", "Error code: 429 - rate limit", "Error code: 503"]
)
def test_transient_errors_are_retryable(message):
    client, _ = _client(error=RuntimeError(message))

    with pytest.raises(ModelError) as exc_info:
        client.get_completion("x")

    assert exc_info.value.retryable is True


def test_stream_yields_non_empty_fragments_in_order_and_closes():
    stream = FakeStream(["Hel", "", None, "lo", " world"])
    client, completions = _client(result=stream)

    assert list(client.iter_completion("x")) == ["Hel", "lo", " world"]
    assert completions.calls[0]["stream"] is True
    assert stream.closed is True


def test_stream_closed_when_consumer_stops_early():
    stream = FakeStream(["a", "b", "c"])
    client, _ = _client(result=stream)

    fragments = client.iter_completion("x")
    assert next(fragments) == "a"
    fragments.close()

    assert stream.closed is True


def test_stream_failure_mid_way_becomes_model_error():
    stream = FakeStream(["a"], error=ConnectionError("connection reset"))
    client, _ = _client(result=stream)
    received: list[str] = []

    with pytest.raises(ModelError):
        client.stream_completion("x", received.append)

    assert received == ["a"]
    assert stream.closed is True


def test_stream_open_failure_becomes_model_error():
    client, _ = _client(error=RuntimeError("Error code: 401"))

    with pytest.raises(ModelError):
        list(client.iter_completion("x"))
