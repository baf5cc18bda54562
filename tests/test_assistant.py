import asyncio
from types import SimpleNamespace

import pytest
from openai import OpenAIError

from apis.v1.route_assistant import get_assistant
from clients.assistant import AssistantService
from core.config import settings
from main import app


class FakeAssistant:
    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    async def chat(self, prompt, max_tokens=1000):
        self.calls.append(("chat", prompt, max_tokens))
        if self.fail:
            raise OpenAIError("provider down")
        return "Use a hash map."

    async def transcribe(self, filename, audio, content_type):
        self.calls.append(("transcribe", filename, audio, content_type))
        return "how do I reverse a list"

    async def speech(self, text, voice=None):
        self.calls.append(("speech", text, voice))
        return b"ID3fake-mp3"


@pytest.fixture
def assistant():
    def install(fake: FakeAssistant) -> FakeAssistant:
        app.dependency_overrides[get_assistant] = lambda: fake
        return fake

    return install


def test_chat(client, auth_headers, assistant):
    fake = assistant(FakeAssistant())

    response = client.post(
        "/api/assistant/chat", json={"prompt": "two sum?"}, headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json() == {"response": "Use a hash map."}
    assert fake.calls == [("chat", "two sum?", 1000)]


def test_chat_empty_prompt(client, auth_headers, assistant):
    assistant(FakeAssistant())

    response = client.post("/api/assistant/chat", json={"prompt": "  "}, headers=auth_headers)

    assert response.status_code == 400


def test_chat_provider_error(client, auth_headers, assistant):
    assistant(FakeAssistant(fail=True))

    response = client.post("/api/assistant/chat", json={"prompt": "hi"}, headers=auth_headers)

    assert response.status_code == 502
    assert response.json()["detail"] == "Assistant provider error"


def test_transcribe(client, auth_headers, assistant):
    fake = assistant(FakeAssistant())

    response = client.post(
        "/api/assistant/transcribe",
        files={"file": ("clip.webm", b"\x1a\x45\xdf\xa3", "audio/webm")},
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert response.json() == {"text": "how do I reverse a list"}
    assert fake.calls == [("transcribe", "clip.webm", b"\x1a\x45\xdf\xa3", "audio/webm")]


def test_transcribe_empty_file(client, auth_headers, assistant):
    assistant(FakeAssistant())

    response = client.post(
        "/api/assistant/transcribe",
        files={"file": ("clip.webm", b"", "audio/webm")},
        headers=auth_headers,
    )

    assert response.status_code == 400


def test_speech(client, auth_headers, assistant):
    fake = assistant(FakeAssistant())

    response = client.post(
        "/api/assistant/speech", json={"text": "Hello"}, headers=auth_headers
    )

    assert response.status_code == 200
    assert response.headers["content-type"] == "audio/mpeg"
    assert response.content == b"ID3fake-mp3"
    assert fake.calls == [("speech", "Hello", None)]


def test_assistant_requires_authentication(client, assistant):
    fake = assistant(FakeAssistant())

    response = client.post("/api/assistant/chat", json={"prompt": "hi"})

    assert response.status_code == 401
    assert fake.calls == []


def test_assistant_not_configured(client, auth_headers, monkeypatch):
    monkeypatch.setattr(settings, "OPENAI_API_KEY", None)

    response = client.post("/api/assistant/chat", json={"prompt": "hi"}, headers=auth_headers)

    assert response.status_code == 503


class RecordingEndpoint:
    def __init__(self, result):
        self.result = result
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        return self.result


def test_assistant_service_chat_parameters():
    completions = RecordingEndpoint(
        SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content="  answer \n"))]
        )
    )
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))

    text = asyncio.run(AssistantService(client).chat("explain recursion", max_tokens=50))

    assert text == "answer"
    assert completions.kwargs == {
        "model": "gpt-3.5-turbo",
        "messages": [{"role": "user", "content": "explain recursion"}],
        "max_tokens": 50,
        "temperature": 0.7,
    }


def test_assistant_service_speech_and_transcription():
    speech = RecordingEndpoint(SimpleNamespace(content=b"mp3"))
    transcriptions = RecordingEndpoint(SimpleNamespace(text="hello"))
    client = SimpleNamespace(
        audio=SimpleNamespace(speech=speech, transcriptions=transcriptions)
    )
    service = AssistantService(client)

    assert asyncio.run(service.speech("hi")) == b"mp3"
    assert speech.kwargs == {"model": "tts-1", "voice": "alloy", "input": "hi"}

    assert asyncio.run(service.transcribe("a.webm", b"data", None)) == "hello"
    assert transcriptions.kwargs == {
        "model": "whisper-1",
        "file": ("a.webm", b"data", "application/octet-stream"),
    }
