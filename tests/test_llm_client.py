import asyncio
import base64
from types import SimpleNamespace

import pytest
from google.genai import types

from encceja_reader.errors import ConfigurationError
from encceja_reader.llm_client import (
    GeminiReportCardModel,
    OpenAIReportCardModel,
    create_model,
    resolve_api_key,
    to_gemini_schema,
)
from encceja_reader.prompts import build_response_schema


class FakeOpenAICompletions:
    def __init__(self, content):
        self.content = content
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def fake_openai_client(content):
    completions = FakeOpenAICompletions(content)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


class FakeGeminiModels:
    def __init__(self, text):
        self.text = text
        self.kwargs = None

    async def generate_content(self, **kwargs):
        self.kwargs = kwargs
        return SimpleNamespace(text=self.text)


def test_openai_image_request():
    client, completions = fake_openai_client('{"essay": 8}')
    model = OpenAIReportCardModel(model="gpt-4o-mini", client=client)
    schema = build_response_schema()

    text = asyncio.run(model.generate("QUJD", "image/png", "prompt", schema))

    assert text == '{"essay": 8}'
    assert completions.kwargs["model"] == "gpt-4o-mini"
    content = completions.kwargs["messages"][0]["content"]
    assert content[0] == {"type": "image_url", "image_url": {"url": "data:image/png;base64,QUJD"}}
    assert content[1] == {"type": "text", "text": "prompt"}
    response_format = completions.kwargs["response_format"]
    assert response_format["type"] == "json_schema"
    assert response_format["json_schema"]["schema"] is schema
    assert response_format["json_schema"]["strict"] is True


def test_openai_pdf_uses_file_part():
    client, completions = fake_openai_client("{}")
    model = OpenAIReportCardModel(client=client)

    asyncio.run(model.generate("QUJD", "application/pdf", "prompt", build_response_schema()))

    part = completions.kwargs["messages"][0]["content"][0]
    assert part["type"] == "file"
    assert part["file"]["file_data"] == "data:application/pdf;base64,QUJD"


def test_gemini_request_decodes_payload():
    models = FakeGeminiModels('{"mathematics": 140}')
    client = SimpleNamespace(aio=SimpleNamespace(models=models))
    model = GeminiReportCardModel(model="gemini-2.5-flash", client=client)
    payload = base64.b64encode(b"\x89PNG fake").decode("ascii")

    text = asyncio.run(model.generate(payload, "image/png", "prompt", build_response_schema()))

    assert text == '{"mathematics": 140}'
    assert models.kwargs["model"] == "gemini-2.5-flash"
    part, prompt = models.kwargs["contents"]
    assert part.inline_data.data == b"\x89PNG fake"
    assert part.inline_data.mime_type == "image/png"
    assert prompt == "prompt"
    assert models.kwargs["config"].response_mime_type == "application/json"


def test_gemini_schema_conversion():
    schema = to_gemini_schema(build_response_schema())

    assert schema.type == types.Type.OBJECT
    assert schema.properties["essay"].type == types.Type.NUMBER
    assert schema.properties["essay"].nullable is True
    assert schema.properties["studentName"].type == types.Type.STRING
    assert schema.properties["essay"].description == "Nota da Redação"


def test_response_schema_is_strict_and_nullable():
    schema = build_response_schema()

    assert schema["additionalProperties"] is False
    assert schema["required"] == list(schema["properties"])
    assert schema["properties"]["mathematics"]["type"] == ["number", "null"]
    assert schema["properties"]["certifyingInstitution"]["type"] == ["string", "null"]


def test_resolve_api_key_priority(no_credentials, monkeypatch):
    assert resolve_api_key("openai", "explicit") == "explicit"

    monkeypatch.setenv("API_KEY", "generic")
    assert resolve_api_key("gemini") == "generic"

    monkeypatch.setenv("GEMINI_API_KEY", "gemini-key")
    assert resolve_api_key("gemini") == "gemini-key"
    assert resolve_api_key("openai") == "generic"


def test_resolve_api_key_from_netrc(no_credentials, monkeypatch):
    class FakeNetrc:
        def authenticators(self, host):
            return ("netrc-key", None, None) if host == "OPENAI" else None

    monkeypatch.setattr("encceja_reader.llm_client.netrc.netrc", FakeNetrc)

    assert resolve_api_key("openai") == "netrc-key"


def test_resolve_api_key_missing(no_credentials):
    with pytest.raises(ConfigurationError):
        resolve_api_key("openai")


def test_create_model_unknown_provider():
    with pytest.raises(ConfigurationError):
        create_model(provider="anthropic", api_key="key")


def test_create_model_uses_provider_default():
    model = create_model(provider="openai", api_key="sk-test")

    assert isinstance(model, OpenAIReportCardModel)
    assert model.model == "gpt-4o-mini"


def test_injected_client_is_left_open():
    closed = []

    async def close():
        closed.append(True)

    client, _ = fake_openai_client("{}")
    client.close = close
    model = OpenAIReportCardModel(client=client)

    asyncio.run(model.aclose())

    assert closed == []
