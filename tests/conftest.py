import pytest

from encceja_reader.config import GENERIC_API_KEY_ENV, GEMINI_API_KEY_ENV, OPENAI_API_KEY_ENV


class StubModel:
    """ReportCardModel that returns a canned response and records calls."""

    def __init__(self, response: str | None) -> None:
        self.response = response
        self.calls: list[dict] = []

    async def generate(self, image_base64, mime_type, prompt, response_schema):
        self.calls.append({
            "image_base64": image_base64,
            "mime_type": mime_type,
            "prompt": prompt,
            "response_schema": response_schema,
        })
        return self.response

    async def aclose(self):
        self.closed = True


@pytest.fixture
def stub_model():
    return StubModel


@pytest.fixture
def no_credentials(monkeypatch):
    """Remove every credential source."""
    for var in (OPENAI_API_KEY_ENV, GEMINI_API_KEY_ENV, GENERIC_API_KEY_ENV):
        monkeypatch.delenv(var, raising=False)

    def missing_netrc(*args, **kwargs):
        raise FileNotFoundError("no .netrc")

    monkeypatch.setattr("encceja_reader.llm_client.netrc.netrc", missing_netrc)
