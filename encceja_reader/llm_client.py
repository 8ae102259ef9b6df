"""
Multimodal model backends for report card extraction.

The analyzer only depends on the ReportCardModel protocol, so tests can
pass a stub. Two hosted backends are provided: OpenAI (default) and
Google Gemini.
"""

import base64
import logging
import netrc
import os
from typing import Any, Protocol

from google import genai
from google.genai import types
from openai import AsyncOpenAI

from .config import (
    DEFAULT_PROVIDER,
    GEMINI_API_KEY_ENV,
    GEMINI_MODEL,
    GENERIC_API_KEY_ENV,
    MAX_TOKENS,
    NETRC_MACHINE,
    OPENAI_API_KEY_ENV,
    OPENAI_MODEL,
)
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

PROVIDERS: tuple[str, ...] = ("openai", "gemini")


class ReportCardModel(Protocol):
    """One-shot structured extraction from an inline document."""

    async def generate(
        self,
        image_base64: str,
        mime_type: str,
        prompt: str,
        response_schema: dict[str, Any],
    ) -> str | None:
        """Submit the document and instruction; return the raw JSON text."""
        ...

    async def aclose(self) -> None:
        """Release network resources held by the backend."""
        ...


def resolve_api_key(provider: str, api_key: str | None = None) -> str:
    """
    Find the credential for a provider.

    Priority: 1. Argument, 2. .netrc (machine OPENAI, OpenAI only),
    3. Provider environment variable, 4. Generic API_KEY variable.

    Args:
        provider: "openai" or "gemini".
        api_key: Explicit key, used as-is when given.

    Returns:
        The API key.

    Raises:
        ConfigurationError: If no key can be found.
    """
    if api_key:
        return api_key

    if provider == "openai":
        try:
            auth = netrc.netrc().authenticators(NETRC_MACHINE)
            if auth and auth[0]:
                return auth[0]
        except (OSError, netrc.NetrcParseError):
            pass

    env_var = OPENAI_API_KEY_ENV if provider == "openai" else GEMINI_API_KEY_ENV
    api_key = os.environ.get(env_var) or os.environ.get(GENERIC_API_KEY_ENV)

    if not api_key:
        raise ConfigurationError(
            f"API key required for provider '{provider}'. Set {env_var} or "
            f"{GENERIC_API_KEY_ENV} environment variable, or pass api_key."
        )
    return api_key


class OpenAIReportCardModel:
    """
    Extraction through OpenAI chat completions with a strict JSON schema.

    Images are sent as data URLs; PDFs go through a file content part.
    """

    def __init__(
        self,
        model: str = OPENAI_MODEL,
        api_key: str | None = None,
        client: Any = None,
    ) -> None:
        """
        Initialize the OpenAI backend.

        Args:
            model: OpenAI model to use.
            api_key: OpenAI API key, resolved with resolve_api_key when omitted.
            client: Preconfigured AsyncOpenAI-compatible client.

        Raises:
            ConfigurationError: If no client is given and no key is found.
        """
        self.model = model
        self._owns_client = client is None
        self.client = client or AsyncOpenAI(api_key=resolve_api_key("openai", api_key))

    async def generate(
        self,
        image_base64: str,
        mime_type: str,
        prompt: str,
        response_schema: dict[str, Any],
    ) -> str | None:
        data_url = f"data:{mime_type};base64,{image_base64}"
        if mime_type.startswith("image/"):
            document_part = {"type": "image_url", "image_url": {"url": data_url}}
        else:
            document_part = {
                "type": "file",
                "file": {"filename": "report_card.pdf", "file_data": data_url},
            }

        logger.debug("Requesting extraction from OpenAI model %s (%s)", self.model, mime_type)
        completion = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {
                    "role": "user",
                    "content": [document_part, {"type": "text", "text": prompt}],
                },
            ],
            response_format={
                "type": "json_schema",
                "json_schema": {
                    "name": "report_card",
                    "schema": response_schema,
                    "strict": True,
                },
            },
            max_completion_tokens=MAX_TOKENS,
        )
        if not completion.choices:
            return None
        return completion.choices[0].message.content

    async def aclose(self) -> None:
        """Close the HTTP client if this backend created it."""
        if self._owns_client:
            await self.client.close()


class GeminiReportCardModel:
    """Extraction through the google-genai async client."""

    def __init__(
        self,
        model: str = GEMINI_MODEL,
        api_key: str | None = None,
        client: Any = None,
    ) -> None:
        """
        Initialize the Gemini backend.

        Args:
            model: Gemini model to use.
            api_key: Gemini API key, resolved with resolve_api_key when omitted.
            client: Preconfigured ``genai.Client``-compatible client.

        Raises:
            ConfigurationError: If no client is given and no key is found.
        """
        self.model = model
        self._owns_client = client is None
        self.client = client or genai.Client(api_key=resolve_api_key("gemini", api_key))

    async def generate(
        self,
        image_base64: str,
        mime_type: str,
        prompt: str,
        response_schema: dict[str, Any],
    ) -> str | None:
        document_part = types.Part.from_bytes(
            data=base64.b64decode(image_base64), mime_type=mime_type
        )

        logger.debug("Requesting extraction from Gemini model %s (%s)", self.model, mime_type)
        response = await self.client.aio.models.generate_content(
            model=self.model,
            contents=[document_part, prompt],
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=to_gemini_schema(response_schema),
            ),
        )
        return response.text

    async def aclose(self) -> None:
        """Close the async HTTP client if this backend created it."""
        if self._owns_client:
            await self.client.aio.aclose()


def to_gemini_schema(response_schema: dict[str, Any]) -> types.Schema:
    """
    Convert the JSON Schema used for OpenAI into a google-genai Schema.

    Nullable JSON types (``["number", "null"]``) become ``nullable=True``.

    Args:
        response_schema: Object schema from build_response_schema.

    Returns:
        ``types.Schema`` with the same properties and descriptions.
    """
    properties = {}
    for name, prop in response_schema.get("properties", {}).items():
        json_types = prop["type"] if isinstance(prop["type"], list) else [prop["type"]]
        base_type = next(t for t in json_types if t != "null")
        properties[name] = types.Schema(
            type=types.Type(base_type.upper()),
            description=prop.get("description"),
            nullable="null" in json_types,
        )
    return types.Schema(type=types.Type.OBJECT, properties=properties)


def create_model(
    provider: str = DEFAULT_PROVIDER,
    model_name: str | None = None,
    api_key: str | None = None,
) -> ReportCardModel:
    """
    Build the backend for a provider.

    Args:
        provider: "openai" or "gemini".
        model_name: Model override; the provider default when None.
        api_key: Explicit credential.

    Returns:
        A ReportCardModel ready to call.

    Raises:
        ConfigurationError: If the provider is unknown or no key is found.
    """
    if provider == "openai":
        return OpenAIReportCardModel(model=model_name or OPENAI_MODEL, api_key=api_key)
    if provider == "gemini":
        return GeminiReportCardModel(model=model_name or GEMINI_MODEL, api_key=api_key)
    raise ConfigurationError(f"Unknown provider '{provider}'. Choose one of: {', '.join(PROVIDERS)}")
