"""
Report card analysis: one model call followed by local sanitization.

The model is asked for a strict JSON object; the response is parsed,
filtered through the person-name heuristic and enriched with the derived
``history`` and ``isPassing`` fields.
"""

import json
import logging
from typing import Any

from pydantic import ValidationError

from .config_loader import ReaderConfig
from .encoder import strip_data_uri
from .errors import EmptyResponseError, ParseError
from .llm_client import ReportCardModel, create_model
from .models import ReportCardData
from .prompts import build_prompt, build_response_schema
from .validators import sanitize_institution

logger = logging.getLogger(__name__)


def post_process(raw: dict[str, Any]) -> ReportCardData:
    """
    Sanitize a deserialized model answer into a ReportCardData.

    Keys the model omitted become None. A certifying institution that looks
    like a person's name is discarded. Validation is strict: a grade sent
    as a string or boolean is rejected rather than coerced.

    Args:
        raw: JSON object returned by the model.

    Returns:
        Frozen ReportCardData with derived fields.

    Raises:
        ParseError: If a field has a value of the wrong type.
    """
    data = dict(raw)
    data["certifyingInstitution"] = sanitize_institution(data.get("certifyingInstitution"))

    try:
        return ReportCardData.model_validate(data, strict=True)
    except ValidationError as e:
        raise ParseError(f"Model response has invalid fields: {e}") from e


def parse_response(text: str) -> ReportCardData:
    """
    Parse the model's text payload.

    Args:
        text: Raw JSON text.

    Returns:
        Sanitized ReportCardData.

    Raises:
        ParseError: If the text is not a JSON object of the expected shape.
    """
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"Model response is not valid JSON: {e}") from e

    if not isinstance(raw, dict):
        raise ParseError(f"Model response is not a JSON object: {type(raw).__name__}")

    return post_process(raw)


class ReportCardAnalyzer:
    """
    Extracts grades from an encoded report card.

    When no model is injected, a backend is built from the configuration on
    every call, so a missing credential fails each call before any request.
    """

    def __init__(
        self,
        model: ReportCardModel | None = None,
        config: ReaderConfig | None = None,
    ) -> None:
        """
        Initialize the analyzer.

        Args:
            model: Backend to use. Built from ``config`` per call when None.
            config: Provider and model selection for the default backend.
        """
        self.model = model
        self.config = config or ReaderConfig()

    def _get_model(self) -> ReportCardModel:
        if self.model is not None:
            return self.model
        return create_model(provider=self.config.provider, model_name=self.config.model)

    async def analyze(self, image_base64: str, mime_type: str) -> ReportCardData:
        """
        Analyze one report card.

        Args:
            image_base64: Document content as base64, optionally as a data URI.
            mime_type: Media type of the document (image/* or application/pdf).

        Returns:
            Sanitized ReportCardData.

        Raises:
            ConfigurationError: If no API credential is configured.
            EmptyResponseError: If the model returned no text.
            ParseError: If the response is not a valid JSON object.
        """
        try:
            model = self._get_model()
            try:
                text = await model.generate(
                    image_base64=strip_data_uri(image_base64),
                    mime_type=mime_type,
                    prompt=build_prompt(),
                    response_schema=build_response_schema(),
                )
            finally:
                # Backends built for this call own their HTTP client.
                if model is not self.model:
                    await model.aclose()
            if not text:
                raise EmptyResponseError("No response from AI model")

            result = parse_response(text)
        except Exception:
            logger.exception("Error analyzing document (%s)", mime_type)
            raise

        if result.certifying_institution is None:
            logger.debug("No certifying institution kept for this report card")
        logger.info("Report card analyzed: passing=%s", result.is_passing)
        return result


async def analyze_report_card(
    image_base64: str,
    mime_type: str,
    model: ReportCardModel | None = None,
    config: ReaderConfig | None = None,
) -> ReportCardData:
    """
    Analyze one report card with a fresh ReportCardAnalyzer.

    Args:
        image_base64: Document content as base64.
        mime_type: Media type of the document.
        model: Optional backend; defaults to the configured provider.
        config: Optional configuration for the default backend.

    Returns:
        Sanitized ReportCardData.
    """
    analyzer = ReportCardAnalyzer(model=model, config=config)
    return await analyzer.analyze(image_base64, mime_type)
