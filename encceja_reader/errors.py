"""
Error types raised while analyzing a report card.

All of them are terminal: the analyzer logs and re-raises, and the caller
decides how to present the failure.
"""


class ReportCardError(Exception):
    """Base class for report card analysis failures."""


class ConfigurationError(ReportCardError):
    """No API credential is configured for the selected provider."""


class EmptyResponseError(ReportCardError):
    """The model call succeeded but returned no text."""


class ParseError(ReportCardError, ValueError):
    """The model response is not a JSON object of the expected shape."""
