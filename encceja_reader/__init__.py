"""
Encceja Report Reader: structured grade extraction from report cards

Sends a scanned Encceja report card to a multimodal model with a strict
response schema, then sanitizes and enriches the returned grades locally.
"""

__version__ = "0.1.0"
