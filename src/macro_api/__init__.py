"""Macro Lens API - nutrition estimates proxied from Google Gemini."""

__version__ = "1.0.0"
