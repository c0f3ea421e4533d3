"""Pydantic models for settings validation."""

from .settings import CountryLookupSettings, load_settings

__all__ = [
    'CountryLookupSettings',
    'load_settings',
]
