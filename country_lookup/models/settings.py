"""Pydantic model for the country lookup settings.

Settings are read from the `[country_lookup]` table of a TOML file. Every field is optional:

    [country_lookup]
    license_key = "..."
    store_dir = "/var/lib/country-lookup"
    update_check_hour = 7
"""
import os
from pathlib import Path

import toml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from country_lookup.constants.local import DEFAULT_STORE_DIR_PATH
from country_lookup.constants.standalone import DEFAULT_REQUEST_TIMEOUT, DEFAULT_UPDATE_CHECK_HOUR, DEFAULT_UPDATE_URL
from country_lookup.exceptions import ConfigurationError

SETTINGS_TABLE = 'country_lookup'
LICENSE_KEY_ENV_VAR = 'COUNTRY_LOOKUP_LICENSE_KEY'


class CountryLookupSettings(BaseModel):
    """Settings consumed by `CountryLookup`."""

    model_config = ConfigDict(frozen=True, extra='forbid')

    license_key: str | None = None
    store_dir: Path | None = None
    update_check_hour: int = Field(default=DEFAULT_UPDATE_CHECK_HOUR, ge=0, le=23)
    update_url: str = DEFAULT_UPDATE_URL
    request_timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT, gt=0)

    @property
    def resolved_store_dir(self) -> Path:
        """Directory holding the database file, defaulting to the local app data directory."""
        return self.store_dir if self.store_dir is not None else DEFAULT_STORE_DIR_PATH


def load_settings(settings_path: Path | None = None) -> CountryLookupSettings:
    """Load settings from a TOML file, applying the license key environment override.

    A missing file (or no path) yields the defaults.

    Raises:
        ConfigurationError: If the file cannot be parsed or holds invalid values.
    """
    raw_settings: dict[str, object] = {}

    if settings_path is not None:
        try:
            raw_data = toml.load(settings_path)
        except FileNotFoundError:
            raw_data = {}
        except (OSError, toml.TomlDecodeError) as e:
            raise ConfigurationError(f'Failed to read settings file "{settings_path}": {e}') from e

        table = raw_data.get(SETTINGS_TABLE, {})
        if not isinstance(table, dict):
            raise ConfigurationError(f'"{SETTINGS_TABLE}" in "{settings_path}" must be a table')
        raw_settings.update(table)

    if license_key := os.getenv(LICENSE_KEY_ENV_VAR):
        raw_settings['license_key'] = license_key

    try:
        return CountryLookupSettings.model_validate(raw_settings)
    except ValidationError as e:
        raise ConfigurationError(f'Invalid country lookup settings: {e}') from e
