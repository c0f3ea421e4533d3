import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from country_lookup.constants.local import DEFAULT_STORE_DIR_PATH
from country_lookup.exceptions import ConfigurationError
from country_lookup.models.settings import LICENSE_KEY_ENV_VAR, CountryLookupSettings, load_settings


class SettingsTestCase(unittest.TestCase):
    def setUp(self):
        self._tmp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp_dir.cleanup)
        self.settings_path = Path(self._tmp_dir.name) / 'settings.toml'

        env_patcher = mock.patch.dict(os.environ)
        env_patcher.start()
        self.addCleanup(env_patcher.stop)
        os.environ.pop(LICENSE_KEY_ENV_VAR, None)


class TestLoadSettings(SettingsTestCase):
    def test_defaults(self):
        settings = load_settings()

        self.assertIsNone(settings.license_key)
        self.assertEqual(settings.update_check_hour, 7)
        self.assertEqual(settings.resolved_store_dir, DEFAULT_STORE_DIR_PATH)

    def test_missing_file_yields_defaults(self):
        self.assertEqual(load_settings(self.settings_path), CountryLookupSettings())

    def test_reads_table(self):
        self.settings_path.write_text(
            '[country_lookup]\n'
            'license_key = "abc123"\n'
            'store_dir = "/srv/geo"\n'
            'update_check_hour = 3\n'
            'request_timeout = 12.5\n',
            encoding='utf-8',
        )

        settings = load_settings(self.settings_path)

        self.assertEqual(settings.license_key, 'abc123')
        self.assertEqual(settings.resolved_store_dir, Path('/srv/geo'))
        self.assertEqual(settings.update_check_hour, 3)
        self.assertEqual(settings.request_timeout, 12.5)

    def test_other_tables_are_ignored(self):
        self.settings_path.write_text('[other]\nvalue = 1\n', encoding='utf-8')

        self.assertEqual(load_settings(self.settings_path), CountryLookupSettings())

    def test_environment_overrides_license_key(self):
        self.settings_path.write_text('[country_lookup]\nlicense_key = "from-file"\n', encoding='utf-8')
        os.environ[LICENSE_KEY_ENV_VAR] = 'from-env'

        self.assertEqual(load_settings(self.settings_path).license_key, 'from-env')

    def test_invalid_check_hour(self):
        self.settings_path.write_text('[country_lookup]\nupdate_check_hour = 24\n', encoding='utf-8')

        with self.assertRaises(ConfigurationError):
            load_settings(self.settings_path)

    def test_unknown_key(self):
        self.settings_path.write_text('[country_lookup]\nlicence_key = "typo"\n', encoding='utf-8')

        with self.assertRaises(ConfigurationError):
            load_settings(self.settings_path)

    def test_malformed_toml(self):
        self.settings_path.write_text('[country_lookup\nlicense_key = ', encoding='utf-8')

        with self.assertRaises(ConfigurationError):
            load_settings(self.settings_path)

    def test_table_must_be_a_table(self):
        self.settings_path.write_text('country_lookup = 5\n', encoding='utf-8')

        with self.assertRaises(ConfigurationError):
            load_settings(self.settings_path)


if __name__ == '__main__':
    unittest.main()
