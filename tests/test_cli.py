import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from fixtures import build_sample_database, write_database

import lookup_country
from country_lookup.lookup import CountryLookup
from country_lookup.logging_setup import console
from country_lookup.models.settings import LICENSE_KEY_ENV_VAR


class TestCommandLine(unittest.TestCase):
    def setUp(self):
        self._tmp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp_dir.cleanup)
        self.store_dir = Path(self._tmp_dir.name)

        for patcher in (mock.patch.object(lookup_country, 'setup_logging'), mock.patch.dict(os.environ)):
            patcher.start()
            self.addCleanup(patcher.stop)
        os.environ.pop(LICENSE_KEY_ENV_VAR, None)

    def run_main(self, *argv: str) -> tuple[int, str]:
        with console.capture() as capture:
            exit_code = lookup_country.main(list(argv))
        return exit_code, capture.get()

    def test_resolves_addresses(self):
        write_database(self.store_dir, build_sample_database())

        exit_code, output = self.run_main('--store-dir', str(self.store_dir), '8.8.8.8', '2.16.0.1', '0.0.0.1', 'bogus')

        self.assertEqual(exit_code, 0)
        self.assertIn('United States', output)
        self.assertIn('Europe', output)
        self.assertIn('Unknown', output)
        self.assertIn('Invalid IPv4 address', output)
        self.assertIn('Resolved 4 addresses.', output)

    def test_each_address_is_resolved_once(self):
        write_database(self.store_dir, build_sample_database())

        strict_lookup = CountryLookup.lookup_country_index
        with (
            mock.patch.object(CountryLookup, 'lookup_country_index', autospec=True, side_effect=strict_lookup) as lookup_index,
            mock.patch.object(CountryLookup, 'lookup_country_code', side_effect=AssertionError),
            mock.patch.object(CountryLookup, 'lookup_country_name', side_effect=AssertionError),
        ):
            exit_code, output = self.run_main('--store-dir', str(self.store_dir), '8.8.8.8', '81.2.69.160')

        self.assertEqual(exit_code, 0)
        self.assertEqual(lookup_index.call_count, 2)
        self.assertIn('United States', output)
        self.assertIn('GB', output)

    def test_missing_database(self):
        exit_code, output = self.run_main('--store-dir', str(self.store_dir), '8.8.8.8')

        self.assertEqual(exit_code, 1)
        self.assertIn('not ready', output.lower())

    def test_update_without_license_key_is_skipped(self):
        write_database(self.store_dir, build_sample_database())

        exit_code, output = self.run_main('--store-dir', str(self.store_dir), '--update')

        self.assertEqual(exit_code, 0)
        self.assertIn('update skipped', output)

    def test_invalid_settings_file(self):
        settings_path = self.store_dir / 'settings.toml'
        settings_path.write_text('[country_lookup]\nupdate_check_hour = 42\n', encoding='utf-8')

        exit_code, output = self.run_main('--config', str(settings_path), '8.8.8.8')

        self.assertEqual(exit_code, 2)
        self.assertIn('Invalid country lookup settings', output)


if __name__ == '__main__':
    unittest.main()
