"""Command line entry point: resolve IPv4 addresses to countries.

Usage:
    lookup_country.py [--config PATH] [--store-dir DIR] [--license-key KEY] [--update] [IP ...]
"""
import argparse
import sys
from pathlib import Path

from prettytable import PrettyTable, TableStyle
from rich.markup import escape

from country_lookup.constants.local import ERROR_LOG_PATH
from country_lookup.constants.standalone import TITLE
from country_lookup.country_tables import get_country_code, get_country_name
from country_lookup.database.exceptions import DatabaseError
from country_lookup.exceptions import ConfigurationError, InvalidIPv4AddressError
from country_lookup.lookup import CountryLookup
from country_lookup.logging_setup import console, setup_logging
from country_lookup.models.settings import load_settings
from country_lookup.text_utils import pluralize
from country_lookup.updater.exceptions import UpdateError
from country_lookup.updater.result_types import UpdateOutcome

UPDATE_OUTCOME_MESSAGES = {
    UpdateOutcome.UPDATED: '[green]Database file updated.[/green]',
    UpdateOutcome.NO_UPDATE: 'Database file is already up to date.',
    UpdateOutcome.SKIPPED: '[yellow]No license key configured, update skipped.[/yellow]',
}


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='lookup_country', description=f'{TITLE}: resolve IPv4 addresses to countries.')
    parser.add_argument('ips', nargs='*', metavar='IP', help='IPv4 addresses to resolve')
    parser.add_argument('--config', type=Path, help='TOML settings file with a [country_lookup] table')
    parser.add_argument('--store-dir', type=Path, help='directory holding the database file')
    parser.add_argument('--license-key', help='license key used to download database updates')
    parser.add_argument('--update', action='store_true', help='check for a database update before resolving')
    return parser


def build_results_table(lookup: CountryLookup, ips: list[str]) -> PrettyTable:
    table = PrettyTable()
    table.set_style(TableStyle.SINGLE_BORDER)
    table.field_names = ['IP Address', 'Code', 'Country']
    table.align = 'l'

    for ip in ips:
        try:
            country_index = lookup.lookup_country_index(ip)
        except InvalidIPv4AddressError:
            table.add_row([ip, '-', 'Invalid IPv4 address'])
            continue

        table.add_row([ip, get_country_code(country_index) or '-', get_country_name(country_index) or 'Unknown'])

    return table


def main(argv: list[str] | None = None) -> int:
    args = build_argument_parser().parse_args(argv)
    setup_logging(log_file=ERROR_LOG_PATH)

    try:
        settings = load_settings(args.config)
    except ConfigurationError as e:
        console.print(f'[red]{escape(str(e))}[/red]')
        return 2

    overrides = {
        key: value
        for key, value in (('store_dir', args.store_dir), ('license_key', args.license_key))
        if value is not None
    }
    if overrides:
        settings = settings.model_copy(update=overrides)

    with CountryLookup(settings) as lookup:
        if args.update:
            try:
                result = lookup.check_for_update()
            except UpdateError as e:
                console.print(f'[red]Update failed: {escape(str(e))}[/red]')
                return 1
            console.print(UPDATE_OUTCOME_MESSAGES[result.outcome])

        if not args.ips:
            return 0

        try:
            table = build_results_table(lookup, args.ips)
        except DatabaseError as e:
            console.print(f'[red]{escape(str(e))}[/red]')
            return 1

        console.print(table.get_string(), markup=False, highlight=False)
        console.print(f'Resolved {len(args.ips)} address{pluralize(len(args.ips), plural="es")}.')

    return 0


if __name__ == '__main__':
    sys.exit(main())
