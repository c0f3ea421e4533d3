"""IPv4 to country lookup over a self-updating packed trie database."""

from country_lookup.lookup import CountryLookup
from country_lookup.models import CountryLookupSettings, load_settings

__all__ = [
    'CountryLookup',
    'CountryLookupSettings',
    'load_settings',
]
