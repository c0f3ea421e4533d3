"""Module for defining constants that don't require imports or functions, using only pure Python."""

TITLE = 'Country Lookup'
LOG_CATEGORY = 'CountryLookup'

# Packed trie layout: each node is two 3-byte little-endian values (left, right).
COUNTRY_BEGIN = 16776960
NODE_RECORD_SIZE = 6
NODE_VALUE_SIZE = 3
IPV4_MAX_DEPTH = 31

DATABASE_FILE_NAME = 'GeoIP.dat'
TEMP_DATABASE_FILE_NAME = 'GeoIP.dat.tmp'

DEFAULT_UPDATE_URL = 'https://www.maxmind.com/app/update'
DEFAULT_UPDATE_CHECK_HOUR = 7
DEFAULT_REQUEST_TIMEOUT = 30.0
NO_UPDATE_SENTINEL = b'No new updates available\n'
