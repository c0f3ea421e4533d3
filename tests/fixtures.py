"""Database fixtures shared by the test modules."""
import gzip
from pathlib import Path

from country_lookup.database.trie_builder import TrieBuilder

SAMPLE_NETWORKS = (
    ('2.0.0.0/8', 'FR'),
    ('2.16.0.0/13', 'EU'),
    ('1.1.1.0/24', 'AU'),
    ('8.8.8.0/24', 'US'),
    ('81.2.69.0/24', 'GB'),
    ('128.0.0.0/1', 'JP'),
    ('192.168.0.0/16', 'A2'),
    ('255.255.255.255/32', 'MF'),
)

# (address, expected code) for the sample database; None means unknown.
SAMPLE_EXPECTATIONS = (
    ('0.0.0.0', None),
    ('1.1.1.1', 'AU'),
    ('1.1.2.1', None),
    ('2.15.255.255', 'FR'),
    ('2.16.0.0', 'EU'),
    ('2.23.255.255', 'EU'),
    ('2.24.0.0', 'FR'),
    ('8.8.8.8', 'US'),
    ('8.8.9.8', None),
    ('81.2.69.160', 'GB'),
    ('127.255.255.255', None),
    ('128.0.0.0', 'JP'),
    ('192.168.1.1', 'A2'),
    ('255.255.255.254', 'JP'),
    ('255.255.255.255', 'MF'),
)


def build_split_database(left_code: str = 'EU', right_code: str = 'AU') -> bytes:
    """One root node splitting on the most significant bit into two terminal leaves."""
    builder = TrieBuilder()
    builder.add_country('0.0.0.0/1', left_code)
    builder.add_country('128.0.0.0/1', right_code)
    return builder.to_bytes()


def build_sample_database(code_overrides: dict[str, str] | None = None) -> bytes:
    """Multi-level database; `code_overrides` renames countries without changing the layout."""
    overrides = code_overrides or {}
    builder = TrieBuilder()
    for cidr, code in SAMPLE_NETWORKS:
        builder.add_country(cidr, overrides.get(code, code))
    return builder.to_bytes()


def write_database(store_dir: Path, data: bytes, file_name: str = 'GeoIP.dat') -> Path:
    database_path = store_dir / file_name
    database_path.write_bytes(data)
    return database_path


def gzip_database(data: bytes) -> bytes:
    return gzip.compress(data)
