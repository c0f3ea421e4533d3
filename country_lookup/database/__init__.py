"""Country database module - trie traversal, file ownership and database building."""

from country_lookup.database.data_source import DatabaseSource, DatabaseState
from country_lookup.database.exceptions import CorruptDatabaseError, DatabaseError, DatabaseNotReadyError, ShortReadError
from country_lookup.database.trie_builder import TrieBuilder
from country_lookup.database.trie_reader import BytesRecordSource, read_node, seek_country

__all__ = [
    'BytesRecordSource',
    'CorruptDatabaseError',
    'DatabaseError',
    'DatabaseNotReadyError',
    'DatabaseSource',
    'DatabaseState',
    'ShortReadError',
    'TrieBuilder',
    'read_node',
    'seek_country',
]
