"""Binary trie traversal over the packed country database.

The database is a flat sequence of 6-byte node records. Each record holds two
3-byte little-endian values: the `left` child (address bit is 0) and the `right`
child (address bit is 1). A value at or above `COUNTRY_BEGIN` is a terminal country
index; any other value is the record offset of the next node. The root is record 0.
"""
import io
from threading import Lock
from typing import Protocol

from country_lookup.constants.standalone import COUNTRY_BEGIN, IPV4_MAX_DEPTH, NODE_RECORD_SIZE, NODE_VALUE_SIZE
from country_lookup.country_tables import COUNTRY_COUNT
from country_lookup.database.exceptions import CorruptDatabaseError, ShortReadError


class RecordSource(Protocol):
    """Anything able to return `length` bytes starting at an absolute byte `position`."""

    def read_at(self, position: int, length: int) -> bytes:
        """Read `length` bytes at `position` as one atomic operation."""
        ...


class BytesRecordSource:
    """In-memory `RecordSource` over an immutable byte blob.

    Backed by a seekable stream with a shared cursor, so reads are serialized the same
    way the on-disk source serializes them.
    """

    def __init__(self, data: bytes) -> None:
        self._stream = io.BytesIO(data)
        self._lock = Lock()

    def read_at(self, position: int, length: int) -> bytes:
        with self._lock:
            self._stream.seek(position)
            return self._stream.read(length)


def decode_node(record: bytes) -> tuple[int, int]:
    """Decode one node record into its `(left, right)` values."""
    left = int.from_bytes(record[:NODE_VALUE_SIZE], 'little')
    right = int.from_bytes(record[NODE_VALUE_SIZE:NODE_RECORD_SIZE], 'little')
    return left, right


def read_node(source: RecordSource, offset: int) -> tuple[int, int]:
    """Read and decode the node stored at record `offset`.

    Raises:
        ShortReadError: If the record is truncated or lies past the end of the file.
    """
    position = offset * NODE_RECORD_SIZE
    record = source.read_at(position, NODE_RECORD_SIZE)
    if len(record) != NODE_RECORD_SIZE:
        raise ShortReadError(position, NODE_RECORD_SIZE, len(record))

    return decode_node(record)


def seek_country(source: RecordSource, ip_number: int) -> int:
    """Walk the trie for a 32-bit address and return its country index.

    At most 32 nodes are visited, one per address bit from the most significant one.
    Returns 0 (unknown) if no terminal value is reached before the bits run out.

    Raises:
        CorruptDatabaseError: If a record cannot be read or holds an index outside the country tables.
    """
    offset = 0

    for depth in range(IPV4_MAX_DEPTH, -1, -1):
        left, right = read_node(source, offset)
        value = right if ip_number & (1 << depth) else left

        if value >= COUNTRY_BEGIN:
            country_index = value - COUNTRY_BEGIN
            if country_index >= COUNTRY_COUNT:
                raise CorruptDatabaseError(f'Country index {country_index} out of range at record {offset}')
            return country_index

        offset = value

    return 0
