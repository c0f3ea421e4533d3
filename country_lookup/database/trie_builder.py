"""Build country databases in the packed binary trie layout.

Used to produce fixtures and small custom databases. Ranges are applied in insertion
order, so a range added later overrides the part of any earlier range it covers.
"""
import ipaddress
from collections import deque
from pathlib import Path

from country_lookup.constants.standalone import COUNTRY_BEGIN, IPV4_MAX_DEPTH, NODE_VALUE_SIZE
from country_lookup.country_tables import COUNTRY_CODES, COUNTRY_COUNT


class _Node:
    __slots__ = ('children',)

    def __init__(self, left: '_Node | int' = 0, right: '_Node | int' = 0) -> None:
        # Each child is either a nested node or a terminal country index.
        self.children: list[_Node | int] = [left, right]


class TrieBuilder:
    """Accumulate IPv4 ranges and serialize them as node records."""

    def __init__(self) -> None:
        self.root = _Node()

    def add_network(self, cidr: str, country_index: int) -> None:
        """Assign every address of `cidr` to `country_index`."""
        if not 0 <= country_index < COUNTRY_COUNT:
            raise ValueError(f'country index must be in range 0..{COUNTRY_COUNT - 1}')

        network = ipaddress.IPv4Network(cidr, strict=False)
        network_number = int(network.network_address)

        if network.prefixlen == 0:
            self.root.children = [country_index, country_index]
            return

        node = self.root
        last_depth = IPV4_MAX_DEPTH + 1 - network.prefixlen

        for depth in range(IPV4_MAX_DEPTH, last_depth, -1):
            bit = (network_number >> depth) & 1
            child = node.children[bit]
            if isinstance(child, int):
                child = _Node(child, child)
                node.children[bit] = child
            node = child

        node.children[(network_number >> last_depth) & 1] = country_index

    def add_country(self, cidr: str, country_code: str) -> None:
        """Assign every address of `cidr` to the country with ISO code `country_code`."""
        try:
            country_index = COUNTRY_CODES.index(country_code.upper())
        except ValueError as e:
            raise ValueError(f'Unknown country code: {country_code}') from e

        self.add_network(cidr, country_index)

    def to_bytes(self) -> bytes:
        """Serialize the trie breadth-first, root at record offset 0."""
        ordered: list[_Node] = []
        offsets: dict[int, int] = {}
        queue = deque([self.root])

        while queue:
            node = queue.popleft()
            offsets[id(node)] = len(ordered)
            ordered.append(node)
            queue.extend(child for child in node.children if isinstance(child, _Node))

        if len(ordered) >= COUNTRY_BEGIN:
            raise ValueError(f'Too many nodes for the record layout: {len(ordered)}')

        data = bytearray()
        for node in ordered:
            for child in node.children:
                value = offsets[id(child)] if isinstance(child, _Node) else COUNTRY_BEGIN + child
                data += value.to_bytes(NODE_VALUE_SIZE, 'little')

        return bytes(data)

    def save(self, output_path: Path) -> None:
        output_path.write_bytes(self.to_bytes())
