import ipaddress
import unittest
from concurrent.futures import ThreadPoolExecutor

from fixtures import SAMPLE_EXPECTATIONS, build_sample_database, build_split_database

from country_lookup.constants.standalone import COUNTRY_BEGIN, NODE_RECORD_SIZE
from country_lookup.country_tables import COUNTRY_CODES, get_country_code
from country_lookup.database.exceptions import CorruptDatabaseError, ShortReadError
from country_lookup.database.trie_reader import BytesRecordSource, decode_node, read_node, seek_country
from country_lookup.utils import ip_to_number


class RecordingSource(BytesRecordSource):
    """Records every read position so traversal bounds can be checked."""

    def __init__(self, data: bytes) -> None:
        super().__init__(data)
        self.size = len(data)
        self.positions: list[int] = []

    def read_at(self, position: int, length: int) -> bytes:
        self.positions.append(position)
        return super().read_at(position, length)


def encode_node(left: int, right: int) -> bytes:
    return left.to_bytes(3, 'little') + right.to_bytes(3, 'little')


class TestDecodeNode(unittest.TestCase):
    def test_little_endian_without_sign_extension(self):
        self.assertEqual(decode_node(b'\x01\x02\x03\xff\xfe\xfd'), (0x030201, 0xFDFEFF))

    def test_high_bytes_are_unsigned(self):
        self.assertEqual(decode_node(b'\xff\xff\xff\x80\x80\x80'), (0xFFFFFF, 0x808080))

    def test_read_node_uses_record_offset(self):
        data = encode_node(1, 2) + encode_node(3, 4)
        self.assertEqual(read_node(BytesRecordSource(data), 1), (3, 4))


class TestSeekCountry(unittest.TestCase):
    def test_split_database_example(self):
        source = BytesRecordSource(build_split_database())

        eu_index = seek_country(source, ip_to_number('0.0.0.1'))
        au_index = seek_country(source, ip_to_number('128.0.0.0'))

        self.assertEqual(eu_index, 2)
        self.assertEqual(au_index, 16)
        self.assertEqual(get_country_code(eu_index), 'EU')
        self.assertEqual(get_country_code(au_index), 'AU')

    def test_split_database_is_a_single_record(self):
        data = build_split_database()
        self.assertEqual(data, encode_node(COUNTRY_BEGIN + 2, COUNTRY_BEGIN + 16))

    def test_sample_database(self):
        source = BytesRecordSource(build_sample_database())

        for ip, expected_code in SAMPLE_EXPECTATIONS:
            with self.subTest(ip=ip):
                self.assertEqual(COUNTRY_CODES[seek_country(source, ip_to_number(ip))], expected_code)

    def test_lookups_are_repeatable(self):
        source = BytesRecordSource(build_sample_database())
        ip_number = ip_to_number('2.16.0.1')

        results = {seek_country(source, ip_number) for _ in range(50)}

        self.assertEqual(results, {COUNTRY_CODES.index('EU')})

    def test_traversal_stays_within_file_and_32_steps(self):
        data = build_sample_database()
        boundary_ips = [ip for ip, _ in SAMPLE_EXPECTATIONS] + ['0.0.0.0', '255.255.255.255', '127.255.255.255', '128.0.0.0']

        for ip in boundary_ips:
            with self.subTest(ip=ip):
                source = RecordingSource(data)
                seek_country(source, ip_to_number(ip))
                self.assertLessEqual(len(source.positions), 32)
                for position in source.positions:
                    self.assertLessEqual(position + NODE_RECORD_SIZE, source.size)

    def test_self_referencing_node_stops_after_32_steps(self):
        source = RecordingSource(encode_node(0, 0))

        self.assertEqual(seek_country(source, ip_to_number('10.0.0.1')), 0)
        self.assertEqual(len(source.positions), 32)

    def test_empty_database_is_a_short_read(self):
        with self.assertRaises(ShortReadError):
            seek_country(BytesRecordSource(b''), 0)

    def test_truncated_record_is_a_short_read(self):
        with self.assertRaises(ShortReadError):
            seek_country(BytesRecordSource(encode_node(1, 1)[:4]), 0)

    def test_child_offset_past_end_of_file(self):
        source = BytesRecordSource(encode_node(7, COUNTRY_BEGIN + 1))

        with self.assertRaises(CorruptDatabaseError):
            seek_country(source, ip_to_number('1.2.3.4'))

    def test_country_index_outside_tables_is_corrupt(self):
        source = BytesRecordSource(encode_node(COUNTRY_BEGIN + 255, COUNTRY_BEGIN + 1))

        with self.assertRaises(CorruptDatabaseError):
            seek_country(source, ip_to_number('1.2.3.4'))
        self.assertEqual(seek_country(source, ip_to_number('200.0.0.0')), 1)


class TestConcurrentReaders(unittest.TestCase):
    def test_concurrent_lookups_are_consistent(self):
        source = BytesRecordSource(build_sample_database())
        expectations = [(ip_to_number(ip), code) for ip, code in SAMPLE_EXPECTATIONS] * 100

        def lookup(item: tuple[int, str | None]) -> bool:
            ip_number, expected_code = item
            return COUNTRY_CODES[seek_country(source, ip_number)] == expected_code

        with ThreadPoolExecutor(max_workers=16) as executor:
            results = list(executor.map(lookup, expectations))

        self.assertTrue(all(results))

    def test_parsed_addresses_match_textual_ones(self):
        source = BytesRecordSource(build_sample_database())

        for ip, _ in SAMPLE_EXPECTATIONS:
            with self.subTest(ip=ip):
                self.assertEqual(
                    seek_country(source, ip_to_number(ipaddress.IPv4Address(ip))),
                    seek_country(source, ip_to_number(ip)),
                )


if __name__ == '__main__':
    unittest.main()
