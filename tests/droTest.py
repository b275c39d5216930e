import unittest
from oplplayer import constants
from oplplayer.dro import DRO, dro_v1_opcode, dro_v2_opcodes
from oplplayer.base import Opcode
from oplplayer.command_stream import Command
from oplplayer.testing_tools import dro_v1_binary, dro_v2_binary


class DROVersion1TestCase(unittest.TestCase):
    def setUp(self):
        self.dro = DRO()

    def test_codes(self):
        body = [
            0x20, 0x01,           # register write
            0x00, 0x09,           # delay 9 + 1
            0x01, 0x00, 0x01,     # delay 0x100 + 1
            0x04, 0x01, 0x20,     # escaped write to register 1
            0x03,                 # high chip
            0xC0, 0x30,
            0x02,                 # low chip
            0xC0, 0x31,
        ]
        stream = self.dro.to_stream(dro_v1_binary(body))
        self.assertEqual(stream.commands, [
            Command(0, 0x020, 0x01),
            Command(10 + 0x101, 0x001, 0x20),
            Command(10 + 0x101, 0x1C0, 0x30),
            Command(10 + 0x101, 0x0C0, 0x31),
        ])
        self.assertEqual(stream.cmd_rate, constants.DRO_RATE)
        self.assertFalse(stream.dual_chip_mode)

    def test_narrow_hardware_field(self):
        # One-byte hardware type moves the data to 0x15
        stream = self.dro.to_stream(dro_v1_binary([0x20, 0x01], hardware=1, wide_hardware=False))
        self.assertEqual(stream.commands, [Command(0, 0x20, 0x01)])

    def test_hardware_types(self):
        stream = self.dro.to_stream(dro_v1_binary([0x20, 0x01], hardware=2))
        self.assertTrue(stream.dual_chip_mode)
        stream = self.dro.to_stream(dro_v1_binary([0x20, 0x01], hardware=1))
        self.assertFalse(stream.dual_chip_mode)
        stream = self.dro.to_stream(dro_v1_binary([0x20, 0x01], hardware=3))
        self.assertTrue(stream.is_empty())
        self.assertEqual(len(self.dro.diagnostics), 1)

    def test_escape_codes(self):
        self.assertEqual(dro_v1_opcode(0).op, Opcode.DELAY_SHORT)
        self.assertEqual(dro_v1_opcode(1).op, Opcode.DELAY_LONG)
        self.assertEqual(dro_v1_opcode(3), (Opcode.PORT_SELECT, constants.SECONDARY_PORT))
        self.assertEqual(dro_v1_opcode(4).op, Opcode.ESCAPED_WRITE)
        self.assertEqual(dro_v1_opcode(5), (Opcode.LITERAL_WRITE, 5))

    def test_truncated(self):
        stream = self.dro.to_stream(dro_v1_binary([0x20, 0x01, 0x01, 0x05]))
        self.assertEqual(len(stream), 1)
        self.assertEqual(len(self.dro.diagnostics), 1)


class DROVersion2TestCase(unittest.TestCase):
    def setUp(self):
        self.dro = DRO()
        self.codemap = [0x20, 0xA0, 0xB0, 0xC0]

    def test_codes(self):
        body = [
            (0x02, 0x01),         # codes 0 and 1 are the delays, registers start at index 2
            (0x00, 0x04),         # delay 4 + 1
            (0x03, 0x44),
            (0x01, 0x01),         # delay (1 + 1) << 8
            (0x82, 0x31),         # high chip
        ]
        stream = self.dro.to_stream(dro_v2_binary(body, [0x00, 0x00] + self.codemap))
        self.assertEqual(stream.commands, [
            Command(0, 0x020, 0x01),
            Command(5, 0x0A0, 0x44),
            Command(5 + 0x200, 0x120, 0x31),
        ])
        self.assertEqual(self.dro.diagnostics, [])

    def test_custom_delay_codes(self):
        body = [(0x00, 0x01), (0x70, 0x02), (0x71, 0x00), (0x80, 0x03)]
        stream = self.dro.to_stream(dro_v2_binary(body, self.codemap, short_delay=0x70, long_delay=0x71))
        self.assertEqual(stream.commands, [
            Command(0, 0x020, 0x01),
            Command(3 + 0x100, 0x120, 0x03),
        ])

    def test_hardware_types_swapped(self):
        stream = self.dro.to_stream(dro_v2_binary([(0x00, 0x01)], self.codemap, hardware=1, short_delay=0x70, long_delay=0x71))
        self.assertTrue(stream.dual_chip_mode)
        stream = self.dro.to_stream(dro_v2_binary([(0x00, 0x01)], self.codemap, hardware=2, short_delay=0x70, long_delay=0x71))
        self.assertFalse(stream.dual_chip_mode)
        self.assertEqual(len(stream), 1)

    def test_unsupported_layouts(self):
        for kwargs in (dict(fmt=1), dict(compression=1), dict(hardware=5)):
            stream = self.dro.to_stream(dro_v2_binary([(0x02, 0x01)], self.codemap, **kwargs))
            self.assertTrue(stream.is_empty())
            self.assertEqual(len(self.dro.diagnostics), 1)

    def test_codemap_index_out_of_range(self):
        stream = self.dro.to_stream(dro_v2_binary([(0x10, 0x01)], self.codemap, short_delay=0x70, long_delay=0x71))
        self.assertTrue(stream.is_empty())
        self.assertIn('codemap', self.dro.diagnostics[0])

    def test_opcode_classifier(self):
        opcode = dro_v2_opcodes(0x70, 0x71)
        self.assertEqual(opcode(0x70).op, Opcode.DELAY_SHORT)
        self.assertEqual(opcode(0x71).op, Opcode.DELAY_LONG)
        self.assertEqual(opcode(0x85), (Opcode.LITERAL_WRITE, constants.SECONDARY_PORT))
        self.assertEqual(opcode(0x05), (Opcode.LITERAL_WRITE, constants.PRIMARY_PORT))

    def test_unsupported_version(self):
        binary = bytearray(dro_v2_binary([(0x02, 0x01)], self.codemap))
        binary[8] = 3
        stream = self.dro.to_stream(bytes(binary))
        self.assertTrue(stream.is_empty())
        self.assertIn('not supported', self.dro.diagnostics[0])


if __name__ == '__main__':
    unittest.main(failfast=False)
