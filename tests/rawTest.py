import unittest
from oplplayer import constants
from oplplayer.raw import RAW, raw_opcode
from oplplayer.base import Opcode
from oplplayer.command_stream import Command
from oplplayer.testing_tools import raw_binary


class RAWTestCase(unittest.TestCase):
    def setUp(self):
        self.raw = RAW()

    def test_missing_magic(self):
        stream = self.raw.to_stream(b'RAWXDATA' + bytes(10))
        self.assertTrue(stream.is_empty())
        self.assertEqual(len(self.raw.diagnostics), 1)
        self.assertTrue(self.raw.diagnostics[0].startswith('Error'))

        stream = self.raw.to_stream(b'RAWADATX' + bytes(10))
        self.assertTrue(stream.is_empty())
        self.assertEqual(len(self.raw.diagnostics), 1)

    def test_value_precedes_register(self):
        stream = self.raw.to_stream(raw_binary([(0x44, 0xA0), (0x21, 0x20)]))
        self.assertEqual(stream.commands, [Command(0, 0xA0, 0x44), Command(0, 0x20, 0x21)])
        self.assertEqual(stream.cmd_rate, constants.RAW_RATE)

    def test_delays_and_clock_change(self):
        pairs = [
            (0x44, 0xA0),
            (3, 0x00),            # delay 3 * clock
            (0x00, 0x02),         # clock change; next pair holds the clock
            (0x10, 0x00),         # new clock 0x0010
            (2, 0x00),            # delay 2 * 0x10
            (0x32, 0xB0),
        ]
        stream = self.raw.to_stream(raw_binary(pairs, clock=0x100))
        self.assertEqual(stream.commands, [
            Command(0, 0xA0, 0x44),
            Command(3 * 0x100 + 2 * 0x10, 0xB0, 0x32),
        ])

    def test_port_select(self):
        pairs = [
            (0x01, 0x05),
            (0x02, 0x02),         # high chip
            (0x01, 0x05),
            (0x01, 0x02),         # low chip
            (0x30, 0xC0),
        ]
        stream = self.raw.to_stream(raw_binary(pairs))
        self.assertEqual([c.register for c in stream], [0x005, 0x105, 0x0C0])

    def test_opcode_table(self):
        self.assertEqual(raw_opcode(0x00, 7), (Opcode.DELAY_SHORT, 7))
        self.assertEqual(raw_opcode(0x02, 0).op, Opcode.CLOCK_CHANGE)
        self.assertEqual(raw_opcode(0x02, 2), (Opcode.PORT_SELECT, constants.SECONDARY_PORT))
        self.assertEqual(raw_opcode(0x02, 9).op, Opcode.IGNORED)
        self.assertEqual(raw_opcode(0xB0, 0x32), (Opcode.LITERAL_WRITE, 0xB0))

    def test_truncated(self):
        binary = raw_binary([(0x44, 0xA0)]) + bytes([0x55])
        stream = self.raw.to_stream(binary)
        self.assertEqual(len(stream), 1)
        self.assertEqual(len(self.raw.diagnostics), 1)
        self.assertTrue(self.raw.diagnostics[0].startswith('Warning'))


if __name__ == '__main__':
    unittest.main(failfast=False)
