import unittest
from oplplayer import constants
from oplplayer.imf import IMF
from oplplayer.command_stream import Command
from oplplayer.errors import OplPlayerValueError
from oplplayer.testing_tools import imf_binary


class IMFTestCase(unittest.TestCase):
    def setUp(self):
        self.imf = IMF()

    def test_headerless_record(self):
        stream = self.imf.to_stream(bytes([0, 0, 0, 0, 0x20, 0x01, 0x05, 0x00]), imf_rate=560)
        self.assertEqual(stream.commands, [Command(0, 0x20, 0x01)])
        self.assertEqual(stream.cmd_rate, 560)
        self.assertEqual(self.imf.diagnostics, [])

    def test_delay_follows_write(self):
        binary = imf_binary([(0xA0, 0x44, 10), (0xB0, 0x32, 0x0102), (0xB0, 0x12, 0)])
        stream = self.imf.to_stream(binary)
        self.assertEqual(stream.commands, [
            Command(0, 0xA0, 0x44),
            Command(10, 0xB0, 0x32),
            Command(10 + 0x0102, 0xB0, 0x12),
        ])
        self.assertAlmostEqual(stream.total_time, (10 + 0x0102) / constants.IMF_DEFAULT_RATE)

    def test_type_1_length_limits_data(self):
        binary = imf_binary([(0xA0, 0x44, 1), (0xB0, 0x32, 1)])
        # trailing bytes after the data region (e.g. a tag) are not commands
        binary += bytes([0x20, 0x21, 0x00, 0x00])
        stream = self.imf.to_stream(binary)
        self.assertEqual(len(stream), 2)

    def test_headerless_with_extra_word(self):
        # length 0 but a nonzero second word: records start at offset 2
        binary = bytes([0, 0, 0xBD, 0x20, 0x03, 0x00])
        stream = self.imf.to_stream(binary)
        self.assertEqual(stream.commands, [Command(0, 0xBD, 0x20)])

    def test_partial_record(self):
        binary = bytes([0, 0, 0, 0, 0xA0, 0x44, 0x01, 0x00, 0xB0, 0x32])
        stream = self.imf.to_stream(binary)
        self.assertEqual(stream.commands, [Command(0, 0xA0, 0x44)])
        self.assertEqual(len(self.imf.diagnostics), 1)

    def test_rate_option(self):
        binary = imf_binary([(0xA0, 0x44, 700)])
        stream = self.imf.to_stream(binary, imf_rate=700)
        self.assertEqual(stream.cmd_rate, 700)
        with self.assertRaises(OplPlayerValueError):
            self.imf.set_options(imf_rate=0)
        with self.assertRaises(OplPlayerValueError):
            self.imf.set_options(loop_repeat=2)


if __name__ == '__main__':
    unittest.main(failfast=False)
