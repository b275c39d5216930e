import csv
import os
import tempfile
import unittest
from oplplayer.command_stream import Command, CommandStream
from oplplayer.errors import OplPlayerValueError, OplPlayerContentError


class CommandStreamTestCase(unittest.TestCase):
    def setUp(self):
        self.stream = CommandStream([(0, 0x20, 0x01), (0, 0x20, 0x02), (100, 0x1C0, 0x31)], cmd_rate=1000)

    def test_order_and_total_time(self):
        self.assertEqual(self.stream[1], Command(0, 0x20, 0x02))
        self.assertTrue(self.stream.is_ordered())
        self.assertAlmostEqual(self.stream.total_time, 0.1)
        self.assertEqual(CommandStream(cmd_rate=560).total_time, 0)

    def test_validation(self):
        with self.assertRaises(OplPlayerContentError):
            self.stream.append(99, 0x20, 0x01)
        with self.assertRaises(OplPlayerValueError):
            self.stream.append(200, 0x200, 0x01)
        with self.assertRaises(OplPlayerValueError):
            self.stream.append(200, 0x20, 0x100)
        with self.assertRaises(OplPlayerValueError):
            CommandStream(cmd_rate=0)

    def test_registers_at(self):
        # last write wins, and writes at the target time haven't happened yet
        self.assertEqual(self.stream.registers_at(0.05), {0x20: 0x02})
        self.assertEqual(self.stream.registers_at(0.1), {0x20: 0x02})
        self.assertEqual(self.stream.registers_at(1), {0x20: 0x02, 0x1C0: 0x31})

    def test_copy(self):
        copy = self.stream.copy()
        copy.append(200, 0x20, 0x03)
        self.assertEqual(len(self.stream), 3)
        self.assertEqual(len(copy), 4)

    def test_summary(self):
        self.assertEqual(self.stream.summary(), '3 commands, 0.100 seconds at 1000 Hz, ports 0,1')

    def test_csv(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            filename = os.path.join(tmp_dir, 'stream.csv')
            self.stream.to_csv_file(filename)
            with open(filename, newline='') as f:
                rows = list(csv.reader(f))
        self.assertEqual(rows[0], ['Tick', 'Seconds', 'Port', 'Register', 'Value'])
        self.assertEqual(rows[3], ['100', '0.100000', '1', 'C0', '31'])


if __name__ == '__main__':
    unittest.main(failfast=False)
