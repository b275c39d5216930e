# The normalized representation every decoder produces: timed register writes plus the
# clock rate the times are counted in.

import collections
import csv
import more_itertools as moreit
from oplplayer import constants
from oplplayer.errors import *

Command = collections.namedtuple('Command', ['time', 'register', 'value'])


class CommandStream:
    """
    Ordered register writes for an OPL device.

    Commands are kept in non-decreasing time order; writes sharing a time stay in the
    order they were added.
    """
    def __init__(self, commands=None, cmd_rate=1, dual_chip_mode=False):
        if not cmd_rate > 0:
            raise OplPlayerValueError("Error: command rate must be positive, got %r" % cmd_rate)
        self.commands = []                     #: list of Command
        self.cmd_rate = cmd_rate               #: command clock ticks per second
        self.dual_chip_mode = dual_chip_mode   #: True if the banks were written as two separate OPL2s
        for c in commands or []:
            self.append(*c)

    def append(self, time, register, value):
        """
        Adds a register write to the end of the stream

        :param time: time in command clock ticks
        :type time: int
        :param register: register number, 0x100 and up are the secondary port
        :type register: int
        :param value: value to write
        :type value: int
        """
        if not 0 <= register <= constants.MAX_REGISTER:
            raise OplPlayerValueError("Error: illegal register 0x%X" % register)
        if not 0 <= value <= constants.MAX_VALUE:
            raise OplPlayerValueError("Error: illegal value 0x%X for register 0x%X" % (value, register))
        if time < 0:
            raise OplPlayerValueError("Error: negative command time %d" % time)
        if len(self.commands) > 0 and time < self.commands[-1].time:
            raise OplPlayerContentError(
                "Error: command at %d precedes previous command at %d" % (time, self.commands[-1].time))
        self.commands.append(Command(time, register, value))

    def __len__(self):
        return len(self.commands)

    def __iter__(self):
        return iter(self.commands)

    def __getitem__(self, index):
        return self.commands[index]

    def is_empty(self):
        return len(self.commands) == 0

    def is_ordered(self):
        return all(a.time <= b.time for a, b in moreit.pairwise(self.commands))

    @property
    def total_time(self):
        """
        Time of the last command, in seconds.  0 for an empty stream.
        """
        if self.is_empty():
            return 0
        return self.commands[-1].time / self.cmd_rate

    def copy(self):
        result = CommandStream(cmd_rate=self.cmd_rate, dual_chip_mode=self.dual_chip_mode)
        result.commands = list(self.commands)
        return result

    def registers_at(self, seconds):
        """
        Register contents at a point in time, as a seek would rebuild them

        :param seconds: time in seconds
        :type seconds: float
        :return: register values keyed by register number
        :rtype: dict
        """
        from oplplayer.seek import shadow_registers
        registers, _ = shadow_registers(self.commands, seconds * self.cmd_rate)
        return registers

    def summary(self):
        """
        One line description of the stream

        :rtype: str
        """
        ports = sorted(set(c.register & constants.SECONDARY_PORT for c in self.commands))
        return "%d commands, %.3f seconds at %g Hz, ports %s%s" % (
            len(self.commands), self.total_time, self.cmd_rate,
            ','.join('%d' % (p >> 8) for p in ports) or '-',
            ', dual OPL2' if self.dual_chip_mode else '')

    def to_csv_file(self, output_filename):
        """
        Writes the stream as a CSV file with one row per command

        :param output_filename: output CSV filename
        :type output_filename: str
        """
        csv_rows = [['Tick', 'Seconds', 'Port', 'Register', 'Value']]
        for c in self.commands:
            csv_rows.append([
                '%d' % c.time,
                '{:.6f}'.format(c.time / self.cmd_rate),
                '%d' % (c.register >> 8),
                '{:02X}'.format(c.register & 0xFF),
                '{:02X}'.format(c.value),
            ])

        with open(output_filename, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerows(csv_rows)
