# Rdos RAW (RAWADATA) import
#
# RAW captures from the Rdos / Rdos Raw Capture tool store (value, register) pairs, value
# first.  Register 0 is a delay of value * clock PIT ticks, and register 2 is a control
# code (clock change or chip/port select).  Header:
#   0x00  "RAWADATA"
#   0x08  initial clock divisor (16-bit little-endian)

from oplplayer import constants
from oplplayer.base import OplPlayerDecoder, Opcode, OpcodeEntry, TruncatedData
from oplplayer.byte_util import le16
from oplplayer.command_stream import CommandStream
from oplplayer.errors import *

RAW_MAGIC = b'RAWA'
RAW_DATA_MAGIC = b'DATA'
RAW_DATA_OFFSET = 10

RAW_DELAY_REGISTER = 0x00
RAW_CONTROL_REGISTER = 0x02

# Control codes (the value byte of a register 2 pair)
RAW_CONTROL_CODES = {
    0: OpcodeEntry(Opcode.CLOCK_CHANGE, None),                  # next pair is the new clock
    1: OpcodeEntry(Opcode.PORT_SELECT, constants.PRIMARY_PORT),  # low chip / port 0
    2: OpcodeEntry(Opcode.PORT_SELECT, constants.SECONDARY_PORT),  # high chip / port 1
}


def raw_opcode(register, value):
    """
    Classifies a RAW (value, register) pair

    :return: the opcode entry for the pair
    :rtype: OpcodeEntry
    """
    if register == RAW_DELAY_REGISTER:
        return OpcodeEntry(Opcode.DELAY_SHORT, value)
    if register == RAW_CONTROL_REGISTER:
        return RAW_CONTROL_CODES.get(value, OpcodeEntry(Opcode.IGNORED, value))
    return OpcodeEntry(Opcode.LITERAL_WRITE, register)


class RAW(OplPlayerDecoder):
    """
    Decodes Rdos RAW captures into a CommandStream
    """
    cmd_rate = constants.RAW_RATE

    @classmethod
    def opl_type(cls):
        return "RAW"

    def parse(self, binary):
        """
        Decodes a RAW binary

        :param binary: RAW file contents
        :type binary: bytes
        :return: decoded commands
        :rtype: CommandStream
        """
        if binary[0:4] != RAW_MAGIC or binary[4:8] != RAW_DATA_MAGIC:
            raise OplPlayerFormatError("Not a RAW file: Bad file identifier!")

        self.debug("RAW file")
        stream = CommandStream(cmd_rate=self.cmd_rate)

        time = 0
        clock = le16(binary, 8)
        port = constants.PRIMARY_PORT
        i = RAW_DATA_OFFSET
        try:
            while i < len(binary):
                if i + 1 >= len(binary):
                    raise TruncatedData('odd byte at offset 0x%X' % i)
                value, register = binary[i], binary[i + 1]
                op, arg = raw_opcode(register, value)
                if op == Opcode.DELAY_SHORT:
                    time += arg * clock
                elif op == Opcode.CLOCK_CHANGE:
                    i += 2
                    if i + 1 >= len(binary):
                        raise TruncatedData('clock change at offset 0x%X' % (i - 2))
                    clock = le16(binary, i)
                elif op == Opcode.PORT_SELECT:
                    port = arg
                elif op == Opcode.LITERAL_WRITE:
                    stream.append(time, arg | port, value)
                i += 2
        except TruncatedData as e:
            self.warning("RAW data is truncated: %s" % e)

        return stream
