# VGM import (OPL family only)
#
# Documentation:
#    https://vgmrips.net/wiki/VGM_Specification
#
# Only the YM3526, YM3812 and YMF262 write commands are handled.  A second YM3812
# (dual OPL2) lands in the YMF262's high port, which is why OPL2 and OPL3 clocks in the same
# file can't be played together.

from oplplayer import constants
from oplplayer.base import OplPlayerDecoder, Opcode, OpcodeEntry, TruncatedData, operand
from oplplayer.byte_util import le16, le32
from oplplayer.command_stream import CommandStream
from oplplayer.errors import *

VGM_MAGIC = b'Vgm '

VGM_VERSION_OFFSET = 0x08
VGM_LOOP_OFFSET = 0x1C
VGM_LOOP_SAMPLES = 0x20
VGM_DATA_OFFSET = 0x34
VGM_YM3812_CLOCK = 0x50
VGM_YMF262_CLOCK = 0x5C

VGM_LEGACY_DATA_START = 0x40    # data start for versions before 1.50
VGM_CLOCK_MASK = 0x3FFFFFFF
VGM_DUAL_CHIP_BIT = 0x40000000

VGM_OPCODES = {
    0x5A: OpcodeEntry(Opcode.ESCAPED_WRITE, constants.PRIMARY_PORT),    # YM3812 register, value
    0x5B: OpcodeEntry(Opcode.ESCAPED_WRITE, constants.PRIMARY_PORT),    # YM3526 register, value
    0x5E: OpcodeEntry(Opcode.ESCAPED_WRITE, constants.PRIMARY_PORT),    # YMF262 port 0 register, value
    0x5F: OpcodeEntry(Opcode.ESCAPED_WRITE, constants.SECONDARY_PORT),  # YMF262 port 1 register, value
    0xAA: OpcodeEntry(Opcode.ESCAPED_WRITE, constants.SECONDARY_PORT),  # second YM3812 register, value
    0x61: OpcodeEntry(Opcode.DELAY_LONG, None),                         # wait n samples
    0x62: OpcodeEntry(Opcode.DELAY_FIXED, 735),                         # wait 1/60 second
    0x63: OpcodeEntry(Opcode.DELAY_FIXED, 882),                         # wait 1/50 second
    0x66: OpcodeEntry(Opcode.END, None),                                # end of sound data
}


def vgm_opcode(code):
    """
    Classifies a VGM command byte

    :return: the opcode entry, or None if the command isn't supported
    :rtype: OpcodeEntry
    """
    if 0x70 <= code <= 0x7F:
        return OpcodeEntry(Opcode.DELAY_SHORT, code & 0x0F)
    return VGM_OPCODES.get(code)


def vgm_version(binary):
    """
    Reads the BCD version field, e.g. 0x00000151 -> 151

    :rtype: int
    """
    version = le32(binary, VGM_VERSION_OFFSET)
    try:
        return int('%x' % version)
    except ValueError:
        raise OplPlayerFormatError("Bad VGM version 0x%X" % version)


class VGM(OplPlayerDecoder):
    """
    Decodes the OPL commands of a VGM file into a CommandStream
    """
    cmd_rate = constants.VGM_RATE

    @classmethod
    def opl_type(cls):
        return "VGM"

    def __init__(self):
        OplPlayerDecoder.__init__(self)
        self.options_with_defaults.update(
            loop_repeat=1,   # extra passes through the looped section
        )
        self.set_options(**self.options_with_defaults)

    def set_options(self, **kwargs):
        loop_repeat = kwargs.get('loop_repeat')
        if loop_repeat is not None and loop_repeat < 0:
            raise OplPlayerValueError("Error: loop_repeat can't be negative")
        OplPlayerDecoder.set_options(self, **kwargs)

    def data_offset(self, binary, version):
        if version < 150:
            return VGM_LEGACY_DATA_START
        relative = le32(binary, VGM_DATA_OFFSET)
        if relative == 0:
            return VGM_LEGACY_DATA_START
        return VGM_DATA_OFFSET + relative

    def header_field(self, binary, offset, data_offset):
        # Header fields that overlap the data read as zero
        if offset + 4 > data_offset:
            return 0
        return le32(binary, offset)

    def parse(self, binary):
        """
        Decodes a VGM binary

        :keyword options:
            * **loop_repeat** (int = 1) - extra passes through the looped section
            * **verbose** (bool = False) - print details to stdout

        :param binary: VGM file contents
        :type binary: bytes
        :return: decoded commands
        :rtype: CommandStream
        """
        if binary[0:4] != VGM_MAGIC:
            raise OplPlayerFormatError("Not a VGM file: Bad file identifier!")

        version = vgm_version(binary)
        data_offset = self.data_offset(binary, version)
        self.debug("VGM file version: %.2f data offset: 0x%X", version / 100, data_offset)

        loop_offset = le32(binary, VGM_LOOP_OFFSET)
        if loop_offset:
            loop_offset += VGM_LOOP_OFFSET
        loop_samples = le32(binary, VGM_LOOP_SAMPLES)
        if loop_samples and loop_offset:
            self.debug("Loop present: %d @ 0x%X", loop_samples, loop_offset)

        ym3812 = self.header_field(binary, VGM_YM3812_CLOCK, data_offset)
        ymf262 = self.header_field(binary, VGM_YMF262_CLOCK, data_offset)
        clock_opl2 = ym3812 & VGM_CLOCK_MASK
        clock_opl3 = ymf262 & VGM_CLOCK_MASK
        if clock_opl2 == constants.OPL2_STANDARD_CLOCK:
            self.debug("OPL2 detected: %d Hz (standard clock rate)", clock_opl2)
        elif clock_opl2:
            self.debug("OPL2 detected: %d Hz", clock_opl2)
        if clock_opl3 == constants.OPL3_STANDARD_CLOCK:
            self.debug("OPL3 detected: %d Hz (standard clock rate)", clock_opl3)
        elif clock_opl3:
            self.debug("OPL3 detected: %d Hz", clock_opl3)

        dual_opl2 = (ym3812 & VGM_DUAL_CHIP_BIT) != 0
        if dual_opl2:
            self.debug("Dual OPL2 mode!")
        if ymf262 & VGM_DUAL_CHIP_BIT:
            raise OplPlayerFormatError("Dual OPL3 mode not supported!")
        if clock_opl2 and clock_opl3:
            raise OplPlayerFormatError("Combined OPL2 and OPL3 playback not supported!")

        stream = CommandStream(cmd_rate=self.cmd_rate, dual_chip_mode=dual_opl2)

        passes = 1
        if loop_samples and loop_offset:
            passes += self.get_option('loop_repeat')

        time = 0
        for loop in range(passes):
            start = data_offset if loop == 0 else loop_offset
            try:
                time = self.parse_commands(binary, start, time, stream)
            except TruncatedData as e:
                self.warning("VGM data is truncated: %s" % e)
                break
        return stream

    def parse_commands(self, binary, start, time, stream):
        """
        Decodes commands from start up to the end-of-data command (or the end of the buffer)

        :return: time after the last command
        :rtype: int
        """
        i = start
        while i < len(binary):
            code = binary[i]
            entry = vgm_opcode(code)
            if entry is None:
                raise OplPlayerFormatError("Unknown command %02x at offset 0x%X" % (code, i))
            op, arg = entry
            if op == Opcode.DELAY_SHORT:
                time += arg
            elif op == Opcode.ESCAPED_WRITE:
                register, value = operand(binary, i, 2, 'register write')
                stream.append(time, arg | register, value)
                i += 2
            elif op == Opcode.DELAY_LONG:
                time += le16(operand(binary, i, 2, 'wait'), 0)
                i += 2
            elif op == Opcode.DELAY_FIXED:
                time += arg
            elif op == Opcode.END:
                break
            i += 1
        return time
