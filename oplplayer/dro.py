# DOSBox Raw OPL (DRO) import
#
# Two unrelated layouts share the "DBRAWOPL" magic:
#
# Version 0.1 (reported as 1.0), DOSBox 0.61 - 0.72:
#   0x08  version major, minor (16-bit words)
#   0x0C  length in milliseconds (32-bit)
#   0x10  length in bytes (32-bit)
#   0x14  hardware type: 0 = OPL2, 1 = OPL3, 2 = dual OPL2.  Early captures store this
#         as a 32-bit word, later ones as a single byte, which moves the data to 0x15.
#   Byte codes: 0 = delay (next byte + 1 ms), 1 = delay (next word + 1 ms),
#   2/3 = select low/high chip, 4 = escape (register and value follow), else register.
#
# Version 2.0, DOSBox 0.73 and later:
#   0x0C  length in register/value pairs, 0x10 length in milliseconds
#   0x14  hardware type: 0 = OPL2, 1 = dual OPL2, 2 = OPL3 (not the 1.0 ordering!)
#   0x15  format (0 = interleaved), 0x16 compression (0 = none)
#   0x17  short delay code, 0x18 long delay code, 0x19 codemap length
#   0x1A  codemap: register index -> register number.  Bit 7 of an index selects the high chip.

from oplplayer import constants
from oplplayer.base import OplPlayerDecoder, Opcode, OpcodeEntry, TruncatedData, operand
from oplplayer.byte_util import le16, le32
from oplplayer.command_stream import CommandStream
from oplplayer.errors import *

DRO_MAGIC = b'DBRA'
DRO_MAGIC_2 = b'WOPL'

DRO_HARDWARE_OFFSET = 0x14

# hardware type -> (description, dual OPL2)
DRO_V1_HARDWARE = {
    0: ('OPL2', False),
    1: ('OPL3', False),
    2: ('Dual OPL2', True),
}

DRO_V2_HARDWARE = {
    0: ('OPL2', False),
    1: ('Dual OPL2', True),
    2: ('OPL3', False),
}

DRO_V1_CODES = {
    0: OpcodeEntry(Opcode.DELAY_SHORT, None),
    1: OpcodeEntry(Opcode.DELAY_LONG, None),
    2: OpcodeEntry(Opcode.PORT_SELECT, constants.PRIMARY_PORT),
    3: OpcodeEntry(Opcode.PORT_SELECT, constants.SECONDARY_PORT),
    4: OpcodeEntry(Opcode.ESCAPED_WRITE, None),
}

DRO_V2_CODEMAP_OFFSET = 0x1A
DRO_V2_HIGH_CHIP_BIT = 0x80


def dro_v1_opcode(code):
    return DRO_V1_CODES.get(code, OpcodeEntry(Opcode.LITERAL_WRITE, code))


def dro_v2_opcodes(short_delay_code, long_delay_code):
    """
    Builds the classifier for a version 2 file's delay codes

    :return: function from a code byte to its OpcodeEntry
    :rtype: function
    """
    def opcode(code):
        if code == short_delay_code:
            return OpcodeEntry(Opcode.DELAY_SHORT, None)
        if code == long_delay_code:
            return OpcodeEntry(Opcode.DELAY_LONG, None)
        if code & DRO_V2_HIGH_CHIP_BIT:
            return OpcodeEntry(Opcode.LITERAL_WRITE, constants.SECONDARY_PORT)
        return OpcodeEntry(Opcode.LITERAL_WRITE, constants.PRIMARY_PORT)
    return opcode


class DRO(OplPlayerDecoder):
    """
    Decodes DOSBox DRO captures (versions 0.1/1.0 and 2.0) into a CommandStream
    """
    cmd_rate = constants.DRO_RATE

    @classmethod
    def opl_type(cls):
        return "DRO"

    def parse(self, binary):
        """
        Decodes a DRO binary

        :param binary: DRO file contents
        :type binary: bytes
        :return: decoded commands
        :rtype: CommandStream
        """
        if binary[0:4] != DRO_MAGIC or binary[4:8] != DRO_MAGIC_2:
            raise OplPlayerFormatError("Not a DRO file: Bad file identifier!")

        major, minor = le16(binary, 8), le16(binary, 10)
        if major == 0 and minor == 1:
            self.debug("DRO file version: 1.0")
        else:
            self.debug("DRO file version: %d.%d", major, minor)

        if major < 2:
            return self.parse_v1(binary)
        if major == 2 and minor == 0:
            return self.parse_v2(binary)
        raise OplPlayerFormatError("DRO version %d.%d playback not supported!" % (major, minor))

    def hardware(self, binary, hardware_types):
        hardware = binary[DRO_HARDWARE_OFFSET] if len(binary) > DRO_HARDWARE_OFFSET else None
        if hardware not in hardware_types:
            raise OplPlayerFormatError("Unknown chip type %s!" % hardware)
        name, dual_chip_mode = hardware_types[hardware]
        self.debug("Chip type: %s", name)
        return hardware, dual_chip_mode

    def parse_v1(self, binary):
        hardware, dual_chip_mode = self.hardware(binary, DRO_V1_HARDWARE)
        stream = CommandStream(cmd_rate=self.cmd_rate, dual_chip_mode=dual_chip_mode)

        # A 32-bit hardware field reads back as the hardware byte itself
        data_offset = 0x18 if le32(binary, DRO_HARDWARE_OFFSET) == hardware else 0x15

        time = 0
        port = constants.PRIMARY_PORT
        i = data_offset
        try:
            while i < len(binary):
                op, arg = dro_v1_opcode(binary[i])
                if op == Opcode.DELAY_SHORT:
                    time += operand(binary, i, 1, 'short delay')[0] + 1
                    i += 1
                elif op == Opcode.DELAY_LONG:
                    time += le16(operand(binary, i, 2, 'long delay'), 0) + 1
                    i += 2
                elif op == Opcode.PORT_SELECT:
                    port = arg
                elif op == Opcode.ESCAPED_WRITE:
                    register, value = operand(binary, i, 2, 'escaped register write')
                    stream.append(time, register | port, value)
                    i += 2
                else:
                    value = operand(binary, i, 1, 'register write')[0]
                    stream.append(time, arg | port, value)
                    i += 1
                i += 1
        except TruncatedData as e:
            self.warning("DRO data is truncated: %s" % e)

        return stream

    def parse_v2(self, binary):
        hardware, dual_chip_mode = self.hardware(binary, DRO_V2_HARDWARE)

        if len(binary) < DRO_V2_CODEMAP_OFFSET:
            raise OplPlayerFormatError("DRO header is truncated!")

        if binary[0x15] != 0:
            raise OplPlayerFormatError("Only interleaved mode is supported!")
        if binary[0x16] != 0:
            raise OplPlayerFormatError("Only uncompressed data is supported!")

        opcode = dro_v2_opcodes(binary[0x17], binary[0x18])
        codemap_length = binary[0x19]
        codemap = binary[DRO_V2_CODEMAP_OFFSET:DRO_V2_CODEMAP_OFFSET + codemap_length]

        stream = CommandStream(cmd_rate=self.cmd_rate, dual_chip_mode=dual_chip_mode)

        time = 0
        i = DRO_V2_CODEMAP_OFFSET + codemap_length
        try:
            while i < len(binary):
                code = binary[i]
                data = operand(binary, i, 1, 'code 0x%02X' % code)[0]
                op, port = opcode(code)
                if op == Opcode.DELAY_SHORT:
                    time += data + 1
                elif op == Opcode.DELAY_LONG:
                    time += (data + 1) << 8
                else:
                    index = code & ~DRO_V2_HIGH_CHIP_BIT
                    if index >= len(codemap):
                        raise OplPlayerFormatError(
                            "Register index %d outside codemap at offset 0x%X" % (index, i))
                    stream.append(time, port | codemap[index], data)
                i += 2
        except TruncatedData as e:
            self.warning("DRO data is truncated: %s" % e)

        return stream
