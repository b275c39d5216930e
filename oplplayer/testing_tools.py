# Helpers for tests: a device that records what it's told, and builders for small
# synthetic files of each supported format.

from oplplayer.byte_util import little_endian_bytes
from oplplayer.device import OplDevice


class RecordingDevice(OplDevice):
    """
    OplDevice that remembers every reset and write.  render() returns a fixed sample, so
    rendered output can be told apart from silence.
    """
    def __init__(self, sample=(1000, -1000)):
        self.sample = sample
        self.sample_rates = []    #: sample rate of every reset() call
        self.writes = []          #: (register, value) since the last reset
        self.registers = {}       #: current register values, since the last reset
        self.render_count = 0

    def reset(self, sample_rate):
        self.sample_rates.append(sample_rate)
        self.writes = []
        self.registers = {}

    def write(self, register, value):
        self.writes.append((register, value))
        self.registers[register] = value

    def render(self):
        self.render_count += 1
        return self.sample


def imf_binary(records, type_1=True):
    """
    :param records: (register, value, delay) tuples
    :param type_1: True to include the length header
    """
    body = bytearray()
    for register, value, delay in records:
        body += bytes([register, value]) + little_endian_bytes(delay, 2)
    if type_1:
        return bytes(little_endian_bytes(len(body), 2) + body)
    return bytes(body)


def raw_binary(pairs, clock=0x1234):
    """
    :param pairs: (value, register) tuples, as stored in the file
    """
    result = bytearray(b'RAWADATA') + little_endian_bytes(clock, 2)
    for value, register in pairs:
        result += bytes([value, register])
    return bytes(result)


def dro_v1_binary(body, hardware=0, wide_hardware=True):
    """
    :param body: register data bytes
    :param hardware: 0 = OPL2, 1 = OPL3, 2 = dual OPL2
    :param wide_hardware: True to store the hardware type as a 32-bit word (data at 0x18)
    """
    result = bytearray(b'DBRAWOPL')
    result += little_endian_bytes(0, 2) + little_endian_bytes(1, 2)   # version 0.1
    result += little_endian_bytes(0, 4)                               # length in ms
    result += little_endian_bytes(len(body), 4)                       # length in bytes
    result += little_endian_bytes(hardware, 4 if wide_hardware else 1)
    return bytes(result + bytes(body))


def dro_v2_binary(body, codemap, hardware=0, short_delay=0x00, long_delay=0x01, fmt=0, compression=0):
    """
    :param body: (code, value) pairs
    :param codemap: register numbers, indexed by code
    """
    result = bytearray(b'DBRAWOPL')
    result += little_endian_bytes(2, 2) + little_endian_bytes(0, 2)   # version 2.0
    result += little_endian_bytes(len(body), 4)                       # length in pairs
    result += little_endian_bytes(0, 4)                               # length in ms
    result += bytes([hardware, fmt, compression, short_delay, long_delay, len(codemap)])
    result += bytes(codemap)
    for code, value in body:
        result += bytes([code, value])
    return bytes(result)


def vgm_binary(data, version=0x151, ym3812_clock=3579545, ymf262_clock=0, loop_at=None, loop_samples=0):
    """
    :param data: VGM command bytes
    :param loop_at: offset into data where the loop starts
    """
    header_len = 0x80 if version >= 0x150 else 0x40
    header = bytearray(header_len)
    header[0:4] = b'Vgm '
    header[0x08:0x0C] = little_endian_bytes(version, 4)
    if loop_at is not None:
        header[0x1C:0x20] = little_endian_bytes(header_len + loop_at - 0x1C, 4)
        header[0x20:0x24] = little_endian_bytes(loop_samples, 4)
    if header_len > 0x60:
        # clock fields only exist in 1.51+ headers
        header[0x34:0x38] = little_endian_bytes(header_len - 0x34, 4)
        header[0x50:0x54] = little_endian_bytes(ym3812_clock, 4)
        header[0x5C:0x60] = little_endian_bytes(ymf262_clock, 4)
    return bytes(header + bytes(data))
