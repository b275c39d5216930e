# IMF (id Music Format) import
#
# IMF files are raw OPL2 register writes captured from id Software / Apogee games.
# Type-0 files have no header; type-1 files start with a 16-bit data length.
# Each record is 4 bytes: register, value, delay (16-bit little-endian).
# The delay is counted after the write, in ticks of a rate the file doesn't record:
# 560Hz for most Apogee titles, 700Hz for Wolfenstein 3-D, 280Hz for some others.

import more_itertools as moreit
from oplplayer import constants
from oplplayer.base import OplPlayerDecoder
from oplplayer.byte_util import le16
from oplplayer.command_stream import CommandStream
from oplplayer.errors import *

IMF_RECORD_LEN = 4


class IMF(OplPlayerDecoder):
    """
    Decodes IMF register logs into a CommandStream
    """

    @classmethod
    def opl_type(cls):
        return "IMF"

    def __init__(self):
        OplPlayerDecoder.__init__(self)
        self.options_with_defaults.update(
            imf_rate=constants.IMF_DEFAULT_RATE,   # ticks per second
        )
        self.set_options(**self.options_with_defaults)

    def set_options(self, **kwargs):
        rate = kwargs.get('imf_rate')
        if rate is not None and not rate > 0:
            raise OplPlayerValueError("Error: IMF rate must be positive, got %r" % rate)
        OplPlayerDecoder.set_options(self, **kwargs)

    def stream_rate(self):
        return self.get_option('imf_rate')

    def data_region(self, binary):
        """
        Finds where the records start and end

        :param binary: IMF file contents
        :type binary: bytes
        :return: start offset, end offset
        :rtype: (int, int)
        """
        length = le16(binary, 0)
        extra_search = le16(binary, 2)
        if length == 0:
            # Headerless (type-0).  A nonzero second word marks the variant that still
            # carries the (empty) length word.
            start = 0 if extra_search == 0 else 2
            return start, len(binary)
        return 2, min(2 + length, len(binary))

    def parse(self, binary):
        """
        Decodes an IMF binary

        :keyword options:
            * **imf_rate** (int = 560) - ticks per second
            * **verbose** (bool = False) - print details to stdout

        :param binary: IMF file contents
        :type binary: bytes
        :return: decoded commands
        :rtype: CommandStream
        """
        rate = self.get_option('imf_rate')
        self.debug("IMF file rate: %s", rate)

        stream = CommandStream(cmd_rate=rate)
        start, end = self.data_region(binary)

        time = 0
        for record in moreit.chunked(binary[start:end], IMF_RECORD_LEN):
            if len(record) < IMF_RECORD_LEN:
                self.warning("IMF data ends in a partial record")
                break
            register, value, delay_lo, delay_hi = record
            if register == 0 and value == 0 and delay_lo == 0 and delay_hi == 0:
                # padding, e.g. the empty record type-0 files start with
                continue
            stream.append(time, register, value)
            time += delay_lo | (delay_hi << 8)

        return stream
