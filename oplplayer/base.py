import collections
from enum import Enum
from oplplayer.errors import *
from oplplayer.byte_util import read_binary_file
from oplplayer.command_stream import CommandStream


class Opcode(Enum):
    """
    The kinds of things a byte in a register-write log can mean.  Every format keeps a table
    from its opcode bytes to these variants, so each quirk of a format lives in one table entry.
    """
    DELAY_SHORT = 'delay-short'      #: small delay, operand in the opcode or in one byte
    DELAY_LONG = 'delay-long'        #: larger delay, multi-byte or scaled operand
    DELAY_FIXED = 'delay-fixed'      #: delay of a constant length
    PORT_SELECT = 'port-select'      #: later writes go to the given register bank
    CLOCK_CHANGE = 'clock-change'    #: delay unit changes
    ESCAPED_WRITE = 'escaped-write'  #: register and value follow the opcode
    LITERAL_WRITE = 'literal-write'  #: the opcode byte is itself the register
    END = 'end'                      #: end of the register data
    IGNORED = 'ignored'              #: recognized but has no effect


# An opcode table entry: the variant plus its parameter (port offset, delay length, etc.)
OpcodeEntry = collections.namedtuple('OpcodeEntry', ['op', 'arg'])


class OplPlayerBase:
    @classmethod
    def opl_type(cls):
        return 'OplPlayerBase'

    def __init__(self):
        self._options = {}

    def get_option(self, arg, default=None):
        """
        Get an option

        :param arg: option name
        :type arg: str
        :param default: default value
        :type default: type of option
        :return: value of option
        :rtype: option type
        """
        if arg in self._options:
            return self._options[arg]
        return default

    def get_options(self):
        """
        Get a dictionary of all current options

        :return: options
        :rtype: dict
        """
        return self._options

    def set_options(self, **kwargs):
        """
        Set options.  All option keywords are converted to lowercase.  Classes that declare
        options_with_defaults only accept the options named there.

        :param kwargs: options
        :type kwargs: keyword options
        """
        allowed = getattr(self, 'options_with_defaults', None)
        for op, val in kwargs.items():
            op = op.lower()
            if allowed is not None and op not in allowed:
                raise OplPlayerValueError('Error: Unexpected option "%s"' % (op))
            self._options[op] = val

    def debug(self, msg, *args):
        if self.get_option('verbose'):
            print(msg % args)


class OplPlayerDecoder(OplPlayerBase):
    """
    Base class for the format decoders.

    Subclasses implement parse(), which raises OplPlayerFormatError for anything it cannot
    handle.  to_stream() wraps parse() so that decoding never raises: a failure is recorded
    in diagnostics and an empty CommandStream comes back instead.
    """
    cmd_rate = 1

    @classmethod
    def opl_type(cls):
        return 'Decoder'

    def __init__(self):
        OplPlayerBase.__init__(self)
        self.options_with_defaults = dict(
            verbose=False,   # print header details and diagnostics to stdout
        )
        self.set_options(**self.options_with_defaults)
        self.diagnostics = []

    def stream_rate(self):
        """
        Command clock rate of the streams this decoder produces

        :return: ticks per second
        :rtype: float
        """
        return self.cmd_rate

    def parse(self, binary):
        """
        Decodes a binary into a CommandStream, raising on malformed input

        :param binary: the file contents
        :type binary: bytes
        :return: decoded commands
        :rtype: CommandStream
        """
        raise OplPlayerNotImplemented("Not implemented")

    def to_stream(self, binary, **kwargs):
        """
        Decodes a binary into a CommandStream.  Never raises for malformed input; check
        diagnostics to find out why a stream came back empty.

        :param binary: the file contents
        :type binary: bytes
        :param kwargs: Keyword options for the particular decoder
        :return: decoded commands, or an empty stream
        :rtype: CommandStream
        """
        self.set_options(**kwargs)
        self.diagnostics = []
        try:
            return self.parse(bytes(binary))
        except OplPlayerFormatError as e:
            self.error(str(e))
            return CommandStream(cmd_rate=self.stream_rate())

    def decode_file(self, filename, **kwargs):
        """
        Reads a file and decodes it

        :param filename: file to read
        :type filename: str
        :return: decoded commands, or an empty stream
        :rtype: CommandStream
        """
        binary = read_binary_file(filename)
        if binary is None:
            self.diagnostics = []
            self.error('Can\'t open "%s"' % filename)
            return CommandStream(cmd_rate=self.stream_rate())
        return self.to_stream(binary, **kwargs)

    def warning(self, msg):
        self.diagnostics.append('Warning: %s' % msg)
        if self.get_option('verbose'):
            print('Warning: %s' % msg)

    def error(self, msg):
        self.diagnostics.append('Error: %s' % msg)
        if self.get_option('verbose'):
            print('Error: %s' % msg)


def operand(binary, i, count, what):
    """
    Returns the count bytes that follow the opcode at offset i

    :raises TruncatedData: if the buffer ends first
    """
    if i + count >= len(binary):
        raise TruncatedData('%s at offset 0x%X' % (what, i))
    return binary[i + 1:i + 1 + count]


class TruncatedData(Exception):
    """
    Raised inside the decode loops when an opcode's operands run past the end of the buffer.
    The decoders keep what they have decoded so far.
    """
    pass
