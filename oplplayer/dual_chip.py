# Dual OPL2 -> OPL3
#
# A dual OPL2 capture drives two separate OPL2 chips, written here as the two register
# banks.  An OPL3 in NEW (OPL3) mode plays them if each channel's $C0-$C8 register routes
# its output to one side: the first chip to the left, the second to the right.

from oplplayer import constants
from oplplayer.command_stream import CommandStream, Command


def is_unrouted_channel_write(command):
    """
    True for a write to a channel feedback/connection register with all output bits off,
    which is how plain OPL2 data looks to an OPL3
    """
    reg = command.register & 0xFF
    return constants.CHANNEL_REG_FIRST <= reg <= constants.CHANNEL_REG_LAST \
        and (command.value & constants.CHANNEL_OUTPUT_MASK) == 0


def normalize_dual_chip(stream):
    """
    Rewrites a dual OPL2 stream for a single OPL3.  Streams not in dual chip mode are
    returned unchanged.

    :param stream: the decoded stream
    :type stream: CommandStream
    :return: stream with stereo routing and OPL3 mode enabled
    :rtype: CommandStream
    """
    if not stream.dual_chip_mode:
        return stream

    result = CommandStream(cmd_rate=stream.cmd_rate)
    result.commands.append(Command(0, constants.OPL3_MODE_REGISTER, 1))
    for c in stream.commands:
        if is_unrouted_channel_write(c):
            side = constants.LEFT_OUTPUT_BIT if c.register < constants.SECONDARY_PORT \
                else constants.RIGHT_OUTPUT_BIT
            c = c._replace(value=c.value | side)
        result.commands.append(c)
    return result
