# Seeking by replay
#
# Register state at any point is the last value written to each register before that
# point, so a seek scans the commands from the start instead of rendering audio.

from oplplayer import constants


def shadow_registers(commands, target_ticks):
    """
    Replays writes earlier than target_ticks into a register map (last write wins)

    :param commands: commands in time order
    :type commands: list of Command
    :param target_ticks: seek target in command clock ticks
    :type target_ticks: float
    :return: register values keyed by register number, index of the first command not replayed
    :rtype: (dict, int)
    """
    registers = {}
    cursor = 0
    while cursor < len(commands) and commands[cursor].time < target_ticks:
        c = commands[cursor]
        registers[c.register] = c.value
        cursor += 1
    return registers, cursor


def write_registers(device, registers):
    """
    Writes a register map to a device.  The OPL3 mode register goes first, since it
    decides how the chip reads the second port.

    :param device: the device to load
    :type device: OplDevice
    :param registers: register values keyed by register number
    :type registers: dict
    """
    if constants.OPL3_MODE_REGISTER in registers:
        device.write(constants.OPL3_MODE_REGISTER, registers[constants.OPL3_MODE_REGISTER])
    for register in sorted(registers):
        if register != constants.OPL3_MODE_REGISTER:
            device.write(register, registers[register])
