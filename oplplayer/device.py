from oplplayer.errors import OplPlayerNotImplemented


class OplDevice:
    """
    The synthesis chip the player drives.

    Implementations wrap an OPL3 emulator (or anything else with the same registers).  None
    of the methods may raise or block; they're called from the audio callback.
    """
    def reset(self, sample_rate):
        """
        Resets the chip and sets the rate render() produces samples at

        :param sample_rate: output sample rate in Hz
        :type sample_rate: int
        """
        raise OplPlayerNotImplemented("Not implemented")

    def write(self, register, value):
        """
        Writes a register.  Registers 0x100-0x1FF are the second port.

        :param register: register number, 0 to 0x1FF
        :type register: int
        :param value: byte value
        :type value: int
        """
        raise OplPlayerNotImplemented("Not implemented")

    def render(self):
        """
        Produces the next stereo sample

        :return: left sample, right sample
        :rtype: (int, int)
        """
        raise OplPlayerNotImplemented("Not implemented")
