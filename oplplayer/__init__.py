
from .command_stream import Command, CommandStream
from .imf import IMF
from .raw import RAW
from .dro import DRO
from .vgm import VGM
from .formats import decode, decoder_for
from .dual_chip import normalize_dual_chip
from .device import OplDevice
from .player import Player, PlayerState
