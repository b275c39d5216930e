# Constants for oplplayer
#

# Version information.  Update BUILD_VERSION with every significant bugfix;
# update MINOR_VERSION with every feature addition
MAJOR_VERSION = 0
MINOR_VERSION = 1
BUILD_VERSION = 0

OPLPLAYER_VERSION = f"{MAJOR_VERSION}.{MINOR_VERSION}.{BUILD_VERSION}"
OPLPLAYER_RELEASE = f"{MAJOR_VERSION}.{MINOR_VERSION}"

# Register space: two banks of 256 registers
PRIMARY_PORT = 0x000
SECONDARY_PORT = 0x100
MAX_REGISTER = 0x1FF
MAX_VALUE = 0xFF

# OPL3 "NEW" bit lives in the secondary port's mode register
OPL3_MODE_REGISTER = 0x105

# Channel feedback/connection registers $C0-$C8 carry the stereo output bits on OPL3
CHANNEL_REG_FIRST = 0xC0
CHANNEL_REG_LAST = 0xC8
CHANNEL_OUTPUT_MASK = 0xF0
LEFT_OUTPUT_BIT = 0x10
RIGHT_OUTPUT_BIT = 0x20

# Chip clocks
OPL2_STANDARD_CLOCK = 3579545
OPL3_STANDARD_CLOCK = 14318180

# Command clock rates (ticks per second)
IMF_DEFAULT_RATE = 560      # Commander Keen, Cosmo, Duke Nukem II. Wolfenstein 3-D uses 700
RAW_RATE = OPL3_STANDARD_CLOCK / 12   # Rdos RAW clocks are PIT (8253) ticks
DRO_RATE = 1000             # DOSBox captures count milliseconds
VGM_RATE = 44100            # VGM counts 44.1kHz samples

# Playback engine defaults
DEFAULT_SAMPLE_RATE = 49716   # OPL3 native rate (14318180 / 288)
DEFAULT_BUFFER_SIZE = 2048
SOFT_STOP_BUFFERS = 4         # silent buffers emitted before the audio output is suspended
