# Real-time playback of a CommandStream
#
# The host audio system calls fill_buffer() once per fixed-size buffer.  Each output sample
# first dispatches every command whose time has been reached, then renders one sample from
# the device.  Command time and sample time are tied together by
#     command ticks = sample position * cmd_rate / sample_rate
# evaluated afresh for every sample, so rates that don't divide the sample rate don't drift.
#
# Control calls (load_stream, play, stop, seek) may come from another thread than the audio
# callback; one lock keeps them from interleaving with a buffer in progress.

import threading
from dataclasses import dataclass
from enum import Enum
import numpy as np
from oplplayer import constants
from oplplayer.base import OplPlayerBase
from oplplayer.command_stream import CommandStream
from oplplayer.dual_chip import normalize_dual_chip
from oplplayer.errors import *
from oplplayer.seek import shadow_registers, write_registers

INT16_SCALE = 32768.0


class PlayerState(Enum):
    IDLE = 'idle'           #: nothing played yet, audio output suspended
    PLAYING = 'playing'     #: audio output running, commands being dispatched
    STOPPING = 'stopping'   #: audio output running, emitting silence before suspending
    STOPPED = 'stopped'     #: audio output suspended after a stop


@dataclass
class PlaybackState:
    stream: CommandStream = None          #: stream being played
    queued_stream: CommandStream = None   #: stream to swap in at the start of the next buffer
    cursor: int = 0                       #: index of the next command to dispatch
    sample_position: int = 0              #: samples emitted since the start of the stream
    soft_stop_counter: int = 0            #: silent buffers emitted since stopping
    just_sought: bool = False             #: realign sample_position at the next buffer
    state: PlayerState = PlayerState.IDLE


class Player(OplPlayerBase):
    """
    Plays a CommandStream on an OplDevice, one audio buffer at a time.

    The player never starts audio itself: the optional suspend and resume callables are
    called when it wants the host's audio output paused or running again.  While the host
    keeps calling fill_buffer(), the player keeps producing buffers (silence when there is
    nothing to play).
    """

    @classmethod
    def opl_type(cls):
        return "Player"

    def __init__(self, device, suspend=None, resume=None, **kwargs):
        OplPlayerBase.__init__(self)

        self.options_with_defaults = dict(
            sample_rate=constants.DEFAULT_SAMPLE_RATE,   # output samples per second
            buffer_size=constants.DEFAULT_BUFFER_SIZE,   # frames per buffer for render_buffer()
            verbose=False,                               # print load/seek details to stdout
        )
        self.set_options(**self.options_with_defaults)
        self.set_options(**kwargs)

        self.device = device
        self._suspend = suspend
        self._resume = resume
        self.playback = PlaybackState()
        self._lock = threading.RLock()

        self.device.reset(self.get_option('sample_rate'))

    def set_options(self, **kwargs):
        """
        Sets options for the player, with validation

        :keyword options:
            * **sample_rate** (int = 49716) - output sample rate, used at each device reset
            * **buffer_size** (int = 2048) - frames per buffer for render_buffer()
            * **verbose** (bool = False) - print details to stdout
        """
        for op in ('sample_rate', 'buffer_size'):
            val = kwargs.get(op)
            if val is not None and not (isinstance(val, int) and val > 0):
                raise OplPlayerValueError("Error: %s must be a positive integer, got %r" % (op, val))
        OplPlayerBase.set_options(self, **kwargs)

    @property
    def sample_rate(self):
        return self.get_option('sample_rate')

    def load_stream(self, stream):
        """
        Queues a stream.  It replaces the current one at the start of the next buffer;
        a stream queued earlier and not yet started is dropped.

        :param stream: decoded stream
        :type stream: CommandStream
        """
        stream = normalize_dual_chip(stream)
        with self._lock:
            self.playback.queued_stream = stream
        self.debug("Queued %s", stream.summary())

    def play(self):
        """
        Starts playback if there is something to play

        :return: True if playback was started
        :rtype: bool
        """
        with self._lock:
            pb = self.playback
            if pb.state == PlayerState.PLAYING:
                return False
            has_queued = pb.queued_stream is not None and not pb.queued_stream.is_empty()
            has_current = pb.stream is not None and pb.cursor < len(pb.stream)
            if not (has_queued or has_current):
                return False
            pb.soft_stop_counter = 0
            pb.state = PlayerState.PLAYING
            if self._resume is not None:
                self._resume()
            return True

    def stop(self):
        """
        Requests a soft stop: a few silent buffers, then the audio output is suspended
        """
        with self._lock:
            if self.playback.state == PlayerState.PLAYING:
                self.playback.state = PlayerState.STOPPING
                self.playback.soft_stop_counter = 0

    def is_playing(self):
        return self.playback.state == PlayerState.PLAYING

    def playback_time(self):
        """
        :return: current position in seconds
        :rtype: float
        """
        return self.playback.sample_position / self.sample_rate

    def total_time(self):
        """
        :return: length of the current stream in seconds, 0 if there is none
        :rtype: float
        """
        stream = self.playback.stream
        if stream is None:
            return 0
        return stream.total_time

    def seek(self, seconds):
        """
        Moves playback of the current stream to a point in time.  The device is reset and
        every register is set to the value it would have there; no audio is rendered.
        Seeking at or past the last command stops playback.

        :param seconds: target time in seconds
        :type seconds: float
        """
        if seconds < 0:
            raise OplPlayerValueError("Error: can't seek to negative time %r" % seconds)
        with self._lock:
            pb = self.playback
            stream = pb.stream
            if stream is None:
                return

            self.device.reset(self.sample_rate)
            registers, pb.cursor = shadow_registers(stream.commands, seconds * stream.cmd_rate)
            write_registers(self.device, registers)

            if pb.cursor < len(stream):
                pb.sample_position = int(round(seconds * self.sample_rate))
                pb.just_sought = True
            else:
                pb.sample_position = int(round(stream.total_time * self.sample_rate))
                self.stop()
        self.debug("Seek to %.3f: %d registers restored, command %d", seconds, len(registers), pb.cursor)

    def render_buffer(self):
        """
        Produces the next buffer of buffer_size frames

        :return: stereo int16 samples, shape (buffer_size, 2)
        :rtype: numpy.ndarray
        """
        out = np.zeros((self.get_option('buffer_size'), 2), dtype=np.int16)
        return self.fill_buffer(out)

    def fill_buffer(self, out):
        """
        Audio callback: fills out with the next samples.  Integer arrays get int16 sample
        values, floating point arrays get them scaled to [-1.0, 1.0).

        :param out: output array of shape (frames, 2)
        :type out: numpy.ndarray
        :return: out
        :rtype: numpy.ndarray
        """
        with self._lock:
            pb = self.playback
            frames = out.shape[0]

            if pb.state in (PlayerState.IDLE, PlayerState.STOPPED):
                out[:] = 0
                return out

            if pb.queued_stream is not None:
                pb.stream = pb.queued_stream
                pb.queued_stream = None
                pb.cursor = 0
                pb.sample_position = 0
                pb.just_sought = False
                self.device.reset(self.sample_rate)

            if pb.stream is None or pb.state == PlayerState.STOPPING:
                out[:] = 0
                pb.soft_stop_counter += 1
                if pb.soft_stop_counter == constants.SOFT_STOP_BUFFERS:
                    pb.soft_stop_counter = 0
                    pb.state = PlayerState.STOPPED
                    if self._suspend is not None:
                        self._suspend()
                return out

            if pb.just_sought and frames > 0:
                pb.sample_position = frames * (pb.sample_position // frames)
                pb.just_sought = False

            samples = self._render(frames)
            if np.issubdtype(out.dtype, np.floating):
                out[:] = samples / INT16_SCALE
            else:
                out[:] = samples
            return out

    def _render(self, frames):
        pb = self.playback
        commands = pb.stream.commands
        n = len(commands)
        cmd_rate = pb.stream.cmd_rate
        sample_rate = self.sample_rate

        rendered = []
        for _ in range(frames):
            scaled_time = pb.sample_position * cmd_rate / sample_rate
            while pb.cursor < n and commands[pb.cursor].time <= scaled_time:
                c = commands[pb.cursor]
                self.device.write(c.register, c.value)
                pb.cursor += 1
            if pb.cursor == n:
                self.stop()
            else:
                pb.sample_position += 1
            rendered.append(self.device.render())

        samples = np.array(rendered, dtype=np.int32).reshape(frames, 2)
        return np.clip(samples, -32768, 32767)
