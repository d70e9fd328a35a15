"""
Audio player play-behavior enumeration.

Values are the wire strings understood by the device audio player.
"""

from __future__ import annotations

from enum import Enum


class PlayBehavior(str, Enum):
    """
    How a PlayAudio directive interacts with the player queue.

    REPLACE_ALL:
        Stop whatever is playing and start this stream now.

    ENQUEUE:
        Append after the current stream (gapless continuation).
    """

    REPLACE_ALL = "REPLACE_ALL"
    ENQUEUE = "ENQUEUE"
