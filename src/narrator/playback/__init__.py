"""Playback scheduling for narrator."""

from .scheduler import LOOKAHEAD, PlaybackScheduler, PlaybackState

__all__ = ["LOOKAHEAD", "PlaybackScheduler", "PlaybackState"]
