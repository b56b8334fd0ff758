"""mplayer-control - drive mplayer in slave mode from asyncio."""

from .domain.playback import MPlayer

__version__ = "0.1.0"

__all__ = ["MPlayer"]
