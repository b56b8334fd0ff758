"""Playback-specific exceptions for error handling."""


class PlayerError(Exception):
    """Base exception for player operations."""

    pass


class MediaFileNotFoundError(PlayerError, FileNotFoundError):
    """Raised when the media file to play does not exist."""

    def __init__(self, path: str, message: str = None):
        self.path = path
        super().__init__(message or f"File '{path}' not found!")


class NoFileError(PlayerError):
    """Raised when a command is issued before any file was set."""

    def __init__(self, message: str = None):
        super().__init__(
            message
            or 'No file set. Use "set_file()" before using this media-player instance.'
        )


class TransportError(PlayerError):
    """Raised when a command could not be written to the control pipe."""

    pass


class PlayerNotAvailableError(PlayerError):
    """Raised when mplayer is not installed or cannot be executed."""

    pass
