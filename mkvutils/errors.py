"""Error taxonomy shared by the planners, editors and CLI."""


class MkvUtilsError(Exception):
    """Base class for every error mkvutils reports to the user."""


class InvalidInputError(MkvUtilsError, ValueError):
    """Malformed arguments: bad timestamp, negative option, impossible overlap."""


class NoAudioStreamError(InvalidInputError):
    """Raised when the input file has no audio stream."""


class NotFoundError(MkvUtilsError):
    """A referenced file or directory is missing, or a directory has no tracks."""


class UnreadableMediaError(MkvUtilsError):
    """ffprobe could not read the file."""


class FFmpegNotFoundError(MkvUtilsError):
    pass


class EngineFailureError(MkvUtilsError):
    """ffmpeg exited non-zero. ``stderr`` is kept exactly as ffmpeg wrote it."""

    def __init__(self, cmd: list[str], returncode: int, stderr: str = ""):
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"{cmd[0]} failed (rc={returncode})")
