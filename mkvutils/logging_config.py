"""Logging configuration for mkvutils."""

import logging
import sys


class ColoredFormatter(logging.Formatter):
    """Color the level name when writing to a terminal."""

    grey = "\x1b[38;20m"
    yellow = "\x1b[33;20m"
    red = "\x1b[31;20m"
    bold_red = "\x1b[31;1m"
    reset = "\x1b[0m"
    cyan = "\x1b[36;20m"

    COLORS = {
        logging.DEBUG: cyan,
        logging.INFO: grey,
        logging.WARNING: yellow,
        logging.ERROR: red,
        logging.CRITICAL: bold_red,
    }

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def format(self, record):
        if self.use_color:
            color = self.COLORS.get(record.levelno, self.grey)
            fmt = color + "%(levelname)s" + self.reset + " - %(message)s"
        else:
            fmt = "%(levelname)s - %(message)s"
        return logging.Formatter(fmt).format(record)


def setup_logging(level=logging.INFO, stream=None) -> logging.Logger:
    """Attach a console handler to the ``mkvutils`` logger (once)."""
    stream = stream or sys.stderr
    log = logging.getLogger("mkvutils")
    log.setLevel(level)

    if not log.handlers:
        handler = logging.StreamHandler(stream)
        handler.setFormatter(ColoredFormatter(use_color=getattr(stream, "isatty", lambda: False)()))
        log.addHandler(handler)
    for handler in log.handlers:
        handler.setLevel(level)

    return log
