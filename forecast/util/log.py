import os
import sys


COLORS = {
    "cyan": "\033[36m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "red": "\033[31m",
    "magenta": "\033[35m",
    "reset": "\033[0m",
}


def _supports_color(stream) -> bool:
    """
    Skip ANSI codes when the stream is not a TTY or NO_COLOR is set.
    """
    if os.environ.get("NO_COLOR"):
        return False
    return hasattr(stream, "isatty") and stream.isatty()


def colorize(message: str, color: str, stream=None) -> str:
    if not _supports_color(stream or sys.stdout):
        return message
    code = COLORS.get(color, "")
    reset = COLORS["reset"] if code else ""
    return f"{code}{message}{reset}"


def log(message: str, color: str = "reset", stream=None):
    stream = stream or sys.stdout
    print(colorize(message, color, stream), file=stream)


def log_info(message: str):
    log(message, "cyan")


def log_success(message: str):
    log(message, "green")


def log_warn(message: str):
    log(message, "yellow", sys.stderr)


def log_error(message: str):
    log(message, "red", sys.stderr)


def log_debug(message: str):
    if os.environ.get("FORECAST_DEBUG"):
        log(message, "magenta")
