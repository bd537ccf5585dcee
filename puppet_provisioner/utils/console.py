"""Colorful console logging formatter."""

import logging
import re
import sys
from datetime import datetime

from puppet_provisioner.config.settings import Settings

# ANSI color codes
COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "white": "\033[37m",
    "cyan": "\033[36m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "bright_black": "\033[90m",
    "bright_red": "\033[91m",
    "bright_green": "\033[92m",
    "bright_yellow": "\033[93m",
    "bright_blue": "\033[94m",
    "bright_magenta": "\033[95m",
    "bright_cyan": "\033[96m",
    "bg_red": "\033[41m",
}

LEVEL_COLORS = {
    "DEBUG": COLORS["bright_black"],
    "INFO": COLORS["bright_green"],
    "WARNING": COLORS["bright_yellow"],
    "ERROR": COLORS["bright_red"],
    "CRITICAL": COLORS["bg_red"] + COLORS["white"] + COLORS["bold"],
}

# Component colors for logger names
COMPONENT_COLORS = {
    "puppet_provisioner.services.runner": COLORS["bright_cyan"],
    "puppet_provisioner.services.uploader": COLORS["bright_magenta"],
    "puppet_provisioner.services.provisioner": COLORS["bright_blue"],
    "puppet_provisioner.services.channel": COLORS["cyan"],
    "puppet_provisioner.config": COLORS["green"],
    "default": COLORS["white"],
}

_PACKAGE_PREFIX = "puppet_provisioner."
_REMOTE_PATH_PATTERN = re.compile(r"(/tmp/provision/\S+)")
_EXIT_STATUS_PATTERN = re.compile(r"(status -?\d+)")


class ColorfulFormatter(logging.Formatter):
    """Colorful log formatter with component highlighting."""

    def __init__(self, use_colors: bool = True) -> None:
        """Initialize the formatter.

        Args:
            use_colors: Whether to use ANSI colors.
        """
        super().__init__()
        self.use_colors = use_colors

    def _colorize(self, text: str, color: str) -> str:
        if not self.use_colors:
            return text
        return f"{color}{text}{COLORS['reset']}"

    def _get_component_color(self, name: str) -> str:
        for prefix, color in COMPONENT_COLORS.items():
            if prefix != "default" and name.startswith(prefix):
                return color
        return COMPONENT_COLORS["default"]

    def _format_timestamp(self, record: logging.LogRecord) -> str:
        dt = datetime.fromtimestamp(record.created)
        return f"{dt.strftime('%H:%M:%S')}.{int(record.msecs):03d}"

    def _format_level(self, record: logging.LogRecord) -> str:
        level = record.levelname
        color = LEVEL_COLORS.get(level, COLORS["white"])
        return self._colorize(f"{level:<8}", color)

    def _format_component(self, record: logging.LogRecord) -> str:
        name = record.name
        if name.startswith(_PACKAGE_PREFIX):
            name = name[len(_PACKAGE_PREFIX):]
        color = self._get_component_color(record.name)
        return self._colorize(f"{name:<20}", color)

    def _highlight_message(self, message: str) -> str:
        """Highlight remote paths and exit statuses."""
        if not self.use_colors:
            return message
        message = _REMOTE_PATH_PATTERN.sub(
            f"{COLORS['bright_blue']}\\1{COLORS['reset']}", message
        )
        message = _EXIT_STATUS_PATTERN.sub(
            f"{COLORS['bright_yellow']}\\1{COLORS['reset']}", message
        )
        return message

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with colors."""
        timestamp = self._colorize(self._format_timestamp(record), COLORS["dim"])
        level = self._format_level(record)
        component = self._format_component(record)
        sep = self._colorize("|", COLORS["dim"])
        message = self._highlight_message(record.getMessage())

        line = f"{timestamp} {sep} {level} {sep} {component} {sep} {message}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def configure_logging(settings: Settings | None = None) -> logging.Logger:
    """Configure logging for the puppet_provisioner package.

    Safe to call more than once; the handler is only added the first time.

    Args:
        settings: Settings to read level/colors from (defaults to environment)

    Returns:
        The package logger
    """
    settings = settings or Settings.from_env()
    use_colors = settings.log_colors and sys.stderr.isatty()

    package_logger = logging.getLogger("puppet_provisioner")
    package_logger.setLevel(
        getattr(logging, settings.log_level.upper(), logging.INFO)
    )

    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(ColorfulFormatter(use_colors=use_colors))
        package_logger.addHandler(handler)
        package_logger.propagate = False

    logging.getLogger("asyncssh").setLevel(logging.WARNING)

    return package_logger
