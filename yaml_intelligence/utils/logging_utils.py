import logging
import sys
from typing import Optional

DEFAULT_FORMAT = "%(name)s - %(levelname)s - %(message)s"


class _MaxLevelFilter(logging.Filter):
    def __init__(self, max_level: int) -> None:
        super().__init__()
        self._max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno <= self._max_level


def configure_split_stream_logging(
    *,
    level: int = logging.INFO,
    stderr_level: int = logging.WARNING,
    formatter: Optional[logging.Formatter] = None,
    stdout_enabled: bool = True,
) -> None:
    """Configure root logging:

    - DEBUG/INFO go to stdout
    - WARNING/ERROR/CRITICAL go to stderr

    A language server speaks JSON-RPC over stdout, so it must pass
    ``stdout_enabled=False``; everything then goes to stderr.
    """

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)

    if formatter is None:
        formatter = logging.Formatter(DEFAULT_FORMAT)

    if stderr_level < logging.DEBUG:
        stderr_level = logging.DEBUG

    if not stdout_enabled:
        stderr_level = logging.DEBUG
    else:
        stdout_handler = logging.StreamHandler(stream=sys.stdout)
        stdout_handler.setLevel(logging.DEBUG)
        stdout_handler.addFilter(_MaxLevelFilter(stderr_level - 1))
        stdout_handler.setFormatter(formatter)
        root.addHandler(stdout_handler)

    stderr_handler = logging.StreamHandler(stream=sys.stderr)
    stderr_handler.setLevel(stderr_level)
    stderr_handler.setFormatter(formatter)
    root.addHandler(stderr_handler)


def level_from_name(name: str, default: int = logging.INFO) -> int:
    """Translate a level name such as ``"debug"`` into a logging level."""
    value = getattr(logging, str(name).upper(), None)
    return value if isinstance(value, int) else default
