from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from rich.console import Console, ConsoleRenderable
from rich.logging import RichHandler
from rich.text import Text

DEFAULT_LOG_PATH = "/var/log/alpine-ami.log"

STAGE_STYLE = "bold cyan"
ERROR_STYLE = "bold red"


class ConsoleHandler(RichHandler):
    """Console output: stage banners in cyan, fatal diagnostics in red."""

    def __init__(self, console: Optional[Console] = None) -> None:
        super().__init__(
            console=console or Console(stderr=True),
            rich_tracebacks=True,
            show_time=False,
            show_level=False,
            show_path=False,
        )

    def render_message(self, record: logging.LogRecord, message: str) -> ConsoleRenderable:
        if record.levelno >= logging.ERROR:
            return Text.assemble(("ERROR:", ERROR_STYLE), " ", message)
        if getattr(record, "stage", False):
            return Text(f"> {message}", style=STAGE_STYLE)
        if record.levelno == logging.WARNING:
            return Text.assemble(("WARNING:", "yellow"), " ", message)
        return super().render_message(record, message)


def stage(logger: logging.Logger, msg: str, *args: object) -> None:
    """Log a pipeline stage banner."""

    logger.info(msg, *args, extra={"stage": True})


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
) -> str:
    """Configure logging.

    Every command and file edit is recorded to /var/log/alpine-ami.log.

    Notes:
    - On a build host without write access to /var/log we fall back to
      a local file in the working directory, while still *reporting* the
      intended path.

    Returns the actual file path being used.
    """

    logger = logging.getLogger()
    logger.setLevel(level)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_alpine_ami_configured", False):
        return getattr(logger, "_alpine_ami_log_path", log_path)

    chosen_path = log_path
    handlers: list[logging.Handler] = []

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    file_handler: Optional[logging.Handler] = None
    try:
        Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
    except OSError:
        # Fall back to a writable location.
        chosen_path = str(Path.cwd() / "alpine-ami.log")
        file_handler = logging.FileHandler(chosen_path)
    file_handler.setFormatter(fmt)
    handlers.append(file_handler)

    if also_console:
        handlers.append(ConsoleHandler())

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_alpine_ami_configured", True)
    setattr(logger, "_alpine_ami_log_path", chosen_path)

    logging.getLogger(__name__).debug(
        "Logging initialized (requested=%s, actual=%s)", log_path, chosen_path
    )
    return chosen_path
