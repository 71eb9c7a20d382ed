import logging
import sys

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

_handler = None


def configure_logging(debug: bool = False, default_level: int = logging.INFO) -> None:
    """Configure the root logger for an entry point (CLI, API or worker)."""
    global _handler
    level = logging.DEBUG if debug else default_level
    root = logging.getLogger()

    # Re-running the CLI in one process must not stack handlers.
    if _handler is not None:
        root.removeHandler(_handler)
    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(_handler)
    root.setLevel(level)

    # httpx logs every request at INFO; keep it for --debug only.
    logging.getLogger("httpx").setLevel(logging.DEBUG if debug else logging.WARNING)
