"""Root logger configuration for the CDK app and the verify tool."""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level_name: str = "INFO") -> None:
    """
    Configure the root logger to write to stderr.

    CDK reads the synthesized assembly from disk, so stdout stays free for
    ``cdk`` and stderr carries the log.

    Args:
        level_name: Logging level name, e.g. "INFO" or "DEBUG"
    """
    level = getattr(logging, level_name.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
