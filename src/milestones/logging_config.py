import logging
import sys

from . import config

logger = logging.getLogger("milestones")


def setup_logging(level: str = config.LOG_LEVEL) -> None:
    """
    Configures the root logger for the process.
    Called once at startup, before the server begins accepting requests.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - [%(levelname)s] - %(message)s",
        stream=sys.stdout,
    )
    # The app logs its own request line.
    logging.getLogger("werkzeug").setLevel(logging.WARNING)
