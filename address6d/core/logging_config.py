import logging
import sys


def setup_logging(level: str = "INFO"):
    """
    Configure logging for the application.

    Logs go to stdout so they are picked up by the container runtime.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    # Reduce SQLAlchemy noise in logs
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    return logging.getLogger("address6d")


logger = logging.getLogger("address6d")
