import logging
import sys

def setup_logging():
    """
    Configure logging for the directory API.

    Logs go to stdout with the level and logger name so that container
    platforms can collect them as-is.
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    # Reduce SQLAlchemy and HTTP client noise in logs
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    return logging.getLogger("directory")


# Create global logger instance
logger = setup_logging()
