import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger with a single stdout handler.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ...). Unknown names fall back to INFO.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt="[%(levelname)s] %(name)s: %(message)s"))
    root_logger.addHandler(handler)

    # charset-normalizer logs every probe at INFO
    logging.getLogger("charset_normalizer").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)
