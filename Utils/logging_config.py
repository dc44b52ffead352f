import logging
import os

LOG_DIR = os.getenv("ROSTER_LOG_DIR", "logs")
LOG_FILE = os.path.join(LOG_DIR, "roster_scraper.log")
LOG_LEVEL = os.getenv("ROSTER_LOG_LEVEL", "INFO").upper()

ROOT_LOGGER = "roster_scraper"


def _configure_root() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER)

    # Prevent duplicate handlers
    if root.handlers:
        return root

    os.makedirs(LOG_DIR, exist_ok=True)
    root.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    root.propagate = False

    # threadName tells the concurrent roster fetches apart
    formatter = logging.Formatter(
        "[%(asctime)s] %(levelname)s | %(name)s | %(threadName)s | %(message)s"
    )

    file_handler = logging.FileHandler(LOG_FILE, encoding="utf-8")
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)

    root.addHandler(file_handler)
    root.addHandler(console_handler)

    return root


def get_logger(name: str) -> logging.Logger:
    """Logger `roster_scraper.<name>`; handlers live on the shared parent."""
    _configure_root()
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
