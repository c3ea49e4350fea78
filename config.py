"""
Configuration and logging setup for the private video unlister.
Settings come from the environment, optionally seeded from a .env file.
"""

import os
import logging
from typing import Optional

from dotenv import load_dotenv


LOGGER_NAME = "Unlister"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"

DEFAULT_TOKENS_PATH = "tokens.json"
DEFAULT_OAUTH_PORT = 3000
DEFAULT_LOG_FILE = "unlister.log"

REQUIRED_VARS = ["CLIENT_ID", "CLIENT_SECRET", "REDIRECT_URI"]


def load_settings(require_refresh_token: bool = False) -> dict:
    """
    Validate and collect settings from the environment.

    Raises EnvironmentError naming the first missing variable.
    """
    load_dotenv()

    required_vars = list(REQUIRED_VARS)
    if require_refresh_token:
        required_vars.append("REFRESH_TOKEN")

    for var in required_vars:
        if not os.environ.get(var):
            raise EnvironmentError(f"Missing required environment variable: {var}")

    raw_port = os.environ.get("OAUTH_PORT", str(DEFAULT_OAUTH_PORT))
    try:
        port = int(raw_port)
    except ValueError:
        raise EnvironmentError(f"OAUTH_PORT must be an integer, got {raw_port!r}")

    return {
        "client_id": os.environ["CLIENT_ID"],
        "client_secret": os.environ["CLIENT_SECRET"],
        "redirect_uri": os.environ["REDIRECT_URI"],
        "refresh_token": os.environ.get("REFRESH_TOKEN"),
        "tokens_path": os.environ.get("TOKENS_PATH", DEFAULT_TOKENS_PATH),
        "oauth_port": port,
        "log_file": os.environ.get("LOG_FILE", DEFAULT_LOG_FILE),
    }


def setup_logging(log_file: Optional[str] = None, level: int = logging.INFO) -> logging.Logger:
    """
    Attach console (and optional file) handlers to the application logger.

    Repeated calls add no duplicate console handler, and only add a file
    handler for a log file that is not already attached.
    """
    log = logging.getLogger(LOGGER_NAME)
    log.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT)

    # FileHandler subclasses StreamHandler, so exclude it when looking for the console
    has_console = any(
        type(handler) is logging.StreamHandler for handler in log.handlers
    )
    if not has_console:
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        log.addHandler(console)

    if log_file:
        path = os.path.abspath(log_file)
        attached = any(
            isinstance(handler, logging.FileHandler) and handler.baseFilename == path
            for handler in log.handlers
        )
        if not attached:
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
            file_handler.setFormatter(formatter)
            log.addHandler(file_handler)

    return log
