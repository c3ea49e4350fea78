"""
Standalone script to unlist private videos using a pre-obtained refresh
token from $REFRESH_TOKEN. Never starts the OAuth server.
"""

import sys
import argparse
import logging
from pathlib import Path

# Add parent directory to path so we can import
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import LOGGER_NAME, load_settings, setup_logging
from youtube_client import YouTubeClient
from unlister import PrivateVideoUnlister

log = logging.getLogger(LOGGER_NAME)


def main(argv=None):
    """Unlist private videos with the refresh token from the environment."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report private videos without changing them"
    )
    args = parser.parse_args(argv)

    try:
        settings = load_settings(require_refresh_token=True)
    except EnvironmentError as e:
        setup_logging()
        log.error(f"FATAL SETUP ERROR: {e}")
        return 1

    setup_logging(settings["log_file"])

    client = YouTubeClient(
        settings["client_id"],
        settings["client_secret"],
        settings["redirect_uri"],
        settings["tokens_path"]
    )
    client.use_refresh_token(settings["refresh_token"])

    return PrivateVideoUnlister(client, dry_run=args.dry_run).run_and_report()


if __name__ == "__main__":
    sys.exit(main())
