"""
Private Video Unlister
Switches every private video on your YouTube channel to unlisted and
not made for kids. Runs the OAuth consent flow first if no refresh
token is cached.
"""

import sys
import logging

from config import LOGGER_NAME, load_settings, setup_logging
from youtube_client import YouTubeClient
from unlister import PrivateVideoUnlister
from web.oauth_server import OAuthServer

log = logging.getLogger(LOGGER_NAME)


def parse_args(argv=None):
    import argparse

    parser = argparse.ArgumentParser(description="Unlist private YouTube videos")
    parser.add_argument(
        "--token-file",
        help="Path to the cached OAuth tokens (default: $TOKENS_PATH or tokens.json)"
    )
    parser.add_argument(
        "--port",
        type=int,
        help="Port for the local OAuth server (default: $OAUTH_PORT or 3000)"
    )
    parser.add_argument(
        "--log-file",
        help="Also write logs to this file (default: $LOG_FILE or unlister.log)"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report private videos without changing them"
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Entry point."""
    args = parse_args(argv)

    try:
        settings = load_settings()
    except EnvironmentError as e:
        setup_logging()
        log.error(f"FATAL SETUP ERROR: {e}")
        return 1

    setup_logging(args.log_file if args.log_file is not None else settings["log_file"])

    client = YouTubeClient(
        settings["client_id"],
        settings["client_secret"],
        settings["redirect_uri"],
        args.token_file if args.token_file is not None else settings["tokens_path"]
    )
    unlister = PrivateVideoUnlister(client, dry_run=args.dry_run)

    if client.load_cached_credentials():
        return unlister.run_and_report()

    # No refresh token yet: remediation starts from the OAuth callback
    server = OAuthServer(
        client,
        on_authorized=unlister.run_and_report,
        port=args.port if args.port is not None else settings["oauth_port"]
    )
    try:
        return server.serve_until_done()
    except KeyboardInterrupt:
        log.info("Shutting down...")
        return 1


if __name__ == "__main__":
    sys.exit(main())
