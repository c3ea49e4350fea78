"""
Remediation loop: pages through the account's videos and switches every
private one to unlisted / not made for kids.
"""

import logging

from googleapiclient.errors import HttpError

from config import LOGGER_NAME
from youtube_client import YouTubeClient, describe_http_error

log = logging.getLogger(LOGGER_NAME)


class PrivateVideoUnlister:
    """Finds and fixes every video currently in the private state."""

    def __init__(self, client: YouTubeClient, dry_run: bool = False):
        self.client = client
        self.dry_run = dry_run

    def run(self) -> int:
        """
        Walk all pages and update the private videos one at a time.

        The first failing call aborts the run. Enumeration only stops when
        a page comes back without a next page token.

        Returns the number of videos updated.
        """
        log.info("Starting video update process...")
        if self.dry_run:
            log.info("Dry run: no videos will be modified")

        next_page_token = None
        updated_count = 0

        while True:
            video_ids, next_page_token = self.client.list_my_videos(next_page_token)

            if video_ids:
                for video in self.client.get_video_statuses(video_ids):
                    if video.get("status", {}).get("privacyStatus") != "private":
                        continue

                    if self.dry_run:
                        log.info(f"Would update video ID: {video['id']}")
                    else:
                        log.info(f"Updating video ID: {video['id']}")
                        self.client.unlist_video(video["id"])
                    updated_count += 1

            if not next_page_token:
                break

        return updated_count

    def run_and_report(self) -> int:
        """Run the remediation and return a process exit code."""
        try:
            updated_count = self.run()
        except HttpError as e:
            log.exception(f"Error updating videos: {describe_http_error(e)}")
            return 1
        except Exception as e:
            log.exception(f"Error updating videos: {e}")
            return 1

        verb = "Would update" if self.dry_run else "Updated"
        log.info(f"Done! {verb} {updated_count} private video(s).")
        return 0
