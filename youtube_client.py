"""
YouTube client using YouTube Data API v3.
Handles OAuth credentials (cached token file, refresh token, or the
authorization-code exchange) and the video listing/status calls.
"""

import os
import json
import logging
from typing import Optional

from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from config import LOGGER_NAME

log = logging.getLogger(LOGGER_NAME)


# Full video management, needed for videos.update
SCOPES = ["https://www.googleapis.com/auth/youtube.force-ssl"]

AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
TOKEN_URI = "https://oauth2.googleapis.com/token"

PAGE_SIZE = 50

UNLISTED_STATUS = {
    "privacyStatus": "unlisted",
    "madeForKids": False,
    "selfDeclaredMadeForKids": False,
}


def describe_http_error(error: HttpError) -> str:
    """Summarize an API error as 'status reason: message'."""
    try:
        error_content = json.loads(error.content.decode())
        details = error_content.get("error", {})
        errors = details.get("errors") or [{}]
        reason = errors[0].get("reason", "unknown")
        message = details.get("message", "")
    except (ValueError, AttributeError, IndexError, TypeError):
        reason = "unknown"
        message = str(error)
    return f"{error.resp.status} {reason}: {message}"


class YouTubeClient:
    """Holds the OAuth credentials for one account and wraps the API calls."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        token_file: str = "tokens.json"
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.token_file = token_file
        self.credentials: Optional[Credentials] = None
        self._flow: Optional[Flow] = None
        self._youtube = None

    # --- Token file ---

    def load_stored_tokens(self) -> Optional[dict]:
        """Read the token file. Returns None if it is missing or unreadable."""
        if not os.path.exists(self.token_file):
            return None

        try:
            with open(self.token_file, "r", encoding="utf-8") as f:
                tokens = json.load(f)
        except (OSError, ValueError) as e:
            log.warning(f"Could not read tokens from {self.token_file}: {e}")
            return None

        if not isinstance(tokens, dict):
            log.warning(f"Ignoring {self.token_file}: expected a JSON object")
            return None
        return tokens

    def store_tokens(self, credentials: Credentials):
        """Overwrite the token file with the given credentials."""
        with open(self.token_file, "w", encoding="utf-8") as f:
            f.write(credentials.to_json())
        log.info(f"Refresh token saved to {self.token_file}")

    # --- Credential bootstrap ---

    def load_cached_credentials(self) -> bool:
        """
        Use the cached token file if it holds a refresh token.
        No network call is made here; the access token is refreshed
        on first use.

        Returns True if credentials were installed, False otherwise.
        """
        tokens = self.load_stored_tokens()
        if not tokens or not tokens.get("refresh_token"):
            return False

        info = dict(tokens)
        info.setdefault("client_id", self.client_id)
        info.setdefault("client_secret", self.client_secret)
        if "token" not in info and "access_token" in info:
            info["token"] = info["access_token"]

        try:
            credentials = Credentials.from_authorized_user_info(info, SCOPES)
        except ValueError as e:
            log.warning(f"Cached credentials in {self.token_file} are unusable: {e}")
            return False

        log.info(f"Using existing refresh token from {self.token_file}")
        self._set_credentials(credentials)
        return True

    def use_refresh_token(self, refresh_token: str):
        """Install credentials built from a pre-obtained refresh token."""
        credentials = Credentials(
            token=None,
            refresh_token=refresh_token,
            token_uri=TOKEN_URI,
            client_id=self.client_id,
            client_secret=self.client_secret,
            scopes=SCOPES,
        )
        self._set_credentials(credentials)

    def _get_flow(self) -> Flow:
        # The same flow must serve both steps so the PKCE verifier is kept
        if self._flow is None:
            client_config = {
                "web": {
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "auth_uri": AUTH_URI,
                    "token_uri": TOKEN_URI,
                    "redirect_uris": [self.redirect_uri],
                }
            }
            self._flow = Flow.from_client_config(
                client_config, scopes=SCOPES, redirect_uri=self.redirect_uri
            )
        return self._flow

    def authorization_url(self) -> str:
        """Consent URL requesting offline access with forced re-consent."""
        url, _state = self._get_flow().authorization_url(
            access_type="offline",
            prompt="consent",
        )
        return url

    def exchange_code(self, code: str) -> Credentials:
        """
        Exchange an authorization code for tokens, persist them and
        install them on this client. Errors from the token endpoint
        propagate to the caller.
        """
        flow = self._get_flow()
        flow.fetch_token(code=code)
        credentials = flow.credentials
        log.info("Tokens acquired from authorization code")

        self.store_tokens(credentials)
        self._set_credentials(credentials)
        return credentials

    def _set_credentials(self, credentials: Credentials):
        self.credentials = credentials
        self._youtube = None

    @property
    def youtube(self):
        """The YouTube API service, built on first use."""
        if self._youtube is None:
            if self.credentials is None:
                raise RuntimeError("YouTube client has no credentials")
            self._youtube = build("youtube", "v3", credentials=self.credentials)
        return self._youtube

    # --- API calls ---

    def list_my_videos(self, page_token: Optional[str] = None) -> tuple[list[str], Optional[str]]:
        """
        Fetch one page of the account's own videos.

        Returns (video_ids, next_page_token); the token is None on the last page.
        """
        response = self.youtube.search().list(
            part="id",
            forMine=True,
            type="video",
            maxResults=PAGE_SIZE,
            pageToken=page_token
        ).execute()

        items = response.get("items", [])
        log.info(f"Found {len(items)} video(s) in this batch.")

        video_ids = []
        for item in items:
            video_id = item.get("id", {}).get("videoId")
            if video_id:
                video_ids.append(video_id)

        return video_ids, response.get("nextPageToken")

    def get_video_statuses(self, video_ids: list[str]) -> list[dict]:
        """Look up id and status for a batch of videos in a single call."""
        response = self.youtube.videos().list(
            part="id,status",
            id=",".join(video_ids)
        ).execute()
        return response.get("items", [])

    def unlist_video(self, video_id: str) -> dict:
        """Set a video to unlisted and not made for kids."""
        body = {
            "id": video_id,
            "status": dict(UNLISTED_STATUS),
        }
        return self.youtube.videos().update(
            part="status",
            body=body
        ).execute()
