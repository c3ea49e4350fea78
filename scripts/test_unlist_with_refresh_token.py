"""
Tests for the non-interactive entry point.
"""

from unittest.mock import patch

import pytest

import unlist_with_refresh_token

SETTINGS = {
    "client_id": "id",
    "client_secret": "secret",
    "redirect_uri": "http://localhost:3000/oauth2callback",
    "refresh_token": "refresh-from-env",
    "tokens_path": "tokens.json",
    "oauth_port": 3000,
    "log_file": None,
}


@pytest.fixture
def mocks():
    with patch("unlist_with_refresh_token.load_settings", return_value=dict(SETTINGS)) as load_settings, \
            patch("unlist_with_refresh_token.setup_logging"), \
            patch("unlist_with_refresh_token.YouTubeClient") as client_cls, \
            patch("unlist_with_refresh_token.PrivateVideoUnlister") as unlister_cls:
        yield load_settings, client_cls, unlister_cls


def test_uses_refresh_token_from_environment(mocks):
    load_settings, client_cls, unlister_cls = mocks
    unlister_cls.return_value.run_and_report.return_value = 0

    assert unlist_with_refresh_token.main([]) == 0

    load_settings.assert_called_once_with(require_refresh_token=True)
    client_cls.return_value.use_refresh_token.assert_called_once_with("refresh-from-env")
    client_cls.return_value.load_cached_credentials.assert_not_called()
    unlister_cls.assert_called_once_with(client_cls.return_value, dry_run=False)


def test_dry_run_is_passed_through(mocks):
    _, client_cls, unlister_cls = mocks
    unlister_cls.return_value.run_and_report.return_value = 0

    assert unlist_with_refresh_token.main(["--dry-run"]) == 0

    unlister_cls.assert_called_once_with(client_cls.return_value, dry_run=True)


def test_remediation_failure_exit_code(mocks):
    _, _, unlister_cls = mocks
    unlister_cls.return_value.run_and_report.return_value = 1

    assert unlist_with_refresh_token.main([]) == 1


def test_missing_refresh_token_exits_nonzero():
    error = EnvironmentError("Missing required environment variable: REFRESH_TOKEN")
    with patch("unlist_with_refresh_token.load_settings", side_effect=error), \
            patch("unlist_with_refresh_token.setup_logging"), \
            patch("unlist_with_refresh_token.YouTubeClient") as client_cls:
        assert unlist_with_refresh_token.main([]) == 1

    client_cls.assert_not_called()


def test_never_starts_oauth_server():
    assert not hasattr(unlist_with_refresh_token, "OAuthServer")
