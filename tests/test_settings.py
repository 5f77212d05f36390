"""設定のテスト."""

import pytest

from config.settings import Settings

TWITTER_KEYS = [
    "TWITTER_CONSUMER_KEY",
    "TWITTER_CONSUMER_SECRET",
    "TWITTER_ACCESS_TOKEN_KEY",
    "TWITTER_ACCESS_TOKEN_SECRET",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in TWITTER_KEYS + ["TWITTER_RATE_LIMIT_WAIT_SECONDS", "TWITTER_MAX_RECORDS"]:
        monkeypatch.delenv(key, raising=False)


def test_defaults():
    s = Settings(_env_file=None)
    assert s.TWITTER_RATE_LIMIT_WAIT_SECONDS == 900
    assert s.TWITTER_MAX_RECORDS == 10000
    assert s.TWITTER_DEFAULT_PAGE_RECORDS == 200
    assert s.TWITTER_API_HOST == "api.twitter.com"
    assert not s.is_twitter_configured


def test_is_twitter_configured():
    s = Settings(_env_file=None, **{key: "value" for key in TWITTER_KEYS})
    assert s.is_twitter_configured


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("TWITTER_RATE_LIMIT_WAIT_SECONDS", "60")
    assert Settings(_env_file=None).TWITTER_RATE_LIMIT_WAIT_SECONDS == 60
