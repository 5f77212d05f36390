"""Twitter連携モジュール.

ページング・レート制限を自動処理してTwitter APIからコレクションを取得する。
"""

from dstools.twitter.client import TwitterClient
from dstools.twitter.errors import (
    ConfigurationError,
    RemoteCallError,
    TwitterError,
    TwitterFetchError,
)
from dstools.twitter.pager import FetchRequest, Page, PageKind, Pager, classify_page, fetch
from dstools.twitter.progress import LoggingProgressReporter, ProgressReporter
from dstools.twitter.rate_limit import RATE_LIMIT_CODE, is_rate_limited
from dstools.twitter.targets import is_twitter_id, resolve_targets
from dstools.twitter.transport import Transport, TweepyTransport, TwitterCredentials

__all__ = [
    "ConfigurationError",
    "FetchRequest",
    "LoggingProgressReporter",
    "Page",
    "PageKind",
    "Pager",
    "ProgressReporter",
    "RATE_LIMIT_CODE",
    "RemoteCallError",
    "Transport",
    "TweepyTransport",
    "TwitterClient",
    "TwitterCredentials",
    "TwitterError",
    "TwitterFetchError",
    "classify_page",
    "fetch",
    "is_rate_limited",
    "is_twitter_id",
    "resolve_targets",
]
