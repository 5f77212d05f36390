"""Twitter API 呼び出しのトランスポート層.

ページングエンジンはHTTPリクエストを組み立てず、``Transport.call`` のみを使う。
標準実装はtweepyのv1.1 APIクライアントをスレッドで実行する。
"""

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any, Protocol

import tweepy
from tweepy.parsers import JSONParser

from config.settings import settings
from dstools.twitter.errors import ConfigurationError, RemoteCallError

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """リモート呼び出しのインターフェース."""

    async def call(
        self, method: str, endpoint: str, parameters: Mapping[str, Any]
    ) -> Any:
        """APIを1回呼び出し、デコード済みJSONを返す.

        Raises:
            RemoteCallError: APIがリクエストを拒否した場合
        """
        ...


@dataclass(frozen=True)
class TwitterCredentials:
    """OAuth 1.0a ユーザーコンテキストの認証情報.

    Attributes:
        consumer_key: Consumer Key
        consumer_secret: Consumer Secret
        access_token_key: Access Token
        access_token_secret: Access Token Secret
    """

    consumer_key: str = ""
    consumer_secret: str = ""
    access_token_key: str = ""
    access_token_secret: str = ""

    @classmethod
    def from_settings(cls) -> "TwitterCredentials":
        """環境変数（settings）から認証情報を読み込む."""
        return cls(
            consumer_key=settings.TWITTER_CONSUMER_KEY,
            consumer_secret=settings.TWITTER_CONSUMER_SECRET,
            access_token_key=settings.TWITTER_ACCESS_TOKEN_KEY,
            access_token_secret=settings.TWITTER_ACCESS_TOKEN_SECRET,
        )

    @property
    def missing(self) -> list[str]:
        """未設定の項目名."""
        return [f.name for f in fields(self) if not getattr(self, f.name)]

    def require(self) -> "TwitterCredentials":
        """4つのキーがすべて設定されていることを確認.

        Raises:
            ConfigurationError: 未設定の項目がある場合
        """
        if self.missing:
            raise ConfigurationError(
                "twitter functions require consumer_key, consumer_secret, "
                "access_token_key and access_token_secret "
                f"(missing: {', '.join(self.missing)})"
            )
        return self


class _PlainJSONParser(JSONParser):
    """カーソルをタプルで返さず、常にレスポンスJSONのみを返すパーサー."""

    def parse(self, payload, *, return_cursors=False, **kwargs):
        return super().parse(payload)


def encode_parameters(parameters: Mapping[str, Any]) -> dict[str, str]:
    """リクエストパラメータを文字列に変換（Noneは除外）."""
    encoded = {}
    for key, value in parameters.items():
        if value is None:
            continue
        if isinstance(value, bool):
            encoded[key] = "true" if value else "false"
        else:
            encoded[key] = str(value)
    return encoded


def _error_record(error: Any) -> dict[str, Any]:
    if isinstance(error, Mapping):
        return {"code": error.get("code"), "message": error.get("message")}
    return {"code": None, "message": str(error)}


class TweepyTransport:
    """tweepy を使った Twitter API v1.1 トランスポート.

    tweepy.API は同期処理のため ``asyncio.to_thread`` で実行する。
    呼び出しごとにAPIインスタンスを生成し、並行フェッチ間でセッションを共有しない。
    """

    def __init__(
        self,
        credentials: TwitterCredentials | None = None,
        host: str | None = None,
        timeout: int | None = None,
    ) -> None:
        """初期化.

        Args:
            credentials: 認証情報（未指定時は環境変数から取得）
            host: APIホスト
            timeout: HTTPタイムアウト秒

        Raises:
            ConfigurationError: 認証情報が不足している場合
        """
        self._credentials = (credentials or TwitterCredentials.from_settings()).require()
        self.host = host or settings.TWITTER_API_HOST
        self.timeout = timeout or settings.TWITTER_TIMEOUT
        logger.info(f"Twitter transport initialized for {self.host}")

    def _api(self) -> tweepy.API:
        auth = tweepy.OAuth1UserHandler(
            self._credentials.consumer_key,
            self._credentials.consumer_secret,
            self._credentials.access_token_key,
            self._credentials.access_token_secret,
        )
        return tweepy.API(
            auth,
            host=self.host,
            parser=_PlainJSONParser(),
            timeout=self.timeout,
        )

    def _request(self, method: str, endpoint: str, params: dict[str, str]) -> Any:
        try:
            return self._api().request(method.upper(), endpoint, params=params)
        except tweepy.HTTPException as e:
            raise RemoteCallError(
                str(e),
                errors=[_error_record(err) for err in e.api_errors],
                status_code=e.response.status_code,
            ) from e
        except tweepy.TweepyException as e:
            raise RemoteCallError(str(e)) from e

    async def call(
        self, method: str, endpoint: str, parameters: Mapping[str, Any]
    ) -> Any:
        params = encode_parameters(parameters)
        logger.debug(f"{method.upper()} {endpoint} {params}")
        return await asyncio.to_thread(self._request, method, endpoint, params)
