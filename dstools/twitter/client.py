"""Twitter API クライアント.

フォロワー・フォロー一覧、タイムライン、検索、フォロー操作などの
Twitter API v1.1 操作を提供する。各操作はエンドポイント名・結果フィールド・
パラメータを決めてページングエンジンを呼び出すだけの薄いラッパー。
"""

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from config.settings import settings
from dstools.twitter.pager import MAX_RECORDS, FetchRequest, Pager
from dstools.twitter.progress import ProgressReporter
from dstools.twitter.targets import (
    resolve_screen_names,
    resolve_targets,
    user_parameters,
)
from dstools.twitter.transport import Transport, TweepyTransport, TwitterCredentials

logger = logging.getLogger(__name__)

# エンドポイントごとの1リクエストあたりの上限件数
USER_LIST_PAGE_RECORDS = 200
ID_LIST_PAGE_RECORDS = 5000
MAX_ID_RECORDS = 500000
TIMELINE_PAGE_RECORDS = 200
SEARCH_PAGE_RECORDS = 100
RETWEETS_PAGE_RECORDS = 100


class TwitterClient:
    """Twitter API クライアント.

    Attributes:
        pager: ページングエンジン
    """

    def __init__(
        self,
        credentials: TwitterCredentials | None = None,
        transport: Transport | None = None,
        wait_seconds: float | None = None,
    ) -> None:
        """初期化.

        Args:
            credentials: 認証情報（未指定時は環境変数から取得）
            transport: API呼び出しのトランスポート（未指定時はtweepyを使用）
            wait_seconds: レート制限時の待機秒数

        Raises:
            ConfigurationError: transport未指定で認証情報が不足している場合
        """
        if transport is None:
            transport = TweepyTransport(credentials)
        self.pager = Pager(transport, wait_seconds=wait_seconds)
        logger.info("Twitter client initialized")

    async def twitter(
        self,
        endpoint: str,
        result_selector: str = "this",
        parameters: Mapping[str, Any] | None = None,
        page_size: int | None = None,
        total_limit: int | None = None,
        method: str = "get",
        reporter: ProgressReporter | None = None,
    ) -> list[Any] | Any:
        """任意のエンドポイントを呼び出す.

        Args:
            endpoint: APIエンドポイント名
            result_selector: レスポンスから返すフィールド名（``"this"`` は全体）
            parameters: APIリクエストパラメータ
            page_size: 1リクエストあたりの件数
            total_limit: 取得する最大件数
            method: HTTPメソッド
            reporter: 進捗レポーター

        Returns:
            要素のリスト、または単一オブジェクト
        """
        request = FetchRequest(
            endpoint=endpoint,
            result_selector=result_selector,
            parameters=dict(parameters or {}),
            page_size=(
                settings.TWITTER_DEFAULT_PAGE_RECORDS if page_size is None else page_size
            ),
            total_limit=(
                settings.TWITTER_MAX_RECORDS if total_limit is None else total_limit
            ),
            method=method,
        )
        return await self.pager.fetch(request, reporter)

    async def followers(self, screen_name: str, max_records: int = MAX_RECORDS) -> list[dict]:
        """ユーザーのフォロワー（ユーザーオブジェクト）を取得."""
        return await self.twitter(
            "followers/list",
            "users",
            # ユーザーオブジェクトに最新ツイートを含めない
            {"screen_name": screen_name, "skip_status": True},
            USER_LIST_PAGE_RECORDS,
            max_records,
        )

    async def following(self, screen_name: str, max_records: int = MAX_RECORDS) -> list[dict]:
        """ユーザーがフォローしているユーザーを取得."""
        return await self.twitter(
            "friends/list",
            "users",
            {"screen_name": screen_name, "skip_status": True},
            USER_LIST_PAGE_RECORDS,
            max_records,
        )

    async def followers_ids(
        self, screen_name: str, max_records: int = MAX_ID_RECORDS
    ) -> list[str]:
        """フォロワーのユーザーIDを取得."""
        return await self.twitter(
            "followers/ids",
            "ids",
            {"screen_name": screen_name, "stringify_ids": True},
            ID_LIST_PAGE_RECORDS,
            max_records,
        )

    async def following_ids(
        self, screen_name: str, max_records: int = MAX_ID_RECORDS
    ) -> list[str]:
        """フォロー中ユーザーのIDを取得."""
        return await self.twitter(
            "friends/ids",
            "ids",
            {"screen_name": screen_name, "stringify_ids": True},
            ID_LIST_PAGE_RECORDS,
            max_records,
        )

    async def tweets(self, user: str, max_records: int = MAX_RECORDS) -> list[dict]:
        """ユーザーのツイートを新しい順に取得.

        Args:
            user: ユーザーIDまたはスクリーンネーム
            max_records: 取得する最大ツイート数
        """
        return await self.twitter(
            "statuses/user_timeline",
            "this",
            user_parameters(user),
            TIMELINE_PAGE_RECORDS,
            max_records,
        )

    async def search_tweets(
        self,
        query: str,
        max_records: int = MAX_RECORDS,
        options: Mapping[str, Any] | None = None,
    ) -> list[dict]:
        """クエリでツイートを検索.

        Args:
            query: 検索クエリ
            max_records: 取得する最大ツイート数
            options: result_type、include_entities などの追加パラメータ
        """
        parameters = {"q": query, "result_type": "recent", "include_entities": True}
        parameters.update(options or {})
        return await self.twitter(
            "search/tweets", "statuses", parameters, SEARCH_PAGE_RECORDS, max_records
        )

    async def retweets(self, tweet_id: str, max_records: int = MAX_RECORDS) -> list[dict]:
        """ツイートの最近のリツイートを取得."""
        return await self.twitter(
            "statuses/retweets", "this", {"id": tweet_id}, RETWEETS_PAGE_RECORDS, max_records
        )

    async def user_lookup(
        self, screen_name: str | None = None, users: Any = None
    ) -> list[dict]:
        """スクリーンネームからユーザーオブジェクトを取得.

        Args:
            screen_name: 対象のスクリーンネーム（指定時はusersを無視）
            users: スクリーンネーム、または ``screen_name`` を持つ辞書のコレクション
        """
        names = [name for name in resolve_screen_names(screen_name, users) if name]
        return await self.twitter(
            "users/lookup", "this", {"screen_name": ",".join(names)}, 1, 1
        )

    async def follow(self, target: str | None = None, users: Any = None) -> list[Any]:
        """ユーザーをフォロー.

        targetが指定されていればそのユーザーを、未指定ならusersの全要素をフォローする。
        各要素はユーザーID、スクリーンネーム、またはユーザーオブジェクト。

        Returns:
            各ユーザーに対するAPIレスポンス（対象の順序）
        """
        return await self._each_target("friendships/create", target, users)

    async def unfollow(self, target: str | None = None, users: Any = None) -> list[Any]:
        """ユーザーのフォローを解除. 引数は ``follow`` と同じ."""
        return await self._each_target("friendships/destroy", target, users)

    async def _each_target(self, endpoint: str, target: Any, users: Any) -> list[Any]:
        targets = resolve_targets(target, users)
        logger.info(f"{endpoint}: {len(targets)} targets")
        return list(
            await asyncio.gather(
                *(
                    self.twitter(
                        endpoint, "this", user_parameters(item), 1, 1, method="post"
                    )
                    for item in targets
                )
            )
        )
