"""ページング対応のフェッチエンジン.

Twitter API のレスポンスを1ページずつ取得・蓄積し、次ページの取得方法を
レスポンスごとに判定する。

ページングの種類:
1. カーソル方式: ``next_cursor_str`` を次リクエストの ``cursor`` に渡す
2. ID方式: 最後の要素の ``id_str`` - 1 を次リクエストの ``max_id`` に渡す
3. ページングなし: 単一オブジェクト、または継続情報のないリスト

レート制限（エラーコード88）を受けた場合は一定時間待機して同じページを再取得する。
"""

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_never,
    wait_fixed,
)

from config.settings import settings
from dstools.twitter.errors import RemoteCallError, TwitterFetchError
from dstools.twitter.progress import LoggingProgressReporter, ProgressReporter, timestamp
from dstools.twitter.rate_limit import is_rate_limit_error
from dstools.twitter.targets import is_twitter_id
from dstools.twitter.transport import Transport

logger = logging.getLogger(__name__)

MAX_RECORDS = 10000
DEFAULT_PAGE_RECORDS = 200

# レスポンス全体を結果として扱うセレクタ
WHOLE_RESPONSE = "this"
# 最終ページを示すカーソル
TERMINAL_CURSOR = "0"


class PageKind(Enum):
    """レスポンスの分類."""

    CURSOR = "cursor"
    ID = "id"
    EXHAUSTED = "exhausted"
    SINGLE = "single"


@dataclass(frozen=True)
class Page:
    """分類済みの1ページ.

    Attributes:
        kind: ページの分類
        items: ページの要素（SINGLEの場合はオブジェクトそのもの）
        cursor: 次ページのカーソル（CURSORの場合のみ）
        max_id: 次ページの max_id（IDの場合のみ）
    """

    kind: PageKind
    items: Any
    cursor: str | None = None
    max_id: str | None = None


@dataclass(frozen=True)
class FetchRequest:
    """フェッチ要求.

    Attributes:
        endpoint: APIエンドポイント名（例: ``followers/list``）
        result_selector: レスポンスから結果を取り出すフィールド名。
            ``"this"`` の場合はレスポンス全体
        parameters: APIリクエストパラメータ
        page_size: 1リクエストあたりの件数（APIの上限に合わせる）
        total_limit: 取得する最大件数
        method: HTTPメソッド
    """

    endpoint: str
    result_selector: str = WHOLE_RESPONSE
    parameters: Mapping[str, Any] = field(default_factory=dict)
    page_size: int = DEFAULT_PAGE_RECORDS
    total_limit: int = MAX_RECORDS
    method: str = "get"

    def __post_init__(self) -> None:
        if self.page_size <= 0:
            raise ValueError(f"page_size must be positive: {self.page_size}")
        if self.total_limit <= 0:
            raise ValueError(f"total_limit must be positive: {self.total_limit}")


def select_result(response: Any, selector: str) -> Any:
    """セレクタに従ってレスポンスから結果を取り出す."""
    if selector == WHOLE_RESPONSE:
        return response
    if isinstance(response, Mapping):
        return response.get(selector)
    return None


def classify_page(response: Any, selector: str) -> Page:
    """レスポンスを分類し、次ページの取得方法を決定.

    カーソルはID方式より優先して判定する。

    Args:
        response: デコード済みのAPIレスポンス
        selector: 結果フィールド名

    Returns:
        Page: 分類結果
    """
    items = select_result(response, selector)
    if not isinstance(items, (list, tuple)):
        return Page(PageKind.SINGLE, items)

    items = list(items)
    cursor = response.get("next_cursor_str") if isinstance(response, Mapping) else None
    if isinstance(cursor, str):
        if cursor == TERMINAL_CURSOR:
            return Page(PageKind.EXHAUSTED, items)
        return Page(PageKind.CURSOR, items, cursor=cursor)

    if items and isinstance(items[-1], Mapping):
        id_str = items[-1].get("id_str")
        if is_twitter_id(id_str):
            # 境界の要素を再取得しないよう -1 する
            return Page(PageKind.ID, items, max_id=str(int(id_str) - 1))

    return Page(PageKind.EXHAUSTED, items)


class Pager:
    """ページング対応のフェッチエンジン.

    フェッチ間で共有する可変状態を持たないため、1つのインスタンスで
    複数のフェッチを並行実行できる。

    Attributes:
        transport: API呼び出しのトランスポート
        wait_seconds: レート制限時の待機秒数
    """

    def __init__(
        self,
        transport: Transport,
        wait_seconds: float | None = None,
        sleep: Callable[[float], Awaitable[None]] | None = None,
    ) -> None:
        """初期化.

        Args:
            transport: API呼び出しのトランスポート
            wait_seconds: レート制限時の待機秒数（未指定時は設定値）
            sleep: 待機に使うコルーチン関数（未指定時は asyncio.sleep）
        """
        self.transport = transport
        self.wait_seconds = (
            settings.TWITTER_RATE_LIMIT_WAIT_SECONDS
            if wait_seconds is None
            else wait_seconds
        )
        self._sleep = sleep

    async def fetch(
        self,
        request: FetchRequest,
        reporter: ProgressReporter | None = None,
    ) -> list[Any] | Any:
        """全ページを取得して結果を返す.

        終了通知（引数なしのreporter呼び出し）は成功・失敗を問わず1回だけ行う。

        Args:
            request: フェッチ要求
            reporter: 進捗レポーター

        Returns:
            蓄積した要素のリスト、またはページングされない単一オブジェクト

        Raises:
            TwitterFetchError: レート制限以外のAPIエラー
        """
        reporter = reporter or LoggingProgressReporter(f"twitter {request.endpoint}")
        try:
            return await self._fetch_pages(request, reporter)
        finally:
            reporter()

    async def _fetch_pages(
        self, request: FetchRequest, reporter: ProgressReporter
    ) -> list[Any] | Any:
        params = dict(request.parameters)
        accumulated: list[Any] = []
        remaining = request.total_limit

        while True:
            params["count"] = min(request.page_size, remaining)
            response = await self._call(request, params, reporter)
            page = classify_page(response, request.result_selector)

            if page.kind is PageKind.SINGLE:
                return page.items

            had_previous = bool(accumulated)
            accumulated.extend(page.items)
            if had_previous:
                reporter(
                    f"{timestamp()} twitter {request.endpoint} - got {len(accumulated)} items"
                )

            remaining = request.total_limit - len(accumulated)
            if remaining <= 0 or not page.items or page.kind is PageKind.EXHAUSTED:
                logger.debug(
                    f"{request.endpoint}: finished with {len(accumulated)} items"
                )
                return accumulated

            params = dict(params)
            if page.kind is PageKind.CURSOR:
                params["cursor"] = page.cursor
            else:
                params["max_id"] = page.max_id

    async def _call(
        self,
        request: FetchRequest,
        params: dict[str, Any],
        reporter: ProgressReporter,
    ) -> Any:
        """1ページ分のAPI呼び出し（レート制限時は待機して再試行）."""

        def announce_wait(retry_state: RetryCallState) -> None:
            reporter(
                f"{timestamp()}: rate limit for {request.endpoint} exceeded. "
                f"Waiting {self.wait_seconds / 60:g} minutes"
            )

        def announce_resume(retry_state: RetryCallState) -> None:
            if retry_state.attempt_number > 1:
                reporter(f"{timestamp()}: {request.endpoint} continuing")

        retry_kwargs: dict[str, Any] = {}
        if self._sleep is not None:
            retry_kwargs["sleep"] = self._sleep

        response = None
        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception(is_rate_limit_error),
                wait=wait_fixed(self.wait_seconds),
                stop=stop_never,
                before=announce_resume,
                before_sleep=announce_wait,
                reraise=True,
                **retry_kwargs,
            ):
                with attempt:
                    response = await self.transport.call(
                        request.method, request.endpoint, params
                    )
        except RemoteCallError as e:
            logger.error(f"Twitter API error for {request.endpoint}: {e}")
            raise TwitterFetchError(request.endpoint, params, e.errors) from e
        return response


async def fetch(
    transport: Transport,
    endpoint: str,
    result_selector: str = WHOLE_RESPONSE,
    parameters: Mapping[str, Any] | None = None,
    page_size: int = DEFAULT_PAGE_RECORDS,
    total_limit: int = MAX_RECORDS,
    *,
    method: str = "get",
    reporter: ProgressReporter | None = None,
    wait_seconds: float | None = None,
) -> list[Any] | Any:
    """Twitter API を呼び出し、ページングされた結果をまとめて返す.

    Args:
        transport: API呼び出しのトランスポート
        endpoint: APIエンドポイント名
        result_selector: 結果フィールド名（``"this"`` はレスポンス全体）
        parameters: APIリクエストパラメータ
        page_size: 1リクエストあたりの件数
        total_limit: 取得する最大件数
        method: HTTPメソッド（アクション系は ``"post"``）
        reporter: 進捗レポーター
        wait_seconds: レート制限時の待機秒数

    Returns:
        要素のリスト、または単一オブジェクト
    """
    request = FetchRequest(
        endpoint=endpoint,
        result_selector=result_selector,
        parameters=dict(parameters or {}),
        page_size=page_size,
        total_limit=total_limit,
        method=method,
    )
    return await Pager(transport, wait_seconds=wait_seconds).fetch(request, reporter)
