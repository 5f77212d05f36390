"""Twitter連携の例外定義."""

import json
from collections.abc import Mapping, Sequence
from typing import Any


class TwitterError(Exception):
    """Twitter連携の基底例外."""


class ConfigurationError(TwitterError):
    """認証情報などの必須設定が不足している場合に送出."""


class RemoteCallError(TwitterError):
    """Twitter APIがリクエストを拒否した場合に送出.

    Attributes:
        errors: APIが返したエラーレコード（``{"code": ..., "message": ...}`` のリスト）
        status_code: HTTPステータスコード（不明な場合はNone）
    """

    def __init__(
        self,
        message: str,
        errors: Sequence[Any] | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.errors = list(errors or [])
        self.status_code = status_code


class TwitterFetchError(TwitterError):
    """回復不能なエラーでフェッチが失敗した場合に送出.

    取得途中のデータは破棄される。

    Attributes:
        endpoint: APIエンドポイント名
        parameters: 失敗時のリクエストパラメータ
        errors: APIが返したエラーレコード
    """

    def __init__(
        self,
        endpoint: str,
        parameters: Mapping[str, Any],
        errors: Sequence[Any] | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.parameters = dict(parameters)
        self.errors = list(errors or [])
        super().__init__(
            f"Got twitter error - {json.dumps(self.errors, default=str)}\n"
            f"endpoint is {endpoint}, params are "
            f"{json.dumps(self.parameters, default=str)}"
        )
