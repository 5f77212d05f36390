"""進捗レポーター.

フェッチの進捗メッセージを受け取るコールバック。
引数ありで呼ぶと経過メッセージ、引数なしで呼ぶと終了通知となる。
"""

import logging
from datetime import datetime, timezone
from typing import Protocol

logger = logging.getLogger(__name__)


class ProgressReporter(Protocol):
    """進捗レポーターのインターフェース."""

    def __call__(self, message: str | None = None) -> None: ...


def timestamp() -> str:
    """進捗メッセージ用のISO形式タイムスタンプ."""
    return datetime.now(timezone.utc).isoformat()


class LoggingProgressReporter:
    """進捗をloggingに出力するレポーター.

    Attributes:
        name: ログに付与するラベル
        messages: 受け取ったメッセージ数
        closed: 終了通知を受け取ったか
    """

    def __init__(self, name: str = "twitter") -> None:
        self.name = name
        self.messages = 0
        self.closed = False

    def __call__(self, message: str | None = None) -> None:
        if message is None:
            if self.closed:
                return
            self.closed = True
            logger.debug(f"[{self.name}] progress closed after {self.messages} messages")
            return
        self.messages += 1
        logger.info(f"[{self.name}] {message}")
