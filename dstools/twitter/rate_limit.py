"""レート制限の検出.

Twitter API v1.1 はレート制限超過時にエラーコード88を返す。
"""

from collections.abc import Mapping, Sequence
from typing import Any

from dstools.twitter.errors import RemoteCallError

# Twitter API のレート制限エラーコード
RATE_LIMIT_CODE = 88


def _error_code(record: Any) -> Any:
    if isinstance(record, Mapping):
        return record.get("code")
    return getattr(record, "code", None)


def is_rate_limited(errors: Sequence[Any] | None) -> bool:
    """エラーレコードにレート制限コードが含まれるか判定.

    Args:
        errors: ``{"code": ..., "message": ...}`` 形式のエラーレコード列

    Returns:
        いずれかのレコードのcodeが88ならTrue
    """
    if not errors or isinstance(errors, (str, bytes)):
        return False
    return any(_error_code(record) == RATE_LIMIT_CODE for record in errors)


def is_rate_limit_error(exc: BaseException) -> bool:
    """例外がレート制限によるAPI拒否か判定."""
    return isinstance(exc, RemoteCallError) and is_rate_limited(exc.errors)
