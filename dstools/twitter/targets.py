"""操作対象ユーザーの解決.

単一のID・スクリーンネーム、またはユーザーオブジェクトのコレクションを
リクエスト単位のID列に正規化する。ネットワークアクセスは行わない。
"""

import re
from collections.abc import Mapping
from typing import Any

_TWITTER_ID_PATTERN = re.compile(r"^\d+$")


def is_twitter_id(value: Any) -> bool:
    """数字のみの文字列（ユーザーID）か判定."""
    return isinstance(value, str) and _TWITTER_ID_PATTERN.match(value) is not None


def _as_list(collection: Any) -> list[Any]:
    if collection is None:
        return []
    if isinstance(collection, (list, tuple)):
        return list(collection)
    return [collection]


def _resolve_item(item: Any) -> str | None:
    if isinstance(item, str):
        return item
    if not isinstance(item, Mapping):
        return None
    if item.get("screen_name"):
        return item["screen_name"]
    if item.get("id_str"):
        return item["id_str"]
    return None


def resolve_targets(explicit_target: Any, fallback: Any = None) -> list[str | None]:
    """操作対象をID/スクリーンネームのリストに解決.

    Args:
        explicit_target: 明示的に指定された対象（空でない文字列なら最優先）
        fallback: 対象が未指定の場合に使うコレクション。
            文字列、``screen_name`` または ``id_str`` を持つ辞書を要素とする。

    Returns:
        解決した識別子のリスト。解決できない要素はNoneになる。
    """
    if isinstance(explicit_target, str) and explicit_target:
        return [explicit_target]
    return [_resolve_item(item) for item in _as_list(fallback)]


def resolve_screen_names(screen_name: str | None, fallback: Any = None) -> list[str | None]:
    """ユーザー検索用にスクリーンネームのリストを解決.

    ``resolve_targets`` と異なり、辞書からは ``screen_name`` のみを読む。
    """
    if screen_name:
        return [screen_name]
    names = []
    for item in _as_list(fallback):
        if isinstance(item, str):
            names.append(item)
        elif isinstance(item, Mapping):
            names.append(item.get("screen_name"))
        else:
            names.append(None)
    return names


def user_parameters(target: str | None) -> dict[str, str]:
    """対象をリクエストパラメータ（user_id / screen_name）に変換."""
    if target is None:
        return {}
    if is_twitter_id(target):
        return {"user_id": target}
    return {"screen_name": target}
