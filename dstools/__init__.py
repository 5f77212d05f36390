"""dstools - Twitter API のページング・レート制限対応フェッチ.

フォロワー一覧やタイムラインなど、ページングされたTwitter APIの結果を
レート制限を待機しながらまとめて取得する。
"""

from dstools.twitter import TwitterClient, fetch

__all__ = ["TwitterClient", "fetch"]
