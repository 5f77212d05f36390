"""Twitter API からコレクションを取得するスクリプト.

ページング・レート制限（15分待機）を自動処理し、結果をJSONで出力する。

使用方法:
    # フォロワーを1000件取得
    python scripts/fetch_twitter.py followers DriftSeiya --max 1000

    # ツイートを検索してファイルに保存
    python scripts/fetch_twitter.py search "#bitcoin" --max 500 --output tweets.json

    # 複数ユーザーをフォロー
    python scripts/fetch_twitter.py follow alice bob 12345
"""

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

# プロジェクトルートをパスに追加
sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger

from config.settings import settings
from dstools.twitter import ConfigurationError, TwitterClient, TwitterFetchError


class InterceptHandler(logging.Handler):
    """標準loggingのレコードをloguruに転送するハンドラ."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(depth=6, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(log_file: str | None = None) -> None:
    """ログ設定を初期化."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.LOG_LEVEL,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
        "<level>{message}</level>",
    )
    if log_file:
        logger.add(log_file, level="DEBUG")
    # dstools の標準logging出力もloguruに集約
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)


def build_parser() -> argparse.ArgumentParser:
    """コマンドライン引数のパーサーを作成."""
    parser = argparse.ArgumentParser(
        description="Twitter APIからページングされた結果をまとめて取得"
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="結果を保存するJSONファイル（デフォルト: 標準出力）",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="ログファイル（デフォルト: なし）",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in [
        ("followers", "フォロワー一覧"),
        ("following", "フォロー中ユーザー一覧"),
        ("followers-ids", "フォロワーのID一覧"),
        ("following-ids", "フォロー中ユーザーのID一覧"),
        ("tweets", "ユーザーのツイート"),
        ("search", "ツイート検索"),
        ("retweets", "ツイートのリツイート"),
    ]:
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("target", help="スクリーンネーム、ユーザーID、検索クエリまたはツイートID")
        sub.add_argument(
            "--max",
            type=int,
            default=None,
            help="取得する最大件数",
        )

    for name, help_text in [
        ("lookup", "ユーザー情報の取得"),
        ("follow", "ユーザーをフォロー"),
        ("unfollow", "ユーザーのフォローを解除"),
    ]:
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("targets", nargs="+", help="スクリーンネームまたはユーザーID")

    return parser


async def run_command(client: TwitterClient, args: argparse.Namespace):
    """サブコマンドに対応する操作を実行."""
    limit = {} if getattr(args, "max", None) is None else {"max_records": args.max}
    if args.command == "followers":
        return await client.followers(args.target, **limit)
    if args.command == "following":
        return await client.following(args.target, **limit)
    if args.command == "followers-ids":
        return await client.followers_ids(args.target, **limit)
    if args.command == "following-ids":
        return await client.following_ids(args.target, **limit)
    if args.command == "tweets":
        return await client.tweets(args.target, **limit)
    if args.command == "search":
        return await client.search_tweets(args.target, **limit)
    if args.command == "retweets":
        return await client.retweets(args.target, **limit)
    if args.command == "lookup":
        return await client.user_lookup(users=args.targets)
    if args.command == "follow":
        return await client.follow(users=args.targets)
    if args.command == "unfollow":
        return await client.unfollow(users=args.targets)
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> None:
    """エントリーポイント."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_file)

    logger.info(f"{args.command} を開始: {datetime.now().isoformat()}")
    try:
        client = TwitterClient()
        result = asyncio.run(run_command(client, args))
    except ConfigurationError as e:
        logger.error(f"Twitter認証情報が設定されていません: {e}")
        sys.exit(1)
    except TwitterFetchError as e:
        logger.error(f"取得に失敗しました: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("ユーザーにより中断されました")
        sys.exit(0)

    output = json.dumps(result, ensure_ascii=False, indent=2)
    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
        count = len(result) if isinstance(result, list) else 1
        logger.info(f"{count} 件を {args.output} に保存しました")
    else:
        print(output)


if __name__ == "__main__":
    main()
