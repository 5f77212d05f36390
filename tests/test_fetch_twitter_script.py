"""fetch_twitter スクリプトのテスト."""

import importlib.util
import json
from pathlib import Path

import pytest

from dstools.twitter.client import TwitterClient
from tests.fakes import FakeTransport

SCRIPT = Path(__file__).parent.parent / "scripts" / "fetch_twitter.py"


@pytest.fixture(scope="module")
def script():
    spec = importlib.util.spec_from_file_location("fetch_twitter", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_parser(script):
    args = script.build_parser().parse_args(["followers", "alice", "--max", "10"])
    assert args.command == "followers"
    assert args.target == "alice"
    assert args.max == 10

    args = script.build_parser().parse_args(["follow", "a", "123"])
    assert args.targets == ["a", "123"]


@pytest.mark.asyncio
async def test_run_command(script):
    transport = FakeTransport({"followers/ids": [{"ids": ["1"], "next_cursor_str": "0"}]})
    client = TwitterClient(transport=transport, wait_seconds=0)
    args = script.build_parser().parse_args(["followers-ids", "alice", "--max", "10"])

    assert await script.run_command(client, args) == ["1"]
    assert transport.params()[0]["count"] == 10


def test_main_writes_output(script, monkeypatch, tmp_path):
    transport = FakeTransport({"users/lookup": [[{"screen_name": "a"}]]})
    monkeypatch.setattr(script, "setup_logging", lambda log_file=None: None)
    monkeypatch.setattr(
        script, "TwitterClient", lambda: TwitterClient(transport=transport, wait_seconds=0)
    )
    output = tmp_path / "users.json"

    script.main(["--output", str(output), "lookup", "a"])

    assert json.loads(output.read_text(encoding="utf-8")) == [{"screen_name": "a"}]


def test_main_exits_on_missing_credentials(script, monkeypatch):
    from dstools.twitter.errors import ConfigurationError

    def unconfigured():
        raise ConfigurationError("missing")

    monkeypatch.setattr(script, "setup_logging", lambda log_file=None: None)
    monkeypatch.setattr(script, "TwitterClient", unconfigured)

    with pytest.raises(SystemExit) as exc_info:
        script.main(["followers", "alice"])
    assert exc_info.value.code == 1
