"""トランスポート層のテスト."""

from unittest.mock import Mock, patch

import pytest
import tweepy

from dstools.twitter.errors import ConfigurationError, RemoteCallError
from dstools.twitter.transport import (
    TweepyTransport,
    TwitterCredentials,
    _PlainJSONParser,
    encode_parameters,
)

CREDENTIALS = TwitterCredentials(
    consumer_key="ck",
    consumer_secret="cs",
    access_token_key="ak",
    access_token_secret="as",
)


def http_response(status_code, reason, body):
    response = Mock()
    response.status_code = status_code
    response.reason = reason
    response.json.return_value = body
    return response


class TestCredentials:
    def test_complete(self):
        assert CREDENTIALS.missing == []
        assert CREDENTIALS.require() is CREDENTIALS

    def test_missing_fields_raise(self):
        credentials = TwitterCredentials(consumer_key="ck", access_token_key="ak")
        with pytest.raises(ConfigurationError) as exc_info:
            credentials.require()
        assert "consumer_secret" in str(exc_info.value)
        assert "access_token_secret" in str(exc_info.value)

    def test_transport_requires_credentials(self):
        with pytest.raises(ConfigurationError):
            TweepyTransport(TwitterCredentials())


class TestEncodeParameters:
    def test_encoding(self):
        encoded = encode_parameters({
            "screen_name": "alice",
            "skip_status": True,
            "include_entities": False,
            "count": 200,
            "user_id": None,
        })
        assert encoded == {
            "screen_name": "alice",
            "skip_status": "true",
            "include_entities": "false",
            "count": "200",
        }


class TestPlainJSONParser:
    def test_never_returns_cursor_tuple(self):
        payload = '{"users": [], "next_cursor": 5, "previous_cursor": 0}'
        parsed = _PlainJSONParser().parse(payload, return_cursors=True)
        assert parsed == {"users": [], "next_cursor": 5, "previous_cursor": 0}


class TestTweepyTransport:
    @pytest.mark.asyncio
    async def test_call_returns_json(self):
        with patch("dstools.twitter.transport.tweepy.API") as api_class:
            api_class.return_value.request.return_value = {"ids": ["1"]}
            transport = TweepyTransport(CREDENTIALS, host="api.example.com", timeout=5)

            result = await transport.call("get", "followers/ids", {"stringify_ids": True})

        assert result == {"ids": ["1"]}
        api_class.return_value.request.assert_called_once_with(
            "GET", "followers/ids", params={"stringify_ids": "true"}
        )
        _, kwargs = api_class.call_args
        assert kwargs["host"] == "api.example.com"
        assert kwargs["timeout"] == 5
        assert isinstance(kwargs["parser"], _PlainJSONParser)

    @pytest.mark.asyncio
    async def test_http_error_carries_error_records(self):
        response = http_response(
            429, "Too Many Requests",
            {"errors": [{"code": 88, "message": "Rate limit exceeded"}]},
        )
        with patch("dstools.twitter.transport.tweepy.API") as api_class:
            api_class.return_value.request.side_effect = tweepy.TooManyRequests(response)
            transport = TweepyTransport(CREDENTIALS)

            with pytest.raises(RemoteCallError) as exc_info:
                await transport.call("get", "friends/list", {})

        assert exc_info.value.errors == [{"code": 88, "message": "Rate limit exceeded"}]
        assert exc_info.value.status_code == 429

    @pytest.mark.asyncio
    async def test_request_failure_has_no_records(self):
        with patch("dstools.twitter.transport.tweepy.API") as api_class:
            api_class.return_value.request.side_effect = tweepy.TweepyException(
                "Failed to send request: connection reset"
            )
            transport = TweepyTransport(CREDENTIALS)

            with pytest.raises(RemoteCallError) as exc_info:
                await transport.call("post", "friendships/create", {"screen_name": "a"})

        assert exc_info.value.errors == []
        assert exc_info.value.status_code is None
