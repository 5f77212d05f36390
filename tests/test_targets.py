"""操作対象の解決のテスト."""

from dstools.twitter.targets import (
    is_twitter_id,
    resolve_screen_names,
    resolve_targets,
    user_parameters,
)


class TestResolveTargets:
    def test_explicit_target_wins(self):
        assert resolve_targets("42", ["a", "b"]) == ["42"]
        assert resolve_targets("42") == ["42"]

    def test_fallback_collection(self):
        fallback = [{"screen_name": "a"}, "b", {"id_str": "3"}]
        assert resolve_targets(None, fallback) == ["a", "b", "3"]

    def test_empty_target_uses_fallback(self):
        assert resolve_targets("", ["b"]) == ["b"]

    def test_screen_name_preferred_over_id(self):
        assert resolve_targets(None, [{"screen_name": "a", "id_str": "1"}]) == ["a"]

    def test_scalar_fallback_is_wrapped(self):
        assert resolve_targets(None, "alice") == ["alice"]
        assert resolve_targets(None, {"id_str": "7"}) == ["7"]

    def test_unresolvable_entries_become_none(self):
        assert resolve_targets(None, [{"name": "x"}, 5, "c"]) == [None, None, "c"]

    def test_missing_fallback(self):
        assert resolve_targets(None) == []


class TestResolveScreenNames:
    def test_explicit(self):
        assert resolve_screen_names("a", ["b"]) == ["a"]

    def test_records_only_use_screen_name(self):
        fallback = ["a", {"screen_name": "b"}, {"id_str": "3"}]
        assert resolve_screen_names(None, fallback) == ["a", "b", None]


class TestUserParameters:
    def test_numeric_id(self):
        assert is_twitter_id("12345")
        assert user_parameters("12345") == {"user_id": "12345"}

    def test_screen_name(self):
        assert not is_twitter_id("alice")
        assert not is_twitter_id(12345)
        assert user_parameters("alice") == {"screen_name": "alice"}

    def test_unresolvable(self):
        assert user_parameters(None) == {}
