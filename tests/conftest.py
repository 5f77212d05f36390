"""テスト共通のフィクスチャ."""

import pytest

from tests.fakes import RecordingReporter


@pytest.fixture
def reporter():
    return RecordingReporter()
