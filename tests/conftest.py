from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.workspace import PackagingWorkspace, RecordingRunner


@pytest.fixture
def workspace(tmp_path: Path) -> PackagingWorkspace:
    """Provide a packaging workspace rooted at the pytest tmp_path."""
    return PackagingWorkspace(tmp_path)


@pytest.fixture
def recording_runner() -> RecordingRunner:
    return RecordingRunner()
