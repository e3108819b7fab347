"""Shared fixtures: PHP files on disk and a sleep recorder."""

from pathlib import Path

import pytest

from tests.helpers import SAMPLE_PHP, SMALL_PHP, SleepRecorder


@pytest.fixture
def php_file(tmp_path: Path) -> Path:
    path = tmp_path / "UserService.php"
    path.write_text(SAMPLE_PHP, encoding="utf-8")
    return path


@pytest.fixture
def small_php_file(tmp_path: Path) -> Path:
    path = tmp_path / "A.php"
    path.write_text(SMALL_PHP, encoding="utf-8")
    return path


@pytest.fixture
def sleeper() -> SleepRecorder:
    return SleepRecorder()
