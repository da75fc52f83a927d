from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.shared.config import reset_settings_for_tests
from src.shared.request_id import set_request_id


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """每个用例使用干净的配置：不读取本地 .env，也不复用 settings 单例。"""
    monkeypatch.chdir(tmp_path)
    for key in ("MARKOV_BASE_URL", "MARKOV_TIMEOUT", "MARKOV_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    reset_settings_for_tests()
    set_request_id(None)
    yield
    reset_settings_for_tests()
    set_request_id(None)
