from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from godown.core.bottleneck import StageAbsencePolicy
from godown.core.logging_config import JSONFormatter, request_id
from godown.core.settings import load_settings


def _clear_env(monkeypatch):
    for name in ("API_CORS_ORIGINS", "LOG_LEVEL", "GODOWN_FETCH_TIMEOUT", "GODOWN_TOP_N", "GODOWN_STAGE_ABSENCE_POLICY"):
        monkeypatch.delenv(name, raising=False)


def test_packaged_defaults(monkeypatch):
    _clear_env(monkeypatch)
    monkeypatch.delenv("GODOWN_CONFIG", raising=False)

    settings = load_settings()

    assert settings.fetch_timeout == 15.0
    assert settings.top_n == 10
    assert settings.stage_absence_policy is StageAbsencePolicy.OBSERVED_ONLY
    assert settings.data_sources == []


def test_yaml_file_then_environment(tmp_path, monkeypatch):
    _clear_env(monkeypatch)
    config = tmp_path / "dashboard.yaml"
    config.write_text(
        "top_n: 5\n"
        "stage_absence_policy: absent_is_zero\n"
        "data_sources:\n"
        "  - name: Main\n"
        "    sheet_url: https://sheets.example.com/main.csv\n"
        "  - name: Incomplete\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("GODOWN_CONFIG", str(config))
    monkeypatch.setenv("GODOWN_FETCH_TIMEOUT", "3.5")
    monkeypatch.setenv("API_CORS_ORIGINS", "https://a.example.com, https://b.example.com")

    settings = load_settings()

    assert settings.top_n == 5
    assert settings.stage_absence_policy is StageAbsencePolicy.ABSENT_IS_ZERO
    assert settings.fetch_timeout == 3.5
    assert settings.cors_origins == ["https://a.example.com", "https://b.example.com"]
    assert settings.data_sources == [{"name": "Main", "sheet_url": "https://sheets.example.com/main.csv"}]


def test_missing_config_file_uses_builtin_defaults(tmp_path, monkeypatch):
    _clear_env(monkeypatch)

    settings = load_settings(tmp_path / "absent.yaml")

    assert settings.log_level == "INFO"
    assert settings.top_n == 10


def test_json_formatter_includes_request_id_and_extras():
    record = logging.LogRecord("godown.test", logging.WARNING, __file__, 12, "fetched %d rows", (3,), None)
    record.source_id = 7
    record.payload = object()

    token = request_id.set("abc123")
    try:
        line = JSONFormatter().format(record)
    finally:
        request_id.reset(token)

    data = json.loads(line)
    assert data["message"] == "fetched 3 rows"
    assert data["level"] == "WARNING"
    assert data["request_id"] == "abc123"
    assert data["source_id"] == 7
    assert isinstance(data["payload"], str)
    assert data["service"] == "godown"
    assert data["where"] == "test_settings:12"


def test_json_formatter_omits_request_id_outside_requests():
    record = logging.LogRecord("godown.test", logging.INFO, __file__, 5, "idle", (), None)

    data = json.loads(JSONFormatter().format(record))

    assert "request_id" not in data
    assert data["ts"].endswith("+00:00")
