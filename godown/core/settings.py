"""Runtime configuration: packaged YAML defaults overridden by environment variables."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from godown.core.bottleneck import StageAbsencePolicy

logger = logging.getLogger(__name__)

CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"
DEFAULT_CONFIG = CONFIG_DIR / "dashboard.yaml"
DEFAULT_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]


@dataclass(slots=True)
class Settings:
    cors_origins: list[str] = field(default_factory=lambda: list(DEFAULT_ORIGINS))
    log_level: str = "INFO"
    fetch_timeout: float = 15.0
    top_n: int = 10
    stage_absence_policy: StageAbsencePolicy = StageAbsencePolicy.OBSERVED_ONLY
    data_sources: list[dict[str, str]] = field(default_factory=list)


def _load_yaml(path: Path) -> dict:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fp:
        data = yaml.safe_load(fp)
    return data if isinstance(data, dict) else {}


def _split_origins(value: str) -> list[str]:
    return [origin.strip() for origin in value.split(",") if origin.strip()]


def load_settings(path: Path | None = None) -> Settings:
    config_path = path or Path(os.getenv("GODOWN_CONFIG") or DEFAULT_CONFIG)
    data = _load_yaml(config_path)
    settings = Settings()

    origins = data.get("cors_origins")
    if isinstance(origins, list) and origins:
        settings.cors_origins = [str(origin) for origin in origins]
    settings.log_level = str(data.get("log_level") or settings.log_level)
    settings.fetch_timeout = float(data.get("fetch_timeout") or settings.fetch_timeout)
    settings.top_n = int(data.get("top_n") or settings.top_n)
    if data.get("stage_absence_policy"):
        settings.stage_absence_policy = StageAbsencePolicy(data["stage_absence_policy"])
    settings.data_sources = [
        {"name": str(item["name"]), "sheet_url": str(item["sheet_url"])}
        for item in data.get("data_sources") or []
        if isinstance(item, dict) and item.get("name") and item.get("sheet_url")
    ]

    env_origins = _split_origins(os.getenv("API_CORS_ORIGINS", ""))
    if env_origins:
        settings.cors_origins = env_origins
    if os.getenv("LOG_LEVEL"):
        settings.log_level = os.environ["LOG_LEVEL"].upper()
    if os.getenv("GODOWN_FETCH_TIMEOUT"):
        settings.fetch_timeout = float(os.environ["GODOWN_FETCH_TIMEOUT"])
    if os.getenv("GODOWN_TOP_N"):
        settings.top_n = int(os.environ["GODOWN_TOP_N"])
    if os.getenv("GODOWN_STAGE_ABSENCE_POLICY"):
        settings.stage_absence_policy = StageAbsencePolicy(os.environ["GODOWN_STAGE_ABSENCE_POLICY"])

    return settings


__all__ = ["CONFIG_DIR", "Settings", "load_settings"]
