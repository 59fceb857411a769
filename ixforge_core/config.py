"""
TOML-based configuration for the ixforge server.

Loads settings from a TOML file and/or environment variables.
Environment variables take precedence over file values.

Usage:
    from ixforge_core.config import load_config
    cfg = load_config("ixforge.toml")
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomllib  # type: ignore[import]
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore[import,no-redef]


@dataclass
class APIConfig:
    """HTTP listener settings."""
    host: str = "127.0.0.1"
    port: int = 8080
    cors_origins: list[str] = field(default_factory=list)  # allowed CORS origins (empty = no CORS)
    max_body_bytes: int = 65_536       # 64 KiB max request body


@dataclass
class LoggingConfig:
    """Logging settings."""
    level: str = "INFO"
    format: str = "human"   # "human" or "json"
    file: str | None = None


@dataclass
class IxForgeConfig:
    """Top-level configuration container."""
    api: APIConfig = field(default_factory=APIConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _merge(dc: Any, raw: dict[str, Any]) -> None:
    """Merge a raw dict into a dataclass instance (in-place)."""
    for key, value in raw.items():
        key_under = key.replace("-", "_")
        if hasattr(dc, key_under):
            setattr(dc, key_under, value)


def load_config(path: str | None = None) -> IxForgeConfig:
    """
    Load configuration from a TOML file, then overlay environment variables.

    Env-var mapping:
        IXFORGE_HOST            -> api.host
        IXFORGE_PORT            -> api.port
        IXFORGE_CORS_ORIGINS    -> api.cors_origins   (comma-separated)
        IXFORGE_MAX_BODY_BYTES  -> api.max_body_bytes
        IXFORGE_LOG_LEVEL       -> logging.level
        IXFORGE_LOG_FMT         -> logging.format
        IXFORGE_LOG_FILE        -> logging.file
    """
    cfg = IxForgeConfig()

    # ── TOML file ────────────────────────────────────────────────
    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p, "rb") as f:
                data = tomllib.load(f)
            for section_name, section_dc in [
                ("api", cfg.api),
                ("logging", cfg.logging),
            ]:
                if section_name in data:
                    _merge(section_dc, data[section_name])

    # ── Environment variable overrides ───────────────────────────
    if v := os.environ.get("IXFORGE_HOST"):
        cfg.api.host = v
    if v := os.environ.get("IXFORGE_PORT"):
        cfg.api.port = int(v)
    if v := os.environ.get("IXFORGE_CORS_ORIGINS"):
        cfg.api.cors_origins = [o.strip() for o in v.split(",") if o.strip()]
    if v := os.environ.get("IXFORGE_MAX_BODY_BYTES"):
        cfg.api.max_body_bytes = int(v)
    if v := os.environ.get("IXFORGE_LOG_LEVEL"):
        cfg.logging.level = v.upper()
    if v := os.environ.get("IXFORGE_LOG_FMT"):
        cfg.logging.format = v
    if v := os.environ.get("IXFORGE_LOG_FILE"):
        cfg.logging.file = v

    return cfg
