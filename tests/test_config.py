"""
Tests for ixforge_core.config — TOML configuration and environment overrides.

Covers:
  - Default values for all dataclass sections
  - TOML parsing and section merging
  - Environment variable overrides (precedence over TOML)
  - _merge helper edge cases
  - Missing TOML files
  - Hyphenated key handling
"""

from __future__ import annotations

import os
import tempfile
import textwrap
import unittest
from unittest.mock import patch

from ixforge_core.config import (
    APIConfig,
    IxForgeConfig,
    LoggingConfig,
    _merge,
    load_config,
)


def _write_toml(content: str) -> str:
    fd, path = tempfile.mkstemp(suffix=".toml")
    with os.fdopen(fd, "w") as f:
        f.write(textwrap.dedent(content))
    return path


# ═══════════════════════════════════════════════════════════════════
#  Defaults
# ═══════════════════════════════════════════════════════════════════

class TestDefaults(unittest.TestCase):

    def test_api_defaults(self):
        a = APIConfig()
        self.assertEqual(a.host, "127.0.0.1")
        self.assertEqual(a.port, 8080)
        self.assertEqual(a.cors_origins, [])
        self.assertEqual(a.max_body_bytes, 65_536)

    def test_logging_defaults(self):
        lg = LoggingConfig()
        self.assertEqual(lg.level, "INFO")
        self.assertEqual(lg.format, "human")
        self.assertIsNone(lg.file)

    def test_top_level_sections(self):
        cfg = IxForgeConfig()
        self.assertIsInstance(cfg.api, APIConfig)
        self.assertIsInstance(cfg.logging, LoggingConfig)

    def test_cors_lists_not_shared(self):
        a, b = APIConfig(), APIConfig()
        a.cors_origins.append("https://x.example")
        self.assertEqual(b.cors_origins, [])


# ═══════════════════════════════════════════════════════════════════
#  TOML loading
# ═══════════════════════════════════════════════════════════════════

class TestLoadConfig(unittest.TestCase):

    def setUp(self):
        self._env = patch.dict(os.environ, {}, clear=True)
        self._env.start()

    def tearDown(self):
        self._env.stop()

    def test_no_path_gives_defaults(self):
        cfg = load_config(None)
        self.assertEqual(cfg.api.port, 8080)

    def test_missing_file_gives_defaults(self):
        cfg = load_config("/nonexistent/ixforge.toml")
        self.assertEqual(cfg.api.host, "127.0.0.1")

    def test_toml_sections(self):
        path = _write_toml("""
            [api]
            host = "0.0.0.0"
            port = 9090
            cors_origins = ["https://a.example"]

            [logging]
            level = "DEBUG"
            format = "json"
        """)
        try:
            cfg = load_config(path)
        finally:
            os.unlink(path)
        self.assertEqual(cfg.api.host, "0.0.0.0")
        self.assertEqual(cfg.api.port, 9090)
        self.assertEqual(cfg.api.cors_origins, ["https://a.example"])
        self.assertEqual(cfg.logging.level, "DEBUG")
        self.assertEqual(cfg.logging.format, "json")

    def test_hyphenated_keys(self):
        path = _write_toml("""
            [api]
            max-body-bytes = 1024
        """)
        try:
            cfg = load_config(path)
        finally:
            os.unlink(path)
        self.assertEqual(cfg.api.max_body_bytes, 1024)

    def test_unknown_sections_ignored(self):
        path = _write_toml("""
            [ledger]
            total_supply = 5
        """)
        try:
            cfg = load_config(path)
        finally:
            os.unlink(path)
        self.assertEqual(cfg, IxForgeConfig())


# ═══════════════════════════════════════════════════════════════════
#  Environment overrides
# ═══════════════════════════════════════════════════════════════════

class TestEnvOverrides(unittest.TestCase):

    def test_env_overrides(self):
        env = {
            "IXFORGE_HOST": "10.0.0.1",
            "IXFORGE_PORT": "8181",
            "IXFORGE_CORS_ORIGINS": "https://a.example, https://b.example,",
            "IXFORGE_MAX_BODY_BYTES": "2048",
            "IXFORGE_LOG_LEVEL": "debug",
            "IXFORGE_LOG_FMT": "json",
            "IXFORGE_LOG_FILE": "logs/ixforge.log",
        }
        with patch.dict(os.environ, env, clear=True):
            cfg = load_config()
        self.assertEqual(cfg.api.host, "10.0.0.1")
        self.assertEqual(cfg.api.port, 8181)
        self.assertEqual(cfg.api.cors_origins, ["https://a.example", "https://b.example"])
        self.assertEqual(cfg.api.max_body_bytes, 2048)
        self.assertEqual(cfg.logging.level, "DEBUG")
        self.assertEqual(cfg.logging.format, "json")
        self.assertEqual(cfg.logging.file, "logs/ixforge.log")

    def test_env_beats_toml(self):
        path = _write_toml("""
            [api]
            port = 9090
        """)
        try:
            with patch.dict(os.environ, {"IXFORGE_PORT": "7070"}, clear=True):
                cfg = load_config(path)
        finally:
            os.unlink(path)
        self.assertEqual(cfg.api.port, 7070)

    def test_bad_port_raises(self):
        with patch.dict(os.environ, {"IXFORGE_PORT": "eighty"}, clear=True):
            with self.assertRaises(ValueError):
                load_config()


# ═══════════════════════════════════════════════════════════════════
#  _merge
# ═══════════════════════════════════════════════════════════════════

class TestMerge(unittest.TestCase):

    def test_unknown_keys_ignored(self):
        a = APIConfig()
        _merge(a, {"bogus": 1, "port": 1})
        self.assertEqual(a.port, 1)
        self.assertFalse(hasattr(a, "bogus"))

    def test_empty_dict_noop(self):
        a = APIConfig()
        _merge(a, {})
        self.assertEqual(a, APIConfig())


if __name__ == "__main__":
    unittest.main()
