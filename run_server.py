#!/usr/bin/env python3
"""
ixforge server runner.

Usage:
    python run_server.py --config ixforge.toml --port 8080

Environment variables (alternative to flags):
    IXFORGE_HOST, IXFORGE_PORT, IXFORGE_LOG_LEVEL, IXFORGE_LOG_FMT
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging

from ixforge_core.api import APIServer
from ixforge_core.config import load_config
from ixforge_core.logging_config import setup_logging

logger = logging.getLogger("ixforge")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="ixforge instruction server")
    p.add_argument("--config", default=None, help="Path to ixforge.toml config file")
    p.add_argument("--host", default=None, help="Listen host (default 127.0.0.1)")
    p.add_argument("--port", type=int, default=None, help="Listen port (default 8080)")
    p.add_argument("--log-level", default=None,
                   help="DEBUG, INFO, WARNING, ERROR or CRITICAL")
    return p.parse_args(argv)


async def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)

    # Load config (TOML + env overrides); CLI flags override both
    cfg = load_config(args.config)
    if args.host:
        cfg.api.host = args.host
    if args.port is not None:
        cfg.api.port = args.port
    if args.log_level:
        cfg.logging.level = args.log_level.upper()

    setup_logging(cfg.logging.level, cfg.logging.format, cfg.logging.file)

    api = APIServer(cfg.api.host, cfg.api.port, api_config=cfg.api)
    await api.start()
    try:
        while True:
            await asyncio.sleep(3600)
    except asyncio.CancelledError:
        logger.info("Shutting down")
    finally:
        await api.stop()


if __name__ == "__main__":
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(main())


def main_sync():
    """Synchronous entry point for console_scripts."""
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(main())
