#!/usr/bin/env python3
"""Run the chat bridge with uvicorn."""

from __future__ import annotations

import argparse
import sys

import uvicorn

from chatbridge.config_loader import load_config
from chatbridge.main import create_app
from chatbridge.settings import Settings


def main() -> int:
    parser = argparse.ArgumentParser(description="Run the chat bridge server")
    parser.add_argument(
        "--config",
        help="Path to the config file (default: CHATBRIDGE_CONFIG or configs/config_default.yaml)",
    )
    parser.add_argument("--host", help="Bind host (overrides config and CHATBRIDGE_HOST)")
    parser.add_argument("--port", type=int, help="Bind port (overrides config and CHATBRIDGE_PORT)")
    args = parser.parse_args()

    try:
        cfg = load_config(args.config)
    except RuntimeError as exc:
        print(f"[ERROR] Failed to load config: {exc}", file=sys.stderr)
        return 1

    settings = Settings.from_config(cfg)
    host = args.host or settings.server.host
    port = args.port or settings.server.port

    app = create_app(cfg)
    uvicorn.run(app, host=host, port=port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
