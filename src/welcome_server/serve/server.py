"""Run the welcome server with uvicorn."""
from __future__ import annotations
import argparse
import logging
import sys

import uvicorn

from welcome_server.common.config import DEFAULT_CFG_PATH, ConfigError, load_config
from welcome_server.common.logging_setup import setup_logging
from welcome_server.serve.fastapi_app import create_app

LOGGER = logging.getLogger("welcome.serve.server")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Serve the greeting routes")
    ap.add_argument("--cfg", default=DEFAULT_CFG_PATH, help="Config path")
    ap.add_argument("--host", default=None)
    ap.add_argument("--port", type=int, default=None, help="Overrides $PORT")
    ap.add_argument("--prefix", default=None, help="Mount prefix, e.g. /welcome")
    ap.add_argument("--escape", action="store_true", default=None, help="HTML-escape echoed names")
    ap.add_argument("--log-level", default=None)
    return ap.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging()
    try:
        config = load_config(
            args.cfg,
            host=args.host,
            port=args.port,
            prefix=args.prefix,
            escape=args.escape,
            log_level=args.log_level,
        )
    except ConfigError as e:
        LOGGER.error("Invalid configuration: %s", e)
        sys.exit(2)

    setup_logging(config.log_level)
    app = create_app(config)
    LOGGER.info("Listening on %s:%s", config.host, config.port)
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())

if __name__ == "__main__":
    main()
