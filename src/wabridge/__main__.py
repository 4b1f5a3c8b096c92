"""Run the bridge with uvicorn.

Run with:
    python -m wabridge

Endpoints:
    /api/health            - Liveness and configuration flags
    /api/messages?limit=N  - Message log, newest first
    /api/logs?limit=N      - Diagnostic events, newest first
    /api/send              - Send a text message
    /api/send-template     - Send a template message
    /api/templates         - List (GET) or create (POST) templates
    /webhook               - Cloud API webhook (GET handshake, POST deliveries)
"""

import logging

import uvicorn

from wabridge.adapters.frameworks.fastapi import create_app
from wabridge.config import BridgeConfig, load_env_file

logger = logging.getLogger("wabridge")


def main() -> None:
    env_file = load_env_file()
    config = BridgeConfig.from_env()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if env_file is not None:
        logger.info("Loaded settings from %s", env_file)
    logger.info("Running on http://localhost:%d", config.port)
    uvicorn.run(create_app(config), host=config.host, port=config.port)


if __name__ == "__main__":
    main()
