#!/usr/bin/env python3
"""
Catpoint Control Server

Starts the control API:
- Arm / disarm
- Sensor CRUD and activation
- Camera frame submission

Usage:
    python -m catpoint.server
    # or
    uvicorn catpoint.api.manager:create_app --factory --host 0.0.0.0 --port 8080 --reload
"""

import argparse
import logging

import uvicorn

from .config import SecurityConfig


def main():
    config = SecurityConfig()

    parser = argparse.ArgumentParser(description="Catpoint Control Server")
    parser.add_argument("--host", default=config.host, help="Host to bind to")
    parser.add_argument("--port", type=int, default=config.port, help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    parser.add_argument("--log-level", default=config.log_level, help="Logging level")

    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger(__name__).info(
        "Catpoint control API on http://%s:%d/ (docs at /docs)", args.host, args.port
    )

    uvicorn.run(
        "catpoint.api.manager:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level.lower(),
    )


if __name__ == "__main__":
    main()
