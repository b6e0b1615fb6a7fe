#!/usr/bin/env python3
"""Main entry point for the UpPaws tournament service."""

import logging
import sys

from uppaws.config.settings import get_default_config


def setup_logging(level: str = "INFO"):
    """Configure logging for the web server."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    # Suppress noisy third-party loggers
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def print_usage():
    """Print usage information for local development."""

    print("UpPaws Tournament Service")
    print("=" * 40)
    print("   python main.py --web     start the API server")
    print()
    print("Configuration is read from uppaws_config.json when present.")
    print("Environment overrides: UPPAWS_DB_PATH, UPPAWS_LOG_LEVEL, PORT")


def start_web_server():
    """Start the FastAPI web server."""
    config = get_default_config()
    setup_logging(config.system.log_level)

    import uvicorn

    from uppaws.web.app import create_app

    app = create_app(config)

    print(f"API Documentation: http://localhost:{config.system.port}/docs")

    uvicorn.run(
        app,
        host=config.system.host,
        port=config.system.port,
        log_level=config.system.log_level.lower(),
    )


def main():
    """Main entry point."""
    if "--web" in sys.argv:
        start_web_server()
    else:
        print_usage()


if __name__ == "__main__":
    main()
