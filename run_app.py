#!/usr/bin/env python3
"""
Run the post limit host application with the Flask development server.
"""

import argparse
import sys
from pathlib import Path

# Add the current directory to Python path
current_dir = Path(__file__).parent
sys.path.insert(0, str(current_dir))

from config_manager import ConfigManager
from app.logging_config import setup_logging, stop_logging
from app.main import create_app


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Content host with per-user post limits")
    parser.add_argument(
        "--config",
        default=str(current_dir / "web_app_config.json"),
        help="Path to the JSON config file (default: web_app_config.json next to this script)",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug mode and debug logging")
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)

    config_manager = ConfigManager(args.config)
    app_config = config_manager.get_app_config()
    logging_config = config_manager.get_logging_config()
    debug = args.debug or app_config.debug

    setup_logging(
        debug=debug,
        log_file=logging_config.log_file,
        quiet_loggers=logging_config.quiet_loggers,
    )
    try:
        app = create_app(config_manager, base_dir=current_dir)
        print(f"🚀 Serving on http://{app_config.host}:{app_config.port}")
        print(f"📁 Working directory: {current_dir}")
        app.run(host=app_config.host, port=app_config.port, debug=debug)
    finally:
        stop_logging()


if __name__ == "__main__":
    main()
