"""Command line entry point: ``python -m broadcast_notifier``."""

import argparse
import sys
from pathlib import Path
from typing import Any, Optional

import structlog

from .config.loader import ConfigLoader
from .engine import PollingLoop
from .errors import ConfigurationError, SystemFailureError
from .logging.config import configure_logging
from .source.youtube import read_access_token

logger = structlog.get_logger("broadcast_notifier")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="broadcast-notifier",
        description="Announce live broadcast lifecycle changes to a webhook channel.",
    )
    parser.add_argument("--discord-webhook", help="Webhook URL (or DISCORD_WEBHOOK)")
    parser.add_argument("--persist-file-path", help="State file that lets the notifier resume after restart")
    parser.add_argument("--token-path", help="Cached OAuth token file for the broadcast source")
    parser.add_argument("--config-dir", type=Path, help="Directory holding notifier.yaml")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING, ERROR or CRITICAL")
    parser.add_argument("--json-logs", action="store_true", default=None, help="Emit JSON log lines")
    parser.add_argument("--dry-run", action="store_true", default=None, help="Print notifications instead of posting")
    parser.add_argument("--once", action="store_true", help="Run a single cycle and exit")
    return parser


def cli_overrides(args: argparse.Namespace) -> dict[str, Any]:
    """Translate parsed arguments into a config override mapping."""
    mapping = {
        "discord_webhook": ("notifications", "webhook_url"),
        "persist_file_path": ("persistence", "path"),
        "token_path": ("source", "token_path"),
        "log_level": ("logging", "level"),
        "json_logs": ("logging", "format_json"),
        "dry_run": ("notifications", "dry_run"),
    }
    overrides: dict[str, Any] = {}
    for attr, (section, key) in mapping.items():
        value = getattr(args, attr)
        if value is not None:
            overrides.setdefault(section, {})[key] = value
    return overrides


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = ConfigLoader.create(args.config_dir).load(cli_overrides(args))
    except ConfigurationError as e:
        configure_logging()
        logger.critical("Invalid configuration, shutting down", error=str(e))
        return 2

    configure_logging(level=config.logging.level, format_json=config.logging.format_json)
    logger.info("Starting up")

    try:
        read_access_token(config.source.token_path)
    except ConfigurationError as e:
        logger.critical("Broadcast source credentials unavailable", error=str(e))
        return 2

    loop = PollingLoop.from_config(config)
    try:
        if args.once:
            loop.load_state()
            loop.run_cycle()
        else:
            loop.run_forever()
    except SystemFailureError as e:
        logger.critical("Fatal error, halting", error=str(e), error_type=type(e).__name__)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
        return 0

    return 0


if __name__ == "__main__":
    sys.exit(main())
