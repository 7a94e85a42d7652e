"""Command line entry point: ``traffic-replay capture|consolidate``."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence

from traffic_replay._logging import configure_logging, shutdown_logging
from traffic_replay.config import CaptureConfig
from traffic_replay.exceptions import ConsolidationError, ReplayConfigError
from traffic_replay.runner import consolidate_event, load_context, run_capture

_logger = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="traffic-replay",
        description="Capture VATSIM traffic around an event and consolidate it for replay",
    )
    parser.add_argument("command", choices=("capture", "consolidate"), help="Pipeline step to run")
    parser.add_argument("--config", dest="event_path", default=None, help="Event TOML file (default: config.toml)")
    parser.add_argument("--airports", dest="airports_path", default=None, help="FAA APT_BASE.csv file")
    parser.add_argument("--output-dir", dest="output_dir", default=None, help="Root directory for captures")
    parser.add_argument("--datafeed-url", dest="datafeed_url", default=None, help="Skip datafeed URL discovery")
    parser.add_argument("--range-nm", dest="capture_range_nm", type=float, default=None, help="Capture radius")
    parser.add_argument("--no-index", action="store_true", help="Do not update events.json")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable DEBUG logging")
    return parser.parse_args(argv)


def _run(args: argparse.Namespace) -> int:
    try:
        config = CaptureConfig.from_env(
            event_path=args.event_path,
            airports_path=args.airports_path,
            output_dir=args.output_dir,
            datafeed_url=args.datafeed_url,
            capture_range_nm=args.capture_range_nm,
            update_index=False if args.no_index else None,
            log_json=True if args.json_logs else None,
            log_level="DEBUG" if args.verbose else None,
        )
    except ReplayConfigError as exc:
        configure_logging(logging.INFO)
        _logger.error("%s", exc)
        return 1

    configure_logging(config.log_level, json_format=config.log_json)
    try:
        if args.command == "capture":
            asyncio.run(run_capture(config))
        else:
            consolidate_event(config, load_context(config))
    except ReplayConfigError as exc:
        _logger.error("Configuration error: %s", exc)
        return 1
    except ConsolidationError as exc:
        _logger.error("Failed to combine captures: %s", exc)
        return 1
    except KeyboardInterrupt:
        _logger.warning("Interrupted")
        return 130
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    try:
        return _run(_parse_args(argv))
    finally:
        shutdown_logging()


if __name__ == "__main__":
    sys.exit(main())
