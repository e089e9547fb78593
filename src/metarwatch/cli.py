"""metarwatch command line.

    metarwatch update
    metarwatch metar KATL --data temperature,wind
    metarwatch metar atlanta --refresh
    metarwatch watch --interval 600

Configuration comes from METARWATCH_* environment variables; set
METARWATCH_CACHE_PATH so ``update`` and ``metar`` share a SQLite cache.
"""

from __future__ import annotations

import argparse
import json
import logging
import signal
import sys
import threading

from metarwatch.config import Settings
from metarwatch.exceptions import ConfigurationError, InvalidStationError, StationNotFoundError
from metarwatch.service import MetarService

EXIT_OK = 0
EXIT_CONFIG = 1
EXIT_INVALID_STATION = 2
EXIT_NOT_FOUND = 3

logger = logging.getLogger("metarwatch")


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="metarwatch",
        description="Cache and query METARs from AviationWeather.gov",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("update", help="Run one ingestion cycle")

    metar = sub.add_parser("metar", help="Print cached METARs for a station or group")
    metar.add_argument("identifier", help="ICAO code or group alias, e.g. KATL or atlanta")
    metar.add_argument(
        "--data",
        action="append",
        default=None,
        help="Fields to return (repeatable or comma-separated)",
    )
    metar.add_argument(
        "--refresh", action="store_true", help="Run an ingestion cycle before querying",
    )

    watch = sub.add_parser("watch", help="Refresh the cache on a fixed interval")
    watch.add_argument(
        "--interval", type=float, default=None, help="Seconds between cycles",
    )
    return parser


def _watch(service: MetarService, interval: float) -> int:
    stop = threading.Event()

    def _handle_signal(signum, frame):
        logger.info("Received signal %s, shutting down", signum)
        stop.set()

    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)
    logger.info("Refreshing METARs every %.0fs", interval)
    service.ingestion.run_forever(interval, stop)
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        settings = Settings.from_env()
    except ConfigurationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_CONFIG

    with MetarService.from_settings(settings) as service:
        if args.command == "update":
            service.update()
            report = service.last_report
            if report is not None:
                print(json.dumps({
                    "ok": report.ok,
                    "features": report.features,
                    "cached": report.cached,
                    "skipped": report.skipped,
                    "error": report.error,
                }))
            return EXIT_OK

        if args.command == "watch":
            return _watch(service, args.interval or settings.update_interval)

        if args.refresh:
            service.update()
        try:
            observations = service.metar(args.identifier, data=args.data)
        except InvalidStationError as exc:
            print(f"error ({exc.status_code}): {exc.message}", file=sys.stderr)
            return EXIT_INVALID_STATION
        except StationNotFoundError as exc:
            print(f"error ({exc.status_code}): {exc.message}", file=sys.stderr)
            return EXIT_NOT_FOUND
        print(json.dumps(service.as_dicts(observations), indent=2))
        return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
