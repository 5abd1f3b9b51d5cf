#!/usr/bin/env python3
"""
ExtInventory - Browser extension inventory
Main entry point for the application
"""

import argparse
import logging
import sys
import traceback
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

from .config import APP_DESCRIPTION, APP_NAME, APP_VERSION, LOGS_DIR, InventoryConfig
from .core.aggregator import aggregate
from .core.report import records_to_csv
from .core.scanner import ExtensionRecord, ExtensionScanner
from .core.sinks import create_sink
from .core.user_session import (
    ActiveUserResolver,
    StaticUserResolver,
    WindowsActiveUserResolver,
    resolve_browser_roots,
)
from .exceptions import ActiveUserError, ConfigError, ErrorCodes, ReportError

logger = logging.getLogger(__name__)

# Exit codes
EXIT_OK = 0
EXIT_NO_USER = 1
EXIT_CONFIG = 2
EXIT_REPORT = 3
EXIT_UNEXPECTED = 4

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(verbose: bool = False, log_dir: Optional[Path] = LOGS_DIR):
    """
    Configure root logging with a rotating file and the console

    Args:
        verbose: Log at DEBUG instead of INFO
        log_dir: Directory for the log file (None disables file logging)
    """
    log_formatter = logging.Formatter(LOG_FORMAT)
    handlers = []

    if log_dir is not None:
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            # 10MB max, keep 5 backups
            file_handler = RotatingFileHandler(
                log_dir / "ext_inventory.log",
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
                encoding='utf-8'
            )
            file_handler.setFormatter(log_formatter)
            handlers.append(file_handler)
        except OSError as e:
            print(f"Warning: file logging disabled ({e})", file=sys.stderr)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(log_formatter)
    handlers.append(console_handler)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        handlers=handlers,
        force=True
    )


def run_inventory(resolver: ActiveUserResolver, config: InventoryConfig) -> List[ExtensionRecord]:
    """
    Scan every supported browser of the active user and merge the results

    Args:
        resolver: Supplies the active user's profile directory
        config: Runtime configuration (ignored ids)

    Returns:
        Unique records sorted by extension id

    Raises:
        ActiveUserError: No active user profile could be determined
    """
    profile_root = resolver.resolve_active_user_data_root()
    if profile_root is None:
        raise ActiveUserError(
            "Unable to determine the active user profile",
            error_code=ErrorCodes.ACTIVE_USER_NOT_FOUND
        )

    scanner = ExtensionScanner(config.ignored_ids)
    results = [scanner.scan(root, browser) for browser, root in resolve_browser_roots(profile_root)]
    return aggregate(results)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ext-inventory",
        description=APP_DESCRIPTION
    )
    parser.add_argument(
        '--test-mode',
        action='store_true',
        help='Save the report locally instead of uploading it'
    )
    parser.add_argument(
        '--save-path',
        type=Path,
        help='Report file used in test mode (default: %%LOCALAPPDATA%%\\ExtInventory\\reports\\extensions_<host>_<time>.csv)'
    )
    parser.add_argument(
        '--upload-url',
        type=str,
        help='Blob URL (with SAS token) the report is PUT to'
    )
    parser.add_argument(
        '--user-root',
        type=Path,
        help='Scan this profile directory instead of detecting the active user'
    )
    parser.add_argument(
        '--ignore',
        nargs='+',
        default=[],
        metavar='ID',
        help='Additional extension ids to leave out of the report'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable debug logging'
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f"{APP_NAME} {APP_VERSION}"
    )
    return parser


def main(argv: Optional[List[str]] = None, resolver: Optional[ActiveUserResolver] = None) -> int:
    """Main application entry point"""
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose)

    logger.info(f"Starting {APP_NAME} v{APP_VERSION}")

    config = InventoryConfig.from_env(
        test_mode=True if args.test_mode else None,
        save_path=args.save_path,
        upload_url=args.upload_url,
        extra_ignored_ids=args.ignore
    )

    if resolver is None:
        resolver = StaticUserResolver(args.user_root) if args.user_root else WindowsActiveUserResolver()

    try:
        # Fail on a missing endpoint before spending time on the scan
        sink = create_sink(config)
        records = run_inventory(resolver, config)

        if not records:
            logger.info("No browser extensions found")
        else:
            logger.info(f"Found {len(records)} unique extension(s)")

        location = sink.deliver(records_to_csv(records))
        logger.info(f"Report delivered: {location}")
        return EXIT_OK

    except ActiveUserError as e:
        logger.error(str(e))
        return EXIT_NO_USER
    except ConfigError as e:
        logger.error(str(e))
        return EXIT_CONFIG
    except ReportError as e:
        logger.error(str(e))
        return EXIT_REPORT
    except Exception as e:
        logger.critical(f"Unhandled exception: {e}")
        logger.critical(traceback.format_exc())
        return EXIT_UNEXPECTED


if __name__ == "__main__":
    sys.exit(main())
