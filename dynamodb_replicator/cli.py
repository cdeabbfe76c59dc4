#!/usr/bin/env python3
"""
Command line entry point for table replication.

Usage:
    dynamodb-replicate REGION SOURCE_TABLE DESTINATION_TABLE [-r] [options]

    -r / --remove-all   delete every item of DESTINATION_TABLE first;
                        without it destination items are upserted

Exit status:
    0  job completed
    1  copy failed, partial writes left in place (re-run to resume)
    2  wipe failed, copy skipped
    3  invalid arguments or configuration

Make sure read/write capacity of both tables is provisioned for the run, and
avoid interrupting a job between the wipe and the copy.
"""

import argparse
import logging
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from .config import ReplicatorConfig
from .models import RunStatus
from .replication import replicate
from .utils import configure_logging, create_progress

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dynamodb-replicate",
        description="Copy every item of one DynamoDB table into another",
    )
    parser.add_argument("region", help="AWS region of both tables, e.g. ap-southeast-2")
    parser.add_argument("source_table", help="Table to read items from")
    parser.add_argument("destination_table", help="Table to write items to")
    parser.add_argument(
        "-r", "--remove-all",
        action="store_true",
        dest="wipe_first",
        help="Delete all items from the destination table before copying",
    )
    parser.add_argument("--endpoint-url", help="DynamoDB endpoint (DynamoDB Local, LocalStack)")
    parser.add_argument("--page-size", type=int, help="Scan Limit per page")
    parser.add_argument("--max-retries", type=int, help="Client retry attempts per call (default 13)")
    parser.add_argument(
        "--fail-on-unprocessed",
        action="store_true",
        help="Abort when a batch still has unprocessed items after retries",
    )
    parser.add_argument("--no-progress", action="store_true", help="Do not draw progress bars")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def build_config(args: argparse.Namespace) -> ReplicatorConfig:
    overrides = {'region_name': args.region}
    if args.endpoint_url:
        overrides['endpoint_url'] = args.endpoint_url
    if args.page_size is not None:
        overrides['page_size'] = args.page_size
    if args.max_retries is not None:
        overrides['max_retries'] = args.max_retries
    if args.fail_on_unprocessed:
        overrides['fail_on_unprocessed'] = True
    if args.debug:
        overrides['enable_debug_logging'] = True
    return ReplicatorConfig(**overrides)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = build_config(args)
    except PydanticValidationError as e:
        configure_logging(args.debug)
        logger.error(f"Invalid configuration: {e}")
        return 3

    configure_logging(config.enable_debug_logging)
    progress = create_progress(enabled=not args.no_progress)

    result = replicate(
        args.region,
        args.source_table,
        args.destination_table,
        wipe_first=args.wipe_first,
        config=config,
        progress=progress,
    )

    if result.status == RunStatus.ABORTED_BEFORE_COPY:
        logger.error("Wipe failed; destination was not written to")
    elif result.status == RunStatus.FAILED:
        logger.error(f"Replication failed: {result.error.message if result.error else 'unknown error'}")
    return result.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
