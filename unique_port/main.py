"""Command line entry point, run by the Lambda handler as ``./uniqueport``."""

import argparse
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from .config import settings
from .models import Message
from .resource import handle_formation

logger = logging.getLogger(__name__)


def setup_logging(level_name: str) -> None:
    """Configure the root logger to write to stderr."""
    level = getattr(logging, level_name.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    root.addHandler(handler)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Handle every CloudFormation request in an SNS event.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Process exit status: 0 when every record was handled
    """
    parser = argparse.ArgumentParser(
        prog="uniqueport",
        description="Allocate unique ports for Custom::UniquePort resources",
    )
    parser.add_argument("event", help="SNS event as JSON")
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help="Logging level (default: %(default)s)",
    )
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    try:
        message = Message.model_validate_json(args.event)
    except ValidationError as e:
        logger.error(f"main: {e}")
        return 1

    logger.info("main msg = %r", message)

    for record in message.records:
        try:
            handle_formation(record.sns)
        except Exception as e:
            logger.error(f"main: HandleFormation error {e}", exc_info=True)
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
