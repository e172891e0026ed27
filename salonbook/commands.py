# salonbook/commands.py
"""Maintenance commands meant to be run by cron or another external scheduler.

    python -m salonbook.commands complete-expired
"""

import argparse
import logging
import sys

from sqlmodel import Session

from .config import get_settings
from .db import engine
from .deps import current_time
from .services.sweep import complete_expired_appointments

logger = logging.getLogger(__name__)


def complete_expired(args) -> int:
    settings = get_settings()
    now = current_time(settings)
    with Session(engine) as session:
        count = complete_expired_appointments(session, now)
    print(f"Marked {count} appointments as completed.")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Salonbook maintenance commands")
    subcommands = parser.add_subparsers(dest="command", required=True)

    expired = subcommands.add_parser(
        "complete-expired",
        help="Mark confirmed or in-progress appointments whose end time has passed as completed",
    )
    expired.set_defaults(func=complete_expired)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
