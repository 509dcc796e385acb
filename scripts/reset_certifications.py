#!/usr/bin/env python3
"""
Administrative reset: set every employee at the enrolled locations back to
'Not Certified', optionally deleting their certification audit history.

This is an out-of-band operation; the monthly engine never deletes audits.
Usage: python scripts/reset_certifications.py [--location ID ...] [--purge-audit] --yes
"""

import argparse
import asyncio
import logging
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from certengine.config import settings
from certengine.database import async_session_maker, engine
from certengine.storage.repositories import SqlCertificationStore

logger = logging.getLogger("reset_certifications")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument(
        "--location",
        action="append",
        dest="locations",
        help="Location ID to reset (repeatable). Defaults to all enrolled locations.",
    )
    parser.add_argument(
        "--purge-audit",
        action="store_true",
        help="Also delete certification_audit rows for these locations.",
    )
    parser.add_argument("--yes", action="store_true", help="Actually perform the reset.")
    return parser.parse_args(argv)


async def reset(location_ids: list[str] | None, purge_audit: bool, confirmed: bool) -> int:
    total = 0
    async with async_session_maker() as session:
        store = SqlCertificationStore(session)
        if not location_ids:
            location_ids = await store.list_enrolled_location_ids()
        if not location_ids:
            print("No enrolled locations found.")
            return 0

        for location_id in location_ids:
            if not confirmed:
                print(f"Would reset location {location_id}"
                      f"{' and purge its audit history' if purge_audit else ''}.")
                continue
            count = await store.reset_location(location_id, purge_audit=purge_audit)
            total += count
            logger.info("Reset %d employees at location %s", count, location_id)
            print(f"Location {location_id}: {count} employees set to Not Certified.")

    await engine.dispose()
    if not confirmed:
        print("Dry run only. Re-run with --yes to apply.")
    return total


if __name__ == "__main__":
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    args = parse_args()
    asyncio.run(reset(args.locations, args.purge_audit, args.yes))
