#!/usr/bin/env python3
"""
Recompute remaining and sold tonnage on every land from its scrap sales.
"""

import asyncio
import logging
import sys

from marine_ops.db import get_database
from marine_ops.logging_config import setup_logging
from marine_ops.sync import sync_tonnage

logger = logging.getLogger("sync_tonnage")


async def run() -> int:
    database = await get_database()
    try:
        async with database.get_session() as session:
            summary = await sync_tonnage(session)
    finally:
        await database.close()

    logger.info(
        f"Updated {summary['lands_updated']} lands: {summary['total_estimated']}t estimated, "
        f"{summary['total_sold']}t sold, {summary['total_remaining']}t remaining"
    )
    return 0


def main():
    setup_logging()
    return asyncio.run(run())


if __name__ == "__main__":
    sys.exit(main())
