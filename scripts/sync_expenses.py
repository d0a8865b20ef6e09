#!/usr/bin/env python3
"""
Book expenses for completed overhaul tasks that never got one and refresh
project spend totals. Safe to run repeatedly.
"""

import asyncio
import logging
import sys

from marine_ops.db import get_database
from marine_ops.logging_config import setup_logging
from marine_ops.sync import sync_expenses

logger = logging.getLogger("sync_expenses")


async def run() -> int:
    database = await get_database()
    try:
        async with database.get_session() as session:
            summary = await sync_expenses(session)
    finally:
        await database.close()

    logger.info(
        f"Created {summary['expenses_created']} expenses totalling {summary['total_amount']:,.2f}; "
        f"updated {summary['projects_updated']} projects"
    )
    return 0


def main():
    setup_logging()
    return asyncio.run(run())


if __name__ == "__main__":
    sys.exit(main())
