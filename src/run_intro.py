#!/usr/bin/env python3
"""
Walkthrough launcher

Usage:
    python src/run_intro.py
    python src/run_intro.py --database-url sqlite+aiosqlite:///data/intro.db
    python src/run_intro.py --echo --debug
"""

import argparse
import asyncio
import sys

from dotenv import load_dotenv

load_dotenv()

from db.database import DatabaseManager
from db.errors import PersistenceError
from tutorial import IntroConfig, run_walkthrough
from tutorial import ui
from utils.logger import enable_file_logging, set_global_debug


async def _run(config: IntroConfig) -> None:
    db_manager = DatabaseManager(config.DATABASE_URL, echo=config.ECHO_SQL)
    try:
        await db_manager.initialize()
        await run_walkthrough(db_manager)
    finally:
        await db_manager.close()


def main():
    parser = argparse.ArgumentParser(description="A conversational introduction to the persistence layer")
    parser.add_argument(
        "--database-url",
        type=str,
        default=None,
        help="Async SQLAlchemy URL (default: in-memory SQLite)"
    )
    parser.add_argument(
        "--echo",
        action="store_true",
        help="Log every SQL statement"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    args = parser.parse_args()

    config = IntroConfig()
    if args.database_url:
        config.DATABASE_URL = args.database_url
    if args.echo:
        config.ECHO_SQL = True
    if args.debug:
        config.DEBUG = True

    if config.LOG_TO_FILE:
        enable_file_logging(config.LOG_DIR)
    set_global_debug(config.DEBUG)

    try:
        asyncio.run(_run(config))
    except PersistenceError as e:
        ui.print_error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
