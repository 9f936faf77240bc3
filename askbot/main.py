#!/usr/bin/env python3
"""
Main entry point for the Q&A bot
"""

import asyncio
import logging
import sys

from loguru import logger

# Configure logging
log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
logging.basicConfig(level=logging.INFO, format=log_format)
logger.remove()
logger.add(sys.stderr, level="INFO")
logger.add("logs/askbot_{time}.log", rotation="10 MB", level="DEBUG")

# Import must be done after logging setup
from askbot.bot.main import start_bot  # noqa: E402


def main() -> None:
    try:
        asyncio.run(start_bot())
    except (KeyboardInterrupt, SystemExit):
        logger.info("Bot stopped")


if __name__ == "__main__":
    main()
