#!/usr/bin/env python3
"""Console entry point: python -m release_bot [config.json]"""

import asyncio
import logging
import sys

from .bot import main


def run():
    config_path = sys.argv[1] if len(sys.argv) > 1 else "config.json"
    try:
        asyncio.run(main(config_path))
    except KeyboardInterrupt:
        logging.info("Release bot stopped by user")
        sys.exit(0)
    except Exception as e:
        logging.error(f"Release bot failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    run()
