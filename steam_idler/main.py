#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import atexit
import logging
import sys
from pathlib import Path

from .accounts import AccountsFileMissing, create_sample_txt
from .config import CONFIG_PATH, load_config
from .controller import Controller
from .log import logging_config

VERSION = "1.9"

logger = logging.getLogger(__name__)


def main():
    p = argparse.ArgumentParser(description="Steam Idler: idle games on multiple accounts")
    p.add_argument("--accounts", type=str, default="accounts.txt", help="Path to accounts.txt (name;password;sharedSecret;proxy)")
    p.add_argument("--config", type=str, default=str(CONFIG_PATH), help="Path to config.json")
    p.add_argument("--debug", action="store_true")
    p.add_argument("--create-sample-txt", action="store_true")
    args = p.parse_args()

    if args.create_sample_txt:
        path = Path(args.accounts)
        if create_sample_txt(path):
            print(f"Created sample accounts file: {path}")
        else:
            print(f"{path} already exists")
        return

    # console only until config.json names the log file
    logging_config(args.debug)
    config = load_config(Path(args.config))
    logging_config(args.debug or config.debug, config.output_file)
    logger.info("steam-idler v%s", VERSION)

    controller = Controller(config, Path(args.accounts))
    atexit.register(controller.flush_playtime)

    try:
        asyncio.run(controller.run())
    except AccountsFileMissing:
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Goodbye!")


if __name__ == "__main__":
    main()
