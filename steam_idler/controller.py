"""Creates one Bot per account and lets them log in one after another."""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Callable, List

from .accounts import load_accounts
from .bot import Bot
from .config import Config
from .playtime import PlaytimeLog
from .sequencer import LoginSequencer, RelogQueue
from .types import LoginRecord

logger = logging.getLogger(__name__)


class Controller:
    def __init__(self, config: Config, accounts_file: Path, bot_factory: Callable[..., Bot] = Bot):
        self.config = config
        self.accounts_file = Path(accounts_file)
        self.bot_factory = bot_factory
        self.sequencer = LoginSequencer(stall_timeout=config.stall_timeout)
        self.relog_queue = RelogQueue()
        self.playtime = PlaytimeLog(Path(config.playtime_file))
        self.bots: List[Bot] = []
        self.starters: List[asyncio.Task] = []

    async def start(self) -> List[asyncio.Task]:
        """Load accounts and schedule a staggered, gated start for each of them.

        Raises AccountsFileMissing before anything is scheduled.
        """
        accounts = load_accounts(self.accounts_file)
        self.sequencer.total = len(accounts)
        loop = asyncio.get_running_loop()
        for index, record in enumerate(accounts.values()):
            t = loop.create_task(self._start_account(index, record), name=f"start-{record.account_name}")
            self.starters.append(t)
        return self.starters

    async def _start_account(self, index: int, record: LoginRecord) -> None:
        await asyncio.sleep(index * self.config.login_delay)
        await self.sequencer.wait_for_turn(index)
        try:
            bot = self.bot_factory(
                record,
                index,
                record.proxy,
                sequencer=self.sequencer,
                relog_queue=self.relog_queue,
                config=self.config,
                playtime=self.playtime,
            )
            bot.login()
        except Exception as e:
            logger.exception("Failed to initialize bot for account at index %d", index)
            self.sequencer.stall(index, f"{record.account_name}: {e}")
            return
        self.bots.append(bot)

    def flush_playtime(self) -> None:
        for bot in self.bots:
            try:
                bot.log_playtime_to_file()
            except Exception:
                logger.exception("Error logging playtime for %s", bot.name)

    async def close(self) -> None:
        for t in self.starters:
            t.cancel()
        await asyncio.gather(*self.starters, return_exceptions=True)
        await asyncio.gather(*(b.close() for b in self.bots), return_exceptions=True)

    async def run(self) -> None:
        await self.start()
        try:
            # runs until cancelled (Ctrl+C)
            await asyncio.Event().wait()
        finally:
            await self.close()
