import asyncio
import logging
import pytest

from steam_idler import controller as ctl
from steam_idler.accounts import AccountsFileMissing
from steam_idler.config import Config


def _config(tmp_path, **kw):
    kw.setdefault("login_delay", 0.02)
    kw.setdefault("stall_timeout", 0)
    return Config(playtime_file=str(tmp_path / "playtime.json"), **kw)


def _accounts(tmp_path, *names):
    p = tmp_path / "accounts.txt"
    p.write_text("".join(f"{n};pw\n" for n in names), encoding="utf-8")
    return p


def stub_factory(created, stuck=(), broken=(), bad_flush=()):
    """Bot stand-in: logs in instantly and frees its turn unless listed in ``stuck``."""

    class StubBot:
        def __init__(self, record, index, proxy, *, sequencer, relog_queue, config, playtime):
            if record.account_name in broken:
                raise RuntimeError("cannot build bot")
            self.record = record
            self.name = record.account_name
            self.index = index
            self.proxy = proxy
            self.sequencer = sequencer
            self.turn_at_login = None
            self.flushed = 0

        def login(self):
            loop = asyncio.get_running_loop()
            self.turn_at_login = self.sequencer.current
            self.started_at = loop.time()
            created.append(self)
            if self.name not in stuck:
                self.sequencer.done(self.index)

        def log_playtime_to_file(self):
            if self.name in bad_flush:
                raise OSError("disk full")
            self.flushed += 1

        async def close(self):
            pass

    return StubBot


def test_accounts_start_in_order_after_stagger(tmp_path):
    created = []

    async def _run():
        c = ctl.Controller(_config(tmp_path), _accounts(tmp_path, "a", "b", "c", "d"), stub_factory(created))
        t0 = asyncio.get_running_loop().time()
        await asyncio.gather(*await c.start())
        return c, t0

    c, t0 = asyncio.run(_run())
    assert [b.index for b in created] == [0, 1, 2, 3]
    assert [b.name for b in c.bots] == ["a", "b", "c", "d"]
    for b in created:
        assert b.turn_at_login == b.index
        assert b.started_at - t0 >= b.index * 0.02 - 0.005
    assert c.sequencer.current == 4


def test_queue_stalls_when_turn_is_never_freed(tmp_path):
    created = []

    async def _run():
        c = ctl.Controller(_config(tmp_path), _accounts(tmp_path, "a", "b", "c"), stub_factory(created, stuck={"b"}))
        await c.start()
        await asyncio.sleep(0.2)
        assert c.sequencer.waiting == [2]
        await c.close()

    asyncio.run(_run())
    assert [b.name for b in created] == ["a", "b"]


def test_construction_failure_stalls_queue_but_flush_continues(tmp_path, caplog):
    created = []
    factory = stub_factory(created, broken={"c"}, bad_flush={"a"})

    async def _run():
        c = ctl.Controller(_config(tmp_path), _accounts(tmp_path, "a", "b", "c", "d"), factory)
        await c.start()
        await asyncio.sleep(0.2)
        await c.close()
        return c

    with caplog.at_level(logging.ERROR):
        c = asyncio.run(_run())
        c.flush_playtime()

    assert [b.name for b in c.bots] == ["a", "b"]
    assert c.sequencer.stalled_at == 2
    assert "c: cannot build bot" in c.sequencer.stall_reason
    assert "Failed to initialize bot for account at index 2" in caplog.text
    assert "1 account(s) waiting behind it will not log in" in caplog.text
    assert "Error logging playtime for a" in caplog.text
    assert c.bots[1].flushed == 1


def test_missing_accounts_file_builds_nothing(tmp_path):
    created = []

    async def _run():
        c = ctl.Controller(_config(tmp_path), tmp_path / "accounts.txt", stub_factory(created))
        with pytest.raises(AccountsFileMissing):
            await c.start()
        return c

    c = asyncio.run(_run())
    assert c.starters == []
    assert c.bots == []
    assert created == []
