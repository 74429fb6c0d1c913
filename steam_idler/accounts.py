from __future__ import annotations
from pathlib import Path
import logging

from .types import LoginRecord

logger = logging.getLogger(__name__)

DELIMITER = ";"


class AccountsFileMissing(FileNotFoundError):
    pass


def _field(parts: list[str], i: int) -> str | None:
    return (parts[i] or None) if len(parts) > i else None


def _parse_txt(text: str, name: str) -> dict[str, LoginRecord]:
    res: dict[str, LoginRecord] = {}
    for n, raw in enumerate(text.split("\n"), start=1):
        # CRLF files leave a trailing \r on whatever the last field is
        line = raw.rstrip("\r")
        if len(line) < 2:
            continue
        parts = line.split(DELIMITER)
        if len(parts) < 2:
            logger.warning('Line %d of %s is malformed: "%s"', n, name, line)
            continue
        res[parts[0]] = LoginRecord(
            account_name=parts[0],
            password=parts[1],
            shared_secret=_field(parts, 2),
            proxy=_field(parts, 3),
        )
    return res


def load_accounts(path: Path) -> dict[str, LoginRecord]:
    """Read ``accountName;password;sharedSecret;proxy`` lines into records keyed by account name."""
    logger.info("Loading logininfo from %s...", path.name)
    if not path.is_file():
        logger.error("No accounts found in %s! Aborting...", path.name)
        raise AccountsFileMissing(f"No accounts found in {path}")
    accs = _parse_txt(path.read_text(encoding="utf-8"), path.name)
    logger.info("Found %d accounts in %s.", len(accs), path.name)
    return accs


def create_sample_txt(path: Path) -> bool:
    if path.exists():
        return False
    path.write_text("user1;pass1\nuser2;pass2;sharedsecret;http://127.0.0.1:8080\n", encoding="utf-8")
    return True
