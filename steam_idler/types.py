from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

@dataclass
class LoginRecord:
    account_name: str
    password: str
    shared_secret: Optional[str] = None
    # filled in by the bot once a Steam Guard code was generated or typed in
    steam_guard_code: Optional[str] = None
    proxy: Optional[str] = None
