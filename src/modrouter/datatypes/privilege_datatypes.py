"""
Privilege tiers and command kinds.

``PrivilegeTier`` is ordered so tiers compare with ``<``/``>=``; the
per-tier command sets built from it live in
:mod:`modrouter.command.privilege_resolver`.
"""

from __future__ import annotations

from enum import Enum, IntEnum


class PrivilegeTier(IntEnum):
    """Ordered staff privilege levels. Higher values are more senior."""

    NONE = -1
    TRIAL = 0
    MODERATOR = 1
    SENIOR_MODERATOR = 2
    MANAGER = 3

    def __str__(self) -> str:
        return self.name.lower()


class CommandKind(Enum):
    """Every command the router can recognize."""

    HELP = "help"
    ABOUT = "about"
    BAN = "ban"
    UNBAN = "unban"
    WARN = "warn"
    MUTE = "mute"
    UNMUTE = "unmute"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value
