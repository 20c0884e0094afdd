"""
Command grammar.

A message is a command when its first space-separated token is a hyphen
followed by letters or ``?`` (``-b``, ``-um``, ``-xyz``), or when the whole
message is exactly one of the textual aliases ``help`` / ``about`` in any
case, with no surrounding whitespace.
Hyphen tokens are matched case-sensitively against the first token only, so
each command message maps to exactly one kind. Grammar-valid tokens that name
no command map to :attr:`CommandKind.UNKNOWN`.
"""

from __future__ import annotations

import re
from typing import Dict, Optional

from modrouter.datatypes.privilege_datatypes import CommandKind

GENERIC_PREFIX = re.compile(r"^-[A-Za-z?]+(?: |$)")
TEXT_ALIAS = re.compile(r"(?P<alias>help|about)", re.IGNORECASE)

COMMAND_TOKENS: Dict[str, CommandKind] = {
    "-?": CommandKind.HELP,
    "-b": CommandKind.BAN,
    "-ub": CommandKind.UNBAN,
    "-w": CommandKind.WARN,
    "-m": CommandKind.MUTE,
    "-um": CommandKind.UNMUTE,
}

TEXT_ALIASES: Dict[str, CommandKind] = {
    "help": CommandKind.HELP,
    "about": CommandKind.ABOUT,
}


def is_command(text: str) -> bool:
    """Return True if ``text`` matches the generic command grammar."""
    return bool(GENERIC_PREFIX.match(text) or TEXT_ALIAS.fullmatch(text))


def match_command(text: str) -> Optional[CommandKind]:
    """Classify ``text`` as a command kind.

    Returns:
        Optional[CommandKind]: The matched kind, or None when ``text`` is not
        a command at all.
    """
    if not is_command(text):
        return None

    alias = TEXT_ALIAS.fullmatch(text)
    if alias:
        return TEXT_ALIASES[alias.group("alias").lower()]

    token = text.split(" ", 1)[0]
    return COMMAND_TOKENS.get(token, CommandKind.UNKNOWN)
