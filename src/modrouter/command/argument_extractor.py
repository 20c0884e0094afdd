"""
Argument extraction for moderation commands.

Commands are split on single spaces, with index 0 holding the command token:

    -b   users [reason...]
    -ub  users
    -m   users duration reason...
    -um  users

Positions missing from a truncated command come back as empty strings so a
short message turns into a validation failure instead of an IndexError.
"""

from __future__ import annotations

from typing import Callable, Dict, List

from modrouter.datatypes.message_datatypes import CommandArguments
from modrouter.datatypes.privilege_datatypes import CommandKind

BAN_REASON_DEFAULT = "(none)"


def split_fields(text: str, count: int) -> List[str]:
    """Split ``text`` on single spaces into exactly ``count`` fields.

    The last field keeps the unsplit remainder of the text. Missing fields are
    padded with empty strings.
    """
    parts = text.split(" ", count - 1)
    return parts + [""] * (count - len(parts))


def parse_user_ids(token: str) -> List[str]:
    """Split a comma-separated id list, dropping blanks and duplicates.

    First-occurrence order is kept: ``"5,3,5,3"`` gives ``["5", "3"]``.
    """
    return list(dict.fromkeys(part for part in token.split(",") if part))


def join_reason(remainder: str) -> str:
    """Rebuild the free-text reason from the tail of a command.

    The text is kept as written and closed with one trailing space. A tail
    with no visible text yields an empty string.
    """
    if not remainder.strip():
        return ""
    return remainder + " "


def extract_ban(text: str) -> CommandArguments:
    _, users, remainder = split_fields(text, 3)
    return CommandArguments(
        users=parse_user_ids(users),
        reason=join_reason(remainder) or BAN_REASON_DEFAULT,
    )


def extract_unban(text: str) -> CommandArguments:
    _, users = split_fields(text, 3)[:2]
    return CommandArguments(users=parse_user_ids(users))


def extract_mute(text: str) -> CommandArguments:
    _, users, duration, remainder = split_fields(text, 4)
    return CommandArguments(
        users=parse_user_ids(users),
        duration=duration,
        reason=join_reason(remainder),
    )


def extract_unmute(text: str) -> CommandArguments:
    _, users = split_fields(text, 3)[:2]
    return CommandArguments(users=parse_user_ids(users))


EXTRACTORS: Dict[CommandKind, Callable[[str], CommandArguments]] = {
    CommandKind.BAN: extract_ban,
    CommandKind.UNBAN: extract_unban,
    CommandKind.MUTE: extract_mute,
    CommandKind.UNMUTE: extract_unmute,
}


def extract_arguments(kind: CommandKind, text: str) -> CommandArguments:
    """Extract the arguments of ``kind`` from ``text``.

    Raises:
        KeyError: If ``kind`` takes no arguments.
    """
    return EXTRACTORS[kind](text)
