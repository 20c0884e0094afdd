"""
Inbound message and argument data structures.

Everything here lives for the handling of a single message: the gateway
builds a :class:`RawMessage`, the extractors turn its text into
:class:`CommandArguments`, and both are dropped once dispatch finishes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, FrozenSet, List


@dataclass(frozen=True, slots=True)
class Actor:
    """The user who sent a message.

    Attributes:
        user_id: Platform user id as a string.
        display_name: Name used in log lines.
        mention: Text that pings the user when placed in a reply.
    """
    user_id: str
    display_name: str
    mention: str


@dataclass(frozen=True, slots=True)
class RawMessage:
    """Immutable view of one inbound chat message.

    Attributes:
        author: Sender of the message.
        roles: Role identifiers held by the sender (ids and/or names).
        text: Raw message content.
        channel: Opaque reference to the channel the message was posted in.
        handle: Platform message object, used only to delete the message.
    """
    author: Actor
    roles: FrozenSet[str]
    text: str
    channel: Any
    handle: Any = field(default=None, compare=False, repr=False)


@dataclass(slots=True)
class CommandArguments:
    """Arguments extracted from a command's free text.

    Attributes:
        users: Distinct user ids in first-occurrence order.
        duration: Raw duration token, empty when the command has none.
        reason: Free-text reason, empty when absent unless the command supplies a default.
    """
    users: List[str] = field(default_factory=list)
    duration: str = ""
    reason: str = ""
