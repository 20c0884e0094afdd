"""
Collaborators consumed by the dispatch engine.

All calls are fire-and-forget: implementations return immediately and handle
(and log) their own failures. The Discord implementations live in
:mod:`modrouter.bot.discord_gateway`.
"""

from __future__ import annotations

import datetime
from typing import Any, Protocol, Sequence

from modrouter.datatypes.message_datatypes import Actor, RawMessage


class ContentFilter(Protocol):
    """Spam/abuse gate consulted for the least-privileged senders."""

    def allow(self) -> bool:
        ...


class ModerationActions(Protocol):
    """Executes moderation state changes on the community platform."""

    def ban(self, channel: Any, actor: Actor, user_ids: Sequence[str], reason: str) -> None:
        ...

    def unban(self, channel: Any, actor: Actor, user_ids: Sequence[str]) -> None:
        ...

    def mute(
        self,
        channel: Any,
        actor: Actor,
        user_ids: Sequence[str],
        expiry: datetime.datetime,
        reason: str,
    ) -> None:
        ...

    def unmute(self, channel: Any, actor: Actor, user_ids: Sequence[str]) -> None:
        ...


class ReplySender(Protocol):
    """Posts text replies and removes filtered messages."""

    def send(self, channel: Any, text: str) -> None:
        ...

    def delete(self, message: RawMessage) -> None:
        ...
