"""
discord_gateway.py
==================

Discord implementations of the collaborators used by the dispatch engine.

The engine calls these synchronously and never waits for the result, so every
Discord request is scheduled as a task on the running loop. Failures are
caught per user id, logged, and listed in the report posted after each
action.
"""

from __future__ import annotations

import asyncio
import datetime
from typing import Any, Coroutine, List, Optional, Sequence, Set

import discord

from modrouter.datatypes.message_datatypes import Actor, RawMessage
from modrouter.util.logger import get_logger

logger = get_logger("discord_gateway")

# Discord rejects timeouts further than 28 days in the future
MAX_TIMEOUT = datetime.timedelta(days=28)

# Audit log reasons are capped by the API
MAX_AUDIT_REASON = 512


def raw_message_from_discord(message: discord.Message) -> RawMessage:
    """Build a RawMessage from a py-cord message.

    The role set holds both the id and the name of every role the author has,
    so configuration may refer to staff roles either way.
    """
    author = message.author
    roles: Set[str] = set()
    for role in getattr(author, "roles", None) or []:
        roles.add(str(role.id))
        roles.add(role.name)

    return RawMessage(
        author=Actor(
            user_id=str(author.id),
            display_name=author.display_name,
            mention=author.mention,
        ),
        roles=frozenset(roles),
        text=message.content,
        channel=message.channel,
        handle=message,
    )


def audit_reason(actor: Actor, reason: str) -> str:
    """Prefix the reason with the moderator's name for the audit log."""
    return f"[{actor.display_name}] {reason.strip()}"[:MAX_AUDIT_REASON]


def format_report(actor: Actor, verb: str, succeeded: Sequence[str], failed: Sequence[str], detail: str = "") -> str:
    """Summarise an action for the report channel."""
    lines = [f"{actor.mention} {verb}: {', '.join(succeeded) if succeeded else '(none)'}"]
    if detail:
        lines.append(detail)
    if failed:
        lines.append(f"Failed: {', '.join(failed)}")
    return "\n".join(lines)


class BackgroundScheduler:
    """Fire-and-forget task scheduling with strong references to pending tasks."""

    def __init__(self) -> None:
        self._active_tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._active_tasks)

    def _schedule(self, coro: Coroutine[Any, Any, Any], description: str) -> Optional[asyncio.Task]:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("[GATEWAY] Cannot %s: no running event loop", description)
            coro.close()
            return None

        task = loop.create_task(coro)
        self._active_tasks.add(task)

        def _cleanup(completed: asyncio.Task) -> None:
            self._active_tasks.discard(completed)
            if completed.cancelled():
                return
            exc = completed.exception()
            if exc is not None:
                logger.error("[GATEWAY] Failed to %s", description, exc_info=exc)

        task.add_done_callback(_cleanup)
        return task

    async def shutdown(self) -> None:
        """Await any pending tasks during shutdown."""
        if self._active_tasks:
            await asyncio.gather(*list(self._active_tasks), return_exceptions=True)


class AllowAllContentFilter:
    """Content filter that lets every message through."""

    def allow(self) -> bool:
        return True


class DiscordReplySender(BackgroundScheduler):
    """Send replies to, and delete messages from, Discord channels."""

    def send(self, channel: discord.abc.Messageable, text: str) -> None:
        self._schedule(channel.send(text), f"send reply in channel {getattr(channel, 'id', '?')}")

    def delete(self, message: RawMessage) -> None:
        if message.handle is None:
            logger.warning("[GATEWAY] Cannot delete message from %s: no platform handle", message.author.display_name)
            return
        self._schedule(self._delete(message.handle), f"delete message from {message.author.display_name}")

    async def _delete(self, handle: discord.Message) -> None:
        try:
            await handle.delete()
        except discord.NotFound:
            logger.debug("[GATEWAY] Message %s was already deleted", handle.id)
        except discord.HTTPException as exc:
            logger.warning("[GATEWAY] Failed to delete message %s: %s", handle.id, exc)


class DiscordModerationActions(BackgroundScheduler):
    """
    Apply bans and timeouts through the Discord API.

    Args:
        bot: Bot used to resolve the report channel.
        commands_channel_id: Channel that receives action reports. When None
            (or not found) the report goes to the channel of the command.
    """

    def __init__(self, bot: discord.Bot, commands_channel_id: Optional[int] = None) -> None:
        super().__init__()
        self._bot = bot
        self._commands_channel_id = commands_channel_id

    # ------------------------------------------------------------------
    # Collaborator API
    # ------------------------------------------------------------------

    def ban(self, channel: discord.TextChannel, actor: Actor, user_ids: Sequence[str], reason: str) -> None:
        self._schedule(self._ban(channel, actor, list(user_ids), reason), f"ban {', '.join(user_ids)}")

    def unban(self, channel: discord.TextChannel, actor: Actor, user_ids: Sequence[str]) -> None:
        self._schedule(self._unban(channel, actor, list(user_ids)), f"unban {', '.join(user_ids)}")

    def mute(
        self,
        channel: discord.TextChannel,
        actor: Actor,
        user_ids: Sequence[str],
        expiry: datetime.datetime,
        reason: str,
    ) -> None:
        self._schedule(self._mute(channel, actor, list(user_ids), expiry, reason), f"mute {', '.join(user_ids)}")

    def unmute(self, channel: discord.TextChannel, actor: Actor, user_ids: Sequence[str]) -> None:
        self._schedule(self._unmute(channel, actor, list(user_ids)), f"unmute {', '.join(user_ids)}")

    # ------------------------------------------------------------------
    # Discord requests
    # ------------------------------------------------------------------

    async def _ban(self, channel: discord.TextChannel, actor: Actor, user_ids: List[str], reason: str) -> None:
        guild = channel.guild
        succeeded: List[str] = []
        failed: List[str] = []

        for user_id in user_ids:
            try:
                await guild.ban(discord.Object(id=int(user_id)), reason=audit_reason(actor, reason))
            except (ValueError, discord.HTTPException) as exc:
                logger.warning("[GATEWAY] Failed to ban %s in guild %s: %s", user_id, guild.id, exc)
                failed.append(user_id)
            else:
                logger.info("[GATEWAY] %s banned %s in guild %s", actor.display_name, user_id, guild.id)
                succeeded.append(user_id)

        await self._report(channel, format_report(actor, "Banned", succeeded, failed, f"Reason: {reason.strip()}"))

    async def _unban(self, channel: discord.TextChannel, actor: Actor, user_ids: List[str]) -> None:
        guild = channel.guild
        succeeded: List[str] = []
        failed: List[str] = []

        for user_id in user_ids:
            try:
                await guild.unban(discord.Object(id=int(user_id)), reason=audit_reason(actor, "unban"))
            except (ValueError, discord.HTTPException) as exc:
                logger.warning("[GATEWAY] Failed to unban %s in guild %s: %s", user_id, guild.id, exc)
                failed.append(user_id)
            else:
                logger.info("[GATEWAY] %s unbanned %s in guild %s", actor.display_name, user_id, guild.id)
                succeeded.append(user_id)

        await self._report(channel, format_report(actor, "Unbanned", succeeded, failed))

    async def _mute(
        self,
        channel: discord.TextChannel,
        actor: Actor,
        user_ids: List[str],
        expiry: datetime.datetime,
        reason: str,
    ) -> None:
        guild = channel.guild
        latest = datetime.datetime.now(datetime.timezone.utc) + MAX_TIMEOUT
        if expiry > latest:
            logger.warning("[GATEWAY] Mute expiry %s exceeds Discord's limit; clamping to %s", expiry, latest)
            expiry = latest

        succeeded: List[str] = []
        failed: List[str] = []

        for user_id in user_ids:
            try:
                member = await self._resolve_member(guild, int(user_id))
                await member.timeout(expiry, reason=audit_reason(actor, reason))
            except (ValueError, discord.HTTPException) as exc:
                logger.warning("[GATEWAY] Failed to mute %s in guild %s: %s", user_id, guild.id, exc)
                failed.append(user_id)
            else:
                logger.info("[GATEWAY] %s muted %s in guild %s until %s", actor.display_name, user_id, guild.id, expiry)
                succeeded.append(user_id)

        detail = f"Until: {discord.utils.format_dt(expiry)}\nEvidence: {reason.strip()}"
        await self._report(channel, format_report(actor, "Muted", succeeded, failed, detail))

    async def _unmute(self, channel: discord.TextChannel, actor: Actor, user_ids: List[str]) -> None:
        guild = channel.guild
        succeeded: List[str] = []
        failed: List[str] = []

        for user_id in user_ids:
            try:
                member = await self._resolve_member(guild, int(user_id))
                await member.remove_timeout(reason=audit_reason(actor, "unmute"))
            except (ValueError, discord.HTTPException) as exc:
                logger.warning("[GATEWAY] Failed to unmute %s in guild %s: %s", user_id, guild.id, exc)
                failed.append(user_id)
            else:
                logger.info("[GATEWAY] %s unmuted %s in guild %s", actor.display_name, user_id, guild.id)
                succeeded.append(user_id)

        await self._report(channel, format_report(actor, "Unmuted", succeeded, failed))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    async def _resolve_member(guild: discord.Guild, user_id: int) -> discord.Member:
        """Return the member from cache, falling back to the API (raises NotFound)."""
        member = guild.get_member(user_id)
        if member is None:
            member = await guild.fetch_member(user_id)
        return member

    def report_channel(self, channel: discord.TextChannel) -> discord.abc.Messageable:
        if self._commands_channel_id is not None:
            configured = self._bot.get_channel(self._commands_channel_id)
            if configured is not None:
                return configured
            logger.warning("[GATEWAY] Commands channel %s not found; reporting in place", self._commands_channel_id)
        return channel

    async def _report(self, channel: discord.TextChannel, text: str) -> None:
        try:
            await self.report_channel(channel).send(text)
        except discord.HTTPException as exc:
            logger.warning("[GATEWAY] Failed to post moderation report: %s", exc)
