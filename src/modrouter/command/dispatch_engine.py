"""
Command authorization and dispatch.

The engine takes one :class:`RawMessage` at a time through the following
states and returns the terminal one as a :class:`DispatchResult`:

    received -> tier resolved -> (filtered | admitted) -> matched
             -> validated -> executed
             -> rejected
             -> ignored

- Messages sent by the engine's own identity are ignored before anything else.
- Senders below moderator pass through the content filter first; a blocked
  message is deleted without a reply.
- Non-commands and commands the sender's tier may not run are ignored
  silently, so unauthorized callers learn nothing about which commands exist.
- Validation failures are answered with a templated reply.
- Successful commands call the moderation action or send an informational
  reply.

The engine keeps no state between messages and never retries; collaborators
are fire-and-forget.
"""

from __future__ import annotations

import datetime
from typing import Callable, Dict, Optional

from modrouter.command import replies
from modrouter.command.argument_extractor import extract_arguments
from modrouter.command.command_matcher import match_command
from modrouter.command.duration_parser import parse_duration
from modrouter.command.interfaces import ContentFilter, ModerationActions, ReplySender
from modrouter.command.privilege_resolver import (
    PrivilegeResolver,
    is_permitted,
    requires_content_filter,
)
from modrouter.configuration.engine_config import EngineConfig
from modrouter.datatypes.dispatch_datatypes import DispatchOutcome, DispatchResult, ValidationFailure
from modrouter.datatypes.message_datatypes import CommandArguments, RawMessage
from modrouter.datatypes.privilege_datatypes import CommandKind, PrivilegeTier
from modrouter.util.logger import get_logger

logger = get_logger("dispatch_engine")

# Plural nouns used in the missing-user-ids reply
ACTION_NOUNS: Dict[CommandKind, str] = {
    CommandKind.BAN: "bans",
    CommandKind.UNBAN: "unbans",
    CommandKind.MUTE: "mutes",
    CommandKind.UNMUTE: "unmutes",
}

Handler = Callable[[RawMessage, PrivilegeTier, datetime.datetime], DispatchResult]


def utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class DispatchEngine:
    """
    Route inbound messages to moderation actions and replies.

    Args:
        self_id: User id of the bot itself; its own messages are ignored.
        resolver: Maps a sender's roles to a privilege tier.
        content_filter: Gate consulted for senders below moderator.
        actions: Executes ban/unban/mute/unmute.
        reply_sender: Sends replies and deletes filtered messages.
        config: Application details used by the help and about replies.
        clock: Source of "now" when dispatch() is not given one.
    """

    def __init__(
        self,
        *,
        self_id: str,
        resolver: PrivilegeResolver,
        content_filter: ContentFilter,
        actions: ModerationActions,
        reply_sender: ReplySender,
        config: EngineConfig,
        clock: Callable[[], datetime.datetime] = utc_now,
    ) -> None:
        self._self_id = str(self_id)
        self._resolver = resolver
        self._content_filter = content_filter
        self._actions = actions
        self._replies = reply_sender
        self._config = config
        self._clock = clock
        self._handlers: Dict[CommandKind, Handler] = {
            CommandKind.HELP: self._handle_help,
            CommandKind.ABOUT: self._handle_about,
            CommandKind.BAN: self._handle_ban,
            CommandKind.UNBAN: self._handle_unban,
            CommandKind.WARN: self._handle_warn,
            CommandKind.MUTE: self._handle_mute,
            CommandKind.UNMUTE: self._handle_unmute,
            CommandKind.UNKNOWN: self._handle_unknown,
        }

    @property
    def config(self) -> EngineConfig:
        return self._config

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def dispatch(self, message: RawMessage, now: Optional[datetime.datetime] = None) -> DispatchResult:
        """Process one message to a terminal state.

        Args:
            message: The inbound message.
            now: Reference instant for mute expiries; defaults to the clock.

        Returns:
            DispatchResult: The terminal outcome with the resolved tier,
            matched kind and validation failure where applicable.
        """
        if message.author.user_id == self._self_id:
            return DispatchResult(DispatchOutcome.IGNORED)

        tier = self._resolver.resolve_tier(message.roles)
        logger.debug("[DISPATCH] Message from %s resolved to tier '%s'", message.author.display_name, tier)

        if requires_content_filter(tier) and not self._content_filter.allow():
            logger.debug("[DISPATCH] Content filter blocked message from %s. Deleting.", message.author.display_name)
            self._replies.delete(message)
            return DispatchResult(DispatchOutcome.IGNORED, tier=tier)

        kind = match_command(message.text)
        if kind is None:
            return DispatchResult(DispatchOutcome.IGNORED, tier=tier)

        if not is_permitted(tier, kind):
            logger.debug(
                "[DISPATCH] Ignoring '%s' from %s: tier '%s' may not run it",
                kind, message.author.display_name, tier,
            )
            return DispatchResult(DispatchOutcome.IGNORED, tier=tier, kind=kind)

        logger.info(
            "[DISPATCH] Command received from authorized user %s: %s",
            message.author.display_name, message.text,
        )
        return self._handlers[kind](message, tier, now or self._clock())

    # ------------------------------------------------------------------
    # Informational commands
    # ------------------------------------------------------------------

    def _handle_help(self, message: RawMessage, tier: PrivilegeTier, now: datetime.datetime) -> DispatchResult:
        self._replies.send(message.channel, replies.help_reply(message.author.mention, self._config))
        return DispatchResult(DispatchOutcome.EXECUTED, tier=tier, kind=CommandKind.HELP)

    def _handle_about(self, message: RawMessage, tier: PrivilegeTier, now: datetime.datetime) -> DispatchResult:
        self._replies.send(message.channel, replies.about_reply(message.author.mention, self._config))
        return DispatchResult(DispatchOutcome.EXECUTED, tier=tier, kind=CommandKind.ABOUT)

    def _handle_unknown(self, message: RawMessage, tier: PrivilegeTier, now: datetime.datetime) -> DispatchResult:
        self._replies.send(message.channel, replies.unknown_command_reply(message.author.mention))
        return DispatchResult(DispatchOutcome.EXECUTED, tier=tier, kind=CommandKind.UNKNOWN)

    def _handle_warn(self, message: RawMessage, tier: PrivilegeTier, now: datetime.datetime) -> DispatchResult:
        # TODO: send the warning text to each user by DM once a warn action exists on ModerationActions.
        logger.info("[DISPATCH] Warn from %s recognized; warnings are not implemented yet.", message.author.display_name)
        return DispatchResult(DispatchOutcome.EXECUTED, tier=tier, kind=CommandKind.WARN)

    # ------------------------------------------------------------------
    # Moderation commands
    # ------------------------------------------------------------------

    def _handle_ban(self, message: RawMessage, tier: PrivilegeTier, now: datetime.datetime) -> DispatchResult:
        args = extract_arguments(CommandKind.BAN, message.text)
        rejected = self._check_users(message, tier, CommandKind.BAN, args)
        if rejected:
            return rejected

        self._actions.ban(message.channel, message.author, args.users, args.reason)
        return DispatchResult(DispatchOutcome.EXECUTED, tier=tier, kind=CommandKind.BAN)

    def _handle_unban(self, message: RawMessage, tier: PrivilegeTier, now: datetime.datetime) -> DispatchResult:
        args = extract_arguments(CommandKind.UNBAN, message.text)
        rejected = self._check_users(message, tier, CommandKind.UNBAN, args)
        if rejected:
            return rejected

        self._actions.unban(message.channel, message.author, args.users)
        return DispatchResult(DispatchOutcome.EXECUTED, tier=tier, kind=CommandKind.UNBAN)

    def _handle_mute(self, message: RawMessage, tier: PrivilegeTier, now: datetime.datetime) -> DispatchResult:
        args = extract_arguments(CommandKind.MUTE, message.text)
        rejected = self._check_users(message, tier, CommandKind.MUTE, args)
        if rejected:
            return rejected

        if not args.reason:
            return self._reject(
                message, tier, CommandKind.MUTE, ValidationFailure.EMPTY_REASON,
                replies.missing_evidence_reply(message.author.mention),
            )

        expiry = parse_duration(args.duration, now)
        if expiry is None:
            return self._reject(
                message, tier, CommandKind.MUTE, ValidationFailure.INVALID_DURATION,
                replies.invalid_duration_reply(message.author.mention),
            )

        self._actions.mute(message.channel, message.author, args.users, expiry, args.reason)
        return DispatchResult(DispatchOutcome.EXECUTED, tier=tier, kind=CommandKind.MUTE)

    def _handle_unmute(self, message: RawMessage, tier: PrivilegeTier, now: datetime.datetime) -> DispatchResult:
        args = extract_arguments(CommandKind.UNMUTE, message.text)
        rejected = self._check_users(message, tier, CommandKind.UNMUTE, args)
        if rejected:
            return rejected

        self._actions.unmute(message.channel, message.author, args.users)
        return DispatchResult(DispatchOutcome.EXECUTED, tier=tier, kind=CommandKind.UNMUTE)

    # ------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------

    def _check_users(
        self,
        message: RawMessage,
        tier: PrivilegeTier,
        kind: CommandKind,
        args: CommandArguments,
    ) -> Optional[DispatchResult]:
        if args.users:
            return None
        return self._reject(
            message, tier, kind, ValidationFailure.EMPTY_USER_LIST,
            replies.missing_users_reply(message.author.mention, ACTION_NOUNS[kind]),
        )

    def _reject(
        self,
        message: RawMessage,
        tier: PrivilegeTier,
        kind: CommandKind,
        failure: ValidationFailure,
        text: str,
    ) -> DispatchResult:
        logger.debug("[DISPATCH] Rejected '%s' from %s: %s", kind, message.author.display_name, failure)
        self._replies.send(message.channel, text)
        return DispatchResult(DispatchOutcome.REJECTED, tier=tier, kind=kind, failure=failure)
