"""Command listener Cog for Modrouter.

This cog has exactly ONE responsibility: listen to Discord message events and
hand guild messages to the DispatchEngine.

Authorization, parsing and validation live in :mod:`modrouter.command`,
NOT here.
"""

from typing import Optional

import discord
from discord.ext import commands

from modrouter.bot.discord_gateway import (
    AllowAllContentFilter,
    DiscordModerationActions,
    DiscordReplySender,
    raw_message_from_discord,
)
from modrouter.command.dispatch_engine import DispatchEngine
from modrouter.command.privilege_resolver import PrivilegeResolver
from modrouter.configuration.app_configuration import AppConfig
from modrouter.datatypes.dispatch_datatypes import DispatchResult
from modrouter.util.logger import get_logger

logger = get_logger("command_listener_cog")


class CommandListenerCog(commands.Cog):
    """
    Thin event listener that forwards guild messages to the dispatch engine.

    The engine needs the bot's own user id, which is only known after login,
    so it is built on the first message.

    Parameters
    ----------
    bot:
        Discord bot instance.
    config:
        Application configuration supplying roles, app details and the
        commands channel.
    """

    def __init__(self, bot: discord.Bot, config: AppConfig) -> None:
        self.bot = bot
        self._config = config
        self._engine: Optional[DispatchEngine] = None
        self.reply_sender = DiscordReplySender()
        self.actions = DiscordModerationActions(bot, config.commands_channel_id)
        logger.info("[COMMAND LISTENER] Command listener cog loaded")

    @property
    def engine(self) -> DispatchEngine:
        if self._engine is None:
            self._engine = DispatchEngine(
                self_id=str(self.bot.user.id),
                resolver=PrivilegeResolver(self._config.tier_roles),
                content_filter=AllowAllContentFilter(),
                actions=self.actions,
                reply_sender=self.reply_sender,
                config=self._config.engine_config,
            )
        return self._engine

    # ------------------------------------------------------------------
    # Event handlers — keep these as small as possible
    # ------------------------------------------------------------------

    @commands.Cog.listener(name="on_message")
    async def on_message(self, message: discord.Message) -> Optional[DispatchResult]:
        """Dispatch guild messages; direct messages carry no roles and are skipped."""
        if message.guild is None:
            return None

        result = self.engine.dispatch(raw_message_from_discord(message))
        if result.executed:
            logger.info("[COMMAND LISTENER] Executed %s for %s (%s)", result.kind, message.author, result.tier)
        else:
            logger.debug("[COMMAND LISTENER] Message %s -> %s", message.id, result.outcome)
        return result

    def cog_unload(self) -> None:
        logger.info("[COMMAND LISTENER] Command listener cog unloaded")


def setup(bot: discord.Bot, config: AppConfig) -> None:
    """Register the CommandListenerCog with the bot."""
    bot.add_cog(CommandListenerCog(bot, config))
