"""Tests for the py-cord collaborator implementations."""

import datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from modrouter.bot.discord_gateway import (
    MAX_TIMEOUT,
    AllowAllContentFilter,
    DiscordModerationActions,
    DiscordReplySender,
    audit_reason,
    format_report,
    raw_message_from_discord,
)
from modrouter.datatypes.message_datatypes import Actor, RawMessage

ACTOR = Actor(user_id="1", display_name="alice", mention="<@1>")


def http_error(cls=discord.HTTPException, status=400, text="Bad Request"):
    return cls(SimpleNamespace(status=status, reason=text), text)


def make_channel(guild=None):
    channel = MagicMock()
    channel.id = 10
    channel.send = AsyncMock()
    channel.guild = guild or make_guild()
    return channel


def make_guild():
    guild = MagicMock()
    guild.id = 20
    guild.ban = AsyncMock()
    guild.unban = AsyncMock()
    guild.fetch_member = AsyncMock()
    guild.get_member = MagicMock(return_value=None)
    return guild


def make_member():
    member = MagicMock()
    member.timeout = AsyncMock()
    member.remove_timeout = AsyncMock()
    return member


def test_raw_message_from_discord_collects_role_ids_and_names():
    author = SimpleNamespace(
        id=1,
        display_name="alice",
        mention="<@1>",
        roles=[SimpleNamespace(id=100, name="@everyone"), SimpleNamespace(id=200, name="Moderator")],
    )
    message = SimpleNamespace(author=author, content="-m 5 1d proof", channel="chan")

    raw = raw_message_from_discord(message)  # type: ignore

    assert raw.author == ACTOR
    assert raw.roles == frozenset({"100", "@everyone", "200", "Moderator"})
    assert raw.text == "-m 5 1d proof"
    assert raw.channel == "chan"
    assert raw.handle is message


def test_raw_message_from_user_without_roles():
    author = SimpleNamespace(id=2, display_name="bob", mention="<@2>")
    message = SimpleNamespace(author=author, content="hi", channel=None)

    assert raw_message_from_discord(message).roles == frozenset()  # type: ignore


def test_audit_reason_and_report_formatting():
    assert audit_reason(ACTOR, "spam ") == "[alice] spam"
    assert len(audit_reason(ACTOR, "x" * 600)) == 512

    report = format_report(ACTOR, "Banned", ["1", "2"], ["3"], "Reason: spam")
    assert report == "<@1> Banned: 1, 2\nReason: spam\nFailed: 3"
    assert format_report(ACTOR, "Unbanned", [], ["9"]) == "<@1> Unbanned: (none)\nFailed: 9"


def test_allow_all_content_filter():
    assert AllowAllContentFilter().allow() is True


class TestReplySender:

    @pytest.mark.asyncio
    async def test_send_schedules_channel_send(self):
        sender = DiscordReplySender()
        channel = make_channel()

        sender.send(channel, "hello")
        assert sender.pending == 1
        await sender.shutdown()

        channel.send.assert_awaited_once_with("hello")

    def test_send_without_running_loop_is_dropped(self):
        sender = DiscordReplySender()
        channel = make_channel()

        sender.send(channel, "hello")

        assert sender.pending == 0

    @pytest.mark.asyncio
    async def test_failed_send_is_logged_not_raised(self):
        sender = DiscordReplySender()
        channel = make_channel()
        channel.send.side_effect = http_error()

        sender.send(channel, "hello")
        await sender.shutdown()

        assert sender.pending == 0

    @pytest.mark.asyncio
    async def test_delete_uses_platform_handle(self):
        sender = DiscordReplySender()
        handle = MagicMock()
        handle.delete = AsyncMock()
        message = RawMessage(author=ACTOR, roles=frozenset(), text="spam", channel=None, handle=handle)

        sender.delete(message)
        await sender.shutdown()

        handle.delete.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_of_already_deleted_message(self):
        sender = DiscordReplySender()
        handle = MagicMock()
        handle.delete = AsyncMock(side_effect=http_error(discord.NotFound, 404, "Unknown Message"))
        message = RawMessage(author=ACTOR, roles=frozenset(), text="spam", channel=None, handle=handle)

        sender.delete(message)
        await sender.shutdown()

        handle.delete.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_without_handle_is_skipped(self):
        sender = DiscordReplySender()
        message = RawMessage(author=ACTOR, roles=frozenset(), text="spam", channel=None)

        sender.delete(message)

        assert sender.pending == 0


class TestModerationActions:

    @pytest.mark.asyncio
    async def test_ban_reports_successes_and_failures(self):
        actions = DiscordModerationActions(MagicMock())
        channel = make_channel()

        actions.ban(channel, ACTOR, ["11", "not-an-id"], "spam ")
        await actions.shutdown()

        channel.guild.ban.assert_awaited_once()
        banned, = channel.guild.ban.await_args.args
        assert banned.id == 11
        assert channel.guild.ban.await_args.kwargs["reason"] == "[alice] spam"
        report = channel.send.await_args.args[0]
        assert report.startswith("<@1> Banned: 11")
        assert "Failed: not-an-id" in report

    @pytest.mark.asyncio
    async def test_ban_http_failure_is_reported(self):
        actions = DiscordModerationActions(MagicMock())
        channel = make_channel()
        channel.guild.ban.side_effect = http_error(discord.Forbidden, 403, "Missing Permissions")

        actions.ban(channel, ACTOR, ["11"], "(none)")
        await actions.shutdown()

        report = channel.send.await_args.args[0]
        assert "Banned: (none)" in report
        assert "Failed: 11" in report

    @pytest.mark.asyncio
    async def test_unban(self):
        actions = DiscordModerationActions(MagicMock())
        channel = make_channel()

        actions.unban(channel, ACTOR, ["11", "12"])
        await actions.shutdown()

        assert channel.guild.unban.await_count == 2
        assert channel.send.await_args.args[0] == "<@1> Unbanned: 11, 12"

    @pytest.mark.asyncio
    async def test_mute_uses_cached_member(self):
        actions = DiscordModerationActions(MagicMock())
        channel = make_channel()
        member = make_member()
        channel.guild.get_member.return_value = member
        expiry = datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(days=1)

        actions.mute(channel, ACTOR, ["11"], expiry, "proof ")
        await actions.shutdown()

        member.timeout.assert_awaited_once_with(expiry, reason="[alice] proof")
        channel.guild.fetch_member.assert_not_awaited()
        report = channel.send.await_args.args[0]
        assert report.startswith("<@1> Muted: 11")
        assert "Evidence: proof" in report

    @pytest.mark.asyncio
    async def test_mute_fetches_uncached_member_and_reports_missing(self):
        actions = DiscordModerationActions(MagicMock())
        channel = make_channel()
        channel.guild.fetch_member.side_effect = http_error(discord.NotFound, 404, "Unknown Member")
        expiry = datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(hours=1)

        actions.mute(channel, ACTOR, ["11"], expiry, "proof ")
        await actions.shutdown()

        channel.guild.fetch_member.assert_awaited_once_with(11)
        assert "Failed: 11" in channel.send.await_args.args[0]

    @pytest.mark.asyncio
    async def test_mute_expiry_is_clamped(self):
        actions = DiscordModerationActions(MagicMock())
        channel = make_channel()
        member = make_member()
        channel.guild.get_member.return_value = member
        now = datetime.datetime.now(datetime.timezone.utc)

        actions.mute(channel, ACTOR, ["11"], now + datetime.timedelta(days=60), "proof ")
        await actions.shutdown()

        until = member.timeout.await_args.args[0]
        assert until <= datetime.datetime.now(datetime.timezone.utc) + MAX_TIMEOUT
        assert until > now + datetime.timedelta(days=27)

    @pytest.mark.asyncio
    async def test_unmute(self):
        actions = DiscordModerationActions(MagicMock())
        channel = make_channel()
        member = make_member()
        channel.guild.get_member.return_value = member

        actions.unmute(channel, ACTOR, ["11"])
        await actions.shutdown()

        member.remove_timeout.assert_awaited_once_with(reason="[alice] unmute")
        assert channel.send.await_args.args[0] == "<@1> Unmuted: 11"

    @pytest.mark.asyncio
    async def test_reports_go_to_configured_commands_channel(self):
        report_channel = make_channel()
        bot = MagicMock()
        bot.get_channel.return_value = report_channel
        actions = DiscordModerationActions(bot, commands_channel_id=555)
        channel = make_channel()

        actions.unban(channel, ACTOR, ["11"])
        await actions.shutdown()

        bot.get_channel.assert_called_with(555)
        report_channel.send.assert_awaited_once()
        channel.send.assert_not_awaited()

    def test_missing_commands_channel_falls_back_to_origin(self):
        bot = MagicMock()
        bot.get_channel.return_value = None
        actions = DiscordModerationActions(bot, commands_channel_id=555)
        channel = make_channel()

        assert actions.report_channel(channel) is channel
