"""
Reply templates sent back to the caller.

Every reply starts with the caller's mention so it pings them in busy
channels.
"""

from __future__ import annotations

from modrouter.command.duration_parser import DURATION_FORMAT
from modrouter.configuration.engine_config import EngineConfig

HELP_HINT = "For help, run -?"
MORE_HELP_HINT = "For more help, run -?"

HELP_LINES = (
    "Prefix for all commands: `-`",
    "If a command doesn't work for you, you may not have permission to run it.",
    'Help: "-?" or "help"',
    'About: "about"',
    'Warn user(s): "-w user1,user2,userN warning message"',
    f'Mute user(s): "-m user1,user2,userN {DURATION_FORMAT} evidence"',
    'Unmute user(s): "-um user1,user2,userN"',
    'Ban user(s): "-b user1,user2,userN reason (reason is optional)"',
    'Unban user(s): "-ub user1,user2,userN"',
)


def help_reply(mention: str, config: EngineConfig) -> str:
    header = f"{mention} **{config.app_name} | Help**"
    return "\n".join((header, *HELP_LINES))


def about_reply(mention: str, config: EngineConfig) -> str:
    return (
        f"{mention} **{config.app_name} | About**"
        f"\nApplication: {config.app_name}"
        f"\nVersion: {config.app_version}"
        f"\n*Collaborate: {config.project_url}*"
    )


def unknown_command_reply(mention: str) -> str:
    return f"{mention} Sorry, I don't know that command.\n*Use -? for assistance.*"


def missing_users_reply(mention: str, action: str) -> str:
    """Reply for a command that names no user ids; ``action`` is e.g. ``"bans"``."""
    return f"{mention} User IDs must be provided to execute {action}. {HELP_HINT}"


def missing_evidence_reply(mention: str) -> str:
    return f"{mention} Mutes must always include evidence. {MORE_HELP_HINT}"


def invalid_duration_reply(mention: str) -> str:
    return (
        f'{mention} Mute duration format must follow "{DURATION_FORMAT}" '
        f"(days, hours, minutes). {MORE_HELP_HINT}"
    )
