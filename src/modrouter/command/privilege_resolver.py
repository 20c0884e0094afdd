"""
Privilege tiers and the commands each tier may run.

Every tier adds a few command kinds on top of the tiers below it. The table
below lists only the additions; :data:`TIER_COMMANDS` holds the cumulative
sets, built once at import so permission checks never depend on the order
handlers are evaluated in.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import AbstractSet, Dict, FrozenSet, Mapping

from modrouter.datatypes.privilege_datatypes import CommandKind, PrivilegeTier
from modrouter.util.logger import get_logger

logger = get_logger("privilege_resolver")

TIER_ADDITIONS: Mapping[PrivilegeTier, FrozenSet[CommandKind]] = MappingProxyType({
    PrivilegeTier.NONE: frozenset({CommandKind.HELP, CommandKind.ABOUT}),
    PrivilegeTier.TRIAL: frozenset({CommandKind.UNKNOWN}),
    PrivilegeTier.MODERATOR: frozenset({CommandKind.WARN, CommandKind.MUTE, CommandKind.UNMUTE}),
    PrivilegeTier.SENIOR_MODERATOR: frozenset(),
    PrivilegeTier.MANAGER: frozenset({CommandKind.BAN, CommandKind.UNBAN}),
})

# Tiers whose messages pass through the content filter before matching
FILTERED_TIERS: FrozenSet[PrivilegeTier] = frozenset({PrivilegeTier.NONE, PrivilegeTier.TRIAL})


def _build_cascade() -> Mapping[PrivilegeTier, FrozenSet[CommandKind]]:
    cascade: Dict[PrivilegeTier, FrozenSet[CommandKind]] = {}
    granted: FrozenSet[CommandKind] = frozenset()
    for tier in sorted(PrivilegeTier):
        granted = granted | TIER_ADDITIONS.get(tier, frozenset())
        cascade[tier] = granted
    return MappingProxyType(cascade)


TIER_COMMANDS = _build_cascade()

MINIMUM_TIERS: Mapping[CommandKind, PrivilegeTier] = MappingProxyType({
    kind: min(tier for tier, kinds in TIER_COMMANDS.items() if kind in kinds)
    for kind in CommandKind
})


def commands_for_tier(tier: PrivilegeTier) -> FrozenSet[CommandKind]:
    """Return every command kind ``tier`` may invoke."""
    return TIER_COMMANDS[tier]


def minimum_tier(kind: CommandKind) -> PrivilegeTier:
    """Return the lowest tier allowed to invoke ``kind``."""
    return MINIMUM_TIERS[kind]


def is_permitted(tier: PrivilegeTier, kind: CommandKind) -> bool:
    return kind in TIER_COMMANDS[tier]


def requires_content_filter(tier: PrivilegeTier) -> bool:
    """Return True if messages from ``tier`` must pass the content filter."""
    return tier in FILTERED_TIERS


class PrivilegeResolver:
    """
    Map a sender's role set to a privilege tier.

    The resolver holds no state besides the configured role identifiers and
    never fetches roles itself; callers hand it the roles already attached to
    the inbound message.

    Args:
        tier_roles: Role identifiers granting each staff tier. Tiers missing
            from the mapping cannot be reached.
    """

    def __init__(self, tier_roles: Mapping[PrivilegeTier, AbstractSet[str]]) -> None:
        self._tier_roles: Dict[PrivilegeTier, FrozenSet[str]] = {
            tier: frozenset(roles) for tier, roles in tier_roles.items() if tier is not PrivilegeTier.NONE
        }
        if not self._tier_roles:
            logger.warning("[PRIVILEGE RESOLVER] No staff roles configured; every sender resolves to tier 'none'.")

    def resolve_tier(self, roles: AbstractSet[str]) -> PrivilegeTier:
        """Return the highest tier whose role is present in ``roles``."""
        for tier in sorted(self._tier_roles, reverse=True):
            if not self._tier_roles[tier].isdisjoint(roles):
                return tier
        return PrivilegeTier.NONE
