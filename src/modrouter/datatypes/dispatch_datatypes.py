"""
Outcome types produced by the dispatch engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from modrouter.datatypes.privilege_datatypes import CommandKind, PrivilegeTier


class DispatchOutcome(Enum):
    """Terminal state reached by a single message."""

    EXECUTED = "executed"
    REJECTED = "rejected"
    IGNORED = "ignored"

    def __str__(self) -> str:
        return self.value


class ValidationFailure(Enum):
    """Reasons a recognized, authorized command is rejected."""

    EMPTY_USER_LIST = "empty_user_list"
    EMPTY_REASON = "empty_reason"
    INVALID_DURATION = "invalid_duration"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class DispatchResult:
    """What happened to one message.

    Attributes:
        outcome: Terminal state.
        tier: Tier resolved for the sender, ``None`` for self-messages.
        kind: Matched command kind, ``None`` when nothing matched.
        failure: Validation failure for rejected commands.
    """
    outcome: DispatchOutcome
    tier: Optional[PrivilegeTier] = None
    kind: Optional[CommandKind] = None
    failure: Optional[ValidationFailure] = None

    @property
    def executed(self) -> bool:
        return self.outcome is DispatchOutcome.EXECUTED
