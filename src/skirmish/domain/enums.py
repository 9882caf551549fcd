"""Enumerations used across the Skirmish domain."""

from __future__ import annotations

from enum import IntEnum, StrEnum

PLAYER_UNIT_TYPE = "player"


class Winner(IntEnum):
    """Terminal battle outcome; the integer values match the side indices."""

    DRAW = 0
    SIDE1 = 1
    SIDE2 = 2


class WinningState(StrEnum):
    """Per-tick classification of which side is ahead on power."""

    SIDE1 = "side1"
    SIDE2 = "side2"
    EVEN = "even"


class OutcomeReason(StrEnum):
    """Why a run ended with the winner it reports."""

    DEFEAT = "defeat"
    POWER_COMPARISON = "power_comparison"
    FORCED = "forced"
    ERROR = "error"


class DefeatRule(StrEnum):
    """Which conditions count as a side being defeated."""

    UNITS_ONLY = "units_only"
    UNITS_OR_POWER = "units_or_power"


class RunStatus(StrEnum):
    """Lifecycle of a stepping run."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    FINALIZED = "finalized"


class LogType(StrEnum):
    """Categories of battle log entries."""

    INFO = "info"
    CRITICAL = "critical"
    IMPORTANT = "important"
    ERROR = "error"
    SECTION = "section"


class RatioBand(StrEnum):
    """Commentary bucket for the final power ratio."""

    EXTREME = "extreme"
    SIGNIFICANT = "significant"
    BALANCED = "balanced"
