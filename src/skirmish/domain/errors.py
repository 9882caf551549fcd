"""Exceptions raised by the Skirmish domain layer."""

from __future__ import annotations


class SkirmishError(Exception):
    """Base class for every error raised by the simulator."""


class SideNotFoundError(SkirmishError, LookupError):
    """Raised when a side index other than 1 or 2 is referenced."""


class GroupNotFoundError(SkirmishError, LookupError):
    """Raised when a group id does not exist on the roster."""


class UnitNotFoundError(SkirmishError, LookupError):
    """Raised when a unit id does not exist in the referenced group."""


class ConfigurationError(SkirmishError, ValueError):
    """Raised when a run or roster edit is rejected before any tick executes."""


class RulesContractError(SkirmishError):
    """Raised when a combat rules implementation returns an out-of-contract value."""


class RunStateError(SkirmishError, RuntimeError):
    """Raised when a stepping operation is invoked in the wrong run state."""
