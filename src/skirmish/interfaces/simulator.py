"""Battle Simulator Protocol Interface.

This module defines the protocol (interface) consumed by user interfaces
driving the battle simulator.
"""

from typing import Protocol

from skirmish.domain.battle_log import LogEntry
from skirmish.domain.enums import RunStatus
from skirmish.domain.models import GroupID, ItemRefID, SimulationResult, TickResult, UnitID


class IBattleSimulator(Protocol):
    """Protocol defining roster construction plus batch and stepping execution."""

    @property
    def status(self) -> RunStatus: ...

    @property
    def current_tick(self) -> int: ...

    @property
    def intermediate_results(self) -> tuple[TickResult, ...]: ...

    @property
    def current_step_state(self) -> TickResult | None: ...

    def add_group(self, side: int, name: str | None = None) -> GroupID:
        """Create an empty group on side 1 or 2 and return its id."""
        ...

    def add_unit(
        self,
        group_id: GroupID,
        unit_type: str,
        level: int = 1,
        is_player_character: bool = False,
    ) -> UnitID:
        """Add a unit to a group and return its per-group id."""
        ...

    def add_item(self, group_id: GroupID, item_id: str, quantity: int = 1) -> ItemRefID:
        """Attach an item reference to a group."""
        ...

    def run_battle_simulation(self, max_ticks: int | None = None) -> SimulationResult:
        """Resolve the battle in one pass.

        Args:
            max_ticks: Tick budget; the simulator default when omitted

        Returns:
            SimulationResult, with ``winner`` unset if a rule failed
        """
        ...

    def step_forward(self) -> TickResult | None:
        """Execute one more tick, or finalize and return ``None`` when done."""
        ...

    def fast_forward(self) -> SimulationResult:
        """Execute every remaining tick and finalize."""
        ...

    def reset(self) -> None:
        """Discard recorded ticks and the log."""
        ...

    def log_entries(self) -> list[LogEntry]:
        """Return the retained battle narrative."""
        ...
