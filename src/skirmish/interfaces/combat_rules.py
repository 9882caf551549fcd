"""Combat Rules Protocol Interface.

This module defines the protocol (interface) for the balance rules consumed
by the battle engine.  The engine only orchestrates these operations; it
never embeds the combat formulas itself.
"""

from typing import Protocol

from skirmish.domain.models import CasualtySelection, Group, PowerRatios, Side, Unit


class CombatRules(Protocol):
    """Protocol defining the five rule operations driving each tick.

    Implementations must be deterministic for identical inputs if runs are
    expected to be replayable.
    """

    def calculate_group_power(self, group: Group) -> float:
        """Return the power of a group.

        Args:
            group: Group with at least one unit

        Returns:
            Finite, non-negative power
        """
        ...

    def calculate_power_ratios(self, power1: float, power2: float) -> PowerRatios:
        """Return each side's ratio, both within [0, 1] (they need not sum to 1)."""
        ...

    def calculate_attrition(self, own_power: float, own_ratio: float, enemy_ratio: float) -> int:
        """Return the number of casualties a side suffers this tick (integer >= 0)."""
        ...

    def process_pvp_combat(self, side1: Side, side2: Side, tick: int) -> tuple[Side, Side]:
        """Apply player-versus-player effects, flagging critical and combo critical hits.

        Args:
            side1: Working copy of side 1 (may be mutated)
            side2: Working copy of side 2 (may be mutated)
            tick: 1-based tick index

        Returns:
            The (possibly replaced) sides to continue the tick with
        """
        ...

    def select_units_for_casualties(self, units: list[Unit], count: int) -> CasualtySelection:
        """Choose at most ``count`` units from ``units`` to remove."""
        ...
