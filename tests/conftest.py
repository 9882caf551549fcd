"""Pytest configuration to ensure the `src` package layout is importable.

This adds the `src/` directory to `sys.path` so tests can import the
`skirmish` package (e.g., `from skirmish.api.app import create_app`) without
requiring an editable install in CI.

It also provides ``FixedRules``, a deterministic combat rules fake whose
formulas are simple enough to compute by hand.
"""

import sys
from pathlib import Path

import pytest

SRC_PATH = Path(__file__).resolve().parents[1] / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from skirmish.domain.models import CasualtySelection, PowerRatios  # noqa: E402


class FixedRules:
    """Combat rules with hand-checkable behaviour.

    * group power = ``unit_power`` per unit (players count double)
    * ratios = share of the combined power
    * attrition = ``attrition(own_power, own_ratio, enemy_ratio)``
    * PvP flags every player named in ``crits`` (combo when in ``combos``)
    * casualties are taken in unit id order
    """

    def __init__(self, *, unit_power=10.0, attrition=None, crits=(), combos=()):
        self.unit_power = unit_power
        self.attrition = attrition or (lambda own_power, own_ratio, enemy_ratio: 0)
        self.crits = set(crits)
        self.combos = set(combos)
        self.pvp_calls = []

    def calculate_group_power(self, group):
        return sum(
            self.unit_power * (2 if unit.is_player else 1) for unit in group.units.values()
        )

    def calculate_power_ratios(self, power1, power2):
        total = power1 + power2
        if total <= 0:
            return PowerRatios(0.5, 0.5)
        return PowerRatios(power1 / total, power2 / total)

    def calculate_attrition(self, own_power, own_ratio, enemy_ratio):
        return self.attrition(own_power, own_ratio, enemy_ratio)

    def process_pvp_combat(self, side1, side2, tick):
        self.pvp_calls.append(tick)
        for side in (side1, side2):
            for _, unit in side.iter_units():
                if unit.is_player and unit.display_name in self.crits:
                    unit.critical_hit = True
                    unit.combo_critical = unit.display_name in self.combos
        return side1, side2

    def select_units_for_casualties(self, units, count):
        ordered = sorted(units, key=lambda unit: int(unit.id))
        return CasualtySelection(units_to_remove=tuple(unit.id for unit in ordered[:count]))


@pytest.fixture
def fixed_rules():
    """Factory for ``FixedRules`` instances."""

    return FixedRules
