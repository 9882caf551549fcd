"""Default combat rules.

A deterministic rules module so the simulator works without an external
balance module.  Every random decision is seeded from the configured base
seed and the inputs of the decision, so each operation is a pure function.
"""

from __future__ import annotations

import math

from skirmish.domain.models import CasualtySelection, Group, PowerRatios, Side, Unit
from skirmish.domain.rules_config import DEFAULT_RULES, StandardRulesConfig
from skirmish.utils.rng import check_success, generate_seed, random_float, shuffled


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up."""

    return int(math.floor(value + 0.5))


class StandardCombatRules:
    """Level-based power, proportional ratios and seeded attrition."""

    def __init__(
        self,
        *,
        seed: str = "skirmish",
        config: StandardRulesConfig = DEFAULT_RULES.standard,
    ) -> None:
        self.seed = seed
        self.config = config

    def unit_power(self, unit: Unit) -> float:
        power = unit.level * self.config.unit_power_per_level
        if unit.is_player:
            power *= self.config.player_power_multiplier
        return power

    def calculate_group_power(self, group: Group) -> float:
        if not group.units:
            return 0.0
        power = sum(self.unit_power(unit) for unit in group.units.values())
        power += sum(
            item.quantity * self.config.item_power_per_quantity for item in group.items.values()
        )
        return max(0.0, power)

    def calculate_power_ratios(self, power1: float, power2: float) -> PowerRatios:
        total = power1 + power2
        if total <= 0:
            return PowerRatios(ratio1=0.5, ratio2=0.5)
        return PowerRatios(ratio1=power1 / total, ratio2=power2 / total)

    def calculate_attrition(self, own_power: float, own_ratio: float, enemy_ratio: float) -> int:
        """Casualties inflicted on this side by the enemy.

        The enemy deals ``enemy_power * rate * (enemy_ratio + offset)``; its
        power is recovered from the ratios, so the stronger side deals more
        damage.  Small results round down to zero.
        """

        if own_power <= 0 or own_ratio <= 0 or enemy_ratio <= 0:
            return 0
        enemy_power = own_power * enemy_ratio / own_ratio
        seed = generate_seed(
            self.seed, 0, f"attrition:{own_power:.6f}:{own_ratio:.6f}:{enemy_ratio:.6f}"
        )
        rate = random_float(seed, self.config.attrition_rate_min, self.config.attrition_rate_max)[
            "value"
        ]
        return round_half_up(
            enemy_power * rate * (enemy_ratio + self.config.attrition_ratio_offset)
        )

    def critical_chance(self, unit: Unit) -> float:
        config = self.config
        chance = config.critical_base_chance + unit.level * config.critical_chance_per_level
        return min(config.critical_chance_cap, chance)

    def process_pvp_combat(self, side1: Side, side2: Side, tick: int) -> tuple[Side, Side]:
        for index, side in ((1, side1), (2, side2)):
            players = [(group, unit) for group, unit in side.iter_units() if unit.is_player]
            combo_possible = len(players) >= self.config.combo_min_players
            for group, unit in players:
                context = f"critical:{index}:{group.id}:{int(unit.id)}"
                roll = check_success(
                    generate_seed(self.seed, tick, context), self.critical_chance(unit)
                )
                if not roll["success"]:
                    continue
                unit.critical_hit = True
                if combo_possible:
                    combo = check_success(
                        generate_seed(self.seed, tick, f"combo:{context}"),
                        self.config.combo_critical_chance,
                    )
                    unit.combo_critical = combo["success"]
        return side1, side2

    def select_units_for_casualties(self, units: list[Unit], count: int) -> CasualtySelection:
        """Pick ordinary units first, then players, combo-critical units last."""

        if count <= 0 or not units:
            return CasualtySelection(units_to_remove=())
        key = ",".join(str(int(unit.id)) for unit in units)
        order = shuffled(generate_seed(self.seed, 0, f"casualties:{key}:{count}"), units)
        order.sort(key=lambda unit: (unit.combo_critical, unit.is_player))
        return CasualtySelection(units_to_remove=tuple(unit.id for unit in order[:count]))
