"""Declarative rule configuration for the battle engine."""

from __future__ import annotations

from dataclasses import dataclass

from skirmish.domain.enums import DefeatRule


@dataclass(frozen=True, slots=True)
class EngineRules:
    """Constants used by the tick processor and the outcome finalizer."""

    winning_margin: float = 0.10  # side must exceed the other by 10% to be "ahead"
    extreme_ratio: float = 3.0
    significant_ratio: float = 1.5
    power_epsilon: float = 1e-9
    defeat_rule: DefeatRule = DefeatRule.UNITS_OR_POWER
    transfer_loot: bool = True


@dataclass(frozen=True, slots=True)
class StandardRulesConfig:
    """Tuning for the bundled default combat rules."""

    unit_power_per_level: float = 1.0
    player_power_multiplier: float = 2.0
    item_power_per_quantity: float = 0.1
    attrition_rate_min: float = 0.05
    attrition_rate_max: float = 0.10
    attrition_ratio_offset: float = 0.5
    critical_base_chance: float = 0.05
    critical_chance_per_level: float = 0.01
    critical_chance_cap: float = 0.5
    combo_critical_chance: float = 0.5
    combo_min_players: int = 2


@dataclass(frozen=True, slots=True)
class RulesConfig:
    """Top-level configuration container."""

    engine: EngineRules = EngineRules()
    standard: StandardRulesConfig = StandardRulesConfig()


DEFAULT_RULES = RulesConfig()
