"""Tests for the bundled default combat rules."""

from __future__ import annotations

import pytest

from skirmish.domain.combat_rules import StandardCombatRules, round_half_up
from skirmish.domain.models import Group, GroupID, Item, ItemRefID, Side, Unit, UnitID
from skirmish.domain.rules_config import StandardRulesConfig


def _group(*levels: int, players: int = 0) -> Group:
    group = Group(id=GroupID("group_1"), name="Group 1")
    unit_id = 1
    for level in levels:
        group.units[UnitID(unit_id)] = Unit(id=UnitID(unit_id), type="infantry", level=level)
        unit_id += 1
    for _ in range(players):
        group.units[UnitID(unit_id)] = Unit(
            id=UnitID(unit_id), type="player", level=1, display_name=f"Player {unit_id}"
        )
        unit_id += 1
    return group


@pytest.mark.parametrize(
    ("value", "expected"),
    [(0.5, 1), (1.5, 2), (2.5, 3), (0.49, 0), (2.0, 2), (0.0, 0)],
)
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


def test_group_power():
    rules = StandardCombatRules()
    group = _group(1, 2, 3, players=1)
    group.items[ItemRefID(1)] = Item(id=ItemRefID(1), item_id="banner", quantity=5)

    # 1 + 2 + 3 + player (1 * 2) + 5 * 0.1
    assert rules.calculate_group_power(group) == pytest.approx(8.5)
    assert rules.calculate_group_power(_group()) == 0.0


def test_power_ratios():
    rules = StandardCombatRules()
    ratios = rules.calculate_power_ratios(30.0, 10.0)
    assert (ratios.ratio1, ratios.ratio2) == (0.75, 0.25)
    even = rules.calculate_power_ratios(0.0, 0.0)
    assert (even.ratio1, even.ratio2) == (0.5, 0.5)


def test_attrition_scales_with_enemy_power():
    rules = StandardCombatRules(seed="bounds")
    config = rules.config

    value = rules.calculate_attrition(200.0, 0.4, 0.6)

    # the enemy holds 0.6 of the total, so it fields 300 power
    enemy_power = 200.0 * 0.6 / 0.4
    low = round_half_up(enemy_power * config.attrition_rate_min * (0.6 + 0.5))
    high = round_half_up(enemy_power * config.attrition_rate_max * (0.6 + 0.5))
    assert low <= value <= high
    assert value == rules.calculate_attrition(200.0, 0.4, 0.6)


def test_weaker_side_suffers_more():
    rules = StandardCombatRules()
    ratios = rules.calculate_power_ratios(100.0, 10.0)

    strong = rules.calculate_attrition(100.0, ratios.ratio1, ratios.ratio2)
    weak = rules.calculate_attrition(10.0, ratios.ratio2, ratios.ratio1)

    assert weak >= 7
    assert strong <= 1
    assert weak > strong


def test_attrition_edge_cases():
    rules = StandardCombatRules()
    assert rules.calculate_attrition(0.0, 0.0, 1.0) == 0
    assert rules.calculate_attrition(10.0, 1.0, 0.0) == 0
    assert rules.calculate_attrition(10.0, 0.0, 1.0) == 0
    # small damage rounds down instead of forcing a casualty
    assert rules.calculate_attrition(0.5, 0.5, 0.5) == 0


def test_critical_chance_capped():
    rules = StandardCombatRules()
    assert rules.critical_chance(Unit(id=UnitID(1), type="player", level=1)) == pytest.approx(0.06)
    assert rules.critical_chance(Unit(id=UnitID(1), type="player", level=100)) == 0.5


def test_pvp_only_flags_players():
    config = StandardRulesConfig(
        critical_base_chance=1.0, critical_chance_cap=1.0, combo_critical_chance=1.0
    )
    rules = StandardCombatRules(config=config)
    side1 = Side(name="A", groups={GroupID("group_1"): _group(1, 1, players=2)})
    side2 = Side(name="B", groups={GroupID("group_1"): _group(1, players=1)})

    out1, out2 = rules.process_pvp_combat(side1, side2, 1)

    flagged1 = [unit for _, unit in out1.iter_units() if unit.critical_hit]
    assert [unit.is_player for unit in flagged1] == [True, True]
    assert all(unit.combo_critical for unit in flagged1)
    flagged2 = [unit for _, unit in out2.iter_units() if unit.critical_hit]
    assert len(flagged2) == 1
    # a lone player cannot trigger a combo
    assert not flagged2[0].combo_critical


def test_casualty_selection_prefers_ordinary_units():
    rules = StandardCombatRules()
    group = _group(1, 1, 1, players=2)
    group.units[UnitID(4)].combo_critical = True

    selection = rules.select_units_for_casualties(list(group.units.values()), 4)

    assert len(selection.units_to_remove) == 4
    assert set(selection.units_to_remove[:3]) == {UnitID(1), UnitID(2), UnitID(3)}
    assert selection.units_to_remove[3] == UnitID(5)
    assert rules.select_units_for_casualties([], 3).units_to_remove == ()
    assert rules.select_units_for_casualties(list(group.units.values()), 0).units_to_remove == ()
