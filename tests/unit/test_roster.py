"""Tests for roster construction."""

from __future__ import annotations

import pytest

from skirmish.domain.enums import PLAYER_UNIT_TYPE
from skirmish.domain.errors import (
    ConfigurationError,
    GroupNotFoundError,
    RulesContractError,
    SideNotFoundError,
    UnitNotFoundError,
)
from skirmish.domain.models import GroupID, UnitID
from skirmish.domain.roster import Roster, group_power, recompute_side_power


def test_default_side_names():
    roster = Roster()
    assert roster.side(1).name == "Attackers"
    assert roster.side(2).name == "Defenders"


def test_unknown_side_raises():
    roster = Roster()
    with pytest.raises(SideNotFoundError):
        roster.side(3)
    with pytest.raises(LookupError):
        roster.add_group(0)


def test_group_ids_are_unique_across_sides():
    roster = Roster()
    first = roster.add_group(1)
    second = roster.add_group(2, "Reserve")
    third = roster.add_group(1)

    assert len({first, second, third}) == 3
    assert roster.side(1).groups[first].name == "Group 1"
    assert roster.side(2).groups[second].name == "Reserve"
    assert roster.find_group(second)[0] == 2


def test_add_unit_assigns_sequential_ids():
    roster = Roster()
    group_id = roster.add_group(1)

    first = roster.add_unit(group_id, "infantry")
    second = roster.add_unit(group_id, "cavalry", level=3)

    assert (first, second) == (UnitID(1), UnitID(2))
    unit = roster.side(1).groups[group_id].units[second]
    assert unit.type == "cavalry"
    assert unit.level == 3
    assert unit.critical_hit is False


def test_player_character_gets_generated_name():
    roster = Roster()
    group_id = roster.add_group(1, "Vanguard")
    roster.add_unit(group_id, "infantry")
    unit_id = roster.add_unit(group_id, "ignored", is_player_character=True)

    unit = roster.side(1).groups[group_id].units[unit_id]
    assert unit.type == PLAYER_UNIT_TYPE
    assert unit.is_player
    assert unit.display_name == "Vanguard Player 2"


def test_player_type_reserved_for_player_characters():
    roster = Roster()
    group_id = roster.add_group(1)
    with pytest.raises(ConfigurationError, match="reserved"):
        roster.add_unit(group_id, PLAYER_UNIT_TYPE)


def test_invalid_level_rejected():
    roster = Roster()
    group_id = roster.add_group(1)
    with pytest.raises(ConfigurationError):
        roster.add_unit(group_id, "infantry", level=0)


def test_add_unit_to_unknown_group():
    roster = Roster()
    with pytest.raises(GroupNotFoundError):
        roster.add_unit(GroupID("group_99"), "infantry")


def test_add_item_and_quantity_validation():
    roster = Roster()
    group_id = roster.add_group(2)
    ref = roster.add_item(group_id, "sword", 3)

    item = roster.side(2).groups[group_id].items[ref]
    assert item.item_id == "sword"
    assert item.quantity == 3
    with pytest.raises(ConfigurationError):
        roster.add_item(group_id, "shield", 0)


def test_delete_group():
    roster = Roster()
    group_id = roster.add_group(1)
    roster.delete_group(1, group_id)

    assert group_id not in roster.side(1).groups
    with pytest.raises(GroupNotFoundError):
        roster.delete_group(1, group_id)


def test_remove_unit():
    roster = Roster()
    group_id = roster.add_group(1)
    unit_id = roster.add_unit(group_id, "infantry")

    removed = roster.remove_unit(group_id, unit_id)
    assert removed.id == unit_id
    with pytest.raises(UnitNotFoundError, match="Unit 1 not found"):
        roster.remove_unit(group_id, unit_id)
    with pytest.raises(GroupNotFoundError):
        roster.remove_unit(GroupID("group_9"), unit_id)


def test_power_is_only_refreshed_on_recompute(fixed_rules):
    rules = fixed_rules(unit_power=5.0)
    roster = Roster()
    group_id = roster.add_group(1)
    roster.add_unit(group_id, "infantry")
    roster.add_unit(group_id, "infantry")

    assert roster.side(1).power == 0.0
    assert roster.recompute_side_power(1, rules) == 10.0
    assert roster.side(1).groups[group_id].power == 10.0


def test_empty_group_has_zero_power(fixed_rules):
    roster = Roster()
    group_id = roster.add_group(1)
    group = roster.side(1).groups[group_id]

    assert group_power(group, fixed_rules()) == 0.0
    assert group_id in roster.side(1).groups


@pytest.mark.parametrize("bad_power", [-1.0, float("nan"), float("inf"), "10"])
def test_out_of_contract_power_rejected(fixed_rules, bad_power):
    rules = fixed_rules()
    rules.calculate_group_power = lambda group: bad_power
    roster = Roster()
    group_id = roster.add_group(1)
    roster.add_unit(group_id, "infantry")

    with pytest.raises(RulesContractError):
        recompute_side_power(roster.side(1), rules)


def test_clone_is_independent():
    roster = Roster()
    group_id = roster.add_group(1)
    roster.add_unit(group_id, "infantry")

    copy = roster.clone()
    copy.add_unit(group_id, "archer")
    copy.side(1).name = "Renamed"

    assert roster.side(1).unit_count == 1
    assert copy.side(1).unit_count == 2
    assert roster.side(1).name == "Attackers"
    assert copy.add_group(2) == GroupID("group_2")
