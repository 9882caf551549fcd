"""Roster model: the two sides, their groups, units and items.

Power is never recomputed implicitly while editing; callers invoke
``recompute_side_power`` once a batch of edits is complete.  The tick
processor recomputes power at every tick boundary on its own.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from skirmish.domain.enums import PLAYER_UNIT_TYPE
from skirmish.domain.errors import (
    ConfigurationError,
    GroupNotFoundError,
    RulesContractError,
    SideNotFoundError,
    UnitNotFoundError,
)
from skirmish.domain.models import (
    SIDE_INDICES,
    Group,
    GroupID,
    Item,
    ItemRefID,
    Side,
    Unit,
    UnitID,
)

if TYPE_CHECKING:
    from skirmish.interfaces.combat_rules import CombatRules

DEFAULT_SIDE1_NAME = "Attackers"
DEFAULT_SIDE2_NAME = "Defenders"


@dataclass(slots=True)
class Roster:
    """Both sides of a battle plus the group id sequence."""

    side1: Side = field(default_factory=lambda: Side(name=DEFAULT_SIDE1_NAME))
    side2: Side = field(default_factory=lambda: Side(name=DEFAULT_SIDE2_NAME))
    next_group_number: int = 1

    def side(self, index: int) -> Side:
        """Return side 1 or 2, raising ``SideNotFoundError`` otherwise."""

        if index == 1:
            return self.side1
        if index == 2:
            return self.side2
        raise SideNotFoundError(f"Side {index} not found; expected one of {SIDE_INDICES}")

    def find_group(self, group_id: GroupID) -> tuple[int, Group]:
        """Locate a group on either side."""

        for index in SIDE_INDICES:
            group = self.side(index).groups.get(group_id)
            if group is not None:
                return index, group
        raise GroupNotFoundError(f"Group {group_id} not found")

    def add_group(self, side: int, name: str | None = None) -> GroupID:
        target = self.side(side)
        number = self.next_group_number
        self.next_group_number += 1
        group_id = GroupID(f"group_{number}")
        target.groups[group_id] = Group(id=group_id, name=name or f"Group {number}")
        return group_id

    def add_unit(
        self,
        group_id: GroupID,
        unit_type: str,
        level: int = 1,
        is_player_character: bool = False,
    ) -> UnitID:
        """Add a unit to a group and return its per-group identifier.

        Player characters take the reserved ``player`` type and receive a
        generated display name.
        """

        if level < 1:
            raise ConfigurationError(f"Unit level must be at least 1, got {level}")
        _, group = self.find_group(group_id)

        unit_id = UnitID(group.next_unit_id)
        group.next_unit_id += 1

        if is_player_character:
            unit = Unit(
                id=unit_id,
                type=PLAYER_UNIT_TYPE,
                level=level,
                display_name=f"{group.name} Player {int(unit_id)}",
            )
        else:
            if unit_type == PLAYER_UNIT_TYPE:
                raise ConfigurationError(
                    f"Unit type '{PLAYER_UNIT_TYPE}' is reserved for player characters"
                )
            unit = Unit(id=unit_id, type=unit_type, level=level)

        group.units[unit_id] = unit
        return unit_id

    def remove_unit(self, group_id: GroupID, unit_id: UnitID) -> Unit:
        _, group = self.find_group(group_id)
        try:
            return group.units.pop(unit_id)
        except KeyError as exc:
            raise UnitNotFoundError(f"Unit {int(unit_id)} not found in group {group_id}") from exc

    def add_item(self, group_id: GroupID, item_id: str, quantity: int = 1) -> ItemRefID:
        if quantity < 1:
            raise ConfigurationError(f"Item quantity must be at least 1, got {quantity}")
        _, group = self.find_group(group_id)

        ref_id = ItemRefID(group.next_item_id)
        group.next_item_id += 1
        group.items[ref_id] = Item(id=ref_id, item_id=item_id, quantity=quantity)
        return ref_id

    def delete_group(self, side: int, group_id: GroupID) -> Group:
        target = self.side(side)
        group = target.groups.pop(group_id, None)
        if group is None:
            raise GroupNotFoundError(f"Group {group_id} not found on side {side}")
        return group

    def recompute_side_power(self, side: int, rules: CombatRules) -> float:
        return recompute_side_power(self.side(side), rules)

    def clone(self) -> Roster:
        return Roster(
            side1=self.side1.clone(),
            side2=self.side2.clone(),
            next_group_number=self.next_group_number,
        )


def group_power(group: Group, rules: CombatRules) -> float:
    """Return a group's power, validating the rules contract.

    A group without units is inert and contributes nothing.
    """

    if not group.units:
        return 0.0
    power = rules.calculate_group_power(group)
    if isinstance(power, bool) or not isinstance(power, int | float):
        raise RulesContractError(f"Group power for {group.id} is not a number: {power!r}")
    if not math.isfinite(power) or power < 0:
        raise RulesContractError(f"Group power for {group.id} out of contract: {power!r}")
    return float(power)


def recompute_side_power(side: Side, rules: CombatRules) -> float:
    """Refresh every group's power and the side's aggregate."""

    total = 0.0
    for group in side.groups.values():
        group.power = group_power(group, rules)
        total += group.power
    side.power = total
    return total
