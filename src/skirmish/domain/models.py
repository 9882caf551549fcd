"""Dataclasses describing rosters and simulation results.

Rosters (``Side`` -> ``Group`` -> ``Unit``/``Item``) are plain mutable
dataclasses edited before a run.  Runners never touch the caller's roster:
each run works on ``clone()`` copies, and every ``TickResult`` keeps its own
post-tick copy of both sides so a stepping run can resume from any recorded
tick.

``TickResult`` and ``SimulationResult`` are frozen once produced.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import NewType

from .enums import PLAYER_UNIT_TYPE, OutcomeReason, Winner, WinningState

# --- Strongly typed identifiers -------------------------------------------------

GroupID = NewType("GroupID", str)
UnitID = NewType("UnitID", int)
ItemRefID = NewType("ItemRefID", int)

SIDE_INDICES: tuple[int, int] = (1, 2)


# --- Roster ---------------------------------------------------------------------


@dataclass(slots=True)
class Unit:
    """Individual combatant owned by exactly one group."""

    id: UnitID
    type: str
    level: int = 1
    display_name: str | None = None
    critical_hit: bool = False
    combo_critical: bool = False

    @property
    def is_player(self) -> bool:
        return self.type == PLAYER_UNIT_TYPE

    @property
    def label(self) -> str:
        return self.display_name or f"{self.type} #{int(self.id)}"

    def clone(self) -> Unit:
        return Unit(
            id=self.id,
            type=self.type,
            level=self.level,
            display_name=self.display_name,
            critical_hit=self.critical_hit,
            combo_critical=self.combo_critical,
        )


@dataclass(slots=True)
class Item:
    """Item reference carried by a group."""

    id: ItemRefID
    item_id: str
    quantity: int = 1

    def clone(self) -> Item:
        return Item(id=self.id, item_id=self.item_id, quantity=self.quantity)


@dataclass(slots=True)
class Group:
    """Named collection of units and items with a derived power value."""

    id: GroupID
    name: str
    units: dict[UnitID, Unit] = field(default_factory=dict)
    items: dict[ItemRefID, Item] = field(default_factory=dict)
    power: float = 0.0
    next_unit_id: int = 1
    next_item_id: int = 1

    @property
    def unit_count(self) -> int:
        return len(self.units)

    @property
    def player_units(self) -> list[Unit]:
        return [unit for unit in self.units.values() if unit.is_player]

    def clone(self) -> Group:
        return Group(
            id=self.id,
            name=self.name,
            units={unit_id: unit.clone() for unit_id, unit in self.units.items()},
            items={item_id: item.clone() for item_id, item in self.items.items()},
            power=self.power,
            next_unit_id=self.next_unit_id,
            next_item_id=self.next_item_id,
        )


@dataclass(slots=True)
class Side:
    """One of the two participants of a battle."""

    name: str
    groups: dict[GroupID, Group] = field(default_factory=dict)
    casualties: int = 0
    power: float = 0.0

    @property
    def unit_count(self) -> int:
        return sum(group.unit_count for group in self.groups.values())

    def iter_units(self) -> Iterator[tuple[Group, Unit]]:
        for group in self.groups.values():
            for unit in group.units.values():
                yield group, unit

    def clone(self) -> Side:
        return Side(
            name=self.name,
            groups={group_id: group.clone() for group_id, group in self.groups.items()},
            casualties=self.casualties,
            power=self.power,
        )


# --- Rule outputs ---------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PowerRatios:
    """Relative strength of each side, each value within [0, 1]."""

    ratio1: float
    ratio2: float


@dataclass(frozen=True, slots=True)
class CasualtySelection:
    """Units chosen by the rules to be removed from a group."""

    units_to_remove: tuple[UnitID, ...]


# --- Tick and run records ------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CriticalHit:
    """A unit observed with a critical hit flag during a tick."""

    tick: int
    side: int
    group_id: GroupID
    unit_id: UnitID
    unit_name: str
    combo: bool = False


@dataclass(frozen=True, slots=True)
class FallenUnit:
    """A player-character unit removed as a casualty."""

    tick: int
    side: int
    group_id: GroupID
    unit_id: UnitID
    display_name: str


@dataclass(frozen=True, slots=True)
class LootTransfer:
    """Items moved from a wiped-out group to an opposing survivor."""

    tick: int
    from_side: int
    from_group_id: GroupID
    to_group_id: GroupID
    items: tuple[Item, ...]


@dataclass(frozen=True, slots=True)
class TickResult:
    """Everything that happened in a single tick.

    ``side1``/``side2`` are post-tick snapshots for inspection.  The stepping
    runner keeps its own copies to continue from, so editing a snapshot never
    changes how a run proceeds.  ``group_attrition`` is a read-only mapping.
    """

    tick: int
    side1_power_before: float
    side2_power_before: float
    side1_power_after: float
    side2_power_after: float
    ratios: PowerRatios
    attrition: tuple[int, int]
    group_attrition: Mapping[GroupID, int]
    casualties: tuple[int, int]
    total_casualties: tuple[int, int]
    critical_hits: tuple[tuple[CriticalHit, ...], tuple[CriticalHit, ...]]
    winning_state: WinningState
    defeated: tuple[bool, bool]
    side1: Side
    side2: Side
    fallen: tuple[FallenUnit, ...] = ()
    loot: tuple[LootTransfer, ...] = ()

    @property
    def any_defeated(self) -> bool:
        return any(self.defeated)

    def all_critical_hits(self) -> tuple[CriticalHit, ...]:
        return self.critical_hits[0] + self.critical_hits[1]


@dataclass(frozen=True, slots=True)
class SimulationResult:
    """Terminal summary of a run.

    ``winner`` is ``None`` when the run aborted on a rules failure; such a
    result is inconclusive and must not be read as a draw.
    """

    winner: Winner | None
    reason: OutcomeReason
    ticks: int
    side1_name: str
    side2_name: str
    side1_initial_power: float
    side2_initial_power: float
    side1_final_power: float
    side2_final_power: float
    side1_casualties: int
    side2_casualties: int
    critical_hits: tuple[CriticalHit, ...] = ()
    error: str | None = None

    @property
    def inconclusive(self) -> bool:
        return self.winner is None

    def critical_hits_for(self, side: int) -> tuple[CriticalHit, ...]:
        return tuple(hit for hit in self.critical_hits if hit.side == side)
