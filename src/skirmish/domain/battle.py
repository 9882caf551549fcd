"""Tick processor: the single definition of what happens in one tick."""

from __future__ import annotations

import math
from types import MappingProxyType
from typing import TYPE_CHECKING

from skirmish.domain.battle_log import BattleLog
from skirmish.domain.combat_rules import round_half_up
from skirmish.domain.enums import DefeatRule, LogType, WinningState
from skirmish.domain.errors import ConfigurationError, RulesContractError
from skirmish.domain.models import (
    CriticalHit,
    FallenUnit,
    Group,
    GroupID,
    ItemRefID,
    LootTransfer,
    PowerRatios,
    Side,
    TickResult,
    UnitID,
)
from skirmish.domain.roster import recompute_side_power
from skirmish.domain.rules_config import DEFAULT_RULES, EngineRules

if TYPE_CHECKING:
    from skirmish.interfaces.combat_rules import CombatRules


def validate_run(
    side1: Side,
    side2: Side,
    max_ticks: int,
    *,
    max_ticks_limit: int | None = None,
) -> None:
    """Reject configurations that must not produce even a single tick."""

    if max_ticks < 1:
        raise ConfigurationError(f"max_ticks must be at least 1, got {max_ticks}")
    if max_ticks_limit is not None and max_ticks > max_ticks_limit:
        raise ConfigurationError(f"max_ticks {max_ticks} exceeds the limit of {max_ticks_limit}")
    for index, side in ((1, side1), (2, side2)):
        if side.unit_count == 0:
            raise ConfigurationError(f"Side {index} ({side.name}) has no units")


def is_defeated(side: Side, engine: EngineRules = DEFAULT_RULES.engine) -> bool:
    if side.unit_count == 0:
        return True
    if engine.defeat_rule == DefeatRule.UNITS_OR_POWER:
        return side.power <= engine.power_epsilon
    return False


def classify_winning_state(
    power1: float, power2: float, engine: EngineRules = DEFAULT_RULES.engine
) -> WinningState:
    if power1 > power2 * (1 + engine.winning_margin):
        return WinningState.SIDE1
    if power2 > power1 * (1 + engine.winning_margin):
        return WinningState.SIDE2
    return WinningState.EVEN


def process_tick(
    side1: Side,
    side2: Side,
    tick: int,
    *,
    rules: CombatRules,
    engine: EngineRules = DEFAULT_RULES.engine,
) -> TickResult:
    """Run one tick against working copies of both sides.

    ``side1`` and ``side2`` are mutated in place (casualties removed, flags
    set, loot moved) so the caller can chain ticks.  The returned result holds
    independent snapshots of the post-tick sides.
    """

    if tick < 1:
        raise ValueError(f"tick must be 1-based, got {tick}")

    _clear_flags(side1)
    _clear_flags(side2)

    power1_before = recompute_side_power(side1, rules)
    power2_before = recompute_side_power(side2, rules)

    ratios = _checked_ratios(rules.calculate_power_ratios(power1_before, power2_before))

    pvp1, pvp2 = rules.process_pvp_combat(side1, side2, tick)
    for side, returned in ((side1, pvp1), (side2, pvp2)):
        if _adopt(side, returned):
            recompute_side_power(side, rules)

    critical_hits = (_scan_critical_hits(side1, 1, tick), _scan_critical_hits(side2, 2, tick))

    attrition = (
        _checked_attrition(rules.calculate_attrition(power1_before, ratios.ratio1, ratios.ratio2)),
        _checked_attrition(rules.calculate_attrition(power2_before, ratios.ratio2, ratios.ratio1)),
    )

    group_attrition: dict[GroupID, int] = {}
    fallen: list[FallenUnit] = []
    wiped: list[tuple[int, Group]] = []
    casualties = [0, 0]
    for index, side, side_attrition in ((1, side1, attrition[0]), (2, side2, attrition[1])):
        removed = _apply_attrition(
            side,
            index,
            side_attrition,
            tick,
            rules=rules,
            group_attrition=group_attrition,
            fallen=fallen,
            wiped=wiped,
        )
        side.casualties += removed
        casualties[index - 1] = removed

    recompute_side_power(side1, rules)
    recompute_side_power(side2, rules)

    loot: list[LootTransfer] = []
    if engine.transfer_loot and wiped:
        loot = _transfer_loot(wiped, side1, side2, tick)
        if loot:
            recompute_side_power(side1, rules)
            recompute_side_power(side2, rules)

    return TickResult(
        tick=tick,
        side1_power_before=power1_before,
        side2_power_before=power2_before,
        side1_power_after=side1.power,
        side2_power_after=side2.power,
        ratios=ratios,
        attrition=attrition,
        group_attrition=MappingProxyType(group_attrition),
        casualties=(casualties[0], casualties[1]),
        total_casualties=(side1.casualties, side2.casualties),
        critical_hits=critical_hits,
        winning_state=classify_winning_state(side1.power, side2.power, engine),
        defeated=(is_defeated(side1, engine), is_defeated(side2, engine)),
        side1=side1.clone(),
        side2=side2.clone(),
        fallen=tuple(fallen),
        loot=tuple(loot),
    )


def describe_tick(result: TickResult, log: BattleLog) -> None:
    """Append the narrative for one tick to ``log``."""

    side1, side2 = result.side1, result.side2
    log.section(f"Tick {result.tick}")
    log.add(
        f"Power: {side1.name} {result.side1_power_before:.1f} -> {result.side1_power_after:.1f}, "
        f"{side2.name} {result.side2_power_before:.1f} -> {result.side2_power_after:.1f}"
    )
    log.add(
        f"Casualties: {side1.name} lost {result.casualties[0]} "
        f"(total {result.total_casualties[0]}), {side2.name} lost {result.casualties[1]} "
        f"(total {result.total_casualties[1]})"
    )
    for hit in result.all_critical_hits():
        kind = "COMBO CRITICAL" if hit.combo else "Critical hit"
        log.add(f"{kind}: {hit.unit_name} (side {hit.side})", LogType.CRITICAL)
    for unit in result.fallen:
        log.add(f"{unit.display_name} has fallen in battle!", LogType.CRITICAL)
    for transfer in result.loot:
        log.add(
            f"Looted {len(transfer.items)} items from battle "
            f"({transfer.from_group_id} -> {transfer.to_group_id})"
        )
    for index, side in ((1, side1), (2, side2)):
        if result.defeated[index - 1]:
            log.add(f"{side.name} has been defeated on tick {result.tick}", LogType.IMPORTANT)


# --- Helpers --------------------------------------------------------------------


def _clear_flags(side: Side) -> None:
    for _, unit in side.iter_units():
        unit.critical_hit = False
        unit.combo_critical = False


def _adopt(target: Side, returned: Side) -> bool:
    """Take over the groups of a side replaced by PvP; True when replaced."""

    if returned is target:
        return False
    if not isinstance(returned, Side):
        raise RulesContractError(f"PvP combat returned {type(returned).__name__}, expected Side")
    target.groups = returned.groups
    return True


def _checked_ratios(ratios: PowerRatios) -> PowerRatios:
    for value in (ratios.ratio1, ratios.ratio2):
        if not isinstance(value, int | float) or not math.isfinite(value) or not 0 <= value <= 1:
            raise RulesContractError(f"Power ratio out of contract: {value!r}")
    return ratios


def _checked_attrition(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise RulesContractError(f"Attrition must be a non-negative integer, got {value!r}")
    return value


def _scan_critical_hits(side: Side, index: int, tick: int) -> tuple[CriticalHit, ...]:
    return tuple(
        CriticalHit(
            tick=tick,
            side=index,
            group_id=group.id,
            unit_id=unit.id,
            unit_name=unit.label,
            combo=unit.combo_critical,
        )
        for group, unit in side.iter_units()
        if unit.critical_hit
    )


def _apply_attrition(
    side: Side,
    index: int,
    side_attrition: int,
    tick: int,
    *,
    rules: CombatRules,
    group_attrition: dict[GroupID, int],
    fallen: list[FallenUnit],
    wiped: list[tuple[int, Group]],
) -> int:
    """Spread a side's attrition over its groups by power share and remove units.

    Each group's share is rounded on its own, so the per-group total may
    differ slightly from ``side_attrition``.
    """

    side_power = side.power
    removed_total = 0
    for group in side.groups.values():
        if side_power <= 0 or group.power <= 0 or not group.units:
            group_attrition[group.id] = 0
            continue
        share = round_half_up(side_attrition * group.power / side_power)
        group_attrition[group.id] = share
        if share <= 0:
            continue

        count = min(share, group.unit_count)
        selection = rules.select_units_for_casualties(list(group.units.values()), count)
        to_remove = _checked_selection(group, selection.units_to_remove, count)
        for unit_id in to_remove:
            unit = group.units.pop(unit_id)
            if unit.is_player:
                fallen.append(
                    FallenUnit(
                        tick=tick,
                        side=index,
                        group_id=group.id,
                        unit_id=unit.id,
                        display_name=unit.label,
                    )
                )
        removed_total += len(to_remove)
        if not group.units:
            wiped.append((index, group))
    return removed_total


def _checked_selection(group: Group, unit_ids: tuple[UnitID, ...], count: int) -> list[UnitID]:
    selected = list(unit_ids)
    if len(selected) > count:
        raise RulesContractError(
            f"Casualty selection for {group.id} returned {len(selected)} units, expected <= {count}"
        )
    if len(set(selected)) != len(selected):
        raise RulesContractError(f"Casualty selection for {group.id} repeats a unit")
    unknown = [unit_id for unit_id in selected if unit_id not in group.units]
    if unknown:
        raise RulesContractError(f"Casualty selection for {group.id} names unknown units {unknown}")
    return selected


def _transfer_loot(
    wiped: list[tuple[int, Group]], side1: Side, side2: Side, tick: int
) -> list[LootTransfer]:
    transfers: list[LootTransfer] = []
    for index, group in wiped:
        if not group.items:
            continue
        opponent = side2 if index == 1 else side1
        survivors = [g for g in opponent.groups.values() if g.units]
        if not survivors:
            continue
        recipient = min(survivors, key=lambda g: (-g.power, g.id))
        moved = []
        for item in group.items.values():
            moved_item = item.clone()
            moved_item.id = ItemRefID(recipient.next_item_id)
            recipient.next_item_id += 1
            recipient.items[moved_item.id] = moved_item
            moved.append(moved_item)
        group.items.clear()
        transfers.append(
            LootTransfer(
                tick=tick,
                from_side=index,
                from_group_id=group.id,
                to_group_id=recipient.id,
                items=tuple(item.clone() for item in moved),
            )
        )
    return transfers
