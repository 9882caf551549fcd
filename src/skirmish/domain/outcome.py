"""Outcome finalizer shared by the batch and stepping runners."""

from __future__ import annotations

from collections.abc import Sequence

from skirmish.domain.battle_log import BattleLog
from skirmish.domain.enums import LogType, OutcomeReason, RatioBand, Winner
from skirmish.domain.models import CriticalHit, Side, SimulationResult, TickResult
from skirmish.domain.rules_config import DEFAULT_RULES, EngineRules


def decide_winner(
    last: TickResult | None,
    forced_winner: Winner | None = None,
    *,
    initial: tuple[Side, Side],
) -> tuple[Winner, OutcomeReason]:
    """Apply the winner precedence: forced, defeat, then final power."""

    if forced_winner is not None:
        return Winner(forced_winner), OutcomeReason.FORCED

    if last is not None:
        defeated1, defeated2 = last.defeated
        if defeated1 and defeated2:
            return Winner.DRAW, OutcomeReason.DEFEAT
        if defeated1:
            return Winner.SIDE2, OutcomeReason.DEFEAT
        if defeated2:
            return Winner.SIDE1, OutcomeReason.DEFEAT
        power1, power2 = last.side1_power_after, last.side2_power_after
    else:
        power1, power2 = initial[0].power, initial[1].power

    if power1 > power2:
        return Winner.SIDE1, OutcomeReason.POWER_COMPARISON
    if power2 > power1:
        return Winner.SIDE2, OutcomeReason.POWER_COMPARISON
    return Winner.DRAW, OutcomeReason.POWER_COMPARISON


def finalize(
    last: TickResult | None,
    forced_winner: Winner | None = None,
    *,
    initial: tuple[Side, Side],
    critical_hits: Sequence[CriticalHit] = (),
    log: BattleLog | None = None,
    engine: EngineRules = DEFAULT_RULES.engine,
) -> SimulationResult:
    """Build the terminal ``SimulationResult`` and narrate it.

    ``initial`` holds the sides as they stood before tick 1 (with power
    computed); it supplies names, initial power and the fallback state when
    no tick was recorded.
    """

    winner, reason = decide_winner(last, forced_winner, initial=initial)
    final1, final2 = (last.side1, last.side2) if last is not None else initial

    result = SimulationResult(
        winner=winner,
        reason=reason,
        ticks=last.tick if last is not None else 0,
        side1_name=initial[0].name,
        side2_name=initial[1].name,
        side1_initial_power=initial[0].power,
        side2_initial_power=initial[1].power,
        side1_final_power=final1.power,
        side2_final_power=final2.power,
        side1_casualties=final1.casualties,
        side2_casualties=final2.casualties,
        critical_hits=tuple(critical_hits),
    )
    if log is not None:
        narrate(result, final1, final2, log, engine)
    return result


def inconclusive(
    error: BaseException | str,
    *,
    initial: tuple[Side, Side],
    last: TickResult | None = None,
    critical_hits: Sequence[CriticalHit] = (),
    log: BattleLog | None = None,
) -> SimulationResult:
    """Result for a run aborted by a rules failure; ``winner`` stays unset."""

    message = str(error) or type(error).__name__
    final1, final2 = (last.side1, last.side2) if last is not None else initial
    if log is not None:
        log.add(f"Simulation aborted: {message}", LogType.ERROR)
    return SimulationResult(
        winner=None,
        reason=OutcomeReason.ERROR,
        ticks=last.tick if last is not None else 0,
        side1_name=initial[0].name,
        side2_name=initial[1].name,
        side1_initial_power=initial[0].power,
        side2_initial_power=initial[1].power,
        side1_final_power=final1.power,
        side2_final_power=final2.power,
        side1_casualties=final1.casualties,
        side2_casualties=final2.casualties,
        critical_hits=tuple(critical_hits),
        error=message,
    )


def ratio_band(
    power1: float, power2: float, engine: EngineRules = DEFAULT_RULES.engine
) -> RatioBand:
    stronger, weaker = max(power1, power2), min(power1, power2)
    if stronger <= 0:
        return RatioBand.BALANCED
    if weaker <= 0:
        return RatioBand.EXTREME
    ratio = stronger / weaker
    if ratio > engine.extreme_ratio:
        return RatioBand.EXTREME
    if ratio > engine.significant_ratio:
        return RatioBand.SIGNIFICANT
    return RatioBand.BALANCED


def casualty_rate(side: Side) -> float:
    fielded = side.unit_count + side.casualties
    if fielded == 0:
        return 0.0
    return side.casualties / fielded


def result_text(winner: Winner, side1_name: str, side2_name: str) -> str:
    if winner == Winner.SIDE1:
        return f"{side1_name} have defeated {side2_name}!"
    if winner == Winner.SIDE2:
        return f"{side2_name} have successfully defended against {side1_name}!"
    return f"The battle between {side1_name} and {side2_name} has ended in a stalemate."


def narrate(
    result: SimulationResult,
    final1: Side,
    final2: Side,
    log: BattleLog,
    engine: EngineRules = DEFAULT_RULES.engine,
) -> None:
    log.section("Battle Result")
    if result.winner is not None:
        log.add(
            result_text(result.winner, result.side1_name, result.side2_name), LogType.IMPORTANT
        )
    if result.reason == OutcomeReason.POWER_COMPARISON:
        log.add(f"No side was defeated within {result.ticks} ticks; decided on remaining power")

    band = ratio_band(result.side1_final_power, result.side2_final_power, engine)
    if band == RatioBand.EXTREME:
        log.add("The power difference was extreme (more than 3:1)")
    elif band == RatioBand.SIGNIFICANT:
        log.add("One side held a significant power advantage (more than 1.5:1)")
    else:
        log.add("The sides were evenly balanced")

    for index, name in ((1, result.side1_name), (2, result.side2_name)):
        hits = result.critical_hits_for(index)
        combos = sum(1 for hit in hits if hit.combo)
        if hits:
            log.add(
                f"{name} landed {len(hits)} critical hits ({combos} combo criticals)",
                LogType.CRITICAL,
            )
        else:
            log.add(f"{name} landed no critical hits")

    rate1, rate2 = casualty_rate(final1), casualty_rate(final2)
    log.add(
        f"Casualty rate: {result.side1_name} {rate1:.0%}, {result.side2_name} {rate2:.0%}"
    )
