"""Batch and stepping runners for the battle engine.

Both runners drive the same ``process_tick`` function and the same outcome
finalizer, so resolving a battle in one pass and stepping through it tick by
tick reach the same terminal result for identical rosters and rules.
"""

from __future__ import annotations

import logging

from skirmish.domain.battle import describe_tick, process_tick, validate_run
from skirmish.domain.battle_log import BattleLog
from skirmish.domain.enums import RunStatus, Winner
from skirmish.domain.errors import RunStateError
from skirmish.domain.models import CriticalHit, Side, SimulationResult, TickResult
from skirmish.domain.outcome import finalize, inconclusive
from skirmish.domain.roster import recompute_side_power
from skirmish.domain.rules_config import DEFAULT_RULES, EngineRules
from skirmish.interfaces.combat_rules import CombatRules

logger = logging.getLogger(__name__)


def prepare_sides(side1: Side, side2: Side, rules: CombatRules) -> tuple[Side, Side]:
    """Copy both sides and compute their starting power."""

    initial1, initial2 = side1.clone(), side2.clone()
    recompute_side_power(initial1, rules)
    recompute_side_power(initial2, rules)
    return initial1, initial2


def announce(initial: tuple[Side, Side], max_ticks: int, log: BattleLog) -> None:
    log.section("Battle Simulation")
    for index, side in enumerate(initial, start=1):
        log.add(
            f"Side {index}: {side.name} with {len(side.groups)} groups, "
            f"{side.unit_count} units, power {side.power:.1f}"
        )
    log.add(f"Maximum ticks: {max_ticks}")


class BatchRunner:
    """Resolve a whole battle in one call."""

    def __init__(
        self,
        rules: CombatRules,
        *,
        engine: EngineRules = DEFAULT_RULES.engine,
        log: BattleLog | None = None,
        max_ticks_limit: int | None = None,
    ) -> None:
        self.rules = rules
        self.engine = engine
        self.log = log if log is not None else BattleLog()
        self.max_ticks_limit = max_ticks_limit

    def run_batch(self, side1: Side, side2: Side, max_ticks: int) -> SimulationResult:
        """Run ticks until a side is defeated or ``max_ticks`` is reached.

        Raises:
            ConfigurationError: If ``max_ticks`` is invalid or a side has no units.
        """

        validate_run(side1, side2, max_ticks, max_ticks_limit=self.max_ticks_limit)

        initial = (side1.clone(), side2.clone())
        last: TickResult | None = None
        critical_hits: list[CriticalHit] = []
        try:
            initial = prepare_sides(side1, side2, self.rules)
            announce(initial, max_ticks, self.log)
            working1, working2 = initial[0].clone(), initial[1].clone()
            for tick in range(1, max_ticks + 1):
                last = process_tick(working1, working2, tick, rules=self.rules, engine=self.engine)
                critical_hits.extend(last.all_critical_hits())
                describe_tick(last, self.log)
                if last.any_defeated:
                    break
        except Exception as exc:
            logger.error("battle simulation aborted: %s", exc, exc_info=exc)
            return inconclusive(
                exc, initial=initial, last=last, critical_hits=critical_hits, log=self.log
            )

        return finalize(
            last,
            initial=initial,
            critical_hits=critical_hits,
            log=self.log,
            engine=self.engine,
        )


class SteppingRunner:
    """Advance a battle one tick at a time, keeping every ``TickResult``.

    Alongside each result the runner keeps a private copy of the post-tick
    sides; the next step continues from that copy (or from the starting copy
    before tick 1), never from the snapshots handed to callers.
    """

    def __init__(
        self,
        rules: CombatRules,
        *,
        engine: EngineRules = DEFAULT_RULES.engine,
        log: BattleLog | None = None,
        max_ticks_limit: int | None = None,
    ) -> None:
        self.rules = rules
        self.engine = engine
        self.log = log if log is not None else BattleLog()
        self.max_ticks_limit = max_ticks_limit
        self.status = RunStatus.NOT_STARTED
        self.max_ticks = 0
        self._initial: tuple[Side, Side] | None = None
        self._results: list[TickResult] = []
        self._states: list[tuple[Side, Side]] = []
        self._result: SimulationResult | None = None

    @property
    def started(self) -> bool:
        return self._initial is not None

    @property
    def current_tick(self) -> int:
        return len(self._results)

    @property
    def intermediate_results(self) -> tuple[TickResult, ...]:
        return tuple(self._results)

    @property
    def current_step_state(self) -> TickResult | None:
        return self._results[-1] if self._results else None

    @property
    def result(self) -> SimulationResult | None:
        return self._result

    @property
    def is_complete(self) -> bool:
        """True once a side is defeated or the tick budget is used up."""

        if not self._results:
            return False
        return self._results[-1].any_defeated or self.current_tick >= self.max_ticks

    def start_run(self, side1: Side, side2: Side, max_ticks: int) -> None:
        """Configure a new run from copies of ``side1`` and ``side2``.

        Raises:
            ConfigurationError: If ``max_ticks`` is invalid or a side has no units.
        """

        validate_run(side1, side2, max_ticks, max_ticks_limit=self.max_ticks_limit)
        self._results.clear()
        self._states.clear()
        self._result = None
        self.max_ticks = max_ticks
        self.log.clear()
        self._initial = (side1.clone(), side2.clone())
        self.status = RunStatus.IN_PROGRESS
        try:
            self._initial = prepare_sides(side1, side2, self.rules)
        except Exception as exc:
            self._abort(exc)
            return
        announce(self._initial, max_ticks, self.log)

    def step_forward(self) -> TickResult | None:
        """Execute exactly one more tick.

        Returns ``None`` once the run is finalized; the first call after the
        terminal tick finalizes the run.
        """

        self._ensure_in_progress()
        if self.status == RunStatus.FINALIZED:
            return None
        if self.is_complete:
            self._finalize()
            return None

        tick = self.current_tick + 1
        working1, working2 = self._working_sides()
        try:
            result = process_tick(working1, working2, tick, rules=self.rules, engine=self.engine)
        except Exception as exc:
            self._abort(exc)
            return None

        self._results.append(result)
        self._states.append((working1, working2))
        describe_tick(result, self.log)
        return result

    def fast_forward(self) -> SimulationResult:
        """Run every remaining tick, then finalize."""

        self._ensure_in_progress()
        while self.status == RunStatus.IN_PROGRESS and not self.is_complete:
            self.step_forward()
        if self.status != RunStatus.FINALIZED:
            self._finalize()
        assert self._result is not None
        return self._result

    def finalize(self, forced_winner: Winner | None = None) -> SimulationResult:
        """Finalize the run now, optionally with an already known winner."""

        self._ensure_in_progress()
        if self.status != RunStatus.FINALIZED:
            self._finalize(forced_winner)
        assert self._result is not None
        return self._result

    def reset(self) -> None:
        """Discard every recorded tick; the next step starts again at tick 1."""

        self._results.clear()
        self._states.clear()
        self._result = None
        self.log.clear()
        self.status = RunStatus.NOT_STARTED

    def rewind(self, tick: int) -> None:
        """Drop recorded results after ``tick`` and reopen the run."""

        if not self.started:
            raise RunStateError("No run has been started")
        if not 0 <= tick <= self.current_tick:
            raise ValueError(f"Cannot rewind to tick {tick}; recorded ticks: {self.current_tick}")
        del self._results[tick:]
        del self._states[tick:]
        self._result = None
        self.status = RunStatus.IN_PROGRESS
        self.log.add(f"Rewound to tick {tick}")

    def result_at(self, tick: int) -> TickResult:
        if not 1 <= tick <= self.current_tick:
            raise ValueError(f"No result recorded for tick {tick}")
        return self._results[tick - 1]

    def critical_hits(self) -> list[CriticalHit]:
        hits: list[CriticalHit] = []
        for result in self._results:
            hits.extend(result.all_critical_hits())
        return hits

    def _ensure_in_progress(self) -> None:
        if self._initial is None:
            raise RunStateError("No run has been started")
        if self.status == RunStatus.NOT_STARTED:
            self.status = RunStatus.IN_PROGRESS
            announce(self._initial, self.max_ticks, self.log)

    def _working_sides(self) -> tuple[Side, Side]:
        assert self._initial is not None
        previous = self._states[-1] if self._states else self._initial
        return previous[0].clone(), previous[1].clone()

    def _finalize(self, forced_winner: Winner | None = None) -> None:
        assert self._initial is not None
        self._result = finalize(
            self.current_step_state,
            forced_winner,
            initial=self._initial,
            critical_hits=self.critical_hits(),
            log=self.log,
            engine=self.engine,
        )
        self.status = RunStatus.FINALIZED

    def _abort(self, exc: Exception) -> None:
        assert self._initial is not None
        logger.error("stepping simulation aborted: %s", exc, exc_info=exc)
        self._result = inconclusive(
            exc,
            initial=self._initial,
            last=self.current_step_state,
            critical_hits=self.critical_hits(),
            log=self.log,
        )
        self.status = RunStatus.FINALIZED
