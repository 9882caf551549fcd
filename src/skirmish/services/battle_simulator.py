"""Battle simulator facade used by the tooling layer.

Bundles a roster, the combat rules, the narrative log and both runners
behind the construction/run/step surface described by ``IBattleSimulator``.
"""

from __future__ import annotations

from skirmish.domain.battle_log import BattleLog, LogEntry
from skirmish.domain.enums import LogType, RunStatus
from skirmish.domain.models import (
    Group,
    GroupID,
    ItemRefID,
    Side,
    SimulationResult,
    TickResult,
    Unit,
    UnitID,
)
from skirmish.domain.roster import Roster
from skirmish.domain.rules_config import DEFAULT_RULES, EngineRules
from skirmish.interfaces.combat_rules import CombatRules
from skirmish.services.simulation_service import BatchRunner, SteppingRunner

DEFAULT_MAX_TICKS = 20


class BattleSimulator:
    """Service for building rosters and running battle simulations."""

    def __init__(
        self,
        rules: CombatRules,
        *,
        roster: Roster | None = None,
        engine: EngineRules = DEFAULT_RULES.engine,
        default_max_ticks: int = DEFAULT_MAX_TICKS,
        max_ticks_limit: int | None = None,
        log_max_entries: int = 2000,
    ) -> None:
        self.rules = rules
        self.engine = engine
        self.roster = roster or Roster()
        self.default_max_ticks = default_max_ticks
        self.max_ticks_limit = max_ticks_limit
        self.log = BattleLog(log_max_entries)
        self.stepper = SteppingRunner(
            rules, engine=engine, log=self.log, max_ticks_limit=max_ticks_limit
        )
        self.last_result: SimulationResult | None = None

    # --- Roster construction --------------------------------------------------

    def add_group(self, side: int, name: str | None = None) -> GroupID:
        return self.roster.add_group(side, name)

    def add_unit(
        self,
        group_id: GroupID,
        unit_type: str,
        level: int = 1,
        is_player_character: bool = False,
    ) -> UnitID:
        return self.roster.add_unit(group_id, unit_type, level, is_player_character)

    def remove_unit(self, group_id: GroupID, unit_id: UnitID) -> Unit:
        return self.roster.remove_unit(group_id, unit_id)

    def add_item(self, group_id: GroupID, item_id: str, quantity: int = 1) -> ItemRefID:
        return self.roster.add_item(group_id, item_id, quantity)

    def delete_group(self, side: int, group_id: GroupID) -> Group:
        return self.roster.delete_group(side, group_id)

    def rename_side(self, side: int, name: str) -> None:
        self.roster.side(side).name = name

    def side(self, index: int) -> Side:
        return self.roster.side(index)

    def recompute_side_power(self, side: int) -> float:
        return self.roster.recompute_side_power(side, self.rules)

    def recompute_power(self) -> tuple[float, float]:
        return self.recompute_side_power(1), self.recompute_side_power(2)

    # --- Batch mode -------------------------------------------------------------

    def run_battle_simulation(self, max_ticks: int | None = None) -> SimulationResult:
        """Resolve the whole battle on a copy of the current roster.

        The narrative is appended to the shared log under its own section, so
        an ongoing stepping session keeps its entries.
        """

        runner = BatchRunner(
            self.rules, engine=self.engine, log=self.log, max_ticks_limit=self.max_ticks_limit
        )
        self.last_result = runner.run_batch(
            self.roster.side1, self.roster.side2, self._ticks(max_ticks)
        )
        return self.last_result

    # --- Stepping mode ----------------------------------------------------------

    @property
    def status(self) -> RunStatus:
        return self.stepper.status

    @property
    def current_tick(self) -> int:
        return self.stepper.current_tick

    @property
    def intermediate_results(self) -> tuple[TickResult, ...]:
        return self.stepper.intermediate_results

    @property
    def current_step_state(self) -> TickResult | None:
        return self.stepper.current_step_state

    def start_run(self, max_ticks: int | None = None) -> None:
        self.stepper.start_run(self.roster.side1, self.roster.side2, self._ticks(max_ticks))

    def step_forward(self) -> TickResult | None:
        """Advance one tick, starting a run from the current roster if needed."""

        if not self.stepper.started:
            self.start_run()
        result = self.stepper.step_forward()
        if self.stepper.result is not None:
            self.last_result = self.stepper.result
        return result

    def fast_forward(self) -> SimulationResult:
        if not self.stepper.started:
            self.start_run()
        self.last_result = self.stepper.fast_forward()
        return self.last_result

    def rewind(self, tick: int) -> None:
        self.stepper.rewind(tick)

    def reset(self) -> None:
        self.stepper.reset()
        self.last_result = None

    def _ticks(self, max_ticks: int | None) -> int:
        return self.default_max_ticks if max_ticks is None else max_ticks

    # --- Log --------------------------------------------------------------------

    def log_entries(self, type: LogType | None = None) -> list[LogEntry]:
        return self.log.entries(type)

    def drain_log(self) -> list[LogEntry]:
        return self.log.drain()
