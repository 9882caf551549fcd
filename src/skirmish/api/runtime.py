"""Runtime primitives backing the Skirmish HTTP API."""

from __future__ import annotations

import logging
from typing import Any

from skirmish.config import Settings, get_settings
from skirmish.domain.battle_log import LogEntry
from skirmish.domain.errors import SkirmishError
from skirmish.domain.models import Group, Side, SimulationResult, TickResult
from skirmish.domain.rules_config import DEFAULT_RULES, RulesConfig
from skirmish.factory import create_battle_simulator
from skirmish.services.battle_simulator import BattleSimulator

logger = logging.getLogger(__name__)


class SimulationNotFoundError(SkirmishError, LookupError):
    """Raised when a simulator session id is unknown."""


class SimulationRegistry:
    """In-memory simulator sessions keyed by integer id."""

    def __init__(self, settings: Settings, *, rules: RulesConfig = DEFAULT_RULES) -> None:
        self._settings = settings
        self._rules = rules
        self._sessions: dict[int, BattleSimulator] = {}
        self._next_id = 1

    def create(self, side1_name: str | None = None, side2_name: str | None = None) -> int:
        simulator = create_battle_simulator(self._settings, rules=self._rules)
        if side1_name:
            simulator.rename_side(1, side1_name)
        if side2_name:
            simulator.rename_side(2, side2_name)
        session_id = self._next_id
        self._next_id += 1
        self._sessions[session_id] = simulator
        logger.info("created simulation session %s", session_id)
        return session_id

    def get(self, session_id: int) -> BattleSimulator:
        simulator = self._sessions.get(session_id)
        if simulator is None:
            raise SimulationNotFoundError(f"Simulation {session_id} not found")
        return simulator

    def delete(self, session_id: int) -> None:
        if self._sessions.pop(session_id, None) is None:
            raise SimulationNotFoundError(f"Simulation {session_id} not found")

    def ids(self) -> list[int]:
        return sorted(self._sessions)

    def clear(self) -> None:
        self._sessions.clear()

    # --- Serialization helpers ------------------------------------------------

    @staticmethod
    def group_to_dict(group: Group) -> dict[str, Any]:
        return {
            "id": str(group.id),
            "name": group.name,
            "power": group.power,
            "units": [
                {
                    "id": int(unit.id),
                    "type": unit.type,
                    "level": unit.level,
                    "display_name": unit.display_name,
                    "critical_hit": unit.critical_hit,
                    "combo_critical": unit.combo_critical,
                }
                for unit in group.units.values()
            ],
            "items": [
                {"id": int(item.id), "item_id": item.item_id, "quantity": item.quantity}
                for item in group.items.values()
            ],
        }

    @classmethod
    def side_to_dict(cls, side: Side) -> dict[str, Any]:
        return {
            "name": side.name,
            "power": side.power,
            "casualties": side.casualties,
            "unit_count": side.unit_count,
            "groups": [cls.group_to_dict(group) for group in side.groups.values()],
        }

    @classmethod
    def to_detail_dict(cls, session_id: int, simulator: BattleSimulator) -> dict[str, Any]:
        simulator.recompute_power()
        return {
            "id": session_id,
            "status": str(simulator.status),
            "current_tick": simulator.current_tick,
            "side1": cls.side_to_dict(simulator.side(1)),
            "side2": cls.side_to_dict(simulator.side(2)),
        }

    @classmethod
    def tick_to_dict(cls, result: TickResult) -> dict[str, Any]:
        return {
            "tick": result.tick,
            "power_before": [result.side1_power_before, result.side2_power_before],
            "power_after": [result.side1_power_after, result.side2_power_after],
            "ratios": [result.ratios.ratio1, result.ratios.ratio2],
            "attrition": list(result.attrition),
            "casualties": list(result.casualties),
            "total_casualties": list(result.total_casualties),
            "critical_hits": [
                {
                    "side": hit.side,
                    "group_id": str(hit.group_id),
                    "unit_id": int(hit.unit_id),
                    "unit_name": hit.unit_name,
                    "combo": hit.combo,
                }
                for hit in result.all_critical_hits()
            ],
            "winning_state": str(result.winning_state),
            "defeated": list(result.defeated),
            "fallen": [unit.display_name for unit in result.fallen],
            "side1": cls.side_to_dict(result.side1),
            "side2": cls.side_to_dict(result.side2),
        }

    @staticmethod
    def result_to_dict(result: SimulationResult) -> dict[str, Any]:
        return {
            "winner": int(result.winner) if result.winner is not None else None,
            "reason": str(result.reason),
            "ticks": result.ticks,
            "side1": {
                "name": result.side1_name,
                "initial_power": result.side1_initial_power,
                "final_power": result.side1_final_power,
                "casualties": result.side1_casualties,
                "critical_hits": len(result.critical_hits_for(1)),
            },
            "side2": {
                "name": result.side2_name,
                "initial_power": result.side2_initial_power,
                "final_power": result.side2_final_power,
                "casualties": result.side2_casualties,
                "critical_hits": len(result.critical_hits_for(2)),
            },
            "inconclusive": result.inconclusive,
            "error": result.error,
        }

    @staticmethod
    def log_to_dicts(entries: list[LogEntry]) -> list[dict[str, Any]]:
        return [
            {"message": entry.message, "type": str(entry.type), "timestamp": entry.timestamp}
            for entry in entries
        ]


class ApiState:
    """Aggregated services shared by the FastAPI layer."""

    def __init__(
        self, *, settings: Settings | None = None, rules: RulesConfig = DEFAULT_RULES
    ) -> None:
        self.settings = settings or get_settings()
        self.rules = rules
        self.simulations = SimulationRegistry(self.settings, rules=rules)

    async def shutdown(self) -> None:
        self.simulations.clear()


def build_state() -> ApiState:
    """Factory used by the API to initialize state."""

    return ApiState()
