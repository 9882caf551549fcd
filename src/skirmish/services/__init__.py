"""Service layer for the Skirmish battle simulator.

Services depend on the ``CombatRules`` protocol rather than a concrete rules
module:

- BatchRunner: resolve a battle in one pass
- SteppingRunner: advance tick by tick, rewind, fast-forward
- BattleSimulator: roster construction plus both execution modes

Production Usage:
    from skirmish.factory import create_battle_simulator
    simulator = create_battle_simulator()
    result = simulator.run_battle_simulation(20)

Testing Usage:
    from skirmish.services.battle_simulator import BattleSimulator

    class FakeRules:
        def calculate_group_power(self, group):
            return float(len(group.units))
        ...

    simulator = BattleSimulator(FakeRules())
"""

from skirmish.services.battle_simulator import BattleSimulator
from skirmish.services.simulation_service import BatchRunner, SteppingRunner

__all__ = [
    "BatchRunner",
    "BattleSimulator",
    "SteppingRunner",
]
