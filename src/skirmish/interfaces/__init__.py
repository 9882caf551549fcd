"""Protocol-based interfaces for Skirmish.

This module exports the protocol interfaces, providing a clear contract for
the combat rules consumed by the engine and for the simulator surface used by
tooling.  Tests inject deterministic fakes through these protocols.
"""

from skirmish.interfaces.combat_rules import CombatRules
from skirmish.interfaces.simulator import IBattleSimulator

__all__ = [
    "CombatRules",
    "IBattleSimulator",
]
