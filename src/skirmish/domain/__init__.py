"""Domain model for the Skirmish battle simulator.

This package hosts the pure rules layer.  It exposes:

* Dataclasses describing rosters and run results (see :mod:`models`).
* The roster editing operations (see :mod:`roster`).
* The tick processor and the outcome finalizer (:mod:`battle`, :mod:`outcome`).
* Rule configuration objects and the bundled default rules.

Everything here operates purely in-memory; the services layer drives it.
"""

from . import (
    battle,
    battle_log,
    combat_rules,
    enums,
    errors,
    models,
    outcome,
    roster,
    rules_config,
)

__all__ = [
    "battle",
    "battle_log",
    "combat_rules",
    "enums",
    "errors",
    "models",
    "outcome",
    "roster",
    "rules_config",
]
