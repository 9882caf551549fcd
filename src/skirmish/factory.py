"""Service Factory for Skirmish.

This module provides factory functions for creating simulator instances with
proper dependency wiring.  Use these functions in production code to ensure
the combat rules and limits come from the application settings.

For testing, inject protocol-based fakes instead of using these factories.

Example:
    # Production usage
    from skirmish.factory import create_battle_simulator
    simulator = create_battle_simulator()

    # Testing usage
    from skirmish.services.battle_simulator import BattleSimulator
    simulator = BattleSimulator(FakeRules())
"""

from skirmish.config import Settings, get_settings
from skirmish.domain.combat_rules import StandardCombatRules
from skirmish.domain.roster import Roster
from skirmish.domain.rules_config import DEFAULT_RULES, RulesConfig
from skirmish.services.battle_simulator import BattleSimulator


def create_combat_rules(
    settings: Settings | None = None, rules: RulesConfig = DEFAULT_RULES
) -> StandardCombatRules:
    """Create the bundled default combat rules.

    Args:
        settings: Application settings (cached settings when omitted)
        rules: Rule configuration

    Returns:
        StandardCombatRules seeded from the settings
    """
    settings = settings or get_settings()
    return StandardCombatRules(seed=settings.rules_seed, config=rules.standard)


def create_battle_simulator(
    settings: Settings | None = None,
    *,
    rules: RulesConfig = DEFAULT_RULES,
    roster: Roster | None = None,
) -> BattleSimulator:
    """Create a BattleSimulator with all dependencies.

    Args:
        settings: Application settings (cached settings when omitted)
        rules: Rule configuration
        roster: Optional pre-built roster

    Returns:
        Fully initialized BattleSimulator using the default combat rules
    """
    settings = settings or get_settings()
    return BattleSimulator(
        create_combat_rules(settings, rules),
        roster=roster,
        engine=rules.engine,
        default_max_ticks=settings.default_max_ticks,
        max_ticks_limit=settings.max_ticks_limit,
        log_max_entries=settings.log_max_entries,
    )
