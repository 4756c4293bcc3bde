"""Pure rules layer for Mathhammer.

This package resolves one attacker/defender exchange entirely in memory.
It exposes:

* Dataclasses describing datasheets, army rules and game state (see :mod:`models`).
* Enumerations for entities, effects, operators and roll types (see :mod:`enums`).
* Game-table constants (see :mod:`rules_config`).
* The resolution pipeline: state resolution, condition evaluation, mechanic
  collection, effect application, roll targets, damage and the combat
  orchestrator.

Nothing here performs I/O; loaders and serialisation live in
:mod:`mathhammer.schemas` and :mod:`mathhammer.repository`.
"""

from . import (
    collector,
    combat,
    conditions,
    core_abilities,
    core_ability_data,
    damage,
    effects,
    enums,
    models,
    rolls,
    rules_config,
    state,
    weapon_attributes,
)

__all__ = [
    "collector",
    "combat",
    "conditions",
    "core_abilities",
    "core_ability_data",
    "damage",
    "effects",
    "enums",
    "models",
    "rolls",
    "rules_config",
    "state",
    "weapon_attributes",
]
