"""Mechanic collection for both sides of an exchange.

Each side's mechanics are gathered from seven sources in a fixed order:
unit abilities (the unit, then each attached leader), the selected weapon's
attributes (attacker only), enhancement, faction abilities, detachment
abilities, active stratagems and the damaged profile.  The order only shapes
the explanation output; application order is decided by the effect
applicator.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import replace
from typing import TYPE_CHECKING

from mathhammer.domain.core_ability_data import DEFAULT_CORE_ABILITIES
from mathhammer.domain.enums import (
    Effect,
    GamePhase,
    Perspective,
    RollType,
    SourceKind,
    TurnRestriction,
    coerce,
)
from mathhammer.domain.models import (
    Ability,
    ArmyContext,
    CollectedMechanics,
    Datasheet,
    GameContext,
    Mechanic,
    MechanicSource,
    Stratagem,
    UnitContext,
)
from mathhammer.domain.state import LEADER_STATES
from mathhammer.domain.weapon_attributes import collect_weapon_mechanics

if TYPE_CHECKING:
    from mathhammer.interfaces.registry import ICoreAbilityRegistry

logger = logging.getLogger(__name__)

DAMAGED_PROFILE_NAME = "Damaged Profile"

_LEADING_STATES = LEADER_STATES - {"hasLeader", "isAttached"}
_ROLL_EFFECTS = frozenset(
    {Effect.ROLL_BONUS, Effect.ROLL_PENALTY, Effect.REROLL, Effect.AUTO_SUCCESS}
)


def _tag(mechanics: Iterable[Mechanic], source: MechanicSource) -> list[Mechanic]:
    return [replace(mechanic, source=source) for mechanic in mechanics]


def ability_mechanics(
    ability: Ability, registry: ICoreAbilityRegistry = DEFAULT_CORE_ABILITIES
) -> list[Mechanic]:
    """Mechanics for one ability, preferring the core registry over embedded data."""

    resolved = registry.resolve(ability.name, ability.parameter)
    if resolved is not None:
        if not resolved:
            logger.debug(
                "core ability %s contributes no mechanics (parameter=%r)",
                ability.name,
                ability.parameter,
            )
        return resolved
    return list(ability.mechanics)


def _collect_datasheet(
    datasheet: Datasheet, registry: ICoreAbilityRegistry
) -> list[Mechanic]:
    mechanics: list[Mechanic] = []
    for ability in datasheet.abilities:
        source = MechanicSource(
            kind=SourceKind.ABILITY, name=ability.name, unit_name=datasheet.name
        )
        mechanics.extend(_tag(ability_mechanics(ability, registry), source))
    return mechanics


def _requires_leading(mechanic: Mechanic) -> bool:
    return any(condition.state in _LEADING_STATES for condition in mechanic.conditions)


def filter_leader_mechanics(mechanics: Iterable[Mechanic], *, leading: bool) -> list[Mechanic]:
    """Drop mechanics gated on leading a unit unless their datasheet is the one leading."""

    if leading:
        return list(mechanics)
    return [mechanic for mechanic in mechanics if not _requires_leading(mechanic)]


def collect_unit_abilities(
    unit: UnitContext, registry: ICoreAbilityRegistry = DEFAULT_CORE_ABILITIES
) -> list[Mechanic]:
    """Abilities of the unit followed by those of every attached leader.

    The unit's own datasheet is being led, never leading, so its
    leading-gated mechanics are dropped; attached leaders keep theirs.
    """

    mechanics = filter_leader_mechanics(_collect_datasheet(unit.datasheet, registry), leading=False)
    for leader in unit.attached_leaders:
        mechanics.extend(
            filter_leader_mechanics(_collect_datasheet(leader, registry), leading=True)
        )
    return mechanics


def collect_enhancement(unit: UnitContext) -> list[Mechanic]:
    enhancement = unit.enhancement
    if enhancement is None:
        return []
    source = MechanicSource(kind=SourceKind.ENHANCEMENT, name=enhancement.name)
    return _tag(enhancement.mechanics, source)


def collect_faction_abilities(army: ArmyContext) -> list[Mechanic]:
    mechanics: list[Mechanic] = []
    for ability in army.faction_abilities:
        source = MechanicSource(kind=SourceKind.FACTION, name=ability.name)
        mechanics.extend(_tag(ability.mechanics, source))
    return mechanics


def collect_detachment_abilities(army: ArmyContext) -> list[Mechanic]:
    mechanics: list[Mechanic] = []
    for ability in army.detachment_abilities:
        source = MechanicSource(kind=SourceKind.DETACHMENT, name=ability.name)
        mechanics.extend(_tag(ability.mechanics, source))
    return mechanics


def is_valid_for_phase(stratagem: Stratagem, phase: GamePhase | None) -> bool:
    if phase is None or not stratagem.phases:
        return True
    phases = {coerce(GamePhase, p) for p in stratagem.phases}
    return GamePhase.ANY in phases or phase in phases


def is_valid_for_turn(
    stratagem: Stratagem, side: Perspective, active_side: Perspective | None
) -> bool:
    turn = coerce(TurnRestriction, stratagem.turn)
    if active_side is None or turn is None or turn is TurnRestriction.EITHER:
        return True
    if turn is TurnRestriction.YOUR:
        return side is active_side
    if turn is TurnRestriction.OPPONENT:
        return side is not active_side
    return True


def collect_stratagems(context: GameContext, side: Perspective) -> list[Mechanic]:
    """Mechanics of the side's stratagems that are toggled on and currently usable."""

    active_ids = context.active_stratagem_ids(side)
    mechanics: list[Mechanic] = []
    for stratagem in context.army_for(side).stratagems:
        if stratagem.id not in active_ids:
            continue
        if not is_valid_for_phase(stratagem, context.phase):
            logger.debug("stratagem %s skipped: not usable in %s", stratagem.name, context.phase)
            continue
        if not is_valid_for_turn(stratagem, side, context.active_side):
            logger.debug("stratagem %s skipped: wrong turn", stratagem.name)
            continue
        source = MechanicSource(kind=SourceKind.STRATAGEM, name=stratagem.name)
        mechanics.extend(_tag(stratagem.mechanics, source))
    return mechanics


def collect_damaged_profile(unit: UnitContext) -> list[Mechanic]:
    if not unit.status.is_damaged:
        return []
    source = MechanicSource(
        kind=SourceKind.DAMAGED, name=DAMAGED_PROFILE_NAME, unit_name=unit.datasheet.name
    )
    return _tag(unit.datasheet.damaged_mechanics, source)


def collect_side(
    context: GameContext,
    side: Perspective,
    registry: ICoreAbilityRegistry = DEFAULT_CORE_ABILITIES,
) -> list[Mechanic]:
    """Every mechanic relevant to ``side``, in collection order, each with a stable key."""

    unit = context.unit_for(side)
    army = context.army_for(side)

    mechanics = collect_unit_abilities(unit, registry)
    if side is Perspective.ATTACKER:
        mechanics.extend(collect_weapon_mechanics(unit.selected_weapon))
    mechanics.extend(collect_enhancement(unit))
    mechanics.extend(collect_faction_abilities(army))
    mechanics.extend(collect_detachment_abilities(army))
    mechanics.extend(collect_stratagems(context, side))
    mechanics.extend(collect_damaged_profile(unit))

    return [replace(mechanic, key=f"{side}:{index}") for index, mechanic in enumerate(mechanics)]


def collect_all(
    context: GameContext, registry: ICoreAbilityRegistry = DEFAULT_CORE_ABILITIES
) -> CollectedMechanics:
    collected = CollectedMechanics(
        attacker_mechanics=collect_side(context, Perspective.ATTACKER, registry),
        defender_mechanics=collect_side(context, Perspective.DEFENDER, registry),
    )
    logger.debug(
        "collected %d attacker and %d defender mechanics",
        len(collected.attacker_mechanics),
        len(collected.defender_mechanics),
    )
    return collected


def filter_mechanics_by_roll_type(
    mechanics: Iterable[Mechanic], roll_type: RollType
) -> list[Mechanic]:
    """Roll modifiers, rerolls and auto-successes that touch ``roll_type``."""

    return [
        mechanic
        for mechanic in mechanics
        if coerce(Effect, mechanic.effect) in _ROLL_EFFECTS
        and coerce(RollType, mechanic.attribute) is roll_type
    ]
