"""Entity resolution against the game context.

Mechanics and conditions refer to abstract entities ("this unit", "target
model", "this army").  The helpers here turn such a reference into the
concrete unit data for a given perspective and expose the derived facts the
condition evaluator needs.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from mathhammer.domain.enums import (
    Entity,
    GamePhase,
    ModelField,
    Perspective,
    WeaponField,
    coerce,
)
from mathhammer.domain.models import (
    CombatStatus,
    Datasheet,
    GameContext,
    ModelProfile,
    UnitContext,
    WeaponProfile,
)

AttributeValue = int | str | None

_OWN_ENTITIES = frozenset({Entity.THIS_UNIT, Entity.THIS_MODEL})
OPPOSING_ENTITIES = frozenset(
    {
        Entity.TARGET_UNIT,
        Entity.TARGET_MODEL,
        Entity.OPPOSING_UNIT,
        Entity.OPPOSING_MODEL,
    }
)

# Named state flags and the CombatStatus field each one reads.
STATE_FLAGS: dict[str, str] = {
    "isStationary": "is_stationary",
    "inCover": "in_cover",
    "inEngagementRange": "in_engagement_range",
    "inRangeOfObjective": "in_range_of_objective",
    "inRangeOfContestedObjective": "in_range_of_contested_objective",
    "inRangeOfFriendlyObjective": "in_range_of_friendly_objective",
    "inRangeOfEnemyObjective": "in_range_of_enemy_objective",
    "isBattleShocked": "is_battle_shocked",
    "hasFiredThisPhase": "has_fired_this_phase",
    "hasChargedThisTurn": "has_charged_this_turn",
    "isBelowHalfStrength": "is_below_half_strength",
    "isBelowStartingStrength": "is_below_starting_strength",
    "isDamaged": "is_damaged",
}

LEADER_STATES = frozenset({"hasLeader", "isLeadingUnit", "leading", "isAttached"})

# Phase checks; a context without a phase is resolved as a shooting attack.
PHASE_STATES: dict[str, GamePhase] = {
    "isShootingPhase": GamePhase.SHOOTING,
    "isFightPhase": GamePhase.FIGHT,
}
DEFAULT_PHASE = GamePhase.SHOOTING


@dataclass(frozen=True, slots=True)
class EntityState:
    """Facts about a resolved entity.  Army-level entities carry no unit."""

    keywords: frozenset[str]
    abilities: frozenset[str]
    unit: UnitContext | None = None

    @property
    def model(self) -> ModelProfile | None:
        return self.unit.selected_model if self.unit else None

    @property
    def weapon(self) -> WeaponProfile | None:
        return self.unit.selected_weapon if self.unit else None

    @property
    def combat_status(self) -> CombatStatus | None:
        return self.unit.status if self.unit else None


_EMPTY_STATE = EntityState(keywords=frozenset(), abilities=frozenset())


def normalize_name(name: str) -> str:
    return name.strip().upper()


def normalize_names(names: Iterable[str]) -> frozenset[str]:
    return frozenset(normalize_name(name) for name in names)


def resolve_unit(
    entity: Entity | str, context: GameContext, perspective: Perspective
) -> UnitContext | None:
    """Return the unit an entity refers to, or ``None`` for army-level references."""

    ref = coerce(Entity, entity)
    if ref in _OWN_ENTITIES:
        return context.unit_for(perspective)
    if ref in OPPOSING_ENTITIES:
        return context.unit_for(perspective.opponent)
    return None


def _datasheets(unit: UnitContext) -> tuple[Datasheet, ...]:
    return (unit.datasheet, *unit.attached_leaders)


def resolve(entity: Entity | str, context: GameContext, perspective: Perspective) -> EntityState:
    """Resolve the full state for ``entity`` seen from ``perspective``."""

    unit = resolve_unit(entity, context, perspective)
    if unit is None:
        return _EMPTY_STATE

    sheets = _datasheets(unit)
    keywords = normalize_names(kw for sheet in sheets for kw in sheet.keywords)
    abilities = normalize_names(ability.name for sheet in sheets for ability in sheet.abilities)
    return EntityState(keywords=keywords, abilities=abilities, unit=unit)


def _model_value(model: ModelProfile, attribute: ModelField) -> AttributeValue:
    if attribute is ModelField.M:
        return model.m
    if attribute is ModelField.T:
        return model.t
    if attribute is ModelField.SV:
        return model.sv
    if attribute is ModelField.INV_SV:
        return model.inv_sv
    if attribute is ModelField.W:
        return model.w
    if attribute is ModelField.LD:
        return model.ld
    return model.oc


def _weapon_value(weapon: WeaponProfile, attribute: WeaponField) -> AttributeValue:
    if attribute is WeaponField.RANGE:
        return weapon.range
    if attribute is WeaponField.A:
        return weapon.a
    if attribute is WeaponField.BS_WS:
        return weapon.bs_ws
    if attribute is WeaponField.S:
        return weapon.s
    if attribute is WeaponField.AP:
        return weapon.ap
    return weapon.d


def get_attribute_value(
    entity: Entity | str,
    attribute: str,
    context: GameContext,
    perspective: Perspective,
) -> AttributeValue:
    """Read a model or weapon characteristic; ``None`` when the entity lacks that facet."""

    state = resolve(entity, context, perspective)

    model_field = coerce(ModelField, attribute)
    if isinstance(model_field, ModelField) and state.model is not None:
        return _model_value(state.model, model_field)

    weapon_field = coerce(WeaponField, attribute)
    if isinstance(weapon_field, WeaponField) and state.weapon is not None:
        return _weapon_value(state.weapon, weapon_field)

    return None


def check_state(
    entity: Entity | str,
    state_name: str,
    context: GameContext,
    perspective: Perspective,
) -> bool:
    """Check a named state flag.  Unknown names are simply false."""

    unit = resolve_unit(entity, context, perspective)
    if unit is None:
        return False

    flag = STATE_FLAGS.get(state_name)
    if flag is not None:
        return bool(getattr(unit.status, flag))

    if state_name in LEADER_STATES:
        return unit.has_leader

    phase = PHASE_STATES.get(state_name)
    if phase is not None:
        return (context.phase or DEFAULT_PHASE) == phase

    return False


def has_any_keyword(
    entity: Entity | str,
    keywords: Iterable[str],
    context: GameContext,
    perspective: Perspective,
) -> bool:
    state = resolve(entity, context, perspective)
    return not state.keywords.isdisjoint(normalize_names(keywords))


def has_any_ability(
    entity: Entity | str,
    abilities: Iterable[str],
    context: GameContext,
    perspective: Perspective,
) -> bool:
    state = resolve(entity, context, perspective)
    return not state.abilities.isdisjoint(normalize_names(abilities))
