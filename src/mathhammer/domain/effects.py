"""Effect application.

Applicable mechanics are folded into a fresh ``ModifiedStats`` in a fixed
effect order: keywords, abilities, static overrides, roll modifiers, then
auto-success and rerolls.  Mechanics sharing a priority keep collection
order.  Malformed mechanics are no-ops.

Roll modifiers whose entity is the opposing unit or model are kept apart in
``opponent_roll_modifiers``; the orchestrator adds them to the other side's
rolls.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass

from mathhammer.domain.conditions import applicable_indices, evaluate_with_reason
from mathhammer.domain.enums import (
    Effect,
    Entity,
    ModelField,
    Perspective,
    RerollGrade,
    RollType,
    SourceKind,
    WeaponField,
    coerce,
)
from mathhammer.domain.models import (
    GameContext,
    Mechanic,
    MechanicSource,
    MechanicValue,
    ModelProfile,
    ModelStats,
    ModifiedStats,
    RollModifier,
    WeaponProfile,
    WeaponStats,
)
from mathhammer.domain.rules_config import DEFAULT_RULES, RulesConfig
from mathhammer.domain.state import OPPOSING_ENTITIES

logger = logging.getLogger(__name__)

EFFECT_PRIORITY: dict[Effect, int] = {
    Effect.ADDS_KEYWORD: 1,
    Effect.ADDS_ABILITY: 2,
    Effect.STATIC_NUMBER: 3,
    Effect.ROLL_BONUS: 4,
    Effect.ROLL_PENALTY: 4,
    Effect.AUTO_SUCCESS: 5,
    Effect.REROLL: 5,
    Effect.MORTAL_WOUNDS: 6,
}
UNKNOWN_EFFECT_PRIORITY = 99

FEEL_NO_PAIN = "FEEL NO PAIN"
ANTI_PREFIX = "ANTI-"

_UNKNOWN_SOURCE = MechanicSource(kind=SourceKind.ABILITY, name="Unknown")
_TARGET_NUMBER = re.compile(r"^(\d+)\+?$")


@dataclass(slots=True)
class EffectReport:
    """Stats plus the applied/not-applied partition of the input mechanics."""

    stats: ModifiedStats
    applied: list[Mechanic]
    not_applied: list[Mechanic]
    reasons: list[str]


def effect_priority(mechanic: Mechanic) -> int:
    effect = coerce(Effect, mechanic.effect)
    if isinstance(effect, Effect):
        return EFFECT_PRIORITY[effect]
    return UNKNOWN_EFFECT_PRIORITY


def _is_number(value: object) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _target_number(value: int | str | None) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        match = _TARGET_NUMBER.match(value.strip())
        if match:
            return int(match.group(1))
    return 0


def _model_stats(model: ModelProfile | None, rules: RulesConfig) -> ModelStats:
    if model is None:
        return ModelStats(sv=rules.defaults.armour_save)
    return ModelStats(
        m=model.m,
        t=model.t,
        sv=model.sv,
        inv_sv=model.inv_sv,
        w=model.w,
        ld=model.ld,
        oc=model.oc,
    )


def _weapon_stats(weapon: WeaponProfile | None) -> WeaponStats | None:
    if weapon is None:
        return None
    return WeaponStats(
        range=weapon.range,
        a=weapon.a,
        bs_ws=_target_number(weapon.bs_ws),
        s=weapon.s,
        ap=weapon.ap,
        d=weapon.d,
        attributes=list(weapon.attributes),
    )


def initial_stats(
    context: GameContext, perspective: Perspective, rules: RulesConfig = DEFAULT_RULES
) -> ModifiedStats:
    """Snapshot of the perspective's selected model and weapon, before any mechanic."""

    unit = context.unit_for(perspective)
    return ModifiedStats(
        model=_model_stats(unit.selected_model, rules),
        weapon=_weapon_stats(unit.selected_weapon),
    )


def reroll_grade(value: MechanicValue) -> RerollGrade:
    if value == RerollGrade.ONES:
        return RerollGrade.ONES
    if value == RerollGrade.FAILED:
        return RerollGrade.FAILED
    return RerollGrade.ALL


def _append_unique(target: list[str], names: Sequence[str]) -> None:
    for name in names:
        normalized = name.strip().upper()
        if normalized and normalized not in target:
            target.append(normalized)


def _add_keywords(stats: ModifiedStats, mechanic: Mechanic) -> None:
    _append_unique(stats.added_keywords, mechanic.keywords)


def _add_abilities(stats: ModifiedStats, mechanic: Mechanic) -> None:
    _append_unique(stats.added_abilities, mechanic.abilities)
    if not _is_number(mechanic.value):
        return
    value = int(mechanic.value)
    for name in mechanic.abilities:
        normalized = name.strip().upper()
        if FEEL_NO_PAIN in normalized:
            if stats.feel_no_pain is None or value < stats.feel_no_pain:
                stats.feel_no_pain = value
        elif normalized.startswith(ANTI_PREFIX):
            current = stats.critical_wound_threshold
            if current is None or value < current:
                stats.critical_wound_threshold = value


def _set_model_field(model: ModelStats, field: ModelField, value: int) -> None:
    if field is ModelField.M:
        model.m = value
    elif field is ModelField.T:
        model.t = value
    elif field is ModelField.SV:
        model.sv = value
    elif field is ModelField.INV_SV:
        model.inv_sv = value
    elif field is ModelField.W:
        model.w = value
    elif field is ModelField.LD:
        model.ld = value
    elif field is ModelField.OC:
        model.oc = value


def _set_weapon_field(weapon: WeaponStats, field: WeaponField, value: int | str) -> None:
    # only attacks and damage accept dice expressions
    if isinstance(value, str) and field not in (WeaponField.A, WeaponField.D):
        logger.debug("staticNumber on %s ignored: %r is not numeric", field, value)
        return
    if field is WeaponField.RANGE:
        weapon.range = value
    elif field is WeaponField.A:
        weapon.a = value
    elif field is WeaponField.BS_WS:
        weapon.bs_ws = value
    elif field is WeaponField.S:
        weapon.s = value
    elif field is WeaponField.AP:
        weapon.ap = value
    elif field is WeaponField.D:
        weapon.d = value


def _set_static(stats: ModifiedStats, mechanic: Mechanic) -> None:
    raw = mechanic.value
    if _is_number(raw):
        value: int | str = int(raw)
    elif isinstance(raw, str) and raw.strip():
        text = raw.strip().upper()
        match = _TARGET_NUMBER.match(text)
        value = int(match.group(1)) if match else text
    else:
        logger.debug("staticNumber on %s ignored: no usable value", mechanic.attribute)
        return

    model_field = coerce(ModelField, mechanic.attribute)
    if isinstance(model_field, ModelField):
        if isinstance(value, str):
            logger.debug("staticNumber on %s ignored: %r is not numeric", model_field, value)
            return
        _set_model_field(stats.model, model_field, value)
        return

    weapon_field = coerce(WeaponField, mechanic.attribute)
    if isinstance(weapon_field, WeaponField) and stats.weapon is not None:
        _set_weapon_field(stats.weapon, weapon_field, value)


def _roll_type(mechanic: Mechanic) -> RollType | None:
    roll = coerce(RollType, mechanic.attribute)
    return roll if isinstance(roll, RollType) else None


def targets_opponent(mechanic: Mechanic) -> bool:
    return coerce(Entity, mechanic.entity) in OPPOSING_ENTITIES


def _add_roll_modifier(stats: ModifiedStats, mechanic: Mechanic, *, penalty: bool) -> None:
    roll = _roll_type(mechanic)
    if roll is None or not _is_number(mechanic.value):
        logger.debug(
            "roll modifier ignored: attribute=%r value=%r", mechanic.attribute, mechanic.value
        )
        return
    value = int(mechanic.value)
    if penalty:
        value = -abs(value)
    bucket = stats.opponent_roll_modifiers if targets_opponent(mechanic) else stats.roll_modifiers
    bucket[roll].append(RollModifier(value=value, source=mechanic.source or _UNKNOWN_SOURCE))


def _set_auto_success(stats: ModifiedStats, mechanic: Mechanic) -> None:
    roll = _roll_type(mechanic)
    if roll is RollType.HIT:
        stats.auto_hit = True
    elif roll is RollType.WOUND:
        stats.auto_wound = True


def _set_reroll(stats: ModifiedStats, mechanic: Mechanic) -> None:
    roll = _roll_type(mechanic)
    if roll is None:
        return
    grade = reroll_grade(mechanic.value)
    if grade.outranks(stats.rerolls[roll]):
        stats.rerolls[roll] = grade


def _apply_one(stats: ModifiedStats, mechanic: Mechanic) -> None:
    effect = coerce(Effect, mechanic.effect)
    if effect is Effect.ADDS_KEYWORD:
        _add_keywords(stats, mechanic)
    elif effect is Effect.ADDS_ABILITY:
        _add_abilities(stats, mechanic)
    elif effect is Effect.STATIC_NUMBER:
        _set_static(stats, mechanic)
    elif effect is Effect.ROLL_BONUS:
        _add_roll_modifier(stats, mechanic, penalty=False)
    elif effect is Effect.ROLL_PENALTY:
        _add_roll_modifier(stats, mechanic, penalty=True)
    elif effect is Effect.AUTO_SUCCESS:
        _set_auto_success(stats, mechanic)
    elif effect is Effect.REROLL:
        _set_reroll(stats, mechanic)
    # mortal wounds belong to damage resolution


def fold_mechanics(stats: ModifiedStats, mechanics: Sequence[Mechanic]) -> ModifiedStats:
    """Apply already-filtered ``mechanics`` to ``stats`` in priority order."""

    for mechanic in sorted(mechanics, key=effect_priority):
        _apply_one(stats, mechanic)
    return stats


def apply_effects(
    mechanics: Sequence[Mechanic],
    context: GameContext,
    perspective: Perspective,
    rules: RulesConfig = DEFAULT_RULES,
) -> ModifiedStats:
    """Modified stats for ``perspective`` after every applicable mechanic."""

    indices = applicable_indices(mechanics, context, perspective)
    applicable = [mechanic for index, mechanic in enumerate(mechanics) if index in indices]
    return fold_mechanics(initial_stats(context, perspective, rules), applicable)


def apply_effects_with_details(
    mechanics: Sequence[Mechanic],
    context: GameContext,
    perspective: Perspective,
    rules: RulesConfig = DEFAULT_RULES,
) -> EffectReport:
    """Like :func:`apply_effects`, also reporting why each skipped mechanic did not apply."""

    indices = applicable_indices(mechanics, context, perspective)
    applied: list[Mechanic] = []
    not_applied: list[Mechanic] = []
    reasons: list[str] = []
    for index, mechanic in enumerate(mechanics):
        if index in indices:
            applied.append(mechanic)
        else:
            not_applied.append(mechanic)
            reasons.append(evaluate_with_reason(mechanic, context, perspective).reason)

    stats = fold_mechanics(initial_stats(context, perspective, rules), applied)
    logger.debug(
        "%s: %d mechanics applied, %d not applied", perspective, len(applied), len(not_applied)
    )
    return EffectReport(stats=stats, applied=applied, not_applied=not_applied, reasons=reasons)
