"""Combat resolution for one attacker/defender exchange.

Pipeline: collect mechanics for both sides, apply each side's effects from
its own perspective, then derive hit, wound and save targets and the
expected damage.  Every call builds fresh state; the same context always
yields the same result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from mathhammer.domain.collector import collect_all, collect_side
from mathhammer.domain.core_ability_data import DEFAULT_CORE_ABILITIES
from mathhammer.domain.damage import calculate_expected_damage
from mathhammer.domain.effects import EffectReport, apply_effects, apply_effects_with_details
from mathhammer.domain.enums import Perspective, RerollGrade, RollType
from mathhammer.domain.models import GameContext, Mechanic, ModifiedStats, RollModifier
from mathhammer.domain.rolls import (
    ModifierBreakdown,
    calculate_hit_target,
    calculate_save_target,
    calculate_wound_target,
    get_failed_save_probability,
    get_hit_probability,
    get_wound_probability,
)
from mathhammer.domain.rules_config import DEFAULT_RULES, RulesConfig

if TYPE_CHECKING:
    from mathhammer.interfaces.registry import ICoreAbilityRegistry

logger = logging.getLogger(__name__)

IGNORES_COVER = "IGNORES COVER"


@dataclass(frozen=True, slots=True)
class AppliedMechanic:
    """Explanation entry: one collected mechanic and whether it applied."""

    mechanic: Mechanic
    applied: bool
    side: Perspective
    reason: str | None = None


@dataclass(slots=True)
class CombatResult:
    """Every target number, breakdown and explanation for one exchange."""

    to_hit: int
    to_wound: int
    to_save: int
    auto_hit: bool
    auto_wound: bool
    invuln_save_used: bool
    cover_applied: bool
    feel_no_pain: int | None
    hit_modifiers: ModifierBreakdown
    wound_modifiers: ModifierBreakdown
    save_modifiers: ModifierBreakdown
    expected_damage: float
    applied_mechanics: list[AppliedMechanic] = field(default_factory=list)
    rerolls: dict[RollType, RerollGrade] = field(default_factory=dict)
    critical_wound_threshold: int | None = None


def _explanations(attacker: EffectReport, defender: EffectReport) -> list[AppliedMechanic]:
    entries = [
        AppliedMechanic(mechanic=m, applied=True, side=Perspective.ATTACKER)
        for m in attacker.applied
    ]
    entries.extend(
        AppliedMechanic(mechanic=m, applied=True, side=Perspective.DEFENDER)
        for m in defender.applied
    )
    entries.extend(
        AppliedMechanic(mechanic=m, applied=False, side=Perspective.ATTACKER, reason=reason)
        for m, reason in zip(attacker.not_applied, attacker.reasons, strict=True)
    )
    entries.extend(
        AppliedMechanic(mechanic=m, applied=False, side=Perspective.DEFENDER, reason=reason)
        for m, reason in zip(defender.not_applied, defender.reasons, strict=True)
    )
    return entries


def roll_modifiers_for(
    roll: RollType, own: ModifiedStats, opponent: ModifiedStats
) -> list[RollModifier]:
    """Modifiers on ``own``'s ``roll``: its own first, then those its opponent imposes."""

    return [*own.roll_modifiers[roll], *opponent.opponent_roll_modifiers[roll]]


def ignores_cover(stats: ModifiedStats) -> bool:
    """True when the attacker gained IGNORES COVER or its weapon carries it."""

    if IGNORES_COVER in stats.added_keywords:
        return True
    if stats.weapon is None:
        return False
    return any(" ".join(attr.upper().split()) == IGNORES_COVER for attr in stats.weapon.attributes)


def calculate_combat(
    context: GameContext,
    *,
    registry: ICoreAbilityRegistry = DEFAULT_CORE_ABILITIES,
    rules: RulesConfig = DEFAULT_RULES,
) -> CombatResult:
    """Resolve one attacker/defender exchange."""

    collected = collect_all(context, registry)
    attacker = apply_effects_with_details(
        collected.attacker_mechanics, context, Perspective.ATTACKER, rules
    )
    defender = apply_effects_with_details(
        collected.defender_mechanics, context, Perspective.DEFENDER, rules
    )
    attacker_stats = attacker.stats
    defender_stats = defender.stats
    weapon = attacker_stats.weapon
    defaults = rules.defaults

    hit = calculate_hit_target(
        weapon.bs_ws if weapon else defaults.bs_ws,
        roll_modifiers_for(RollType.HIT, attacker_stats, defender_stats),
        auto_hit=attacker_stats.auto_hit,
        rules=rules,
    )
    wound = calculate_wound_target(
        weapon.s if weapon else defaults.strength,
        defender_stats.model.t,
        roll_modifiers_for(RollType.WOUND, attacker_stats, defender_stats),
        auto_wound=attacker_stats.auto_wound,
        anti_threshold=attacker_stats.critical_wound_threshold,
        rules=rules,
    )
    save = calculate_save_target(
        defender_stats.model.sv,
        weapon.ap if weapon else 0,
        roll_modifiers_for(RollType.SAVE, defender_stats, attacker_stats),
        invuln_save=defender_stats.model.inv_sv,
        in_cover=context.defender.status.in_cover,
        ignores_cover=ignores_cover(attacker_stats),
        rules=rules,
    )
    damage = calculate_expected_damage(
        weapon.a if weapon else defaults.attacks,
        get_hit_probability(hit, rules),
        get_wound_probability(wound, rules),
        get_failed_save_probability(save, rules),
        weapon.d if weapon else defaults.damage,
        defender_stats.feel_no_pain,
        rules,
    )

    logger.debug(
        "resolved combat: hit %d+ wound %d+ save %d+ expected damage %.3f",
        hit.target,
        wound.target,
        save.target,
        damage.expected_damage,
    )

    return CombatResult(
        to_hit=hit.target,
        to_wound=wound.target,
        to_save=save.target,
        auto_hit=hit.auto_hit,
        auto_wound=wound.auto_wound,
        invuln_save_used=save.invuln_used,
        cover_applied=save.cover_applied,
        feel_no_pain=defender_stats.feel_no_pain,
        hit_modifiers=hit.breakdown,
        wound_modifiers=wound.breakdown,
        save_modifiers=save.breakdown,
        expected_damage=damage.expected_damage,
        applied_mechanics=_explanations(attacker, defender),
        rerolls={
            RollType.HIT: attacker_stats.rerolls[RollType.HIT],
            RollType.WOUND: attacker_stats.rerolls[RollType.WOUND],
            RollType.SAVE: defender_stats.rerolls[RollType.SAVE],
        },
        critical_wound_threshold=attacker_stats.critical_wound_threshold,
    )


def get_modified_stats(
    context: GameContext,
    perspective: Perspective,
    *,
    registry: ICoreAbilityRegistry = DEFAULT_CORE_ABILITIES,
    rules: RulesConfig = DEFAULT_RULES,
) -> ModifiedStats:
    """Effective profile for one side without resolving the exchange."""

    mechanics = collect_side(context, perspective, registry)
    return apply_effects(mechanics, context, perspective, rules)
