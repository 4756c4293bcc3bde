"""Hit, wound and save target calculation.

Targets are D6 thresholds.  Hit and wound targets clamp to 2..6 and saves to
2..7, where 7 means no save is possible, so an unmodified 1 always fails and
an unmodified 6 always succeeds.  A target of 0 marks an automatic success.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from mathhammer.domain.models import RollModifier
from mathhammer.domain.rules_config import DEFAULT_RULES, RulesConfig

AUTO_SUCCESS_TARGET = 0


@dataclass(frozen=True, slots=True)
class ModifierEntry:
    source: str
    value: int


@dataclass(slots=True)
class ModifierBreakdown:
    """Roll modifiers grouped by sign with the net value actually applied."""

    bonuses: list[ModifierEntry] = field(default_factory=list)
    penalties: list[ModifierEntry] = field(default_factory=list)
    net_modifier: int = 0
    capped_to: int | None = None


@dataclass(slots=True)
class HitResult:
    target: int
    auto_hit: bool
    breakdown: ModifierBreakdown


@dataclass(slots=True)
class WoundResult:
    target: int
    auto_wound: bool
    breakdown: ModifierBreakdown
    base_target: int
    critical_threshold: int | None = None


@dataclass(slots=True)
class SaveResult:
    target: int
    invuln_used: bool
    cover_applied: bool
    breakdown: ModifierBreakdown


def cap_modifier(net: int, cap: int) -> int:
    return max(-cap, min(cap, net))


def build_breakdown(
    modifiers: Sequence[RollModifier], cap: int | None = None
) -> ModifierBreakdown:
    """Group ``modifiers`` and compute the applied net, capped to ``±cap`` when given."""

    bonuses = [ModifierEntry(m.source.name, m.value) for m in modifiers if m.value > 0]
    penalties = [ModifierEntry(m.source.name, m.value) for m in modifiers if m.value < 0]
    raw = sum(m.value for m in modifiers)
    if cap is None:
        return ModifierBreakdown(bonuses=bonuses, penalties=penalties, net_modifier=raw)

    net = cap_modifier(raw, cap)
    return ModifierBreakdown(
        bonuses=bonuses,
        penalties=penalties,
        net_modifier=net,
        capped_to=net if net != raw else None,
    )


def clamp_roll_target(target: int, rules: RulesConfig = DEFAULT_RULES) -> int:
    return max(rules.rolls.min_target, min(rules.rolls.max_target, target))


def clamp_save_target(target: int, rules: RulesConfig = DEFAULT_RULES) -> int:
    return max(rules.rolls.min_target, min(rules.rolls.no_save_target, target))


# --- Hit ------------------------------------------------------------------------


def calculate_hit_target(
    bs_ws: int,
    modifiers: Sequence[RollModifier] = (),
    *,
    auto_hit: bool = False,
    rules: RulesConfig = DEFAULT_RULES,
) -> HitResult:
    """Hit target from BS/WS and the net hit modifier (capped)."""

    if auto_hit:
        return HitResult(target=AUTO_SUCCESS_TARGET, auto_hit=True, breakdown=ModifierBreakdown())

    breakdown = build_breakdown(modifiers, rules.rolls.hit_modifier_cap)
    target = clamp_roll_target(bs_ws - breakdown.net_modifier, rules)
    return HitResult(target=target, auto_hit=False, breakdown=breakdown)


# --- Wound ----------------------------------------------------------------------


def calculate_base_wound_target(strength: int, toughness: int) -> int:
    """Strength-versus-Toughness table."""

    if strength >= 2 * toughness:
        return 2
    if strength > toughness:
        return 3
    if strength == toughness:
        return 4
    if 2 * strength <= toughness:
        return 6
    return 5


def calculate_wound_target(
    strength: int,
    toughness: int,
    modifiers: Sequence[RollModifier] = (),
    *,
    auto_wound: bool = False,
    anti_threshold: int | None = None,
    rules: RulesConfig = DEFAULT_RULES,
) -> WoundResult:
    """Wound target from the S/T table, the capped wound modifier and any ANTI threshold.

    An ANTI threshold better than the modified target replaces it.  The gain,
    measured from the unclamped modified target, is listed as a bonus and added
    to the net modifier.
    """

    base = calculate_base_wound_target(strength, toughness)
    if auto_wound:
        return WoundResult(
            target=AUTO_SUCCESS_TARGET,
            auto_wound=True,
            breakdown=ModifierBreakdown(),
            base_target=base,
            critical_threshold=anti_threshold,
        )

    breakdown = build_breakdown(modifiers, rules.rolls.wound_modifier_cap)
    target = base - breakdown.net_modifier

    if anti_threshold is not None:
        critical = clamp_roll_target(anti_threshold, rules)
        if critical < target:
            gain = target - critical
            breakdown.bonuses.append(ModifierEntry(f"ANTI ({anti_threshold}+)", gain))
            breakdown.net_modifier += gain
            target = critical

    target = clamp_roll_target(target, rules)

    return WoundResult(
        target=target,
        auto_wound=False,
        breakdown=breakdown,
        base_target=base,
        critical_threshold=anti_threshold,
    )


# --- Save -----------------------------------------------------------------------


def calculate_save_target(
    armour_save: int,
    ap: int = 0,
    modifiers: Sequence[RollModifier] = (),
    *,
    invuln_save: int | None = None,
    in_cover: bool = False,
    ignores_cover: bool = False,
    rules: RulesConfig = DEFAULT_RULES,
) -> SaveResult:
    """Save target after AP, cover and save modifiers (uncapped).

    The invulnerable save is compared raw against the modified armour save and
    used only when strictly better; cover is then reported as not applied.
    """

    save = armour_save + abs(ap)

    cover_applied = False
    if in_cover and not ignores_cover and save >= rules.rolls.cover_threshold:
        save -= rules.rolls.cover_bonus
        cover_applied = True

    breakdown = build_breakdown(modifiers)
    save -= breakdown.net_modifier

    invuln_used = False
    if invuln_save is not None and invuln_save < save:
        save = invuln_save
        invuln_used = True
        cover_applied = False

    return SaveResult(
        target=clamp_save_target(save, rules),
        invuln_used=invuln_used,
        cover_applied=cover_applied,
        breakdown=breakdown,
    )


# --- Probabilities --------------------------------------------------------------


def success_probability(target: int, rules: RulesConfig = DEFAULT_RULES) -> float:
    """Chance of rolling ``target`` or higher on one die."""

    sides = rules.rolls.die_sides
    if target <= 1:
        return 1.0
    if target > sides:
        return 0.0
    return (sides + 1 - target) / sides


def get_hit_probability(result: HitResult, rules: RulesConfig = DEFAULT_RULES) -> float:
    if result.auto_hit:
        return 1.0
    return success_probability(result.target, rules)


def get_wound_probability(result: WoundResult, rules: RulesConfig = DEFAULT_RULES) -> float:
    if result.auto_wound:
        return 1.0
    return success_probability(result.target, rules)


def get_save_probability(result: SaveResult, rules: RulesConfig = DEFAULT_RULES) -> float:
    return success_probability(result.target, rules)


def get_failed_save_probability(result: SaveResult, rules: RulesConfig = DEFAULT_RULES) -> float:
    return 1.0 - get_save_probability(result, rules)
