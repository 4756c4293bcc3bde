"""Expected damage estimation."""

from __future__ import annotations

from dataclasses import dataclass

from mathhammer.domain.rolls import success_probability
from mathhammer.domain.rules_config import DEFAULT_RULES, RulesConfig
from mathhammer.utils.dice import average_value


@dataclass(frozen=True, slots=True)
class DamageEstimate:
    """Average outcome of one attack sequence."""

    attacks: float
    damage_per_hit: float
    damage_after_fnp: float
    expected_damage: float


def apply_feel_no_pain(
    damage: float, fnp: int | None, rules: RulesConfig = DEFAULT_RULES
) -> float:
    """Damage expected to get through a Feel No Pain roll of ``fnp``+.

    Values beyond the die (e.g. 7+) mean no Feel No Pain.
    """

    if fnp is None or fnp > rules.rolls.die_sides:
        return damage
    return damage * (1 - success_probability(fnp, rules))


def calculate_expected_damage(
    attacks: int | str,
    hit_probability: float,
    wound_probability: float,
    failed_save_probability: float,
    damage: int | str,
    fnp: int | None = None,
    rules: RulesConfig = DEFAULT_RULES,
) -> DamageEstimate:
    """Attacks x P(hit) x P(wound) x P(failed save) x damage after Feel No Pain.

    Attacks and damage may be dice expressions; their average is used and
    anything unparsable counts as 1.
    """

    attack_count = average_value(attacks)
    damage_per_hit = average_value(damage)
    damage_after_fnp = apply_feel_no_pain(damage_per_hit, fnp, rules)
    expected = attack_count * hit_probability * wound_probability * failed_save_probability
    expected *= damage_after_fnp
    return DamageEstimate(
        attacks=attack_count,
        damage_per_hit=damage_per_hit,
        damage_after_fnp=damage_after_fnp,
        expected_damage=expected,
    )
