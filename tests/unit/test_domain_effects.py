"""Unit tests for effect application."""

from __future__ import annotations

from dataclasses import replace

import pytest
from hypothesis import given
from hypothesis import strategies as st

from mathhammer.domain import effects
from mathhammer.domain import models as dm
from mathhammer.domain.enums import Effect, Entity, Perspective, RerollGrade, RollType, SourceKind


def _context(*, stationary: bool = False, weapon: bool = True) -> dm.GameContext:
    attacker = dm.UnitContext(
        datasheet=dm.Datasheet(name="Sternguard Veterans"),
        selected_model=dm.ModelProfile(name="Sternguard", m=6, t=4, sv=3, w=2, ld=6, oc=1),
        selected_weapon=(
            dm.WeaponProfile(
                name="Sternguard bolt rifle",
                range=24,
                a=2,
                bs_ws="3+",
                s=4,
                ap=-1,
                d=1,
                attributes=("Devastating Wounds",),
            )
            if weapon
            else None
        ),
        status=dm.CombatStatus(is_stationary=stationary),
    )
    defender = dm.UnitContext(
        datasheet=dm.Datasheet(name="Termagants", keywords=("INFANTRY",)),
        selected_model=dm.ModelProfile(name="Termagant", t=3, sv=5, w=1),
    )
    return dm.GameContext(attacker=attacker, defender=defender)


def _mechanic(
    effect: Effect | str, attribute: str | None = None, value=None, **kwargs
) -> dm.Mechanic:
    return dm.Mechanic(
        entity=Entity.THIS_UNIT,
        effect=effect,
        attribute=attribute,
        value=value,
        source=dm.MechanicSource(kind=SourceKind.ABILITY, name=f"{effect}:{attribute}"),
        **kwargs,
    )


def _apply(*mechanics: dm.Mechanic, ctx: dm.GameContext | None = None) -> dm.ModifiedStats:
    return effects.apply_effects(list(mechanics), ctx or _context(), Perspective.ATTACKER)


def _stationary() -> dm.Condition:
    return dm.Condition(entity=Entity.THIS_UNIT, state="isStationary", value=True)


class TestInitialStats:
    """Tests for the pre-mechanic snapshot."""

    def test_copies_selected_profiles(self):
        stats = _apply()
        assert stats.model == dm.ModelStats(m=6, t=4, sv=3, inv_sv=None, w=2, ld=6, oc=1)
        assert stats.weapon is not None
        assert stats.weapon.bs_ws == 3
        assert stats.weapon.attributes == ["Devastating Wounds"]
        assert stats.roll_modifiers == {RollType.HIT: [], RollType.WOUND: [], RollType.SAVE: []}
        assert set(stats.rerolls.values()) == {RerollGrade.NONE}

    def test_missing_profiles(self):
        ctx = dm.GameContext(
            attacker=dm.UnitContext(datasheet=dm.Datasheet(name="Empty")),
            defender=dm.UnitContext(datasheet=dm.Datasheet(name="Empty")),
        )
        stats = effects.initial_stats(ctx, Perspective.DEFENDER)
        assert stats.weapon is None
        assert stats.model.sv == 7
        assert stats.model.inv_sv is None

    def test_unreadable_skill_becomes_zero(self):
        ctx = dm.GameContext(
            attacker=dm.UnitContext(
                datasheet=dm.Datasheet(name="Flamers"),
                selected_weapon=dm.WeaponProfile(name="Flamer", bs_ws="N/A"),
            ),
            defender=dm.UnitContext(datasheet=dm.Datasheet(name="Target")),
        )
        assert effects.initial_stats(ctx, Perspective.ATTACKER).weapon.bs_ws == 0


class TestFold:
    """Tests for individual effects."""

    def test_keywords_and_abilities_are_uppercased_and_deduplicated(self):
        stats = _apply(
            _mechanic(Effect.ADDS_KEYWORD, keywords=("ignores cover",)),
            _mechanic(Effect.ADDS_KEYWORD, keywords=("IGNORES COVER", "Fly")),
            _mechanic(Effect.ADDS_ABILITY, abilities=("lethal hits", "LETHAL HITS")),
        )
        assert stats.added_keywords == ["IGNORES COVER", "FLY"]
        assert stats.added_abilities == ["LETHAL HITS"]

    def test_feel_no_pain_keeps_best_value(self):
        stats = _apply(
            _mechanic(Effect.ADDS_ABILITY, value=6, abilities=("FEEL NO PAIN",)),
            _mechanic(Effect.ADDS_ABILITY, value=5, abilities=("Feel No Pain 5+",)),
            _mechanic(Effect.ADDS_ABILITY, value=True, abilities=("FEEL NO PAIN",)),
        )
        assert stats.feel_no_pain == 5

    def test_anti_keeps_lowest_threshold(self):
        stats = _apply(
            _mechanic(Effect.ADDS_ABILITY, value=4, abilities=("ANTI-INFANTRY",)),
            _mechanic(Effect.ADDS_ABILITY, value=2, abilities=("ANTI-PSYKER",)),
        )
        assert stats.critical_wound_threshold == 2

    def test_static_number_overrides_model_and_weapon_fields(self):
        stats = _apply(
            _mechanic(Effect.STATIC_NUMBER, "t", 6),
            _mechanic(Effect.STATIC_NUMBER, "invSv", 4),
            _mechanic(Effect.STATIC_NUMBER, "s", 8),
            _mechanic(Effect.STATIC_NUMBER, "d", "D3"),
            _mechanic(Effect.STATIC_NUMBER, "bsWs", "2+"),
        )
        assert stats.model.t == 6
        assert stats.model.inv_sv == 4
        assert stats.weapon.s == 8
        assert stats.weapon.d == "D3"
        assert stats.weapon.bs_ws == 2

    def test_static_number_on_w_targets_wounds(self):
        stats = _apply(_mechanic(Effect.STATIC_NUMBER, "w", 3))
        assert stats.model.w == 3

    @pytest.mark.parametrize(
        ("attribute", "value"),
        [("t", None), ("t", "tough"), ("s", "D6"), ("colour", 3), ("t", True)],
    )
    def test_malformed_static_number_is_noop(self, attribute, value):
        stats = _apply(_mechanic(Effect.STATIC_NUMBER, attribute, value))
        assert stats == _apply()

    def test_static_weapon_field_without_weapon_is_noop(self):
        stats = _apply(_mechanic(Effect.STATIC_NUMBER, "s", 8), ctx=_context(weapon=False))
        assert stats.weapon is None

    def test_roll_bonus_and_penalty(self):
        stats = _apply(
            _mechanic(Effect.ROLL_BONUS, "h", 1),
            _mechanic(Effect.ROLL_PENALTY, "h", 1),
            _mechanic(Effect.ROLL_PENALTY, "s", -1),
        )
        assert [m.value for m in stats.roll_modifiers[RollType.HIT]] == [1, -1]
        assert [m.value for m in stats.roll_modifiers[RollType.SAVE]] == [-1]
        assert stats.roll_modifiers[RollType.HIT][0].source.name == "rollBonus:h"

    @pytest.mark.parametrize("entity", [Entity.OPPOSING_UNIT, Entity.TARGET_MODEL])
    def test_opposing_roll_modifiers_are_kept_apart(self, entity):
        imposed = replace(_mechanic(Effect.ROLL_PENALTY, "h", 1), entity=entity)
        stats = _apply(imposed, _mechanic(Effect.ROLL_BONUS, "h", 1))
        assert [m.value for m in stats.roll_modifiers[RollType.HIT]] == [1]
        assert [m.value for m in stats.opponent_roll_modifiers[RollType.HIT]] == [-1]
        assert effects.targets_opponent(imposed)

    def test_roll_modifier_without_source_gets_placeholder(self):
        mechanic = dm.Mechanic(
            entity=Entity.THIS_UNIT, effect=Effect.ROLL_BONUS, attribute="w", value=1
        )
        stats = _apply(mechanic)
        assert stats.roll_modifiers[RollType.WOUND][0].source.name == "Unknown"

    def test_roll_modifier_with_bad_attribute_or_value_is_noop(self):
        stats = _apply(
            _mechanic(Effect.ROLL_BONUS, "x", 1),
            _mechanic(Effect.ROLL_BONUS, "h", "lots"),
        )
        assert stats == _apply()

    def test_auto_success(self):
        stats = _apply(
            _mechanic(Effect.AUTO_SUCCESS, "h", True),
            _mechanic(Effect.AUTO_SUCCESS, "w", True),
            _mechanic(Effect.AUTO_SUCCESS, "s", True),
        )
        assert stats.auto_hit
        assert stats.auto_wound

    def test_reroll_only_upgrades(self):
        upgraded = _apply(
            _mechanic(Effect.REROLL, "h", "ones"), _mechanic(Effect.REROLL, "h", "failed")
        )
        assert upgraded.rerolls[RollType.HIT] is RerollGrade.FAILED

        kept = _apply(_mechanic(Effect.REROLL, "h", "all"), _mechanic(Effect.REROLL, "h", "ones"))
        assert kept.rerolls[RollType.HIT] is RerollGrade.ALL

    @pytest.mark.parametrize(
        ("value", "grade"),
        [
            ("ones", RerollGrade.ONES),
            ("failed", RerollGrade.FAILED),
            ("all", RerollGrade.ALL),
            (True, RerollGrade.ALL),
            ("anything", RerollGrade.ALL),
        ],
    )
    def test_reroll_grade(self, value, grade):
        assert effects.reroll_grade(value) is grade

    def test_mortal_wounds_and_unknown_effects_change_nothing(self):
        stats = _apply(
            _mechanic(Effect.MORTAL_WOUNDS, value="D3"),
            _mechanic("summonDaemon", "h", 1),
        )
        assert stats == _apply()


class TestOrdering:
    """Tests for priority ordering and condition filtering."""

    def test_priority_order(self):
        order = [
            _mechanic("summonDaemon"),
            _mechanic(Effect.MORTAL_WOUNDS),
            _mechanic(Effect.REROLL, "h", "all"),
            _mechanic(Effect.ROLL_PENALTY, "h", 1),
            _mechanic(Effect.STATIC_NUMBER, "t", 5),
            _mechanic(Effect.ADDS_ABILITY),
            _mechanic(Effect.ADDS_KEYWORD),
        ]
        assert [effects.effect_priority(m) for m in order] == [99, 6, 5, 4, 3, 2, 1]

    def test_static_override_applies_before_roll_modifiers_regardless_of_input_order(self):
        stats = _apply(
            _mechanic(Effect.ROLL_BONUS, "h", 1),
            _mechanic(Effect.STATIC_NUMBER, "bsWs", 2),
        )
        assert stats.weapon.bs_ws == 2
        assert len(stats.roll_modifiers[RollType.HIT]) == 1

    def test_later_static_override_wins_within_priority(self):
        stats = _apply(
            _mechanic(Effect.STATIC_NUMBER, "t", 5), _mechanic(Effect.STATIC_NUMBER, "t", 7)
        )
        assert stats.model.t == 7

    def test_conditions_filter_mechanics(self):
        heavy = _mechanic(Effect.ROLL_BONUS, "h", 1, conditions=(_stationary(),))
        assert _apply(heavy).roll_modifiers[RollType.HIT] == []
        moved = _apply(heavy, ctx=_context(stationary=True))
        assert [m.value for m in moved.roll_modifiers[RollType.HIT]] == [1]


class TestDetails:
    """Tests for apply_effects_with_details."""

    def test_partitions_original_list(self):
        applied = _mechanic(Effect.ROLL_BONUS, "h", 1)
        skipped = _mechanic(Effect.ROLL_BONUS, "w", 1, conditions=(_stationary(),))
        report = effects.apply_effects_with_details(
            [skipped, applied], _context(), Perspective.ATTACKER
        )
        assert report.applied == [applied]
        assert report.not_applied == [skipped]
        assert report.reasons == ["Condition 1 failed: thisUnit state=isStationary equals true"]
        assert report.stats == _apply(applied)

    def test_duplicate_mechanics_are_tracked_by_position(self):
        gated = _mechanic(Effect.ROLL_BONUS, "h", 1, conditions=(_stationary(),))
        report = effects.apply_effects_with_details(
            [gated, gated], _context(), Perspective.ATTACKER
        )
        assert report.applied == []
        assert len(report.not_applied) == 2


@given(
    st.lists(
        st.tuples(
            st.sampled_from(list(Effect) + ["mystery"]),
            st.sampled_from(["h", "w", "s", "t", "sv", "a", "d", None]),
            st.one_of(
                st.none(),
                st.booleans(),
                st.integers(-3, 8),
                st.sampled_from(["ones", "failed", "all", "D3", "4+"]),
            ),
        ),
        max_size=12,
    )
)
def test_apply_effects_is_idempotent(specs):
    mechanics = [
        _mechanic(effect, attribute, value, abilities=("FEEL NO PAIN",), keywords=("FLY",))
        for effect, attribute, value in specs
    ]
    ctx = _context(stationary=True)
    assert effects.apply_effects(mechanics, ctx, Perspective.ATTACKER) == effects.apply_effects(
        mechanics, ctx, Perspective.ATTACKER
    )
