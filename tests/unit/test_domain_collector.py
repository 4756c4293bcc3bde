"""Unit tests for mechanic collection."""

from __future__ import annotations

import pytest

from mathhammer.domain import collector
from mathhammer.domain import models as dm
from mathhammer.domain.enums import (
    Effect,
    Entity,
    GamePhase,
    Perspective,
    RollType,
    SourceKind,
    TurnRestriction,
)


def _bonus(roll: RollType = RollType.HIT, value: int = 1, *conds: dm.Condition) -> dm.Mechanic:
    return dm.Mechanic(
        entity=Entity.THIS_UNIT,
        effect=Effect.ROLL_BONUS,
        attribute=roll,
        value=value,
        conditions=conds,
    )


def _leading() -> dm.Condition:
    return dm.Condition(entity=Entity.THIS_UNIT, state="isLeadingUnit", value=True)


def _stratagem(sid: str, **kwargs) -> dm.Stratagem:
    return dm.Stratagem(id=sid, name=sid.replace("-", " ").title(), mechanics=(_bonus(),), **kwargs)


def _context(
    *,
    damaged: bool = False,
    leaders: tuple[dm.Datasheet, ...] = (),
    stratagems: frozenset[str] = frozenset(),
    phase: GamePhase | None = None,
    active_side: Perspective | None = None,
) -> dm.GameContext:
    datasheet = dm.Datasheet(
        name="Redemptor Dreadnought",
        keywords=("VEHICLE", "WALKER"),
        abilities=(
            dm.Ability(name="Duty Eternal", mechanics=(_bonus(RollType.SAVE),)),
            dm.Ability(name="Feel No Pain", parameter="6+"),
            dm.Ability(name="Stealth", mechanics=(_bonus(RollType.WOUND, 3),)),
        ),
        damaged_mechanics=(
            dm.Mechanic(
                entity=Entity.THIS_UNIT,
                effect=Effect.ROLL_PENALTY,
                attribute=RollType.HIT,
                value=1,
            ),
        ),
    )
    attacker = dm.UnitContext(
        datasheet=datasheet,
        selected_model=dm.ModelProfile(name="Redemptor", t=10, sv=2, w=12),
        selected_weapon=dm.WeaponProfile(
            name="Macro plasma incinerator", a="D6+1", bs_ws=3, s=8, ap=-3, d=2,
            attributes=("Blast", "Hazardous"),
        ),
        attached_leaders=leaders,
        status=dm.CombatStatus(is_damaged=damaged),
        enhancement=dm.Enhancement(name="Artificer Armour", mechanics=(_bonus(RollType.SAVE),)),
    )
    defender = dm.UnitContext(
        datasheet=dm.Datasheet(name="Ork Boyz", keywords=("INFANTRY",)),
        selected_model=dm.ModelProfile(name="Boy", t=5, sv=5, w=1),
        selected_weapon=dm.WeaponProfile(
            name="Choppa", a=3, bs_ws=3, s=4, ap=-1, attributes=("Lethal Hits",)
        ),
    )
    army = dm.ArmyContext(
        name="Space Marines",
        faction_abilities=(dm.FactionAbility(name="Oath of Moment", mechanics=(_bonus(),)),),
        detachment_abilities=(
            dm.DetachmentAbility(name="Combat Doctrines", mechanics=(_bonus(RollType.WOUND),)),
        ),
        stratagems=(
            _stratagem("armour-of-contempt"),
            _stratagem(
                "fire-overwatch", phases=(GamePhase.SHOOTING,), turn=TurnRestriction.OPPONENT
            ),
        ),
    )
    return dm.GameContext(
        attacker=attacker,
        defender=defender,
        attacker_army=army,
        attacker_stratagems=stratagems,
        phase=phase,
        active_side=active_side,
    )


def test_sources_are_collected_in_order():
    ctx = _context(damaged=True, stratagems=frozenset({"armour-of-contempt"}))
    mechanics = collector.collect_side(ctx, Perspective.ATTACKER)
    assert [m.source.kind for m in mechanics] == [
        SourceKind.ABILITY,
        SourceKind.ABILITY,
        SourceKind.ABILITY,
        SourceKind.ABILITY,
        SourceKind.WEAPON,
        SourceKind.WEAPON,
        SourceKind.ENHANCEMENT,
        SourceKind.FACTION,
        SourceKind.DETACHMENT,
        SourceKind.STRATAGEM,
        SourceKind.DAMAGED,
    ]
    assert [m.key for m in mechanics] == [f"attacker:{i}" for i in range(len(mechanics))]


def test_ability_sources_carry_unit_name():
    mechanics = collector.collect_side(_context(), Perspective.ATTACKER)
    abilities = [m for m in mechanics if m.source.kind is SourceKind.ABILITY]
    assert [m.source.name for m in abilities] == [
        "Duty Eternal",
        "Feel No Pain",
        "Stealth",
        "Stealth",
    ]
    assert {m.source.unit_name for m in abilities} == {"Redemptor Dreadnought"}


def test_core_ability_replaces_embedded_mechanics():
    mechanics = collector.collect_side(_context(), Perspective.ATTACKER)
    grant, penalty = [m for m in mechanics if m.source.name == "Stealth"]
    assert grant.effect is Effect.ADDS_ABILITY
    assert grant.abilities == ("STEALTH",)
    assert penalty.effect is Effect.ROLL_PENALTY
    assert penalty.entity is Entity.OPPOSING_UNIT

    (fnp,) = [m for m in mechanics if m.source.name == "Feel No Pain"]
    assert fnp.value == 6


def test_core_ability_without_parameter_is_dropped():
    ability = dm.Ability(name="Feel No Pain", parameter="none")
    assert collector.ability_mechanics(ability) == []


def test_defender_does_not_collect_weapon_attributes():
    mechanics = collector.collect_side(_context(), Perspective.DEFENDER)
    assert all(m.source.kind is not SourceKind.WEAPON for m in mechanics)


def test_damaged_profile_only_when_damaged():
    healthy = collector.collect_side(_context(), Perspective.ATTACKER)
    assert all(m.source.kind is not SourceKind.DAMAGED for m in healthy)

    damaged = collector.collect_side(_context(damaged=True), Perspective.ATTACKER)
    (entry,) = [m for m in damaged if m.source.kind is SourceKind.DAMAGED]
    assert entry.source.name == collector.DAMAGED_PROFILE_NAME
    assert entry.effect is Effect.ROLL_PENALTY


def test_leader_abilities_follow_the_unit():
    captain = dm.Datasheet(
        name="Captain",
        abilities=(
            dm.Ability(name="Rites of Battle", mechanics=(_bonus(RollType.HIT, 1, _leading()),)),
        ),
    )
    mechanics = collector.collect_side(_context(leaders=(captain,)), Perspective.ATTACKER)
    (rites,) = [m for m in mechanics if m.source.name == "Rites of Battle"]
    assert rites.source.unit_name == "Captain"
    assert mechanics.index(rites) == 4


def test_filter_leader_mechanics():
    gated = _bonus(RollType.HIT, 1, _leading())
    plain = _bonus()
    assert collector.filter_leader_mechanics([gated, plain], leading=False) == [plain]
    assert collector.filter_leader_mechanics([gated, plain], leading=True) == [gated, plain]


class TestStratagems:
    """Tests for stratagem toggles and validity."""

    def test_only_toggled_stratagems_are_collected(self):
        ctx = _context(stratagems=frozenset({"armour-of-contempt"}))
        names = [m.source.name for m in collector.collect_stratagems(ctx, Perspective.ATTACKER)]
        assert names == ["Armour Of Contempt"]
        assert collector.collect_stratagems(ctx, Perspective.DEFENDER) == []

    def test_phase_restriction(self):
        ctx = _context(stratagems=frozenset({"fire-overwatch"}), phase=GamePhase.FIGHT)
        assert collector.collect_stratagems(ctx, Perspective.ATTACKER) == []

    def test_turn_restriction(self):
        yours = _context(
            stratagems=frozenset({"fire-overwatch"}),
            phase=GamePhase.SHOOTING,
            active_side=Perspective.ATTACKER,
        )
        assert collector.collect_stratagems(yours, Perspective.ATTACKER) == []

        theirs = _context(
            stratagems=frozenset({"fire-overwatch"}),
            phase=GamePhase.SHOOTING,
            active_side=Perspective.DEFENDER,
        )
        assert len(collector.collect_stratagems(theirs, Perspective.ATTACKER)) == 1

    def test_context_without_phase_skips_checks(self):
        ctx = _context(stratagems=frozenset({"fire-overwatch"}))
        assert len(collector.collect_stratagems(ctx, Perspective.ATTACKER)) == 1

    @pytest.mark.parametrize(
        ("phases", "phase", "expected"),
        [
            ((), GamePhase.FIGHT, True),
            (("any",), GamePhase.FIGHT, True),
            (("shooting", "fight"), GamePhase.FIGHT, True),
            (("shooting",), GamePhase.FIGHT, False),
            (("shooting",), None, True),
        ],
    )
    def test_is_valid_for_phase(self, phases, phase, expected):
        stratagem = dm.Stratagem(id="s", name="S", phases=phases)
        assert collector.is_valid_for_phase(stratagem, phase) is expected

    @pytest.mark.parametrize(
        ("turn", "side", "active", "expected"),
        [
            (None, Perspective.ATTACKER, Perspective.DEFENDER, True),
            ("either", Perspective.ATTACKER, Perspective.DEFENDER, True),
            ("your", Perspective.ATTACKER, Perspective.ATTACKER, True),
            ("your", Perspective.ATTACKER, Perspective.DEFENDER, False),
            ("opponent", Perspective.DEFENDER, Perspective.ATTACKER, True),
            ("opponent", Perspective.DEFENDER, Perspective.DEFENDER, False),
            ("your", Perspective.ATTACKER, None, True),
        ],
    )
    def test_is_valid_for_turn(self, turn, side, active, expected):
        stratagem = dm.Stratagem(id="s", name="S", turn=turn)
        assert collector.is_valid_for_turn(stratagem, side, active) is expected


def test_collect_all_covers_both_sides():
    collected = collector.collect_all(_context())
    assert collected.attacker_mechanics[0].key == "attacker:0"
    assert collected.defender_mechanics == []


def test_filter_mechanics_by_roll_type():
    mechanics = [
        _bonus(RollType.HIT),
        _bonus(RollType.WOUND),
        dm.Mechanic(entity=Entity.THIS_UNIT, effect=Effect.REROLL, attribute="h", value="ones"),
        dm.Mechanic(entity=Entity.THIS_UNIT, effect=Effect.AUTO_SUCCESS, attribute="h", value=True),
        dm.Mechanic(entity=Entity.THIS_UNIT, effect=Effect.STATIC_NUMBER, attribute="h", value=3),
    ]
    hits = collector.filter_mechanics_by_roll_type(mechanics, RollType.HIT)
    assert hits == [mechanics[0], mechanics[2], mechanics[3]]


def test_own_leading_abilities_are_dropped():
    captain = dm.Datasheet(
        name="Captain",
        abilities=(
            dm.Ability(name="Rites of Battle", mechanics=(_bonus(RollType.HIT, 1, _leading()),)),
        ),
    )
    squad = dm.Datasheet(
        name="Intercessor Squad",
        abilities=(
            dm.Ability(name="Bodyguard Drill", mechanics=(_bonus(RollType.SAVE, 1, _leading()),)),
            dm.Ability(name="Target Priority", mechanics=(_bonus(),)),
        ),
    )
    led = dm.UnitContext(datasheet=squad, attached_leaders=(captain,))
    names = [m.source.name for m in collector.collect_unit_abilities(led)]
    assert names == ["Target Priority", "Rites of Battle"]
