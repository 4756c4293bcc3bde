"""Unit tests for weapon attribute conversion."""

from __future__ import annotations

import pytest

from mathhammer.domain import models as dm
from mathhammer.domain.enums import Effect, Entity, Operator, RollType, SourceKind
from mathhammer.domain.weapon_attributes import collect_weapon_mechanics, convert_attribute


def test_heavy_needs_stationary_unit():
    mechanic = convert_attribute("Heavy")
    assert mechanic is not None
    assert mechanic.effect is Effect.ROLL_BONUS
    assert mechanic.attribute is RollType.HIT
    assert mechanic.value == 1
    assert [c.state for c in mechanic.conditions] == ["isStationary"]


def test_lance_needs_charge():
    mechanic = convert_attribute("LANCE")
    assert mechanic is not None
    assert mechanic.attribute is RollType.WOUND
    assert [c.state for c in mechanic.conditions] == ["hasChargedThisTurn"]


def test_torrent_auto_hits():
    mechanic = convert_attribute("torrent")
    assert mechanic is not None
    assert mechanic.effect is Effect.AUTO_SUCCESS
    assert mechanic.attribute is RollType.HIT


def test_twin_linked_rerolls_failed_wounds():
    mechanic = convert_attribute("Twin-linked")
    assert mechanic is not None
    assert mechanic.effect is Effect.REROLL
    assert mechanic.attribute is RollType.WOUND
    assert mechanic.value == "failed"


def test_ignores_cover_adds_keyword():
    mechanic = convert_attribute(" ignores  cover ")
    assert mechanic is not None
    assert mechanic.effect is Effect.ADDS_KEYWORD
    assert mechanic.keywords == ("IGNORES COVER",)


@pytest.mark.parametrize(
    "attribute",
    ["Lethal Hits", "DEVASTATING WOUNDS", "precision", "Assault", "Pistol", "Blast"],
)
def test_flag_attributes_grant_ability(attribute):
    mechanic = convert_attribute(attribute)
    assert mechanic is not None
    assert mechanic.effect is Effect.ADDS_ABILITY
    assert mechanic.abilities == (attribute.upper(),)
    assert mechanic.value is True


@pytest.mark.parametrize(
    ("attribute", "name", "value"),
    [
        ("SUSTAINED HITS 2", "SUSTAINED HITS", 2),
        ("Sustained Hits", "SUSTAINED HITS", 1),
        ("Sustained Hits D3", "SUSTAINED HITS", "D3"),
        ("RAPID FIRE 1", "RAPID FIRE", 1),
        ("Melta 2", "MELTA", 2),
    ],
)
def test_valued_attributes(attribute, name, value):
    mechanic = convert_attribute(attribute)
    assert mechanic is not None
    assert mechanic.abilities == (name,)
    assert mechanic.value == value


def test_anti_keyword_is_gated_on_target():
    mechanic = convert_attribute("Anti-Infantry 4+")
    assert mechanic is not None
    assert mechanic.effect is Effect.ADDS_ABILITY
    assert mechanic.abilities == ("ANTI-INFANTRY",)
    assert mechanic.value == 4
    (condition,) = mechanic.conditions
    assert condition.entity is Entity.TARGET_UNIT
    assert condition.keywords == ("INFANTRY",)
    assert condition.operator is Operator.INCLUDES


@pytest.mark.parametrize("attribute", ["EXTRA ATTACKS", "ONE SHOT", "", "ANTI-VEHICLE"])
def test_unknown_attributes_convert_to_nothing(attribute):
    assert convert_attribute(attribute) is None


def test_collect_weapon_mechanics_tags_source():
    weapon = dm.WeaponProfile(
        name="Heavy bolter", a=3, bs_ws=4, s=5, ap=-1, attributes=("Heavy", "Sustained hits 1", "?")
    )
    mechanics = collect_weapon_mechanics(weapon)
    assert len(mechanics) == 2
    assert {m.source.kind for m in mechanics} == {SourceKind.WEAPON}
    assert {m.source.name for m in mechanics} == {"Heavy bolter"}
    assert [m.source.label for m in mechanics] == ["HEAVY", "SUSTAINED HITS 1"]


def test_collect_weapon_mechanics_without_weapon():
    assert collect_weapon_mechanics(None) == []
