"""Weapon attribute keywords expressed as mechanics.

Each attribute string on a weapon profile ("HEAVY", "SUSTAINED HITS 2",
"ANTI-INFANTRY 4+", ...) converts to at most one mechanic.  Attributes with
no combat-relevant effect, or that are unknown, convert to nothing.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import replace

from mathhammer.domain.enums import Effect, Entity, Operator, RerollGrade, RollType, SourceKind
from mathhammer.domain.models import Condition, Mechanic, MechanicSource, WeaponProfile

_ANTI = re.compile(r"^ANTI-(.+?)\s+(\d)\+$")

# Attributes that only grant a named ability with no numeric value.
_FLAG_ABILITIES = frozenset(
    {
        "LETHAL HITS",
        "DEVASTATING WOUNDS",
        "PRECISION",
        "ASSAULT",
        "PISTOL",
        "HAZARDOUS",
        "INDIRECT FIRE",
        "BLAST",
    }
)

# Attributes of the form "NAME X" granting ability NAME with value X (default 1,
# dice expressions such as D3 kept as text).
_VALUED_ABILITIES = ("SUSTAINED HITS", "RAPID FIRE", "MELTA")


def _when(state: str, entity: Entity = Entity.THIS_UNIT) -> tuple[Condition, ...]:
    return (Condition(entity=entity, state=state, operator=Operator.EQUALS, value=True),)


def _heavy() -> Mechanic:
    return Mechanic(
        entity=Entity.THIS_UNIT,
        effect=Effect.ROLL_BONUS,
        attribute=RollType.HIT,
        value=1,
        conditions=_when("isStationary"),
    )


def _torrent() -> Mechanic:
    return Mechanic(
        entity=Entity.THIS_UNIT,
        effect=Effect.AUTO_SUCCESS,
        attribute=RollType.HIT,
        value=True,
    )


def _lance() -> Mechanic:
    return Mechanic(
        entity=Entity.THIS_UNIT,
        effect=Effect.ROLL_BONUS,
        attribute=RollType.WOUND,
        value=1,
        conditions=_when("hasChargedThisTurn"),
    )


def _twin_linked() -> Mechanic:
    return Mechanic(
        entity=Entity.THIS_UNIT,
        effect=Effect.REROLL,
        attribute=RollType.WOUND,
        value=RerollGrade.FAILED.value,
    )


def _ignores_cover() -> Mechanic:
    return Mechanic(
        entity=Entity.THIS_UNIT,
        effect=Effect.ADDS_KEYWORD,
        keywords=("IGNORES COVER",),
        value=True,
    )


_EXACT: dict[str, Callable[[], Mechanic]] = {
    "HEAVY": _heavy,
    "TORRENT": _torrent,
    "LANCE": _lance,
    "TWIN-LINKED": _twin_linked,
    "IGNORES COVER": _ignores_cover,
}


def _valued_ability(name: str, attribute: str) -> Mechanic:
    remainder = attribute[len(name) :].strip()
    value: int | str = 1
    if remainder.isdigit():
        value = int(remainder)
    elif remainder:
        value = remainder
    return Mechanic(
        entity=Entity.THIS_UNIT,
        effect=Effect.ADDS_ABILITY,
        abilities=(name,),
        value=value,
    )


def _anti(keyword: str, threshold: int) -> Mechanic:
    return Mechanic(
        entity=Entity.THIS_UNIT,
        effect=Effect.ADDS_ABILITY,
        abilities=(f"ANTI-{keyword}",),
        value=threshold,
        conditions=(
            Condition(
                entity=Entity.TARGET_UNIT,
                keywords=(keyword,),
                operator=Operator.INCLUDES,
                value=keyword,
            ),
        ),
    )


def convert_attribute(attribute: str) -> Mechanic | None:
    """Convert one weapon attribute to a mechanic, or ``None`` when it has none."""

    attr = " ".join(attribute.upper().split())

    factory = _EXACT.get(attr)
    if factory is not None:
        return factory()

    if attr in _FLAG_ABILITIES:
        return Mechanic(
            entity=Entity.THIS_UNIT,
            effect=Effect.ADDS_ABILITY,
            abilities=(attr,),
            value=True,
        )

    for name in _VALUED_ABILITIES:
        if attr == name or attr.startswith(f"{name} "):
            return _valued_ability(name, attr)

    anti = _ANTI.match(attr)
    if anti:
        return _anti(anti.group(1), int(anti.group(2)))

    return None


def collect_weapon_mechanics(weapon: WeaponProfile | None) -> list[Mechanic]:
    """Mechanics for every recognised attribute of ``weapon``, tagged with provenance."""

    if weapon is None:
        return []

    mechanics: list[Mechanic] = []
    for attribute in weapon.attributes:
        mechanic = convert_attribute(attribute)
        if mechanic is None:
            continue
        source = MechanicSource(
            kind=SourceKind.WEAPON,
            name=weapon.name,
            label=" ".join(attribute.upper().split()),
        )
        mechanics.append(replace(mechanic, source=source))
    return mechanics

