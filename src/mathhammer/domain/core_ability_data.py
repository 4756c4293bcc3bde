"""Built-in core ability templates."""

from __future__ import annotations

from mathhammer.domain.core_abilities import (
    PARAMETER_TOKEN,
    CoreAbilityDefinition,
    CoreAbilityRegistry,
)
from mathhammer.domain.enums import CoreAbilityType, Effect, Entity, Operator, RollType
from mathhammer.domain.models import Condition, Mechanic


def _grants(*abilities: str, value: bool | str = True) -> Mechanic:
    return Mechanic(
        entity=Entity.THIS_UNIT,
        effect=Effect.ADDS_ABILITY,
        abilities=abilities,
        value=value,
    )


def _static(*mechanics: Mechanic) -> CoreAbilityDefinition:
    return CoreAbilityDefinition(kind=CoreAbilityType.STATIC, mechanics=mechanics)


def _parameterized(*mechanics: Mechanic) -> CoreAbilityDefinition:
    return CoreAbilityDefinition(kind=CoreAbilityType.PARAMETERIZED, mechanics=mechanics)


CORE_ABILITY_DEFINITIONS: dict[str, CoreAbilityDefinition] = {
    "STEALTH": _static(
        _grants("STEALTH"),
        Mechanic(
            entity=Entity.OPPOSING_UNIT,
            effect=Effect.ROLL_PENALTY,
            attribute=RollType.HIT,
            value=1,
            conditions=(
                Condition(
                    entity=Entity.THIS_UNIT,
                    state="isShootingPhase",
                    operator=Operator.EQUALS,
                    value=True,
                ),
            ),
        ),
    ),
    "LONE OPERATIVE": _static(_grants("LONE OPERATIVE")),
    "DEEP STRIKE": _static(_grants("DEEP STRIKE")),
    "INFILTRATORS": _static(_grants("INFILTRATORS")),
    "LEADER": _static(_grants("LEADER")),
    "FIGHTS FIRST": _static(_grants("FIGHTS FIRST")),
    "FEEL NO PAIN": _parameterized(
        Mechanic(
            entity=Entity.THIS_MODEL,
            effect=Effect.ADDS_ABILITY,
            abilities=("FEEL NO PAIN",),
            value=PARAMETER_TOKEN,
        )
    ),
    "SCOUTS": _parameterized(_grants("SCOUTS", value=PARAMETER_TOKEN)),
    "FIRING DECK": _parameterized(_grants("FIRING DECK", value=PARAMETER_TOKEN)),
    "DEADLY DEMISE": _parameterized(
        Mechanic(
            entity=Entity.THIS_UNIT,
            effect=Effect.MORTAL_WOUNDS,
            value=PARAMETER_TOKEN,
        )
    ),
}

DEFAULT_CORE_ABILITIES = CoreAbilityRegistry(CORE_ABILITY_DEFINITIONS)
