"""Enumerations used across the rules layer."""

from __future__ import annotations

from enum import StrEnum
from typing import TypeVar


class Perspective(StrEnum):
    """Side of the exchange a resolution is evaluated for."""

    ATTACKER = "attacker"
    DEFENDER = "defender"

    @property
    def opponent(self) -> Perspective:
        if self is Perspective.ATTACKER:
            return Perspective.DEFENDER
        return Perspective.ATTACKER


class Entity(StrEnum):
    """Abstract references a mechanic or condition can point at."""

    THIS_ARMY = "thisArmy"
    THIS_UNIT = "thisUnit"
    THIS_MODEL = "thisModel"
    OPPONENT_ARMY = "opponentArmy"
    OPPOSING_UNIT = "opposingUnit"
    OPPOSING_MODEL = "opposingModel"
    TARGET_UNIT = "targetUnit"
    TARGET_MODEL = "targetModel"


class Effect(StrEnum):
    """What a mechanic does once it applies."""

    ROLL_BONUS = "rollBonus"
    ROLL_PENALTY = "rollPenalty"
    STATIC_NUMBER = "staticNumber"
    ADDS_ABILITY = "addsAbility"
    ADDS_KEYWORD = "addsKeyword"
    AUTO_SUCCESS = "autoSuccess"
    REROLL = "reroll"
    MORTAL_WOUNDS = "mortalWounds"


class RollType(StrEnum):
    """Roll attributes addressed by roll modifiers, rerolls and auto-successes."""

    HIT = "h"
    WOUND = "w"
    SAVE = "s"


class ModelField(StrEnum):
    """Model characteristics that mechanics may read or overwrite."""

    M = "m"
    T = "t"
    SV = "sv"
    INV_SV = "invSv"
    W = "w"
    LD = "ld"
    OC = "oc"


class WeaponField(StrEnum):
    """Weapon characteristics that mechanics may read or overwrite."""

    RANGE = "range"
    A = "a"
    BS_WS = "bsWs"
    S = "s"
    AP = "ap"
    D = "d"


class Operator(StrEnum):
    """Comparison operators understood by the condition evaluator."""

    EQUALS = "equals"
    NOT_EQUALS = "notEquals"
    GREATER_THAN = "greaterThan"
    GREATER_THAN_OR_EQUAL = "greaterThanOrEqualTo"
    LESS_THAN = "lessThan"
    LESS_THAN_OR_EQUAL = "lessThanOrEqualTo"
    INCLUDES = "includes"
    NOT_INCLUDES = "notIncludes"


class RerollGrade(StrEnum):
    """Reroll entitlement, ordered none < ones < failed < all."""

    NONE = "none"
    ONES = "ones"
    FAILED = "failed"
    ALL = "all"

    @property
    def rank(self) -> int:
        return _REROLL_RANKS[self]

    def outranks(self, other: RerollGrade) -> bool:
        return self.rank > other.rank


_REROLL_RANKS = {
    RerollGrade.NONE: 0,
    RerollGrade.ONES: 1,
    RerollGrade.FAILED: 2,
    RerollGrade.ALL: 3,
}


class SourceKind(StrEnum):
    """Provenance categories attached to collected mechanics."""

    ABILITY = "ability"
    WEAPON = "weapon"
    ENHANCEMENT = "enhancement"
    FACTION = "faction"
    DETACHMENT = "detachment"
    STRATAGEM = "stratagem"
    DAMAGED = "damaged"


class CoreAbilityType(StrEnum):
    """Whether a core ability template needs an instance parameter."""

    STATIC = "static"
    PARAMETERIZED = "parameterized"


class GamePhase(StrEnum):
    """Battle round phases used to validate stratagems."""

    COMMAND = "command"
    MOVEMENT = "movement"
    SHOOTING = "shooting"
    CHARGE = "charge"
    FIGHT = "fight"
    ANY = "any"


class TurnRestriction(StrEnum):
    """Whose turn a stratagem may be used in."""

    YOUR = "your"
    OPPONENT = "opponent"
    EITHER = "either"


E = TypeVar("E", bound=StrEnum)


def coerce(enum_cls: type[E], value: str | None) -> E | str | None:
    """Return the enum member for ``value`` or the raw string when unknown."""

    if value is None or isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return value
