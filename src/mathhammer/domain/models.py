"""Dataclasses describing everything the rules layer reads and produces.

Input records (datasheets, weapons, abilities, army rules) are frozen: the
engine only ever reads them.  ``Mechanic`` and ``Condition`` are immutable
value objects; collectors derive new instances with ``dataclasses.replace``
rather than mutating shared templates.

``ModifiedStats`` and its parts are the only mutable types.  A fresh
instance is built for every resolution and perspective by the effect
applicator and is never shared.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from mathhammer.domain.enums import (
    Effect,
    Entity,
    GamePhase,
    Operator,
    Perspective,
    RerollGrade,
    RollType,
    SourceKind,
    TurnRestriction,
)

ConditionValue = bool | int | float | str | tuple[str, ...] | None
MechanicValue = bool | int | float | str | None


# --- Rule primitives -----------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Condition:
    """Single predicate gating a mechanic.

    Exactly one discriminant (``state``, ``keywords``, ``abilities`` or
    ``attribute``) is expected; a condition with none of them always passes.
    """

    entity: Entity | str
    state: str | None = None
    attribute: str | None = None
    keywords: tuple[str, ...] = ()
    abilities: tuple[str, ...] = ()
    operator: Operator | str | None = None
    value: ConditionValue = None


@dataclass(frozen=True, slots=True)
class MechanicSource:
    """Where a mechanic came from, for explanations."""

    kind: SourceKind
    name: str
    unit_name: str | None = None
    label: str | None = None


@dataclass(frozen=True, slots=True)
class Mechanic:
    """One atomic rule instruction."""

    entity: Entity | str
    effect: Effect | str
    attribute: str | None = None
    value: MechanicValue = None
    abilities: tuple[str, ...] = ()
    keywords: tuple[str, ...] = ()
    conditions: tuple[Condition, ...] = ()
    source: MechanicSource | None = None
    key: str | None = None


# --- Datasheet data -----------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Ability:
    """Named ability on a datasheet, optionally carrying embedded mechanics."""

    name: str
    kind: str | None = None
    parameter: int | str | None = None
    mechanics: tuple[Mechanic, ...] = ()


@dataclass(frozen=True, slots=True)
class ModelProfile:
    """Model characteristic line."""

    name: str
    m: int = 0
    t: int = 0
    sv: int = 7
    inv_sv: int | None = None
    w: int = 0
    ld: int = 0
    oc: int = 0


@dataclass(frozen=True, slots=True)
class WeaponProfile:
    """Weapon characteristic line.  ``a`` and ``d`` may be dice expressions."""

    name: str
    range: int | str = 0
    a: int | str = 1
    bs_ws: int | str | None = None
    s: int = 4
    ap: int = 0
    d: int | str = 1
    attributes: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Datasheet:
    """Unit datasheet as supplied by the external loaders."""

    name: str
    id: str | None = None
    abilities: tuple[Ability, ...] = ()
    keywords: tuple[str, ...] = ()
    models: tuple[ModelProfile, ...] = ()
    damaged_mechanics: tuple[Mechanic, ...] = ()


# --- Army-level rule sources ------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Enhancement:
    name: str
    id: str | None = None
    mechanics: tuple[Mechanic, ...] = ()


@dataclass(frozen=True, slots=True)
class FactionAbility:
    name: str
    id: str | None = None
    mechanics: tuple[Mechanic, ...] = ()


@dataclass(frozen=True, slots=True)
class DetachmentAbility:
    name: str
    id: str | None = None
    mechanics: tuple[Mechanic, ...] = ()


@dataclass(frozen=True, slots=True)
class Stratagem:
    """Stratagem definition.  Empty ``phases`` means usable in any phase."""

    id: str
    name: str
    mechanics: tuple[Mechanic, ...] = ()
    phases: tuple[GamePhase | str, ...] = ()
    turn: TurnRestriction | str | None = None


# --- Game state ---------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CombatStatus:
    """Battlefield flags for one unit."""

    is_stationary: bool = False
    in_cover: bool = False
    in_engagement_range: bool = False
    in_range_of_objective: bool = False
    in_range_of_contested_objective: bool = False
    in_range_of_friendly_objective: bool = False
    in_range_of_enemy_objective: bool = False
    is_battle_shocked: bool = False
    has_fired_this_phase: bool = False
    has_charged_this_turn: bool = False
    is_below_half_strength: bool = False
    is_below_starting_strength: bool = False
    is_damaged: bool = False


@dataclass(frozen=True, slots=True)
class UnitContext:
    """One combatant: datasheet, selected profiles, leaders and status."""

    datasheet: Datasheet
    selected_model: ModelProfile | None = None
    selected_weapon: WeaponProfile | None = None
    attached_leaders: tuple[Datasheet, ...] = ()
    status: CombatStatus = field(default_factory=CombatStatus)
    enhancement: Enhancement | None = None

    @property
    def has_leader(self) -> bool:
        return bool(self.attached_leaders)


@dataclass(frozen=True, slots=True)
class ArmyContext:
    """Army-scoped rule sources for one side."""

    name: str | None = None
    faction_abilities: tuple[FactionAbility, ...] = ()
    detachment_abilities: tuple[DetachmentAbility, ...] = ()
    stratagems: tuple[Stratagem, ...] = ()


@dataclass(frozen=True, slots=True)
class GameContext:
    """Complete input for one attacker/defender resolution."""

    attacker: UnitContext
    defender: UnitContext
    attacker_army: ArmyContext = field(default_factory=ArmyContext)
    defender_army: ArmyContext = field(default_factory=ArmyContext)
    attacker_stratagems: frozenset[str] = frozenset()
    defender_stratagems: frozenset[str] = frozenset()
    phase: GamePhase | None = None
    active_side: Perspective | None = None

    def unit_for(self, perspective: Perspective) -> UnitContext:
        if perspective is Perspective.ATTACKER:
            return self.attacker
        return self.defender

    def army_for(self, perspective: Perspective) -> ArmyContext:
        if perspective is Perspective.ATTACKER:
            return self.attacker_army
        return self.defender_army

    def active_stratagem_ids(self, perspective: Perspective) -> frozenset[str]:
        if perspective is Perspective.ATTACKER:
            return self.attacker_stratagems
        return self.defender_stratagems


@dataclass(slots=True)
class CollectedMechanics:
    attacker_mechanics: list[Mechanic]
    defender_mechanics: list[Mechanic]


# --- Modified stats -------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RollModifier:
    value: int
    source: MechanicSource


@dataclass(slots=True)
class ModelStats:
    m: int = 0
    t: int = 0
    sv: int = 7
    inv_sv: int | None = None
    w: int = 0
    ld: int = 0
    oc: int = 0


@dataclass(slots=True)
class WeaponStats:
    range: int | str = 0
    a: int | str = 1
    bs_ws: int = 0
    s: int = 4
    ap: int = 0
    d: int | str = 1
    attributes: list[str] = field(default_factory=list)


def _empty_roll_modifiers() -> dict[RollType, list[RollModifier]]:
    return {roll: [] for roll in RollType}


def _no_rerolls() -> dict[RollType, RerollGrade]:
    return {roll: RerollGrade.NONE for roll in RollType}


@dataclass(slots=True)
class ModifiedStats:
    """Working snapshot for one perspective of one resolution."""

    model: ModelStats = field(default_factory=ModelStats)
    weapon: WeaponStats | None = None
    added_abilities: list[str] = field(default_factory=list)
    added_keywords: list[str] = field(default_factory=list)
    roll_modifiers: dict[RollType, list[RollModifier]] = field(
        default_factory=_empty_roll_modifiers
    )
    # modifiers this side imposes on the opposing side's rolls
    opponent_roll_modifiers: dict[RollType, list[RollModifier]] = field(
        default_factory=_empty_roll_modifiers
    )
    auto_hit: bool = False
    auto_wound: bool = False
    rerolls: dict[RollType, RerollGrade] = field(default_factory=_no_rerolls)
    feel_no_pain: int | None = None
    critical_wound_threshold: int | None = None
