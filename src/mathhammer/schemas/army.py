"""Schemas for army-scoped rule sources."""

from __future__ import annotations

from pydantic import Field

from mathhammer.domain.enums import GamePhase, TurnRestriction, coerce
from mathhammer.domain.models import (
    ArmyContext,
    DetachmentAbility,
    Enhancement,
    FactionAbility,
    Stratagem,
)
from mathhammer.schemas.base import CamelModel
from mathhammer.schemas.mechanic import MechanicData, mechanics_to_domain


class RuleSourceData(CamelModel):
    name: str = Field(..., min_length=1)
    id: str | None = None
    mechanics: list[MechanicData] = Field(default_factory=list)


class EnhancementData(RuleSourceData):
    def to_domain(self) -> Enhancement:
        return Enhancement(
            name=self.name, id=self.id, mechanics=mechanics_to_domain(self.mechanics)
        )


class FactionAbilityData(RuleSourceData):
    def to_domain(self) -> FactionAbility:
        return FactionAbility(
            name=self.name, id=self.id, mechanics=mechanics_to_domain(self.mechanics)
        )


class DetachmentAbilityData(RuleSourceData):
    def to_domain(self) -> DetachmentAbility:
        return DetachmentAbility(
            name=self.name, id=self.id, mechanics=mechanics_to_domain(self.mechanics)
        )


class StratagemData(CamelModel):
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    mechanics: list[MechanicData] = Field(default_factory=list)
    phases: list[str] = Field(default_factory=list, description="Phases it may be used in")
    turn: str | None = Field(None, description="your, opponent or either")

    def to_domain(self) -> Stratagem:
        return Stratagem(
            id=self.id,
            name=self.name,
            mechanics=mechanics_to_domain(self.mechanics),
            phases=tuple(coerce(GamePhase, phase.strip().lower()) for phase in self.phases),
            turn=coerce(TurnRestriction, self.turn.strip().lower()) if self.turn else None,
        )


class ArmyContextData(CamelModel):
    name: str | None = None
    faction_abilities: list[FactionAbilityData] = Field(default_factory=list)
    detachment_abilities: list[DetachmentAbilityData] = Field(default_factory=list)
    stratagems: list[StratagemData] = Field(default_factory=list)

    def to_domain(self) -> ArmyContext:
        return ArmyContext(
            name=self.name,
            faction_abilities=tuple(a.to_domain() for a in self.faction_abilities),
            detachment_abilities=tuple(a.to_domain() for a in self.detachment_abilities),
            stratagems=tuple(s.to_domain() for s in self.stratagems),
        )
