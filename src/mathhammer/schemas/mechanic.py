"""Schemas for conditions and mechanics."""

from __future__ import annotations

from pydantic import Field

from mathhammer.domain.enums import Effect, Entity, Operator, SourceKind, coerce
from mathhammer.domain.models import Condition, Mechanic, MechanicSource
from mathhammer.schemas.base import CamelModel


class ConditionData(CamelModel):
    entity: str = Field(..., min_length=1, description="Entity the condition inspects")
    state: str | None = Field(None, description="Named state flag such as isStationary")
    attribute: str | None = Field(None, description="Model or weapon characteristic key")
    keywords: list[str] = Field(default_factory=list)
    abilities: list[str] = Field(default_factory=list)
    operator: str | None = Field(None, description="Comparison operator, equals when omitted")
    value: bool | int | float | str | list[str] | None = None

    def to_domain(self) -> Condition:
        value = tuple(self.value) if isinstance(self.value, list) else self.value
        return Condition(
            entity=coerce(Entity, self.entity),
            state=self.state,
            attribute=self.attribute,
            keywords=tuple(self.keywords),
            abilities=tuple(self.abilities),
            operator=coerce(Operator, self.operator),
            value=value,
        )

    @classmethod
    def from_domain(cls, condition: Condition) -> ConditionData:
        value = list(condition.value) if isinstance(condition.value, tuple) else condition.value
        return cls(
            entity=str(condition.entity),
            state=condition.state,
            attribute=condition.attribute,
            keywords=list(condition.keywords),
            abilities=list(condition.abilities),
            operator=str(condition.operator) if condition.operator is not None else None,
            value=value,
        )


class MechanicSourceData(CamelModel):
    kind: SourceKind
    name: str
    unit_name: str | None = None
    label: str | None = None

    def to_domain(self) -> MechanicSource:
        return MechanicSource(
            kind=self.kind, name=self.name, unit_name=self.unit_name, label=self.label
        )

    @classmethod
    def from_domain(cls, source: MechanicSource) -> MechanicSourceData:
        return cls(
            kind=source.kind, name=source.name, unit_name=source.unit_name, label=source.label
        )


class MechanicData(CamelModel):
    entity: str = Field(..., min_length=1, description="Entity the mechanic acts on")
    effect: str = Field(..., min_length=1, description="Effect kind such as rollBonus")
    attribute: str | None = Field(None, description="Roll type or characteristic key")
    value: bool | int | float | str | None = None
    abilities: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    conditions: list[ConditionData] = Field(default_factory=list)
    source: MechanicSourceData | None = None
    key: str | None = None

    def to_domain(self) -> Mechanic:
        return Mechanic(
            entity=coerce(Entity, self.entity),
            effect=coerce(Effect, self.effect),
            attribute=self.attribute,
            value=self.value,
            abilities=tuple(self.abilities),
            keywords=tuple(self.keywords),
            conditions=tuple(condition.to_domain() for condition in self.conditions),
            source=self.source.to_domain() if self.source else None,
            key=self.key,
        )

    @classmethod
    def from_domain(cls, mechanic: Mechanic) -> MechanicData:
        return cls(
            entity=str(mechanic.entity),
            effect=str(mechanic.effect),
            attribute=mechanic.attribute,
            value=mechanic.value,
            abilities=list(mechanic.abilities),
            keywords=list(mechanic.keywords),
            conditions=[ConditionData.from_domain(c) for c in mechanic.conditions],
            source=MechanicSourceData.from_domain(mechanic.source) if mechanic.source else None,
            key=mechanic.key,
        )


def mechanics_to_domain(mechanics: list[MechanicData]) -> tuple[Mechanic, ...]:
    return tuple(mechanic.to_domain() for mechanic in mechanics)
