"""Schema for core ability registry documents."""

from __future__ import annotations

from pydantic import Field

from mathhammer.domain.core_abilities import CoreAbilityDefinition, CoreAbilityRegistry
from mathhammer.domain.enums import CoreAbilityType
from mathhammer.schemas.base import CamelModel
from mathhammer.schemas.mechanic import MechanicData, mechanics_to_domain


class CoreAbilityEntryData(CamelModel):
    kind: CoreAbilityType = Field(..., alias="type")
    mechanics: list[MechanicData] = Field(default_factory=list)

    def to_domain(self) -> CoreAbilityDefinition:
        return CoreAbilityDefinition(kind=self.kind, mechanics=mechanics_to_domain(self.mechanics))


class CoreAbilityRegistryData(CamelModel):
    """``{"abilities": {NAME: {"type": ..., "mechanics": [...]}}}``"""

    abilities: dict[str, CoreAbilityEntryData] = Field(default_factory=dict)

    def to_domain(self) -> CoreAbilityRegistry:
        return CoreAbilityRegistry(
            {name: entry.to_domain() for name, entry in self.abilities.items()}
        )
