"""Schemas for datasheets, model profiles and weapon profiles."""

from __future__ import annotations

from pydantic import Field

from mathhammer.domain.models import Ability, Datasheet, ModelProfile, WeaponProfile
from mathhammer.schemas.base import (
    CamelModel,
    Characteristic,
    FlexibleCharacteristic,
    OptionalCharacteristic,
)
from mathhammer.schemas.mechanic import MechanicData, mechanics_to_domain


class AbilityData(CamelModel):
    name: str = Field(..., min_length=1, description="Ability name as printed")
    kind: str | None = Field(None, alias="type", description="Ability category, e.g. Core")
    parameter: int | str | None = Field(None, description="Instance value such as 5+ or D3")
    mechanics: list[MechanicData] = Field(default_factory=list)

    def to_domain(self) -> Ability:
        return Ability(
            name=self.name,
            kind=self.kind,
            parameter=self.parameter,
            mechanics=mechanics_to_domain(self.mechanics),
        )


class ModelProfileData(CamelModel):
    name: str = Field(..., min_length=1)
    m: Characteristic = Field(default=0, description="Movement in inches")
    t: Characteristic = Field(default=0, ge=0, description="Toughness")
    sv: Characteristic = Field(default=7, description="Armour save target, 7 for none")
    inv_sv: OptionalCharacteristic = Field(None, description="Invulnerable save target")
    w: Characteristic = Field(default=0, ge=0, description="Wounds")
    ld: Characteristic = Field(default=0, description="Leadership target")
    oc: Characteristic = Field(default=0, ge=0, description="Objective control")

    def to_domain(self) -> ModelProfile:
        return ModelProfile(
            name=self.name,
            m=self.m,
            t=self.t,
            sv=self.sv,
            inv_sv=self.inv_sv,
            w=self.w,
            ld=self.ld,
            oc=self.oc,
        )


class WeaponProfileData(CamelModel):
    name: str = Field(..., min_length=1)
    range: FlexibleCharacteristic = Field(default=0, description="Range in inches or Melee")
    a: FlexibleCharacteristic = Field(default=1, description="Attacks, number or dice")
    bs_ws: FlexibleCharacteristic | None = Field(None, description="Ballistic/Weapon skill")
    s: Characteristic = Field(default=4, description="Strength")
    ap: Characteristic = Field(default=0, description="Armour penetration")
    d: FlexibleCharacteristic = Field(default=1, description="Damage, number or dice")
    attributes: list[str] = Field(default_factory=list, description="Weapon keywords")

    def to_domain(self) -> WeaponProfile:
        return WeaponProfile(
            name=self.name,
            range=self.range,
            a=self.a,
            bs_ws=self.bs_ws,
            s=self.s,
            ap=self.ap,
            d=self.d,
            attributes=tuple(self.attributes),
        )


class DatasheetData(CamelModel):
    name: str = Field(..., min_length=1)
    id: str | None = None
    abilities: list[AbilityData] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    models: list[ModelProfileData] = Field(default_factory=list)
    damaged_mechanics: list[MechanicData] = Field(default_factory=list)

    def to_domain(self) -> Datasheet:
        return Datasheet(
            name=self.name,
            id=self.id,
            abilities=tuple(ability.to_domain() for ability in self.abilities),
            keywords=tuple(self.keywords),
            models=tuple(model.to_domain() for model in self.models),
            damaged_mechanics=mechanics_to_domain(self.damaged_mechanics),
        )
