"""Schemas for the full game context of one exchange."""

from __future__ import annotations

from pydantic import Field

from mathhammer.domain.enums import GamePhase, Perspective
from mathhammer.domain.models import CombatStatus, GameContext, UnitContext
from mathhammer.schemas.army import ArmyContextData, EnhancementData
from mathhammer.schemas.base import CamelModel
from mathhammer.schemas.datasheet import DatasheetData, ModelProfileData, WeaponProfileData


class CombatStatusData(CamelModel):
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

    def to_domain(self) -> CombatStatus:
        return CombatStatus(**self.model_dump())


class UnitContextData(CamelModel):
    datasheet: DatasheetData
    selected_model: ModelProfileData | None = None
    selected_weapon: WeaponProfileData | None = None
    attached_leaders: list[DatasheetData] = Field(default_factory=list)
    combat_status: CombatStatusData = Field(default_factory=CombatStatusData)
    enhancement: EnhancementData | None = None

    def to_domain(self) -> UnitContext:
        return UnitContext(
            datasheet=self.datasheet.to_domain(),
            selected_model=self.selected_model.to_domain() if self.selected_model else None,
            selected_weapon=self.selected_weapon.to_domain() if self.selected_weapon else None,
            attached_leaders=tuple(leader.to_domain() for leader in self.attached_leaders),
            status=self.combat_status.to_domain(),
            enhancement=self.enhancement.to_domain() if self.enhancement else None,
        )


class GameContextData(CamelModel):
    attacker: UnitContextData
    defender: UnitContextData
    attacker_army: ArmyContextData = Field(default_factory=ArmyContextData)
    defender_army: ArmyContextData = Field(default_factory=ArmyContextData)
    attacker_stratagems: list[str] = Field(
        default_factory=list, description="Ids of stratagems the attacker toggled on"
    )
    defender_stratagems: list[str] = Field(
        default_factory=list, description="Ids of stratagems the defender toggled on"
    )
    phase: GamePhase | None = None
    active_side: Perspective | None = Field(None, description="Side whose turn it is")

    def to_domain(self) -> GameContext:
        return GameContext(
            attacker=self.attacker.to_domain(),
            defender=self.defender.to_domain(),
            attacker_army=self.attacker_army.to_domain(),
            defender_army=self.defender_army.to_domain(),
            attacker_stratagems=frozenset(self.attacker_stratagems),
            defender_stratagems=frozenset(self.defender_stratagems),
            phase=self.phase,
            active_side=self.active_side,
        )
