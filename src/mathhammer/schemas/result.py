"""Read model serialising a combat result into the camelCase result contract."""

from __future__ import annotations

from pydantic import Field

from mathhammer.domain.combat import AppliedMechanic, CombatResult
from mathhammer.domain.enums import Perspective, RerollGrade
from mathhammer.domain.rolls import ModifierBreakdown
from mathhammer.schemas.base import CamelModel
from mathhammer.schemas.mechanic import MechanicData


class ModifierEntryRead(CamelModel):
    source: str
    value: int


class ModifierBreakdownRead(CamelModel):
    bonuses: list[ModifierEntryRead] = Field(default_factory=list)
    penalties: list[ModifierEntryRead] = Field(default_factory=list)
    net_modifier: int = 0
    capped_to: int | None = None

    @classmethod
    def from_domain(cls, breakdown: ModifierBreakdown) -> ModifierBreakdownRead:
        return cls(
            bonuses=[ModifierEntryRead(source=e.source, value=e.value) for e in breakdown.bonuses],
            penalties=[
                ModifierEntryRead(source=e.source, value=e.value) for e in breakdown.penalties
            ],
            net_modifier=breakdown.net_modifier,
            capped_to=breakdown.capped_to,
        )


class AppliedMechanicRead(CamelModel):
    mechanic: MechanicData
    applied: bool
    side: Perspective
    reason: str | None = None

    @classmethod
    def from_domain(cls, entry: AppliedMechanic) -> AppliedMechanicRead:
        return cls(
            mechanic=MechanicData.from_domain(entry.mechanic),
            applied=entry.applied,
            side=entry.side,
            reason=entry.reason,
        )


class CombatResultRead(CamelModel):
    to_hit: int = Field(..., description="Hit target, 0 for automatic hits")
    to_wound: int = Field(..., description="Wound target, 0 for automatic wounds")
    to_save: int = Field(..., description="Save target, 7 when no save is possible")
    auto_hit: bool
    auto_wound: bool = False
    invuln_save_used: bool
    cover_applied: bool = False
    feel_no_pain: int | None = None
    hit_modifiers: ModifierBreakdownRead
    wound_modifiers: ModifierBreakdownRead
    save_modifiers: ModifierBreakdownRead
    expected_damage: float = Field(..., ge=0.0)
    applied_mechanics: list[AppliedMechanicRead] = Field(default_factory=list)
    rerolls: dict[str, RerollGrade] = Field(default_factory=dict)
    critical_wound_threshold: int | None = None

    @classmethod
    def from_domain(cls, result: CombatResult) -> CombatResultRead:
        return cls(
            to_hit=result.to_hit,
            to_wound=result.to_wound,
            to_save=result.to_save,
            auto_hit=result.auto_hit,
            auto_wound=result.auto_wound,
            invuln_save_used=result.invuln_save_used,
            cover_applied=result.cover_applied,
            feel_no_pain=result.feel_no_pain,
            hit_modifiers=ModifierBreakdownRead.from_domain(result.hit_modifiers),
            wound_modifiers=ModifierBreakdownRead.from_domain(result.wound_modifiers),
            save_modifiers=ModifierBreakdownRead.from_domain(result.save_modifiers),
            expected_damage=result.expected_damage,
            applied_mechanics=[
                AppliedMechanicRead.from_domain(entry) for entry in result.applied_mechanics
            ],
            rerolls={str(roll): grade for roll, grade in result.rerolls.items()},
            critical_wound_threshold=result.critical_wound_threshold,
        )
