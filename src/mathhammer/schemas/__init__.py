from .army import (
    ArmyContextData,
    DetachmentAbilityData,
    EnhancementData,
    FactionAbilityData,
    StratagemData,
)
from .context import CombatStatusData, GameContextData, UnitContextData
from .datasheet import AbilityData, DatasheetData, ModelProfileData, WeaponProfileData
from .mechanic import ConditionData, MechanicData, MechanicSourceData
from .registry import CoreAbilityEntryData, CoreAbilityRegistryData
from .result import AppliedMechanicRead, CombatResultRead, ModifierBreakdownRead

__all__ = [
    "AbilityData",
    "AppliedMechanicRead",
    "ArmyContextData",
    "CombatResultRead",
    "CombatStatusData",
    "ConditionData",
    "CoreAbilityEntryData",
    "CoreAbilityRegistryData",
    "DatasheetData",
    "DetachmentAbilityData",
    "EnhancementData",
    "FactionAbilityData",
    "GameContextData",
    "MechanicData",
    "MechanicSourceData",
    "ModelProfileData",
    "ModifierBreakdownRead",
    "StratagemData",
    "UnitContextData",
    "WeaponProfileData",
]
