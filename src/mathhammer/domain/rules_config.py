"""Declarative game-table constants for the rules layer."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RollRules:
    """Roll-target bounds, modifier caps and cover."""

    min_target: int = 2
    max_target: int = 6
    no_save_target: int = 7
    hit_modifier_cap: int = 1
    wound_modifier_cap: int = 1
    cover_threshold: int = 4  # cover only helps a 4+ or worse save
    cover_bonus: int = 1
    die_sides: int = 6


@dataclass(frozen=True, slots=True)
class ProfileDefaults:
    """Fallbacks used when a side has no weapon or model selected."""

    bs_ws: int = 4
    strength: int = 4
    attacks: int = 1
    damage: int = 1
    armour_save: int = 7


@dataclass(frozen=True, slots=True)
class RulesConfig:
    """Top-level configuration container."""

    rolls: RollRules = RollRules()
    defaults: ProfileDefaults = ProfileDefaults()


DEFAULT_RULES = RulesConfig()
