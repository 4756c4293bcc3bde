"""Utility functions for the Mathhammer rules engine."""

from mathhammer.utils.dice import average_roll, average_value, parse_dice_notation

__all__ = [
    "average_roll",
    "average_value",
    "parse_dice_notation",
]
