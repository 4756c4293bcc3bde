"""Dice-notation helpers for weapon characteristics.

Attacks and damage on a weapon profile may be fixed numbers or dice
expressions such as ``D3``, ``D6``, ``2D6`` or ``D6+1``.  The rules layer
never rolls dice; it only needs the expected value of such an expression.

Examples:
    >>> parse_dice_notation("2D6+1")
    (2, 6, 1)

    >>> average_value("D6+1")
    4.5

    >>> average_value("bogus")
    1.0
"""

from __future__ import annotations

import re

_DICE = re.compile(r"^(\d*)D(\d+)(?:([+-])(\d+))?$")
_FLAT = re.compile(r"^[+-]?\d+$")


def parse_dice_notation(notation: str) -> tuple[int, int, int]:
    """Parse dice notation like ``2D6+1`` into ``(num_dice, num_sides, modifier)``.

    A missing dice count means one die.  Whitespace and case are ignored.

    Args:
        notation: Dice notation string (e.g., "D3", "2D6", "D6+1")

    Returns:
        Tuple of (number_of_dice, number_of_sides, flat_modifier)

    Raises:
        ValueError: If notation is invalid or the dice values are non-positive

    Examples:
        >>> parse_dice_notation("D3")
        (1, 3, 0)

        >>> parse_dice_notation("2d6 - 1")
        (2, 6, -1)
    """
    compact = "".join(notation.split()).upper()
    match = _DICE.match(compact)
    if not match:
        raise ValueError(
            f"Invalid dice notation: '{notation}'. Expected format: [N]DM[+K] (e.g., 'D6', '2D6+1')"
        )

    num_dice = int(match.group(1)) if match.group(1) else 1
    num_sides = int(match.group(2))
    modifier = int(match.group(4)) if match.group(4) else 0
    if match.group(3) == "-":
        modifier = -modifier

    if num_dice <= 0:
        raise ValueError(f"Number of dice must be positive, got {num_dice}")
    if num_sides <= 0:
        raise ValueError(f"Number of sides must be positive, got {num_sides}")

    return num_dice, num_sides, modifier


def average_roll(notation: str) -> float:
    """Expected total of a dice expression.

    Raises:
        ValueError: If dice notation is invalid
    """
    num_dice, num_sides, modifier = parse_dice_notation(notation)
    return num_dice * (num_sides + 1) / 2 + modifier


def average_value(value: int | float | str | None, default: float = 1.0) -> float:
    """Expected value of a fixed number or dice expression.

    Unparsable values count as ``default`` rather than raising.

    Args:
        value: A number, a numeric string such as "3", or dice notation
        default: Value used when ``value`` cannot be interpreted

    Returns:
        The fixed value or the expected value of the expression
    """
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, int | float):
        return float(value)

    text = "".join(value.split())
    if _FLAT.match(text):
        return float(int(text))
    try:
        return average_roll(text)
    except ValueError:
        return default
