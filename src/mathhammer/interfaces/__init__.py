"""Protocol-based interfaces for Mathhammer.

This module exports the protocol interfaces callers implement to plug their
own data sources into the rules engine.
"""

from mathhammer.interfaces.registry import ICoreAbilityRegistry

__all__ = [
    "ICoreAbilityRegistry",
]
