"""Core Ability Registry Protocol Interface.

This module defines the protocol (interface) for core ability lookups used
by the mechanic collector.
"""

from typing import Protocol

from mathhammer.domain.core_abilities import CoreAbilityDefinition
from mathhammer.domain.models import Mechanic


class ICoreAbilityRegistry(Protocol):
    """Protocol defining the interface for core ability registries.

    Implementations map an ability name (case-insensitive, trimmed) to a
    template and instantiate it for a concrete ability parameter.
    """

    def lookup(self, name: str) -> CoreAbilityDefinition | None:
        """Find the template registered under ``name``.

        Args:
            name: Ability name as printed on the datasheet

        Returns:
            The template, or None when the name is not a core ability
        """
        ...

    def resolve(self, name: str, parameter: int | str | None = None) -> list[Mechanic] | None:
        """Instantiate the core ability ``name`` for one datasheet entry.

        Args:
            name: Ability name as printed on the datasheet
            parameter: Instance parameter such as "5+" for FEEL NO PAIN 5+

        Returns:
            Fresh mechanics (empty when a required parameter is missing), or
            None when the name is not a core ability
        """
        ...
