"""Core ability registry and template instantiation.

Core abilities (FEEL NO PAIN, STEALTH, ...) are defined once as templates.
Parameterised templates carry the literal ``PARAMETER_TOKEN`` in a
mechanic's ``value``; instantiating a template for a concrete ability swaps
the token for the ability's own parameter.  Templates are never mutated:
every instantiation builds new mechanic values.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace

from mathhammer.domain.enums import CoreAbilityType
from mathhammer.domain.models import Mechanic, MechanicValue

PARAMETER_TOKEN = "{parameter}"

_MISSING_PARAMETERS = frozenset({"", "none"})
_NUMERIC_PARAMETER = re.compile(r"^(\d+)\+?$")


@dataclass(frozen=True, slots=True)
class CoreAbilityDefinition:
    kind: CoreAbilityType
    mechanics: tuple[Mechanic, ...] = ()


def registry_key(name: str) -> str:
    return name.strip().upper()


def parse_parameter(parameter: int | str) -> int | str:
    """Turn ``"5"``/``"5+"`` into ``5``; keep dice expressions such as ``"D3"``."""

    if isinstance(parameter, int):
        return parameter
    text = parameter.strip()
    match = _NUMERIC_PARAMETER.match(text)
    if match:
        return int(match.group(1))
    return text


def _is_missing(parameter: int | str | None) -> bool:
    if parameter is None:
        return True
    return isinstance(parameter, str) and parameter.strip().lower() in _MISSING_PARAMETERS


def _copy_mechanic(mechanic: Mechanic, value: MechanicValue) -> Mechanic:
    return replace(
        mechanic,
        value=value,
        conditions=tuple(replace(condition) for condition in mechanic.conditions),
    )


def instantiate(
    definition: CoreAbilityDefinition, parameter: int | str | None = None
) -> list[Mechanic]:
    """Build fresh mechanics for one use of a core ability.

    A parameterised template without a usable parameter yields nothing.
    """

    if definition.kind is CoreAbilityType.STATIC:
        return [_copy_mechanic(mechanic, mechanic.value) for mechanic in definition.mechanics]

    if _is_missing(parameter):
        return []

    resolved = parse_parameter(parameter)
    return [
        _copy_mechanic(
            mechanic,
            resolved if mechanic.value == PARAMETER_TOKEN else mechanic.value,
        )
        for mechanic in definition.mechanics
    ]


class CoreAbilityRegistry:
    """Case-insensitive lookup of core ability templates."""

    def __init__(self, definitions: Mapping[str, CoreAbilityDefinition] | None = None) -> None:
        self._definitions: dict[str, CoreAbilityDefinition] = {
            registry_key(name): definition for name, definition in (definitions or {}).items()
        }

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and registry_key(name) in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def names(self) -> Iterable[str]:
        return sorted(self._definitions)

    def lookup(self, name: str) -> CoreAbilityDefinition | None:
        return self._definitions.get(registry_key(name))

    def kind_of(self, name: str) -> CoreAbilityType | None:
        definition = self.lookup(name)
        return definition.kind if definition else None

    def resolve(self, name: str, parameter: int | str | None = None) -> list[Mechanic] | None:
        """Instantiate ``name``; ``None`` means it is not a core ability at all."""

        definition = self.lookup(name)
        if definition is None:
            return None
        return instantiate(definition, parameter)
