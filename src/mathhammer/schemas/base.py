"""Shared pydantic configuration for loader payloads."""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

_EMPTY_MARKERS = frozenset({"", "-", "none", "n/a"})


class CamelModel(BaseModel):
    """Accept camelCase keys (``invSv``, ``bsWs``) as well as field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def parse_characteristic(value: Any) -> Any:
    """Strip printed decoration such as ``3+`` or ``6"`` from a characteristic."""

    if isinstance(value, str):
        text = value.strip().rstrip('+"').strip()
        if text.lstrip("+-").isdigit():
            return int(text)
    return value


def parse_optional_characteristic(value: Any) -> Any:
    if isinstance(value, str) and value.strip().lower() in _EMPTY_MARKERS:
        return None
    return parse_characteristic(value)


Characteristic = Annotated[int, BeforeValidator(parse_characteristic)]
OptionalCharacteristic = Annotated[int | None, BeforeValidator(parse_optional_characteristic)]
FlexibleCharacteristic = Annotated[int | str, BeforeValidator(parse_characteristic)]
