"""JSON-based repository for core ability registries."""

from __future__ import annotations

import logging
from pathlib import Path

from mathhammer.config import Settings
from mathhammer.domain.core_abilities import CoreAbilityRegistry
from mathhammer.domain.core_ability_data import DEFAULT_CORE_ABILITIES
from mathhammer.schemas.registry import CoreAbilityRegistryData

logger = logging.getLogger(__name__)


class JsonCoreAbilityRepository:
    """Load core ability templates from a JSON document on disk."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load_document(self) -> CoreAbilityRegistryData:
        """Parse and validate the registry document."""

        data = self.path.read_bytes()
        return CoreAbilityRegistryData.model_validate_json(data)

    def load(self) -> CoreAbilityRegistry:
        """Build a registry from the document on disk."""

        registry = self.load_document().to_domain()
        logger.debug("loaded %d core abilities from %s", len(registry), self.path)
        return registry

    def save(self, document: CoreAbilityRegistryData) -> Path:
        """Serialize a registry document to disk and return its path."""

        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = document.model_dump_json(indent=2, by_alias=True, exclude_none=True)
        self.path.write_text(payload, encoding="utf-8")
        return self.path


def load_core_ability_registry(settings: Settings) -> CoreAbilityRegistry:
    """Registry from ``settings.core_abilities_path``, or the built-in one when unset."""

    if settings.core_abilities_path is None:
        return DEFAULT_CORE_ABILITIES
    return JsonCoreAbilityRepository(settings.core_abilities_path).load()
