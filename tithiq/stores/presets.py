"""
Preset Store

Two values under two keys:
- the user's presets (list, append/remove), seeded with defaults
- the "last giving" preset, overwritten after every save
"""

from typing import Optional

from pydantic import TypeAdapter

from tithiq.models.events import StoreEventBuilder
from tithiq.models.giving import (
    LAST_GIVING_PRESET_NAME,
    Frequency,
    GivingPreset,
    default_presets,
)
from tithiq.stores.base import PersistentStore
from tithiq.stores.keys import LAST_GIVING_KEY, PRESETS_KEY


_PRESETS_ADAPTER = TypeAdapter(list[GivingPreset])
_LAST_GIVING_ADAPTER = TypeAdapter(Optional[GivingPreset])


class PresetStore(PersistentStore):
    """Quick-apply calculator templates."""

    key = PRESETS_KEY
    last_giving_key = LAST_GIVING_KEY

    def __init__(self, storage, events=None, clock=None):
        super().__init__(storage, events, clock)
        with self._lock:
            self._presets = self._load(
                self.key,
                _PRESETS_ADAPTER,
                default_presets,
                seed_missing=True,
                seed_corrupt=True,
            )
            self._last_giving: Optional[GivingPreset] = self._load(
                self.last_giving_key,
                _LAST_GIVING_ADAPTER,
                lambda: None,
            )

    @property
    def presets(self) -> list[GivingPreset]:
        with self._lock:
            return [preset.model_copy(deep=True) for preset in self._presets]

    @property
    def last_giving(self) -> Optional[GivingPreset]:
        with self._lock:
            if self._last_giving is None:
                return None
            return self._last_giving.model_copy(deep=True)

    def add_preset(self, preset: GivingPreset) -> GivingPreset:
        preset = GivingPreset.model_validate(preset).model_copy(deep=True)
        with self._lock:
            self._presets.append(preset)
            self._save(self.key, _PRESETS_ADAPTER, self._presets)
        self._emit(StoreEventBuilder.preset_added(self.key, preset.id, preset.name))
        return preset

    def remove_preset(self, index: int) -> Optional[GivingPreset]:
        """Remove the preset at `index`. Out-of-range indexes are ignored."""
        with self._lock:
            if not 0 <= index < len(self._presets):
                return None
            removed = self._presets.pop(index)
            self._save(self.key, _PRESETS_ADAPTER, self._presets)
        self._emit(StoreEventBuilder.preset_removed(self.key, removed.id, removed.name))
        return removed

    def update_last_giving(
        self,
        amount: float,
        frequency: Frequency,
        categories: list[str],
        category_distribution: dict[str, float],
    ) -> GivingPreset:
        """Overwrite the "last giving" preset."""
        preset = GivingPreset(
            name=LAST_GIVING_PRESET_NAME,
            amount=amount,
            frequency=frequency,
            categories=list(categories),
            category_distribution=dict(category_distribution),
        )
        with self._lock:
            self._last_giving = preset
            self._save(self.last_giving_key, _LAST_GIVING_ADAPTER, preset)
        self._emit(StoreEventBuilder.last_giving_updated(
            self.last_giving_key, preset.id, amount
        ))
        return preset.model_copy(deep=True)
