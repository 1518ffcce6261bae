"""
Category Registry

Named giving categories with target percentages. Edits are staged by
the caller and committed with a single `replace_all`; the only way to
delete categories is `reset_to_defaults`.
"""

from typing import Iterable, Optional

from pydantic import TypeAdapter

from tithiq.models.events import StoreEventBuilder
from tithiq.models.giving import GivingCategory, default_categories
from tithiq.stores.base import PersistentStore
from tithiq.stores.keys import CATEGORIES_KEY


_ADAPTER = TypeAdapter(list[GivingCategory])


class CategoryRegistry(PersistentStore):
    """The user's giving categories, defaults on first run."""

    key = CATEGORIES_KEY

    def __init__(self, storage, events=None, clock=None):
        super().__init__(storage, events, clock)
        with self._lock:
            self._categories = self._load(
                self.key,
                _ADAPTER,
                default_categories,
                seed_missing=True,
            )
            if not self._categories:
                self._categories = default_categories()
                self._save(self.key, _ADAPTER, self._categories)

    @property
    def categories(self) -> list[GivingCategory]:
        """Copies of the registered categories, in display order."""
        with self._lock:
            return [category.model_copy() for category in self._categories]

    def names(self) -> list[str]:
        with self._lock:
            return [category.name for category in self._categories]

    def get(self, name: str) -> Optional[GivingCategory]:
        """First category with this exact name, if any."""
        with self._lock:
            for category in self._categories:
                if category.name == name:
                    return category.model_copy()
        return None

    def match(self, names: Iterable[str]) -> list[GivingCategory]:
        """
        Resolve names against the registry, keeping the given order.

        Names with no registered category are dropped.
        """
        matched = []
        for name in names:
            category = self.get(name)
            if category is not None:
                matched.append(category)
        return matched

    def replace_all(self, categories: Iterable[GivingCategory]) -> None:
        """Commit a staged edit: the new list replaces the old one."""
        staged = [GivingCategory.model_validate(c).model_copy() for c in categories]
        with self._lock:
            self._categories = staged
            self._save(self.key, _ADAPTER, self._categories)
        self._emit(StoreEventBuilder.categories_replaced(
            self.key, [c.name for c in staged]
        ))

    def reset_to_defaults(self) -> None:
        with self._lock:
            self._categories = default_categories()
            self._save(self.key, _ADAPTER, self._categories)
        self._emit(StoreEventBuilder.categories_reset(self.key))
