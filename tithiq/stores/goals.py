"""Goal Store: the singleton monthly/yearly giving targets."""

from typing import Optional

from pydantic import TypeAdapter

from tithiq.models.events import StoreEventBuilder
from tithiq.models.giving import GivingGoal
from tithiq.stores.base import PersistentStore
from tithiq.stores.keys import GOALS_KEY


_ADAPTER = TypeAdapter(GivingGoal)


class GoalStore(PersistentStore):

    key = GOALS_KEY

    def __init__(self, storage, events=None, clock=None):
        super().__init__(storage, events, clock)
        with self._lock:
            self._goals = self._load(self.key, _ADAPTER, GivingGoal)

    @property
    def goals(self) -> GivingGoal:
        with self._lock:
            return self._goals.model_copy()

    def set_goals(self, goals: GivingGoal) -> GivingGoal:
        goals = GivingGoal.model_validate(goals).model_copy()
        with self._lock:
            self._goals = goals
            self._save(self.key, _ADAPTER, self._goals)
        self._emit(StoreEventBuilder.goals_updated(
            self.key, goals.monthly_target, goals.yearly_target
        ))
        return goals.model_copy()

    def update(
        self,
        monthly_target: Optional[float] = None,
        yearly_target: Optional[float] = None,
    ) -> GivingGoal:
        """Change one or both targets, keeping the other as is."""
        with self._lock:
            current = self._goals
            return self.set_goals(GivingGoal(
                monthly_target=(
                    current.monthly_target if monthly_target is None else monthly_target
                ),
                yearly_target=(
                    current.yearly_target if yearly_target is None else yearly_target
                ),
            ))
