"""
Criteria Edit Session
app/scoring/criteria_editor.py

Server-side model of the config editor's criteria list. Every operation keeps
criterion ids intact; new, unsaved criteria get placeholder ids of the form
`new-<n>` where n only ever increases, so an id removed during a session is
never handed out again.

Usage:
    editor = CriteriaEditor()              # one blank criterion, weight 100
    editor.add()                           # new-2, weight 0
    editor.update(1, name="Team", weight=40)
    editor.move(1, -1)
    editor.total_weight, editor.allocation
"""

from typing import Any, List, Optional

from app.models.enumerations import WeightAllocation
from app.models.scoring_config import Criterion
from app.scoring.config_validation import TARGET_TOTAL_WEIGHT, total_weight, weight_allocation

PLACEHOLDER_PREFIX = "new-"
_EDITABLE_FIELDS = {"name", "weight", "description", "research_guidance"}


class CriteriaEditor:
    """Ordered, id-preserving editing of a config's criteria."""

    def __init__(self, criteria: Optional[List[Criterion]] = None):
        self._counter = 0
        self._issued: set[str] = set()
        if criteria is None:
            self._criteria: List[Criterion] = [
                Criterion(id=self._next_placeholder_id(), weight=TARGET_TOTAL_WEIGHT)
            ]
        else:
            self._criteria = [c.model_copy() for c in criteria]
            self._issued.update(c.id for c in self._criteria)

    def _next_placeholder_id(self) -> str:
        while True:
            self._counter += 1
            candidate = f"{PLACEHOLDER_PREFIX}{self._counter}"
            if candidate not in self._issued:
                self._issued.add(candidate)
                return candidate

    @property
    def criteria(self) -> List[Criterion]:
        return list(self._criteria)

    @property
    def total_weight(self) -> int:
        return total_weight(self._criteria)

    @property
    def allocation(self) -> WeightAllocation:
        return weight_allocation(self.total_weight)

    def add(self) -> Criterion:
        """Append a blank criterion with weight 0."""
        criterion = Criterion(id=self._next_placeholder_id(), weight=0)
        self._criteria.append(criterion)
        return criterion

    def remove(self, index: int) -> Criterion:
        """Remove the criterion at `index`; its id stays retired."""
        if not 0 <= index < len(self._criteria):
            raise IndexError(f"No criterion at position {index}")
        return self._criteria.pop(index)

    def move(self, index: int, direction: int) -> bool:
        """
        Swap the criterion at `index` with its neighbour.

        Returns False (and changes nothing) when the move would leave the list.
        """
        if direction not in (-1, 1):
            raise ValueError("direction must be -1 or 1")
        target = index + direction
        if not 0 <= index < len(self._criteria) or not 0 <= target < len(self._criteria):
            return False
        items = self._criteria
        items[index], items[target] = items[target], items[index]
        return True

    def update(self, index: int, **changes: Any) -> Criterion:
        """Replace editable fields of one criterion; the id cannot change."""
        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot edit field(s): {', '.join(sorted(unknown))}")
        if not 0 <= index < len(self._criteria):
            raise IndexError(f"No criterion at position {index}")
        updated = self._criteria[index].model_copy(update=changes)
        self._criteria[index] = updated
        return updated

    @staticmethod
    def is_placeholder(criterion_id: str) -> bool:
        return criterion_id.startswith(PLACEHOLDER_PREFIX)
