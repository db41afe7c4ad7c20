"""State-changed aggregator — records what changed since the last commit.

The aggregator owns the inclusive ``StatesChanged`` routing criterion. Every
tracked routing criterion gets one bit of its type, in tracking order, so
the committed mask tells the routing subsystem which criteria moved. Changes
to names that carry no bit (general-purpose criteria, rogue parameters) set
a separate dirty flag instead.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from platstate.domain.types import ConfigurationError, CriterionName

if TYPE_CHECKING:
    from platstate.domain.criteria import CriterionStore, CriterionTypeRegistry

logger = logging.getLogger(__name__)

MAX_TRACKED_CRITERIA = 32


class StateChangedAggregator:
    """Bitmask of changed routing criteria plus a general-purpose dirty flag."""

    name = CriterionName.STATE_CHANGED.value

    def __init__(self, types: CriterionTypeRegistry, store: CriterionStore) -> None:
        self._types = types
        self._type = types.declare_type(self.name, inclusive=True)
        self._criterion = store.declare(self.name, self.name)
        self._tracked = 0
        self._general_changed = False
        self._changed: list[str] = []

    def track(self, criterion_name: str) -> int:
        """Assign the next bit to *criterion_name* and return it."""
        if self._tracked >= MAX_TRACKED_CRITERIA:
            msg = (
                f"Cannot track routing criterion {criterion_name!r}: "
                f"{self.name} holds at most {MAX_TRACKED_CRITERIA} criteria"
            )
            raise ConfigurationError(msg)
        bit = 1 << self._tracked
        self._types.add_value(self.name, bit, criterion_name)
        self._tracked += 1
        return bit

    def mark(self, name: str) -> None:
        """Record a change of criterion or parameter *name*."""
        bit = self._type.encode(name) if self._type.has_literal(name) else None
        if bit is None:
            self._general_changed = True
        else:
            self._criterion.value |= bit
        if name not in self._changed:
            self._changed.append(name)

    @property
    def mask(self) -> int:
        return self._criterion.value

    @property
    def general_changed(self) -> bool:
        return self._general_changed

    @property
    def has_changed(self) -> bool:
        return self._criterion.value != 0 or self._general_changed

    @property
    def tracked(self) -> dict[str, int]:
        """Tracked criterion names and their bits."""
        return self._type.values

    def clear(self) -> list[str]:
        """Reset mask and flag; return the names changed since the last clear."""
        changed = self._changed
        self._criterion.value = 0
        self._general_changed = False
        self._changed = []
        return changed
