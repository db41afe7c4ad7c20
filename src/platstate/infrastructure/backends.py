"""Backing subsystem interfaces and in-memory implementations.

The engine drives two collaborators:

- the general-purpose backend, which also owns routing reconsideration;
- the routing backend, which stages criterion values and publishes them
  atomically on :meth:`RoutingBackend.apply_configurations`.

The ``Memory*`` classes keep everything in dicts. The CLI runs against
them, and tests use their counters to observe commits and notifications.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from platstate.domain.conversion import RogueValue

logger = logging.getLogger(__name__)

LogSink = Callable[[bool, str], None]
"""Receives ``(is_warning, text)`` from the routing backend."""


class BackendError(RuntimeError):
    """A backing subsystem failed to start."""


class DomainBackend(Protocol):
    """Verbs shared by both backing subsystems."""

    def declare_criterion_type(self, name: str, inclusive: bool) -> None: ...

    def declare_criterion_value(self, type_name: str, code: int, literal: str) -> None: ...

    def declare_criterion(self, name: str, type_name: str, default: int) -> None: ...

    def set_criterion(self, name: str, value: int) -> bool: ...

    def get_criterion(self, name: str) -> int: ...

    def set_parameter(self, path: str, value: RogueValue) -> None: ...

    def get_parameter(self, path: str) -> RogueValue | None: ...


class GeneralBackend(DomainBackend, Protocol):
    """General-purpose subsystem, owner of routing reconsideration."""

    def reconsider_routing(self, synchronous: bool) -> None: ...


class RoutingBackend(DomainBackend, Protocol):
    """Routing subsystem with an explicit start and atomic commit."""

    def apply_configurations(self) -> None: ...

    def start(self) -> None: ...

    def is_started(self) -> bool: ...

    def set_logger(self, sink: LogSink | None) -> None: ...


@dataclass
class _MemoryBackend:
    types: dict[str, bool] = field(default_factory=dict)
    type_values: dict[str, dict[str, int]] = field(default_factory=dict)
    criteria: dict[str, int] = field(default_factory=dict)
    parameters: dict[str, RogueValue] = field(default_factory=dict)

    def declare_criterion_type(self, name: str, inclusive: bool) -> None:
        self.types[name] = inclusive
        self.type_values.setdefault(name, {})

    def declare_criterion_value(self, type_name: str, code: int, literal: str) -> None:
        self.type_values.setdefault(type_name, {})[literal] = code

    def declare_criterion(self, name: str, type_name: str, default: int) -> None:
        self.criteria[name] = default

    def set_criterion(self, name: str, value: int) -> bool:
        changed = self.criteria.get(name) != value
        self.criteria[name] = value
        return changed

    def get_criterion(self, name: str) -> int:
        return self.criteria.get(name, 0)

    def set_parameter(self, path: str, value: RogueValue) -> None:
        self.parameters[path] = value

    def get_parameter(self, path: str) -> RogueValue | None:
        return self.parameters.get(path)


@dataclass
class MemoryGeneralBackend(_MemoryBackend):
    """General-purpose backend recording routing reconsideration requests."""

    reconsider_calls: list[bool] = field(default_factory=list)

    def reconsider_routing(self, synchronous: bool) -> None:
        logger.debug("Reconsider routing requested (synchronous=%s)", synchronous)
        self.reconsider_calls.append(synchronous)


@dataclass
class MemoryRoutingBackend(_MemoryBackend):
    """Routing backend with staged criteria and snapshot-on-apply.

    ``committed`` holds the criterion values as of the last
    :meth:`apply_configurations`; ``criteria`` holds staged values.
    """

    committed: dict[str, int] = field(default_factory=dict)
    apply_count: int = 0
    started: bool = False
    fail_start: str | None = None
    _sink: LogSink | None = field(default=None, repr=False)

    def apply_configurations(self) -> None:
        self.committed = dict(self.criteria)
        self.apply_count += 1
        self._log(False, f"configuration applied ({len(self.committed)} criteria)")

    def start(self) -> None:
        if self.fail_start is not None:
            self._log(True, self.fail_start)
            raise BackendError(self.fail_start)
        self.started = True
        self._log(False, "started")

    def is_started(self) -> bool:
        return self.started

    def set_logger(self, sink: LogSink | None) -> None:
        self._sink = sink

    def _log(self, is_warning: bool, text: str) -> None:
        if self._sink is not None:
            self._sink(is_warning, text)
