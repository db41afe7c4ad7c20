"""Parameters — bindings between configuration keys and domain state.

Two variants form the :data:`Parameter` union:

- :class:`RogueParameter` forwards a typed raw value (uint, string or
  double) to a path of its domain's raw key/value store.
- :class:`CriterionParameter` translates the literal through its criterion
  type and updates a :class:`~platstate.domain.criteria.Criterion`.

Both carry an optional mapping table translating configuration literals
(``"0"``) to domain literals (``"normal"``). The :class:`ParameterRegistry`
dispatches incoming pairs to every parameter bound to the key.

INVARIANT: a failed conversion is counted and never aborts sibling pairs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, NamedTuple, Protocol

from platstate.domain.conversion import RogueValue, format_value, parse_value
from platstate.domain.types import Domain, RogueType

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from platstate.domain.criteria import Criterion

logger = logging.getLogger(__name__)


class RawStore(Protocol):
    """Raw key/value store of a domain backend."""

    def set_parameter(self, path: str, value: RogueValue) -> None: ...

    def get_parameter(self, path: str) -> RogueValue | None: ...


@dataclass
class _Binding:
    key: str
    name: str
    domain: Domain
    default: str = ""
    mapping: list[tuple[str, str]] = field(default_factory=list)
    last_literal: str | None = field(default=None, compare=False)

    def to_domain(self, literal: str) -> str:
        """Translate a configuration literal through the mapping table."""
        for config_value, domain_value in self.mapping:
            if config_value == literal:
                return domain_value
        return literal

    def to_config(self, domain_literal: str) -> str:
        """Reverse translation; the first matching mapping entry wins."""
        for config_value, domain_value in self.mapping:
            if domain_value == domain_literal:
                return config_value
        return domain_literal


@dataclass
class RogueParameter(_Binding):
    """Typed raw value forwarded to the domain raw store at ``name``."""

    value_type: RogueType = RogueType.STRING
    store: RawStore | None = field(default=None, repr=False, compare=False)

    def _require_store(self) -> RawStore:
        if self.store is None:
            msg = f"Rogue parameter {self.name!r} has no raw store"
            raise RuntimeError(msg)
        return self.store

    def current(self) -> RogueValue | None:
        return self._require_store().get_parameter(self.name)


@dataclass
class CriterionParameter(_Binding):
    """Literal translated through the criterion type into ``criterion``."""

    criterion: Criterion | None = field(default=None, repr=False, compare=False)

    def _require_criterion(self) -> Criterion:
        if self.criterion is None:
            msg = f"Criterion parameter {self.name!r} is not bound to a criterion"
            raise RuntimeError(msg)
        return self.criterion


Parameter = RogueParameter | CriterionParameter


class Claim(NamedTuple):
    """Outcome of dispatching one key/value pair."""

    matched: bool
    ok: bool
    changed: tuple[str, ...] = ()


def _apply(param: Parameter, literal: str) -> tuple[bool, bool]:
    """Apply *literal* to *param*. Returns ``(ok, changed)``."""
    domain_literal = param.to_domain(literal)

    if isinstance(param, RogueParameter):
        try:
            value = parse_value(param.value_type, domain_literal)
        except ValueError:
            logger.warning(
                "Cannot convert %r to %s for parameter %s",
                domain_literal,
                param.value_type,
                param.key,
            )
            return False, False
        store = param._require_store()
        changed = store.get_parameter(param.name) != value
        if changed:
            store.set_parameter(param.name, value)
        param.last_literal = literal
        return True, changed

    criterion = param._require_criterion()
    code = criterion.type.encode(domain_literal)
    if code is None:
        logger.warning(
            "Unknown literal %r for criterion %s (type %s)",
            domain_literal,
            criterion.name,
            criterion.type.name,
        )
        return False, False
    param.last_literal = literal
    return True, criterion.set(code)


def _resolve(param: Parameter) -> str | None:
    """Current value of *param* as a configuration literal, or None."""
    if isinstance(param, RogueParameter):
        value = param.current()
        if value is None:
            return None
        if param.last_literal is not None:
            try:
                last = parse_value(param.value_type, param.to_domain(param.last_literal))
            except ValueError:
                last = None
            if last == value:
                return param.last_literal
        return param.to_config(format_value(param.value_type, value))

    criterion = param._require_criterion()
    if param.last_literal is not None:
        if criterion.type.encode(param.to_domain(param.last_literal)) == criterion.value:
            return param.last_literal
    domain_literal = criterion.literal
    if domain_literal is None:
        logger.warning(
            "Value %d of criterion %s has no literal in type %s",
            criterion.value,
            criterion.name,
            criterion.type.name,
        )
        return None
    return param.to_config(domain_literal)


class ParameterRegistry:
    """Ordered list of parameters, in registration order.

    Parameters are never removed once registered.
    """

    def __init__(self) -> None:
        self._params: list[Parameter] = []

    def __iter__(self) -> Iterator[Parameter]:
        return iter(self._params)

    def __len__(self) -> int:
        return len(self._params)

    def add(self, param: Parameter) -> None:
        logger.debug("Registering %s %s for key %s", type(param).__name__, param.name, param.key)
        self._params.append(param)

    def keys(self) -> list[str]:
        """Distinct configuration keys, in registration order."""
        return list(dict.fromkeys(p.key for p in self._params))

    def claim(self, key: str, literal: str) -> Claim:
        """Dispatch ``key=literal`` to every parameter bound to *key*."""
        matched = False
        ok = True
        changed: list[str] = []
        for param in self._params:
            if param.key != key:
                continue
            matched = True
            applied, has_changed = _apply(param, literal)
            ok = ok and applied
            if has_changed:
                changed.append(param.name)
        return Claim(matched=matched, ok=ok, changed=tuple(changed))

    def resolve(self, keys: Iterable[str]) -> list[tuple[str, str]]:
        """Return ``(key, literal)`` for every parameter whose key is in *keys*."""
        wanted = set(keys)
        result: list[tuple[str, str]] = []
        for param in self._params:
            if param.key not in wanted:
                continue
            literal = _resolve(param)
            if literal is not None:
                result.append((param.key, literal))
        return result

    def apply_defaults(self) -> tuple[int, list[str]]:
        """Apply every parameter's default literal.

        Returns ``(error_count, changed_names)``.
        """
        errors = 0
        changed: list[str] = []
        for param in self._params:
            if not param.default:
                continue
            applied, has_changed = _apply(param, param.default)
            if not applied:
                errors += 1
            if has_changed:
                changed.append(param.name)
        return errors, changed
