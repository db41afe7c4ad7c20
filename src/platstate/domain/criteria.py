"""Criterion types, criteria, and their per-domain registries.

A :class:`CriterionType` is a named enumeration of literals, either
inclusive (bitmask, any combination of values) or exclusive (one value).
A :class:`Criterion` is a named state variable bound to one type.

Registries are generic over :class:`DomainOps`: every declaration is
mirrored to the backing subsystem of the domain so both sides share the
same vocabulary. Values are *not* mirrored; committing is the engine's job.

INVARIANT: names are unique within one domain. Violations raise
:class:`ConfigurationError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from platstate.domain.types import ConfigurationError, Domain

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)

INCLUSIVE_SEPARATOR = "|"


class DomainOps(Protocol):
    """Declaration verbs a backing subsystem must accept."""

    def declare_criterion_type(self, name: str, inclusive: bool) -> None: ...

    def declare_criterion_value(self, type_name: str, code: int, literal: str) -> None: ...

    def declare_criterion(self, name: str, type_name: str, default: int) -> None: ...


@dataclass
class CriterionType:
    """Named enumeration mapping literals to numeric codes."""

    name: str
    inclusive: bool
    _codes: dict[str, int] = field(default_factory=dict, repr=False)

    @property
    def values(self) -> dict[str, int]:
        """Declared ``literal -> code`` pairs, in declaration order."""
        return dict(self._codes)

    def add_value(self, code: int, literal: str) -> None:
        """Declare *literal* with *code*. Several literals may share a code."""
        if literal in self._codes:
            msg = f"Literal {literal!r} already declared for criterion type {self.name!r}"
            raise ConfigurationError(msg)
        self._codes[literal] = code

    def has_literal(self, literal: str) -> bool:
        return literal in self._codes

    def encode(self, literal: str) -> int | None:
        """Return the code of *literal*, or None when it is not declared.

        Inclusive types also accept ``a|b`` combinations and the empty literal.
        """
        if literal in self._codes:
            return self._codes[literal]
        if not self.inclusive:
            return None
        code = 0
        for part in literal.split(INCLUSIVE_SEPARATOR):
            part = part.strip()
            if not part:
                continue
            if part not in self._codes:
                return None
            code |= self._codes[part]
        return code

    def decode(self, code: int) -> str | None:
        """Return the literal for *code*, or None when it is not representable."""
        for literal, value in self._codes.items():
            if value == code:
                return literal
        if not self.inclusive:
            return None
        literals: list[str] = []
        covered = 0
        for literal, value in self._codes.items():
            if value and value & code == value and value & ~covered:
                literals.append(literal)
                covered |= value
        if covered != code:
            return None
        return INCLUSIVE_SEPARATOR.join(literals)


@dataclass
class Criterion:
    """Named state variable of one domain."""

    name: str
    type: CriterionType
    domain: Domain
    value: int = 0

    def set(self, value: int) -> bool:
        """Store *value*; return whether it differs from the previous one."""
        if value == self.value:
            return False
        self.value = value
        return True

    @property
    def literal(self) -> str | None:
        return self.type.decode(self.value)


class CriterionTypeRegistry:
    """Per-domain table of criterion types."""

    def __init__(self, domain: Domain, ops: DomainOps) -> None:
        self.domain = domain
        self._ops = ops
        self._types: dict[str, CriterionType] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __len__(self) -> int:
        return len(self._types)

    def names(self) -> list[str]:
        return list(self._types)

    def declare_type(self, name: str, inclusive: bool) -> CriterionType:
        if name in self._types:
            msg = f"Criterion type {name!r} already declared in domain {self.domain}"
            raise ConfigurationError(msg)
        logger.debug(
            "Declaring %s criterion type %s in domain %s",
            "inclusive" if inclusive else "exclusive",
            name,
            self.domain,
        )
        criterion_type = CriterionType(name=name, inclusive=inclusive)
        self._types[name] = criterion_type
        self._ops.declare_criterion_type(name, inclusive)
        return criterion_type

    def add_value(self, type_name: str, code: int, literal: str) -> None:
        criterion_type = self.get(type_name)
        logger.debug("Adding value (%d, %s) to criterion type %s", code, literal, type_name)
        criterion_type.add_value(code, literal)
        self._ops.declare_criterion_value(type_name, code, literal)

    def get(self, name: str) -> CriterionType:
        """Return the type named *name*.

        Raises:
            ConfigurationError: If no such type is declared in this domain.
        """
        try:
            return self._types[name]
        except KeyError:
            msg = f"Criterion type {name!r} not declared in domain {self.domain}"
            raise ConfigurationError(msg) from None

    def encode(self, type_name: str, literal: str) -> int | None:
        code = self.get(type_name).encode(literal)
        if code is None:
            logger.warning("Unknown literal %r for criterion type %s", literal, type_name)
        return code

    def decode(self, type_name: str, code: int) -> str | None:
        return self.get(type_name).decode(code)


class CriterionStore:
    """Per-domain table of criteria holding their current values."""

    def __init__(self, domain: Domain, types: CriterionTypeRegistry, ops: DomainOps) -> None:
        self.domain = domain
        self._types = types
        self._ops = ops
        self._criteria: dict[str, Criterion] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._criteria

    def __len__(self) -> int:
        return len(self._criteria)

    def __iter__(self) -> Iterator[Criterion]:
        return iter(self._criteria.values())

    def declare(self, name: str, type_name: str, default_literal: str = "") -> Criterion:
        if name in self._criteria:
            msg = f"Criterion {name!r} already declared in domain {self.domain}"
            raise ConfigurationError(msg)
        criterion_type = self._types.get(type_name)

        default = 0
        if default_literal:
            code = criterion_type.encode(default_literal)
            if code is None:
                logger.warning(
                    "Default %r of criterion %s is not a value of %s, using 0",
                    default_literal,
                    name,
                    type_name,
                )
            else:
                default = code

        criterion = Criterion(name=name, type=criterion_type, domain=self.domain, value=default)
        self._criteria[name] = criterion
        self._ops.declare_criterion(name, type_name, default)
        logger.debug("Declared criterion %s (%s) in domain %s", name, type_name, self.domain)
        return criterion

    def lookup(self, name: str) -> Criterion | None:
        return self._criteria.get(name)

    def get(self, name: str) -> int:
        """Return the current value of criterion *name*.

        Raises:
            KeyError: If no such criterion exists in this domain.
        """
        return self._criteria[name].value

    def set(self, name: str, value: int) -> bool:
        """Store *value*; return whether it changed. Raises KeyError if unknown."""
        return self._criteria[name].set(value)
