"""PlatformModel — the combined criterion/parameter state of both domains.

Owns one :class:`DomainState` per domain, the shared parameter registry and
the state-changed aggregator. Holds no lock; the engine serializes access.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from platstate.domain.criteria import Criterion, CriterionStore, CriterionTypeRegistry
from platstate.domain.parameters import CriterionParameter, ParameterRegistry, RogueParameter
from platstate.domain.types import Domain, RogueType
from platstate.services.aggregator import StateChangedAggregator

if TYPE_CHECKING:
    from platstate.infrastructure.backends import DomainBackend, GeneralBackend, RoutingBackend

logger = logging.getLogger(__name__)


@dataclass
class DomainState:
    """Type registry, criterion store and backend of one domain."""

    domain: Domain
    backend: DomainBackend
    types: CriterionTypeRegistry
    criteria: CriterionStore

    @classmethod
    def create(cls, domain: Domain, backend: DomainBackend) -> DomainState:
        types = CriterionTypeRegistry(domain, backend)
        return cls(
            domain=domain,
            backend=backend,
            types=types,
            criteria=CriterionStore(domain, types, backend),
        )


class PlatformModel:
    """Both domains plus parameters and the change aggregator."""

    def __init__(self, general: GeneralBackend, routing: RoutingBackend) -> None:
        self.general = DomainState.create(Domain.GENERAL, general)
        self.routing = DomainState.create(Domain.ROUTING, routing)
        self.parameters = ParameterRegistry()
        self.aggregator = StateChangedAggregator(self.routing.types, self.routing.criteria)

    def domain(self, domain: Domain) -> DomainState:
        return self.routing if domain is Domain.ROUTING else self.general

    # ------------------------------------------------------------------
    # Declarations (load time)
    # ------------------------------------------------------------------

    def declare_criterion_type(self, domain: Domain, name: str, inclusive: bool) -> None:
        self.domain(domain).types.declare_type(name, inclusive)

    def declare_criterion_value(
        self, domain: Domain, type_name: str, code: int, literal: str
    ) -> None:
        self.domain(domain).types.add_value(type_name, code, literal)

    def declare_criterion(
        self, domain: Domain, name: str, type_name: str, default_literal: str = ""
    ) -> Criterion:
        criterion = self.domain(domain).criteria.declare(name, type_name, default_literal)
        if domain is Domain.ROUTING:
            self.aggregator.track(name)
        return criterion

    def add_criterion_parameter(
        self,
        domain: Domain,
        *,
        key: str,
        name: str,
        type_name: str,
        default: str = "",
        mapping: list[tuple[str, str]] | None = None,
    ) -> CriterionParameter:
        param = CriterionParameter(
            key=key, name=name, domain=domain, default=default, mapping=list(mapping or [])
        )
        param.criterion = self.declare_criterion(domain, name, type_name, param.to_domain(default))
        self.parameters.add(param)
        return param

    def add_rogue_parameter(
        self,
        domain: Domain,
        *,
        key: str,
        name: str,
        value_type: RogueType,
        default: str = "",
        mapping: list[tuple[str, str]] | None = None,
    ) -> RogueParameter:
        param = RogueParameter(
            key=key,
            name=name,
            domain=domain,
            default=default,
            mapping=list(mapping or []),
            value_type=value_type,
            store=self.domain(domain).backend,
        )
        self.parameters.add(param)
        return param

    # ------------------------------------------------------------------
    # Values (runtime)
    # ------------------------------------------------------------------

    def lookup(self, name: str) -> Criterion | None:
        """Find criterion *name*, routing domain first."""
        return self.routing.criteria.lookup(name) or self.general.criteria.lookup(name)

    def commit(self) -> list[str]:
        """Publish every criterion to both backends and reset the aggregator.

        The routing backend receives all criteria, the aggregator mask
        included, before one ``apply_configurations`` call so that routing
        never observes a partially updated set. Returns the changed names.
        """
        routing = self.routing.backend
        for criterion in self.routing.criteria:
            routing.set_criterion(criterion.name, criterion.value)
        routing.apply_configurations()

        for criterion in self.general.criteria:
            self.general.backend.set_criterion(criterion.name, criterion.value)

        changed = self.aggregator.clear()
        logger.debug("Committed platform state, changed: %s", ", ".join(changed) or "-")
        return changed
