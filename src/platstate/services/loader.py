"""ConfigurationLoader — populates a PlatformModel from the criterion tree.

Every domain loads the shared ``common`` node first, then its own node
(``audio`` or ``route``). Within a node the sections load in a fixed order
so that types always exist before the criteria that reference them:

1. ``inclusive-criterion-type``
2. ``exclusive-criterion-type``
3. ``criterion``
4. ``rogue-parameter``

Missing files and missing sections are reported and skipped. Schema
defects raise :class:`~platstate.domain.types.ConfigurationError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from platstate.domain.mapping import parse_mapping_table, parse_type_values
from platstate.domain.types import ConfigurationError, Domain, RogueType
from platstate.infrastructure.conf_tree import ConfNode, load_conf_file

if TYPE_CHECKING:
    from pathlib import Path

    from platstate.services.state import PlatformModel

logger = logging.getLogger(__name__)

COMMON_TAG = "common"
INCLUSIVE_CRITERION_TYPE_TAG = "inclusive-criterion-type"
EXCLUSIVE_CRITERION_TYPE_TAG = "exclusive-criterion-type"
CRITERION_TAG = "criterion"
ROGUE_PARAMETER_TAG = "rogue-parameter"

PATH_TAG = "path"
DEFAULT_TAG = "default"
PARAMETER_TAG = "parameter"
MAPPING_TAG = "mapping"
TYPE_TAG = "type"


@dataclass
class _Entry:
    """Children of a criterion or rogue-parameter node."""

    path: str = ""
    default: str = ""
    key: str = ""
    type_name: str = ""
    mapping: list[tuple[str, str]] = field(default_factory=list)

    @classmethod
    def parse(cls, node: ConfNode) -> _Entry:
        entry = cls()
        for child in node:
            if child.name == PATH_TAG:
                entry.path = child.value
            elif child.name == DEFAULT_TAG:
                entry.default = child.value
            elif child.name == PARAMETER_TAG:
                entry.key = child.value
            elif child.name == MAPPING_TAG:
                entry.mapping = parse_mapping_table(child.value)
            elif child.name == TYPE_TAG:
                entry.type_name = child.value
            else:
                logger.error("Unrecognized %s %s node in %s", child.name, child.value, node.name)
        logger.debug(
            "%s: path=%s key=%s default=%s type=%s",
            node.name,
            entry.path,
            entry.key,
            entry.default,
            entry.type_name,
        )
        return entry


class ConfigurationLoader:
    """Two-pass loader for both domains of a :class:`PlatformModel`."""

    def __init__(self, model: PlatformModel) -> None:
        self._model = model

    def load_file(self, path: Path) -> bool:
        """Load *path*. Returns False when the file cannot be read."""
        root = load_conf_file(path)
        if root is None:
            return False
        self.load_tree(root)
        logger.debug("Loaded criterion configuration %s", path)
        return True

    def load_tree(self, root: ConfNode) -> None:
        for domain in (Domain.GENERAL, Domain.ROUTING):
            self._load_domain(root, domain)

    def _load_domain(self, root: ConfNode, domain: Domain) -> None:
        for tag in (COMMON_TAG, domain.value):
            node = root.find(tag)
            if node is None:
                continue
            logger.debug("Loading %s configuration for domain %s", tag, domain)
            self._load_section(node, domain)

    def _load_section(self, node: ConfNode, domain: Domain) -> None:
        inclusive_types = node.find(INCLUSIVE_CRITERION_TYPE_TAG)
        self._load_criterion_types(inclusive_types, domain, inclusive=True)
        exclusive_types = node.find(EXCLUSIVE_CRITERION_TYPE_TAG)
        self._load_criterion_types(exclusive_types, domain, inclusive=False)

        criteria = node.find(CRITERION_TAG)
        if criteria is None:
            logger.warning("No criteria found in %s for domain %s", node.name, domain)
        else:
            for child in criteria:
                self._load_criterion(child, domain)

        rogues = node.find(ROGUE_PARAMETER_TAG)
        if rogues is None:
            logger.warning("No rogue parameters found in %s for domain %s", node.name, domain)
        else:
            for child in rogues:
                self._load_rogue_parameter(child, domain)

    def _load_criterion_types(
        self, node: ConfNode | None, domain: Domain, *, inclusive: bool
    ) -> None:
        if node is None:
            return
        for type_node in node:
            self._model.declare_criterion_type(domain, type_node.name, inclusive)
            for value in parse_type_values(type_node.value, inclusive=inclusive):
                self._model.declare_criterion_value(
                    domain, type_node.name, value.code, value.literal
                )

    def _load_criterion(self, node: ConfNode, domain: Domain) -> None:
        entry = _Entry.parse(node)
        if entry.key:
            self._model.add_criterion_parameter(
                domain,
                key=entry.key,
                name=node.name,
                type_name=entry.type_name,
                default=entry.default,
                mapping=entry.mapping,
            )
        else:
            self._model.declare_criterion(domain, node.name, entry.type_name, entry.default)

    def _load_rogue_parameter(self, node: ConfNode, domain: Domain) -> None:
        entry = _Entry.parse(node)
        if not entry.key:
            msg = f"Rogue parameter {node.name!r} not associated to any parameter key"
            raise ConfigurationError(msg)
        try:
            value_type = RogueType(entry.type_name)
        except ValueError:
            logger.error("Rogue parameter %s: type %r not supported", node.name, entry.type_name)
            return
        self._model.add_rogue_parameter(
            domain,
            key=entry.key,
            name=entry.path or node.name,
            value_type=value_type,
            default=entry.default,
            mapping=entry.mapping,
        )
