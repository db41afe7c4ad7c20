"""Tests for parameter bindings and key dispatch."""

from __future__ import annotations

import pytest

from platstate.domain.criteria import CriterionStore, CriterionTypeRegistry
from platstate.domain.parameters import CriterionParameter, ParameterRegistry, RogueParameter
from platstate.domain.types import Domain, RogueType
from platstate.infrastructure.backends import MemoryRoutingBackend


@pytest.fixture
def backend() -> MemoryRoutingBackend:
    return MemoryRoutingBackend()


@pytest.fixture
def registry(backend: MemoryRoutingBackend) -> ParameterRegistry:
    types = CriterionTypeRegistry(Domain.ROUTING, backend)
    types.declare_type("Mode", inclusive=False)
    for code, literal in enumerate(("normal", "ringtone", "in_call")):
        types.add_value("Mode", code, literal)
    store = CriterionStore(Domain.ROUTING, types, backend)

    registry = ParameterRegistry()
    registry.add(
        CriterionParameter(
            key="mode",
            name="AndroidMode",
            domain=Domain.ROUTING,
            mapping=[("0", "normal"), ("1", "ringtone"), ("2", "in_call")],
            criterion=store.declare("AndroidMode", "Mode"),
        )
    )
    registry.add(
        RogueParameter(
            key="ramp",
            name="/Route/ramp",
            domain=Domain.ROUTING,
            default="10",
            value_type=RogueType.UINT,
            store=backend,
        )
    )
    registry.add(
        RogueParameter(
            key="label",
            name="/Route/label",
            domain=Domain.ROUTING,
            value_type=RogueType.STRING,
            mapping=[("spk", "speaker")],
            store=backend,
        )
    )
    return registry


class TestClaim:
    def test_unmatched_key(self, registry: ParameterRegistry) -> None:
        claim = registry.claim("unknownkey", "1")
        assert claim.matched is False
        assert claim.changed == ()

    def test_mapped_literal(self, registry: ParameterRegistry) -> None:
        claim = registry.claim("mode", "2")
        assert claim.matched and claim.ok
        assert claim.changed == ("AndroidMode",)
        assert dict(registry.resolve(["mode"])) == {"mode": "2"}

    def test_domain_literal_verbatim(self, registry: ParameterRegistry) -> None:
        assert registry.claim("mode", "ringtone").ok
        assert dict(registry.resolve(["mode"])) == {"mode": "ringtone"}

    def test_same_value_is_no_change(self, registry: ParameterRegistry) -> None:
        registry.claim("mode", "in_call")
        claim = registry.claim("mode", "2")
        assert claim.ok
        assert claim.changed == ()

    def test_unknown_literal(self, registry: ParameterRegistry) -> None:
        claim = registry.claim("mode", "party")
        assert claim.matched is True
        assert claim.ok is False

    def test_rogue_forwarded(
        self, registry: ParameterRegistry, backend: MemoryRoutingBackend
    ) -> None:
        assert registry.claim("ramp", "0x20").ok
        assert backend.parameters["/Route/ramp"] == 32
        assert dict(registry.resolve(["ramp"])) == {"ramp": "0x20"}

    def test_rogue_conversion_failure(
        self, registry: ParameterRegistry, backend: MemoryRoutingBackend
    ) -> None:
        claim = registry.claim("ramp", "notanumber")
        assert claim == (True, False, ())
        assert "/Route/ramp" not in backend.parameters


class TestResolve:
    def test_filters_keys(self, registry: ParameterRegistry) -> None:
        registry.claim("label", "spk")
        assert registry.resolve(["label"]) == [("label", "spk")]

    def test_unset_rogue_is_skipped(self, registry: ParameterRegistry) -> None:
        assert registry.resolve(["ramp", "label"]) == []

    def test_value_changed_elsewhere_uses_mapping(
        self, registry: ParameterRegistry, backend: MemoryRoutingBackend
    ) -> None:
        registry.claim("label", "spk")
        backend.set_parameter("/Route/label", "speaker")
        assert registry.resolve(["label"]) == [("label", "spk")]
        backend.set_parameter("/Route/label", "headset")
        assert registry.resolve(["label"]) == [("label", "headset")]

    def test_default_mode_resolves_through_mapping(self, registry: ParameterRegistry) -> None:
        assert registry.resolve(["mode"]) == [("mode", "0")]


class TestApplyDefaults:
    def test_applies_and_reports(
        self, registry: ParameterRegistry, backend: MemoryRoutingBackend
    ) -> None:
        errors, changed = registry.apply_defaults()
        assert errors == 0
        assert changed == ["/Route/ramp"]
        assert backend.parameters["/Route/ramp"] == 10

    def test_second_run_changes_nothing(self, registry: ParameterRegistry) -> None:
        registry.apply_defaults()
        assert registry.apply_defaults() == (0, [])

    def test_keys_in_registration_order(self, registry: ParameterRegistry) -> None:
        assert registry.keys() == ["mode", "ramp", "label"]
        assert len(registry) == 3
