"""Tests for the value-list and mapping-table parsers."""

from __future__ import annotations

import pytest

from platstate.domain.mapping import (
    MappingSyntaxError,
    TypeValue,
    parse_code,
    parse_mapping_table,
    parse_type_values,
)
from platstate.domain.types import ConfigurationError


def _codes(values: list[TypeValue]) -> dict[str, int]:
    return {v.literal: v.code for v in values}


class TestImplicitCodes:
    def test_inclusive_powers_of_two(self) -> None:
        assert _codes(parse_type_values("a,b,c", inclusive=True)) == {"a": 1, "b": 2, "c": 4}

    def test_inclusive_codes_disjoint(self) -> None:
        codes = [v.code for v in parse_type_values("p,q,r,s,t", inclusive=True)]
        for i, code in enumerate(codes):
            assert code == 1 << i
        assert len(set(codes)) == len(codes)

    def test_exclusive_counts_from_zero(self) -> None:
        codes = [v.code for v in parse_type_values("a,b,c,d", inclusive=False)]
        assert codes == [0, 1, 2, 3]

    def test_whitespace_and_empty_entries(self) -> None:
        values = parse_type_values(" a , ,b,", inclusive=False)
        assert _codes(values) == {"a": 0, "b": 1}


class TestExplicitCodes:
    def test_explicit_does_not_advance_counter(self) -> None:
        values = parse_type_values("x:0x10,y", inclusive=False)
        assert _codes(values) == {"x": 16, "y": 0}
        assert [v.explicit for v in values] == [True, False]

    def test_interleaved_inclusive(self) -> None:
        values = parse_type_values("a,b:0x100,c", inclusive=True)
        assert _codes(values) == {"a": 1, "b": 256, "c": 2}

    def test_negative_decimal_wraps(self) -> None:
        assert _codes(parse_type_values("all:-1", inclusive=True)) == {"all": 0xFFFFFFFF}

    def test_bad_code_carries_span(self) -> None:
        with pytest.raises(MappingSyntaxError) as excinfo:
            parse_type_values("a,b:zz", inclusive=False)
        assert excinfo.value.span == (2, 6)
        assert isinstance(excinfo.value, ConfigurationError)

    def test_missing_code(self) -> None:
        with pytest.raises(MappingSyntaxError):
            parse_type_values("a:", inclusive=False)


class TestParseCode:
    @pytest.mark.parametrize(
        ("token", "expected"),
        [("0", 0), ("42", 42), ("0x10", 16), ("0XfF", 255), ("-2", 0xFFFFFFFE)],
    )
    def test_valid(self, token: str, expected: int) -> None:
        assert parse_code(token) == expected

    @pytest.mark.parametrize("token", ["", "abc", "0x", "0x100000000", "2147483648", "1.5"])
    def test_invalid(self, token: str) -> None:
        with pytest.raises(ValueError):
            parse_code(token)


class TestMappingTable:
    def test_pairs_in_order(self) -> None:
        assert parse_mapping_table("0:normal, 2:in_call") == [("0", "normal"), ("2", "in_call")]

    def test_empty(self) -> None:
        assert parse_mapping_table("") == []

    def test_missing_colon(self) -> None:
        with pytest.raises(MappingSyntaxError) as excinfo:
            parse_mapping_table("0:normal,oops")
        assert excinfo.value.span == (9, 13)

    def test_too_many_colons(self) -> None:
        with pytest.raises(MappingSyntaxError):
            parse_mapping_table("a:b:c")
