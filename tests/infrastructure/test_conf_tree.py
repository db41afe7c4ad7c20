"""Tests for the hierarchical configuration parser."""

from __future__ import annotations

from pathlib import Path

import pytest

from platstate.infrastructure.conf_tree import ConfSyntaxError, load_conf_file, parse_conf


class TestParseConf:
    def test_leaves_and_groups(self) -> None:
        root = parse_conf(
            """\
            route {
                # a comment
                exclusive-criterion-type {
                    BandType narrow,wide
                }
                name "quoted value"
            }
            """
        )
        route = root.find("route")
        assert route is not None
        types = route.find("exclusive-criterion-type")
        assert [(n.name, n.value) for n in types] == [("BandType", "narrow,wide")]
        assert route.find("name").value == "quoted value"

    def test_same_line_group(self) -> None:
        root = parse_conf("Mute { type MuteType parameter mic }")
        mute = root.find("Mute")
        assert [(n.name, n.value) for n in mute] == [("type", "MuteType"), ("parameter", "mic")]

    def test_newline_is_whitespace(self) -> None:
        root = parse_conf("a\nb 1")
        assert [(n.name, n.value) for n in root] == [("a", "b"), ("1", "")]

    def test_empty_quoted_value(self) -> None:
        root = parse_conf('entry {\n  default ""\n  type ModeType\n}\n')
        entry = root.find("entry")
        assert [(n.name, n.value) for n in entry] == [("default", ""), ("type", "ModeType")]

    def test_empty_quoted_value_then_group(self) -> None:
        with pytest.raises(ConfSyntaxError, match="without a group name"):
            parse_conf('a "" { }')

    def test_find_missing(self) -> None:
        assert parse_conf("").find("route") is None

    def test_unbalanced_close(self) -> None:
        with pytest.raises(ConfSyntaxError) as excinfo:
            parse_conf("a {\n}\n}")
        assert excinfo.value.line == 3

    def test_unclosed_group(self) -> None:
        with pytest.raises(ConfSyntaxError, match="unclosed group 'a'"):
            parse_conf("a {\n b 1\n")

    def test_open_without_name(self) -> None:
        with pytest.raises(ConfSyntaxError):
            parse_conf("{ }")

    def test_open_after_value(self) -> None:
        with pytest.raises(ConfSyntaxError, match="without a group name"):
            parse_conf("a b { }")


class TestLoadConfFile:
    def test_missing_file(self, tmp_path: Path) -> None:
        assert load_conf_file(tmp_path / "missing.conf") is None

    def test_reads_file(self, tmp_path: Path) -> None:
        path = tmp_path / "x.conf"
        path.write_text("audio {\n}\n")
        root = load_conf_file(path)
        assert root is not None
        assert root.find("audio") is not None

    def test_undecodable_file(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.conf"
        path.write_bytes(b"audio {\n  name \xff\xfe\n}\n")
        assert load_conf_file(path) is None
