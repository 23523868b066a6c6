"""Tests for the GenDia section splitter and directive parsers."""

import pytest

from gendia.dsl.dsl_parser import (
    ConnectionDirective,
    LineStyle,
    Section,
    parse,
    parse_connection,
    parse_position,
    parse_shape,
    split_sections,
)
from gendia.errors import MalformedDirective

# ###############
# Sections
# ###############


class TestSections:
    def test_lines_before_any_marker_are_discarded(self) -> None:
        sections = split_sections("r{1}CENTER|A\nPOSITION_MAP\nr{2}CENTER|B")
        assert [line for _, line in sections[Section.POSITION]] == ["r{2}CENTER|B"]

    def test_blank_lines_and_surrounding_whitespace_are_dropped(self) -> None:
        sections = split_sections("  POSITION_MAP  \n\n   r{1}CENTER|A   \n\t\n")
        assert sections[Section.POSITION] == [(3, "r{1}CENTER|A")]

    def test_sections_may_come_in_any_order_and_repeat(self) -> None:
        text = "SHAPE_MAP\nA:circ\nPOSITION_MAP\nr{1}CENTER|A\nSHAPE_MAP\nB:rect"
        sections = split_sections(text)
        assert [line for _, line in sections[Section.SHAPE]] == ["A:circ", "B:rect"]
        assert len(sections[Section.POSITION]) == 1
        assert sections[Section.CONNECTION] == []

    def test_empty_text_parses_to_empty_lists(self) -> None:
        positions, connections, shapes = parse("")
        assert positions == () and connections == () and shapes == ()

    def test_parse_unpacks_to_three_lists(self) -> None:
        text = "POSITION_MAP\nr{5}CENTER|A\nCONNECTION_MAP\nCENTER:A|arrow\nSHAPE_MAP\nA:circ"
        positions, connections, shapes = parse(text)
        assert [p.new_node for p in positions] == ["A"]
        assert connections[0] == ConnectionDirective("CENTER", "A", "arrow", source="CENTER:A|arrow", lineno=4)
        assert shapes[0].shape_kind == "circ"

    def test_line_numbers_refer_to_raw_text(self) -> None:
        diagram = parse("\n\nPOSITION_MAP\n\nr{1}CENTER|A")
        assert diagram.positions[0].lineno == 5


# ###############
# Position Lines
# ###############


class TestPositionLines:
    def test_directional(self) -> None:
        d = parse_position("r{5}CENTER|A")
        assert d.direction == "r"
        assert d.angle is None
        assert d.distance == 5.0
        assert (d.known_node, d.new_node) == ("CENTER", "A")
        assert not d.is_angular

    def test_angular(self) -> None:
        d = parse_position("45deg{3}A|B")
        assert d.is_angular
        assert d.angle == 45.0
        assert d.direction is None
        assert d.distance == 3.0

    def test_negative_fractional_angle(self) -> None:
        assert parse_position("-30.5deg{2}A|B").angle == -30.5

    def test_tokens_are_trimmed(self) -> None:
        d = parse_position("r { 2.5 } A | B")
        assert (d.direction, d.distance, d.known_node, d.new_node) == ("r", 2.5, "A", "B")

    def test_unknown_direction_is_left_to_the_resolver(self) -> None:
        assert parse_position("x{1}A|B").direction == "x"

    def test_source_is_kept(self) -> None:
        assert parse_position("d{1}A|B", 7).source == "d{1}A|B"

    @pytest.mark.parametrize(
        "line",
        [
            "r5}A|B",
            "r{5A|B",
            "r{5}AB",
            "foo{bar}X|Y",
            "r{}A|B",
            "r{-1}A|B",
            "r{nan}A|B",
            "r{inf}A|B",
            "xdeg{1}A|B",
            "deg{1}A|B",
            "r{1}|B",
            "r{1}A|",
        ],
    )
    def test_malformed(self, line: str) -> None:
        with pytest.raises(MalformedDirective) as exc:
            parse_position(line)
        assert exc.value.directive == line
        assert line in str(exc.value)

    def test_malformed_line_aborts_parse(self) -> None:
        with pytest.raises(MalformedDirective, match=r"foo\{bar\}X\|Y"):
            parse("POSITION_MAP\nfoo{bar}X|Y")


# ###############
# Connection and Shape Lines
# ###############


class TestConnectionLines:
    def test_connection(self) -> None:
        c = parse_connection(" A : B | doublearrow ")
        assert (c.from_node, c.to_node, c.line_style) == ("A", "B", "doublearrow")
        assert c.line_style == LineStyle.DOUBLEARROW.value

    def test_unrecognized_style_parses(self) -> None:
        assert parse_connection("A:B|zigzag").line_style == "zigzag"

    def test_empty_style_is_allowed(self) -> None:
        assert parse_connection("A:B|").line_style == ""

    @pytest.mark.parametrize("line", ["A:B", "AB|arrow", ":B|arrow", "A:|arrow"])
    def test_malformed(self, line: str) -> None:
        with pytest.raises(MalformedDirective) as exc:
            parse_connection(line)
        assert line in str(exc.value)


class TestShapeLines:
    def test_shape(self) -> None:
        s = parse_shape("A : diamond")
        assert (s.node_name, s.shape_kind) == ("A", "diamond")

    def test_unknown_kind_parses(self) -> None:
        assert parse_shape("A:hexagon").shape_kind == "hexagon"

    @pytest.mark.parametrize("line", ["A circ", ":circ"])
    def test_malformed(self, line: str) -> None:
        with pytest.raises(MalformedDirective) as exc:
            parse(f"SHAPE_MAP\n{line}")
        assert exc.value.lineno == 2
        assert line in str(exc.value)
