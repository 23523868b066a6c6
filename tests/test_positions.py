import math

import pytest

from gendia.dsl.dsl_parser import parse_position
from gendia.errors import DuplicateNode, InvalidDirection, UnknownAnchor
from gendia.geometry.positions import GRID_UNIT, ORIGIN, Point, offset_for, resolve, to_grid


def _resolve(*lines, origin=Point(0.0, 0.0)):
    return resolve([parse_position(line, i) for i, line in enumerate(lines, start=1)], origin=origin)


class TestDirectional:
    @pytest.mark.parametrize(
        "mode, expected",
        [("l", (-1, 0)), ("r", (1, 0)), ("u", (0, -1)), ("d", (0, 1))],
    )
    @pytest.mark.parametrize("distance", [0, 1, 2.5, 7])
    def test_axis_aligned_offsets(self, mode, expected, distance) -> None:
        positions = _resolve("r{3}CENTER|A", f"{mode}{{{distance}}}A|B", origin=Point(10.0, -4.0))
        a, b = positions["A"], positions["B"]
        assert a == Point(10.0 + 60.0, -4.0)
        assert b.x == pytest.approx(a.x + expected[0] * GRID_UNIT * distance)
        assert b.y == pytest.approx(a.y + expected[1] * GRID_UNIT * distance)

    def test_chain(self) -> None:
        positions = _resolve("r{5}CENTER|A", "d{2}A|B", "l{5}B|C")
        assert positions["C"] == Point(0.0, 40.0)

    def test_invalid_direction(self) -> None:
        with pytest.raises(InvalidDirection) as exc:
            _resolve("x{1}CENTER|A")
        assert exc.value.directive == "x{1}CENTER|A"
        assert "x{1}CENTER|A" in str(exc.value)

    def test_direction_is_case_sensitive(self) -> None:
        with pytest.raises(InvalidDirection):
            _resolve("R{1}CENTER|A")


class TestAngular:
    @pytest.mark.parametrize("degrees", [0, 30, 45, 90, 135, 180, 225, 270, 359.5, -60, 720])
    def test_distance_and_bearing(self, degrees) -> None:
        positions = _resolve(f"{degrees}deg{{4}}CENTER|B", origin=Point(100.0, 100.0))
        dx = positions["B"].x - 100.0
        dy = positions["B"].y - 100.0
        assert math.hypot(dx, dy) == pytest.approx(4 * GRID_UNIT)
        diff = (math.atan2(dy, dx) - math.radians(degrees)) % (2 * math.pi)
        assert min(diff, 2 * math.pi - diff) == pytest.approx(0.0, abs=1e-9)

    def test_ninety_degrees_points_down(self) -> None:
        b = _resolve("90deg{1}CENTER|B")["B"]
        assert b.x == pytest.approx(0.0, abs=1e-9)
        assert b.y == pytest.approx(20.0)

    def test_offset_for_angular(self) -> None:
        off = offset_for(parse_position("180deg{2}A|B"))
        assert off.x == pytest.approx(-40.0)
        assert off.y == pytest.approx(0.0, abs=1e-9)


class TestAnchors:
    def test_origin_is_always_seeded(self) -> None:
        assert resolve([]) == {ORIGIN: Point(0.0, 0.0)}
        assert resolve([], origin=Point(400, 300))[ORIGIN] == Point(400, 300)

    def test_unknown_anchor(self) -> None:
        with pytest.raises(UnknownAnchor) as exc:
            _resolve("r{1}Nowhere|A")
        assert "r{1}Nowhere|A" in str(exc.value)
        assert exc.value.lineno == 1

    def test_forward_reference_is_not_deferred(self) -> None:
        with pytest.raises(UnknownAnchor):
            _resolve("r{1}A|B", "r{1}CENTER|A")

    def test_self_reference(self) -> None:
        with pytest.raises(UnknownAnchor):
            _resolve("r{1}A|A")

    def test_duplicate_node(self) -> None:
        with pytest.raises(DuplicateNode) as exc:
            _resolve("r{1}CENTER|A", "d{1}CENTER|A")
        assert "d{1}CENTER|A" in str(exc.value)

    def test_origin_cannot_be_redeclared(self) -> None:
        with pytest.raises(DuplicateNode):
            _resolve("r{1}CENTER|CENTER")

    def test_each_call_builds_a_fresh_map(self) -> None:
        first = _resolve("r{1}CENTER|A")
        second = _resolve("r{1}CENTER|B")
        assert "A" not in second
        assert "B" not in first

    def test_declaration_order_is_kept(self) -> None:
        positions = _resolve("r{1}CENTER|Z", "r{1}Z|A", "u{1}A|M")
        assert list(positions) == [ORIGIN, "Z", "A", "M"]


def test_to_grid() -> None:
    assert to_grid(Point(460.0, 260.0), Point(400.0, 300.0)) == Point(3.0, -2.0)
