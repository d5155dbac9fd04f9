"""
Tests for common/source_location.py - positions and offset conversion.
"""

from mts_language_server.src.common.source_location import LineIndex, Position, Range, utf16_length


class TestPosition:
    def test_ordering(self):
        assert Position(0, 9) < Position(1, 0)
        assert Position(2, 3) < Position(2, 4)

    def test_str_is_one_based(self):
        assert str(Position(0, 4)) == "1:5"


class TestRange:
    def test_contains_is_inclusive(self):
        range_ = Range.on_line(1, 4, 3)
        assert range_.contains(Position(1, 4))
        assert range_.contains(Position(1, 7))
        assert not range_.contains(Position(1, 8))
        assert not range_.contains(Position(0, 5))


class TestUtf16:
    def test_ascii(self):
        assert utf16_length("abc") == 3

    def test_astral_plane_counts_twice(self):
        assert utf16_length("😀") == 2
        assert utf16_length("é") == 1


class TestLineIndex:
    """Tests for LineIndex offset/position conversion."""

    def test_position_at(self):
        index = LineIndex("ab\ncd\n")
        assert index.position_at(0) == Position(0, 0)
        assert index.position_at(4) == Position(1, 1)
        assert index.position_at(6) == Position(2, 0)
        assert index.line_count == 3

    def test_position_at_clamps(self):
        index = LineIndex("ab")
        assert index.position_at(-5) == Position(0, 0)
        assert index.position_at(99) == Position(0, 2)

    def test_utf16_columns(self):
        index = LineIndex("é😀[h: x]")
        assert index.position_at(2) == Position(0, 3)
        assert index.offset_at(Position(0, 3)) == 2

    def test_offset_at_clamps(self):
        index = LineIndex("ab\ncd")
        assert index.offset_at(Position(-1, 0)) == 0
        assert index.offset_at(Position(7, 0)) == 5
        assert index.offset_at(Position(0, 50)) == 2

    def test_range_of(self):
        index = LineIndex("x\n[h: y]")
        assert index.range_of(2, 4) == Range(Position(1, 0), Position(1, 2))

    def test_line_text(self):
        index = LineIndex("first\r\nsecond")
        assert index.line_text(0) == "first"
        assert index.line_text(1) == "second"
        assert index.line_text(2) == ""
