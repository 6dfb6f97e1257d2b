"""Tests for the glyph authoring format and dictionary lookups."""

import json
import logging

import pytest

from glyphs import (
    BUILTIN_PACK,
    GlyphDictionary,
    GlyphFormatError,
    parse_glyph,
    parse_instruction,
)
from stroke_engine import Arc, ArcDirection, Composite, Line, Points


class TestParseInstruction:
    """Tests for turning authored dicts into instructions."""

    def test_line(self) -> None:
        instr = parse_instruction({"type": "line", "start": [1, 2], "end": [3, 4]})

        assert instr == Line((1.0, 2.0), (3.0, 4.0))

    def test_arc_defaults_to_cw(self) -> None:
        instr = parse_instruction({"type": "arc", "cx": 50, "cy": 50, "rx": 10,
                                   "ry": 20, "start": 0, "end": 90})

        assert isinstance(instr, Arc)
        assert instr.direction is ArcDirection.CW
        assert instr.radius_y == 20.0

    def test_complex_parts(self) -> None:
        instr = parse_instruction({"type": "complex", "parts": [
            {"type": "line", "start": [0, 0], "end": [1, 0]},
            {"type": "arc", "cx": 0, "cy": 0, "rx": 1, "ry": 1,
             "start": 0, "end": 0, "direction": "ccw"},
        ]})

        assert isinstance(instr, Composite)
        assert len(instr.parts) == 2
        assert instr.parts[1].direction is ArcDirection.CCW

    def test_point_list_is_pre_expanded_stroke(self) -> None:
        instr = parse_instruction([[0, 0], [5, 5]])

        assert instr == Points(((0.0, 0.0), (5.0, 5.0)))

    @pytest.mark.parametrize("data", [
        {"type": "spline", "points": []},
        {"type": "line", "start": [0, 0]},
        {"type": "arc", "cx": 0, "cy": 0, "rx": 1, "ry": 1, "start": 0, "end": 1,
         "direction": "sideways"},
        {"type": "complex", "parts": []},
        {"type": "complex", "parts": [{"type": "nope"}]},
        {"type": "line", "start": "ab", "end": [1, 1]},
        "line",
        [],
    ])
    def test_malformed_strokes_raise(self, data) -> None:
        with pytest.raises(GlyphFormatError):
            parse_instruction(data)

    def test_glyph_mapping_with_strokes_key(self) -> None:
        glyph = parse_glyph({"strokes": [{"type": "line", "start": [0, 0], "end": [1, 1]}]})

        assert len(glyph) == 1

    def test_glyph_must_be_a_list(self) -> None:
        with pytest.raises(GlyphFormatError):
            parse_glyph({"paths": []})


class TestBuiltinPack:
    """Tests for the shipped alphabet."""

    def test_covers_both_cases(self) -> None:
        letters = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"

        assert set(letters) <= set(BUILTIN_PACK)

    def test_every_glyph_generates_valid_strokes(self) -> None:
        glyphs = GlyphDictionary()

        for char in BUILTIN_PACK:
            strokes = glyphs.strokes_for(char)
            assert strokes, char
            for stroke in strokes:
                assert len(stroke) >= 2, char
                assert stroke.min() > -5 and stroke.max() < 105, char

    def test_default_words_are_traceable(self) -> None:
        import config

        glyphs = GlyphDictionary()

        for word in config.DEFAULT_WORDS:
            assert all(char in glyphs for char in word), word


class TestGlyphDictionary:
    """Tests for lookups, packs and degradation on bad data."""

    def test_missing_character(self) -> None:
        glyphs = GlyphDictionary()

        assert glyphs.strokes_for("#") is None
        assert "#" not in glyphs

    def test_malformed_glyph_is_treated_as_missing(self, caplog) -> None:
        glyphs = GlyphDictionary(packs=[{"X": [{"type": "zigzag"}]}], include_builtin=False)

        with caplog.at_level(logging.WARNING, logger="glyphs"):
            assert glyphs.strokes_for("X") is None
        assert "malformed" in caplog.text

    def test_glyph_without_strokes_is_missing(self) -> None:
        glyphs = GlyphDictionary(packs=[{"X": []}], include_builtin=False)

        assert glyphs.strokes_for("X") is None

    def test_first_pack_wins(self) -> None:
        custom = {"A": [{"type": "line", "start": [0, 0], "end": [0, 8]}]}
        glyphs = GlyphDictionary(packs=[custom])

        strokes = glyphs.strokes_for("A")

        assert len(strokes) == 1
        assert len(strokes[0]) == 3

    def test_strokes_are_cached(self) -> None:
        glyphs = GlyphDictionary()

        assert glyphs.strokes_for("a") is glyphs.strokes_for("a")

    def test_load_pack_from_json(self, tmp_path) -> None:
        path = tmp_path / "pack.json"
        path.write_text(json.dumps({"packs": [
            {"items": {"A": [[[10, 10], [20, 20]]]}},
            {"items": {"ß": [{"type": "line", "start": [0, 0], "end": [4, 0]}]}},
        ]}), encoding="utf-8")
        glyphs = GlyphDictionary()

        assert glyphs.load_pack(str(path)) == 2

        assert glyphs.strokes_for("A")[0].tolist() == [[10.0, 10.0], [20.0, 20.0]]
        assert "ß" in glyphs
        assert "B" in glyphs  # built-in still searched

    def test_from_files_keeps_order(self, tmp_path) -> None:
        first = tmp_path / "first.json"
        second = tmp_path / "second.json"
        first.write_text(json.dumps({"Q": [[[1, 1], [2, 2]]]}), encoding="utf-8")
        second.write_text(json.dumps({"items": {"Q": [[[9, 9], [8, 8]]]}}), encoding="utf-8")

        glyphs = GlyphDictionary.from_files([str(first), str(second)])

        assert glyphs.strokes_for("Q")[0][0].tolist() == [1.0, 1.0]

    def test_missing_pack_file(self, tmp_path, caplog) -> None:
        glyphs = GlyphDictionary()

        with caplog.at_level(logging.WARNING, logger="glyphs"):
            assert glyphs.load_pack(str(tmp_path / "nope.json")) == 0
        assert "not found" in caplog.text

    def test_invalid_json(self, tmp_path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(GlyphFormatError):
            GlyphDictionary().load_pack(str(path))


class TestNonFiniteCoordinates:
    """Tests that NaN and infinite numbers are rejected as malformed."""

    @pytest.mark.parametrize("data", [
        {"type": "line", "start": [float("nan"), 0], "end": [20, 100]},
        {"type": "line", "start": [0, 0], "end": [float("inf"), 100]},
        {"type": "arc", "cx": 50, "cy": 50, "rx": float("inf"), "ry": 10,
         "start": 0, "end": 90},
        {"type": "arc", "cx": 50, "cy": 50, "rx": 10, "ry": 10,
         "start": float("nan"), "end": 90},
        [[0, 0], [float("-inf"), 5]],
    ])
    def test_non_finite_numbers_raise(self, data) -> None:
        with pytest.raises(GlyphFormatError):
            parse_instruction(data)

    def test_nan_in_json_pack_is_skipped(self, tmp_path, caplog) -> None:
        path = tmp_path / "nan.json"
        path.write_text('{"X": [{"type": "line", "start": [NaN, 0], "end": [20, 100]}]}',
                        encoding="utf-8")
        glyphs = GlyphDictionary(include_builtin=False)
        glyphs.load_pack(str(path))

        with caplog.at_level(logging.WARNING, logger="glyphs"):
            assert glyphs.strokes_for("X") is None
        assert "malformed" in caplog.text
