"""
Glyph Dictionary
- Parses authored letter packs (line / arc / complex stroke instructions)
- Ships a built-in pack for A-Z and a-z
- Generates and caches sample strokes per character
"""

import json
import logging
import math
import os
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

import config
from stroke_engine import (
    Arc,
    ArcDirection,
    Composite,
    Line,
    Points,
    StrokeInstruction,
    generate,
)

logger = logging.getLogger(__name__)


class GlyphFormatError(ValueError):
    """Authored glyph data that cannot be turned into instructions."""


# ===============================
# Authoring format
# ===============================

def _line(x1, y1, x2, y2):
    return {"type": "line", "start": [x1, y1], "end": [x2, y2]}


def _arc(cx, cy, rx, ry, start, end, direction="cw"):
    return {"type": "arc", "cx": cx, "cy": cy, "rx": rx, "ry": ry,
            "start": start, "end": end, "direction": direction}


def _complex(*parts):
    return {"type": "complex", "parts": list(parts)}


def parse_instruction(data: Any) -> StrokeInstruction:
    """Turn one authored stroke (dict, or list of [x, y] pairs) into an instruction."""
    if isinstance(data, (list, tuple)):
        try:
            return Points(tuple(_pair(p[:2]) for p in data))
        except (TypeError, ValueError, IndexError) as e:
            raise GlyphFormatError(f"bad point list: {e}") from e

    if not isinstance(data, dict):
        raise GlyphFormatError(f"stroke must be a mapping, got {type(data).__name__}")

    kind = data.get("type")
    try:
        if kind == "line":
            return Line(_pair(data["start"]), _pair(data["end"]))
        if kind == "arc":
            return Arc(
                center=(_number(data["cx"]), _number(data["cy"])),
                radius_x=_number(data["rx"]),
                radius_y=_number(data["ry"]),
                start_angle=_number(data["start"]),
                end_angle=_number(data["end"]),
                direction=ArcDirection(data.get("direction", "cw")),
            )
        if kind in ("complex", "composite"):
            return Composite(tuple(parse_instruction(p) for p in data["parts"]))
        if kind == "points":
            return parse_instruction(data["points"])
    except KeyError as e:
        raise GlyphFormatError(f"{kind} stroke is missing {e}") from e
    except (TypeError, ValueError) as e:
        if isinstance(e, GlyphFormatError):
            raise
        raise GlyphFormatError(f"bad {kind} stroke: {e}") from e

    raise GlyphFormatError(f"unknown stroke type: {kind!r}")


def _number(value) -> float:
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"non-finite coordinate {value!r}")
    return number


def _pair(value) -> tuple:
    x, y = value
    return _number(x), _number(y)


def parse_glyph(entry: Any) -> List[StrokeInstruction]:
    """A glyph is a list of strokes, or a mapping with a 'strokes' list."""
    if isinstance(entry, dict):
        if "strokes" not in entry:
            raise GlyphFormatError("glyph mapping has no 'strokes'")
        entry = entry["strokes"]
    if not isinstance(entry, (list, tuple)):
        raise GlyphFormatError(f"glyph must be a list of strokes, got {type(entry).__name__}")
    return [parse_instruction(stroke) for stroke in entry]


# ===============================
# Built-in pack
# ===============================
# Plane is 0-100 on both axes, y grows downward. Capitals span the full
# height; lowercase bodies sit between the dashed midline (50) and the
# baseline (100).

BUILTIN_PACK: Dict[str, list] = {
    # Capitals
    "A": [_line(50, 0, 15, 100), _line(50, 0, 85, 100), _line(28, 60, 72, 60)],
    "B": [_line(20, 0, 20, 100),
          _complex(_line(20, 0, 55, 0), _arc(55, 25, 25, 25, 270, 450),
                   _arc(58, 75, 27, 25, 270, 450), _line(58, 100, 20, 100))],
    "C": [_arc(55, 50, 40, 50, 315, 45, "ccw")],
    "D": [_line(20, 0, 20, 100),
          _complex(_line(20, 0, 40, 0), _arc(40, 50, 45, 50, 270, 450),
                   _line(40, 100, 20, 100))],
    "E": [_line(20, 0, 20, 100), _line(20, 0, 80, 0), _line(20, 50, 70, 50),
          _line(20, 100, 80, 100)],
    "F": [_line(20, 0, 20, 100), _line(20, 0, 80, 0), _line(20, 50, 70, 50)],
    "G": [_complex(_arc(55, 50, 40, 50, 315, 45, "ccw"), _line(83, 85, 83, 55),
                   _line(83, 55, 60, 55))],
    "H": [_line(20, 0, 20, 100), _line(80, 0, 80, 100), _line(20, 50, 80, 50)],
    "I": [_line(50, 0, 50, 100), _line(30, 0, 70, 0), _line(30, 100, 70, 100)],
    "J": [_line(45, 0, 85, 0),
          _complex(_line(65, 0, 65, 75), _arc(45, 75, 20, 25, 0, 180))],
    "K": [_line(20, 0, 20, 100), _line(80, 0, 20, 55), _line(38, 40, 80, 100)],
    "L": [_line(20, 0, 20, 100), _line(20, 100, 80, 100)],
    "M": [_line(15, 100, 15, 0),
          _complex(_line(15, 0, 50, 60), _line(50, 60, 85, 0), _line(85, 0, 85, 100))],
    "N": [_line(20, 100, 20, 0), _line(20, 0, 80, 100), _line(80, 100, 80, 0)],
    "O": [_arc(50, 50, 35, 50, 270, 270, "ccw")],
    "P": [_line(20, 0, 20, 100),
          _complex(_line(20, 0, 55, 0), _arc(55, 25, 25, 25, 270, 450),
                   _line(55, 50, 20, 50))],
    "Q": [_arc(50, 50, 35, 50, 270, 270, "ccw"), _line(55, 70, 85, 100)],
    "R": [_line(20, 0, 20, 100),
          _complex(_line(20, 0, 55, 0), _arc(55, 25, 25, 25, 270, 450),
                   _line(55, 50, 20, 50)),
          _line(45, 50, 80, 100)],
    "S": [_complex(_arc(50, 25, 30, 25, 330, 90, "ccw"),
                   _arc(50, 75, 30, 25, 270, 510))],
    "T": [_line(15, 0, 85, 0), _line(50, 0, 50, 100)],
    "U": [_complex(_line(20, 0, 20, 65), _arc(50, 65, 30, 35, 180, 0, "ccw"),
                   _line(80, 65, 80, 0))],
    "V": [_complex(_line(15, 0, 50, 100), _line(50, 100, 85, 0))],
    "W": [_complex(_line(10, 0, 30, 100), _line(30, 100, 50, 35),
                   _line(50, 35, 70, 100), _line(70, 100, 90, 0))],
    "X": [_line(20, 0, 80, 100), _line(80, 0, 20, 100)],
    "Y": [_line(20, 0, 50, 50), _line(80, 0, 50, 50), _line(50, 50, 50, 100)],
    "Z": [_complex(_line(20, 0, 80, 0), _line(80, 0, 20, 100), _line(20, 100, 80, 100))],

    # Lowercase
    "a": [_arc(50, 75, 22, 25, 330, -30, "ccw"), _line(72, 50, 72, 100)],
    "b": [_line(25, 0, 25, 100), _arc(48, 75, 23, 25, 180, 540)],
    "c": [_arc(52, 75, 25, 25, 315, 45, "ccw")],
    "d": [_arc(50, 75, 23, 25, 330, -30, "ccw"), _line(73, 0, 73, 100)],
    "e": [_complex(_line(27, 75, 75, 75), _arc(51, 75, 24, 25, 0, -315, "ccw"))],
    "f": [_complex(_arc(62, 18, 15, 15, 330, 180, "ccw"), _line(47, 18, 47, 100)),
          _line(30, 50, 68, 50)],
    "g": [_arc(50, 65, 20, 15, 330, -30, "ccw"),
          _complex(_line(70, 50, 70, 88), _arc(50, 88, 20, 12, 0, 150))],
    "h": [_line(25, 0, 25, 100),
          _complex(_arc(48, 72, 23, 22, 180, 360), _line(71, 72, 71, 100))],
    "i": [_line(50, 50, 50, 100), _line(50, 32, 50, 36)],
    "j": [_complex(_line(60, 50, 60, 88), _arc(45, 88, 15, 12, 0, 180)),
          _line(60, 32, 60, 36)],
    "k": [_line(25, 0, 25, 100), _line(72, 50, 25, 78), _line(40, 70, 75, 100)],
    "l": [_line(50, 0, 50, 100)],
    "m": [_line(20, 50, 20, 100),
          _complex(_arc(35, 68, 15, 18, 180, 360), _line(50, 68, 50, 100)),
          _complex(_arc(65, 68, 15, 18, 180, 360), _line(80, 68, 80, 100))],
    "n": [_line(25, 50, 25, 100),
          _complex(_arc(48, 72, 23, 22, 180, 360), _line(71, 72, 71, 100))],
    "o": [_arc(50, 75, 24, 25, 270, 270, "ccw")],
    "p": [_line(25, 50, 25, 100), _arc(46, 65, 21, 15, 180, 540)],
    "q": [_arc(52, 65, 21, 15, 330, -30, "ccw"), _line(73, 50, 73, 100)],
    "r": [_line(30, 50, 30, 100), _arc(52, 68, 22, 18, 180, 315)],
    "s": [_complex(_arc(50, 62.5, 20, 12.5, 330, 90, "ccw"),
                   _arc(50, 87.5, 20, 12.5, 270, 510))],
    "t": [_line(45, 15, 45, 100), _line(28, 50, 65, 50)],
    "u": [_complex(_line(25, 50, 25, 78), _arc(48, 78, 23, 22, 180, 0, "ccw")),
          _line(71, 50, 71, 100)],
    "v": [_complex(_line(25, 50, 50, 100), _line(50, 100, 75, 50))],
    "w": [_complex(_line(15, 50, 32, 100), _line(32, 100, 50, 65),
                   _line(50, 65, 68, 100), _line(68, 100, 85, 50))],
    "x": [_line(25, 50, 75, 100), _line(75, 50, 25, 100)],
    "y": [_line(25, 50, 50, 80), _line(75, 50, 35, 100)],
    "z": [_complex(_line(25, 50, 75, 50), _line(75, 50, 25, 100), _line(25, 100, 75, 100))],
}


# ===============================
# Dictionary
# ===============================

class GlyphDictionary:
    """Read-only character -> strokes lookup over one or more packs."""

    def __init__(self, packs: Optional[Sequence[Dict[str, Any]]] = None,
                 include_builtin: bool = True,
                 density: float = config.STROKE_DENSITY):
        self.packs: List[Dict[str, Any]] = [dict(p) for p in (packs or [])]
        self._user_packs = len(self.packs)
        if include_builtin:
            self.packs.append(BUILTIN_PACK)
        self.density = density
        self._cache: Dict[str, Optional[List[np.ndarray]]] = {}

    @classmethod
    def from_files(cls, paths: Sequence[str], include_builtin: bool = True) -> "GlyphDictionary":
        glyphs = cls(include_builtin=include_builtin)
        for path in paths:
            glyphs.load_pack(path)
        return glyphs

    def load_pack(self, path: str) -> int:
        """Load a JSON pack ahead of the built-in one. Returns glyph count."""
        if not os.path.exists(path):
            logger.warning("Glyph pack %s not found", path)
            return 0

        with open(path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise GlyphFormatError(f"{path}: {e}") from e

        loaded = 0
        for items in _pack_items(data):
            self.packs.insert(self._user_packs, items)
            self._user_packs += 1
            loaded += len(items)
        self._cache.clear()
        logger.info("Loaded %d glyphs from %s", loaded, path)
        return loaded

    def raw_entry(self, char: str) -> Optional[Any]:
        for pack in self.packs:
            if char in pack:
                return pack[char]
        return None

    def __contains__(self, char: str) -> bool:
        return self.strokes_for(char) is not None

    def instructions_for(self, char: str) -> Optional[List[StrokeInstruction]]:
        entry = self.raw_entry(char)
        if entry is None:
            return None
        return parse_glyph(entry)

    def strokes_for(self, char: str) -> Optional[List[np.ndarray]]:
        """Generated strokes for a character, or None if it can't be traced."""
        if char in self._cache:
            return self._cache[char]

        strokes = None
        try:
            instructions = self.instructions_for(char)
        except GlyphFormatError as e:
            logger.warning("Glyph %r is malformed: %s", char, e)
            instructions = None

        if instructions:
            strokes = [generate(instr, self.density) for instr in instructions]
        elif instructions is not None:
            logger.warning("Glyph %r has no strokes", char)

        self._cache[char] = strokes
        return strokes


def _pack_items(data: Any) -> List[Dict[str, Any]]:
    # Accepts {"packs": [{"items": {...}}]}, {"items": {...}} or a bare mapping
    if not isinstance(data, dict):
        raise GlyphFormatError("glyph pack must be a JSON object")
    if "packs" in data:
        return [p.get("items", {}) for p in data["packs"] if isinstance(p, dict)]
    if "items" in data:
        return [data["items"]]
    return [data]
