"""
Learning Style Vector.

Eight scores on the four bipolar Felder-Silverman axes:

    active      / reflective
    sensing     / intuitive
    visual      / verbal
    sequential  / global

Values carry no normalisation. A module vector holds fixed decimal weights,
a survey vector holds dominance-reduced counts and a graph vector holds raw
weighted sums. Consumers only compare the two poles of one axis pair.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import astuple, dataclass, replace
from enum import Enum

from psg.exceptions import StyleVectorFormatError

# Persisted/serialised key order
STYLE_KEYS: tuple[str, ...] = (
    "active",
    "reflective",
    "sensing",
    "intuitive",
    "visual",
    "verbal",
    "sequential",
    "global",
)


class AxisPair(str, Enum):
    """The four bipolar axes, in questionnaire cycle order."""

    ACTIVE_REFLECTIVE = "active_reflective"
    SENSING_INTUITIVE = "sensing_intuitive"
    VISUAL_VERBAL = "visual_verbal"
    SEQUENTIAL_GLOBAL = "sequential_global"

    @property
    def poles(self) -> tuple[str, str]:
        """Attribute names of the (first, second) pole."""
        return _POLES[self]


_POLES: dict[AxisPair, tuple[str, str]] = {
    AxisPair.ACTIVE_REFLECTIVE: ("active", "reflective"),
    AxisPair.SENSING_INTUITIVE: ("sensing", "intuitive"),
    AxisPair.VISUAL_VERBAL: ("visual", "verbal"),
    AxisPair.SEQUENTIAL_GLOBAL: ("sequential", "global_"),
}


@dataclass(frozen=True)
class StyleVector:
    """An 8-score learning style."""

    active: float = 0.0
    reflective: float = 0.0
    sensing: float = 0.0
    intuitive: float = 0.0
    visual: float = 0.0
    verbal: float = 0.0
    sequential: float = 0.0
    global_: float = 0.0

    @classmethod
    def zero(cls) -> StyleVector:
        return cls()

    # ========================================
    # Arithmetic
    # ========================================

    def scale(self, weight: float) -> StyleVector:
        """Multiply every score by ``weight``."""
        return StyleVector(*(value * weight for value in astuple(self)))

    def add(self, other: StyleVector) -> StyleVector:
        """Pairwise sum."""
        return StyleVector(*(a + b for a, b in zip(astuple(self), astuple(other))))

    def __add__(self, other: StyleVector) -> StyleVector:
        if not isinstance(other, StyleVector):
            return NotImplemented
        return self.add(other)

    def reduce_to_dominant(self) -> StyleVector:
        """
        Collapse each axis pair onto its dominant pole.

        The first pole keeps the difference only when strictly larger;
        otherwise the second pole takes it. Equal poles both end at zero.
        """
        changes: dict[str, float] = {}
        for axis in AxisPair:
            first_name, second_name = axis.poles
            first, second = getattr(self, first_name), getattr(self, second_name)
            if first > second:
                changes[first_name] = first - second
                changes[second_name] = 0
            else:
                changes[second_name] = second - first
                changes[first_name] = 0
        return replace(self, **changes)

    # ========================================
    # Accessors
    # ========================================

    def pair(self, axis: AxisPair) -> tuple[float, float]:
        """Return the (first, second) pole scores of an axis pair."""
        first_name, second_name = axis.poles
        return getattr(self, first_name), getattr(self, second_name)

    def pairs(self) -> Iterator[tuple[AxisPair, float, float]]:
        for axis in AxisPair:
            first, second = self.pair(axis)
            yield axis, first, second

    @property
    def is_zero(self) -> bool:
        return not any(astuple(self))

    # ========================================
    # Serialisation
    # ========================================

    def to_dict(self) -> dict[str, float]:
        return dict(zip(STYLE_KEYS, astuple(self)))

    @classmethod
    def from_dict(cls, data: Mapping[str, float]) -> StyleVector:
        """Build from a mapping keyed by style name; missing keys are zero."""
        return cls(*(float(data.get(key, 0) or 0) for key in STYLE_KEYS))

    def to_csv(self) -> str:
        """Comma-separated form stored in the module style table."""
        return ",".join(_format_number(value) for value in astuple(self))

    @classmethod
    def from_csv(cls, text: str) -> StyleVector:
        parts = text.split(",")
        if len(parts) != len(STYLE_KEYS):
            raise StyleVectorFormatError(
                f"Expected {len(STYLE_KEYS)} comma-separated scores, got {len(parts)}: {text!r}"
            )
        try:
            return cls(*(float(part) for part in parts))
        except ValueError as e:
            raise StyleVectorFormatError(f"Invalid learning style string {text!r}: {e}") from e


def _format_number(value: float) -> str:
    # 0.35 not 0.35000000000000003, 2 not 2.0
    text = repr(round(float(value), 10))
    return text[:-2] if text.endswith(".0") else text
