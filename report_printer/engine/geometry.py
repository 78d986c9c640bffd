"""Geometry primitives for page layout.

All values are PDF points. Rectangles are y-down: ``top`` is the smaller y.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


POINTS_PER_INCH = 72.0
DEFAULT_MARGIN = POINTS_PER_INCH


@dataclass(slots=True)
class Point:
    x: float
    y: float


@dataclass(slots=True)
class Size:
    width: float
    height: float


@dataclass(slots=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_origin(cls, origin: Point, size: Size) -> "Rect":
        return cls(origin.x, origin.y, size.width, size.height)

    @property
    def left(self) -> float:
        return self.x

    @property
    def top(self) -> float:
        return self.y

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def origin(self) -> Point:
        return Point(self.x, self.y)

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)

    def union(self, other: Optional["Rect"]) -> "Rect":
        """Calculate the bounding rectangle that contains both rectangles.

        Args:
            other: Another Rect object (None is treated as empty)

        Returns:
            New Rect that contains both rectangles
        """
        if other is None:
            return Rect(self.x, self.y, self.width, self.height)
        left = min(self.left, other.left)
        top = min(self.top, other.top)
        right = max(self.right, other.right)
        bottom = max(self.bottom, other.bottom)
        return Rect(x=left, y=top, width=right - left, height=bottom - top)


@dataclass(slots=True)
class Margins:
    top: float = 0.0
    bottom: float = 0.0
    left: float = 0.0
    right: float = 0.0

    @classmethod
    def uniform(cls, value: float) -> "Margins":
        return cls(value, value, value, value)

    @property
    def horizontal(self) -> float:
        return self.left + self.right

    @property
    def vertical(self) -> float:
        return self.top + self.bottom

    def __add__(self, other: "Margins") -> "Margins":
        return Margins(
            top=self.top + other.top,
            bottom=self.bottom + other.bottom,
            left=self.left + other.left,
            right=self.right + other.right,
        )


def inches_to_points(value: float | None) -> float:
    if value is None:
        return 0.0
    return float(value) * POINTS_PER_INCH


def mm_to_points(value: float | None) -> float:
    if value is None:
        return 0.0
    return float(value) * POINTS_PER_INCH / 25.4


def px_to_points(value: float | None, dpi: float = 96.0) -> float:
    if value is None:
        return 0.0
    return float(value) * POINTS_PER_INCH / dpi
