"""

Render tree - positioned drawable nodes produced for one page.

A page is a tree of ``RenderNode`` objects. Every node carries its own
affine ``Transform`` (applied relative to its parent), an ordered list of
children and the draw operations recorded through ``render_open()``.
Nodes are tagged with a ``NodeKind`` so pagination code can recognise
tables and rows without knowing who produced the tree. ``container`` is a
pure grouping node; ``section`` holds flowing content in reading order.

"""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from enum import Enum
from typing import Any, Hashable, Iterator, List, Optional, Tuple, Union

from .geometry import Point, Rect
from .text_metrics import FormattedText


###############################################################################
# Transforms
###############################################################################


@dataclass(frozen=True, slots=True)
class Transform:
    """

    2-D affine transform using the same (a, b, c, d, e, f) layout as
    ReportLab's ``canvas.transform``::

        x' = a*x + c*y + e
        y' = b*x + d*y + f

    """

    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    e: float = 0.0
    f: float = 0.0

    @classmethod
    def identity(cls) -> "Transform":
        return cls()

    @classmethod
    def translate(cls, dx: float, dy: float) -> "Transform":
        return cls(e=float(dx), f=float(dy))

    @classmethod
    def scale(cls, sx: float, sy: float) -> "Transform":
        return cls(a=float(sx), d=float(sy))

    @classmethod
    def group(cls, *transforms: "Transform") -> "Transform":
        """Compose transforms; the first one is applied first."""
        result = cls()
        for transform in transforms:
            result = result.then(transform)
        return result

    def then(self, other: "Transform") -> "Transform":
        """Return the transform applying ``self`` first and ``other`` second."""
        return Transform(
            a=other.a * self.a + other.c * self.b,
            b=other.b * self.a + other.d * self.b,
            c=other.a * self.c + other.c * self.d,
            d=other.b * self.c + other.d * self.d,
            e=other.a * self.e + other.c * self.f + other.e,
            f=other.b * self.e + other.d * self.f + other.f,
        )

    @property
    def is_identity(self) -> bool:
        return self == Transform()

    @property
    def offset(self) -> Point:
        return Point(self.e, self.f)

    def as_tuple(self) -> Tuple[float, float, float, float, float, float]:
        return (self.a, self.b, self.c, self.d, self.e, self.f)

    def apply(self, point: Point) -> Point:
        return Point(
            self.a * point.x + self.c * point.y + self.e,
            self.b * point.x + self.d * point.y + self.f,
        )

    def apply_rect(self, rect: Rect) -> Rect:
        corners = [
            self.apply(Point(rect.left, rect.top)),
            self.apply(Point(rect.right, rect.top)),
            self.apply(Point(rect.left, rect.bottom)),
            self.apply(Point(rect.right, rect.bottom)),
        ]
        xs = [p.x for p in corners]
        ys = [p.y for p in corners]
        return Rect(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))


###############################################################################
# Draw operations
###############################################################################


@dataclass(slots=True)
class TextDraw:
    """Text drawn with its top-left corner at ``origin``."""

    text: FormattedText
    origin: Point

    @property
    def bounds(self) -> Rect:
        return Rect(self.origin.x, self.origin.y, self.text.width, self.text.height)


@dataclass(slots=True)
class RectangleDraw:
    rect: Rect
    fill: Optional[str] = None
    stroke: Optional[str] = None
    stroke_width: float = 1.0

    @property
    def bounds(self) -> Rect:
        return self.rect


@dataclass(slots=True)
class EllipseDraw:
    rect: Rect
    fill: Optional[str] = None
    stroke: Optional[str] = None
    stroke_width: float = 1.0

    @property
    def bounds(self) -> Rect:
        return self.rect


@dataclass(slots=True)
class LineDraw:
    start: Point
    end: Point
    color: str = "black"
    width: float = 1.0

    @property
    def bounds(self) -> Rect:
        left = min(self.start.x, self.end.x)
        top = min(self.start.y, self.end.y)
        return Rect(left, top, abs(self.end.x - self.start.x), abs(self.end.y - self.start.y))


@dataclass(slots=True)
class ImageDraw:
    """Raster image stretched into ``rect``; ``image`` is a path or a Pillow image."""

    image: Any
    rect: Rect

    @property
    def bounds(self) -> Rect:
        return self.rect


DrawOp = Union[TextDraw, RectangleDraw, EllipseDraw, LineDraw, ImageDraw]


###############################################################################
# Nodes
###############################################################################


class NodeKind(str, Enum):
    CONTAINER = "container"
    SECTION = "section"
    DRAWING = "drawing"
    PARAGRAPH = "paragraph"
    TABLE = "table"
    ROW = "row"
    CELL = "cell"


_node_ids = itertools.count(1)


class RenderNode:
    """

    Single node of a page render tree.

    ``key`` is an explicit identity supplied by the producer (for example
    the index of the source table). Two nodes describing the same logical
    object share a key even when they are distinct objects; nodes without
    a key fall back to their unique ``node_id``.

    """

    def __init__(
        self,
        kind: NodeKind = NodeKind.CONTAINER,
        *,
        transform: Optional[Transform] = None,
        key: Optional[Hashable] = None,
    ):
        self.kind = kind
        self.transform = transform or Transform.identity()
        self.key = key
        self.node_id = next(_node_ids)
        self.parent: Optional[RenderNode] = None
        self.drawings: List[DrawOp] = []
        self._children: List[RenderNode] = []

    def __repr__(self) -> str:
        key = f" key={self.key!r}" if self.key is not None else ""
        return f"<RenderNode {self.kind.value}#{self.node_id}{key} children={len(self._children)}>"

    @property
    def identity(self) -> Hashable:
        return self.key if self.key is not None else self.node_id

    @property
    def children(self) -> Tuple["RenderNode", ...]:
        return tuple(self._children)

    @property
    def child_count(self) -> int:
        return len(self._children)

    @property
    def first_child(self) -> Optional["RenderNode"]:
        return self._children[0] if self._children else None

    @property
    def last_child(self) -> Optional["RenderNode"]:
        return self._children[-1] if self._children else None

    def add_child(self, child: "RenderNode") -> "RenderNode":
        """Append ``child``, moving it away from its previous parent."""
        if child.parent is not None:
            child.parent.remove_child(child)
        self._children.append(child)
        child.parent = self
        return child

    def remove_child(self, child: "RenderNode") -> None:
        self._children.remove(child)
        child.parent = None

    def detach(self) -> None:
        if self.parent is not None:
            self.parent.remove_child(self)

    def render_open(self) -> "DrawingContext":
        return DrawingContext(self)

    def content_bounds(self) -> Optional[Rect]:
        """Bounds of own drawings and all descendants, in local coordinates."""
        bounds: Optional[Rect] = None
        for op in self.drawings:
            bounds = op.bounds if bounds is None else bounds.union(op.bounds)
        for child in self._children:
            child_bounds = child.bounds()
            if child_bounds is None:
                continue
            bounds = child_bounds if bounds is None else bounds.union(child_bounds)
        return bounds

    def bounds(self) -> Optional[Rect]:
        """Content bounds mapped through this node's transform (parent coordinates)."""
        content = self.content_bounds()
        if content is None:
            return None
        return self.transform.apply_rect(content)

    def walk(self) -> Iterator["RenderNode"]:
        """Pre-order traversal starting with this node."""
        yield self
        for child in self._children:
            yield from child.walk()


class DrawingContext:
    """

    Records draw operations for a node.

    Used as a context manager; on exit the recorded operations replace the
    node's drawings.

    """

    def __init__(self, node: RenderNode):
        self._node = node
        self._ops: List[DrawOp] = []
        self._closed = False

    def __enter__(self) -> "DrawingContext":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def node(self) -> RenderNode:
        return self._node

    def draw_text(self, text: FormattedText, origin: Point) -> None:
        self._ops.append(TextDraw(text=text, origin=origin))

    def draw_rectangle(
        self,
        rect: Rect,
        fill: Optional[str] = None,
        stroke: Optional[str] = None,
        stroke_width: float = 1.0,
    ) -> None:
        self._ops.append(RectangleDraw(rect=rect, fill=fill, stroke=stroke, stroke_width=stroke_width))

    def draw_ellipse(
        self,
        rect: Rect,
        fill: Optional[str] = None,
        stroke: Optional[str] = None,
        stroke_width: float = 1.0,
    ) -> None:
        self._ops.append(EllipseDraw(rect=rect, fill=fill, stroke=stroke, stroke_width=stroke_width))

    def draw_line(self, start: Point, end: Point, color: str = "black", width: float = 1.0) -> None:
        self._ops.append(LineDraw(start=start, end=end, color=color, width=width))

    def draw_image(self, image: Any, rect: Rect) -> None:
        self._ops.append(ImageDraw(image=image, rect=rect))

    def close(self) -> None:
        if self._closed:
            return
        self._node.drawings = list(self._ops)
        self._closed = True
