"""Rendering attribute bags attached to nodes, edges and graphs.

The graph core never interprets these values; they are carried along so the
renderer can turn them into drawing attributes.
"""

from dataclasses import dataclass
from enum import StrEnum, auto

from rich.color import Color as RichColor
from rich.color import ColorParseError
from rich.color_triplet import ColorTriplet

Color = str | tuple[int, int, int]
"""A colour name or definition understood by rich (``"red"``, ``"#c8c8ff"``, ``"rgb(1,2,3)"``) or an RGB tuple."""


class LineStyle(StrEnum):
    """How an edge line is stroked."""

    NORMAL = auto()
    BOLD = auto()
    DASHED = auto()


class LineEnding(StrEnum):
    """Decoration drawn at either end of an edge."""

    NONE = auto()
    ARROW = auto()
    DOT = auto()
    HOLLOW_DOT = auto()
    INVERT_ARROW = auto()
    INVERT_ARROW_DOT = auto()
    INVERT_ARROW_HOLLOW_DOT = auto()


class Orientation(StrEnum):
    """Direction in which the graph ranks are laid out."""

    TOP_TO_BOTTOM = auto()
    LEFT_TO_RIGHT = auto()


@dataclass(slots=True)
class NodeStyle:
    """Per-node rendering attributes."""

    border_color: Color | None = None
    background_color: Color | None = None
    label_color: Color | None = None
    font_size: int = 10
    group: str | None = None


@dataclass(slots=True)
class EdgeStyle:
    """Per-edge rendering attributes."""

    line_color: Color | None = None
    line_head: LineEnding = LineEnding.ARROW
    line_tail: LineEnding = LineEnding.NONE
    line_label: str | None = None
    line_style: LineStyle | None = None
    font_size: int = 8


@dataclass(slots=True)
class GraphStyle:
    """Graph-wide rendering attributes."""

    title: str | None = None
    title_color: Color | None = None
    background_color: Color | None = None
    font_size: int = 12
    orientation: Orientation = Orientation.TOP_TO_BOTTOM


def css_color(value: Color) -> str:
    """Normalize a colour to a ``#rrggbb`` declaration.

    Args:
        value: A colour definition parsed by :meth:`rich.color.Color.parse`, or an
            ``(r, g, b)`` tuple with components in ``0..255``.

    Returns:
        Lower-case hex colour string.

    Raises:
        ValueError: If the colour cannot be parsed or a component is out of range.

    Example:
        >>> css_color((200, 200, 255))
        '#c8c8ff'
        >>> css_color("#FF0000")
        '#ff0000'

    """
    if isinstance(value, tuple):
        if len(value) != 3 or not all(0 <= c <= 255 for c in value):  # noqa: PLR2004
            msg = f"Invalid RGB colour {value!r}: expected three components in 0..255"
            raise ValueError(msg)
        return ColorTriplet(*value).hex

    try:
        parsed = RichColor.parse(value)
    except ColorParseError as e:
        msg = f"Invalid colour {value!r}: {e}"
        raise ValueError(msg) from e
    return parsed.get_truecolor().hex
