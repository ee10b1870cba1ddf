"""Drawing surfaces used by the layout stages.

Stages only talk to the `DrawingSurface` protocol. `PdfSurface` paints onto
a reportlab canvas; `RecordingSurface` keeps the calls as `DrawOp` records so
layouts can be inspected without parsing PDF output.

Based on reportlab's canvas API:
https://docs.reportlab.com/reportlab/userguide/ch2_graphics/
"""

from dataclasses import dataclass
from typing import Literal, Protocol

from reportlab.pdfgen.canvas import Canvas

from invoicing.documents.geometry import RGB


class DrawingSurface(Protocol):
    """Minimal drawing vocabulary needed to lay out a document page."""

    def draw_rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        fill: RGB | None = None,
        stroke: RGB | None = None,
        stroke_width: float = 1,
    ) -> None: ...

    def draw_line(
        self, x1: float, y1: float, x2: float, y2: float, color: RGB, thickness: float
    ) -> None: ...

    def draw_text(self, text: str, x: float, y: float, size: float, color: RGB) -> None: ...


@dataclass(frozen=True)
class DrawOp:
    """One recorded drawing call.

    Attributes:
        kind: "rect", "line" or "text"
        x: Left edge (rect), start x (line) or baseline start (text)
        y: Bottom edge (rect), start y (line) or baseline (text)
        width: Rectangle width
        height: Rectangle height
        x2: Line end x
        y2: Line end y
        fill: Fill color of a rectangle
        stroke: Border color of a rectangle or color of a line
        stroke_width: Border width or line thickness
        text: Drawn string
        size: Font size
        color: Text color
    """

    kind: Literal["rect", "line", "text"]
    x: float
    y: float
    width: float = 0
    height: float = 0
    x2: float = 0
    y2: float = 0
    fill: RGB | None = None
    stroke: RGB | None = None
    stroke_width: float = 0
    text: str = ""
    size: float = 0
    color: RGB | None = None


class RecordingSurface:
    """Surface that records drawing calls instead of painting them."""

    def __init__(self) -> None:
        self.ops: list[DrawOp] = []

    def draw_rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        fill: RGB | None = None,
        stroke: RGB | None = None,
        stroke_width: float = 1,
    ) -> None:
        self.ops.append(
            DrawOp(
                kind="rect",
                x=x,
                y=y,
                width=width,
                height=height,
                fill=fill,
                stroke=stroke,
                stroke_width=stroke_width if stroke else 0,
            )
        )

    def draw_line(
        self, x1: float, y1: float, x2: float, y2: float, color: RGB, thickness: float
    ) -> None:
        self.ops.append(
            DrawOp(kind="line", x=x1, y=y1, x2=x2, y2=y2, stroke=color, stroke_width=thickness)
        )

    def draw_text(self, text: str, x: float, y: float, size: float, color: RGB) -> None:
        self.ops.append(DrawOp(kind="text", x=x, y=y, text=text, size=size, color=color))

    @property
    def rects(self) -> list[DrawOp]:
        return [op for op in self.ops if op.kind == "rect"]

    @property
    def lines(self) -> list[DrawOp]:
        return [op for op in self.ops if op.kind == "line"]

    @property
    def texts(self) -> list[str]:
        return [op.text for op in self.ops if op.kind == "text"]

    def find_text(self, text: str) -> DrawOp | None:
        """First text op drawing exactly `text`, or None."""
        for op in self.ops:
            if op.kind == "text" and op.text == text:
                return op
        return None


class PdfSurface:
    """Surface backed by a reportlab canvas.

    Each call saves and restores graphics state so colors and line widths
    never leak between calls.
    """

    def __init__(self, canvas: Canvas, font_name: str = "Helvetica") -> None:
        """Initialize surface.

        Args:
            canvas: Canvas to paint on (current page)
            font_name: Registered font used for all text
        """
        self.canvas = canvas
        self.font_name = font_name

    def draw_rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        fill: RGB | None = None,
        stroke: RGB | None = None,
        stroke_width: float = 1,
    ) -> None:
        self.canvas.saveState()
        if fill is not None:
            self.canvas.setFillColorRGB(*fill)
        if stroke is not None:
            self.canvas.setStrokeColorRGB(*stroke)
            self.canvas.setLineWidth(stroke_width)
        self.canvas.rect(
            x,
            y,
            width,
            height,
            stroke=1 if stroke is not None else 0,
            fill=1 if fill is not None else 0,
        )
        self.canvas.restoreState()

    def draw_line(
        self, x1: float, y1: float, x2: float, y2: float, color: RGB, thickness: float
    ) -> None:
        self.canvas.saveState()
        self.canvas.setStrokeColorRGB(*color)
        self.canvas.setLineWidth(thickness)
        self.canvas.line(x1, y1, x2, y2)
        self.canvas.restoreState()

    def draw_text(self, text: str, x: float, y: float, size: float, color: RGB) -> None:
        self.canvas.saveState()
        self.canvas.setFont(self.font_name, size)
        self.canvas.setFillColorRGB(*color)
        self.canvas.drawString(x, y, text)
        self.canvas.restoreState()
