"""
SVG painter: replays renderer commands as SVG markup.

Save/Restore become nested groups and every Scale/Translate opens a
transformed <g>, so the device-pixel-ratio and camera transforms nest
exactly as they do on a 2D canvas. The viewBox is sized in device pixels
while the element itself is sized in CSS pixels.
"""

from html import escape
from typing import List, Sequence

from vigil.graph.renderer import (
    Circle,
    ClearRect,
    DrawCommand,
    FillRect,
    LinearGradient,
    Restore,
    Save,
    Scale,
    StrokeLines,
    Text,
    Translate,
)


def _num(value: float) -> str:
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def _attr(value: str) -> str:
    return escape(str(value), quote=True)


def _gradient(gradient: LinearGradient, gradient_id: str) -> str:
    stops = "".join(
        f'<stop offset="{_num(offset)}" stop-color="{_attr(color)}"/>'
        for offset, color in gradient.stops
    )
    return (
        f'<defs><linearGradient id="{gradient_id}" gradientUnits="userSpaceOnUse" '
        f'x1="{_num(gradient.x0)}" y1="{_num(gradient.y0)}" '
        f'x2="{_num(gradient.x1)}" y2="{_num(gradient.y1)}">{stops}</linearGradient></defs>'
    )


def render_svg(commands: Sequence[DrawCommand], width: float, height: float,
               dpr: float = 1.0, id_prefix: str = "graph") -> str:
    """Serialize drawing commands into a standalone <svg> element."""
    parts: List[str] = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{_num(width)}" height="{_num(height)}" '
        f'viewBox="0 0 {_num(width * dpr)} {_num(height * dpr)}" '
        f'style="display:block;pointer-events:none">'
    ]
    # Number of transform groups opened since each Save
    frames: List[int] = [0]
    gradients = 0

    for cmd in commands:
        if isinstance(cmd, Save):
            frames.append(0)
        elif isinstance(cmd, Restore):
            parts.append("</g>" * frames.pop())
            if not frames:
                frames.append(0)
        elif isinstance(cmd, Scale):
            parts.append(f'<g transform="scale({_num(cmd.sx)} {_num(cmd.sy)})">')
            frames[-1] += 1
        elif isinstance(cmd, Translate):
            parts.append(f'<g transform="translate({_num(cmd.dx)} {_num(cmd.dy)})">')
            frames[-1] += 1
        elif isinstance(cmd, ClearRect):
            continue
        elif isinstance(cmd, FillRect):
            fill = cmd.fill
            if isinstance(fill, LinearGradient):
                gradients += 1
                gradient_id = f"{id_prefix}-gradient-{gradients}"
                parts.append(_gradient(fill, gradient_id))
                fill = f"url(#{gradient_id})"
            parts.append(
                f'<rect x="{_num(cmd.x)}" y="{_num(cmd.y)}" width="{_num(cmd.width)}" '
                f'height="{_num(cmd.height)}" fill="{_attr(fill)}"/>'
            )
        elif isinstance(cmd, StrokeLines):
            if not cmd.segments:
                continue
            d = " ".join(
                f"M{_num(x1)} {_num(y1)}L{_num(x2)} {_num(y2)}"
                for (x1, y1), (x2, y2) in cmd.segments
            )
            parts.append(
                f'<path d="{d}" fill="none" stroke="{_attr(cmd.stroke)}" '
                f'stroke-width="{_num(cmd.line_width)}"/>'
            )
        elif isinstance(cmd, Circle):
            glow = ""
            if cmd.glow_color and cmd.glow_blur:
                glow = f' style="filter:drop-shadow(0 0 {_num(cmd.glow_blur / 2)}px {_attr(cmd.glow_color)})"'
            data_id = f' data-node-id="{_attr(cmd.node_id)}"' if cmd.node_id else ""
            parts.append(
                f'<circle cx="{_num(cmd.x)}" cy="{_num(cmd.y)}" r="{_num(cmd.radius)}" '
                f'fill="{_attr(cmd.fill)}" stroke="{_attr(cmd.stroke)}" '
                f'stroke-width="{_num(cmd.line_width)}"{data_id}{glow}/>'
            )
        elif isinstance(cmd, Text):
            anchor = {"center": "middle", "left": "start", "right": "end"}.get(cmd.align, "middle")
            baseline = "hanging" if cmd.baseline == "top" else "auto"
            parts.append(
                f'<text x="{_num(cmd.x)}" y="{_num(cmd.y)}" text-anchor="{anchor}" '
                f'dominant-baseline="{baseline}" fill="{_attr(cmd.fill)}" '
                f'style="font:{_attr(cmd.font)}">{escape(cmd.text)}</text>'
            )

    while frames:
        parts.append("</g>" * frames.pop())
    parts.append("</svg>")
    return "".join(parts)
