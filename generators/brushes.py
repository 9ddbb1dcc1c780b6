"""
Fill paint -> XAML brush conversion.

Supports: solid colors, linear and radial gradients, image fills.
Anything else is reported as a diagnostic and skipped.
"""

import math
from typing import List, Optional, Tuple

from generators.base import (
    Paint, SolidPaint, LinearGradientPaint, RadialGradientPaint, ImagePaint, UnsupportedPaint,
    GradientStop, format_fixed, format_number, format_point,
)
from generators.errors import DiagnosticLog
from generators.tags import Tag

# Defaults when Figma did not provide gradient handles
LINEAR_DEFAULT_START = (0.0, 0.0)
LINEAR_DEFAULT_END = (1.0, 1.0)
RADIAL_DEFAULT_CENTER = (0.5, 0.5)
RADIAL_DEFAULT_RADIUS = 0.5


# ---------------------------------------------------------------------------
# Single brushes
# ---------------------------------------------------------------------------

def solid_brush(paint: SolidPaint) -> Tag:
    brush = Tag('SolidColorBrush', {'Color': paint.color.hex})
    if paint.opacity:
        brush.add_attribute('Opacity', format_fixed(paint.opacity))
    return brush


def _gradient_stops(brush: Tag, stops: List[GradientStop]) -> Tag:
    for stop in stops:
        brush.add_child(Tag('GradientStop', {
            'Color': stop.color.argb,
            'Offset': format_fixed(stop.position),
        }))
    return brush


def _gradient_opacity(brush: Tag, opacity: Optional[float]) -> None:
    if opacity is not None and opacity < 1:
        brush.add_attribute('Opacity', format_fixed(opacity))


def linear_gradient_brush(paint: LinearGradientPaint) -> Tag:
    """LinearGradientBrush in relative (0-1) brush coordinates."""
    if len(paint.handles) >= 2:
        start, end = paint.handles[0], paint.handles[1]
    else:
        start, end = LINEAR_DEFAULT_START, LINEAR_DEFAULT_END

    brush = Tag('LinearGradientBrush', {
        'StartPoint': format_point(*start),
        'EndPoint': format_point(*end),
    })
    _gradient_opacity(brush, paint.opacity)
    return _gradient_stops(brush, paint.stops)


def _distance(a: Tuple[float, float], b: Tuple[float, float]) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


def radial_gradient_brush(paint: RadialGradientPaint) -> Tag:
    """RadialGradientBrush; handle 0 is the center, 1 and 2 span the radii."""
    center = RADIAL_DEFAULT_CENTER
    radius_x = radius_y = RADIAL_DEFAULT_RADIUS
    if len(paint.handles) >= 3:
        center = paint.handles[0]
        radius_x = _distance(center, paint.handles[1])
        radius_y = _distance(center, paint.handles[2])

    brush = Tag('RadialGradientBrush', {
        'Center': format_point(*center),
        'GradientOrigin': format_point(*center),
        'RadiusX': format_number(radius_x),
        'RadiusY': format_number(radius_y),
    })
    _gradient_opacity(brush, paint.opacity)
    return _gradient_stops(brush, paint.stops)


def image_brush(paint: ImagePaint, node_name: str, diagnostics: DiagnosticLog) -> Tag:
    brush = Tag('ImageBrush')
    if paint.image_ref:
        # Asset export is left to the caller; reference by content hash
        brush.add_attribute('ImageSource', f"{paint.image_ref}.png")
        brush.add_attribute('Stretch', 'UniformToFill')
    else:
        diagnostics.missing(node_name, 'image fill has no image reference')
    return brush


def paint_to_brush(paint: Paint, node_name: str, diagnostics: DiagnosticLog) -> Optional[Tag]:
    """Convert a single paint; None when the variant has no XAML brush."""
    if isinstance(paint, SolidPaint):
        return solid_brush(paint)
    elif isinstance(paint, LinearGradientPaint):
        return linear_gradient_brush(paint)
    elif isinstance(paint, RadialGradientPaint):
        return radial_gradient_brush(paint)
    elif isinstance(paint, ImagePaint):
        return image_brush(paint, node_name, diagnostics)
    elif isinstance(paint, UnsupportedPaint):
        diagnostics.unsupported(node_name, f"fill type {paint.kind} has no brush equivalent")
        return None
    diagnostics.unsupported(node_name, f"unknown paint {type(paint).__name__}")
    return None


# ---------------------------------------------------------------------------
# Background container
# ---------------------------------------------------------------------------

def background_tag(fills: List[Paint], parent_type: str, node_name: str,
                   diagnostics: DiagnosticLog) -> Optional[Tag]:
    """Wrap visible fills in a `<Parent>.Background` tag, or None when nothing survives."""
    brushes = []
    for paint in fills:
        if not paint.visible:
            continue
        brush = paint_to_brush(paint, node_name, diagnostics)
        if brush is not None:
            brushes.append(brush)

    if not brushes:
        return None

    if len(brushes) > 1:
        diagnostics.unsupported(
            node_name, f"{len(brushes)} stacked fills; XAML Background holds a single brush"
        )

    background = Tag(f"{parent_type}.Background")
    for brush in brushes:
        background.add_child(brush)
    return background
