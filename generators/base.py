"""
Shared models and helpers for the XAML generator.

Holds the color encoder, the source design-tree model (nodes and paints as
read from the Figma API), the parsers that build that model from raw node
dicts, number formatting, and generator options.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List, Optional, Tuple, Union

from generators.errors import ContractViolation


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

XAML_NAMESPACE = 'http://schemas.microsoft.com/winfx/2006/xaml/presentation'
XAML_X_NAMESPACE = 'http://schemas.microsoft.com/winfx/2006/xaml'

NAME_ATTRIBUTE = 'x:Name'
COMMENT_TAG = '!--'

DEFAULT_FONT_FAMILY = 'Segoe UI'
DEFAULT_FONT_SIZE = 12.0
DEFAULT_INDENT_WIDTH = 2
MAX_DEPTH = 50

# Plugin API exports figma.mixed under this marker
MIXED_VALUE = 'MIXED'


@dataclass
class XamlOptions:
    """Knobs for one generation run."""
    indent_width: int = DEFAULT_INDENT_WIDTH
    default_font_family: str = DEFAULT_FONT_FAMILY
    default_font_size: float = DEFAULT_FONT_SIZE
    root_name: str = 'Root'
    name_attribute: str = NAME_ATTRIBUTE
    include_namespaces: bool = True
    max_depth: int = MAX_DEPTH


# ---------------------------------------------------------------------------
# Color encoding
# ---------------------------------------------------------------------------

def _check_unit(value: float, label: str) -> float:
    if not isinstance(value, (int, float)) or not 0.0 <= value <= 1.0:
        raise ContractViolation(f"{label} must be within [0, 1], got {value!r}")
    return float(value)


def _channel_hex(value: float, label: str) -> str:
    value = _check_unit(value, label)
    return f"{int(value * 255 + 0.5):02x}"


def to_hex(r: float, g: float, b: float, a: Optional[float] = None) -> str:
    """Encode normalized channels as #rrggbb, or #aarrggbb when alpha is given."""
    rgb = _channel_hex(r, 'red') + _channel_hex(g, 'green') + _channel_hex(b, 'blue')
    if a is None:
        return f"#{rgb}"
    return f"#{_channel_hex(a, 'alpha')}{rgb}"


@dataclass
class ColorValue:
    """Normalized RGBA color (each channel 0.0-1.0)."""
    r: float
    g: float
    b: float
    a: float = 1.0

    def __post_init__(self):
        self.r = _check_unit(self.r, 'red')
        self.g = _check_unit(self.g, 'green')
        self.b = _check_unit(self.b, 'blue')
        self.a = _check_unit(self.a, 'alpha')

    @property
    def hex(self) -> str:
        return to_hex(self.r, self.g, self.b)

    @property
    def argb(self) -> str:
        return to_hex(self.r, self.g, self.b, self.a)


# ---------------------------------------------------------------------------
# Number formatting
# ---------------------------------------------------------------------------

def format_fixed(value: float) -> str:
    """Three fractional digits, always."""
    text = f"{value:.3f}"
    return '0.000' if text == '-0.000' else text


def format_number(value: float) -> str:
    """Shortest form with at most three fractional digits (100.0 -> '100')."""
    text = format_fixed(value).rstrip('0').rstrip('.')
    return text or '0'


def format_point(x: float, y: float) -> str:
    return f"{format_number(x)},{format_number(y)}"


# ---------------------------------------------------------------------------
# Paints
# ---------------------------------------------------------------------------

@dataclass
class GradientStop:
    color: ColorValue
    position: float = 0.0

    def __post_init__(self):
        self.position = _check_unit(self.position, 'gradient stop offset')


@dataclass
class SolidPaint:
    color: ColorValue
    opacity: Optional[float] = None
    visible: bool = True


@dataclass
class LinearGradientPaint:
    stops: List[GradientStop]
    handles: List[Tuple[float, float]] = field(default_factory=list)
    opacity: Optional[float] = None
    visible: bool = True


@dataclass
class RadialGradientPaint:
    stops: List[GradientStop]
    handles: List[Tuple[float, float]] = field(default_factory=list)
    opacity: Optional[float] = None
    visible: bool = True


@dataclass
class ImagePaint:
    image_ref: Optional[str] = None
    visible: bool = True


@dataclass
class UnsupportedPaint:
    kind: str
    visible: bool = True


Paint = Union[SolidPaint, LinearGradientPaint, RadialGradientPaint, ImagePaint, UnsupportedPaint]


# ---------------------------------------------------------------------------
# Source nodes
# ---------------------------------------------------------------------------

class NodeType(str, Enum):
    """Closed set of node kinds the generator understands."""
    FRAME = 'FRAME'
    GROUP = 'GROUP'
    RECTANGLE = 'RECTANGLE'
    ELLIPSE = 'ELLIPSE'
    TEXT = 'TEXT'
    VECTOR = 'VECTOR'
    OTHER = 'OTHER'


NODE_TYPE_MAP: Dict[str, NodeType] = {
    'FRAME': NodeType.FRAME,
    'COMPONENT': NodeType.FRAME,
    'COMPONENT_SET': NodeType.FRAME,
    'INSTANCE': NodeType.FRAME,
    'SECTION': NodeType.FRAME,
    'GROUP': NodeType.GROUP,
    'BOOLEAN_OPERATION': NodeType.GROUP,
    'RECTANGLE': NodeType.RECTANGLE,
    'LINE': NodeType.RECTANGLE,
    'STAR': NodeType.RECTANGLE,
    'REGULAR_POLYGON': NodeType.RECTANGLE,
    'ELLIPSE': NodeType.ELLIPSE,
    'TEXT': NodeType.TEXT,
    'VECTOR': NodeType.VECTOR,
}


@dataclass
class BoundingBox:
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0


@dataclass
class TextContent:
    """Text payload of a TEXT node. None font fields mean absent or mixed."""
    characters: str = ''
    font_family: Optional[str] = None
    font_size: Optional[float] = None


@dataclass
class SourceNode:
    name: str
    type: NodeType = NodeType.OTHER
    id: str = ''
    raw_type: str = ''
    visible: bool = True
    bounds: Optional[BoundingBox] = None
    opacity: Optional[float] = None
    fills: List[Paint] = field(default_factory=list)
    children: List['SourceNode'] = field(default_factory=list)
    text: Optional[TextContent] = None


# ---------------------------------------------------------------------------
# Parsing raw Figma node dicts
# ---------------------------------------------------------------------------

def parse_color(color: Dict[str, Any]) -> ColorValue:
    """Read a Figma {r, g, b, a} dict. Missing channels default to 0 (alpha to 1)."""
    return ColorValue(
        r=color.get('r', 0),
        g=color.get('g', 0),
        b=color.get('b', 0),
        a=color.get('a', 1),
    )


def _parse_handles(fill: Dict[str, Any]) -> List[Tuple[float, float]]:
    handles = []
    for handle in fill.get('gradientHandlePositions') or []:
        handles.append((float(handle.get('x', 0)), float(handle.get('y', 0))))
    return handles


def _parse_stops(fill: Dict[str, Any]) -> List[GradientStop]:
    raw_stops = fill.get('gradientStops') or []
    if not raw_stops:
        raise ContractViolation(f"{fill.get('type')} paint has no gradient stops")
    return [
        GradientStop(color=parse_color(stop.get('color') or {}), position=stop.get('position', 0))
        for stop in raw_stops
    ]


def parse_paint(fill: Dict[str, Any]) -> Paint:
    """Convert one Figma paint dict into a Paint variant."""
    fill_type = fill.get('type', '')
    visible = fill.get('visible', True)
    opacity = fill.get('opacity')
    if opacity is not None:
        opacity = _check_unit(opacity, 'paint opacity')

    if fill_type == 'SOLID':
        return SolidPaint(color=parse_color(fill.get('color') or {}), opacity=opacity, visible=visible)
    elif fill_type == 'GRADIENT_LINEAR':
        return LinearGradientPaint(
            stops=_parse_stops(fill), handles=_parse_handles(fill), opacity=opacity, visible=visible
        )
    elif fill_type == 'GRADIENT_RADIAL':
        return RadialGradientPaint(
            stops=_parse_stops(fill), handles=_parse_handles(fill), opacity=opacity, visible=visible
        )
    elif fill_type == 'IMAGE':
        # REST API calls it imageRef, the plugin API imageHash
        image_ref = fill.get('imageRef') or fill.get('imageHash')
        return ImagePaint(image_ref=image_ref, visible=visible)
    return UnsupportedPaint(kind=fill_type or 'UNKNOWN', visible=visible)


def parse_fills(node: Dict[str, Any]) -> List[Paint]:
    fills = node.get('fills')
    # figma.mixed fills on partially styled text
    if not isinstance(fills, list):
        return []
    return [parse_paint(fill) for fill in fills]


def _known(value: Any) -> Any:
    return None if value is None or value == MIXED_VALUE else value


def parse_text(node: Dict[str, Any]) -> TextContent:
    """Read characters and font info from REST (style) or plugin (fontName) shapes."""
    style = node.get('style') or {}
    family = _known(style.get('fontFamily'))
    size = _known(style.get('fontSize'))

    font_name = _known(node.get('fontName'))
    if family is None and isinstance(font_name, dict):
        family = _known(font_name.get('family'))
    if size is None:
        size = _known(node.get('fontSize'))

    return TextContent(
        characters=node.get('characters', ''),
        font_family=family,
        font_size=float(size) if size is not None else None,
    )


def parse_bounds(node: Dict[str, Any]) -> Optional[BoundingBox]:
    bbox = node.get('absoluteBoundingBox')
    if not bbox:
        return None
    return BoundingBox(
        x=float(bbox.get('x', 0)),
        y=float(bbox.get('y', 0)),
        width=float(bbox.get('width', 0)),
        height=float(bbox.get('height', 0)),
    )


def parse_node(node: Dict[str, Any]) -> SourceNode:
    """Convert a raw Figma node dict (with children) into a SourceNode tree."""
    raw_type = node.get('type', '')
    name = node.get('name', '')
    node_type = NODE_TYPE_MAP.get(raw_type, NodeType.OTHER)

    try:
        fills = parse_fills(node)
        opacity = node.get('opacity')
        if opacity is not None:
            opacity = _check_unit(opacity, 'opacity')
    except ContractViolation as e:
        raise ContractViolation(f"Node '{name}': {e}") from e

    return SourceNode(
        name=name,
        type=node_type,
        id=node.get('id', ''),
        raw_type=raw_type,
        visible=node.get('visible', True),
        bounds=parse_bounds(node),
        opacity=opacity,
        fills=fills,
        children=[parse_node(child) for child in node.get('children') or []],
        text=parse_text(node) if node_type == NodeType.TEXT else None,
    )


def parse_nodes(raw: Union[Dict[str, Any], List[Dict[str, Any]]]) -> List[SourceNode]:
    """Parse a single node dict or a selection list of them."""
    if isinstance(raw, dict):
        raw = [raw]
    return [parse_node(node) for node in raw]
