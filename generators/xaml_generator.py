"""
XAML Code Generator - builds a Canvas layout from Figma node trees.

Every visible node becomes a positioned Canvas holding a traceability
comment, a TextBlock for text nodes and its fills as a Background.
Containers that end up empty are dropped, then names are made unique
and the tree is rendered to text.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional, Sequence, Union

from generators.base import (
    SourceNode, NodeType, BoundingBox, TextContent, XamlOptions,
    XAML_NAMESPACE, XAML_X_NAMESPACE,
    format_fixed, format_number, parse_nodes,
)
from generators.brushes import background_tag
from generators.errors import Diagnostic, DiagnosticLog
from generators.naming import NameDeduplicator, sanitize_name
from generators.serializer import serialize, strip_invalid_xml
from generators.tags import Tag, comment

CONTAINER_TAG = 'Canvas'
TEXT_TAG = 'TextBlock'


# ---------------------------------------------------------------------------
# Tree builder
# ---------------------------------------------------------------------------

class XamlTreeBuilder:
    """Walks source nodes depth-first and produces the Tag tree."""

    def __init__(self, options: Optional[XamlOptions] = None):
        self.options = options or XamlOptions()
        self.diagnostics = DiagnosticLog()

    def root_tag(self) -> Tag:
        root = Tag(CONTAINER_TAG)
        if self.options.include_namespaces:
            root.add_attribute('xmlns', XAML_NAMESPACE)
            root.add_attribute('xmlns:x', XAML_X_NAMESPACE)
        root.add_attribute(self.options.name_attribute, self.options.root_name)
        return root

    def build(self, nodes: Sequence[SourceNode]) -> Tag:
        root = self.root_tag()
        self._process_nodes(nodes, root, depth=0)
        return root

    def _process_nodes(self, nodes: Sequence[SourceNode], parent: Tag, depth: int) -> None:
        for node in nodes:
            container = self._placement_container(node)

            if node.visible:
                self._add_content(node, container)

            if node.children:
                if depth + 1 > self.options.max_depth:
                    self.diagnostics.unsupported(
                        node.name, f"children below depth {self.options.max_depth} skipped"
                    )
                else:
                    self._process_nodes(node.children, container, depth + 1)

            # Empty wrappers (invisible leaves, empty groups) are dropped
            if container.has_children():
                parent.add_child(container)

    def _bounds(self, node: SourceNode) -> BoundingBox:
        if node.bounds is None:
            self.diagnostics.missing(node.name, 'no bounding box, using 0,0 0x0')
            return BoundingBox()
        return node.bounds

    def _placement_container(self, node: SourceNode) -> Tag:
        bounds = self._bounds(node)
        container = Tag(CONTAINER_TAG, {
            self.options.name_attribute: sanitize_name(node.name, node.type.value.title()),
            'Width': format_number(bounds.width),
            'Height': format_number(bounds.height),
            'Canvas.Left': format_number(bounds.x),
            'Canvas.Top': format_number(bounds.y),
        })
        if node.opacity is not None:
            container.add_attribute('Opacity', format_fixed(node.opacity))
        return container

    def _add_content(self, node: SourceNode, container: Tag) -> None:
        bounds = node.bounds or BoundingBox()
        container.add_child(comment({
            'Name': self._xml_safe(node, node.name, 'layer name'),
            'Left': format_fixed(bounds.x),
            'Top': format_fixed(bounds.y),
            'Width': format_fixed(bounds.width),
            'Height': format_fixed(bounds.height),
        }))

        if node.type == NodeType.TEXT:
            container.add_child(self._text_block(node))
        elif node.type == NodeType.OTHER:
            self.diagnostics.unsupported(node.name, f"node type {node.raw_type or 'UNKNOWN'} not converted")

        background = background_tag(node.fills, container.type, node.name, self.diagnostics)
        if background is not None:
            container.add_child(background)

    def _xml_safe(self, node: SourceNode, value: str, label: str) -> str:
        cleaned = strip_invalid_xml(value)
        if cleaned != value:
            self.diagnostics.unsupported(
                node.name, f"{len(value) - len(cleaned)} control character(s) dropped from {label}"
            )
        return cleaned

    def _text_block(self, node: SourceNode) -> Tag:
        text = node.text or TextContent()

        font_family = text.font_family
        if font_family is None:
            self.diagnostics.missing(node.name, 'mixed or missing font family, using default')
            font_family = self.options.default_font_family

        font_size = text.font_size
        if font_size is None:
            self.diagnostics.missing(node.name, 'mixed or missing font size, using default')
            font_size = self.options.default_font_size

        return Tag(TEXT_TAG, {
            'Text': self._xml_safe(node, text.characters, 'text'),
            'TextWrapping': 'Wrap',
            'TextAlignment': 'Left',
            'FontFamily': font_family,
            'FontSize': format_number(font_size),
        })


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------

@dataclass
class XamlDocument:
    """Result of one generation run."""
    text: str
    root: Tag
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.root.has_children()


def _as_source_nodes(nodes: Union[SourceNode, Dict[str, Any], Sequence[Any]]) -> List[SourceNode]:
    if isinstance(nodes, (SourceNode, dict)):
        nodes = [nodes]
    source_nodes = []
    for node in nodes:
        if isinstance(node, SourceNode):
            source_nodes.append(node)
        else:
            source_nodes.extend(parse_nodes(node))
    return source_nodes


def generate_xaml_document(nodes: Union[SourceNode, Dict[str, Any], Sequence[Any]],
                           options: Optional[XamlOptions] = None) -> XamlDocument:
    """Build, deduplicate and serialize. Accepts SourceNodes or raw Figma node dicts."""
    options = options or XamlOptions()
    builder = XamlTreeBuilder(options)
    root = builder.build(_as_source_nodes(nodes))
    NameDeduplicator(options.name_attribute).apply(root)

    text = serialize(root, options.indent_width) if root.has_children() else ''
    return XamlDocument(text=text, root=root, diagnostics=list(builder.diagnostics))


def generate_xaml_code(nodes: Union[SourceNode, Dict[str, Any], Sequence[Any]],
                       options: Optional[XamlOptions] = None) -> str:
    """Generate the XAML text for a selection of nodes (empty string when nothing is visible)."""
    return generate_xaml_document(nodes, options).text
