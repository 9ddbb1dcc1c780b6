"""
XAML text serializer.

Renders a Tag tree line by line. One XamlWriter per document: it owns the
line buffer and the current indentation level.
"""

import re
from typing import Dict, List

from generators.base import DEFAULT_INDENT_WIDTH
from generators.errors import ContractViolation
from generators.tags import Tag

# Characters XML 1.0 does not allow anywhere in a document
_INVALID_XML_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")

_ATTRIBUTE_ESCAPES = {
    '&': '&amp;',
    '<': '&lt;',
    '>': '&gt;',
    '"': '&quot;',
    '\n': '&#10;',
    '\r': '&#13;',
    '\t': '&#9;',
}


def strip_invalid_xml(value: str) -> str:
    return _INVALID_XML_RE.sub('', value)


def escape_attribute(value: str) -> str:
    """Escape a value for use inside a double-quoted XML attribute."""
    return ''.join(_ATTRIBUTE_ESCAPES.get(ch, ch) for ch in strip_invalid_xml(value))


def _escape_comment(value: str) -> str:
    # '--' may not appear inside an XML comment
    escaped = escape_attribute(value)
    while '--' in escaped:
        escaped = escaped.replace('--', '- -')
    return escaped


def stringify_attributes(attributes: Dict[str, str], comment: bool = False) -> str:
    """Render ` a="1" b="2" ` (leading and trailing space), or '' when empty."""
    if not attributes:
        return ''
    escape = _escape_comment if comment else escape_attribute
    pairs = ' '.join(f'{name}="{escape(value)}"' for name, value in attributes.items())
    return f' {pairs} '


class XamlWriter:
    """Accumulates rendered lines for a single document."""

    def __init__(self, indent_width: int = DEFAULT_INDENT_WIDTH):
        self.indent_width = indent_width
        self.level = 0
        self.lines: List[str] = []

    def _append(self, line: str) -> None:
        self.lines.append(f"{' ' * (self.level * self.indent_width)}{line}\n")

    def write(self, tag: Tag) -> 'XamlWriter':
        if tag.is_comment():
            if tag.has_children():
                raise ContractViolation(f"Comment tag has {len(tag.children)} children")
            self._append(f'<{tag.type}{stringify_attributes(tag.attributes, comment=True)}-->')
        elif not tag.has_children():
            self._append(f'<{tag.type}{stringify_attributes(tag.attributes)}/>')
        else:
            self._append(f'<{tag.type}{stringify_attributes(tag.attributes)}>')
            self.level += 1
            for child in tag.children:
                self.write(child)
            self.level -= 1
            self._append(f'</{tag.type}>')
        return self

    def getvalue(self) -> str:
        return ''.join(self.lines)


def serialize(tag: Tag, indent_width: int = DEFAULT_INDENT_WIDTH) -> str:
    """Render a tag tree to text using a fresh writer."""
    return XamlWriter(indent_width).write(tag).getvalue()
