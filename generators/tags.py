"""
Generic markup tag tree used as the intermediate form before text output.
"""

from typing import Dict, Iterator, List, Optional

from generators.base import COMMENT_TAG
from generators.errors import ContractViolation


class Tag:
    """One markup element: a type name, ordered attributes and owned children."""

    def __init__(self, type: str, attributes: Optional[Dict[str, str]] = None):
        self.type = type
        self.attributes: Dict[str, str] = dict(attributes or {})
        self.children: List['Tag'] = []

    def __repr__(self) -> str:
        return f"Tag({self.type!r}, {self.attributes!r}, children={len(self.children)})"

    def add_attribute(self, name: str, value: str) -> 'Tag':
        # dict keeps the first insertion position on overwrite
        self.attributes[name] = value
        return self

    def add_child(self, child: 'Tag') -> 'Tag':
        if self.is_comment():
            raise ContractViolation(f"Comment tag cannot hold children (got {child.type!r})")
        self.children.append(child)
        return child

    def has_children(self) -> bool:
        return len(self.children) > 0

    def is_comment(self) -> bool:
        return self.type.startswith(COMMENT_TAG)

    def walk(self) -> Iterator['Tag']:
        """Yield this tag and every descendant in document (pre-)order."""
        yield self
        for child in self.children:
            yield from child.walk()


def comment(attributes: Dict[str, str]) -> Tag:
    return Tag(COMMENT_TAG, attributes)
