"""
Element naming: identifier sanitizing and the x:Name uniqueness pass.
"""

import re
from typing import Dict

from generators.base import NAME_ATTRIBUTE
from generators.tags import Tag

# Unicode-aware: XAML names accept non-Latin letters
_NAME_CLEANUP_RE = re.compile(r'\W')


def sanitize_name(name: str, fallback: str = 'Element') -> str:
    """Turn a Figma layer name into a valid XAML identifier."""
    cleaned = _NAME_CLEANUP_RE.sub('_', name.strip())
    if not cleaned.strip('_'):
        cleaned = fallback
    if cleaned[0].isdigit():
        cleaned = '_' + cleaned
    return cleaned


class NameDeduplicator:
    """Rewrites repeated names to name_1, name_2, ... in document order.

    The first occurrence of a name is never touched. A suffixed candidate
    that is already in use is skipped, so the result is unique even when
    the source already contained names like ``Rect_1``.
    """

    def __init__(self, attribute: str = NAME_ATTRIBUTE):
        self.attribute = attribute
        self.counters: Dict[str, int] = {}

    def _claim(self, name: str) -> str:
        if name not in self.counters:
            self.counters[name] = 0
            return name

        # counters[name] holds the last suffix handed out for this base
        counter = self.counters[name] + 1
        candidate = f"{name}_{counter}"
        while candidate in self.counters:
            counter += 1
            candidate = f"{name}_{counter}"
        self.counters[name] = counter
        self.counters[candidate] = 0
        return candidate

    def apply(self, root: Tag) -> Tag:
        for tag in root.walk():
            name = tag.attributes.get(self.attribute)
            if name is not None:
                unique = self._claim(name)
                if unique != name:
                    tag.attributes[self.attribute] = unique
        return root
