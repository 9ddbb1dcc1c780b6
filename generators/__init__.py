"""Figma node tree -> XAML markup generators."""

from generators.base import XamlOptions, SourceNode, parse_nodes, to_hex
from generators.errors import ContractViolation, Diagnostic
from generators.tags import Tag
from generators.xaml_generator import XamlDocument, generate_xaml_code, generate_xaml_document

__all__ = [
    'ContractViolation',
    'Diagnostic',
    'SourceNode',
    'Tag',
    'XamlDocument',
    'XamlOptions',
    'generate_xaml_code',
    'generate_xaml_document',
    'parse_nodes',
    'to_hex',
]
