"""
Error and diagnostic types for the XAML generator.

ContractViolation aborts the current conversion. Diagnostics are collected
alongside the output and never change whether a conversion succeeds.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List

logger = logging.getLogger(__name__)


class ContractViolation(Exception):
    """Input or caller broke a precondition; generation must stop."""


class DiagnosticKind(str, Enum):
    """Category of a non-fatal problem found during generation."""
    UNSUPPORTED_VARIANT = "unsupported_variant"
    MISSING_OPTIONAL_DATA = "missing_optional_data"


@dataclass
class Diagnostic:
    """A non-fatal problem attached to the node it was found on."""
    kind: DiagnosticKind
    node: str
    message: str

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.node}: {self.message}"


class DiagnosticLog:
    """Collects diagnostics for one conversion and mirrors them to logging."""

    def __init__(self):
        self.items: List[Diagnostic] = []

    def unsupported(self, node: str, message: str) -> None:
        self.items.append(Diagnostic(DiagnosticKind.UNSUPPORTED_VARIANT, node, message))
        logger.warning("Unsupported in %r: %s", node, message)

    def missing(self, node: str, message: str) -> None:
        self.items.append(Diagnostic(DiagnosticKind.MISSING_OPTIONAL_DATA, node, message))
        logger.info("Missing data in %r: %s", node, message)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)
