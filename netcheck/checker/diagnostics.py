"""Structured checker diagnostics.

The checker never raises on netlist errors. Each problem is recorded as a
Diagnostic and logged; the pipeline sums the per-pass error counts.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional

logger = logging.getLogger(__name__)


class Severity(Enum):
    """Diagnostic severity levels."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ErrorKind(Enum):
    """Category of a checker error."""

    SCHEMA = "schema"  # unknown type, node count, property problems
    REFERENCE = "reference"  # unresolved identifiers and references
    STRUCTURAL = "structural"  # action requirements, sweep property sets, duplicates
    CYCLIC = "cyclic"  # sweep or subcircuit dependency cycles
    SUBCIRCUIT = "subcircuit"  # unresolved subcircuit type, port count mismatch


@dataclass(frozen=True)
class Diagnostic:
    """A single checker message."""

    severity: Severity
    kind: ErrorKind
    message: str
    line: Optional[int] = None

    def __str__(self) -> str:
        prefix = f"line {self.line}: " if self.line else ""
        return f"{prefix}checker {self.severity.value}, {self.message}"


@dataclass
class Diagnostics:
    """Collector for the diagnostics of one checker run."""

    items: List[Diagnostic] = field(default_factory=list)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def error(self, kind: ErrorKind, message: str, line: Optional[int] = None) -> int:
        """Record an error and return 1 so callers can add it to their count."""
        diag = Diagnostic(Severity.ERROR, kind, message, line)
        self.items.append(diag)
        logger.error(str(diag))
        return 1

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.items if d.severity == Severity.ERROR]

    @property
    def error_count(self) -> int:
        return sum(1 for d in self.items if d.severity == Severity.ERROR)

    def of_kind(self, kind: ErrorKind) -> List[Diagnostic]:
        return [d for d in self.items if d.kind == kind]

    def clear(self) -> None:
        self.items.clear()
