"""Checker context for netcheck

Holds the state shared by the checker passes of one run.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional

from netcheck.checker.diagnostics import Diagnostics, ErrorKind
from netcheck.netlist.circuit import Netlist, Statement


@dataclass
class CheckerContext:
    """Context passed to every checker pass

    Attributes:
        netlist: Netlist being checked (root list and subcircuit registry)
        equation_variables: Names currently defined by the equation subsystem
        diagnostics: Collector for emitted errors
        sub_cycles: Number of cyclic subcircuit definitions found; while
            non-zero, nonlinearity counting does not descend into subcircuits
    """

    netlist: Netlist
    equation_variables: FrozenSet[str] = frozenset()
    diagnostics: Diagnostics = field(default_factory=Diagnostics)
    sub_cycles: int = 0

    @classmethod
    def create(
        cls, netlist: Netlist, equation_variables: Optional[Iterable[str]] = None
    ) -> "CheckerContext":
        names = set(netlist.equation_variables())
        if equation_variables is not None:
            names.update(equation_variables)
        return cls(netlist=netlist, equation_variables=frozenset(names))

    def is_equation_variable(self, name: str) -> bool:
        return name in self.equation_variables

    def error(self, kind: ErrorKind, message: str, stmt: Optional[Statement] = None) -> int:
        """Record an error, located at the statement's line if given"""
        line = stmt.line if stmt is not None and stmt.line else None
        return self.diagnostics.error(kind, message, line)
