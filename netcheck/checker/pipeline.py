"""Checker entry points.

Runs the checker passes over a netlist in their required order and, when no
error was found, flattens its subcircuit instances:

    statements -> microstrips/nodesets -> subcircuit instances (cycles)
    -> subcircuit registry and bodies -> actions -> sweep variables
    -> expansion
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from netcheck.checker.context import CheckerContext
from netcheck.checker.diagnostics import Diagnostic, Diagnostics
from netcheck.checker.expander import expand_subcircuits
from netcheck.checker.statements import check_statements
from netcheck.checker.subcircuits import build_subcircuits, validate_subcircuits
from netcheck.checker.validators import validate_actions, validate_nodesets, validate_strips
from netcheck.checker.variables import validate_variables
from netcheck.netlist.circuit import Netlist, Statement

logger = logging.getLogger(__name__)


def check_scope(ctx: CheckerContext, scope: List[Statement]) -> int:
    """Statement, microstrip, nodeset and subcircuit instance checks of one scope"""
    errors = check_statements(ctx, scope)
    errors += validate_strips(ctx, scope)
    errors += validate_nodesets(ctx, scope)
    errors += validate_subcircuits(ctx, scope)
    return errors


class NetlistChecker:
    """Checks (and expands) one netlist.

    The checker owns the context of its runs; calling check() again resets
    the diagnostics and the cycle count first.

    Example:
        checker = NetlistChecker(netlist, equation_variables=["f0"])
        if checker.check() == 0:
            run_simulation(netlist.root)
    """

    def __init__(self, netlist: Netlist, equation_variables: Optional[Iterable[str]] = None):
        self.netlist = netlist
        self.ctx = CheckerContext.create(netlist, equation_variables)
        self.expanded = False

    @property
    def diagnostics(self) -> Diagnostics:
        return self.ctx.diagnostics

    def check(self, expand: bool = True) -> int:
        """Run every checker pass.

        Args:
            expand: Flatten the subcircuit instances if no error was found

        Returns:
            Number of errors found (0 on success).
        """
        ctx = self.ctx
        ctx.diagnostics.clear()
        ctx.sub_cycles = 0
        netlist = self.netlist

        build_subcircuits(netlist)

        check_scope(ctx, netlist.root)
        check_statements(ctx, netlist.subcircuits)
        for definition in netlist.subcircuits:
            logger.debug(f"Checking subcircuit `{definition.instance}'")
            check_scope(ctx, definition.sub)

        validate_actions(ctx, netlist.root)
        validate_variables(ctx, netlist.root)

        errors = ctx.diagnostics.error_count
        if errors:
            logger.info(f"Netlist check found {errors} error(s)")
            return errors

        if expand:
            expand_subcircuits(netlist)
            self.expanded = True
        logger.info("Netlist check passed")
        return 0


@dataclass
class CheckResult:
    """Outcome of check_netlist()"""

    netlist: Netlist
    diagnostics: Diagnostics = field(default_factory=Diagnostics)
    expanded: bool = False

    @property
    def error_count(self) -> int:
        return self.diagnostics.error_count

    @property
    def is_valid(self) -> bool:
        return self.error_count == 0

    @property
    def errors(self) -> List[Diagnostic]:
        return self.diagnostics.errors

    def format(self) -> str:
        """Human readable summary"""
        lines = [str(d) for d in self.diagnostics]
        if self.is_valid:
            lines.append(f"netlist OK ({len(self.netlist.root)} statements)")
        else:
            lines.append(f"{self.error_count} error(s) found")
        return "\n".join(lines)


def check_netlist(
    netlist: Netlist, equation_variables: Optional[Iterable[str]] = None, expand: bool = True
) -> CheckResult:
    """Check a netlist and expand its subcircuits if it is valid.

    Args:
        netlist: Netlist as built by the reader; modified in place
        equation_variables: Names defined by the equation subsystem, in
            addition to those of the netlist's own equations
        expand: Flatten the subcircuit instances on success

    Returns:
        CheckResult with the collected diagnostics
    """
    checker = NetlistChecker(netlist, equation_variables)
    checker.check(expand=expand)
    return CheckResult(netlist=netlist, diagnostics=checker.diagnostics, expanded=checker.expanded)


def check_variables(netlist: Netlist, equation_variables: Optional[Iterable[str]] = None) -> int:
    """Re-run only the sweep variable checks, e.g. after the equations changed.

    Returns:
        Number of errors found.
    """
    ctx = CheckerContext.create(netlist, equation_variables)
    return validate_variables(ctx, netlist.root)
