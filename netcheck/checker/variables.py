"""Uniqueness of sweep variables.

A parameter sweep variable must not shadow an equation variable, must not
be swept by two independent sweeps, and two sweeps of the same analysis
must use the same variable.
"""

import logging
from typing import List

from netcheck.checker.context import CheckerContext
from netcheck.checker.diagnostics import ErrorKind
from netcheck.config import PARAMETER_SWEEP
from netcheck.netlist.circuit import Statement

logger = logging.getLogger(__name__)


def validate_variables(ctx: CheckerContext, scope: List[Statement]) -> int:
    """Check the Param/Sim identifiers of every parameter sweep in scope.

    Returns:
        Number of errors emitted.
    """
    errors = 0
    instances: List[str] = []
    params: List[str] = []
    sims: List[str] = []

    for stmt in scope:
        if not (stmt.action and stmt.type == PARAMETER_SWEEP):
            continue
        param = stmt.find_reference("Param")
        sim = stmt.find_reference("Sim")
        if param is None or sim is None:
            continue
        var, run = param.name, sim.name

        if ctx.is_equation_variable(var):
            errors += ctx.error(
                ErrorKind.REFERENCE,
                f"equation variable `{var}' already defined by `{stmt.name}'",
                stmt,
            )

        if var in params:
            i = params.index(var)
            if sims[i] != run:
                errors += ctx.error(
                    ErrorKind.REFERENCE,
                    f"variable `{var}' in `{stmt.name}' already defined by "
                    f"`{PARAMETER_SWEEP}:{instances[i]}'",
                    stmt,
                )

        if run in sims:
            i = sims.index(run)
            if params[i] != var:
                errors += ctx.error(
                    ErrorKind.REFERENCE,
                    f"conflicting variables `{var}' in `{stmt.name}' and `{params[i]}' "
                    f"in `{PARAMETER_SWEEP}:{instances[i]}' for `{run}'",
                    stmt,
                )

        instances.append(stmt.instance)
        params.append(var)
        sims.append(run)

    logger.debug(f"Validated {len(instances)} sweep variable(s): {errors} error(s)")
    return errors
