"""Subcircuit definition registry and validation.

Definitions ("Def" statements) are lifted out of the netlist into a separate
registry. Subcircuit instances ("Sub" statements) must name a registered
definition, match its port count and must not (transitively) instantiate
their own definition.
"""

import logging
from typing import List

from netcheck.checker.context import CheckerContext
from netcheck.checker.diagnostics import ErrorKind
from netcheck.checker.validators import format_path, validate_reference
from netcheck.config import SUBCIRCUIT_DEF, SUBCIRCUIT_INST
from netcheck.netlist.circuit import Netlist, Statement

logger = logging.getLogger(__name__)


def _lift(scope: List[Statement], registry: List[Statement]) -> List[Statement]:
    kept = []
    for stmt in scope:
        if stmt.type == SUBCIRCUIT_DEF:
            stmt.sub = _lift(stmt.sub, registry)
            registry.append(stmt)
        else:
            kept.append(stmt)
    return kept


def build_subcircuits(netlist: Netlist) -> int:
    """Move every definition (including nested ones) into netlist.subcircuits.

    Returns:
        Number of definitions lifted.
    """
    lifted: List[Statement] = []
    netlist.root[:] = _lift(netlist.root, lifted)
    for definition in netlist.subcircuits:
        definition.sub[:] = _lift(definition.sub, lifted)
    netlist.subcircuits.extend(lifted)
    if lifted:
        logger.debug(f"Lifted {len(lifted)} subcircuit definition(s)")
    return len(lifted)


def validate_sub_cycles(
    ctx: CheckerContext, definition: Statement, instance: str, path: List[str]
) -> int:
    """Depth-first search for a definition which instantiates itself.

    Args:
        definition: Subcircuit definition to descend into
        instance: Instance name which started the search (for messages)
        path: Definition names on the current search path

    Returns:
        Number of cycles reported.
    """
    name = definition.instance
    if name in path:
        cycle = path[path.index(name) :] + [name]
        return ctx.error(
            ErrorKind.CYCLIC,
            f"cyclic definition of `{name}:{instance}' detected, involves: {format_path(cycle)}",
        )

    path = path + [name]
    errors = 0
    checked = set()
    for stmt in definition.sub:
        if stmt.type != SUBCIRCUIT_INST:
            continue
        ref = stmt.find_reference("Type")
        if ref is None or ref.name in checked:
            continue
        checked.add(ref.name)
        sub = ctx.netlist.find_subcircuit(ref.name)
        if sub is not None:
            errors += validate_sub_cycles(ctx, sub, instance, path)
    return errors


def validate_subcircuits(ctx: CheckerContext, scope: List[Statement]) -> int:
    """Validate the subcircuit instances of a scope.

    The number of cycles found is added to ctx.sub_cycles.
    """
    errors = 0
    for stmt in scope:
        if stmt.type != SUBCIRCUIT_INST:
            continue
        ref = validate_reference(ctx, stmt, "Type")
        if ref is None:
            errors += 1
            continue
        sub = ctx.netlist.find_subcircuit(ref.name)
        if sub is None:
            errors += ctx.error(
                ErrorKind.SUBCIRCUIT,
                f"no such subcircuit `{ref.name}' found as referred in `{stmt.name}'",
                stmt,
            )
            continue

        n1, n2 = len(stmt.nodes), len(sub.nodes)
        if n1 != n2:
            errors += ctx.error(
                ErrorKind.SUBCIRCUIT,
                f"subcircuit type `{sub.instance}' requires {n2} nodes in `{stmt.name}', "
                f"found {n1}",
                stmt,
            )

        cycles = validate_sub_cycles(ctx, sub, stmt.instance, [])
        ctx.sub_cycles += cycles
        errors += cycles
    return errors
