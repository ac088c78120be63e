"""Cross-statement validators.

Passes over a whole scope which check references between statements:
microstrip substrates, nodesets, parameter sweeps, S-parameter port numbers,
sweep property sets and the overall action requirements.
"""

import logging
import math
from typing import List, Optional

from netcheck.checker.context import CheckerContext
from netcheck.checker.diagnostics import ErrorKind
from netcheck.checker.statements import count_definition
from netcheck.checker.units import scale_value
from netcheck.config import (
    MICROSTRIP_TYPES,
    PARAMETER_SWEEP,
    PORT_TYPE,
    SUBCIRCUIT_INST,
    SUBSTRATE_TYPE,
    SWEEP_ANALYSES,
    SWEEP_CONST,
    SWEEP_LINEAR,
    SWEEP_LIST,
    SWEEP_LOG,
)
from netcheck.netlist.circuit import Ident, Statement, VarTag, Vector

logger = logging.getLogger(__name__)


def count_definitions(scope: List[Statement], type_: Optional[str], action: bool) -> int:
    """Number of statements with the given action flag (and type, if given)"""
    return sum(
        1 for s in scope if s.action == action and (type_ is None or s.type == type_)
    )


def count_action(scope: List[Statement], instance: str) -> int:
    """Number of actions with the given instance name"""
    return sum(1 for s in scope if s.action and s.instance == instance)


def validate_reference(ctx: CheckerContext, stmt: Statement, key: str) -> Optional[Ident]:
    """Identifier value of key, emitting an error if there is none"""
    ref = stmt.find_reference(key)
    if ref is None:
        ctx.error(
            ErrorKind.REFERENCE,
            f"not a valid `{key}' property found in `{stmt.name}'",
            stmt,
        )
    return ref


def format_path(path: List[str]) -> str:
    return " -> ".join(path)


# ============================================================================
# Microstrips and nodesets
# ============================================================================


def validate_strips(ctx: CheckerContext, scope: List[Statement]) -> int:
    """Every microstrip component must reference exactly one substrate"""
    errors = 0
    for stmt in scope:
        if stmt.action or stmt.type not in MICROSTRIP_TYPES:
            continue
        ref = validate_reference(ctx, stmt, "Subst")
        if ref is None:
            errors += 1
        elif count_definition(scope, SUBSTRATE_TYPE, ref.name) != 1:
            errors += ctx.error(
                ErrorKind.REFERENCE,
                f"no such substrate `{ref.name}' found as specified in `{stmt.name}'",
                stmt,
            )
        # TODO: validate the 'Model' reference once model identifiers are registered
    return errors


def count_nodes(scope: List[Statement], name: str) -> int:
    """Occurrences of a node name in the components of a scope (nodesets excluded)"""
    count = 0
    for stmt in scope:
        if not stmt.action and not stmt.nodeset:
            count += sum(1 for n in stmt.nodes if n.name == name)
    return count


def validate_nodesets(ctx: CheckerContext, scope: List[Statement]) -> int:
    """Nodesets must target an existing node, and at most one nodeset per node.

    Only checks within the given scope, not across subcircuit boundaries.
    """
    errors = 0
    nodesets = [s for s in scope if s.nodeset and len(s.nodes) == 1]
    for stmt in nodesets:
        node = stmt.nodes[0].name
        if count_nodes(scope, node) <= 0:
            errors += ctx.error(
                ErrorKind.REFERENCE,
                f"no such node `{node}' found as referenced by `{stmt.name}'",
                stmt,
            )
        targets = [s for s in nodesets if s.nodes[0].name == node]
        if targets[0] is not stmt:
            errors += ctx.error(
                ErrorKind.REFERENCE,
                f"the node `{node}' is not uniquely defined by `{stmt.name}'",
                stmt,
            )
    return errors


# ============================================================================
# Parameter sweeps and ports
# ============================================================================


def validate_para_cycles(
    ctx: CheckerContext, scope: List[Statement], instance: str, deps: List[str]
) -> int:
    """Follow the 'Sim' chain starting at the action named instance.

    Args:
        deps: Action instances already visited along the chain

    Returns:
        1 if the chain revisits an action, 0 otherwise.
    """
    for stmt in scope:
        if not (stmt.action and stmt.instance == instance):
            continue
        if instance in deps:
            cycle = deps[deps.index(instance) :] + [instance]
            return ctx.error(
                ErrorKind.CYCLIC,
                f"cyclic definition of `{instance}' detected, involves: {format_path(cycle)}",
            )
        deps.append(instance)
        if stmt.type == PARAMETER_SWEEP:
            ref = stmt.find_reference("Sim")
            if ref is not None:
                return validate_para_cycles(ctx, scope, ref.name, deps)
        break
    return 0


def validate_para(ctx: CheckerContext, scope: List[Statement]) -> int:
    """Validate each parameter sweep: 'Sim' target, self-reference, cycles"""
    errors = 0
    for stmt in scope:
        if not (stmt.action and stmt.type == PARAMETER_SWEEP):
            continue
        ref = validate_reference(ctx, stmt, "Sim")
        if ref is None:
            errors += 1
            continue
        if ref.name == stmt.instance:
            errors += ctx.error(
                ErrorKind.REFERENCE, f"definition `{stmt.name}' refers to itself", stmt
            )
            continue
        if count_action(scope, ref.name) != 1:
            errors += ctx.error(
                ErrorKind.REFERENCE,
                f"no such action `{ref.name}' found as referred in `{stmt.name}'",
                stmt,
            )
        errors += validate_para_cycles(ctx, scope, ref.name, [stmt.instance])
    return errors


def validate_ports(ctx: CheckerContext, scope: List[Statement]) -> int:
    """Port numbers of S-parameter ports must be unique.

    Every unordered pair of ports is compared exactly once.
    """
    errors = 0
    ports = []
    for stmt in scope:
        if not stmt.action and stmt.type == PORT_TYPE:
            val = stmt.find_value("Num")
            if val is not None:
                num = val.items[0].value if isinstance(val, Vector) else val.value
                # Non-finite numbers were already reported as out of range
                if math.isfinite(num):
                    ports.append((stmt, int(num)))

    for i, (port, num) in enumerate(ports):
        for other, other_num in ports[i + 1 :]:
            if num == other_num:
                errors += ctx.error(
                    ErrorKind.REFERENCE,
                    f"`{PORT_TYPE}' definitions with duplicate `Num={num}' property found: "
                    f"`{port.name}' and `{other.name}'",
                    other,
                )
    return errors


def validate_lists(ctx: CheckerContext, scope: List[Statement]) -> int:
    """Sweep kind specific property sets of SW, AC and SP actions"""
    errors = 0
    for stmt in scope:
        if not (stmt.action and stmt.type in SWEEP_ANALYSES):
            continue
        kind = stmt.find_reference("Type")
        if kind is None:
            continue

        if kind.name in (SWEEP_CONST, SWEEP_LIST):
            val = stmt.find_value("Values")
            if val is None:
                errors += ctx.error(
                    ErrorKind.STRUCTURAL,
                    f"required property `Values' not found in `{stmt.name}'",
                    stmt,
                )
            else:
                if kind.name == SWEEP_CONST and isinstance(val, Vector) and len(val) > 1:
                    errors += ctx.error(
                        ErrorKind.STRUCTURAL,
                        f"value of `Values' needs to be a single constant value in "
                        f"`{stmt.name}', no lists possible",
                        stmt,
                    )
                val.var = VarTag.VECTOR
                if not scale_value(val):
                    errors += 1
            for key in ("Start", "Stop", "Points"):
                if stmt.count_property(key):
                    errors += ctx.error(
                        ErrorKind.STRUCTURAL,
                        f"extraneous property `{key}' is invalid in `{stmt.name}'",
                        stmt,
                    )

        elif kind.name in (SWEEP_LINEAR, SWEEP_LOG):
            for key in ("Start", "Stop", "Points"):
                if not stmt.count_property(key):
                    errors += ctx.error(
                        ErrorKind.STRUCTURAL,
                        f"required property `{key}' not found in `{stmt.name}'",
                        stmt,
                    )
            if stmt.count_property("Values"):
                errors += ctx.error(
                    ErrorKind.STRUCTURAL,
                    f"extraneous property `Values' is invalid in `{stmt.name}'",
                    stmt,
                )
    return errors


# ============================================================================
# Action requirements
# ============================================================================


def count_nonlinearities(ctx: CheckerContext, scope: List[Statement]) -> int:
    """Nonlinear statements in scope, including those in instantiated subcircuits.

    Does not descend into subcircuits once cyclic definitions were found.
    """
    count = 0
    for stmt in scope:
        if stmt.nonlinear:
            count += 1
        if ctx.sub_cycles <= 0 and stmt.type == SUBCIRCUIT_INST:
            sub = ctx.netlist.get_subcircuit(stmt)
            if sub is not None:
                count += count_nonlinearities(ctx, sub.sub)
    return count


def validate_actions(ctx: CheckerContext, scope: List[Statement]) -> int:
    """Check the analyses requested by the netlist.

    At least one action is required. S-parameter analyses need a port, and a
    nonlinear circuit analysed by AC or SP needs exactly one DC action.
    """
    errors = 0
    if count_definitions(scope, None, True) < 1:
        errors += ctx.error(ErrorKind.STRUCTURAL, "no actions .XX defined")
    else:
        analyses = count_definitions(scope, "SP", True)
        if analyses >= 1:
            ports = count_definitions(scope, PORT_TYPE, False)
            if ports < 1:
                errors += ctx.error(
                    ErrorKind.STRUCTURAL,
                    f"{ports} `{PORT_TYPE}' definitions found, at least 1 required",
                )
        analyses += count_definitions(scope, "AC", True)

        nonlinear = count_nonlinearities(ctx, scope)
        dc = count_definitions(scope, "DC", True)
        if dc > 1:
            errors += ctx.error(
                ErrorKind.STRUCTURAL,
                f"the .DC action is defined {dc}x, single or none required",
            )
        if analyses >= 1 and nonlinear >= 1 and dc < 1:
            errors += ctx.error(
                ErrorKind.STRUCTURAL,
                "a .DC action is required for this circuit definition "
                f"(accounted {nonlinear} non-linearities)",
            )

    errors += validate_para(ctx, scope)
    errors += validate_ports(ctx, scope)
    errors += validate_lists(ctx, scope)
    logger.debug(f"Validated actions: {errors} error(s)")
    return errors
