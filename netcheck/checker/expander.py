"""Subcircuit expansion.

Replaces every subcircuit instance of the root list by clones of the
statements of its definition, recursing into nested instances. Clones get
hierarchical instance names and node names:

    <definition>.<path>.<instance>.<name>

where <path> is the "."-joined list of enclosing "<definition>.<instance>"
qualifiers (left out at the top level). Definition ports are wired to the
caller's nodes and `gnd` is global.

Only valid netlists may be expanded; run the checker first.
"""

import logging
from typing import List, Optional

from netcheck.config import GROUND_NODE, HIERARCHY_SEP, SUBCIRCUIT_INST
from netcheck.netlist.circuit import Netlist, Node, Statement

logger = logging.getLogger(__name__)


def subcircuit_name(type_: str, instances: Optional[str], instance: str, base: str) -> str:
    """Hierarchical name; instances is left out when None"""
    if instances:
        return HIERARCHY_SEP.join((type_, instances, instance, base))
    return HIERARCHY_SEP.join((type_, instance, base))


def instance_list(instances: List[str]) -> Optional[str]:
    return HIERARCHY_SEP.join(instances) if instances else None


def xlat_subcircuit_nodes(type_: Statement, inst: Statement, sub: Statement) -> None:
    """Record on sub's nodes which caller node each definition port maps to"""
    for i, (ntype, ninst) in enumerate(zip(type_.nodes, inst.nodes), start=1):
        for n in sub.nodes:
            if n.name == ntype.name:
                n.xlate = ninst.name
                n.xlatenr = i


def cleanup_xlat_nodes(sub: Statement) -> None:
    for n in sub.nodes:
        n.xlate = None
        n.xlatenr = 0


def _node_name(
    type_: Statement, inst: Statement, n: Node, instances: Optional[str]
) -> Optional[str]:
    if n.xlate is not None:
        # Port: known caller node at the top level, otherwise left blank
        # for the enclosing expansion to fill in
        return n.xlate if instances is None else None
    if n.name == GROUND_NODE:
        return GROUND_NODE
    return subcircuit_name(type_.instance, instances, inst.instance, n.name)


def copy_subcircuit_nodes(
    type_: Statement, inst: Statement, sub: Statement, copy: Statement, instances: Optional[str]
) -> None:
    """Build the node list of a clone of sub"""
    copy.nodes = [
        Node(_node_name(type_, inst, n, instances), xlatenr=n.xlatenr) for n in sub.nodes
    ]


def copy_circuit_nodes(
    type_: Statement, inst: Statement, sub: Statement, copy: Statement, instances: Optional[str]
) -> None:
    """Fill in the blank port nodes of a clone produced by a nested expansion.

    sub is the nested subcircuit instance within type_'s body; a blank node
    with index k maps to sub's k-th node.
    """
    for ncopy in copy.nodes:
        if ncopy.name is not None:
            continue
        n = sub.nodes[ncopy.xlatenr - 1]
        ncopy.xlatenr = n.xlatenr
        ncopy.name = _node_name(type_, inst, n, instances)


def copy_subcircuits(
    netlist: Netlist, type_: Statement, inst: Statement, instances: List[str]
) -> List[Statement]:
    """Clone the body of definition type_ for the instance inst.

    Args:
        instances: Qualifiers of the enclosing expansions, outermost first

    Returns:
        The expanded statements in body order.
    """
    copies: List[Statement] = []
    qualifier = instance_list(instances)

    for stmt in type_.sub:
        xlat_subcircuit_nodes(type_, inst, stmt)

        if stmt.type == SUBCIRCUIT_INST:
            nested = netlist.get_subcircuit(stmt)
            if nested is None:
                raise ValueError(f"no such subcircuit referred in `{stmt.name}'")
            path = instances + [HIERARCHY_SEP.join((type_.instance, inst.instance))]
            children = copy_subcircuits(netlist, nested, stmt, path)
            for child in children:
                copy_circuit_nodes(type_, inst, stmt, child, qualifier)
            copies.extend(children)
        else:
            copy = stmt.clone()
            copy.instance = subcircuit_name(type_.instance, qualifier, inst.instance, stmt.instance)
            copy.subcircuit = type_.instance
            copy_subcircuit_nodes(type_, inst, stmt, copy, qualifier)
            copies.append(copy)

        cleanup_xlat_nodes(stmt)
    return copies


def expand_subcircuits(netlist: Netlist) -> int:
    """Replace the subcircuit instances of the root list by their expansion.

    Returns:
        Number of statements created.
    """
    expanded: List[Statement] = []
    created = 0
    for stmt in netlist.root:
        if stmt.type != SUBCIRCUIT_INST:
            expanded.append(stmt)
            continue
        sub = netlist.get_subcircuit(stmt)
        if sub is None:
            raise ValueError(f"no such subcircuit referred in `{stmt.name}'")
        copies = copy_subcircuits(netlist, sub, stmt, [])
        expanded.extend(copies)
        created += len(copies)
    netlist.root[:] = expanded
    logger.debug(f"Expanded subcircuits into {created} statement(s)")
    return created
