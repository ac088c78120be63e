"""Netlist lister and per-type statistics"""

import logging
from typing import Dict, List

from netcheck.checker.schema import definition_types
from netcheck.config import SUBCIRCUIT_DEF, SUBCIRCUIT_END
from netcheck.netlist.circuit import Ident, Netlist, Scalar, Statement, Value, Vector

logger = logging.getLogger(__name__)


def format_scalar(value: Scalar) -> str:
    text = f"{value.value:g}"
    suffix = value.scale if value.scale is not None else value.unit
    if suffix:
        return f'"{text} {suffix}"'
    return text


def format_value(value: Value) -> str:
    if isinstance(value, Ident):
        return f'"{value.name}"'
    if isinstance(value, Vector):
        return "[" + ";".join(f"{item.value:g}" for item in value) + "]"
    return format_scalar(value)


def format_statement(stmt: Statement) -> str:
    """Single statement in the reader's syntax"""
    parts = [("." if stmt.action else "") + stmt.name]
    parts.extend(n.name if n.name is not None else "?" for n in stmt.nodes)
    parts.extend(f"{p.key}={format_value(p.value)}" for p in stmt.pairs)
    return " ".join(parts)


def _format_scope(scope: List[Statement], indent: str, lines: List[str]):
    for stmt in scope:
        lines.append(indent + format_statement(stmt))
        if stmt.type == SUBCIRCUIT_DEF and stmt.action:
            _format_scope(stmt.sub, indent + "  ", lines)
            lines.append(f"{indent}.{SUBCIRCUIT_DEF}:{SUBCIRCUIT_END}")


def format_netlist(netlist: Netlist) -> str:
    """Render the root list followed by every lifted subcircuit definition"""
    lines: List[str] = []
    _format_scope(netlist.root, "", lines)
    _format_scope(netlist.subcircuits, "", lines)
    return "\n".join(lines) + ("\n" if lines else "")


def netlist_status(netlist: Netlist) -> Dict[str, int]:
    """Number of root statements per type, in registry order.

    Types without instances are left out.
    """
    status: Dict[str, int] = {}
    for type_ in definition_types():
        if type_ in status:
            continue
        count = sum(1 for stmt in netlist.root if stmt.type == type_)
        if count:
            status[type_] = count
            logger.info(f"  {count} {type_} instances")
    return status
