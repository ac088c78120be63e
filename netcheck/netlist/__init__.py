"""Netlist data model, reader and lister for netcheck"""

from netcheck.netlist.circuit import (
    Ident,
    Netlist,
    Node,
    Pair,
    Scalar,
    Statement,
    VarTag,
    Vector,
)
from netcheck.netlist.parser import NetlistParser, parse_netlist
from netcheck.netlist.writer import format_netlist, format_statement, netlist_status

__all__ = [
    "parse_netlist",
    "NetlistParser",
    "format_netlist",
    "format_statement",
    "netlist_status",
    "Netlist",
    "Statement",
    "Node",
    "Pair",
    "Scalar",
    "Ident",
    "Vector",
    "VarTag",
]
