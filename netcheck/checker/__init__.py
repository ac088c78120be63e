"""Semantic checker passes and subcircuit expansion"""

from netcheck.checker.context import CheckerContext
from netcheck.checker.diagnostics import Diagnostic, Diagnostics, ErrorKind, Severity
from netcheck.checker.expander import expand_subcircuits
from netcheck.checker.pipeline import CheckResult, NetlistChecker, check_netlist, check_variables
from netcheck.checker.schema import DEFINITIONS, SPECIALS, Definition, find_definition

__all__ = [
    "check_netlist",
    "check_variables",
    "expand_subcircuits",
    "NetlistChecker",
    "CheckResult",
    "CheckerContext",
    "Diagnostic",
    "Diagnostics",
    "ErrorKind",
    "Severity",
    "Definition",
    "DEFINITIONS",
    "SPECIALS",
    "find_definition",
]
