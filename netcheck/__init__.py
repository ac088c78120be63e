"""netcheck: semantic checker and subcircuit expander for circuit netlists"""

__version__ = "0.1.0"

from netcheck.logging import logger  # noqa: E402
from netcheck.checker import (  # noqa: E402
    CheckResult,
    Diagnostic,
    Diagnostics,
    ErrorKind,
    NetlistChecker,
    Severity,
    check_netlist,
    check_variables,
    expand_subcircuits,
)
from netcheck.netlist import (  # noqa: E402
    Netlist,
    Statement,
    format_netlist,
    netlist_status,
    parse_netlist,
)
from netcheck.sweep import sweep_points  # noqa: E402

__all__ = [
    "__version__",
    "logger",
    "check_netlist",
    "check_variables",
    "expand_subcircuits",
    "NetlistChecker",
    "CheckResult",
    "Diagnostic",
    "Diagnostics",
    "ErrorKind",
    "Severity",
    "parse_netlist",
    "format_netlist",
    "netlist_status",
    "Netlist",
    "Statement",
    "sweep_points",
]
