"""Default configuration values for the netlist checker.

This module centralizes the names and type sets shared by the checker passes.
"""

# Global ground node, never renamed during subcircuit expansion
GROUND_NODE = "gnd"

# Separator used when building hierarchical instance and node names
HIERARCHY_SEP = "."

# Subcircuit definition and instance statement types
SUBCIRCUIT_DEF = "Def"
SUBCIRCUIT_INST = "Sub"

# Definition body terminator used by the netlist reader (.Def:End)
SUBCIRCUIT_END = "End"

# Equation statements are collected separately from the netlist
EQUATION_TYPE = "Eqn"

# Microstrip components which require a substrate ('Subst') reference
MICROSTRIP_TYPES = (
    "MLIN",
    "MCORN",
    "MMBEND",
    "MSTEP",
    "MOPEN",
    "MGAP",
    "MCOUPLED",
    "MTEE",
    "MCROSS",
    "MVIA",
    "CLIN",
)

SUBSTRATE_TYPE = "SUBST"
NODESET_TYPE = "NodeSet"
PORT_TYPE = "Pac"
SPFILE_TYPE = "SPfile"

# Actions which may carry a sweep (Type/Start/Stop/Points/Values)
SWEEP_ANALYSES = ("SW", "AC", "SP")
PARAMETER_SWEEP = "SW"

# Sweep kinds
SWEEP_LINEAR = "lin"
SWEEP_LOG = "log"
SWEEP_LIST = "list"
SWEEP_CONST = "const"
