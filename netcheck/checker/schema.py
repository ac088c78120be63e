"""Schema registry of all legal netlist statement types.

Each entry describes one component or action: its node count, whether it is
nonlinear or a substrate, and its required and optional properties with their
value kind and allowed range. A second table lists the enumerated identifier
values some (type, property) combinations accept.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple

# Node count sentinel: any number of nodes, at least one
VARIABLE_NODES = -1

INF = math.inf


class PropertyKind(Enum):
    """Value kind of a property descriptor"""

    REAL = "real"  # single number (or a variable identifier)
    INT = "int"  # single number with zero fractional part
    STR = "str"  # identifier
    LIST = "list"  # number or ordered list of numbers

    @property
    def is_value(self) -> bool:
        return self is not PropertyKind.STR


@dataclass(frozen=True)
class Range:
    """Inclusive numeric range"""

    lo: float = -INF
    hi: float = INF

    def __contains__(self, value: float) -> bool:
        return math.isfinite(value) and self.lo <= value <= self.hi


@dataclass(frozen=True)
class PropertyDef:
    """Descriptor of a single property"""

    key: str
    kind: PropertyKind = PropertyKind.REAL
    range: Optional[Range] = None


@dataclass(frozen=True)
class Definition:
    """Schema entry for one statement type"""

    type: str
    action: bool
    nodes: int
    nonlinear: bool = False
    substrate: bool = False
    required: Tuple[PropertyDef, ...] = ()
    optional: Tuple[PropertyDef, ...] = ()

    @property
    def variable_nodes(self) -> bool:
        return self.nodes == VARIABLE_NODES

    def is_property(self, key: str) -> bool:
        """Check whether key is either a required or an optional property"""
        return any(p.key == key for p in self.required + self.optional)

    def property_defs(self, key: str) -> Tuple[PropertyDef, ...]:
        """All descriptors (required first) for the given key"""
        return tuple(p for p in self.required + self.optional if p.key == key)


def _real(key: str, lo: float = -INF, hi: float = INF) -> PropertyDef:
    return PropertyDef(key, PropertyKind.REAL, Range(lo, hi))


def _int(key: str, lo: float = -INF, hi: float = INF) -> PropertyDef:
    return PropertyDef(key, PropertyKind.INT, Range(lo, hi))


def _str(key: str) -> PropertyDef:
    return PropertyDef(key, PropertyKind.STR)


def _list(key: str, lo: float = -INF, hi: float = INF) -> PropertyDef:
    return PropertyDef(key, PropertyKind.LIST, Range(lo, hi))


TEMP = _real("Temp", -273.15, INF)
FREQ = _real("f", 0, INF)
PHASE = _real("Phase", -360, 360)

_MS_MODELS = (_str("MSDispModel"), _str("MSModel"))

# fmt: off
DEFINITIONS: Tuple[Definition, ...] = (
    # Lumped components
    Definition("R", False, 2,
               required=(_real("R"),),
               optional=(TEMP, _real("Tc1"), _real("Tc2"), _real("Tnom", -273.15, INF))),
    Definition("C", False, 2, required=(_real("C"),), optional=(_real("V"),)),
    Definition("L", False, 2, required=(_real("L"),), optional=(_real("I"),)),
    Definition("VCCS", False, 4, required=(_real("G"),), optional=(_real("T", 0, INF),)),
    Definition("VCVS", False, 4, required=(_real("G"),), optional=(_real("T", 0, INF),)),

    # Sources
    Definition("Vdc", False, 2, required=(_real("U"),)),
    Definition("Idc", False, 2, required=(_real("I"),)),
    Definition("Vac", False, 2, required=(_real("U"), FREQ), optional=(PHASE,)),
    Definition("Iac", False, 2, required=(_real("I"), FREQ), optional=(PHASE,)),
    Definition("Pac", False, 2,
               required=(_int("Num", 1, INF), _real("Z", 0, INF)),
               optional=(_real("P"), FREQ, TEMP)),

    # Nonlinear devices
    Definition("Diode", False, 2, nonlinear=True,
               required=(_real("Is", 0, INF), _real("N", 1e-6, 100)),
               optional=(_real("Cj0", 0, INF), _real("M", 0, 2), _real("Vj", 0, 10),
                         _real("Fc", 0, 1), _real("Cp", 0, INF), _real("Isr", 0, INF),
                         _real("Nr", 0.1, 100), _real("Rs", 0, INF), _real("Tt", 0, INF),
                         _real("Bv", 0, INF), _real("Ibv", 0, INF), TEMP)),
    Definition("BJT", False, 4, nonlinear=True,
               required=(_str("Type"), _real("Is", 0, INF), _real("Nf", 1e-6, 100),
                         _real("Nr", 1e-6, 100), _real("Bf", 0, INF), _real("Br", 0, INF)),
               optional=(_real("Ikf", 0, INF), _real("Ikr", 0, INF), _real("Vaf", 0, INF),
                         _real("Var", 0, INF), _real("Ise", 0, INF), _real("Ne", 0, 100),
                         _real("Isc", 0, INF), _real("Nc", 0, 100), _real("Rb", 0, INF),
                         _real("Re", 0, INF), _real("Rc", 0, INF), _real("Cje", 0, INF),
                         _real("Vje", 0, 10), _real("Mje", 0, 1), _real("Cjc", 0, INF),
                         _real("Vjc", 0, 10), _real("Mjc", 0, 1), _real("Tf", 0, INF),
                         _real("Tr", 0, INF), _real("Fc", 0, 1), TEMP)),
    Definition("JFET", False, 3, nonlinear=True,
               required=(_str("Type"), _real("Vt0"), _real("Beta", 0, INF),
                         _real("Lambda", 0, INF)),
               optional=(_real("Rd", 0, INF), _real("Rs", 0, INF), _real("Is", 0, INF),
                         _real("N", 1, 100), _real("Cgs", 0, INF), _real("Cgd", 0, INF),
                         _real("Pb", 0, 10), _real("Fc", 0, 1), TEMP)),
    Definition("MOSFET", False, 4, nonlinear=True,
               required=(_str("Type"), _real("Vt0"), _real("Kp", 0, INF),
                         _real("Gamma", 0, INF), _real("Phi", 0, 10), _real("Lambda", 0, INF)),
               optional=(_real("W", 0, INF), _real("L", 0, INF), _real("Rd", 0, INF),
                         _real("Rs", 0, INF), _real("Is", 0, INF), _real("N", 1, 100),
                         _real("Cbd", 0, INF), _real("Cbs", 0, INF), TEMP)),

    # Microstrip substrate and components
    Definition("SUBST", False, 0, substrate=True,
               required=(_real("er", 1, 100), _real("h", 1e-9, INF), _real("t", 0, INF),
                         _real("tand", 0, INF), _real("rho", 0, INF), _real("D", 0, INF))),
    Definition("MLIN", False, 2,
               required=(_real("W", 0, INF), _real("L", 0, INF), _str("Subst"),
                         _str("Model"), _str("DispModel")),
               optional=(TEMP,)),
    Definition("MCORN", False, 2, required=(_real("W", 0, INF), _str("Subst"))),
    Definition("MMBEND", False, 2, required=(_real("W", 0, INF), _str("Subst"))),
    Definition("MSTEP", False, 2,
               required=(_real("W1", 0, INF), _real("W2", 0, INF), _str("Subst")) + _MS_MODELS),
    Definition("MOPEN", False, 1,
               required=(_real("W", 0, INF), _str("Subst")) + _MS_MODELS + (_str("Model"),)),
    Definition("MGAP", False, 2,
               required=(_real("W1", 0, INF), _real("W2", 0, INF), _real("S", 0, INF),
                         _str("Subst")) + _MS_MODELS),
    Definition("MCOUPLED", False, 4,
               required=(_real("W", 0, INF), _real("L", 0, INF), _real("S", 0, INF),
                         _str("Subst"), _str("Model"), _str("DispModel")),
               optional=(TEMP,)),
    Definition("MTEE", False, 3,
               required=(_real("W1", 0, INF), _real("W2", 0, INF), _real("W3", 0, INF),
                         _str("Subst")) + _MS_MODELS,
               optional=(TEMP,)),
    Definition("MCROSS", False, 4,
               required=(_real("W1", 0, INF), _real("W2", 0, INF), _real("W3", 0, INF),
                         _real("W4", 0, INF), _str("Subst")) + _MS_MODELS),
    Definition("MVIA", False, 2, required=(_real("D", 0, INF), _str("Subst")),
               optional=(TEMP,)),
    Definition("CLIN", False, 4,
               required=(_real("W", 0, INF), _real("S", 0, INF), _real("L", 0, INF),
                         _str("Subst")),
               optional=(_str("Backside"), TEMP)),

    # Data file, nodeset and subcircuit instance
    Definition("SPfile", False, VARIABLE_NODES, required=(_str("File"), _str("Data")),
               optional=(TEMP,)),
    Definition("NodeSet", False, 1, required=(_real("U"),)),
    Definition("Sub", False, VARIABLE_NODES, required=(_str("Type"),)),

    # Actions
    Definition("Def", True, VARIABLE_NODES),
    Definition("DC", True, 0,
               optional=(_int("MaxIter", 2, 10000), _real("abstol", 1e-30, 1),
                         _real("vntol", 1e-30, 1), _real("reltol", 1e-30, 1),
                         _str("saveOPs"), _str("saveAll"), _str("convHelper"), TEMP)),
    Definition("AC", True, 0,
               required=(_str("Type"),),
               optional=(_real("Start", 0, INF), _real("Stop", 0, INF), _int("Points", 1, INF),
                         _list("Values", 0, INF), _str("Noise"))),
    Definition("SP", True, 0,
               required=(_str("Type"),),
               optional=(_real("Start", 0, INF), _real("Stop", 0, INF), _int("Points", 1, INF),
                         _list("Values", 0, INF), _str("Noise"), _int("NoiseIP", 1, INF),
                         _int("NoiseOP", 1, INF))),
    Definition("TR", True, 0,
               required=(_str("Type"), _real("Start", 0, INF), _real("Stop", 0, INF),
                         _int("Points", 2, INF)),
               optional=(_str("IntegrationMethod"), _int("Order", 1, 6),
                         _real("InitialStep", 0, INF), _real("MinStep", 0, INF),
                         _int("MaxIter", 2, 10000), _real("abstol", 1e-30, 1),
                         _real("vntol", 1e-30, 1), _real("reltol", 1e-30, 1), TEMP)),
    Definition("SW", True, 0,
               required=(_str("Type"), _str("Sim"), _str("Param")),
               optional=(_real("Start"), _real("Stop"), _int("Points", 1, INF),
                         _list("Values"))),
)
# fmt: on


_DISP_MODELS = frozenset(
    ("Kirschning", "Kobayashi", "Yamashita", "Getsinger", "Schneider", "Pramanick", "Hammerstad")
)
_MS_STATIC_MODELS = frozenset(("Wheeler", "Schneider", "Hammerstad"))
_SWEEP_KINDS = frozenset(("lin", "log", "list", "const"))
_YES_NO = frozenset(("yes", "no"))

# (type, property) -> allowed identifiers
SPECIALS: Dict[Tuple[str, str], FrozenSet[str]] = {
    ("JFET", "Type"): frozenset(("nfet", "pfet")),
    ("BJT", "Type"): frozenset(("npn", "pnp")),
    ("MOSFET", "Type"): frozenset(("nfet", "pfet")),
    ("SP", "Noise"): _YES_NO,
    ("SP", "Type"): _SWEEP_KINDS,
    ("AC", "Type"): _SWEEP_KINDS,
    ("AC", "Noise"): _YES_NO,
    ("DC", "saveOPs"): _YES_NO,
    ("DC", "saveAll"): _YES_NO,
    ("DC", "convHelper"): frozenset(
        (
            "none",
            "SourceStepping",
            "gMinStepping",
            "LineSearch",
            "Attenuation",
            "SteepestDescent",
        )
    ),
    ("TR", "Type"): frozenset(("lin", "log")),
    ("TR", "IntegrationMethod"): frozenset(("Euler", "Trapezoidal", "Gear", "AdamsMoulton")),
    ("MLIN", "DispModel"): _DISP_MODELS,
    ("MLIN", "Model"): _MS_STATIC_MODELS,
    ("CLIN", "Backside"): frozenset(("Metal", "Air")),
    ("SW", "Type"): _SWEEP_KINDS,
    ("SPfile", "Data"): frozenset(("rectangular", "polar")),
    ("MSTEP", "MSDispModel"): _DISP_MODELS,
    ("MSTEP", "MSModel"): _MS_STATIC_MODELS,
    ("MOPEN", "MSDispModel"): _DISP_MODELS,
    ("MOPEN", "MSModel"): _MS_STATIC_MODELS,
    ("MOPEN", "Model"): frozenset(("Kirschning", "Hammerstad", "Alexopoulos")),
    ("MGAP", "MSDispModel"): _DISP_MODELS,
    ("MGAP", "MSModel"): _MS_STATIC_MODELS,
    ("MCOUPLED", "Model"): frozenset(("Kirschning", "Hammerstad")),
    ("MCOUPLED", "DispModel"): frozenset(("Kirschning", "Getsinger")),
    ("MTEE", "MSDispModel"): _DISP_MODELS,
    ("MTEE", "MSModel"): _MS_STATIC_MODELS,
    ("MCROSS", "MSDispModel"): _DISP_MODELS,
    ("MCROSS", "MSModel"): _MS_STATIC_MODELS,
}


def find_definition(type_: str, action: bool) -> Optional[Definition]:
    """Schema entry for the given type and action flag, or None if unknown"""
    for definition in DEFINITIONS:
        if definition.type == type_ and definition.action == action:
            return definition
    return None


def definition_types() -> Tuple[str, ...]:
    """All registered statement types in registry order"""
    return tuple(d.type for d in DEFINITIONS)
