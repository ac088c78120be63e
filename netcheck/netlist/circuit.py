"""Netlist data structures for netcheck

Represents a parsed netlist as Python objects. Statements are created by the
reader, annotated by the checker and cloned by the subcircuit expander.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Dict, Iterator, List, Optional, Union

if TYPE_CHECKING:
    from netcheck.checker.schema import Definition


class VarTag(Enum):
    """Marks a value as (resolving to) a sweep variable"""

    DOUBLE = "double"
    VECTOR = "vector"


# ============================================================================
# Property values
# ============================================================================


@dataclass
class Scalar:
    """Numeric value with optional raw SI scale and unit.

    `scale` holds the raw suffix as written ("kOhm", "GHz", "dBm") until the
    unit scaler folds it into `value` and moves any remainder to `unit`.
    """

    value: float
    scale: Optional[str] = None
    unit: Optional[str] = None
    var: Optional[VarTag] = None


@dataclass
class Ident:
    """Bare identifier (variable, analysis, substrate, subcircuit, ...)"""

    name: str
    var: Optional[VarTag] = None
    subst: bool = False


@dataclass
class Vector:
    """Ordered, non-empty list of scalars"""

    items: List[Scalar]
    var: Optional[VarTag] = None

    def __iter__(self) -> Iterator[Scalar]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


Value = Union[Scalar, Ident, Vector]


@dataclass
class Pair:
    """Property key/value pair"""

    key: str
    value: Value


# ============================================================================
# Nodes and statements
# ============================================================================


@dataclass
class Node:
    """Port name of a statement.

    `xlate`/`xlatenr` are only set while a subcircuit body is being expanded:
    the caller's node name and the 1-based index of the matching definition
    port. A name of None marks a port left for an outer expansion to assign.
    """

    name: Optional[str]
    xlate: Optional[str] = None
    xlatenr: int = 0


@dataclass(eq=False)
class Statement:
    """Component, action or subcircuit definition line"""

    type: str
    instance: str
    nodes: List[Node] = field(default_factory=list)
    pairs: List[Pair] = field(default_factory=list)
    action: bool = False
    line: int = 0

    # Derived during checking
    nonlinear: bool = False
    substrate: bool = False
    nodeset: bool = False
    duplicate: bool = False
    define: Optional["Definition"] = None

    # Set on statements synthesized by subcircuit expansion; the pairs
    # are then shared with the template statement
    copy: bool = False
    subcircuit: Optional[str] = None

    # Definition body ("Def" statements only)
    sub: List["Statement"] = field(default_factory=list)

    @property
    def name(self) -> str:
        """Type:instance label used in messages"""
        return f"{self.type}:{self.instance}"

    @property
    def node_names(self) -> List[Optional[str]]:
        return [n.name for n in self.nodes]

    def count_property(self, key: str) -> int:
        """Number of pairs with the given key"""
        return sum(1 for p in self.pairs if p.key == key)

    def find_property(self, key: str) -> Optional[Value]:
        """First value for key, regardless of its kind"""
        for pair in self.pairs:
            if pair.key == key:
                return pair.value
        return None

    def find_reference(self, key: str) -> Optional[Ident]:
        """First value for key if it is an identifier"""
        for pair in self.pairs:
            if pair.key == key and isinstance(pair.value, Ident):
                return pair.value
        return None

    def find_value(self, key: str) -> Optional[Union[Scalar, Vector]]:
        """First value for key if it is not an identifier"""
        for pair in self.pairs:
            if pair.key == key and not isinstance(pair.value, Ident):
                return pair.value
        return None

    def clone(self) -> "Statement":
        """Copy of this statement sharing its property pairs.

        The node list is not copied; the expander builds a fresh one.
        """
        return Statement(
            type=self.type,
            instance=self.instance,
            pairs=self.pairs,
            action=self.action,
            line=self.line,
            nonlinear=self.nonlinear,
            substrate=self.substrate,
            nodeset=self.nodeset,
            define=self.define,
            copy=True,
        )


@dataclass
class Netlist:
    """Top-level netlist: root statements plus lifted subcircuit definitions.

    `equations` maps equation variable names to their (unchecked) expression
    text as collected by the reader.
    """

    root: List[Statement] = field(default_factory=list)
    subcircuits: List[Statement] = field(default_factory=list)
    equations: Dict[str, str] = field(default_factory=dict)
    title: Optional[str] = None

    def find_subcircuit(self, name: Optional[str]) -> Optional[Statement]:
        """Subcircuit definition with the given name, if any"""
        if name is None:
            return None
        for definition in self.subcircuits:
            if definition.instance == name:
                return definition
        return None

    def get_subcircuit(self, instance: Statement) -> Optional[Statement]:
        """Definition referenced by the 'Type' of a subcircuit instance"""
        ref = instance.find_reference("Type")
        return self.find_subcircuit(ref.name) if ref is not None else None

    def equation_variables(self) -> List[str]:
        return list(self.equations)

    def statements(self) -> Iterator[Statement]:
        """Root statements followed by every subcircuit body statement"""
        yield from self.root
        for definition in self.subcircuits:
            yield from definition.sub
