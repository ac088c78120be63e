"""Pytest configuration for netcheck tests

Shared test utilities:
- parse: Build a Netlist from indented netlist text
- make_statement: Build a single Statement with raw property texts
- make_context: Checker context for running single passes
- messages: Diagnostic messages of a context or result
"""

import textwrap
from typing import Iterable, List, Optional

import pytest

from netcheck.checker.context import CheckerContext
from netcheck.netlist.circuit import Netlist, Node, Pair, Statement
from netcheck.netlist.parser import parse_netlist, parse_value


# =============================================================================
# Shared Test Utilities
# =============================================================================


def parse(text: str) -> Netlist:
    """Parse netlist text, ignoring common indentation"""
    return parse_netlist(textwrap.dedent(text).strip() + "\n")


def make_statement(
    type_: str,
    instance: str,
    nodes: Iterable[str] = (),
    action: bool = False,
    line: int = 0,
    **props: str,
) -> Statement:
    """Build a statement; property values are given as reader text.

    Example:
        make_statement("R", "R1", ["a", "gnd"], R="1 kOhm")
    """
    return Statement(
        type=type_,
        instance=instance,
        nodes=[Node(n) for n in nodes],
        pairs=[Pair(key, parse_value(text)) for key, text in props.items()],
        action=action,
        line=line,
    )


def make_context(
    statements: Iterable[Statement], equation_variables: Optional[Iterable[str]] = None
) -> CheckerContext:
    """Checker context for a netlist holding the given root statements"""
    return CheckerContext.create(Netlist(root=list(statements)), equation_variables)


def messages(source) -> List[str]:
    """Messages of the diagnostics held by a context, result or collector"""
    diagnostics = getattr(source, "diagnostics", source)
    return [d.message for d in diagnostics]


@pytest.fixture
def netlist_file(tmp_path):
    """Write netlist text to a temporary file and return its path"""

    def _write(text: str, name: str = "circuit.net"):
        path = tmp_path / name
        path.write_text(textwrap.dedent(text).strip() + "\n")
        return path

    return _write
