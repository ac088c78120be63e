"""Tests for subcircuit lifting and validation."""

from conftest import messages, parse

from netcheck.checker.context import CheckerContext
from netcheck.checker.diagnostics import ErrorKind
from netcheck.checker.pipeline import check_netlist
from netcheck.checker.subcircuits import build_subcircuits, validate_subcircuits


class TestBuildSubcircuits:
    """Tests for lifting definitions into the registry."""

    def test_lift_root_definitions(self):
        """Definitions leave the root list."""
        netlist = parse(
            """
            .Def:A p
              R:R1 p gnd R=1
            .Def:End
            Sub:X1 n Type="A"
            """
        )
        assert build_subcircuits(netlist) == 1
        assert [s.type for s in netlist.root] == ["Sub"]
        assert netlist.find_subcircuit("A").sub[0].instance == "R1"

    def test_lift_nested_definitions(self):
        """Definitions inside bodies are lifted as well."""
        netlist = parse(
            """
            .Def:Outer q
              .Def:Inner p
                R:Ri p gnd R=1
              .Def:End
              Sub:Y1 q Type="Inner"
            .Def:End
            """
        )
        assert build_subcircuits(netlist) == 2
        assert netlist.root == []
        outer = netlist.find_subcircuit("Outer")
        assert [s.type for s in outer.sub] == ["Sub"]
        assert netlist.find_subcircuit("Inner") is not None

    def test_lift_twice(self):
        """A second call finds nothing left to lift."""
        netlist = parse(".Def:A p\nR:R1 p gnd R=1\n.Def:End")
        build_subcircuits(netlist)
        assert build_subcircuits(netlist) == 0
        assert len(netlist.subcircuits) == 1


def validate(text):
    netlist = parse(text)
    build_subcircuits(netlist)
    ctx = CheckerContext.create(netlist)
    errors = validate_subcircuits(ctx, netlist.root)
    return ctx, errors


class TestValidateSubcircuits:
    """Tests for subcircuit instance checks."""

    def test_valid_instance(self):
        """Matching type and port count."""
        ctx, errors = validate(
            """
            .Def:A p1 p2
              R:R1 p1 p2 R=1
            .Def:End
            Sub:X1 a b Type="A"
            """
        )
        assert errors == 0
        assert ctx.sub_cycles == 0

    def test_unknown_type(self):
        """Instances must name a known definition."""
        ctx, errors = validate('Sub:X1 a Type="Missing"')
        assert messages(ctx) == ["no such subcircuit `Missing' found as referred in `Sub:X1'"]
        assert ctx.diagnostics.items[0].kind is ErrorKind.SUBCIRCUIT

    def test_port_mismatch(self):
        """Node count must match the definition's ports."""
        ctx, errors = validate(
            """
            .Def:A p1 p2
              R:R1 p1 p2 R=1
            .Def:End
            Sub:X1 a Type="A"
            """
        )
        assert messages(ctx) == ["subcircuit type `A' requires 2 nodes in `Sub:X1', found 1"]

    def test_direct_cycle(self):
        """A definition instantiating itself is cyclic."""
        ctx, errors = validate(
            """
            .Def:A p
              Sub:Y1 p Type="A"
            .Def:End
            Sub:X1 a Type="A"
            """
        )
        assert ctx.sub_cycles == 1
        assert messages(ctx) == ["cyclic definition of `A:X1' detected, involves: A -> A"]

    def test_indirect_cycle(self):
        """A -> B -> A is reported with the path, beginning and ending alike."""
        ctx, errors = validate(
            """
            .Def:A p
              Sub:Y1 p Type="B"
            .Def:End
            .Def:B p
              Sub:Y2 p Type="A"
            .Def:End
            Sub:X1 a Type="A"
            """
        )
        (diag,) = ctx.diagnostics.of_kind(ErrorKind.CYCLIC)
        assert diag.message.endswith("involves: A -> B -> A")

    def test_shared_definition_is_not_a_cycle(self):
        """Instantiating the same definition twice in a body is fine."""
        ctx, errors = validate(
            """
            .Def:Leaf p
              R:R1 p gnd R=1
            .Def:End
            .Def:Pair p
              Sub:L1 p Type="Leaf"
              Sub:L2 p Type="Leaf"
            .Def:End
            Sub:X1 a Type="Pair"
            """
        )
        assert errors == 0

    def test_cycles_in_full_check(self):
        """Cycles fail the full check and prevent expansion."""
        netlist = parse(
            """
            .Def:A p
              Sub:Y1 p Type="A"
            .Def:End
            Sub:X1 a Type="A"
            R:R1 a gnd R=1
            .DC:DC1
            """
        )
        result = check_netlist(netlist)
        assert not result.is_valid
        assert result.diagnostics.of_kind(ErrorKind.CYCLIC)
        assert not result.expanded
        assert any(s.type == "Sub" for s in netlist.root)
