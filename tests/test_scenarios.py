"""End-to-end checks of complete netlists."""

import copy

from conftest import messages, parse

from netcheck.checker.diagnostics import ErrorKind
from netcheck.checker.pipeline import NetlistChecker, check_netlist
from netcheck.netlist.circuit import VarTag


class TestScenarios:
    """Complete netlists with known outcome."""

    def test_minimal_dc_circuit(self):
        """Resistor, source and DC action check clean and normalize."""
        netlist = parse(
            """
            R:R1 n1 gnd R="1 kOhm"
            Vdc:V1 n1 gnd U=5
            .DC:DC1
            """
        )
        result = check_netlist(netlist)
        assert result.error_count == 0
        assert len(netlist.root) == 3
        r = netlist.root[0].find_value("R")
        assert r.value == 1000.0
        assert r.unit == "Ohm"

    def test_sp_without_pac(self):
        """S-parameter analysis without port fails mentioning Pac."""
        netlist = parse(
            """
            R:R1 n1 gnd R=50
            .SP:SP1 Type=lin Start=1GHz Stop=2GHz Points=101
            """
        )
        result = check_netlist(netlist)
        assert result.error_count >= 1
        assert any("Pac" in m for m in messages(result))

    def test_cyclic_sweep(self):
        """Two sweeps driving each other form a cycle."""
        netlist = parse(
            """
            .SW:S1 Sim="S2" Param="x" Type=lin Start=0 Stop=1 Points=3
            .SW:S2 Sim="S1" Param="y" Type=lin Start=0 Stop=1 Points=3
            """
        )
        result = check_netlist(netlist)
        cyclic = result.diagnostics.of_kind(ErrorKind.CYCLIC)
        assert cyclic
        assert "S1" in cyclic[0].message and "S2" in cyclic[0].message

    def test_subcircuit_expansion(self):
        """Instances are flattened into qualified components."""
        netlist = parse(
            """
            .Def:TwoR p1 p2
              R:Ra p1 n R=1
              R:Rb n p2 R=2
            .Def:End
            Sub:X1 a b Type="TwoR"
            Vdc:V1 a gnd U=1
            R:Rg b gnd R=1
            .DC:DC1
            """
        )
        result = check_netlist(netlist)
        assert result.error_count == 0
        stmts = {s.name: s for s in netlist.root}
        assert stmts["R:TwoR.X1.Ra"].node_names == ["a", "TwoR.X1.n"]
        assert stmts["R:TwoR.X1.Rb"].node_names == ["TwoR.X1.n", "b"]
        assert not any(s.type in ("Sub", "Def") for s in netlist.root)

    def test_nested_subcircuits(self):
        """A resistor two levels down ends up between a and gnd."""
        netlist = parse(
            """
            .Def:Inner p
              R:Ri p gnd R=1
            .Def:End
            .Def:Outer q
              Sub:Y1 q Type="Inner"
            .Def:End
            Sub:Z1 a Type="Outer"
            .DC:DC1
            """
        )
        result = check_netlist(netlist)
        assert result.error_count == 0
        resistors = [s for s in netlist.root if s.type == "R"]
        assert len(resistors) == 1
        assert resistors[0].instance == "Inner.Outer.Z1.Y1.Ri"
        assert resistors[0].node_names == ["a", "gnd"]

    def test_list_sweep(self):
        """A list sweep over a DC analysis checks clean."""
        netlist = parse(
            """
            .SW:S Sim="DC1" Param="v" Type=list Values=[1;2;3]
            .DC:DC1
            """
        )
        result = check_netlist(netlist)
        assert result.error_count == 0
        values = netlist.root[0].find_value("Values")
        assert values.var is VarTag.VECTOR
        assert [v.value for v in values] == [1.0, 2.0, 3.0]
        assert all(v.scale is None for v in values)


class TestBoundaryCases:
    """Inputs with an exact expected error count."""

    def test_no_actions(self):
        """Zero actions gives exactly one no-actions error."""
        netlist = parse(
            """
            R:R1 a gnd R=1
            R:R1 a gnd R=1
            C:C1 a gnd C=1p
            """
        )
        result = check_netlist(netlist)
        assert messages(result).count("no actions .XX defined") == 1

    def test_missing_substrate(self):
        """A microstrip naming an undefined SUBST gives one error."""
        netlist = parse(
            """
            MLIN:L1 a b W=1m L=10m Subst="Sub1" Model="Hammerstad" DispModel="Kirschning"
            R:R1 a gnd R=50
            R:R2 b gnd R=50
            .DC:DC1
            """
        )
        result = check_netlist(netlist)
        assert messages(result) == ["no such substrate `Sub1' found as specified in `MLIN:L1'"]

    def test_existing_substrate(self):
        """The same microstrip with its SUBST checks clean."""
        netlist = parse(
            """
            SUBST:Sub1 er=9.8 h=0.635m t=17.5u tand=1e-4 rho=0.022 D=0.15e-6
            MLIN:L1 a b W=1m L=10m Subst="Sub1" Model="Hammerstad" DispModel="Kirschning"
            R:R1 a gnd R=50
            R:R2 b gnd R=50
            .DC:DC1
            """
        )
        result = check_netlist(netlist)
        assert result.is_valid, result.format()
        assert netlist.root[1].find_reference("Subst").subst

    def test_duplicate_ports(self):
        """Two Pac with the same number give one duplicate-port error."""
        netlist = parse(
            """
            Pac:P1 a gnd Num=1 Z=50
            Pac:P2 b gnd Num=1 Z=50
            R:R1 a b R=50
            .SP:SP1 Type=lin Start=1G Stop=2G Points=11
            """
        )
        result = check_netlist(netlist)
        assert len([m for m in messages(result) if "duplicate `Num=1'" in m]) == 1
        assert result.error_count == 1

    def test_self_referencing_sweep(self):
        """A sweep over itself gives exactly one self-reference error."""
        netlist = parse(
            """
            .SW:S1 Sim="S1" Param="x" Type=lin Start=0 Stop=1 Points=3
            """
        )
        result = check_netlist(netlist)
        assert messages(result) == ["definition `SW:S1' refers to itself"]

    def test_nonlinear_without_dc(self):
        """A diode under AC analysis requires a DC action."""
        netlist = parse(
            """
            Vac:V1 a gnd U=1 f=1k
            Diode:D1 a gnd Is=1e-15 N=1
            .AC:AC1 Type=log Start=1 Stop=1M Points=61
            """
        )
        result = check_netlist(netlist)
        assert any(".DC action is required" in m for m in messages(result))

    def test_equation_variable_in_property(self):
        """Variables from Eqn statements resolve."""
        netlist = parse(
            """
            Eqn:Eqn1 Rval="2*50" Export="yes"
            R:R1 a gnd R="Rval"
            Vdc:V1 a gnd U=1
            .DC:DC1
            """
        )
        assert check_netlist(netlist).is_valid

    def test_external_equation_variable(self):
        """Variables passed in by the caller resolve."""
        text = """
            R:R1 a gnd R="Rval"
            Vdc:V1 a gnd U=1
            .DC:DC1
            """
        assert not check_netlist(parse(text)).is_valid
        assert check_netlist(parse(text), equation_variables=["Rval"]).is_valid

    def test_parameter_sweep_of_resistor(self):
        """A resistor value swept by SW checks clean."""
        netlist = parse(
            """
            R:R1 a gnd R="Rx"
            Vdc:V1 a gnd U=1
            .SW:SW1 Sim="DC1" Param="Rx" Type=log Start=1 Stop=1k Points=4
            .DC:DC1
            """
        )
        result = check_netlist(netlist)
        assert result.is_valid, result.format()
        assert netlist.root[0].find_reference("R").var is VarTag.DOUBLE


class TestIdempotence:
    """Re-running the checker gives the same outcome."""

    def test_valid_netlist(self):
        """Annotations and values are stable across runs."""
        netlist = parse(
            """
            R:R1 n1 gnd R="1 kOhm"
            Vdc:V1 n1 gnd U=5
            .SW:S Sim="DC1" Param="v" Type=list Values=[1k;2k]
            .DC:DC1
            """
        )
        checker = NetlistChecker(netlist)
        assert checker.check(expand=False) == 0
        snapshot = copy.deepcopy(netlist.root)
        assert checker.check(expand=False) == 0
        assert [repr(s) for s in netlist.root] == [repr(s) for s in snapshot]

    def test_invalid_netlist(self):
        """Errors are reported identically on every run."""
        netlist = parse(
            """
            R:R1 a gnd
            R:R1 a gnd R=1
            .SW:S1 Sim="S1" Param="x" Type=lin Start=0 Stop=1 Points=3
            """
        )
        checker = NetlistChecker(netlist)
        first = checker.check()
        first_messages = messages(checker)
        second = checker.check()
        assert first == second > 0
        assert messages(checker) == first_messages

    def test_expanded_netlist(self):
        """Checking an already expanded netlist finds nothing new."""
        netlist = parse(
            """
            .Def:TwoR p1 p2
              R:Ra p1 n R=1
              R:Rb n p2 R=2
            .Def:End
            Sub:X1 a b Type="TwoR"
            Vdc:V1 a gnd U=1
            .DC:DC1
            """
        )
        checker = NetlistChecker(netlist)
        assert checker.check() == 0
        flat = [s.name for s in netlist.root]
        assert checker.check() == 0
        assert [s.name for s in netlist.root] == flat
