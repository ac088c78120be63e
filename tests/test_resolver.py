"""Tests for identifier resolution."""

from conftest import make_context, make_statement, messages

from netcheck.checker.resolver import find_variable, resolve_variable, validate_special
from netcheck.netlist.circuit import Ident, VarTag


def resolve(stmt, scope, key, equation_variables=None):
    ctx = make_context(scope, equation_variables)
    ok = resolve_variable(ctx, scope, stmt, stmt.find_property(key))
    return ctx, ok


class TestFindVariable:
    """Tests for find_variable()."""

    def test_match(self):
        """Returns the value object bound to key."""
        sw = make_statement("SW", "S1", action=True, Param="x", Sim="DC1", Type="lin")
        found = find_variable([sw], "SW", "Param", "x")
        assert found is sw.find_reference("Param")

    def test_no_match(self):
        """Other types, keys or names do not match."""
        sw = make_statement("SW", "S1", action=True, Param="x")
        assert find_variable([sw], "SW", "Param", "y") is None
        assert find_variable([sw], "SW", "Sim", "x") is None
        assert find_variable([sw], "AC", "Param", "x") is None


class TestResolveVariable:
    """Tests for the resolution order."""

    def test_numbers_always_resolve(self):
        """Non-identifier values need no resolution."""
        stmt = make_statement("R", "R1", ["a", "b"], R="50")
        ctx, ok = resolve(stmt, [stmt], "R")
        assert ok and len(ctx.diagnostics) == 0

    def test_sweep_parameter(self):
        """A swept parameter resolves and both ends are marked as variables."""
        sw = make_statement("SW", "S1", action=True, Param="Rx", Sim="DC1", Type="lin")
        r = make_statement("R", "R1", ["a", "b"], R="Rx")
        ctx, ok = resolve(r, [r, sw], "R")
        assert ok
        assert r.find_reference("R").var is VarTag.DOUBLE
        assert sw.find_reference("Param").var is VarTag.DOUBLE

    def test_simulation_reference(self):
        """The Sim target of a sweep resolves."""
        sw = make_statement("SW", "S1", action=True, Param="x", Sim="AC1", Type="lin")
        ctx, ok = resolve(sw, [sw], "Sim")
        assert ok

    def test_substrate(self):
        """A microstrip's Subst resolves and is flagged."""
        mlin = make_statement("MLIN", "L1", ["a", "b"], Subst="Sub1")
        ctx, ok = resolve(mlin, [mlin], "Subst")
        assert ok
        assert mlin.find_reference("Subst").subst

    def test_substrate_only_for_microstrips(self):
        """A substrate name used by a non-microstrip does not resolve as substrate."""
        mlin = make_statement("MLIN", "L1", ["a", "b"], Subst="Sub1")
        r = make_statement("R", "R1", ["a", "b"], R="Sub1")
        ctx, ok = resolve(r, [mlin, r], "R")
        assert not ok

    def test_subcircuit_type(self):
        """The Type of a subcircuit instance resolves."""
        sub = make_statement("Sub", "X1", ["a"], Type="Amp")
        ctx, ok = resolve(sub, [sub], "Type")
        assert ok

    def test_special(self):
        """Enumerated identifiers resolve when allowed."""
        bjt = make_statement("BJT", "Q1", ["b", "c", "e", "s"], Type="npn")
        ctx, ok = resolve(bjt, [bjt], "Type")
        assert ok
        assert len(ctx.diagnostics) == 0

    def test_special_not_allowed(self):
        """A disallowed enumerated identifier is reported."""
        bjt = make_statement("BJT", "Q1", ["b", "c", "e", "s"], Type="nfet")
        ctx, ok = resolve(bjt, [bjt], "Type")
        assert not ok
        assert messages(ctx) == [
            "`nfet' is not a valid `Type' property as used in `BJT:Q1'",
            "no such variable `nfet' used in a `BJT:Q1' property",
        ]

    def test_spfile(self):
        """The File of an SPfile resolves."""
        spf = make_statement("SPfile", "X1", ["a", "gnd"], File="amp_s2p", Data="rectangular")
        ctx, ok = resolve(spf, [spf], "File")
        assert ok

    def test_equation_variable(self):
        """Names defined by the equation subsystem resolve."""
        r = make_statement("R", "R1", ["a", "b"], R="Rload")
        ctx, ok = resolve(r, [r], "R", equation_variables={"Rload"})
        assert ok

    def test_unresolved(self):
        """Unknown identifiers are reported once."""
        r = make_statement("R", "R1", ["a", "b"], R="Rload")
        ctx, ok = resolve(r, [r], "R")
        assert not ok
        assert messages(ctx) == ["no such variable `Rload' used in a `R:R1' property"]


class TestValidateSpecial:
    """Tests for validate_special()."""

    def test_counts_allowed_uses(self):
        """Each allowing (type, key) entry counts once."""
        ac = make_statement("AC", "AC1", action=True, Type="lin")
        sw = make_statement("SW", "S1", action=True, Type="lin", Param="x", Sim="AC1")
        scope = [ac, sw]
        ctx = make_context(scope)
        assert validate_special(ctx, scope, sw, "lin") == 2

    def test_unused_identifier(self):
        """Identifiers not bound by any special property count zero."""
        r = make_statement("R", "R1", ["a", "b"], R="x")
        ctx = make_context([r])
        assert validate_special(ctx, [r], r, "x") == 0
        assert len(ctx.diagnostics) == 0


def test_ident_defaults():
    """Identifiers start unmarked."""
    ident = Ident("x")
    assert ident.var is None
    assert not ident.subst
