"""Symbol resolution for identifier-valued properties.

An identifier used as a property value must name something the simulator
knows about: a sweep parameter, an analysis, a substrate, a subcircuit
definition, an enumerated special value, an S-parameter data file or an
equation variable.
"""

from typing import List, Optional

from netcheck.checker.context import CheckerContext
from netcheck.checker.diagnostics import ErrorKind
from netcheck.checker.schema import SPECIALS
from netcheck.config import (
    MICROSTRIP_TYPES,
    PARAMETER_SWEEP,
    SPFILE_TYPE,
    SUBCIRCUIT_INST,
)
from netcheck.netlist.circuit import Ident, Statement, Value, VarTag


def find_variable(scope: List[Statement], type_: str, key: str, ident: str) -> Optional[Ident]:
    """First identifier value bound to key in a statement of the given type.

    Returns:
        The matching value object, or None if no statement of that type
        binds key to ident.
    """
    for stmt in scope:
        if stmt.type != type_:
            continue
        for pair in stmt.pairs:
            if pair.key == key and isinstance(pair.value, Ident) and pair.value.name == ident:
                return pair.value
    return None


def find_substrate(scope: List[Statement], ident: str) -> Optional[Ident]:
    """Substrate reference of a microstrip component equal to ident"""
    for stmt in scope:
        if stmt.type in MICROSTRIP_TYPES:
            ref = stmt.find_reference("Subst")
            if ref is not None and ref.name == ident:
                return ref
    return None


def validate_special(
    ctx: CheckerContext, scope: List[Statement], stmt: Statement, ident: str
) -> int:
    """Check ident against the enumerated values of every (type, key) using it.

    Returns:
        Number of (type, key) entries which both use ident and allow it.
    """
    found = 0
    for (type_, key), allowed in SPECIALS.items():
        if find_variable(scope, type_, key, ident) is None:
            continue
        if ident in allowed:
            found += 1
        else:
            ctx.error(
                ErrorKind.REFERENCE,
                f"`{ident}' is not a valid `{key}' property as used in `{stmt.name}'",
                stmt,
            )
    return found


def resolve_variable(
    ctx: CheckerContext, scope: List[Statement], stmt: Statement, value: Value
) -> bool:
    """Resolve an identifier property value of stmt.

    Sweep parameters mark both the defining value and the use as variables;
    substrate references get their `subst` flag set.

    Returns:
        False (after emitting an error) if the identifier resolves to nothing.
    """
    if not isinstance(value, Ident):
        return True

    ident = value.name
    found = 0

    # 1. parameter sweep variable
    val = find_variable(scope, PARAMETER_SWEEP, "Param", ident)
    if val is not None:
        val.var = VarTag.DOUBLE
        value.var = VarTag.DOUBLE
        found += 1

    # 2. analysis referenced by a parameter sweep
    if find_variable(scope, PARAMETER_SWEEP, "Sim", ident) is not None:
        found += 1

    # 3. substrate of a microstrip component
    if stmt.type in MICROSTRIP_TYPES and find_substrate(scope, ident) is not None:
        value.subst = True
        found += 1

    # 4. subcircuit definition
    if find_variable(scope, SUBCIRCUIT_INST, "Type", ident) is not None:
        found += 1

    # 5. enumerated special identifiers
    if validate_special(ctx, scope, stmt, ident):
        found += 1

    # 6. S-parameter data file
    if find_variable(scope, SPFILE_TYPE, "File", ident) is not None:
        found += 1

    # 7. equation variable
    if ctx.is_equation_variable(ident):
        found += 1

    if not found:
        ctx.error(
            ErrorKind.REFERENCE,
            f"no such variable `{ident}' used in a `{stmt.name}' property",
            stmt,
        )
        return False
    return True
