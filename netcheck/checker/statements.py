"""Per-statement schema checks.

Validates every statement of a scope (the root list, the subcircuit registry
or one subcircuit body) against the schema registry: type, node count,
property presence, value kinds and ranges, identifier resolution and
duplicate instance names.
"""

import logging
import math
from typing import List

from netcheck.checker.context import CheckerContext
from netcheck.checker.diagnostics import ErrorKind
from netcheck.checker.resolver import resolve_variable
from netcheck.checker.schema import Definition, PropertyDef, PropertyKind, find_definition
from netcheck.checker.units import scale_value
from netcheck.config import NODESET_TYPE
from netcheck.netlist.circuit import Ident, Pair, Statement, Vector

logger = logging.getLogger(__name__)


def count_definition(scope: List[Statement], type_: str, instance: str) -> int:
    """Count statements with the given type and instance name.

    Every occurrence after the first is marked as duplicate.
    """
    count = 0
    for stmt in scope:
        if stmt.type == type_ and stmt.instance == instance:
            count += 1
            if count > 1:
                stmt.duplicate = True
    return count


def value_in_prop_range(ctx: CheckerContext, stmt: Statement, pair: Pair, prop: PropertyDef) -> int:
    """Check a property value against a single descriptor.

    Returns:
        Number of errors emitted.
    """
    errors = 0
    value = pair.value

    if not prop.kind.is_value:
        if not isinstance(value, Ident):
            first = value.items[0].value if isinstance(value, Vector) else value.value
            errors += ctx.error(
                ErrorKind.SCHEMA,
                f"value of `{pair.key}' ({first:g}) needs to be an identifier in `{stmt.name}'",
                stmt,
            )
        return errors

    # Identifiers in value properties are variables, checked by the resolver
    if isinstance(value, Ident):
        return errors

    items = value.items if isinstance(value, Vector) else [value]

    if prop.kind is not PropertyKind.LIST and len(items) > 1:
        errors += ctx.error(
            ErrorKind.SCHEMA,
            f"value of `{pair.key}' needs to be a single value in `{stmt.name}', "
            "no lists possible",
            stmt,
        )

    if prop.range is not None:
        for item in items:
            if item.value not in prop.range:
                errors += ctx.error(
                    ErrorKind.SCHEMA,
                    f"value of `{pair.key}' ({item.value:g}) is out of range "
                    f"[{prop.range.lo:g},{prop.range.hi:g}] in `{stmt.name}'",
                    stmt,
                )

    if prop.kind is PropertyKind.INT:
        for item in items:
            if math.modf(item.value)[0] != 0:
                errors += ctx.error(
                    ErrorKind.SCHEMA,
                    f"value of `{pair.key}' ({item.value:g}) needs to be an integer "
                    f"in `{stmt.name}'",
                    stmt,
                )
    return errors


def value_in_range(ctx: CheckerContext, stmt: Statement, available: Definition, pair: Pair) -> int:
    errors = 0
    for prop in available.property_defs(pair.key):
        errors += value_in_prop_range(ctx, stmt, pair, prop)
    return errors


def check_nodes(ctx: CheckerContext, stmt: Statement, available: Definition) -> int:
    n = len(stmt.nodes)
    if available.variable_nodes:
        if n < 1:
            return ctx.error(
                ErrorKind.SCHEMA,
                f"at least 1 node required in `{stmt.name}', found {n}",
                stmt,
            )
    elif available.nodes != n:
        return ctx.error(
            ErrorKind.SCHEMA,
            f"{available.nodes} node(s) required in `{stmt.name}', found {n}",
            stmt,
        )
    return 0


def check_properties(ctx: CheckerContext, stmt: Statement, available: Definition) -> int:
    errors = 0

    # required properties exactly once
    for prop in available.required:
        n = stmt.count_property(prop.key)
        if n != 1:
            errors += ctx.error(
                ErrorKind.SCHEMA,
                f"required property `{prop.key}' occurred {n}x in `{stmt.name}'",
                stmt,
            )

    # optional properties zero or once
    for prop in available.optional:
        n = stmt.count_property(prop.key)
        if n >= 2:
            errors += ctx.error(
                ErrorKind.SCHEMA,
                f"optional property `{prop.key}' occurred {n}x in `{stmt.name}'",
                stmt,
            )
    return errors


def check_statement(ctx: CheckerContext, scope: List[Statement], stmt: Statement) -> int:
    """Schema check of a single statement within its scope"""
    errors = 0

    available = find_definition(stmt.type, stmt.action)
    if available is None:
        errors += ctx.error(ErrorKind.SCHEMA, f"invalid definition type `{stmt.type}'", stmt)
    else:
        stmt.nodeset = stmt.type == NODESET_TYPE
        stmt.nonlinear = available.nonlinear
        stmt.substrate = available.substrate
        stmt.define = available

        errors += check_nodes(ctx, stmt, available)
        errors += check_properties(ctx, stmt, available)

        for pair in stmt.pairs:
            if not available.is_property(pair.key):
                errors += ctx.error(
                    ErrorKind.SCHEMA,
                    f"extraneous property `{pair.key}' is invalid in `{stmt.name}'",
                    stmt,
                )
            if not scale_value(pair.value):
                errors += ctx.error(
                    ErrorKind.SCHEMA, f"invalid unit scale of `{pair.key}' in `{stmt.name}'", stmt
                )
            errors += value_in_range(ctx, stmt, available, pair)
            if not resolve_variable(ctx, scope, stmt, pair.value):
                errors += 1

    n = count_definition(scope, stmt.type, stmt.instance)
    if n != 1 and not stmt.duplicate:
        errors += ctx.error(
            ErrorKind.STRUCTURAL, f"found {n} definitions of `{stmt.name}'", stmt
        )
    return errors


def check_statements(ctx: CheckerContext, scope: List[Statement]) -> int:
    """Schema check of every statement in a scope.

    Returns:
        Number of errors emitted.
    """
    errors = 0
    for stmt in scope:
        errors += check_statement(ctx, scope, stmt)
    logger.debug(f"Checked {len(scope)} statements: {errors} error(s)")
    return errors
