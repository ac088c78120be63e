"""Unit scale evaluation for property values.

Folds the raw SI prefix written after a number ("1 kOhm", "2GHz", "10 dBm")
into the numeric value. Whatever follows the prefix becomes the unit.
"""

from typing import Dict

from netcheck.netlist.circuit import Ident, Scalar, Value, Vector

SI_PREFIXES: Dict[str, float] = {
    "T": 1e12,
    "G": 1e9,
    "M": 1e6,
    "k": 1e3,
    "m": 1e-3,
    "u": 1e-6,
    "n": 1e-9,
    "p": 1e-12,
    "f": 1e-15,
    "a": 1e-18,
}


def evaluate_scale(value: Scalar) -> bool:
    """Apply the raw scale of a scalar and clear it.

    Examples:
        1 "kOhm" -> 1000.0, unit "Ohm"
        20 "dB"  -> 100.0
        30 "dBm" -> 1.0
        5 "V"    -> 5.0, unit "V"

    Returns:
        True on success. A scale string can always be consumed, so this
        currently never fails.
    """
    if value.scale is None:
        return True

    val = value.value
    factor = 1.0
    rest = value.scale
    if rest[:1] in SI_PREFIXES:
        factor = SI_PREFIXES[rest[0]]
        rest = rest[1:]
    elif rest.startswith("dB"):
        val = 10.0 ** (val / 10.0)
        rest = rest[2:]
        if rest.startswith("m"):
            factor = 1e-3
            rest = rest[1:]

    if rest:
        value.unit = rest
    value.scale = None
    value.value = val * factor
    return True


def scale_value(value: Value) -> bool:
    """Apply evaluate_scale() to a scalar or to every element of a vector"""
    if isinstance(value, Ident):
        return True
    if isinstance(value, Vector):
        ok = True
        for item in value:
            ok = evaluate_scale(item) and ok
        return ok
    return evaluate_scale(value)
