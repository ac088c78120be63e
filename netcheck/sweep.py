"""Sweep grid materialization.

Turns the Type/Start/Stop/Points/Values properties of a checked sweep
action (SW, AC, SP) into the array of swept values.
"""

import math

import numpy as np

from netcheck.config import SWEEP_CONST, SWEEP_LINEAR, SWEEP_LIST, SWEEP_LOG
from netcheck.netlist.circuit import Statement, Vector


def _number(stmt: Statement, key: str) -> float:
    value = stmt.find_value(key)
    if value is None:
        raise ValueError(f"`{stmt.name}' has no numeric `{key}' property")
    number = value.items[0].value if isinstance(value, Vector) else value.value
    if not math.isfinite(number):
        raise ValueError(f"`{key}' of `{stmt.name}' is not a finite number")
    return number


def sweep_points(stmt: Statement) -> np.ndarray:
    """Swept values of a sweep action.

    Args:
        stmt: Checked SW, AC or SP statement (values already scaled)

    Returns:
        1-D float array of sweep points

    Raises:
        ValueError: If the sweep kind is unknown or a property is missing
    """
    kind = stmt.find_reference("Type")
    if kind is None:
        raise ValueError(f"`{stmt.name}' has no sweep `Type'")

    if kind.name in (SWEEP_LIST, SWEEP_CONST):
        values = stmt.find_value("Values")
        if values is None:
            raise ValueError(f"`{stmt.name}' has no `Values' property")
        items = values.items if isinstance(values, Vector) else [values]
        return np.array([item.value for item in items], dtype=float)

    if kind.name not in (SWEEP_LINEAR, SWEEP_LOG):
        raise ValueError(f"unknown sweep type `{kind.name}' in `{stmt.name}'")

    start = _number(stmt, "Start")
    stop = _number(stmt, "Stop")
    points = int(_number(stmt, "Points"))

    if kind.name == SWEEP_LINEAR:
        return np.linspace(start, stop, points)

    if start == 0 or stop == 0 or (start < 0) != (stop < 0):
        raise ValueError(
            f"logarithmic sweep in `{stmt.name}' needs non-zero Start and Stop of equal sign"
        )
    sign = -1.0 if start < 0 else 1.0
    return sign * np.logspace(np.log10(abs(start)), np.log10(abs(stop)), points)
