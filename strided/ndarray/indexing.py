"""Per-axis index specifications and the layout changes they produce.

Five specification forms are understood for each axis:

* a single integer, which removes the axis;
* a range, given as a ``slice``, or a ``(start, end[, step])`` tuple or list;
* a textual slice such as ``"1:4"`` or ``"::-1"``;
* an index array, which gathers the listed positions;
* a boolean array as long as the axis, which keeps the marked positions.

Single integers and ranges only change shape, strides and offset, so they
can be served as views. Index arrays and masks always copy.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from strided.core.errors import DimensionError, IndexOutOfBoundsError, InvalidParameterError
from strided.core.validation import is_integer

__all__ = [
    "AxisSelection",
    "detect_index_kind",
    "full_slice",
    "normalize_index",
    "normalize_range",
    "parse_slice",
    "range_size",
    "resolve_axis",
    "reverse_slice",
    "step_slice",
]

INDEX_KINDS = ("single", "range", "string", "gather", "mask")


@dataclass(frozen=True)
class AxisSelection:
    """Resolved selection along one axis.

    Attributes
    ----------
    kind : str
        ``"single"``, ``"range"``, ``"gather"`` or ``"mask"``.
    start : int
        First coordinate for single and range selections.
    step : int
        Coordinate step for range selections.
    size : int
        Number of coordinates selected.
    positions : ndarray or None
        Selected coordinates for gather and mask selections.
    """

    kind: str
    start: int = 0
    step: int = 1
    size: int = 1
    positions: np.ndarray | None = None

    @property
    def keeps_axis(self):
        return self.kind != "single"

    @property
    def is_basic(self):
        """True when the selection can be expressed as a strided view."""
        return self.kind in ("single", "range")

    def coordinates(self):
        """Coordinates along the axis, in selection order."""
        if self.positions is not None:
            return self.positions
        return self.start + self.step * np.arange(self.size, dtype=np.int64)


def full_slice():
    """Range selecting the whole axis."""
    return slice(None, None, 1)


def reverse_slice():
    """Range selecting the whole axis back to front."""
    return slice(None, None, -1)


def step_slice(step):
    """Range selecting every *step*-th element of the axis."""
    if not is_integer(step):
        raise InvalidParameterError.non_integer("step", step)
    if step == 0:
        raise InvalidParameterError("step", "non-zero integer", step)
    return slice(None, None, int(step))


def _parse_component(text, name, source):
    text = text.strip()
    if text == "":
        return None
    try:
        return int(text)
    except ValueError:
        raise InvalidParameterError(name, "integer or empty", text, f"in slice string {source!r}") from None


def parse_slice(text):
    """Parse ``"start:end"`` or ``"start:end:step"``.

    Empty components mean "use the default": ``start`` becomes the first
    element in the direction of travel, ``end`` runs through the last one,
    and ``step`` becomes 1. Open bounds are returned as ``None`` and filled in
    by :func:`normalize_range` once the axis length is known.

    Parameters
    ----------
    text : str
        Slice expression.

    Returns
    -------
    tuple
        ``(start, end, step)`` where ``start`` and ``end`` may be ``None``.

    Raises
    ------
    InvalidParameterError
        If the string is empty, has a single component or more than three,
        contains a non-integer component, or has a zero step.

    Examples
    --------
    >>> parse_slice("1:4")
    (1, 4, 1)
    >>> parse_slice("::-1")
    (None, None, -1)
    """
    if not isinstance(text, str):
        raise InvalidParameterError("slice", "string", text)
    if text.strip() == "":
        raise InvalidParameterError("slice", "non-empty slice string", text)

    parts = text.split(":")
    if len(parts) == 1:
        raise InvalidParameterError(
            "slice", "'start:end' or 'start:end:step'", text, "Use an integer to select a single index"
        )
    if len(parts) > 3:
        raise InvalidParameterError("slice", "at most three ':'-separated components", text)

    step = 1
    if len(parts) == 3:
        step = _parse_component(parts[2], "step", text)
        if step is None:
            step = 1
        elif step == 0:
            raise InvalidParameterError("step", "non-zero integer", step, f"in slice string {text!r}")
    start = _parse_component(parts[0], "start", text)
    end = _parse_component(parts[1], "end", text)
    return start, end, step


def normalize_index(index, dim, axis=None):
    """Map a possibly negative index into ``[0, dim)``."""
    if not is_integer(index):
        raise InvalidParameterError.non_integer("index", index)
    index = int(index)
    normalized = index + dim if index < 0 else index
    if not 0 <= normalized < dim:
        raise IndexOutOfBoundsError(index, dim, axis)
    return normalized


def normalize_range(start, end, step, dim):
    """Resolve open and negative bounds of a range against an axis length.

    For a positive step both bounds end up in ``[0, dim]``. For a negative step
    ``start`` ends up in ``[0, dim - 1]`` and ``end`` in ``[-1, dim - 1]``,
    where ``-1`` means "through the first element".

    Returns
    -------
    tuple of int
        ``(start, end, step)``.
    """
    if step is None:
        step = 1
    for name, value in (("start", start), ("end", end), ("step", step)):
        if value is not None and not is_integer(value):
            raise InvalidParameterError.non_integer(name, value)
    step = int(step)
    if step == 0:
        raise InvalidParameterError("step", "non-zero integer", step)

    if step > 0:
        if start is None:
            start = 0
        elif start < 0:
            start = max(0, dim + start)
        if end is None:
            end = dim
        elif end < 0:
            end = max(0, dim + end)
        start = min(max(int(start), 0), dim)
        end = min(max(int(end), 0), dim)
    else:
        if start is None or start >= dim:
            start = dim - 1
        elif start < 0:
            start = dim + start
        if end is None or end < -dim:
            end = -1
        elif end < 0:
            end = dim + end
        elif end >= dim:
            end = dim - 1
        start = min(max(int(start), 0), dim - 1)
        end = min(max(int(end), -1), dim - 1)
    return start, end, step


def range_size(start, end, step):
    """Number of elements a normalized range visits."""
    if step > 0:
        return max(0, math.ceil((end - start) / step))
    return max(0, math.ceil((start - end) / -step))


def _is_ndarray(spec):
    from strided.ndarray.ndarray import NDArray

    return isinstance(spec, NDArray)


def detect_index_kind(spec):
    """Classify an index specification.

    Parameters
    ----------
    spec : object
        Specification for one axis.

    Returns
    -------
    str
        One of ``"single"``, ``"range"``, ``"string"``, ``"gather"`` or
        ``"mask"``.

    Raises
    ------
    InvalidParameterError
        For empty lists, lists mixing booleans and numbers, and any other
        unsupported object.

    Notes
    -----
    A list or tuple of two or three integers is read as a range. To gather
    exactly two or three positions pass a NumPy integer array or an
    ``NDArray``, which are always gathers.
    """
    if isinstance(spec, (bool, np.bool_)):
        raise InvalidParameterError("index", "integer, slice, string or array", spec)
    if is_integer(spec):
        return "single"
    if isinstance(spec, str):
        return "string"
    if isinstance(spec, slice):
        return "range"
    if _is_ndarray(spec):
        return "gather"
    if isinstance(spec, np.ndarray):
        if spec.dtype == np.bool_:
            return "mask"
        if spec.dtype.kind in "iu":
            return "gather"
        raise InvalidParameterError("index", "integer or boolean array", spec.dtype)
    if isinstance(spec, (list, tuple)):
        if len(spec) == 0:
            raise InvalidParameterError("index", "non-empty index list", spec)
        if all(isinstance(v, (bool, np.bool_)) for v in spec):
            return "mask"
        if all(is_integer(v) or v is None for v in spec) and len(spec) in (2, 3):
            return "range"
        if all(is_integer(v) for v in spec):
            return "gather"
        raise InvalidParameterError("index", "list of integers or list of booleans", spec, "Mixed index types")
    raise InvalidParameterError("index", "integer, slice, string or array", spec)


def _gather_positions(spec, dim, axis):
    if _is_ndarray(spec):
        values = spec.to_numpy()
        if values.dtype.kind == "f" and not np.all(values == np.trunc(values)):
            raise InvalidParameterError("index", "integer-valued index array", spec)
        values = values.astype(np.int64)
    else:
        values = np.asarray(spec, dtype=np.int64)
    if values.ndim != 1:
        raise DimensionError("index arrays must be one-dimensional", actual_shape=values.shape, operation="index")
    positions = np.where(values < 0, values + dim, values)
    bad = (positions < 0) | (positions >= dim)
    if bad.any():
        raise IndexOutOfBoundsError(int(values[bad][0]), dim, axis)
    return positions


def resolve_axis(spec, dim, axis=None):
    """Resolve one specification against an axis of length *dim*.

    Returns
    -------
    AxisSelection
        The coordinates selected along the axis.
    """
    kind = detect_index_kind(spec)
    if kind == "single":
        return AxisSelection("single", start=normalize_index(spec, dim, axis), size=1)
    if kind in ("range", "string"):
        if kind == "string":
            start, end, step = parse_slice(spec)
        elif isinstance(spec, slice):
            start, end, step = spec.start, spec.stop, spec.step
        else:
            start, end = spec[0], spec[1]
            step = spec[2] if len(spec) == 3 else 1
        if dim == 0:
            normalize_range(start, end, step, 1)
            return AxisSelection("range", start=0, step=step or 1, size=0)
        start, end, step = normalize_range(start, end, step, dim)
        return AxisSelection("range", start=start, step=step, size=range_size(start, end, step))
    if kind == "mask":
        mask = np.asarray(spec, dtype=np.bool_)
        if mask.ndim != 1 or mask.shape[0] != dim:
            raise DimensionError(
                "boolean mask length must match the axis", expected_shape=(dim,), actual_shape=mask.shape,
                operation="index",
            )
        positions = np.flatnonzero(mask).astype(np.int64)
        return AxisSelection("mask", size=positions.shape[0], positions=positions)
    positions = _gather_positions(spec, dim, axis)
    return AxisSelection("gather", size=positions.shape[0], positions=positions)
