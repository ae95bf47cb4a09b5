"""Shape compatibility and zero-stride expansion for elementwise operations."""

from __future__ import annotations

from functools import reduce

from strided.core.errors import DimensionError

__all__ = [
    "broadcast_shapes",
    "broadcast_strides",
    "result_shape",
]


def broadcast_shapes(a, b, operation="broadcast"):
    """Return the shape two operands broadcast to.

    Shapes are right-aligned and the shorter one is padded with ones. Each
    aligned pair must be equal or contain a one.

    Parameters
    ----------
    a, b : sequence of int
        Operand shapes.
    operation : str
        Operation name used in the error message.

    Returns
    -------
    tuple of int
        The broadcast shape.

    Raises
    ------
    DimensionError
        If an aligned pair differs and neither side is one.

    Examples
    --------
    >>> broadcast_shapes((2, 2), (2,))
    (2, 2)
    >>> broadcast_shapes((3, 1), (1, 4))
    (3, 4)
    """
    a, b = tuple(a), tuple(b)
    ndim = max(len(a), len(b))
    pa = (1,) * (ndim - len(a)) + a
    pb = (1,) * (ndim - len(b)) + b

    out = []
    for da, db in zip(pa, pb, strict=True):
        if da == db or db == 1:
            out.append(da)
        elif da == 1:
            out.append(db)
        else:
            raise DimensionError(
                f"operands could not be broadcast together with shapes {list(a)} and {list(b)}",
                expected_shape=a,
                actual_shape=b,
                operation=operation,
            )
    return tuple(out)


def result_shape(*shapes, operation="broadcast"):
    """Broadcast any number of shapes."""
    if not shapes:
        return ()
    return reduce(lambda x, y: broadcast_shapes(x, y, operation), shapes)


def broadcast_strides(shape, strides, target):
    """Strides that read an operand as if it had shape *target*.

    Padded leading axes and axes of length one that are stretched get a zero
    stride, so every position along them reads the same element.

    Raises
    ------
    DimensionError
        If *shape* cannot be broadcast to *target*.
    """
    shape, strides, target = tuple(shape), tuple(strides), tuple(target)
    if len(shape) > len(target):
        raise DimensionError(
            "cannot broadcast to fewer dimensions", expected_shape=target, actual_shape=shape, operation="broadcast_to"
        )
    pad = len(target) - len(shape)
    out = [0] * pad
    for dim, stride, want in zip(shape, strides, target[pad:], strict=True):
        if dim == want:
            out.append(stride)
        elif dim == 1:
            out.append(0)
        else:
            raise DimensionError(
                f"cannot broadcast axis of length {dim} to {want}",
                expected_shape=target,
                actual_shape=shape,
                operation="broadcast_to",
            )
    return tuple(out)
