"""Text rendering of arrays and their memory layout."""

import numpy as np
from prettytable import PrettyTable, TableStyle

from strided.core.config import get_options
from strided.core.constants import PRINT_EDGE_ITEMS

WIDTH = 78
THICK_SEP = "=" * WIDTH


def _make_table(headers, rows, align_map):
    """Create a PrettyTable with SINGLE_BORDER style and per-column alignment."""
    t = PrettyTable()
    t.set_style(TableStyle.SINGLE_BORDER)
    t.field_names = headers
    for row in rows:
        t.add_row(row)
    for h in headers:
        t.align[h] = align_map.get(h, "r")
    return str(t)


def format_title(title, subtitle=None):
    """Return title block lines with thick separators."""
    lines = [THICK_SEP, f" {title}"]
    if subtitle is not None:
        lines.append(f" {subtitle}")
    lines.append(THICK_SEP)
    return lines


def format_values(values, precision=None, threshold=None):
    """Render a numpy array as nested bracketed rows.

    Float values use ``precision`` digits after the decimal point and arrays
    larger than ``threshold`` elements are summarized with ``...``. Both
    default to the active engine options.
    """
    options = get_options()
    precision = options.print_precision if precision is None else precision
    threshold = options.print_threshold if threshold is None else threshold
    return np.array2string(
        values,
        precision=precision,
        threshold=threshold,
        edgeitems=PRINT_EDGE_ITEMS,
        separator=", ",
        prefix="NDArray(",
        suppress_small=True,
    )


def format_array(arr):
    """Return the ``repr`` of an array."""
    body = format_values(arr.to_numpy())
    flags = ", readonly=True" if arr.readonly else ""
    return f"NDArray({body}, dtype={arr.dtype}{flags})"


def format_layout(arr):
    """Return a table describing how a view maps onto its buffer.

    Parameters
    ----------
    arr : NDArray
        The view to describe.

    Returns
    -------
    str
        Title block followed by a two-column table.
    """
    rows = [
        ["Shape", str(tuple(arr.shape))],
        ["Strides", str(tuple(arr.strides))],
        ["Offset", str(arr.offset)],
        ["DType", str(arr.dtype)],
        ["Size", str(arr.size)],
        ["Contiguous", "yes" if arr.is_contiguous() else "no"],
        ["Readonly", "yes" if arr.readonly else "no"],
        ["Buffer length", str(len(arr.buffer))],
    ]
    table = _make_table(["Property", "Value"], rows, {"Property": "l", "Value": "r"})
    lines = format_title("NDArray layout", f"{arr.ndim}-D view")
    lines.append(table)
    return "\n".join(lines)
