"""Elementwise math, activation, comparison and logical functions.

Every function accepts arrays, array-likes and scalars. Arrays keep their
shape and dtype; two arrays are broadcast against each other. Inputs outside
a function's domain raise ``MathematicalError`` rather than producing NaN.
"""

import numpy as np

from strided.core.constants import SIGMOID_CLIP
from strided.core.validation import validate_finite
from strided.ndarray.elementwise import (
    absolute,
    add,
    all_,
    any_,
    apply_binary,
    apply_unary,
    count_nonzero,
    divide,
    floor_divide,
    maximum,
    minimum,
    mod,
    multiply,
    negative,
    nonzero,
    power,
    subtract,
    where,
)

__all__ = [
    "abs",
    "absolute",
    "acos",
    "acosh",
    "add",
    "all",
    "any",
    "around",
    "asin",
    "asinh",
    "atan",
    "atan2",
    "atanh",
    "cbrt",
    "ceil",
    "cos",
    "cosh",
    "count_nonzero",
    "divide",
    "equal",
    "exp",
    "exp2",
    "expm1",
    "floor",
    "floor_divide",
    "greater",
    "greater_equal",
    "leaky_relu",
    "less",
    "less_equal",
    "log",
    "log10",
    "log1p",
    "log2",
    "logical_and",
    "logical_not",
    "logical_or",
    "logical_xor",
    "maximum",
    "minimum",
    "mod",
    "multiply",
    "negative",
    "nonzero",
    "not_equal",
    "power",
    "relu",
    "round",
    "sigmoid",
    "sign",
    "sin",
    "sinh",
    "softplus",
    "softsign",
    "sqrt",
    "subtract",
    "tan",
    "tanh",
    "trunc",
    "where",
]


def _positive(v):
    return v > 0


def _unit_interval(v):
    return np.abs(v) <= 1


def sqrt(x):
    """Square root; negative inputs raise ``MathematicalError``."""
    return apply_unary(x, np.sqrt, "sqrt", lambda v: v >= 0, "Square root of negative number")


def cbrt(x):
    return apply_unary(x, np.cbrt, "cbrt")


def exp(x):
    return apply_unary(x, np.exp, "exp")


def exp2(x):
    return apply_unary(x, np.exp2, "exp2")


def expm1(x):
    return apply_unary(x, np.expm1, "expm1")


def log(x):
    """Natural logarithm; non-positive inputs raise ``MathematicalError``."""
    return apply_unary(x, np.log, "log", _positive, "Logarithm of non-positive number")


def log2(x):
    return apply_unary(x, np.log2, "log2", _positive, "Logarithm of non-positive number")


def log10(x):
    return apply_unary(x, np.log10, "log10", _positive, "Logarithm of non-positive number")


def log1p(x):
    return apply_unary(x, np.log1p, "log1p", lambda v: v > -1, "log1p is undefined for values <= -1")


def sign(x):
    return apply_unary(x, np.sign, "sign")


def ceil(x):
    return apply_unary(x, np.ceil, "ceil")


def floor(x):
    return apply_unary(x, np.floor, "floor")


def around(x):
    """Round to the nearest integer, halves toward positive infinity."""
    return apply_unary(x, lambda v: np.floor(v + 0.5), "round")


def trunc(x):
    return apply_unary(x, np.trunc, "trunc")


def sin(x):
    return apply_unary(x, np.sin, "sin")


def cos(x):
    return apply_unary(x, np.cos, "cos")


def tan(x):
    return apply_unary(x, np.tan, "tan")


def asin(x):
    """Inverse sine on ``[-1, 1]``."""
    return apply_unary(x, np.arcsin, "asin", _unit_interval, "asin is only defined on [-1, 1]")


def acos(x):
    """Inverse cosine on ``[-1, 1]``."""
    return apply_unary(x, np.arccos, "acos", _unit_interval, "acos is only defined on [-1, 1]")


def atan(x):
    return apply_unary(x, np.arctan, "atan")


def atan2(y, x):
    """Angle of the point ``(x, y)``, elementwise."""
    return apply_binary(y, x, np.arctan2, "atan2")


def sinh(x):
    return apply_unary(x, np.sinh, "sinh")


def cosh(x):
    return apply_unary(x, np.cosh, "cosh")


def tanh(x):
    return apply_unary(x, np.tanh, "tanh")


def asinh(x):
    return apply_unary(x, np.arcsinh, "asinh")


def acosh(x):
    return apply_unary(x, np.arccosh, "acosh", lambda v: v >= 1, "acosh is only defined for values >= 1")


def atanh(x):
    return apply_unary(x, np.arctanh, "atanh", lambda v: np.abs(v) < 1, "atanh is only defined on (-1, 1)")


def sigmoid(x):
    """Logistic function, with inputs clipped to ``[-500, 500]``."""
    return apply_unary(x, lambda v: 1.0 / (1.0 + np.exp(-np.clip(v, -SIGMOID_CLIP, SIGMOID_CLIP))), "sigmoid")


def relu(x):
    return apply_unary(x, lambda v: np.maximum(v, 0.0), "relu")


def leaky_relu(x, alpha=0.01):
    """``x`` where positive, ``alpha * x`` elsewhere."""
    alpha = validate_finite(alpha, "alpha")
    return apply_unary(x, lambda v: np.where(v > 0, v, alpha * v), "leaky_relu")


def softplus(x):
    """``log(1 + exp(x))`` computed without overflow for large inputs."""
    return apply_unary(x, lambda v: np.log1p(np.exp(-np.abs(v))) + np.maximum(v, 0.0), "softplus")


def softsign(x):
    return apply_unary(x, lambda v: v / (1.0 + np.abs(v)), "softsign")


def equal(x, y):
    """1 where ``x == y``, otherwise 0."""
    return apply_binary(x, y, np.equal, "equal")


def not_equal(x, y):
    return apply_binary(x, y, np.not_equal, "not_equal")


def less(x, y):
    return apply_binary(x, y, np.less, "less")


def less_equal(x, y):
    return apply_binary(x, y, np.less_equal, "less_equal")


def greater(x, y):
    return apply_binary(x, y, np.greater, "greater")


def greater_equal(x, y):
    return apply_binary(x, y, np.greater_equal, "greater_equal")


def logical_not(x):
    """1 where ``x`` is zero, otherwise 0."""
    return apply_unary(x, lambda v: v == 0, "logical_not")


def logical_and(x, y):
    return apply_binary(x, y, lambda a, b: (a != 0) & (b != 0), "logical_and")


def logical_or(x, y):
    return apply_binary(x, y, lambda a, b: (a != 0) | (b != 0), "logical_or")


def logical_xor(x, y):
    return apply_binary(x, y, lambda a, b: (a != 0) ^ (b != 0), "logical_xor")


abs = absolute
round = around
any = any_
all = all_
