"""Engine-wide options with context-local overrides."""

from __future__ import annotations

import contextlib
import dataclasses
import math
from contextvars import ContextVar
from dataclasses import dataclass

from strided.core.constants import DEFAULT_PRINT_PRECISION, DEFAULT_PRINT_THRESHOLD, EPSILON
from strided.core.dtypes import DType
from strided.core.errors import InvalidParameterError

__all__ = [
    "EngineOptions",
    "get_options",
    "reset_options",
    "set_options",
    "use_options",
]


@dataclass(frozen=True)
class EngineOptions:
    """Options consulted by factories, linear algebra and printing.

    Attributes
    ----------
    default_dtype : DType
        Element kind used when a factory is called without ``dtype``.
    epsilon : float
        Threshold below which a pivot counts as zero. Also the default
        tolerance for rank and symmetry checks.
    print_precision : int
        Digits after the decimal point in ``repr`` of float arrays.
    print_threshold : int
        Arrays with more elements than this are summarized in ``repr``.
    """

    default_dtype: DType = DType.FLOAT64
    epsilon: float = EPSILON
    print_precision: int = DEFAULT_PRINT_PRECISION
    print_threshold: int = DEFAULT_PRINT_THRESHOLD

    def __post_init__(self):
        object.__setattr__(self, "default_dtype", DType.of(self.default_dtype))
        if isinstance(self.epsilon, bool) or not isinstance(self.epsilon, (int, float)):
            raise InvalidParameterError("epsilon", "positive finite number", self.epsilon)
        if not math.isfinite(self.epsilon) or self.epsilon <= 0:
            raise InvalidParameterError("epsilon", "positive finite number", self.epsilon)
        for name in ("print_precision", "print_threshold"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise InvalidParameterError(name, "non-negative integer", value)


_options: ContextVar[EngineOptions] = ContextVar("strided_options", default=EngineOptions())


def _updated(changes):
    fields = {f.name for f in dataclasses.fields(EngineOptions)}
    unknown = sorted(set(changes) - fields)
    if unknown:
        raise InvalidParameterError("option", "one of " + ", ".join(sorted(fields)), unknown[0])
    return dataclasses.replace(_options.get(), **changes)


def get_options():
    """Return the options active in the current context.

    Returns
    -------
    EngineOptions
        The active options.
    """
    return _options.get()


def set_options(**changes):
    """Change options for the current context.

    Parameters
    ----------
    **changes
        Field names of :class:`EngineOptions` and their new values.

    Returns
    -------
    EngineOptions
        The options now in effect.
    """
    options = _updated(changes)
    _options.set(options)
    return options


def reset_options():
    """Restore the default options in the current context."""
    _options.set(EngineOptions())


@contextlib.contextmanager
def use_options(**changes):
    """Context manager that temporarily overrides options.

    The previous options are restored when the context exits, even if an
    exception is raised.

    Parameters
    ----------
    **changes
        Field names of :class:`EngineOptions` and their values for the
        duration of the block.
    """
    token = _options.set(_updated(changes))
    try:
        yield _options.get()
    finally:
        _options.reset(token)
