"""Tests for engine options and context-local overrides."""

import contextvars

import pytest

from strided import from_array, zeros
from strided.core.config import EngineOptions, get_options, reset_options, set_options, use_options
from strided.core.constants import EPSILON
from strided.core.dtypes import DType
from strided.core.errors import InvalidParameterError


def test_defaults():
    options = get_options()
    assert options.default_dtype is DType.FLOAT64
    assert options.epsilon == EPSILON
    assert options.print_precision == 4


def test_set_and_reset():
    set_options(default_dtype="int32")
    assert get_options().default_dtype is DType.INT32
    assert zeros((2,)).dtype is DType.INT32
    reset_options()
    assert get_options().default_dtype is DType.FLOAT64


class TestUseOptions:
    def test_sets_and_reverts(self):
        with use_options(epsilon=1e-6) as options:
            assert options.epsilon == 1e-6
            assert get_options().epsilon == 1e-6
        assert get_options().epsilon == EPSILON

    def test_reverts_on_exception(self):
        with pytest.raises(ZeroDivisionError), use_options(print_precision=2):
            assert get_options().print_precision == 2
            1 / 0  # noqa: B018
        assert get_options().print_precision == 4

    def test_nested_reverts(self):
        with use_options(default_dtype=DType.UINT8):
            with use_options(default_dtype="int16"):
                assert from_array([1, 2]).dtype is DType.INT16
            assert from_array([1, 2]).dtype is DType.UINT8
        assert from_array([1, 2]).dtype is DType.FLOAT64

    def test_copied_context_is_isolated(self):
        ctx = contextvars.copy_context()
        ctx.run(set_options, epsilon=1e-3)
        assert get_options().epsilon == EPSILON
        assert ctx.run(get_options).epsilon == 1e-3


@pytest.mark.parametrize(
    "changes",
    [
        {"epsilon": 0.0},
        {"epsilon": float("nan")},
        {"print_precision": -1},
        {"print_threshold": 1.5},
        {"default_dtype": "complex128"},
        {"unknown": 1},
    ],
)
def test_invalid_options(changes):
    with pytest.raises(InvalidParameterError):
        set_options(**changes)


def test_options_are_frozen():
    with pytest.raises(AttributeError):
        EngineOptions().epsilon = 1.0
