"""Tests for array and layout formatting."""

from strided import from_array, use_options, zeros
from strided.core.format import THICK_SEP, WIDTH, format_array, format_layout, format_title, format_values


def test_width():
    assert WIDTH == 78
    assert THICK_SEP == "=" * 78


def test_format_title():
    lines = format_title("Main", "Sub")
    assert lines == [THICK_SEP, " Main", " Sub", THICK_SEP]


def test_repr_contains_values_and_dtype():
    text = repr(from_array([[1, 2], [3, 4]], dtype="int32"))
    assert text.startswith("NDArray([[1, 2],")
    assert text.endswith("dtype=int32)")


def test_repr_marks_readonly():
    arr = from_array([1.0, 2.0]).as_readonly()
    assert "readonly=True" in format_array(arr)


def test_precision_option():
    arr = from_array([1 / 3])
    assert "0.3333" in repr(arr)
    with use_options(print_precision=2):
        assert "0.33" in repr(arr)
        assert "0.333" not in repr(arr)


def test_threshold_summarizes():
    text = format_values(zeros((2000,)).to_numpy(), threshold=10)
    assert "..." in text


def test_format_layout(matrix_2x3):
    text = format_layout(matrix_2x3.T)
    assert text.splitlines()[0] == THICK_SEP
    assert "NDArray layout" in text
    assert "(3, 2)" in text
    assert "(1, 3)" in text
    assert "float64" in text
    assert "no" in text


def test_info_method(matrix_2x3):
    assert matrix_2x3.info() == format_layout(matrix_2x3)
