"""Numerical constants and defaults shared across the engine."""

import numpy as np

EPSILON = float(np.finfo(np.float64).eps)

DEFAULT_PRINT_PRECISION = 4
DEFAULT_PRINT_THRESHOLD = 1000
PRINT_EDGE_ITEMS = 3

DEFAULT_LINSPACE_NUM = 50

# sigmoid inputs are clipped to this magnitude before exponentiation
SIGMOID_CLIP = 500.0
