"""
Polynomial evaluation for empirical calibration curves.

The APS3200 curves are high-degree regressions fitted offline to reference
hardware telemetry. Their coefficients span roughly twenty orders of
magnitude, so the rounding of every term shows in the result. Terms are
accumulated one by one in ascending powers, and each power is built by
square-and-multiply rather than ``pow``, which keeps results bit-for-bit
reproducible with the reference evaluation of the curves.
"""

from typing import Sequence


def integer_power(x: float, exponent: int) -> float:
    """``x`` raised to a non-negative integer power by square-and-multiply.

    Args:
        x: Base
        exponent: Non-negative integer exponent

    Returns:
        ``x ** exponent``, rounded after every multiplication
    """
    assert exponent >= 0, f"Exponent must be non-negative, got {exponent}"

    result = 1.0
    while True:
        if exponent & 1:
            result *= x
        exponent >>= 1
        if exponent == 0:
            return result
        x *= x


def evaluate_polynomial(coefficients: Sequence[float], x: float) -> float:
    """Evaluate ``c0 + c1*x + c2*x**2 + ... + cn*x**n``.

    Args:
        coefficients: Coefficients in ascending order of power
        x: Point at which to evaluate

    Returns:
        Polynomial value at ``x``
    """
    result = coefficients[0]
    for power in range(1, len(coefficients)):
        result += coefficients[power] * integer_power(x, power)
    return result
