"""Closed-form roots of cubic and quartic polynomials."""

from __future__ import annotations

import math

_EPS = 1e-12
_TWO_PI = 2.0 * math.pi


def _sqrt(x: float) -> float:
    # Negative arguments yield NaN rather than an exception, which the
    # quartic solver relies on.
    return math.sqrt(x) if x >= 0 else math.nan


def _solve_cubic_raw(a: float, b: float, c: float) -> tuple[int, list[float]]:
    a2 = a * a
    q = (a2 - 3 * b) / 9
    r = (a * (2 * a2 - 9 * b) + 27 * c) / 54
    r2 = r * r
    q3 = q * q * q
    if r2 < q3:
        t = r / _sqrt(q3)
        t = min(max(t, -1.0), 1.0)
        t = math.acos(t)
        a /= 3
        q = -2 * _sqrt(q)
        return 3, [
            q * math.cos(t / 3) - a,
            q * math.cos((t + _TWO_PI) / 3) - a,
            q * math.cos((t - _TWO_PI) / 3) - a,
        ]
    big_a = -((abs(r) + _sqrt(r2 - q3)) ** (1.0 / 3))
    if r < 0:
        big_a = -big_a
    big_b = 0.0 if abs(big_a) < _EPS else q / big_a
    a /= 3
    x0 = (big_a + big_b) - a
    x1 = -0.5 * (big_a + big_b) - a
    x2 = 0.5 * math.sqrt(3.0) * (big_a - big_b)
    if abs(x2) < _EPS:
        return 2, [x0, x1, x1]
    return 1, [x0, x1, x2]


def solve_cubic(a: float, b: float, c: float) -> list[float | complex]:
    """Roots of x^3 + a*x^2 + b*x + c.

    Returns three real roots, two real roots (one of them double), or one
    real root followed by a complex-conjugate pair.
    """
    count, x = _solve_cubic_raw(a, b, c)
    if count == 3:
        return x
    if count == 2:
        return x[:2]
    return [x[0], complex(x[1], x[2]), complex(x[1], -x[2])]


def solve_quartic(a: float, b: float, c: float, d: float) -> list[float]:
    """Real roots of x^4 + a*x^3 + b*x^2 + c*x + d."""
    a3 = -b
    b3 = a * c - 4.0 * d
    c3 = -a * a * d - c * c + 4.0 * b * d

    count, x3 = _solve_cubic_raw(a3, b3, c3)
    y = x3[0]
    # Pick the resolvent root with the largest magnitude.
    if count != 1:
        if abs(x3[1]) > abs(y):
            y = x3[1]
        if abs(x3[2]) > abs(y):
            y = x3[2]

    disc = y * y - 4 * d
    if abs(disc) < _EPS:
        q1 = q2 = y * 0.5
        disc = a * a - 4.0 * (b - y)
        if abs(disc) < _EPS:
            p1 = p2 = a * 0.5
        else:
            sq = _sqrt(disc)
            p1 = (a + sq) * 0.5
            p2 = (a - sq) * 0.5
    else:
        sq = _sqrt(disc)
        q1 = (y + sq) * 0.5
        q2 = (y - sq) * 0.5
        p1 = (a * q1 - c) / (q1 - q2)
        p2 = (c - a * q2) / (q1 - q2)

    roots: list[float] = []
    for p, q in ((p1, q1), (p2, q2)):
        disc = p * p - 4 * q
        if not disc < 0.0:
            sq = _sqrt(disc)
            roots.append((-p + sq) * 0.5)
            roots.append((-p - sq) * 0.5)
    return roots