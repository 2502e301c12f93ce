"""Human-scaled formatting of SI magnitudes and durations."""
from __future__ import annotations

import math
from typing import NamedTuple

MINUTE = 60.0
HOUR = 60.0 * MINUTE
DAY = 24.0 * HOUR
MONTH = 30.0 * DAY
YEAR = 365.25 * DAY

# Exponents at or beyond these bounds collapse onto a single tier.
COLLAPSE_EXPONENT = 24
COLLAPSE_FACTOR = 1e9
COLLAPSE_HIGH_PREFIX = "G"
COLLAPSE_LOW_PREFIX = "n"

SI_PREFIXES: dict[int, str] = {
    -24: "y",
    -21: "z",
    -18: "a",
    -15: "f",
    -12: "p",
    -9: "n",
    -6: "µ",
    -3: "m",
    0: "",
    3: "k",
    6: "M",
    9: "G",
    12: "T",
    15: "P",
    18: "E",
    21: "Z",
    24: "Y",
}


class Unit(NamedTuple):
    value: float
    prefix: str


def make_unit(si: float) -> Unit:
    """Scale a strictly positive SI magnitude onto the nearest lower SI prefix.

    Values in ``[1, 1000)`` are returned unchanged. Exponents of 24 and above
    are divided by 1e9 and tagged giga, exponents of -24 and below are
    multiplied by 1e9 and tagged nano. Everything in between is bucketed to
    the multiple of three at or below its decimal exponent, so ``0.05``
    (exponent -2) becomes ``50 m``.
    """

    if not math.isfinite(si) or si <= 0.0:
        raise ValueError(f"Magnitude must be positive and finite, got {si!r}")
    exp = math.floor(math.log10(si))
    # log10 rounds to the next integer just below a power of ten.
    if 10.0 ** exp > si:
        exp -= 1
    elif 10.0 ** (exp + 1) <= si:
        exp += 1
    if 0 <= exp < 3:
        return Unit(si, SI_PREFIXES[0])
    if exp >= COLLAPSE_EXPONENT:
        return Unit(si / COLLAPSE_FACTOR, COLLAPSE_HIGH_PREFIX)
    if exp <= -COLLAPSE_EXPONENT:
        return Unit(si * COLLAPSE_FACTOR, COLLAPSE_LOW_PREFIX)
    exp3 = 3 * (exp // 3)
    return Unit(si * 10.0 ** -exp3, SI_PREFIXES[exp3])


def make_time(secs: float) -> str:
    """Render a duration using the coarsest whole unit it reaches."""

    if not math.isfinite(secs) or secs < 0.0:
        raise ValueError(f"Duration must be non-negative and finite, got {secs!r}")
    if secs == 0.0:
        return "0.00 s"
    years = secs / YEAR
    months = secs / MONTH
    days = secs / DAY
    hours = secs / HOUR
    minutes = secs / MINUTE
    if years >= 1:
        return f"{years:.2f} years"
    if months >= 1:
        return f"{math.floor(months)} m {math.floor((secs % MONTH) / DAY)} d"
    if days >= 1:
        return f"{math.floor(days)} d {math.floor(hours % 24)} h"
    if hours >= 1:
        return f"{math.floor(hours)} h {math.floor(minutes % 60)} m"
    if minutes >= 1:
        return f"{math.floor(minutes)} m {math.floor(secs % 60)} s"
    value, prefix = make_unit(secs)
    return f"{value:.2f} {prefix}s"


def to_precision(value: float, digits: int) -> str:
    """Format ``value`` with ``digits`` significant digits.

    Fixed notation is used unless the rounded exponent is below -6 or at least
    ``digits``, in which case the exponent is written out (``1.2346e+7``).
    """

    if digits < 1:
        raise ValueError("digits must be at least 1")
    if not math.isfinite(value):
        return str(value)
    if value == 0.0:
        return f"{0.0:.{digits - 1}f}"
    mantissa, exp_text = f"{value:.{digits - 1}e}".split("e")
    exponent = int(exp_text)
    if exponent < -6 or exponent >= digits:
        sign = "+" if exponent >= 0 else "-"
        return f"{mantissa}e{sign}{abs(exponent)}"
    return f"{value:.{max(0, digits - 1 - exponent)}f}"


__all__ = [
    "DAY",
    "HOUR",
    "MINUTE",
    "MONTH",
    "SI_PREFIXES",
    "Unit",
    "YEAR",
    "make_time",
    "make_unit",
    "to_precision",
]
