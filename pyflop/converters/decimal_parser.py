"""
Parse decimal text into exact values.
"""

import re

import sympy

from pyflop.values import ExactValue, FINITE
from pyflop.values import NAN_VALUE
from pyflop.values import NEGATIVE_INFINITY_VALUE, POSITIVE_INFINITY_VALUE

class ParseError(ValueError):
    pass

special_literals = {
    "inf": POSITIVE_INFINITY_VALUE,
    "+inf": POSITIVE_INFINITY_VALUE,
    "infinity": POSITIVE_INFINITY_VALUE,
    "+infinity": POSITIVE_INFINITY_VALUE,
    "-inf": NEGATIVE_INFINITY_VALUE,
    "-infinity": NEGATIVE_INFINITY_VALUE,
    "nan": NAN_VALUE,
    "+nan": NAN_VALUE,
    "-nan": NAN_VALUE,
}

decimal_pattern = re.compile(r"""
  ^
  (?P<sign>[+-])?                # sign as + or -
  (?:
    (?P<integer>\d+)             # integer part
    (?:\.(?P<fraction>\d*))?     # optional fractional part, possibly empty
  |
    \.(?P<bare_fraction>\d+)     # fractional part without an integer part
  )
  (?:e(?P<exponent>[+-]?\d+))?   # decimal exponent
  $
""", re.X | re.I)

def parse_decimal(text):
    """
    Parse a decimal numeral or one of the inf/nan literals. Finite numerals
    are converted exactly to a rational numerator/10^k.
    """

    cleaned = text.strip()

    special = special_literals.get(cleaned.lower())
    if special is not None:
        return special

    m = decimal_pattern.match(cleaned)
    if not m:
        raise ParseError("unable to parse decimal input: {}".format(text))

    integer = m.group("integer") or ""
    fraction = m.group("fraction") or m.group("bare_fraction") or ""
    exponent = int(m.group("exponent") or 0) - len(fraction)

    numerator = int(integer + fraction)
    if m.group("sign") == "-":
        numerator = -numerator

    if exponent >= 0:
        rational = sympy.Rational(numerator * 10 ** exponent)
    else:
        rational = sympy.Rational(numerator, 10 ** -exponent)

    return ExactValue(FINITE, rational)
