"""
Values passed between the stages of a conversion.

An ExactValue is what the decimal parser produces: either an exact rational
or one of the special values. A ClassifiedFloat is a value as it is stored in
a particular binary format, split into its class, sign, unbiased exponent and
stored significand bits (without the implicit leading one).
"""

import collections

import sympy

ExactValue = collections.namedtuple("ExactValue", "kind rational")

# ExactValue kinds
FINITE = "finite"
POSITIVE_INFINITY = "+inf"
NEGATIVE_INFINITY = "-inf"
NOT_A_NUMBER = "nan"

ClassifiedFloat = collections.namedtuple("ClassifiedFloat",
                                         "cls sign exponent significand")

# ClassifiedFloat classes
NORMAL = "Normal"
SUBNORMAL = "Subnormal"
ZERO = "Zero"
POS_INFINITY = "PosInfinity"
NEG_INFINITY = "NegInfinity"
NAN = "NaN"

CLASSES = (NORMAL, SUBNORMAL, ZERO, POS_INFINITY, NEG_INFINITY, NAN)
SPECIAL_CLASSES = (POS_INFINITY, NEG_INFINITY, NAN)

def finite(numerator, denominator=1):
    """Create a finite exact value from an integer ratio or a rational."""
    return ExactValue(FINITE, sympy.Rational(numerator, denominator))

POSITIVE_INFINITY_VALUE = ExactValue(POSITIVE_INFINITY, None)
NEGATIVE_INFINITY_VALUE = ExactValue(NEGATIVE_INFINITY, None)
NAN_VALUE = ExactValue(NOT_A_NUMBER, None)

def is_negative(value):
    """
    Return whether the value carries a negative sign. NaN is never negative
    and neither is an exact zero.
    """

    if value.kind == FINITE:
        return bool(value.rational < 0)
    return value.kind == NEGATIVE_INFINITY

def infinity_class(sign):
    return NEG_INFINITY if sign else POS_INFINITY

def classified_float(cls, sign, exponent, significand, significand_bits):
    """
    Create a ClassifiedFloat after checking that the class is known and the
    significand fits in the stored width.
    """

    assert(cls in CLASSES)
    assert(0 <= significand < 1 << significand_bits)

    return ClassifiedFloat(cls, bool(sign), exponent, significand)
