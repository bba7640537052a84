import functools

import sympy

from pyflop.formats import ConfigError
from pyflop.formats import bias, max_exponent, min_exponent
from pyflop.values import FINITE, NEGATIVE_INFINITY, NOT_A_NUMBER
from pyflop.values import NAN, NORMAL, SUBNORMAL, ZERO
from pyflop.values import classified_float, infinity_class, is_negative

# Rounding modes
HALF_EVEN = "half-even"
TOWARD_ZERO = "toward-zero"

ROUNDING_MODES = {
    "half-even": HALF_EVEN,
    "nearest": HALF_EVEN,
    "even": HALF_EVEN,
    "toward-zero": TOWARD_ZERO,
    "trunc": TOWARD_ZERO,
    "zero": TOWARD_ZERO,
}

# Bits extracted beyond the stored width: guard, round and one more
EXTRA_BITS = 3

__one = sympy.Rational(1)

def rounding_mode(name):
    """Resolve a rounding mode name or one of its aliases."""

    try:
        return ROUNDING_MODES[name.lower()]
    except KeyError:
        raise ConfigError("unknown rounding mode: {}".format(name)) from None

def pow2(exp):
    """Return 2^exp as an exact rational, for negative exp as well."""

    if exp >= 0:
        return sympy.Rational(1 << exp)
    else:
        return sympy.Rational(1, 1 << -exp)

def compare_pow2(r, exp):
    """Return -1, 0 or 1 as the positive rational r is <, = or > 2^exp."""

    numerator, denominator = int(r.p), int(r.q)

    if exp >= 0:
        lhs, rhs = numerator, denominator << exp
    else:
        lhs, rhs = numerator << -exp, denominator

    return (lhs > rhs) - (lhs < rhs)

def log2_floor(r):
    """
    Return the exact floor of log2(r) for a positive rational r, i.e. the
    integer exp such that 2^exp <= r < 2^(exp+1).

    The search starts from the difference of the bit lengths of numerator and
    denominator, which is off by at most one, and steps towards the answer.
    """

    assert(r > 0)

    exp = int(r.p).bit_length() - int(r.q).bit_length() - 1

    while True:
        if compare_pow2(r, exp) < 0:
            exp -= 1
        elif compare_pow2(r, exp + 1) >= 0:
            exp += 1
        else:
            return exp

def fraction_bits(fraction, count):
    """
    Extract the first count binary digits of a fraction in [0, 1) by
    repeated doubling. Return the digits and whether anything nonzero
    remains after them (the sticky bit).
    """

    assert(0 <= fraction < 1)

    bits = []
    remainder = fraction

    for i in range(count):
        remainder *= 2
        if remainder >= 1:
            bits.append(1)
            remainder -= 1
        else:
            bits.append(0)

    return tuple(bits), remainder != 0

def bits2int(bits):
    return functools.reduce(lambda value, bit: value << 1 | bit, bits, 0)

def round_bits(bits, sticky, width, mode):
    """
    Round a sequence of bits to its first width bits. Return the rounded
    value and whether the rounding carried out of all kept bits (in which
    case the value is zero).
    """

    assert(mode in (HALF_EVEN, TOWARD_ZERO))

    kept = bits[:width]
    kept_value = bits2int(kept)

    if mode == TOWARD_ZERO or width >= len(bits):
        return kept_value, False

    guard = bits[width]
    round_bit = bits[width + 1] if width + 1 < len(bits) else 0
    rest = sticky or any(bits[width + 2:])

    if guard == 1 and (round_bit == 1 or rest):
        increment = True
    elif guard == 1:
        # Exact tie, round to the even neighbour
        increment = kept_value & 1 == 1
    else:
        increment = False

    if not increment:
        return kept_value, False

    if kept_value == (1 << width) - 1:
        return 0, True
    return kept_value + 1, False

def special(cls, sign, fmt):
    """Create an infinity or NaN with the sentinel exponent."""
    return classified_float(cls, sign, max_exponent(fmt) + 1, 0,
                            fmt.significand_bits)

def quantize_normal(magnitude, sign, exp, fmt, mode):
    """Round a magnitude in [2^exp, 2^(exp+1)) within the normal range."""

    mantissa = magnitude / pow2(exp) - __one
    bits, sticky = fraction_bits(mantissa, fmt.significand_bits + EXTRA_BITS)
    significand, carry = round_bits(bits, sticky, fmt.significand_bits, mode)

    if carry:
        exp += 1

    if exp > max_exponent(fmt):
        return special(infinity_class(sign), sign, fmt)

    return classified_float(NORMAL, sign, exp, significand,
                            fmt.significand_bits)

def quantize_subnormal(magnitude, sign, fmt, mode):
    """Round a magnitude below the smallest normal number."""

    min_exp = min_exponent(fmt)
    scaled = magnitude / pow2(min_exp)
    bits, sticky = fraction_bits(scaled, fmt.significand_bits + EXTRA_BITS)
    significand, carry = round_bits(bits, sticky, fmt.significand_bits, mode)

    if carry:
        # Rounded up to the smallest normal number
        return classified_float(NORMAL, sign, min_exp, 0,
                                fmt.significand_bits)

    cls = SUBNORMAL if significand else ZERO
    return classified_float(cls, sign, min_exp, significand,
                            fmt.significand_bits)

def quantize(value, fmt, mode):
    """
    Return the ClassifiedFloat nearest to an exact value in the given format,
    according to the rounding mode.
    """

    assert(mode in (HALF_EVEN, TOWARD_ZERO))

    sign = is_negative(value)

    if value.kind == NOT_A_NUMBER:
        return special(NAN, False, fmt)
    if value.kind != FINITE:
        return special(infinity_class(value.kind == NEGATIVE_INFINITY),
                       sign, fmt)
    if value.rational == 0:
        return classified_float(ZERO, False, min_exponent(fmt), 0,
                                fmt.significand_bits)

    magnitude = abs(value.rational)
    exp = log2_floor(magnitude)

    if exp > bias(fmt):
        return special(infinity_class(sign), sign, fmt)

    if exp >= min_exponent(fmt):
        return quantize_normal(magnitude, sign, exp, fmt, mode)
    else:
        return quantize_subnormal(magnitude, sign, fmt, mode)

def dequantize(soft, fmt):
    """
    Return the exact rational value stored by a ClassifiedFloat, or None for
    infinities and NaN.
    """

    if soft.cls == ZERO:
        return sympy.Rational(0)

    fraction = sympy.Rational(soft.significand, 1 << fmt.significand_bits)

    if soft.cls == NORMAL:
        value = (__one + fraction) * pow2(soft.exponent)
    elif soft.cls == SUBNORMAL:
        value = fraction * pow2(min_exponent(fmt))
    else:
        return None

    return -value if soft.sign else value
