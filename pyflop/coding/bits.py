"""
Serialise ClassifiedFloats to fixed width bit strings and back, and convert
between bit strings and hexadecimal text.
"""

import re

from bitstring import BitArray

from pyflop.formats import bias, max_exponent, min_exponent, total_bits
from pyflop.values import NAN, NORMAL, SUBNORMAL, ZERO
from pyflop.values import NEG_INFINITY, POS_INFINITY
from pyflop.values import classified_float, infinity_class

class FormatError(ValueError):
    pass

binary_pattern = re.compile(r"^[01]*$")
hex_pattern = re.compile(r"^[0-9a-f]+$", re.I)

def strip_prefix(text, prefix):
    """Remove surrounding whitespace and an optional case-insensitive prefix."""

    text = text.strip()
    if text[:len(prefix)].lower() == prefix:
        text = text[len(prefix):]
    return text

def uint_field(value, width):
    return BitArray(uint=value, length=width).bin

def encode(soft, fmt):
    """Return the bit string of a ClassifiedFloat in the given format."""

    e = fmt.exponent_bits
    m = fmt.significand_bits

    if soft.cls in (POS_INFINITY, NEG_INFINITY):
        fields = "1" * e + "0" * m
    elif soft.cls == NAN:
        fields = "1" * e + "1" * m
    elif soft.cls in (ZERO, SUBNORMAL):
        fields = "0" * e + uint_field(soft.significand, m)
    else:
        assert(soft.cls == NORMAL)
        fields = (uint_field(soft.exponent + bias(fmt), e) +
                  uint_field(soft.significand, m))

    return ("1" if soft.sign else "0") + fields

def decode(bits, fmt):
    """
    Parse a bit string, optionally prefixed with 0b, into a ClassifiedFloat.
    The string has to be exactly as long as the format.
    """

    cleaned = strip_prefix(bits, "0b")
    expected = total_bits(fmt)

    if len(cleaned) != expected:
        raise FormatError("expected {} bits, got {}".format(
            expected, len(cleaned)))
    if not binary_pattern.match(cleaned):
        raise FormatError("bits must contain only 0 or 1")

    fields = BitArray(bin=cleaned)
    sign = fields[0]
    exponent_field = fields[1:1 + fmt.exponent_bits]
    significand = fields[1 + fmt.exponent_bits:].uint

    if exponent_field.all(True):
        if significand == 0:
            cls = infinity_class(sign)
        else:
            # NaN payloads are not kept
            cls = NAN
            significand = 0
        exponent = max_exponent(fmt) + 1
    elif not exponent_field.any(True):
        cls = SUBNORMAL if significand else ZERO
        exponent = min_exponent(fmt)
    else:
        cls = NORMAL
        exponent = exponent_field.uint - bias(fmt)

    return classified_float(cls, sign, exponent, significand,
                            fmt.significand_bits)

def bits_to_hex(bits):
    """
    Convert a bit string to uppercase hex without leading zero digits. The
    bits are grouped into nibbles from the most significant end.
    """

    padded = "0" * (-len(bits) % 4) + bits
    digits = BitArray(bin=padded).hex.upper().lstrip("0")

    return digits or "0"

def hex_to_bits(text, width, strict=False):
    """
    Convert hex text, optionally prefixed with 0x, to a bit string of exactly
    width bits. Missing leading digits are taken as zeros. Surplus bits are
    dropped from the most significant end, unless strict is set, in which
    case dropping a nonzero bit raises FormatError.
    """

    cleaned = strip_prefix(text, "0x")

    if not cleaned:
        raise FormatError("no hex digits in {!r}".format(text))
    if not hex_pattern.match(cleaned):
        raise FormatError("invalid hex digit in {!r}".format(text))

    digits = -(-width // 4)
    bits = BitArray(hex=cleaned.rjust(digits, "0")).bin

    if strict and "1" in bits[:-width]:
        raise FormatError("hex value {} does not fit in {} bits".format(
            cleaned, width))

    return bits[-width:]
