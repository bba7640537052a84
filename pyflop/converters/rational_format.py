import sympy

from pyflop.formats import ConfigError

PLAIN = "plain"
SCIENTIFIC = "scientific"

NOTATIONS = (PLAIN, SCIENTIFIC)

def format_rational(value, precision, notation=PLAIN):
    """
    Render an exact rational as decimal text with at most precision digits
    after the decimal point. Digits stop early once the expansion terminates.
    """

    if notation not in NOTATIONS:
        raise ConfigError("unknown notation: {}".format(notation))

    value = sympy.Rational(value)

    if value == 0:
        return "0"

    negative = bool(value < 0)
    magnitude = abs(value)
    numerator, denominator = int(magnitude.p), int(magnitude.q)

    integer, remainder = divmod(numerator, denominator)

    digits = []
    while remainder and len(digits) < precision:
        digit, remainder = divmod(remainder * 10, denominator)
        digits.append(str(digit))

    if digits:
        text = "{}.{}".format(integer, "".join(digits))
    else:
        text = str(integer)

    if notation == SCIENTIFIC:
        text = to_scientific(text)

    # Truncated to nothing but zeros, no sign to show
    if not text.strip("0.e+-"):
        negative = False

    return "-" + text if negative else text

def to_scientific(text):
    """
    Rewrite an unsigned plain decimal string as d.ddd...e+N, dropping
    trailing zeros from the mantissa.
    """

    integer, _, fraction = text.partition(".")
    digits = (integer + fraction).lstrip("0")

    if not digits:
        return "0"

    # Position of the first significant digit relative to the decimal point
    exponent = len(integer.lstrip("0")) - 1
    if not integer.lstrip("0"):
        exponent = -(len(fraction) - len(fraction.lstrip("0")) + 1)

    first, rest = digits[0], digits[1:].rstrip("0")
    mantissa = "{}.{}".format(first, rest) if rest else first

    return "{}e{:+d}".format(mantissa, exponent)
