import collections

from pyflop.coding.bits import bits_to_hex, decode, encode, hex_to_bits
from pyflop.coding.quantizer import HALF_EVEN, dequantize, quantize
from pyflop.converters.decimal_parser import parse_decimal
from pyflop.converters.rational_format import PLAIN, format_rational
from pyflop.formats import describe_layout, total_bits
from pyflop.values import FINITE

INPUT_TYPES = ("decimal", "bits", "hex")

class Conversion:
    """
    A value converted to a binary floating point format. It can be created
    from:

    - decimal text, which is parsed exactly and rounded to the format,
    - a bit string of the full format width,
    - hex text, padded or truncated to the format width.
    """

    def __init__(self, fmt, input, input_type="decimal", rounding=HALF_EVEN,
                 log=None):
        """Run the conversion pipeline, optionally reporting each stage."""

        assert(input_type in INPUT_TYPES)

        self.fmt = fmt
        self.rounding = rounding
        self.source = None

        def status(*args):
            if log is not None: log(*args)

        if input_type == "decimal":
            parsed = parse_decimal(input)
            status("Parsed decimal", input.strip(), "as", parsed.kind)
            if parsed.kind == FINITE:
                self.source = parsed.rational
            self.soft = quantize(parsed, fmt, rounding)
            status("Quantized to", fmt.name, "with", rounding)
        elif input_type == "bits":
            self.soft = decode(input, fmt)
            status("Decoded bits")
        elif input_type == "hex":
            bits = hex_to_bits(input, total_bits(fmt))
            status("Expanded hex to", bits)
            self.soft = decode(bits, fmt)
            status("Decoded bits")

        self.bits = encode(self.soft, fmt)
        self.hex = bits_to_hex(self.bits)
        self.stored = dequantize(self.soft, fmt)

        if self.stored is not None and self.source is not None:
            self.error = self.stored - self.source
        else:
            self.error = None

    def describe(self, precision=32, notation=PLAIN):
        """Return the report fields in display order."""

        description = collections.OrderedDict()
        description["Format"] = self.fmt.name
        description["Layout"] = describe_layout(self.fmt)
        description["Class"] = self.soft.cls
        description["Sign"] = "-" if self.soft.sign else "+"
        description["Exponent"] = str(self.soft.exponent)
        description["Binary"] = self.bits
        description["Hex"] = self.hex

        if self.stored is not None:
            description["Stored"] = format_rational(self.stored, precision,
                                                    notation)
            if self.error is not None:
                description["Error"] = format_rational(self.error, precision,
                                                       notation)
        else:
            description["Stored"] = self.soft.cls
            if self.source is not None:
                description["Error"] = "(undefined for NaN/Infinity)"

        return description

    def __str__(self):
        return format_report(self.describe())

def format_report(description):
    """Lay out report fields as aligned "Label       : value" lines."""

    return "\n".join("{:<12}: {}".format(label, value)
                     for label, value in description.items())
