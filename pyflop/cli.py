descr = """
Convert a value to an IEEE754-style binary floating point format with
arbitrary exponent and significand widths, and show how it is stored.

The value is given as a decimal numeral (or inf/nan), as a raw bit string
with --bits, or as hex with --hex. Negative values such as -2.5, -1e5 or
-inf can be given directly.
"""

import argparse
import json
import re
import sys

from pyflop.coding.bits import FormatError
from pyflop.coding.quantizer import ROUNDING_MODES, rounding_mode
from pyflop.common.log import print_status
from pyflop.conversion import Conversion, format_report
from pyflop.converters.decimal_parser import ParseError
from pyflop.converters.rational_format import NOTATIONS, PLAIN
from pyflop.formats import ConfigError, PRESETS, resolve_format

# Arguments argparse mistakes for options, e.g. -1e5 or -inf
negative_value_pattern = re.compile(r"^-(\d|\.\d|inf$|infinity$|nan$)", re.I)

def create_parser():
    parser = argparse.ArgumentParser(prog="pyflop", description=descr)
    parser.add_argument("value", nargs="?", metavar="DECIMAL",
        help="decimal input; ignored when --bits/--hex are given")
    parser.add_argument("-f", "--format", default="fp32",
        choices=tuple(PRESETS) + ("custom",),
        help="target format (default: %(default)s)")
    parser.add_argument("--exp", type=int, metavar="BITS",
        dest="exponent_bits",
        help="exponent bit width (required when --format=custom)")
    parser.add_argument("--mant", type=int, metavar="BITS",
        dest="significand_bits",
        help="significand bit width (required when --format=custom)")
    parser.add_argument("--rounding", default="half-even",
        choices=tuple(ROUNDING_MODES),
        help="rounding mode used when converting from decimal " +
             "(default: %(default)s)")
    parser.add_argument("--precision", type=int, default=32,
        help="decimal digits to emit for numeric outputs " +
             "(default: %(default)s)")
    parser.add_argument("--notation", default=PLAIN, choices=NOTATIONS,
        help="notation of the displayed numbers (default: %(default)s)")

    raw = parser.add_mutually_exclusive_group()
    raw.add_argument("--bits", help="raw bit string, optionally 0b-prefixed")
    raw.add_argument("--hex", help="hex encoding of the bits, optionally " +
                                   "0x-prefixed")

    parser.add_argument("--json", action="store_true",
        help="print the report as a JSON object")
    parser.add_argument("-v", "--verbose", action="store_true",
        help="report each conversion stage on stderr")

    return parser

def main(argv=None):
    parser = create_parser()
    args, extra = parser.parse_known_args(argv)

    if (len(extra) == 1 and args.value is None and
            negative_value_pattern.match(extra[0])):
        args.value = extra[0]
    elif extra:
        parser.error("unrecognized arguments: {}".format(" ".join(extra)))

    if args.bits is not None:
        input, input_type = args.bits, "bits"
    elif args.hex is not None:
        input, input_type = args.hex, "hex"
    elif args.value is not None:
        input, input_type = args.value, "decimal"
    else:
        parser.error("a DECIMAL value is required unless --bits or --hex " +
                     "is given")

    if args.precision < 0:
        parser.error("--precision must not be negative")

    log = print_status if args.verbose else None

    try:
        fmt = resolve_format(args.format, args.exponent_bits,
                             args.significand_bits)
        if log: log("Using format", fmt.name, "with layout",
                    fmt.exponent_bits, fmt.significand_bits)
        conversion = Conversion(fmt, input, input_type,
                                rounding_mode(args.rounding), log=log)
    except (ConfigError, FormatError, ParseError) as err:
        print("error: {}".format(err), file=sys.stderr)
        return 1

    description = conversion.describe(args.precision, args.notation)

    if args.json:
        print(json.dumps(description, indent=2))
    else:
        print(format_report(description))

    return 0

if __name__ == "__main__":
    sys.exit(main())
