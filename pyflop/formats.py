import collections

FloatFormat = collections.namedtuple("FloatFormat",
                                     "name exponent_bits significand_bits")

class ConfigError(ValueError):
    pass

# Supported widths for custom formats
EXPONENT_BITS_RANGE = range(2, 12)
SIGNIFICAND_BITS_RANGE = range(1, 53)

FP16 = FloatFormat("FP16", 5, 10)
BFLOAT16 = FloatFormat("bfloat16", 8, 7)
FP32 = FloatFormat("FP32", 8, 23)
FP64 = FloatFormat("FP64", 11, 52)
TF32 = FloatFormat("TensorFloat-32", 8, 10)

PRESETS = collections.OrderedDict((
    ("fp16", FP16),
    ("bfloat16", BFLOAT16),
    ("fp32", FP32),
    ("fp64", FP64),
    ("tf32", TF32),
))

def create_format(exponent_bits, significand_bits, name="Custom"):
    """
    Create a custom floating point format. Raise ConfigError if either width
    is outside the supported range.
    """

    if exponent_bits not in EXPONENT_BITS_RANGE:
        raise ConfigError("exponent bits must be between {} and {}".format(
            EXPONENT_BITS_RANGE[0], EXPONENT_BITS_RANGE[-1]))
    if significand_bits not in SIGNIFICAND_BITS_RANGE:
        raise ConfigError("significand bits must be between {} and {}".format(
            SIGNIFICAND_BITS_RANGE[0], SIGNIFICAND_BITS_RANGE[-1]))

    return FloatFormat(name, exponent_bits, significand_bits)

def resolve_format(choice, exponent_bits=None, significand_bits=None):
    """
    Return the format named by choice. "custom" builds one from the supplied
    widths, which are then both required.
    """

    choice = choice.lower()

    if choice == "custom":
        if exponent_bits is None:
            raise ConfigError("--exp is required for --format=custom")
        if significand_bits is None:
            raise ConfigError("--mant is required for --format=custom")
        return create_format(exponent_bits, significand_bits)

    try:
        return PRESETS[choice]
    except KeyError:
        raise ConfigError("unknown format: {}".format(choice)) from None

def bias(fmt):
    return (1 << (fmt.exponent_bits - 1)) - 1

def min_exponent(fmt):
    """Smallest normal exponent, shared by subnormals and zero."""
    return 1 - bias(fmt)

def max_exponent(fmt):
    return bias(fmt)

def total_bits(fmt):
    return 1 + fmt.exponent_bits + fmt.significand_bits

def describe_layout(fmt):
    return "1 sign | {} exponent | {} significand".format(
        fmt.exponent_bits, fmt.significand_bits)
