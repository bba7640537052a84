import random
import unittest

import sympy

from pyflop.coding.bits import bits_to_hex, decode, encode, hex_to_bits
from pyflop.coding.quantizer import HALF_EVEN, TOWARD_ZERO
from pyflop.coding.quantizer import dequantize, pow2, quantize
from pyflop.formats import FP16, create_format, max_exponent, total_bits
from pyflop.values import NORMAL, SPECIAL_CLASSES, ZERO, finite

# Small formats that can be enumerated completely
SMALL_FORMATS = [create_format(e, m) for e, m in
                 [(2, 1), (2, 3), (3, 2), (4, 3), (5, 2), (3, 5)]]


def all_bit_patterns(fmt):
    width = total_bits(fmt)
    return ["{:0{}b}".format(i, width) for i in range(1 << width)]


def positive_finite_values(fmt):
    """Return all positive finite values of a format in increasing order."""

    values = []
    for bits in all_bit_patterns(fmt):
        soft = decode(bits, fmt)
        if bits[0] == "0" and soft.cls not in SPECIAL_CLASSES:
            values.append((dequantize(soft, fmt), soft))
    return sorted(values, key=lambda value: value[0])


def ulp(soft, fmt):
    return pow2(soft.exponent - fmt.significand_bits)


class TestRoundTrip(unittest.TestCase):
    """Encoding and decoding are exact inverses."""

    def test_decoded_patterns(self):
        for fmt in SMALL_FORMATS:
            for bits in all_bit_patterns(fmt):
                soft = decode(bits, fmt)
                self.assertEqual(decode(encode(soft, fmt), fmt), soft, bits)

    def test_quantized_values(self):
        rng = random.Random(754)
        for fmt in SMALL_FORMATS + [FP16]:
            limit = pow2(max_exponent(fmt) + 2)
            for i in range(200):
                ratio = sympy.Rational(rng.randint(-10 ** 6, 10 ** 6),
                                       rng.randint(1, 10 ** 6))
                scale = rng.choice([1, sympy.Rational(1, 2 ** 20)])
                value = finite(ratio * limit * scale / 10 ** 6)
                for mode in (HALF_EVEN, TOWARD_ZERO):
                    soft = quantize(value, fmt, mode)
                    self.assertEqual(decode(encode(soft, fmt), fmt), soft)

    def test_representable_values_are_fixed_points(self):
        for fmt in SMALL_FORMATS:
            for value, soft in positive_finite_values(fmt):
                for mode in (HALF_EVEN, TOWARD_ZERO):
                    self.assertEqual(quantize(finite(value), fmt, mode), soft)

    def test_hex_matches_bits(self):
        for fmt in SMALL_FORMATS:
            width = total_bits(fmt)
            for bits in all_bit_patterns(fmt):
                hex = bits_to_hex(bits)
                self.assertEqual(decode(hex_to_bits(hex, width), fmt),
                                 decode(bits, fmt))


class TestRounding(unittest.TestCase):

    def test_midpoints_round_to_even(self):
        for fmt in SMALL_FORMATS:
            values = positive_finite_values(fmt)
            for (low, low_soft), (high, high_soft) in zip(values, values[1:]):
                mid = (low + high) / 2
                soft = quantize(finite(mid), fmt, HALF_EVEN)
                self.assertIn(soft, (low_soft, high_soft))
                self.assertEqual(soft.significand % 2, 0, str(mid))

                self.assertEqual(quantize(finite(mid), fmt, TOWARD_ZERO),
                                 low_soft)

    def test_error_bound(self):
        rng = random.Random(1985)
        for fmt in SMALL_FORMATS:
            values = positive_finite_values(fmt)
            largest = values[-1][0]
            for i in range(300):
                value = largest * sympy.Rational(rng.randint(0, 10 ** 6),
                                                 10 ** 6)
                value = value * rng.choice([1, sympy.Rational(1, 64)])

                soft = quantize(finite(value), fmt, HALF_EVEN)
                stored = dequantize(soft, fmt)
                self.assertTrue(abs(stored - value) <= ulp(soft, fmt) / 2,
                                str(value))

                soft = quantize(finite(value), fmt, TOWARD_ZERO)
                stored = dequantize(soft, fmt)
                self.assertTrue(stored <= value)
                self.assertTrue(value - stored < ulp(soft, fmt))

    def test_nearest_neighbour(self):
        for fmt in SMALL_FORMATS:
            values = [value for value, soft in positive_finite_values(fmt)]
            for low, high in zip(values, values[1:]):
                quarter = (high - low) / 4
                below = quantize(finite(low + quarter), fmt, HALF_EVEN)
                above = quantize(finite(high - quarter), fmt, HALF_EVEN)
                self.assertEqual(dequantize(below, fmt), low)
                self.assertEqual(dequantize(above, fmt), high)

    def test_sign_symmetry(self):
        for fmt in SMALL_FORMATS:
            for value, soft in positive_finite_values(fmt):
                if soft.cls == ZERO:
                    continue
                negative = quantize(finite(-value), fmt, HALF_EVEN)
                self.assertEqual(negative, soft._replace(sign=True))

    def test_smallest_normal_boundary(self):
        for fmt in SMALL_FORMATS:
            values = positive_finite_values(fmt)
            normals = [soft for value, soft in values if soft.cls == NORMAL]
            self.assertEqual(normals[0].significand, 0)


if __name__ == "__main__":
    unittest.main(verbosity=2)
