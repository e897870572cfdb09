""" Goal identifier generation.

    An identifier is the action type name, a dot, and eight random
    hexadecimal characters, for example ``Fibonacci.3fa09c1e``. The suffix
    comes from a non-cryptographic source and no attempt is made to detect
    collisions: with 32 random bits the odds of two outstanding goals on one
    client sharing an identifier are negligible, but not zero.
"""

import random

hex_digits = '0123456789abcdef'
suffix_length = 8


def generate(prefix, source=random):
    """ Return a new goal identifier starting with *prefix*. The *source*
        is anything with a :func:`random.choice` method; the module-level
        generator is used by default.
    """

    suffix = ''.join(source.choice(hex_digits) for _ in range(suffix_length))
    return prefix + '.' + suffix


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
