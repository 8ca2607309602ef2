"""
Feistel Round

The DES f-function (E expansion, key mixing, S-box substitution,
P permutation) and the Feistel round built on it.
"""

from typing import Tuple

from ..bits import Expanded48, HalfBlock32, RoundKey48
from ..permutation.bit_permutation import EXPANSION, ROUND_PERMUTATION, permute
from ..sbox.des_sboxes import substitute


def round_function(right: HalfBlock32, round_key: RoundKey48) -> HalfBlock32:
    """
    Compute f(R, K) for one round.

    Args:
        right: The current right half
        round_key: The round's 48-bit subkey

    Returns:
        The 32-bit output of the f-function
    """
    if not isinstance(right, HalfBlock32):
        raise ValueError(f"Round function expects a HalfBlock32, got {type(right).__name__}")
    if not isinstance(round_key, RoundKey48):
        raise ValueError(f"Round function expects a RoundKey48, got {type(round_key).__name__}")

    expanded = Expanded48(permute(right, EXPANSION))
    mixed = expanded.value ^ round_key.value
    return HalfBlock32(permute(substitute(mixed), ROUND_PERMUTATION))


def feistel_round(left: HalfBlock32,
                  right: HalfBlock32,
                  round_key: RoundKey48) -> Tuple[HalfBlock32, HalfBlock32]:
    """
    Apply one full Feistel round.

    Returns:
        The new (left, right) pair, (R, L ^ f(R, K))
    """
    return right, left ^ round_function(right, round_key)
