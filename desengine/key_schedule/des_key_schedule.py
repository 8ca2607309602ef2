"""
DES Key Schedule

This module derives the sixteen 48-bit round keys from a 64-bit master key
using PC-1, cumulative left rotations of the 28-bit C and D halves, and
PC-2, as defined in FIPS 46-3.
"""

import logging
from typing import Iterator, Sequence, Tuple

from ..bits import KeyHalf28, Key56, KeyLike, MasterKey64, RoundKey48, coerce
from ..permutation.bit_permutation import PC1, PC2, permute

logger = logging.getLogger(__name__)

NUM_ROUNDS = 16

# Left rotation applied to C and D before each round (rounds 1..16)
SHIFT_SCHEDULE = (1, 1, 2, 2, 2, 2, 2, 2, 1, 2, 2, 2, 2, 2, 2, 1)


def rotate_left(value: int, shift: int, size: int = 28) -> int:
    """
    Rotate a value left by the specified number of bits.

    Args:
        value: The value to rotate
        shift: The number of bits to rotate by; shifts of size or more wrap around
        size: The bit size of the value

    Returns:
        The rotated value

    Raises:
        ValueError: If the shift is negative or the size is not positive
    """
    if shift < 0:
        raise ValueError("Rotation shift must not be negative")
    if size <= 0:
        raise ValueError("Rotation size must be positive")
    shift %= size
    return ((value << shift) | (value >> (size - shift))) & ((1 << size) - 1)


class RoundKeys(Sequence[RoundKey48]):
    """
    Immutable, ordered schedule of the 16 round keys for one master key.

    Indexing is 0-based: round_keys[0] is K1.
    """

    __slots__ = ('_keys',)

    def __init__(self, keys):
        keys = tuple(keys)
        if len(keys) != NUM_ROUNDS:
            raise ValueError(f"A key schedule must hold exactly {NUM_ROUNDS} round keys, got {len(keys)}")
        for key in keys:
            if not isinstance(key, RoundKey48):
                raise ValueError(f"Round keys must be RoundKey48 values, got {type(key).__name__}")
        object.__setattr__(self, '_keys', keys)

    def __setattr__(self, name, value):
        raise AttributeError("RoundKeys is immutable")

    def __reduce__(self):
        return RoundKeys, (self._keys,)

    def __getitem__(self, index):
        return self._keys[index]

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[RoundKey48]:
        return iter(self._keys)

    def reversed_order(self) -> 'RoundKeys':
        """The same keys in the order K16..K1, as used for decryption."""
        return RoundKeys(reversed(self._keys))

    def __eq__(self, other):
        if not isinstance(other, RoundKeys):
            return NotImplemented
        return self._keys == other._keys

    def __hash__(self):
        return hash(self._keys)

    def __repr__(self):
        return f"RoundKeys({', '.join(k.hex() for k in self._keys)})"


def key_halves(key: KeyLike) -> Tuple[KeyHalf28, KeyHalf28]:
    """
    Apply PC-1 to a master key and split the result into C0 and D0.

    Args:
        key: The 64-bit master key

    Returns:
        A tuple of (C0, D0)
    """
    master = coerce(key, MasterKey64)
    return Key56(permute(master, PC1)).split()


def derive_round_keys(key: KeyLike) -> RoundKeys:
    """
    Expand a master key into the 16 DES round keys.

    Args:
        key: The master key as a MasterKey64, 8 bytes, or a 64-bit int

    Returns:
        The round keys K1..K16

    Raises:
        ValueError: If the key is not exactly 64 bits
    """
    c, d = key_halves(key)
    c_bits, d_bits = c.value, d.value

    round_keys = []
    for shift in SHIFT_SCHEDULE:
        c_bits = rotate_left(c_bits, shift)
        d_bits = rotate_left(d_bits, shift)
        cd = Key56.join(KeyHalf28(c_bits), KeyHalf28(d_bits))
        round_keys.append(RoundKey48(permute(cd, PC2)))

    logger.debug("Derived %d round keys", len(round_keys))
    return RoundKeys(round_keys)


def has_odd_parity(key: KeyLike) -> bool:
    """
    Check the parity bits of a key.

    Each byte of a DES key is meant to hold an odd number of set bits,
    with the least significant bit acting as the parity bit.
    """
    data = coerce(key, MasterKey64).to_bytes()
    return all(bin(byte).count('1') % 2 == 1 for byte in data)


def with_odd_parity(key: KeyLike) -> MasterKey64:
    """
    Return a copy of the key with every parity bit set for odd parity.

    The 56 effective key bits are left untouched, so the derived round
    keys are the same as for the original key.
    """
    data = coerce(key, MasterKey64).to_bytes()
    fixed = bytearray()
    for byte in data:
        high = byte & 0xFE
        fixed.append(high | (bin(high).count('1') % 2 == 0))
    return MasterKey64.from_bytes(bytes(fixed))


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)

    schedule = derive_round_keys(MasterKey64.from_hex('133457799BBCDFF1'))
    for number, round_key in enumerate(schedule, start=1):
        print(f"K{number:<2} = {round_key.hex()}")

    assert sum(SHIFT_SCHEDULE) == 28
    print("Key schedule test passed!")
