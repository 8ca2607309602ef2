"""
Generic Bit Permutation

This module provides the single table-driven bit permutation used by every
fixed rearrangement in DES (initial and final permutation, E expansion,
P permutation, PC-1 and PC-2), together with the tables themselves.
"""

from dataclasses import dataclass, field
from typing import Tuple, Union

from ..bits import FixedWidthBits


@dataclass(frozen=True)
class PermutationTable:
    """
    A fixed bit-selection table.

    Entries are 1-indexed positions in the input, 1 being the most
    significant bit. Output bit p (1-indexed) is input bit entries[p - 1],
    so the output width is len(entries). Repeated entries expand the input,
    omitted ones contract it.
    """
    name: str
    input_width: int
    entries: Tuple[int, ...]
    _shifts: Tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if self.input_width <= 0:
            raise ValueError(f"Table {self.name}: input width must be positive")
        if not self.entries:
            raise ValueError(f"Table {self.name}: no entries")
        for position, entry in enumerate(self.entries, start=1):
            if not 1 <= entry <= self.input_width:
                raise ValueError(
                    f"Table {self.name}: entry {entry} at position {position} "
                    f"is outside [1, {self.input_width}]")
        object.__setattr__(self, 'entries', tuple(self.entries))
        # Right-shift that brings each selected input bit down to bit 0
        object.__setattr__(self, '_shifts',
                           tuple(self.input_width - entry for entry in self.entries))

    @property
    def output_width(self) -> int:
        return len(self.entries)

    def is_bijective(self) -> bool:
        return sorted(self.entries) == list(range(1, self.input_width + 1))

    def inverse(self) -> 'PermutationTable':
        """
        Build the inverse table of a bijective permutation.

        Returns:
            A table that undoes this one

        Raises:
            ValueError: If the table expands or drops bits
        """
        if not self.is_bijective():
            raise ValueError(f"Table {self.name} is not a bijection and has no inverse")
        inverse = [0] * self.input_width
        for position, entry in enumerate(self.entries, start=1):
            inverse[entry - 1] = position
        return PermutationTable(f"{self.name}^-1", self.input_width, tuple(inverse))


def permute(bits: Union[FixedWidthBits, int], table: PermutationTable) -> int:
    """
    Apply a permutation table to a bit string.

    Args:
        bits: The input, either a fixed-width value whose width matches
              table.input_width or a plain int that fits in it
        table: The table to apply

    Returns:
        The output bits as an int of table.output_width bits
    """
    if isinstance(bits, FixedWidthBits):
        if bits.WIDTH != table.input_width:
            raise ValueError(
                f"Table {table.name} expects {table.input_width} input bits, "
                f"got {type(bits).__name__} ({bits.WIDTH} bits)")
        value = bits.value
    else:
        value = bits
        if not 0 <= value < (1 << table.input_width):
            raise ValueError(f"Table {table.name} expects {table.input_width} input bits")

    result = 0
    for shift in table._shifts:
        result = (result << 1) | ((value >> shift) & 1)
    return result


# Initial permutation
IP = PermutationTable('IP', 64, (
    58, 50, 42, 34, 26, 18, 10, 2,
    60, 52, 44, 36, 28, 20, 12, 4,
    62, 54, 46, 38, 30, 22, 14, 6,
    64, 56, 48, 40, 32, 24, 16, 8,
    57, 49, 41, 33, 25, 17, 9, 1,
    59, 51, 43, 35, 27, 19, 11, 3,
    61, 53, 45, 37, 29, 21, 13, 5,
    63, 55, 47, 39, 31, 23, 15, 7,
))

# Final permutation, applied to the pre-output block
IP_INVERSE = PermutationTable('IP^-1', 64, (
    40, 8, 48, 16, 56, 24, 64, 32,
    39, 7, 47, 15, 55, 23, 63, 31,
    38, 6, 46, 14, 54, 22, 62, 30,
    37, 5, 45, 13, 53, 21, 61, 29,
    36, 4, 44, 12, 52, 20, 60, 28,
    35, 3, 43, 11, 51, 19, 59, 27,
    34, 2, 42, 10, 50, 18, 58, 26,
    33, 1, 41, 9, 49, 17, 57, 25,
))

# E bit-selection table (32 -> 48)
EXPANSION = PermutationTable('E', 32, (
    32, 1, 2, 3, 4, 5,
    4, 5, 6, 7, 8, 9,
    8, 9, 10, 11, 12, 13,
    12, 13, 14, 15, 16, 17,
    16, 17, 18, 19, 20, 21,
    20, 21, 22, 23, 24, 25,
    24, 25, 26, 27, 28, 29,
    28, 29, 30, 31, 32, 1,
))

# P permutation applied to the S-box output
ROUND_PERMUTATION = PermutationTable('P', 32, (
    16, 7, 20, 21,
    29, 12, 28, 17,
    1, 15, 23, 26,
    5, 18, 31, 10,
    2, 8, 24, 14,
    32, 27, 3, 9,
    19, 13, 30, 6,
    22, 11, 4, 25,
))

# Permuted choice 1: drops the parity bits (64 -> 56)
PC1 = PermutationTable('PC-1', 64, (
    57, 49, 41, 33, 25, 17, 9,
    1, 58, 50, 42, 34, 26, 18,
    10, 2, 59, 51, 43, 35, 27,
    19, 11, 3, 60, 52, 44, 36,
    63, 55, 47, 39, 31, 23, 15,
    7, 62, 54, 46, 38, 30, 22,
    14, 6, 61, 53, 45, 37, 29,
    21, 13, 5, 28, 20, 12, 4,
))

# Permuted choice 2: compresses C||D into a round key (56 -> 48)
PC2 = PermutationTable('PC-2', 56, (
    14, 17, 11, 24, 1, 5,
    3, 28, 15, 6, 21, 10,
    23, 19, 12, 4, 26, 8,
    16, 7, 27, 20, 13, 2,
    41, 52, 31, 37, 47, 55,
    30, 40, 51, 45, 33, 48,
    44, 49, 39, 56, 34, 53,
    46, 42, 50, 36, 29, 32,
))

ALL_TABLES = (IP, IP_INVERSE, EXPANSION, ROUND_PERMUTATION, PC1, PC2)
