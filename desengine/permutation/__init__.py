"""
Bit Permutation Package

This package implements the generic table-driven bit permutation and holds
the fixed DES permutation tables (IP, IP^-1, E, P, PC-1, PC-2).
"""

from .bit_permutation import (
    PermutationTable, permute,
    IP, IP_INVERSE, EXPANSION, ROUND_PERMUTATION, PC1, PC2, ALL_TABLES,
)

__all__ = [
    'PermutationTable', 'permute',
    'IP', 'IP_INVERSE', 'EXPANSION', 'ROUND_PERMUTATION', 'PC1', 'PC2', 'ALL_TABLES',
]
