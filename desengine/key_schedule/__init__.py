"""
Key Schedule Package

This package implements the DES key schedule that transforms a 64-bit
master key into the 16 round keys used by the block cipher.
"""

from .des_key_schedule import (
    RoundKeys, derive_round_keys, rotate_left, has_odd_parity, with_odd_parity,
    SHIFT_SCHEDULE, NUM_ROUNDS,
)

__all__ = ['RoundKeys', 'derive_round_keys', 'rotate_left', 'has_odd_parity',
           'with_odd_parity', 'SHIFT_SCHEDULE', 'NUM_ROUNDS']
