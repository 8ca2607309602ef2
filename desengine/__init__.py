"""
desengine - DES Block Cipher Engine

This library implements the Data Encryption Standard (FIPS 46-3) as a
single-block primitive: a 64-bit Feistel cipher with a 56-bit effective
key and 16 rounds.

Key Features:
- One generic, table-driven bit permutation for IP, IP^-1, E, P, PC-1, PC-2
- Key schedule computed once per key and shared read-only
- Explicit round keys on every call, so the engine is reentrant
- Fixed-width value types (Block64, HalfBlock32, RoundKey48, MasterKey64)
- S-box integrity checks and differential/linear analysis
"""

from .bits import Block64, HalfBlock32, MasterKey64, RoundKey48
from .key_schedule import RoundKeys, derive_round_keys
from .cipher_core import DESBlockCipher, encrypt_block, decrypt_block, encrypt, decrypt

__version__ = '0.1.0'

__all__ = ['Block64', 'HalfBlock32', 'MasterKey64', 'RoundKey48', 'RoundKeys',
           'derive_round_keys', 'DESBlockCipher', 'encrypt_block', 'decrypt_block',
           'encrypt', 'decrypt']
