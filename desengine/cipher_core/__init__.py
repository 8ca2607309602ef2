"""
Cipher Core Package

This package implements the core of the DES block cipher: the Feistel
round function and the 16-round engine with its initial and final
permutations, for encryption and decryption.
"""

from .feistel import round_function, feistel_round
from .block_cipher import (
    DESBlockCipher, encrypt_block, decrypt_block, encrypt, decrypt, DES_PARAMS,
)

__all__ = ['round_function', 'feistel_round', 'DESBlockCipher', 'encrypt_block',
           'decrypt_block', 'encrypt', 'decrypt', 'DES_PARAMS']
