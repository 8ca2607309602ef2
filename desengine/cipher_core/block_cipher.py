"""
Block Cipher Implementation

This module provides the DES block cipher engine: the initial permutation,
sixteen Feistel rounds, the final swap and the inverse initial permutation,
run forward for encryption and with the round keys reversed for decryption.
"""

import logging
from typing import Sequence, Union

from ..bits import Block64, BlockLike, KeyLike, RoundKey48, coerce
from ..key_schedule.des_key_schedule import NUM_ROUNDS, RoundKeys, derive_round_keys
from ..permutation.bit_permutation import IP, IP_INVERSE, permute
from .feistel import feistel_round

logger = logging.getLogger(__name__)

DES_PARAMS = {
    'block_size': 64,       # Bits per block
    'key_size': 8,          # Master key size in bytes, parity included
    'num_rounds': NUM_ROUNDS,
}

RoundKeysLike = Union[RoundKeys, Sequence[RoundKey48]]


def _as_round_keys(round_keys: RoundKeysLike) -> RoundKeys:
    if isinstance(round_keys, RoundKeys):
        return round_keys
    return RoundKeys(round_keys)


def _run(block: Block64, round_keys: Sequence[RoundKey48]) -> Block64:
    """
    Run the permutation and Feistel structure with the keys in the given order.

    Args:
        block: The input block
        round_keys: The 16 round keys in the order they are applied

    Returns:
        The output block
    """
    left, right = Block64(permute(block, IP)).split()

    for round_key in round_keys:
        left, right = feistel_round(left, right, round_key)

    # No swap after the last round: the pre-output is R16 || L16
    preoutput = Block64.join(right, left)
    return Block64(permute(preoutput, IP_INVERSE))


def encrypt_block(block: BlockLike, round_keys: RoundKeysLike) -> Block64:
    """
    Encrypt a single 64-bit block.

    Args:
        block: The plaintext block as a Block64, 8 bytes, or a 64-bit int
        round_keys: The schedule K1..K16 from derive_round_keys

    Returns:
        The ciphertext block

    Raises:
        ValueError: If the block is not 64 bits or there are not 16 round keys
    """
    block = coerce(block, Block64)
    schedule = _as_round_keys(round_keys)
    return _run(block, schedule)


def decrypt_block(block: BlockLike, round_keys: RoundKeysLike) -> Block64:
    """
    Decrypt a single 64-bit block.

    The schedule is the same one used for encryption; it is consumed in
    reverse order (K16 first).

    Args:
        block: The ciphertext block as a Block64, 8 bytes, or a 64-bit int
        round_keys: The schedule K1..K16 from derive_round_keys

    Returns:
        The plaintext block

    Raises:
        ValueError: If the block is not 64 bits or there are not 16 round keys
    """
    block = coerce(block, Block64)
    schedule = _as_round_keys(round_keys)
    return _run(block, schedule.reversed_order())


class DESBlockCipher:
    """
    DES bound to a single key.

    The round keys are derived once when the cipher is created and are only
    read afterwards, so one instance may be shared between threads.
    """

    def __init__(self, key: KeyLike):
        """
        Initialize the cipher and derive its key schedule.

        Args:
            key: The master key (8 bytes, a 64-bit int, or a MasterKey64)
        """
        self.block_size = DES_PARAMS['block_size'] // 8
        self.key_size = DES_PARAMS['key_size']
        self.num_rounds = DES_PARAMS['num_rounds']

        if isinstance(key, (bytes, bytearray)) and len(key) != self.key_size:
            raise ValueError(f"Key must be exactly {self.key_size} bytes")

        self.round_keys = derive_round_keys(key)
        logger.debug("Initialized DES cipher with %d round keys", self.num_rounds)

    def encrypt_block(self, plaintext: bytes) -> bytes:
        """
        Encrypt a single block of plaintext.

        Args:
            plaintext: The plaintext block (must be 8 bytes)

        Returns:
            The encrypted ciphertext block
        """
        if len(plaintext) != self.block_size:
            raise ValueError(f"Plaintext must be exactly {self.block_size} bytes")
        return encrypt_block(Block64.from_bytes(plaintext), self.round_keys).to_bytes()

    def decrypt_block(self, ciphertext: bytes) -> bytes:
        """
        Decrypt a single block of ciphertext.

        Args:
            ciphertext: The ciphertext block (must be 8 bytes)

        Returns:
            The decrypted plaintext block
        """
        if len(ciphertext) != self.block_size:
            raise ValueError(f"Ciphertext must be exactly {self.block_size} bytes")
        return decrypt_block(Block64.from_bytes(ciphertext), self.round_keys).to_bytes()


def encrypt(plaintext: bytes, key: bytes) -> bytes:
    """
    Convenience function to encrypt a single block.

    Args:
        plaintext: The 8-byte plaintext block
        key: The 8-byte master key

    Returns:
        The encrypted ciphertext block
    """
    return DESBlockCipher(key).encrypt_block(plaintext)


def decrypt(ciphertext: bytes, key: bytes) -> bytes:
    """
    Convenience function to decrypt a single block.

    Args:
        ciphertext: The 8-byte ciphertext block
        key: The 8-byte master key

    Returns:
        The decrypted plaintext block
    """
    return DESBlockCipher(key).decrypt_block(ciphertext)


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)

    key = bytes.fromhex('133457799BBCDFF1')
    plaintext = bytes.fromhex('0123456789ABCDEF')

    ciphertext = encrypt(plaintext, key)
    print(f"Key:        {key.hex().upper()}")
    print(f"Plaintext:  {plaintext.hex().upper()}")
    print(f"Ciphertext: {ciphertext.hex().upper()}")

    assert ciphertext == bytes.fromhex('85E813540F0AB405')
    assert decrypt(ciphertext, key) == plaintext
    print("Known-answer test passed!")
