"""
Fixed-Width Bit Strings

This module defines the immutable fixed-width values that flow through
the cipher: 64-bit blocks and keys, 32-bit half blocks, 48-bit round keys
and the intermediate widths of the key schedule.

Bit numbering follows FIPS 46-3: bit 1 is the most significant bit.
"""

import re
from typing import Tuple, Union

_HEX_DIGITS = re.compile(r"[0-9A-Fa-f]+")


class FixedWidthBits:
    """
    Immutable bit string of a fixed width, stored as a Python integer.

    Subclasses set WIDTH; the value is checked on construction so an
    instance of a given type always carries exactly WIDTH bits.
    """

    WIDTH = 0

    __slots__ = ('_value',)

    def __init__(self, value: int):
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(
                f"{type(self).__name__} value must be an int, got {type(value).__name__}")
        if not 0 <= value < (1 << self.WIDTH):
            raise ValueError(
                f"{type(self).__name__} value must fit in exactly {self.WIDTH} bits")
        object.__setattr__(self, '_value', value)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __reduce__(self):
        return type(self), (self._value,)

    @property
    def value(self) -> int:
        return self._value

    @classmethod
    def from_bytes(cls, data: bytes):
        """
        Build a value from big-endian bytes.

        Args:
            data: Exactly WIDTH // 8 bytes

        Returns:
            A new instance of this type
        """
        if cls.WIDTH % 8:
            raise ValueError(f"{cls.__name__} is not byte aligned")
        if len(data) != cls.WIDTH // 8:
            raise ValueError(f"{cls.__name__} requires exactly {cls.WIDTH // 8} bytes")
        return cls(int.from_bytes(data, byteorder='big'))

    @classmethod
    def from_hex(cls, text: str):
        """Build a value from exactly WIDTH // 4 hexadecimal digits."""
        digits = text.strip()
        if len(digits) != cls.WIDTH // 4 or not _HEX_DIGITS.fullmatch(digits):
            raise ValueError(f"{cls.__name__} requires exactly {cls.WIDTH // 4} hex digits")
        return cls(int(digits, 16))

    def to_bytes(self) -> bytes:
        if self.WIDTH % 8:
            raise ValueError(f"{type(self).__name__} is not byte aligned")
        return self._value.to_bytes(self.WIDTH // 8, byteorder='big')

    def hex(self) -> str:
        return format(self._value, f"0{(self.WIDTH + 3) // 4}X")

    def bit(self, position: int) -> int:
        """
        Return a single bit.

        Args:
            position: 1-indexed bit position, 1 being the most significant bit

        Returns:
            0 or 1
        """
        if not 1 <= position <= self.WIDTH:
            raise ValueError(f"Bit position must be in [1, {self.WIDTH}]")
        return (self._value >> (self.WIDTH - position)) & 1

    def __xor__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return type(self)(self._value ^ other._value)

    def __int__(self) -> int:
        return self._value

    def __index__(self) -> int:
        return self._value

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._value == other._value

    def __hash__(self):
        return hash((type(self).__name__, self._value))

    def __repr__(self):
        return f"{type(self).__name__}(0x{self.hex()})"


class HalfBlock32(FixedWidthBits):
    """One 32-bit half of a block inside the Feistel rounds."""

    WIDTH = 32
    __slots__ = ()


class Block64(FixedWidthBits):
    """A 64-bit plaintext or ciphertext block."""

    WIDTH = 64
    __slots__ = ()

    def split(self) -> Tuple[HalfBlock32, HalfBlock32]:
        """Split into (left, right) halves at the midpoint."""
        return HalfBlock32(self._value >> 32), HalfBlock32(self._value & 0xFFFFFFFF)

    @classmethod
    def join(cls, left: HalfBlock32, right: HalfBlock32) -> 'Block64':
        if not isinstance(left, HalfBlock32) or not isinstance(right, HalfBlock32):
            raise ValueError("Block64.join requires two HalfBlock32 values")
        return cls((left.value << 32) | right.value)


class MasterKey64(FixedWidthBits):
    """A 64-bit DES key; the low bit of every byte is a parity bit."""

    WIDTH = 64
    __slots__ = ()


class KeyHalf28(FixedWidthBits):
    """One of the C/D halves of the key schedule register."""

    WIDTH = 28
    __slots__ = ()


class Key56(FixedWidthBits):
    """Output of PC-1: the key with its parity bits dropped."""

    WIDTH = 56
    __slots__ = ()

    def split(self) -> Tuple[KeyHalf28, KeyHalf28]:
        return KeyHalf28(self._value >> 28), KeyHalf28(self._value & 0xFFFFFFF)

    @classmethod
    def join(cls, c: KeyHalf28, d: KeyHalf28) -> 'Key56':
        return cls((c.value << 28) | d.value)


class Expanded48(FixedWidthBits):
    """A half block after the E expansion, ready for key mixing."""

    WIDTH = 48
    __slots__ = ()


class RoundKey48(FixedWidthBits):
    """A 48-bit subkey for a single round."""

    WIDTH = 48
    __slots__ = ()


BlockLike = Union[Block64, bytes, int]
KeyLike = Union[MasterKey64, bytes, int]


def coerce(value, cls):
    """
    Convert bytes, an int or an instance of cls into cls.

    Any other fixed-width type is rejected even if its width matches, so a
    RoundKey48 can never be mistaken for an Expanded48.
    """
    if isinstance(value, cls):
        return value
    if isinstance(value, FixedWidthBits):
        raise ValueError(f"Expected {cls.__name__} ({cls.WIDTH} bits), got {type(value).__name__}")
    if isinstance(value, (bytes, bytearray)):
        return cls.from_bytes(bytes(value))
    if isinstance(value, int) and not isinstance(value, bool):
        return cls(value)
    raise TypeError(f"Cannot build {cls.__name__} from {type(value).__name__}")
