"""
S-box Package

This package holds the eight DES substitution boxes. Integrity checks and
quality measurements live in the numpy-backed ``desengine.sbox.analysis``
module, which the cipher itself never imports.
"""

from .des_sboxes import SBOXES, sbox_lookup, substitute

__all__ = ['SBOXES', 'sbox_lookup', 'substitute']
