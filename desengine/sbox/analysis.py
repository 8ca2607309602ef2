"""
S-box Integrity and Quality Analysis

This module checks the fixed DES S-boxes for the structural properties the
standard relies on (every row a permutation of 0..15) and measures their
resistance to differential and linear cryptanalysis. It also provides an
avalanche measurement for a whole block encryption function.
"""

import logging
from typing import Callable, Dict, Iterable, Sequence

import numpy as np

from .des_sboxes import SBOXES, NUM_SBOXES, sbox_lookup

logger = logging.getLogger(__name__)

SBOX_INPUTS = 64
SBOX_OUTPUTS = 16


def is_row_permutation(row: Sequence[int]) -> bool:
    """
    Check that an S-box row holds every value 0..15 exactly once.

    Args:
        row: A single S-box row

    Returns:
        True if the row is a permutation of 0..15
    """
    return len(row) == SBOX_OUTPUTS and sorted(row) == list(range(SBOX_OUTPUTS))


def verify_sboxes(sboxes=SBOXES) -> None:
    """
    Verify the shape of the S-box tables and that every row is a permutation.

    Raises:
        ValueError: Naming the first box/row that is malformed
    """
    if len(sboxes) != NUM_SBOXES:
        raise ValueError(f"Expected {NUM_SBOXES} S-boxes, got {len(sboxes)}")
    for box_number, box in enumerate(sboxes, start=1):
        if len(box) != 4:
            raise ValueError(f"S{box_number} must have 4 rows, has {len(box)}")
        for row_number, row in enumerate(box):
            if not is_row_permutation(row):
                raise ValueError(f"S{box_number} row {row_number} is not a permutation of 0..15")


def _outputs(index: int) -> np.ndarray:
    """The S-box as a flat array indexed by its 6-bit input."""
    return np.array([sbox_lookup(index, x) for x in range(SBOX_INPUTS)], dtype=np.int32)


def difference_distribution_table(index: int) -> np.ndarray:
    """
    Build the difference distribution table of one S-box.

    Entry [dx, dy] counts the inputs x for which S(x) ^ S(x ^ dx) == dy.

    Args:
        index: S-box number, 0 for S1

    Returns:
        A 64 x 16 integer array
    """
    outputs = _outputs(index)
    ddt = np.zeros((SBOX_INPUTS, SBOX_OUTPUTS), dtype=np.int32)
    inputs = np.arange(SBOX_INPUTS)
    for dx in range(SBOX_INPUTS):
        dy = outputs ^ outputs[inputs ^ dx]
        ddt[dx] = np.bincount(dy, minlength=SBOX_OUTPUTS)
    return ddt


def differential_uniformity(index: int) -> int:
    """
    Largest DDT entry over non-zero input differences.

    Lower values indicate better resistance to differential cryptanalysis.
    """
    return int(np.max(difference_distribution_table(index)[1:, :]))


def _parity(values: np.ndarray) -> np.ndarray:
    parity = np.zeros_like(values)
    v = values.copy()
    while np.any(v):
        parity ^= v & 1
        v >>= 1
    return parity


def linear_approximation_table(index: int) -> np.ndarray:
    """
    Build the linear approximation table of one S-box.

    Entry [a, b] is the number of inputs x where the parity of x & a equals
    the parity of S(x) & b, minus 32 (so 0 means no bias).

    Args:
        index: S-box number, 0 for S1

    Returns:
        A 64 x 16 integer array
    """
    outputs = _outputs(index)
    inputs = np.arange(SBOX_INPUTS, dtype=np.int32)
    lat = np.zeros((SBOX_INPUTS, SBOX_OUTPUTS), dtype=np.int32)
    for input_mask in range(SBOX_INPUTS):
        input_parity = _parity(inputs & input_mask)
        for output_mask in range(SBOX_OUTPUTS):
            output_parity = _parity(outputs & output_mask)
            matches = int(np.count_nonzero(input_parity == output_parity))
            lat[input_mask, output_mask] = matches - SBOX_INPUTS // 2
    return lat


def linear_bias(index: int) -> float:
    """
    Largest absolute LAT entry over non-zero masks, normalised to [0, 0.5].

    Lower values indicate better resistance to linear cryptanalysis.
    """
    lat = linear_approximation_table(index)
    return float(np.max(np.abs(lat[1:, 1:]))) / SBOX_INPUTS


def is_balanced(index: int) -> bool:
    """Each 4-bit output appears exactly four times over the 64 inputs."""
    counts = np.bincount(_outputs(index), minlength=SBOX_OUTPUTS)
    return bool(np.all(counts == SBOX_INPUTS // SBOX_OUTPUTS))


def evaluate_sbox(index: int) -> Dict[str, float]:
    """
    Evaluate one S-box for cryptographic properties.

    Args:
        index: S-box number, 0 for S1

    Returns:
        A dictionary of scores (lower is better for differential and linear)
    """
    return {
        'differential': differential_uniformity(index),
        'linear': linear_bias(index),
        'balanced': is_balanced(index),
    }


def avalanche_ratio(encrypt: Callable[[int], int],
                    blocks: Iterable[int],
                    block_size: int = 64) -> float:
    """
    Measure the avalanche effect of a block encryption function.

    For every block and every input bit, the bit is flipped and the number
    of differing output bits is counted.

    Args:
        encrypt: Function mapping an integer block to an integer block
        blocks: Sample of input blocks
        block_size: Width of the blocks in bits

    Returns:
        Mean fraction of output bits changed by a single-bit input change
    """
    changed = []
    for block in blocks:
        reference = encrypt(block)
        for bit in range(block_size):
            flipped = encrypt(block ^ (1 << bit))
            changed.append(bin(reference ^ flipped).count('1'))
    if not changed:
        raise ValueError("At least one block is needed to measure avalanche")
    return float(np.mean(changed)) / block_size


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    verify_sboxes()
    logger.info("All S-box rows are permutations of 0..15")

    for i in range(NUM_SBOXES):
        metrics = evaluate_sbox(i)
        print(f"S{i + 1}: differential uniformity {metrics['differential']}, "
              f"linear bias {metrics['linear']:.4f}, balanced {metrics['balanced']}")
